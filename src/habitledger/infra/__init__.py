"""Infrastructure: database wiring and store implementations."""
