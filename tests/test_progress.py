"""Tests for daily/weekly progress and per-habit stats."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from habitledger.dates import date_key
from habitledger.errors import ValidationError
from habitledger.models import HabitDayStatus
from habitledger.services.ledger import CompletionLedger
from habitledger.services.progress import (
    daily_progress,
    habit_stats,
    heatmap,
    overall_progress,
    recent_weeks,
    weekly_progress,
)

TODAY = date(2025, 1, 8)  # Wednesday


class TestDailyProgress:
    def test_empty_habits_rate_is_zero(self, empty_ledger):
        result = daily_progress("2025-01-08", [], empty_ledger)
        assert result.completion_rate == 0
        assert result.habits == ()

    def test_rate_is_share_of_completed_habits(self, habit_factory, empty_ledger):
        habits = [habit_factory("A"), habit_factory("B"), habit_factory("C"), habit_factory("D")]
        ledger = empty_ledger.upsert_toggle(habits[0].id, "2025-01-08")
        ledger = ledger.upsert_toggle(habits[1].id, "2025-01-08")
        ledger = ledger.upsert_toggle(habits[2].id, "2025-01-07")

        result = daily_progress(TODAY, habits, ledger)

        assert result.date == "2025-01-08"
        assert result.completion_rate == 50.0
        assert [s.completed for s in result.habits] == [True, True, False, False]

    def test_multi_count_status_reports_done_separately(self, habit_factory, empty_ledger):
        water = habit_factory("Drink Water", target_count=8)
        ledger = empty_ledger.upsert_count(water.id, "2025-01-08", 3)

        status = daily_progress("2025-01-08", [water], ledger).habits[0]

        assert status.completed is True
        assert status.count == 3
        assert status.is_done is False
        assert status.progress == pytest.approx(37.5)

    def test_status_progress_capped(self):
        status = HabitDayStatus(habit_id="h", completed=True, count=12, target_count=8)
        assert status.is_done is True
        assert status.progress == 100.0


class TestWeeklyProgress:
    def test_seven_days_from_given_start(self, habit_factory, empty_ledger):
        habit = habit_factory()
        result = weekly_progress(date(2025, 1, 8), [habit], empty_ledger)

        assert result.week_start_date == "2025-01-08"
        assert [d.date for d in result.days][-1] == "2025-01-14"
        assert len(result.days) == 7

    def test_rate_over_habits_times_seven(self, habit_factory, empty_ledger):
        habits = [habit_factory("A"), habit_factory("B")]
        ledger = empty_ledger
        start = date(2025, 1, 6)
        for offset in range(7):
            ledger = ledger.upsert_toggle(habits[0].id, date_key(start + timedelta(days=offset)))
        ledger = ledger.upsert_toggle(habits[1].id, "2025-01-06")
        # outside the week
        ledger = ledger.upsert_toggle(habits[1].id, "2025-01-13")

        result = weekly_progress(start, habits, ledger)

        assert result.total_habits == 2
        assert result.completed_habits == 8
        assert result.completion_rate == pytest.approx(8 / 14 * 100)

    def test_empty_habits_rate_is_zero(self, empty_ledger):
        assert weekly_progress("2025-01-06", [], empty_ledger).completion_rate == 0

    @pytest.mark.parametrize("density", [0, 1, 2, 3])
    def test_rate_stays_within_bounds(self, habit_factory, empty_ledger, density):
        habits = [habit_factory("A"), habit_factory("B"), habit_factory("C")]
        ledger = empty_ledger
        # Entries spread across a wider range than the week, some toggled off.
        for offset in range(-10, 20):
            for index, habit in enumerate(habits):
                if (offset + index) % 4 < density:
                    ledger = ledger.upsert_toggle(habit.id, date_key(TODAY + timedelta(days=offset)))
                if offset % 5 == 0:
                    ledger = ledger.upsert_count(habit.id, date_key(TODAY + timedelta(days=offset)), 0)

        result = weekly_progress(TODAY, habits, ledger)
        assert 0 <= result.completion_rate <= 100

    def test_recent_weeks_are_labelled_oldest_first(self, habit_factory, empty_ledger):
        habit = habit_factory()
        ledger = empty_ledger.upsert_toggle(habit.id, "2025-01-07")

        weeks = recent_weeks([habit], ledger, weeks=3, today=TODAY)

        assert [w.week_start_date for w in weeks] == ["2024-12-23", "2024-12-30", "2025-01-06"]
        assert [w.label for w in weeks] == ["2 weeks ago", "Last week", "This week"]
        assert weeks[-1].completed_habits == 1


class TestHeatmap:
    def test_only_active_habits_count(self, habit_factory, empty_ledger):
        active = habit_factory("Active")
        paused = habit_factory("Paused", is_active=False)
        ledger = empty_ledger.upsert_toggle(active.id, "2025-01-08")
        ledger = ledger.upsert_toggle(paused.id, "2025-01-08")

        cells = heatmap([active, paused], ledger, days=3, today=TODAY)

        assert [c.date for c in cells] == ["2025-01-06", "2025-01-07", "2025-01-08"]
        assert [c.completion_rate for c in cells] == [0, 0, 100.0]

    def test_no_active_habits_is_zero(self, habit_factory, empty_ledger):
        paused = habit_factory(is_active=False)
        cells = heatmap([paused], empty_ledger.upsert_toggle(paused.id, "2025-01-08"), days=1, today=TODAY)
        assert cells[0].completion_rate == 0


class TestHabitStats:
    def test_no_entries_scenario(self, habit_factory, empty_ledger):
        water = habit_factory("Drink Water", target_count=8)
        stats = habit_stats(water, empty_ledger, today=TODAY)

        assert stats.completion_rate == 0
        assert stats.streak.current_streak == 0
        assert stats.total_completions == 0
        assert stats.average_per_week == 0

    def test_completion_rate_over_trailing_window(self, habit_factory, empty_ledger):
        habit = habit_factory()
        ledger = empty_ledger
        # 15 completed days inside the 30-day window (today included)
        for offset in range(15):
            ledger = ledger.upsert_toggle(habit.id, date_key(TODAY - timedelta(days=offset * 2)))
        # day 30 back is outside the window
        ledger = ledger.upsert_toggle(habit.id, date_key(TODAY - timedelta(days=30)))

        stats = habit_stats(habit, ledger, today=TODAY)
        assert stats.completion_rate == pytest.approx(50.0)

    def test_window_days_parameter(self, habit_factory, empty_ledger):
        habit = habit_factory()
        ledger = empty_ledger
        for offset in range(7):
            ledger = ledger.upsert_toggle(habit.id, date_key(TODAY - timedelta(days=offset)))

        assert habit_stats(habit, ledger, 7, today=TODAY).completion_rate == 100.0
        assert habit_stats(habit, ledger, 14, today=TODAY).completion_rate == 50.0

    def test_average_per_week_counts_uncompleted_entries(self, habit_factory, empty_ledger):
        habit = habit_factory()
        ledger = empty_ledger
        for offset in range(12):
            ledger = ledger.upsert_toggle(habit.id, date_key(TODAY - timedelta(days=offset * 7)))
        # toggled off again: still an entry in the window
        ledger = ledger.upsert_toggle(habit.id, date_key(TODAY))
        # outside the 84-day window
        ledger = ledger.upsert_toggle(habit.id, date_key(TODAY - timedelta(days=84)))

        stats = habit_stats(habit, ledger, today=TODAY)
        assert stats.average_per_week == pytest.approx(1.0)

    def test_total_completions_sums_counts(self, habit_factory, empty_ledger):
        water = habit_factory("Drink Water", target_count=8)
        ledger = empty_ledger.upsert_count(water.id, "2025-01-07", 8)
        ledger = ledger.upsert_count(water.id, "2025-01-08", 3)

        stats = habit_stats(water, ledger, today=TODAY)
        assert stats.total_completions == 11
        assert stats.streak.current_streak == 2

    def test_future_entries_are_outside_window(self, habit_factory, empty_ledger):
        habit = habit_factory()
        ledger = empty_ledger.upsert_toggle(habit.id, "2025-01-20")
        assert habit_stats(habit, ledger, today=TODAY).completion_rate == 0

    def test_stats_do_not_mutate_inputs(self, habit_factory, empty_ledger):
        habit = habit_factory()
        ledger = empty_ledger.upsert_toggle(habit.id, "2025-01-08")
        before = ledger.entries()
        habit_stats(habit, ledger, today=TODAY)
        weekly_progress("2025-01-06", [habit], ledger)
        assert ledger.entries() == before
        assert isinstance(ledger, CompletionLedger)

    def test_zero_average_window_reports_zero(self, habit_factory, empty_ledger):
        habit = habit_factory()
        ledger = empty_ledger.upsert_toggle(habit.id, "2025-01-08")
        stats = habit_stats(habit, ledger, today=TODAY, average_window_days=0)
        assert stats.average_per_week == 0.0
        assert stats.completion_rate == pytest.approx(100 / 30)


class TestOverallProgress:
    def test_rate_over_active_habits_times_days(self, habit_factory, empty_ledger):
        read, run = habit_factory("Read"), habit_factory("Run")
        ledger = empty_ledger
        for offset in range(7):
            ledger = ledger.upsert_toggle(read.id, date_key(TODAY - timedelta(days=offset)))
        ledger = ledger.upsert_toggle(run.id, "2025-01-08")
        ledger = ledger.upsert_toggle(run.id, "2025-01-07")

        summary = overall_progress([read, run], ledger, 7, today=TODAY)

        assert (summary.start_date, summary.end_date) == ("2025-01-02", "2025-01-08")
        assert (summary.completed, summary.possible) == (9, 14)
        assert summary.completion_rate == pytest.approx(9 / 14 * 100)
        assert [(r.habit_id, r.completed) for r in summary.habits] == [(read.id, 7), (run.id, 2)]
        assert summary.habits[0].completion_rate == 100.0

    def test_ignores_inactive_habits_and_entries_outside_range(self, habit_factory, empty_ledger):
        active = habit_factory("Active")
        paused = habit_factory("Paused", is_active=False)
        ledger = empty_ledger.upsert_toggle(paused.id, "2025-01-08")
        ledger = ledger.upsert_toggle(active.id, "2025-01-01")  # eight days back
        ledger = ledger.upsert_toggle(active.id, "2025-01-09")  # tomorrow
        ledger = ledger.upsert_toggle(active.id, "2025-01-05")
        ledger = ledger.upsert_toggle(active.id, "2025-01-06")
        ledger = ledger.upsert_toggle(active.id, "2025-01-06")  # toggled back off

        summary = overall_progress([active, paused], ledger, 7, today=TODAY)

        assert summary.active_habits == 1
        assert (summary.completed, summary.possible) == (1, 7)

    def test_no_active_habits_is_zero(self, habit_factory, empty_ledger):
        summary = overall_progress([habit_factory(is_active=False)], empty_ledger, 30, today=TODAY)
        assert summary.completion_rate == 0
        assert summary.possible == 0

    @pytest.mark.parametrize("days", [0, -7, True])
    def test_rejects_non_positive_range(self, habit_factory, empty_ledger, days):
        with pytest.raises(ValidationError):
            overall_progress([habit_factory()], empty_ledger, days, today=TODAY)
