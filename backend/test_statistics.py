"""Tests for statistics aggregation."""
from datetime import date, datetime, timedelta
from types import SimpleNamespace

import pytest
from sqlalchemy.exc import SQLAlchemyError

from ecosphere.services.activity import ActivityService
from ecosphere.services.statistics import (
    StatisticsService,
    StreakCounters,
    UserStatistics,
    activities_in_period,
    category_breakdown,
    compute_statistics,
    daily_statistics,
    derive_streaks,
    footprint_for_day,
    window_boundaries,
)


def make_activity(when, footprint, category="transport"):
    return SimpleNamespace(date=when, carbon_footprint=footprint, category=category)


def test_empty_history_gives_zero_statistics(now):
    stats = compute_statistics([], StreakCounters(), [], 0, now=now)

    assert stats == UserStatistics()
    assert stats.average_daily_footprint == 0


def test_weekly_window_and_average(now):
    activities = [
        make_activity(now, 10),
        make_activity(now - timedelta(days=8), 5),
    ]

    stats = compute_statistics(activities, StreakCounters(), [], 0, now=now)

    assert stats.weekly_footprint == pytest.approx(10)
    assert stats.total_carbon_footprint == pytest.approx(15)
    assert stats.activities_count == 2
    assert stats.average_daily_footprint == pytest.approx(7.5)


def test_monthly_and_yearly_windows(now):
    activities = [
        make_activity(datetime(2024, 3, 10), 1),    # week, month, year
        make_activity(datetime(2024, 2, 15), 2),    # month boundary, inclusive
        make_activity(datetime(2024, 2, 14, 23, 59), 4),  # year only
        make_activity(datetime(2023, 3, 15), 8),    # year boundary, inclusive
        make_activity(datetime(2023, 3, 14), 16),   # total only
    ]

    stats = compute_statistics(activities, StreakCounters(), [], 0, now=now)

    assert stats.weekly_footprint == pytest.approx(1)
    assert stats.monthly_footprint == pytest.approx(3)
    assert stats.yearly_footprint == pytest.approx(15)
    assert stats.total_carbon_footprint == pytest.approx(31)


def test_week_boundary_is_midnight_seven_days_before_today(now):
    activities = [
        make_activity(datetime(2024, 3, 8, 0, 0), 3),
        make_activity(datetime(2024, 3, 7, 23, 59), 5),
    ]

    stats = compute_statistics(activities, StreakCounters(), [], 0, now=now)

    assert stats.weekly_footprint == pytest.approx(3)


def test_unordered_input(now):
    ordered = [make_activity(now - timedelta(days=d), d + 1) for d in range(40)]
    shuffled = ordered[::3] + ordered[1::3] + ordered[2::3]

    assert compute_statistics(ordered, StreakCounters(), [], 0, now=now) == \
        compute_statistics(shuffled, StreakCounters(), [], 0, now=now)


def test_challenges_badges_and_streaks_pass_through(now):
    challenges = [
        SimpleNamespace(is_completed=True),
        SimpleNamespace(is_completed=False),
        SimpleNamespace(is_completed=True),
    ]
    prior = StreakCounters(best_streak=12, current_streak=4)

    stats = compute_statistics([make_activity(now, 1)], prior, challenges, 5, now=now)

    assert stats.challenges_completed == 2
    assert stats.badges_unlocked == 5
    assert stats.best_streak == 12
    assert stats.current_streak == 4


class TestWindowBoundaries:

    def test_regular_day(self, now):
        bounds = window_boundaries(now)

        assert bounds.today == datetime(2024, 3, 15)
        assert bounds.week_ago == datetime(2024, 3, 8)
        assert bounds.month_ago == datetime(2024, 2, 15)
        assert bounds.year_ago == datetime(2023, 3, 15)

    def test_month_overflow_rolls_forward(self):
        assert window_boundaries(datetime(2023, 3, 31)).month_ago == datetime(2023, 3, 3)
        assert window_boundaries(datetime(2024, 3, 31)).month_ago == datetime(2024, 3, 2)

    def test_january_goes_to_previous_year(self):
        assert window_boundaries(datetime(2024, 1, 20, 8)).month_ago == datetime(2023, 12, 20)

    def test_leap_day_year_ago(self):
        assert window_boundaries(datetime(2024, 2, 29, 12)).year_ago == datetime(2023, 3, 1)


class TestDeriveStreaks:

    def test_no_activities(self):
        assert derive_streaks([], date(2024, 3, 15)) == StreakCounters(0, 0)

    def test_run_ending_today(self):
        dates = [datetime(2024, 3, d, 9) for d in (13, 14, 15)] + [datetime(2024, 3, 15, 18)]
        assert derive_streaks(dates, date(2024, 3, 15)) == StreakCounters(3, 3)

    def test_run_ending_yesterday_still_counts(self):
        assert derive_streaks([date(2024, 3, 14)], date(2024, 3, 15)) == StreakCounters(1, 1)

    def test_broken_run(self):
        dates = [date(2024, 3, d) for d in (1, 2, 3, 4, 10, 11)]
        assert derive_streaks(dates, date(2024, 3, 15)) == StreakCounters(4, 0)

    def test_future_days_ignored(self):
        dates = [date(2024, 3, 15), date(2024, 3, 16), date(2024, 3, 17)]
        assert derive_streaks(dates, date(2024, 3, 15)) == StreakCounters(1, 1)


def test_category_breakdown():
    activities = [
        make_activity(datetime(2024, 3, 1), 2, "transport"),
        make_activity(datetime(2024, 3, 2), 3, "food"),
        make_activity(datetime(2024, 3, 3), 4, "transport"),
    ]

    assert category_breakdown(activities) == {"transport": 6, "food": 3}


def test_daily_statistics(now):
    activities = [
        make_activity(datetime(2024, 3, 15, 8), 2, "transport"),
        make_activity(datetime(2024, 3, 15, 20), 1.5, "food"),
        make_activity(datetime(2024, 3, 14, 23), 9, "food"),
    ]

    daily = daily_statistics(activities, now.date())

    assert daily.total_footprint == pytest.approx(3.5)
    assert len(daily.activities) == 2
    assert daily.by_category == {"transport": 2, "food": 1.5}
    assert footprint_for_day(activities, date(2024, 3, 14)) == pytest.approx(9)


def test_activities_in_period_is_inclusive():
    start, end = datetime(2024, 3, 1), datetime(2024, 3, 31)
    activities = [
        make_activity(start, 1),
        make_activity(end, 1),
        make_activity(end + timedelta(seconds=1), 1),
    ]

    assert len(activities_in_period(activities, start, end)) == 2


class TestStatisticsService:

    def test_refresh_derives_and_persists_streaks(self, store, now):
        service = ActivityService(store)
        for days_ago in (2, 1, 0):
            service.log_activity("transport", 10, "car", date=now - timedelta(days=days_ago), now=now)

        persisted = store.load_statistics()
        assert persisted.current_streak == 3
        assert persisted.best_streak == 3
        assert persisted.activities_count == 3
        assert persisted.total_carbon_footprint == pytest.approx(5.76)

    def test_refresh_keeps_higher_prior_best_streak(self, store, now):
        store.save_statistics(UserStatistics(best_streak=30, current_streak=2))

        stats = StatisticsService(store).refresh(now=now)

        assert stats.best_streak == 30
        assert stats.current_streak == 0

    def test_current_falls_back_to_persisted_snapshot(self, now):
        class BrokenStore:
            def load_activities(self):
                raise SQLAlchemyError("database is locked")

            def rollback(self):
                pass

            def load_statistics(self):
                return UserStatistics(total_carbon_footprint=42.0, activities_count=3)

        stats = StatisticsService(BrokenStore()).current(now=now)

        assert stats.total_carbon_footprint == 42.0
        assert stats.activities_count == 3

    def test_export_data(self, store, now):
        ActivityService(store).log_activity("food", 0.5, "meat", activity_id="a1", date=now, now=now)

        exported = StatisticsService(store).export_data(now=now)

        assert exported["exportDate"] == now.isoformat()
        assert [a["id"] for a in exported["activities"]] == ["a1"]
        assert exported["activities"][0]["carbonFootprint"] == pytest.approx(13.5)
        assert exported["statistics"]["activitiesCount"] == 1
        assert exported["challenges"] == []
        assert exported["badges"] == []
