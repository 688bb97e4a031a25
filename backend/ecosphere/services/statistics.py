"""
Statistics aggregation over logged activities.

`compute_statistics` is pure: given the activity history, the prior streak
counters, the challenges, the badge count and a reference time it always
returns the same snapshot. `StatisticsService` wraps it with store reads,
streak derivation and persistence.
"""
import logging
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date, datetime, time, timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


@dataclass
class StreakCounters:
    """Streak counters carried between statistics computations."""
    best_streak: int = 0
    current_streak: int = 0


@dataclass
class UserStatistics:
    """Aggregate view of a user's activity history."""
    total_carbon_footprint: float = 0.0
    average_daily_footprint: float = 0.0
    weekly_footprint: float = 0.0
    monthly_footprint: float = 0.0
    yearly_footprint: float = 0.0
    activities_count: int = 0
    challenges_completed: int = 0
    badges_unlocked: int = 0
    best_streak: int = 0
    current_streak: int = 0

    def to_dict(self) -> dict:
        """Serialize with the camelCase keys used in exports."""
        return {
            "totalCarbonFootprint": self.total_carbon_footprint,
            "averageDailyFootprint": self.average_daily_footprint,
            "weeklyFootprint": self.weekly_footprint,
            "monthlyFootprint": self.monthly_footprint,
            "yearlyFootprint": self.yearly_footprint,
            "activitiesCount": self.activities_count,
            "challengesCompleted": self.challenges_completed,
            "badgesUnlocked": self.badges_unlocked,
            "bestStreak": self.best_streak,
            "currentStreak": self.current_streak,
        }


@dataclass
class DailyStatistics:
    """Footprint of a single calendar day."""
    date: date
    total_footprint: float = 0.0
    activities: list = field(default_factory=list)
    by_category: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class WindowBoundaries:
    """Start of each rolling window, all at local midnight."""
    today: datetime
    week_ago: datetime
    month_ago: datetime
    year_ago: datetime


def _months_before(day: date, months: int) -> date:
    # Day overflow rolls into the following month (31 March -> 3 March)
    year, month_index = divmod(day.year * 12 + day.month - 1 - months, 12)
    return date(year, month_index + 1, 1) + timedelta(days=day.day - 1)


def window_boundaries(now: datetime) -> WindowBoundaries:
    """
    Compute the rolling window start boundaries for a reference time.

    Args:
        now: Reference instant

    Returns:
        WindowBoundaries for today, the last 7 days, the last month and
        the last year
    """
    today = now.date()

    def midnight(day: date) -> datetime:
        return datetime.combine(day, time.min, tzinfo=now.tzinfo)

    return WindowBoundaries(
        today=midnight(today),
        week_ago=midnight(today - timedelta(days=7)),
        month_ago=midnight(_months_before(today, 1)),
        year_ago=midnight(_months_before(today, 12)),
    )


def compute_statistics(
    activities: Sequence,
    prior_stats,
    challenges: Iterable,
    badge_count: int,
    now: Optional[datetime] = None,
) -> UserStatistics:
    """
    Aggregate activities into a statistics snapshot.

    Args:
        activities: Activity records (anything with `date` and `carbon_footprint`)
        prior_stats: Previously persisted counters (`best_streak`, `current_streak`)
        challenges: Challenge records (anything with `is_completed`)
        badge_count: Number of unlocked badges
        now: Reference time for the rolling windows (defaults to local now)

    Returns:
        UserStatistics snapshot; streak counters are passed through from
        `prior_stats` unchanged
    """
    bounds = window_boundaries(now or datetime.now())

    total = weekly = monthly = yearly = 0.0
    count = 0
    for activity in activities:
        footprint = activity.carbon_footprint
        total += footprint
        count += 1
        if activity.date >= bounds.week_ago:
            weekly += footprint
        if activity.date >= bounds.month_ago:
            monthly += footprint
        if activity.date >= bounds.year_ago:
            yearly += footprint

    return UserStatistics(
        total_carbon_footprint=total,
        average_daily_footprint=total / count if count else 0.0,
        weekly_footprint=weekly,
        monthly_footprint=monthly,
        yearly_footprint=yearly,
        activities_count=count,
        challenges_completed=sum(1 for c in challenges if c.is_completed),
        badges_unlocked=badge_count,
        best_streak=prior_stats.best_streak,
        current_streak=prior_stats.current_streak,
    )


def _as_day(value) -> date:
    return value.date() if isinstance(value, datetime) else value


def derive_streaks(activity_dates: Iterable, today: date) -> StreakCounters:
    """
    Derive streaks of consecutive days with at least one logged activity.

    The current streak is the run ending today, or ending yesterday when
    nothing has been logged yet today. Days after `today` are ignored.

    Args:
        activity_dates: Dates or datetimes of logged activities
        today: Reference day

    Returns:
        StreakCounters with the longest run and the current run
    """
    days = sorted({_as_day(d) for d in activity_dates if _as_day(d) <= today})

    best = run = 0
    previous = None
    for day in days:
        run = run + 1 if previous is not None and day - previous == timedelta(days=1) else 1
        best = max(best, run)
        previous = day

    active = set(days)
    cursor = today if today in active else today - timedelta(days=1)
    current = 0
    while cursor in active:
        current += 1
        cursor -= timedelta(days=1)

    return StreakCounters(best_streak=best, current_streak=current)


def activities_in_period(activities: Iterable, start: datetime, end: datetime) -> List:
    """Return activities dated between `start` and `end`, both inclusive."""
    return [a for a in activities if start <= a.date <= end]


def footprint_for_day(activities: Iterable, day: date) -> float:
    """Total footprint of the activities logged on calendar day `day`."""
    return sum(a.carbon_footprint for a in activities if _as_day(a.date) == day)


def category_breakdown(activities: Iterable) -> Dict[str, float]:
    """Total footprint per activity category."""
    breakdown: Dict[str, float] = defaultdict(float)
    for activity in activities:
        category = getattr(activity.category, "value", activity.category)
        breakdown[category] += activity.carbon_footprint
    return dict(breakdown)


def daily_statistics(activities: Iterable, day: date) -> DailyStatistics:
    """Build the DailyStatistics for calendar day `day`."""
    todays = [a for a in activities if _as_day(a.date) == day]
    return DailyStatistics(
        date=day,
        total_footprint=sum(a.carbon_footprint for a in todays),
        activities=todays,
        by_category=category_breakdown(todays),
    )


class StatisticsService:
    """Service computing and persisting statistics through a CarbonStore."""

    def __init__(self, store):
        self.store = store

    def _snapshot(self) -> Tuple[list, list, int, UserStatistics]:
        return (
            self.store.load_activities(),
            self.store.load_challenges(),
            self.store.load_badge_count(),
            self.store.load_statistics(),
        )

    def current(self, now: Optional[datetime] = None) -> UserStatistics:
        """
        Compute statistics from the stored history.

        Falls back to the last persisted snapshot (or zeros) when the store
        cannot be read.
        """
        try:
            activities, challenges, badge_count, prior = self._snapshot()
        except SQLAlchemyError as e:
            logger.error("Error reading statistics inputs: %s", e)
            self.store.rollback()
            try:
                return self.store.load_statistics()
            except SQLAlchemyError:
                logger.exception("Error reading persisted statistics")
                return UserStatistics()

        return compute_statistics(activities, prior, challenges, badge_count, now=now)

    def refresh(self, now: Optional[datetime] = None) -> UserStatistics:
        """
        Recompute statistics with freshly derived streaks and persist them.

        Returns:
            The persisted UserStatistics
        """
        now = now or datetime.now()
        activities, challenges, badge_count, prior = self._snapshot()

        derived = derive_streaks((a.date for a in activities), now.date())
        counters = StreakCounters(
            best_streak=max(prior.best_streak, derived.best_streak),
            current_streak=derived.current_streak,
        )

        stats = compute_statistics(activities, counters, challenges, badge_count, now=now)
        self.store.save_statistics(stats)
        logger.info(
            "✓ Statistics refreshed: %d activities, %.2f kg CO2e total, streak %d",
            stats.activities_count, stats.total_carbon_footprint, stats.current_streak,
        )
        return stats

    def export_data(self, now: Optional[datetime] = None) -> dict:
        """Export all stored data as a JSON-serialisable dictionary."""
        now = now or datetime.now()
        return {
            "activities": [a.to_dict() for a in self.store.load_activities()],
            "challenges": [c.to_dict() for c in self.store.load_challenges()],
            "badges": [b.to_dict() for b in self.store.load_badges()],
            "statistics": self.current(now=now).to_dict(),
            "exportDate": now.isoformat(),
        }
