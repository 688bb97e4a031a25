"""SQLite-backed store for activities, challenges, badges and statistics."""
import logging
from datetime import datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from ecosphere.exceptions import DuplicateActivityError
from ecosphere.models import Activity, Badge, Challenge, StatisticsRecord
from ecosphere.services.statistics import UserStatistics

logger = logging.getLogger(__name__)

_STATISTICS_FIELDS = (
    "total_carbon_footprint",
    "average_daily_footprint",
    "weekly_footprint",
    "monthly_footprint",
    "yearly_footprint",
    "activities_count",
    "challenges_completed",
    "badges_unlocked",
    "best_streak",
    "current_streak",
)


class CarbonStore:
    """
    Persistence handle passed explicitly to the services.

    Wraps a SQLAlchemy session; every write commits immediately.
    """

    def __init__(self, db: Session):
        self.db = db

    def rollback(self) -> None:
        """Discard a failed transaction so the session can be reused."""
        self.db.rollback()

    # Activities

    def load_activities(self) -> List[Activity]:
        """Return every stored activity, oldest first."""
        return self.db.query(Activity).order_by(Activity.date.asc()).all()

    def load_activities_between(
        self,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
        category: Optional[str] = None,
    ) -> List[Activity]:
        """
        Return activities filtered by date range and category, newest first.

        Args:
            start: Only activities on or after this time
            end: Only activities on or before this time
            category: Only activities of this category
        """
        query = self.db.query(Activity)

        if category:
            query = query.filter(Activity.category == category)

        if start:
            query = query.filter(Activity.date >= start)

        if end:
            query = query.filter(Activity.date <= end)

        return query.order_by(Activity.date.desc()).all()

    def get_activity(self, activity_id: str) -> Optional[Activity]:
        return self.db.query(Activity).filter(Activity.id == activity_id).first()

    def append_activity(self, activity: Activity) -> Activity:
        """
        Store a new activity.

        Raises:
            DuplicateActivityError: If an activity with the same id exists
        """
        if self.get_activity(activity.id) is not None:
            raise DuplicateActivityError(activity.id)

        self.db.add(activity)
        self.db.commit()
        return activity

    def delete_activity(self, activity_id: str) -> bool:
        """Delete an activity by id. Returns False if it did not exist."""
        activity = self.get_activity(activity_id)
        if activity is None:
            return False

        self.db.delete(activity)
        self.db.commit()
        return True

    # Challenges

    def load_challenges(self) -> List[Challenge]:
        return self.db.query(Challenge).order_by(Challenge.start_date.asc()).all()

    def get_challenge(self, challenge_id: str) -> Optional[Challenge]:
        return self.db.query(Challenge).filter(Challenge.id == challenge_id).first()

    def save_challenge(self, challenge: Challenge) -> Challenge:
        """Insert or update a challenge."""
        challenge = self.db.merge(challenge)
        self.db.commit()
        return challenge

    # Badges

    def load_badges(self) -> List[Badge]:
        return self.db.query(Badge).order_by(Badge.unlocked_date.asc()).all()

    def load_badge_count(self) -> int:
        return self.db.query(Badge).count()

    def save_badge(self, badge: Badge) -> Badge:
        badge = self.db.merge(badge)
        self.db.commit()
        return badge

    # Statistics

    def load_statistics(self) -> UserStatistics:
        """Return the last persisted statistics, or all zeros if none."""
        record = self.db.query(StatisticsRecord).first()
        if record is None:
            return UserStatistics()

        return UserStatistics(**{name: getattr(record, name) for name in _STATISTICS_FIELDS})

    def save_statistics(self, stats: UserStatistics) -> None:
        record = self.db.query(StatisticsRecord).first()
        if record is None:
            record = StatisticsRecord()
            self.db.add(record)

        for name in _STATISTICS_FIELDS:
            setattr(record, name, getattr(stats, name))

        self.db.commit()

    def clear_all(self) -> None:
        """Delete every stored record."""
        for model in (Activity, Challenge, Badge, StatisticsRecord):
            self.db.query(model).delete()

        self.db.commit()
        logger.info("✓ All stored data cleared")
