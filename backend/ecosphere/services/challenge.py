"""Challenge and badge service."""
import logging
import math
import uuid
from datetime import datetime
from typing import List, Optional

from ecosphere.categories import DEFAULT_UNITS, parse_category
from ecosphere.exceptions import ChallengeNotFoundError, ValidationError
from ecosphere.models import Badge, Challenge

logger = logging.getLogger(__name__)


class ChallengeService:
    """Service for managing challenges and badges through a CarbonStore."""

    def __init__(self, store):
        self.store = store

    @staticmethod
    def _parse_number(value, name: str) -> float:
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ValidationError(f"{name} must be a number, got {value!r}")

        if not math.isfinite(number):
            raise ValidationError(f"{name} must be a finite number")

        return number

    def create_challenge(
        self,
        title: str,
        category,
        target: float,
        start_date: datetime,
        end_date: datetime,
        description: str = "",
        unit: Optional[str] = None,
        reward: Optional[str] = None,
        carbon_savings: Optional[float] = None,
        challenge_id: Optional[str] = None,
    ) -> Challenge:
        """
        Create and store a new challenge with zero progress.

        Raises:
            ValidationError: If the category is unknown, the target is not
                positive or the window ends before it starts
        """
        parsed_category = parse_category(category)
        if parsed_category is None:
            raise ValidationError(f"Unknown challenge category: {category!r}")
        target = self._parse_number(target, "Challenge target")
        if target <= 0:
            raise ValidationError("Challenge target must be a positive number")
        if end_date <= start_date:
            raise ValidationError("Challenge must end after it starts")

        challenge = Challenge(
            id=challenge_id or uuid.uuid4().hex,
            title=title,
            description=description,
            category=parsed_category.value,
            target=target,
            unit=unit or DEFAULT_UNITS[parsed_category],
            progress=0.0,
            start_date=start_date,
            end_date=end_date,
            reward=reward,
            carbon_savings=carbon_savings,
        )

        challenge = self.store.save_challenge(challenge)
        logger.info("✓ Created challenge %s (%s)", challenge.id, challenge.title)
        return challenge

    def record_progress(self, challenge_id: str, amount: float) -> Challenge:
        """
        Add progress to a challenge, completing it once the target is reached.

        Raises:
            ValidationError: If `amount` is not a finite number
            ChallengeNotFoundError: If no challenge has this id
        """
        amount = self._parse_number(amount, "Progress")
        challenge = self.store.get_challenge(challenge_id)
        if challenge is None:
            raise ChallengeNotFoundError(challenge_id)

        was_completed = challenge.is_completed
        challenge.update_progress(amount)
        challenge = self.store.save_challenge(challenge)

        if challenge.is_completed and not was_completed:
            logger.info("✓ Challenge %s completed", challenge.id)

        return challenge

    def active_challenges(self, now: Optional[datetime] = None) -> List[Challenge]:
        """Challenges not yet completed whose window contains `now`."""
        now = now or datetime.now()
        return [
            c for c in self.store.load_challenges()
            if not c.is_completed and c.start_date <= now <= c.end_date
        ]

    def completed_challenges(self) -> List[Challenge]:
        return [c for c in self.store.load_challenges() if c.is_completed]

    @staticmethod
    def progress_percent(challenge: Challenge) -> float:
        """Progress as a percentage of the target, capped at 100."""
        if not challenge.target:
            return 100.0
        return min(challenge.progress / challenge.target * 100, 100.0)

    def unlock_badge(
        self,
        title: str,
        requirement: str,
        description: str = "",
        icon: Optional[str] = None,
        badge_id: Optional[str] = None,
        unlocked_date: Optional[datetime] = None,
    ) -> Badge:
        """Store a newly unlocked badge."""
        badge = Badge(
            id=badge_id or uuid.uuid4().hex,
            title=title,
            description=description,
            icon=icon,
            requirement=requirement,
            unlocked_date=unlocked_date or datetime.now(),
        )

        badge = self.store.save_badge(badge)
        logger.info("✓ Badge unlocked: %s", badge.title)
        return badge
