"""Activity service for logging and querying activities."""
import logging
import math
import uuid
from datetime import date, datetime, time
from typing import List, Optional

from ecosphere.categories import (
    ActivityCategory,
    DEFAULT_SUBTYPES,
    DEFAULT_UNITS,
    SUBTYPES,
    parse_category,
    parse_subtype,
)
from ecosphere.exceptions import ActivityNotFoundError, ValidationError
from ecosphere.models import Activity
from ecosphere.services.calculator import calculate_carbon_footprint
from ecosphere.services.statistics import StatisticsService

logger = logging.getLogger(__name__)


class ActivityService:
    """Service for logging activities through a CarbonStore."""

    def __init__(self, store):
        self.store = store
        self.statistics = StatisticsService(store)

    @staticmethod
    def _parse_value(value) -> float:
        try:
            number = float(value)
        except (TypeError, ValueError):
            raise ValidationError(f"Invalid value: {value!r}")

        if not math.isfinite(number) or number <= 0:
            raise ValidationError("Value must be a positive number")

        return number

    @staticmethod
    def preview_footprint(category, value, subtype: Optional[str] = None) -> float:
        """
        Estimate the footprint while the user is still typing.

        Empty or non-numeric input estimates to 0; an unknown category is
        treated as `other`.
        """
        try:
            number = float(value)
        except (TypeError, ValueError):
            number = 0.0

        if not math.isfinite(number):
            number = 0.0

        return calculate_carbon_footprint(
            parse_category(category) or ActivityCategory.OTHER, number, subtype
        )

    def log_activity(
        self,
        category,
        value,
        subtype: Optional[str] = None,
        unit: Optional[str] = None,
        description: Optional[str] = None,
        notes: Optional[str] = None,
        date: Optional[datetime] = None,
        activity_id: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Activity:
        """
        Validate, store and account for a new activity.

        Args:
            category: Activity category (member or string value)
            value: Quantity in the category's unit, must be > 0
            subtype: Sub-type within the category (defaults per category)
            unit: Unit label (defaults per category)
            description: Optional free text
            notes: Optional free text
            date: When the activity happened (defaults to now)
            activity_id: Caller-provided id (defaults to a random UUID)
            now: Reference time for the statistics refresh

        Returns:
            The stored Activity

        Raises:
            ValidationError: If the category, value or sub-type is invalid
            DuplicateActivityError: If `activity_id` is already stored
        """
        parsed_category = parse_category(category)
        if parsed_category is None:
            raise ValidationError(f"Unknown activity category: {category!r}")

        number = self._parse_value(value)

        resolved_subtype = None
        if parsed_category in SUBTYPES:
            if subtype:
                resolved_subtype = parse_subtype(parsed_category, subtype)
                if resolved_subtype is None:
                    raise ValidationError(
                        f"Unknown {parsed_category.value} type: {subtype!r}"
                    )
            else:
                resolved_subtype = DEFAULT_SUBTYPES[parsed_category]

        now = now or datetime.now()
        activity = Activity(
            id=activity_id or uuid.uuid4().hex,
            category=parsed_category.value,
            type=resolved_subtype.value if resolved_subtype else None,
            value=number,
            unit=unit or DEFAULT_UNITS[parsed_category],
            date=date or now,
            carbon_footprint=calculate_carbon_footprint(parsed_category, number, resolved_subtype),
            description=description,
            notes=notes,
        )

        self.store.append_activity(activity)
        logger.info(
            "✓ Logged %s activity %s: %s %s = %.3f kg CO2e",
            activity.category, activity.id, activity.value, activity.unit, activity.carbon_footprint,
        )

        self.statistics.refresh(now=now)
        return activity

    def delete_activity(self, activity_id: str, now: Optional[datetime] = None) -> None:
        """
        Delete an activity and refresh the statistics.

        Raises:
            ActivityNotFoundError: If no activity has this id
        """
        if not self.store.delete_activity(activity_id):
            raise ActivityNotFoundError(activity_id)

        logger.info("✓ Deleted activity %s", activity_id)
        self.statistics.refresh(now=now)

    def get_activities(
        self,
        category: Optional[str] = None,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
    ) -> List[Activity]:
        """
        Get activities with optional filters, newest first.

        Args:
            category: Filter by category ("all" or None for every category)
            start_date: Filter activities on or after this time
            end_date: Filter activities on or before this time
        """
        if category == "all":
            category = None
        elif category is not None:
            parsed = parse_category(category)
            if parsed is None:
                raise ValidationError(f"Unknown activity category: {category!r}")
            category = parsed.value

        return self.store.load_activities_between(start=start_date, end=end_date, category=category)

    def activities_for_day(self, day: date) -> List[Activity]:
        """Activities logged on calendar day `day`, newest first."""
        return self.store.load_activities_between(
            start=datetime.combine(day, time.min),
            end=datetime.combine(day, time.max),
        )
