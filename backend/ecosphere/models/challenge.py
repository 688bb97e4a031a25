"""Challenge model for reduction goals."""
from sqlalchemy import Column, String, Float, DateTime, Text, Boolean
from sqlalchemy.ext.hybrid import hybrid_property
from sqlalchemy.orm import validates

from ecosphere.database import Base


class Challenge(Base):
    """
    Challenge model representing a reduction goal over a time window.

    `is_completed` is stored alongside `progress` and `target` but is
    read-only: it is recomputed whenever either of them is assigned.
    """
    __tablename__ = "challenges"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    category = Column(String, nullable=False)
    target = Column(Float, nullable=False)
    unit = Column(String, nullable=False)
    progress = Column(Float, nullable=False, default=0.0)
    _is_completed = Column("is_completed", Boolean, nullable=False, default=False)
    start_date = Column(DateTime, nullable=False)
    end_date = Column(DateTime, nullable=False)
    reward = Column(String, nullable=True)
    carbon_savings = Column(Float, nullable=True)  # kg CO2e

    @hybrid_property
    def is_completed(self):
        return self._is_completed

    @validates("progress")
    def _validate_progress(self, key, progress):
        progress = max(float(progress), 0.0)
        if self.target is not None:
            self._is_completed = progress >= self.target
        return progress

    @validates("target")
    def _validate_target(self, key, target):
        target = max(float(target), 0.0)
        self._is_completed = (self.progress or 0.0) >= target
        return target

    def update_progress(self, amount: float) -> None:
        """Add `amount` to the progress (never below zero)."""
        self.progress = (self.progress or 0.0) + amount

    def to_dict(self) -> dict:
        """Serialize to a JSON-friendly dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "category": self.category,
            "target": self.target,
            "unit": self.unit,
            "progress": self.progress,
            "isCompleted": self.is_completed,
            "startDate": self.start_date.isoformat(),
            "endDate": self.end_date.isoformat(),
            "reward": self.reward,
            "carbonSavings": self.carbon_savings,
        }

    def __repr__(self):
        return f"<Challenge(id={self.id}, progress={self.progress}/{self.target}, completed={self.is_completed})>"
