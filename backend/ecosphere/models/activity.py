"""Activity model for storing logged activities."""
from datetime import datetime
from sqlalchemy import Column, String, Float, DateTime, Text

from ecosphere.database import Base


class Activity(Base):
    """
    Activity model representing a single logged activity.

    `carbon_footprint` is computed once when the activity is logged and is
    never recomputed, so old records keep the factors in force at the time.
    """
    __tablename__ = "activities"

    id = Column(String, primary_key=True)
    category = Column(String, nullable=False, index=True)  # transport, energy, food, waste, other
    type = Column(String, nullable=True)  # Sub-type within the category (car, meat, ...)
    value = Column(Float, nullable=False)
    unit = Column(String, nullable=False)
    date = Column(DateTime, nullable=False, index=True)
    carbon_footprint = Column(Float, nullable=False)  # kg CO2e
    description = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime, default=datetime.now, nullable=False)

    def to_dict(self) -> dict:
        """Serialize to a JSON-friendly dictionary."""
        return {
            "id": self.id,
            "category": self.category,
            "type": self.type,
            "value": self.value,
            "unit": self.unit,
            "date": self.date.isoformat(),
            "carbonFootprint": self.carbon_footprint,
            "description": self.description,
            "notes": self.notes,
        }

    def __repr__(self):
        return f"<Activity(id={self.id}, category={self.category}, type={self.type}, footprint={self.carbon_footprint})>"
