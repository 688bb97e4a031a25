"""Badge model for unlocked achievements."""
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text

from ecosphere.database import Base


class Badge(Base):
    """Badge model representing an unlocked achievement."""
    __tablename__ = "badges"

    id = Column(String, primary_key=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=False, default="")
    icon = Column(String, nullable=True)
    requirement = Column(String, nullable=False, default="")
    unlocked_date = Column(DateTime, default=datetime.now, nullable=True)

    def to_dict(self) -> dict:
        """Serialize to a JSON-friendly dictionary."""
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "icon": self.icon,
            "requirement": self.requirement,
            "unlockedDate": self.unlocked_date.isoformat() if self.unlocked_date else None,
        }

    def __repr__(self):
        return f"<Badge(id={self.id}, title='{self.title}')>"
