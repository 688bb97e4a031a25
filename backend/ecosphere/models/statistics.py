"""StatisticsRecord model for the last persisted statistics snapshot."""
from datetime import datetime
from sqlalchemy import Column, Integer, Float, DateTime

from ecosphere.database import Base


class StatisticsRecord(Base):
    """
    Single-row snapshot of the most recently computed user statistics.

    The streak counters here are the prior values fed back into the next
    statistics computation.
    """
    __tablename__ = "statistics"

    id = Column(Integer, primary_key=True)
    total_carbon_footprint = Column(Float, nullable=False, default=0.0)
    average_daily_footprint = Column(Float, nullable=False, default=0.0)
    weekly_footprint = Column(Float, nullable=False, default=0.0)
    monthly_footprint = Column(Float, nullable=False, default=0.0)
    yearly_footprint = Column(Float, nullable=False, default=0.0)
    activities_count = Column(Integer, nullable=False, default=0)
    challenges_completed = Column(Integer, nullable=False, default=0)
    badges_unlocked = Column(Integer, nullable=False, default=0)
    best_streak = Column(Integer, nullable=False, default=0)
    current_streak = Column(Integer, nullable=False, default=0)

    # Timestamps
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now, nullable=False)

    def __repr__(self):
        return f"<StatisticsRecord(activities={self.activities_count}, total={self.total_carbon_footprint})>"
