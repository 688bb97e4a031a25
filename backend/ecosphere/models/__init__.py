"""Database models for EcoSphere."""
from ecosphere.models.activity import Activity
from ecosphere.models.challenge import Challenge
from ecosphere.models.badge import Badge
from ecosphere.models.statistics import StatisticsRecord

__all__ = ["Activity", "Challenge", "Badge", "StatisticsRecord"]
