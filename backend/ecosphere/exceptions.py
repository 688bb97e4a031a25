"""Exceptions raised by the activity, challenge and persistence layers."""


class EcoSphereError(Exception):
    """Base class for all EcoSphere errors."""
    pass


class ValidationError(EcoSphereError):
    """Raised when user input for an activity or challenge is invalid."""
    pass


class DuplicateActivityError(EcoSphereError):
    """Raised when an activity id is already stored."""

    def __init__(self, activity_id: str):
        super().__init__(f"Activity '{activity_id}' already exists")
        self.activity_id = activity_id


class ActivityNotFoundError(EcoSphereError):
    """Raised when an activity id is not stored."""

    def __init__(self, activity_id: str):
        super().__init__(f"Activity '{activity_id}' not found")
        self.activity_id = activity_id


class ChallengeNotFoundError(EcoSphereError):
    """Raised when a challenge id is not stored."""

    def __init__(self, challenge_id: str):
        super().__init__(f"Challenge '{challenge_id}' not found")
        self.challenge_id = challenge_id
