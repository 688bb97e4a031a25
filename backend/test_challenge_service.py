"""Tests for challenges and badges."""
from datetime import datetime, timedelta

import pytest

from ecosphere.exceptions import ChallengeNotFoundError, ValidationError
from ecosphere.models import Challenge
from ecosphere.services.challenge import ChallengeService
from ecosphere.services.statistics import StatisticsService


@pytest.fixture
def service(store):
    return ChallengeService(store)


@pytest.fixture
def challenge(service, now):
    return service.create_challenge(
        title="Car-free week",
        category="transport",
        target=50,
        start_date=now - timedelta(days=1),
        end_date=now + timedelta(days=6),
        carbon_savings=9.6,
        challenge_id="car-free",
    )


def test_create_challenge(challenge):
    assert challenge.progress == 0
    assert challenge.is_completed is False
    assert challenge.unit == "km"


@pytest.mark.parametrize("target", [0, -5, float("nan"), float("inf"), "abc", None])
def test_rejects_invalid_target(service, now, target):
    with pytest.raises(ValidationError):
        service.create_challenge("Bad", "energy", target, now, now + timedelta(days=1))


def test_rejects_inverted_window(service, now):
    with pytest.raises(ValidationError):
        service.create_challenge("Bad", "energy", 10, now, now - timedelta(days=1))


def test_progress_completes_challenge(service, challenge):
    service.record_progress(challenge.id, 30)
    assert service.store.get_challenge(challenge.id).is_completed is False

    updated = service.record_progress(challenge.id, 20)

    assert updated.progress == 50
    assert updated.is_completed is True
    assert service.progress_percent(updated) == 100


def test_progress_never_negative(service, challenge):
    updated = service.record_progress(challenge.id, -10)

    assert updated.progress == 0


@pytest.mark.parametrize("amount", [float("nan"), float("inf"), "lots"])
def test_rejects_non_finite_progress(service, challenge, amount):
    with pytest.raises(ValidationError):
        service.record_progress(challenge.id, amount)

    stored = service.store.get_challenge(challenge.id)
    assert stored.progress == 0
    assert stored.is_completed is False


def test_completion_tracks_target_changes():
    challenge = Challenge(id="c", title="t", category="food", target=10, unit="kg",
                          progress=12, start_date=datetime(2024, 1, 1), end_date=datetime(2024, 2, 1))
    assert challenge.is_completed is True

    challenge.target = 20
    assert challenge.is_completed is False

    challenge.progress = 20
    assert challenge.is_completed is True


def test_completion_cannot_be_set_directly():
    challenge = Challenge(id="c", title="t", category="food", target=10, unit="kg",
                          progress=2, start_date=datetime(2024, 1, 1), end_date=datetime(2024, 2, 1))

    with pytest.raises(AttributeError):
        challenge.is_completed = True
    assert challenge.is_completed is False

    with pytest.raises(AttributeError):
        Challenge(id="d", title="t", category="food", target=10, unit="kg", progress=2,
                  is_completed=True, start_date=datetime(2024, 1, 1), end_date=datetime(2024, 2, 1))


def test_progress_percent_is_capped(service, challenge):
    challenge.progress = 25
    assert service.progress_percent(challenge) == pytest.approx(50)

    challenge.progress = 80
    assert service.progress_percent(challenge) == 100


def test_unknown_challenge(service):
    with pytest.raises(ChallengeNotFoundError):
        service.record_progress("missing", 1)


def test_active_and_completed(service, challenge, now):
    later = service.create_challenge("Next month", "energy", 10, now + timedelta(days=30), now + timedelta(days=60))

    assert [c.id for c in service.active_challenges(now)] == [challenge.id]

    service.record_progress(challenge.id, 100)

    assert service.active_challenges(now) == []
    assert [c.id for c in service.completed_challenges()] == [challenge.id]
    assert later.is_completed is False


def test_statistics_count_completed_challenges_and_badges(service, challenge, store, now):
    service.record_progress(challenge.id, 50)
    service.unlock_badge("First steps", requirement="Log one activity", badge_id="first",
                         unlocked_date=now - timedelta(days=2))
    service.unlock_badge("Green week", requirement="Complete a challenge", badge_id="week",
                         unlocked_date=now)

    stats = StatisticsService(store).current(now=now)

    assert stats.challenges_completed == 1
    assert stats.badges_unlocked == 2
    assert [b.id for b in store.load_badges()] == ["first", "week"]
