"""Builders shared by the unit tests."""

from datetime import datetime, timedelta, timezone

from src.schemas.registration import RegistrationCreate


class FakeClock:
    """Controllable time source for the registration service."""

    def __init__(self, start: datetime = datetime(2026, 1, 15, 10, 0, tzinfo=timezone.utc)):
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def make_candidate(**overrides) -> RegistrationCreate:
    data = {
        "name": "Asha Verma",
        "phone": "9876543210",
        "email": "asha@example.com",
        "state": "Maharashtra",
        "city": "Pune",
    }
    data.update(overrides)
    return RegistrationCreate(**data)
