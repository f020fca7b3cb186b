"""Shared test helpers."""

from datetime import datetime, timedelta, timezone

ACCESS_SECRET = "test-access-secret-with-at-least-32-bytes"
REFRESH_SECRET = "test-refresh-secret-with-at-least-32-bytes"


class FakeClock:
    """Settable clock for driving token expiry in tests."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime.now(timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)
