"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone

import pytest
from rest_framework.test import APIClient

from tickets.domain import SignatureRecord
from tickets.services import WindowClock
from tickets.services.credentials import build_message, encode
from tickets.services.signing import LocalAccountSigner
from tickets.stores import InMemoryTicketStore

HOLDER_KEY = "0x" + "11" * 32
OTHER_KEY = "0x" + "22" * 32
ROTATION = 30


class ManualTime:
    """Time source the tests move by hand."""

    def __init__(self, moment: datetime) -> None:
        self.moment = moment

    def __call__(self) -> datetime:
        return self.moment

    def set_window(self, window: int) -> None:
        # a few seconds into the window, away from the boundary
        self.moment = datetime.fromtimestamp(window * ROTATION + 5, tz=timezone.utc)

    def advance(self, seconds: float) -> None:
        self.moment += timedelta(seconds=seconds)


def signed_payload(
    signer: LocalAccountSigner, token_id: str, event_id: str, window: int
) -> str:
    message = build_message(signer.address, token_id, event_id)
    record = SignatureRecord(signer.address, token_id, signer.sign(message))
    return encode(record, event_id, window)


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def manual_time() -> ManualTime:
    return ManualTime(datetime(2026, 10, 19, 12, 0, 5, tzinfo=timezone.utc))


@pytest.fixture
def clock(manual_time: ManualTime) -> WindowClock:
    return WindowClock(now=manual_time, rotation_seconds=ROTATION)


@pytest.fixture
def store() -> InMemoryTicketStore:
    return InMemoryTicketStore()


@pytest.fixture
def holder() -> LocalAccountSigner:
    return LocalAccountSigner(HOLDER_KEY)


@pytest.fixture
def other_holder() -> LocalAccountSigner:
    return LocalAccountSigner(OTHER_KEY)


@pytest.fixture
def event(store: InMemoryTicketStore, clock: WindowClock, other_holder):
    return store.create_event("GIKI Rave", clock.now() + timedelta(hours=1), other_holder.address)
