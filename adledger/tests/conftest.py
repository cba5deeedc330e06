from datetime import datetime, timedelta, timezone

import pytest

from adledger.config import Settings
from adledger.service import AdRewardService


ADMIN_ID = "admin-principal-001"
USER_ID = "user-principal-001"
OTHER_ID = "user-principal-002"


class FixedClock:
    """Settable clock so day boundaries are deterministic."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
def clock():
    return FixedClock(datetime(2024, 3, 15, 12, 0, tzinfo=timezone.utc))


@pytest.fixture
def settings():
    return Settings(min_withdrawal=500, lock_timeout_seconds=2.0, admin_identities=[ADMIN_ID])


@pytest.fixture
def service(settings, clock):
    return AdRewardService(settings=settings, clock=clock)


@pytest.fixture
def user(service):
    service.create_profile(USER_ID, "alice", "alice@example.com")
    return USER_ID


def earn(service, identity, ad_ids=(1, 2, 3, 4, 5)):
    for ad_id in ad_ids:
        service.claim_ad(identity, ad_id)
