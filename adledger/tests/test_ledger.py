"""
Unit Tests for the Ad-Watch Ledger

Tests cover:
1. Claim flow and balance credit
2. One claim per ad per UTC day
3. Day boundaries
4. Profile and catalog preconditions
5. Watch history
"""

from datetime import datetime, timedelta, timezone

import pytest

from adledger.errors import AdNotFoundError, AlreadyClaimedTodayError, ProfileRequiredError
from adledger.service import AdRewardService
from adledger.storage import InMemoryStorage

from conftest import OTHER_ID, USER_ID


class TestClaimFlow:
    """Tests for crediting a reward on claim."""

    def test_claim_credits_reward(self, service, user):
        """Test that a claim records a watch and credits the ad's reward."""
        response = service.claim_ad(user, 1)

        assert response.reward_amount == 100
        assert response.balance == 100
        assert response.watch.ad_id == 1
        assert response.watch.identity == USER_ID
        assert response.watch.day.isoformat() == "2024-03-15"

        profile = service.get_profile(user)
        assert profile.balance == 100

    def test_claims_on_different_ads_accumulate(self, service, user):
        """Test that distinct ads on the same day each credit once."""
        for ad_id in (1, 2, 3):
            service.claim_ad(user, ad_id)

        assert service.get_profile(user).balance == 300
        assert len(service.get_caller_ad_watches(user)) == 3

    def test_reward_is_read_from_catalog(self, clock):
        """Test that the credited amount comes from the ad, not the caller."""
        storage = InMemoryStorage(ads=[{
            "id": 7, "title": "Premium", "url": "https://example.com/7",
            "duration_seconds": 30, "reward_amount": 250,
        }])
        service = AdRewardService(storage=storage, clock=clock)
        service.create_profile(USER_ID, "alice")

        response = service.claim_ad(USER_ID, 7)

        assert response.reward_amount == 250
        assert service.get_profile(USER_ID).balance == 250

    def test_claims_are_per_identity(self, service, user):
        """Test that one identity's claim does not block another's."""
        service.create_profile(OTHER_ID, "bob")

        service.claim_ad(user, 1)
        service.claim_ad(OTHER_ID, 1)

        assert service.get_profile(user).balance == 100
        assert service.get_profile(OTHER_ID).balance == 100


class TestDoubleClaimPrevention:
    """Tests for the one-claim-per-ad-per-day rule."""

    def test_second_claim_same_day_fails(self, service, user):
        """Test that claiming the same ad twice in a day fails and credits once."""
        service.claim_ad(user, 1)

        with pytest.raises(AlreadyClaimedTodayError):
            service.claim_ad(user, 1)

        # Exactly one watch and one credit
        assert service.get_profile(user).balance == 100
        assert len(service.get_caller_ad_watches(user)) == 1

    def test_claim_again_next_day(self, service, user, clock):
        """Test that the same ad can be claimed again on the next UTC day."""
        service.claim_ad(user, 1)
        clock.advance(days=1)

        service.claim_ad(user, 1)

        assert service.get_profile(user).balance == 200
        days = sorted(w.day.isoformat() for w in service.get_caller_ad_watches(user))
        assert days == ["2024-03-15", "2024-03-16"]

    def test_utc_midnight_boundary(self, service, user, clock):
        """Test that one second across UTC midnight starts a new day."""
        clock.now = datetime(2024, 3, 15, 23, 59, 59, tzinfo=timezone.utc)
        service.claim_ad(user, 1)

        clock.advance(seconds=1)
        response = service.claim_ad(user, 1)

        assert response.watch.day.isoformat() == "2024-03-16"

    def test_local_midnight_is_not_a_boundary(self, service, user, clock):
        """Test that days are keyed in UTC even when the clock reports another zone."""
        plus_five = timezone(timedelta(hours=5))
        # 23:30 and 00:30 local are 18:30 and 19:30 UTC on the same day
        clock.now = datetime(2024, 3, 15, 23, 30, tzinfo=plus_five)
        service.claim_ad(user, 1)

        clock.now = datetime(2024, 3, 16, 0, 30, tzinfo=plus_five)
        with pytest.raises(AlreadyClaimedTodayError):
            service.claim_ad(user, 1)


class TestClaimPreconditions:
    """Tests for claim failures that leave state untouched."""

    def test_claim_without_profile_fails(self, service):
        """Test that a caller without a profile cannot claim."""
        with pytest.raises(ProfileRequiredError):
            service.claim_ad(OTHER_ID, 1)

        assert service.get_caller_ad_watches(OTHER_ID) == []

    def test_claim_unknown_ad_fails(self, service, user):
        """Test that claiming a missing ad fails without crediting."""
        with pytest.raises(AdNotFoundError):
            service.claim_ad(user, 999)

        assert service.get_profile(user).balance == 0

    def test_profile_checked_before_ad(self, service):
        """Test that ProfileRequired wins over AdNotFound."""
        with pytest.raises(ProfileRequiredError):
            service.claim_ad(OTHER_ID, 999)


class TestCatalog:
    """Tests for catalog reads."""

    def test_available_ads_is_full_catalog(self, service, user):
        """Test that watched ads are still listed."""
        service.claim_ad(user, 1)

        ads = service.get_available_ads()

        assert [ad.id for ad in ads] == [1, 2, 3, 4, 5]
        assert all(30 <= ad.duration_seconds <= 90 for ad in ads)

    def test_get_ad(self, service):
        """Test single-ad lookup."""
        assert service.get_ad(3).id == 3
        assert service.get_ad(42) is None

    def test_empty_catalog(self, clock):
        """Test that the catalog can start empty."""
        service = AdRewardService(storage=InMemoryStorage(seed_catalog=False), clock=clock)

        assert service.get_available_ads() == []


class TestWatchHistory:
    """Tests for the caller's watch list."""

    def test_watches_only_include_caller(self, service, user):
        """Test that watch history is scoped to the caller."""
        service.create_profile(OTHER_ID, "bob")
        service.claim_ad(user, 1)
        service.claim_ad(OTHER_ID, 2)

        watches = service.get_caller_ad_watches(user)

        assert len(watches) == 1
        assert watches[0].ad_id == 1


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
