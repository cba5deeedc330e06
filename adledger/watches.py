import logging

from .catalog import AdCatalog
from .clock import Clock, day_key, utc_now
from .errors import AlreadyClaimedTodayError
from .models import ClaimResponse, WatchEvent
from .profiles import ProfileStore
from .storage import InMemoryStorage

logger = logging.getLogger(__name__)


class AdWatchLedger:
    """
    Records one watch per (identity, ad, UTC day) and credits the reward.

    The profile is resolved before the identity lock is taken, so callers
    without a profile never create a lock. Profiles are never removed.
    The existence check and the commit both run under the identity's lock,
    so two concurrent claims for the same ad and day cannot both pass the
    check. The credit and the watch record are written in one guarded
    block; a claim either does both or neither.
    """

    def __init__(
        self,
        storage: InMemoryStorage,
        catalog: AdCatalog,
        profiles: ProfileStore,
        clock: Clock = utc_now,
    ):
        self.storage = storage
        self.catalog = catalog
        self.profiles = profiles
        self.clock = clock

    def claim_ad(self, identity: str, ad_id: int) -> ClaimResponse:
        self.profiles.require_profile(identity)

        with self.storage.identity_locks.hold(identity):
            # Reward is read now, never taken from the caller.
            ad = self.catalog.require_ad(ad_id)

            now = self.clock()
            key = (identity, ad.id, day_key(now))

            with self.storage.guard:
                if key in self.storage.watches:
                    raise AlreadyClaimedTodayError(
                        f"Ad {ad.id} was already claimed today ({key[2].isoformat()} UTC)"
                    )
                profile_data = self.storage.profiles[identity]
                watch_data = {
                    "identity": identity,
                    "ad_id": ad.id,
                    "day": key[2],
                    "watched_at": now,
                }
                self.storage.watches[key] = watch_data
                profile_data["balance"] += ad.reward_amount
                new_balance = profile_data["balance"]

        logger.info("Credited %s to %s for ad %s", ad.reward_amount, identity, ad.id)
        return ClaimResponse(
            watch=WatchEvent(**watch_data),
            reward_amount=ad.reward_amount,
            balance=new_balance,
            message="Reward claimed successfully",
        )

    def get_watches(self, identity: str) -> list[WatchEvent]:
        with self.storage.guard:
            return [
                WatchEvent(**w) for w in self.storage.watches.values()
                if w["identity"] == identity
            ]
