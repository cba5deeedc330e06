from .clock import Clock, day_key, utc_now
from .models import DashboardStats
from .storage import InMemoryStorage


class DashboardAggregator:
    """Stats derived from the ledger at read time. Nothing is stored."""

    def __init__(self, storage: InMemoryStorage, clock: Clock = utc_now):
        self.storage = storage
        self.clock = clock

    def get_stats(self, identity: str) -> DashboardStats:
        today = day_key(self.clock())
        with self.storage.guard:
            profile_data = self.storage.profiles.get(identity)
            days = [w["day"] for w in self.storage.watches.values() if w["identity"] == identity]
            balance = profile_data["balance"] if profile_data else 0

        return DashboardStats(
            total_balance=balance,
            ads_watched_today=sum(1 for d in days if d == today),
            total_ads_watched=len(days),
        )
