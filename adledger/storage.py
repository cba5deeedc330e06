import threading
from datetime import date
from typing import Iterable, Optional
from uuid import UUID

from .locks import KeyedLocks
from .models import Ad


DEFAULT_ADS = [
    {
        "id": 1, "title": "Sunrise Coffee Roasters",
        "description": "Freshly roasted beans delivered to your door every week.",
        "url": "https://www.youtube.com/embed/ScMzIvxBSi4",
        "duration_seconds": 30, "reward_amount": 100,
    },
    {
        "id": 2, "title": "Peak Fitness App",
        "description": "Personal training plans that adapt to your schedule.",
        "url": "https://www.youtube.com/embed/aqz-KE-bpKQ",
        "duration_seconds": 45, "reward_amount": 100,
    },
    {
        "id": 3, "title": "Nimbus Cloud Storage",
        "description": "Back up your photos and files with end-to-end encryption.",
        "url": "https://www.youtube.com/embed/jNQXAC9IVRw",
        "duration_seconds": 60, "reward_amount": 100,
    },
    {
        "id": 4, "title": "Green Leaf Grocery",
        "description": "Organic produce from local farms, same-day delivery.",
        "url": "https://www.youtube.com/embed/9bZkp7q19f0",
        "duration_seconds": 75, "reward_amount": 100,
    },
    {
        "id": 5, "title": "Orbit Travel Deals",
        "description": "Last-minute flights and hotels at members-only prices.",
        "url": "https://www.youtube.com/embed/kJQP7kiw5Fk",
        "duration_seconds": 90, "reward_amount": 100,
    },
]

WatchKey = tuple[str, int, date]


class InMemoryStorage:
    """
    Process-local state shared by all components.

    ``guard`` protects the dictionaries themselves: every commit and every
    snapshot read happens while holding it. ``identity_locks`` serialize the
    check-then-act sequences of a single identity and are always taken
    before ``guard``.
    """

    def __init__(
        self,
        ads: Optional[Iterable[dict]] = None,
        seed_catalog: bool = True,
        lock_timeout: float = 2.0,
    ):
        self.profiles: dict[str, dict] = {}
        self.roles: dict[str, str] = {}
        self.ads: dict[int, Ad] = {}
        self.watches: dict[WatchKey, dict] = {}
        self.withdrawals: dict[UUID, dict] = {}
        self.guard = threading.RLock()
        self.identity_locks = KeyedLocks(timeout=lock_timeout)
        if ads is not None:
            self._seed_ads(ads)
        elif seed_catalog:
            self._seed_ads(DEFAULT_ADS)

    def _seed_ads(self, ads: Iterable[dict]) -> None:
        for data in ads:
            ad = Ad(**data)
            self.ads[ad.id] = ad
