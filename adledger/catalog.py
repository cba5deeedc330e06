from typing import Optional

from .errors import AdNotFoundError
from .models import Ad
from .storage import InMemoryStorage


class AdCatalog:
    """Read-only view of the seeded ads."""

    def __init__(self, storage: InMemoryStorage):
        self.storage = storage

    def list_ads(self) -> list[Ad]:
        with self.storage.guard:
            return list(self.storage.ads.values())

    def get_ad(self, ad_id: int) -> Optional[Ad]:
        with self.storage.guard:
            return self.storage.ads.get(ad_id)

    def require_ad(self, ad_id: int) -> Ad:
        ad = self.get_ad(ad_id)
        if ad is None:
            raise AdNotFoundError(f"Ad {ad_id} not found")
        return ad
