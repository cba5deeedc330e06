import logging
from typing import Optional

from .clock import Clock, utc_now
from .errors import AlreadyExistsError, InvalidProfileError, ProfileRequiredError
from .models import Profile
from .storage import InMemoryStorage

logger = logging.getLogger(__name__)


class ProfileStore:
    """
    One profile per identity. Balance is never written from here.

    Profile writes only touch metadata, so the storage guard alone makes
    them atomic; identity locks are left to balance-changing operations.
    """

    def __init__(self, storage: InMemoryStorage, clock: Clock = utc_now):
        self.storage = storage
        self.clock = clock

    def create_profile(self, identity: str, username: str, email: str = "") -> Profile:
        username = self._clean_username(username)
        with self.storage.guard:
            if identity in self.storage.profiles:
                raise AlreadyExistsError(f"Profile for {identity} already exists")
            profile_data = {
                "identity": identity,
                "username": username,
                "email": email or "",
                "balance": 0,
                "registration_time": self.clock(),
            }
            self.storage.profiles[identity] = profile_data
        logger.info("Created profile for %s", identity)
        return Profile(**profile_data)

    def update_profile(self, identity: str, username: str, email: str = "") -> Profile:
        username = self._clean_username(username)
        with self.storage.guard:
            profile_data = self.storage.profiles.get(identity)
            if profile_data is None:
                raise ProfileRequiredError(f"No profile exists for {identity}")
            profile_data["username"] = username
            profile_data["email"] = email or ""
            return Profile(**profile_data)

    def get_profile(self, identity: str) -> Optional[Profile]:
        with self.storage.guard:
            profile_data = self.storage.profiles.get(identity)
            return Profile(**profile_data) if profile_data else None

    def require_profile(self, identity: str) -> Profile:
        profile = self.get_profile(identity)
        if profile is None:
            raise ProfileRequiredError(f"A profile is required; create one for {identity} first")
        return profile

    def _clean_username(self, username: str) -> str:
        if not username or not username.strip():
            raise InvalidProfileError("Username must not be empty")
        return username.strip()
