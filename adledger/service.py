"""
Operation surface of the ad reward ledger.

Every public method takes the caller identity supplied by the transport
layer as its first argument. Privileged operations resolve the caller's role
before the owning component checks its invariants and commits.
"""

from typing import Optional
from uuid import UUID

from .catalog import AdCatalog
from .clock import Clock, utc_now
from .config import Settings
from .dashboard import DashboardAggregator
from .errors import UnauthorizedError
from .models import (
    Ad,
    ClaimResponse,
    DashboardStats,
    Profile,
    Role,
    WatchEvent,
    WithdrawalRequest,
    WithdrawalResponse,
)
from .profiles import ProfileStore
from .roles import RoleAuthority
from .storage import InMemoryStorage
from .watches import AdWatchLedger
from .withdrawals import WithdrawalWorkflow


class AdRewardService:
    def __init__(
        self,
        storage: Optional[InMemoryStorage] = None,
        settings: Optional[Settings] = None,
        clock: Clock = utc_now,
    ):
        self.settings = settings or Settings()
        self.storage = storage or InMemoryStorage(
            seed_catalog=self.settings.seed_catalog,
            lock_timeout=self.settings.lock_timeout_seconds,
        )
        self.clock = clock

        self.roles = RoleAuthority(self.storage)
        self.profiles = ProfileStore(self.storage, clock=clock)
        self.catalog = AdCatalog(self.storage)
        self.watches = AdWatchLedger(self.storage, self.catalog, self.profiles, clock=clock)
        self.withdrawals = WithdrawalWorkflow(
            self.storage, self.roles, self.profiles,
            min_withdrawal=self.settings.min_withdrawal, clock=clock,
        )
        self.dashboard = DashboardAggregator(self.storage, clock=clock)

        if self.settings.admin_identities:
            self.roles.bootstrap_admins(self.settings.admin_identities)

    # Profiles

    def create_profile(self, caller: str, username: str, email: str = "") -> Profile:
        self.roles.require_authenticated(caller)
        return self.profiles.create_profile(caller, username, email)

    def save_profile(self, caller: str, username: str, email: str = "") -> Profile:
        self.roles.require_authenticated(caller)
        return self.profiles.update_profile(caller, username, email)

    def get_profile(self, caller: str, identity: Optional[str] = None) -> Optional[Profile]:
        self.roles.require_authenticated(caller)
        if identity is not None and identity != caller and not self.roles.is_admin(caller):
            raise UnauthorizedError("Only admins may view other users' profiles")
        return self.profiles.get_profile(identity or caller)

    # Roles

    def assign_role(self, caller: str, target: str, role: Role) -> Role:
        return self.roles.assign_role(caller, target, role)

    def get_role(self, caller: str) -> Role:
        self.roles.require_authenticated(caller)
        return self.roles.role_of(caller)

    def is_admin(self, caller: str) -> bool:
        self.roles.require_authenticated(caller)
        return self.roles.is_admin(caller)

    # Ads

    def get_available_ads(self) -> list[Ad]:
        return self.catalog.list_ads()

    def get_ad(self, ad_id: int) -> Optional[Ad]:
        return self.catalog.get_ad(ad_id)

    def claim_ad(self, caller: str, ad_id: int) -> ClaimResponse:
        self.roles.require_authenticated(caller)
        return self.watches.claim_ad(caller, ad_id)

    def get_caller_ad_watches(self, caller: str) -> list[WatchEvent]:
        self.roles.require_authenticated(caller)
        return self.watches.get_watches(caller)

    # Withdrawals

    def request_withdrawal(self, caller: str, amount) -> WithdrawalResponse:
        self.roles.require_authenticated(caller)
        return self.withdrawals.request_withdrawal(caller, amount)

    def approve_withdrawal(self, caller: str, request_id: UUID) -> WithdrawalResponse:
        return self.withdrawals.approve(caller, request_id)

    def reject_withdrawal(self, caller: str, request_id: UUID) -> WithdrawalResponse:
        return self.withdrawals.reject(caller, request_id)

    def get_withdrawal_request(self, caller: str, request_id: UUID) -> WithdrawalRequest:
        return self.withdrawals.get_request(caller, request_id)

    def get_caller_withdrawal_history(self, caller: str) -> list[WithdrawalRequest]:
        self.roles.require_authenticated(caller)
        return self.withdrawals.get_history(caller)

    def get_all_withdrawal_requests(self, caller: str) -> list[WithdrawalRequest]:
        return self.withdrawals.get_all_requests(caller)

    # Dashboard

    def get_dashboard_stats(self, caller: str) -> DashboardStats:
        self.roles.require_authenticated(caller)
        return self.dashboard.get_stats(caller)
