"""
Ad Reward Ledger

This module provides:
- Daily per-ad reward claims, at most one per identity, ad and UTC day
- Balances that are credited by claims and debited only by approved withdrawals
- Withdrawal lifecycle: pending → approved / rejected
- Role-gated administration (admin, user, guest)
- Dashboard statistics derived from the ledger at read time
"""

from .errors import LedgerServiceError, BusyError
from .models import (
    Role,
    WithdrawalStatus,
    Profile,
    Ad,
    WatchEvent,
    WithdrawalRequest,
    DashboardStats,
)
from .service import AdRewardService

__all__ = [
    "Role",
    "WithdrawalStatus",
    "Profile",
    "Ad",
    "WatchEvent",
    "WithdrawalRequest",
    "DashboardStats",
    "AdRewardService",
    "LedgerServiceError",
    "BusyError",
]
