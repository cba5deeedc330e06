import logging
from uuid import UUID, uuid4

from .clock import Clock, utc_now
from .errors import (
    BelowMinimumError,
    InsufficientBalanceError,
    InvalidAmountError,
    InvalidStateTransitionError,
    UnauthorizedError,
    WithdrawalNotFoundError,
)
from .models import WithdrawalRequest, WithdrawalResponse, WithdrawalStatus
from .profiles import ProfileStore
from .roles import RoleAuthority
from .storage import InMemoryStorage

logger = logging.getLogger(__name__)


class WithdrawalWorkflow:
    """
    Withdrawal lifecycle: pending -> approved | rejected, both terminal.

    Pending requests reserve funds against the available balance but the
    balance itself is only debited on approval.
    """

    def __init__(
        self,
        storage: InMemoryStorage,
        authority: RoleAuthority,
        profiles: ProfileStore,
        min_withdrawal: int = 500,
        clock: Clock = utc_now,
    ):
        self.storage = storage
        self.authority = authority
        self.profiles = profiles
        self.min_withdrawal = min_withdrawal
        self.clock = clock

    def request_withdrawal(self, identity: str, amount) -> WithdrawalResponse:
        self.profiles.require_profile(identity)
        self._validate_amount(amount)

        with self.storage.identity_locks.hold(identity):
            with self.storage.guard:
                available = self.available_balance(identity)
                if amount > available:
                    raise InsufficientBalanceError(
                        f"Requested {amount} but only {available} is available"
                    )

                request_data = {
                    "id": uuid4(),
                    "identity": identity,
                    "amount": amount,
                    "status": WithdrawalStatus.PENDING,
                    "request_time": self.clock(),
                    "decided_at": None,
                    "decided_by": None,
                }
                self.storage.withdrawals[request_data["id"]] = request_data
                balance = self.storage.profiles[identity]["balance"]

        logger.info("Withdrawal %s of %s requested by %s", request_data["id"], amount, identity)
        return WithdrawalResponse(
            request=WithdrawalRequest(**request_data),
            balance=balance,
            available_balance=available - amount,
            message="Withdrawal request submitted",
        )

    def approve(self, caller: str, request_id: UUID) -> WithdrawalResponse:
        return self._decide(caller, request_id, WithdrawalStatus.APPROVED)

    def reject(self, caller: str, request_id: UUID) -> WithdrawalResponse:
        return self._decide(caller, request_id, WithdrawalStatus.REJECTED)

    def get_request(self, caller: str, request_id: UUID) -> WithdrawalRequest:
        self.authority.require_authenticated(caller)
        with self.storage.guard:
            request_data = self.storage.withdrawals.get(request_id)
            if request_data is None:
                raise WithdrawalNotFoundError(f"Withdrawal request {request_id} not found")
            request = WithdrawalRequest(**request_data)
        if request.identity != caller and not self.authority.is_admin(caller):
            raise UnauthorizedError("Withdrawal requests are visible to their owner and admins only")
        return request

    def get_all_requests(self, caller: str) -> list[WithdrawalRequest]:
        self.authority.require_admin(caller, "list all withdrawal requests")
        with self.storage.guard:
            return [WithdrawalRequest(**r) for r in self.storage.withdrawals.values()]

    def get_history(self, identity: str) -> list[WithdrawalRequest]:
        with self.storage.guard:
            return [
                WithdrawalRequest(**r) for r in self.storage.withdrawals.values()
                if r["identity"] == identity
            ]

    def available_balance(self, identity: str) -> int:
        with self.storage.guard:
            profile_data = self.storage.profiles.get(identity)
            if profile_data is None:
                return 0
            return profile_data["balance"] - self._reserved(identity)

    def _decide(self, caller: str, request_id: UUID, outcome: WithdrawalStatus) -> WithdrawalResponse:
        verb = "approve" if outcome == WithdrawalStatus.APPROVED else "reject"
        self.authority.require_admin(caller, f"{verb} withdrawals")

        with self.storage.guard:
            request_data = self.storage.withdrawals.get(request_id)
            if request_data is None:
                raise WithdrawalNotFoundError(f"Withdrawal request {request_id} not found")
            owner = request_data["identity"]

        # The owner's lock covers both the request and the owner's balance.
        with self.storage.identity_locks.hold(owner):
            with self.storage.guard:
                request = WithdrawalRequest(**request_data)
                if not request.can_decide():
                    raise InvalidStateTransitionError(
                        f"Cannot {verb} withdrawal in {request.status.value} state"
                    )

                profile_data = self.storage.profiles[owner]
                if outcome == WithdrawalStatus.APPROVED:
                    if profile_data["balance"] < request.amount:
                        raise InsufficientBalanceError(
                            f"Balance {profile_data['balance']} is below the requested {request.amount}; "
                            "request left pending"
                        )
                    profile_data["balance"] -= request.amount

                request_data["status"] = outcome
                request_data["decided_at"] = self.clock()
                request_data["decided_by"] = caller
                balance = profile_data["balance"]
                available = self.available_balance(owner)

        logger.info("Withdrawal %s %s by %s", request_id, outcome.value, caller)
        return WithdrawalResponse(
            request=WithdrawalRequest(**request_data),
            balance=balance,
            available_balance=available,
            message=f"Withdrawal {outcome.value}",
        )

    def _reserved(self, identity: str) -> int:
        return sum(
            r["amount"] for r in self.storage.withdrawals.values()
            if r["identity"] == identity and r["status"] == WithdrawalStatus.PENDING
        )

    def _validate_amount(self, amount) -> None:
        if isinstance(amount, bool) or not isinstance(amount, int):
            raise InvalidAmountError(f"Amount must be a whole number, got {amount!r}")
        if amount <= 0:
            raise InvalidAmountError("Amount must be positive")
        if amount < self.min_withdrawal:
            raise BelowMinimumError(f"Minimum withdrawal is {self.min_withdrawal}")
