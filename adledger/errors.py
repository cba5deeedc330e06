class LedgerServiceError(Exception):
    code = "LedgerError"
    status_code = 400
    retryable = False


class UnauthorizedError(LedgerServiceError):
    code = "Unauthorized"
    status_code = 403


class ProfileRequiredError(LedgerServiceError):
    code = "ProfileRequired"
    status_code = 403


class AlreadyExistsError(LedgerServiceError):
    code = "AlreadyExists"
    status_code = 409


class InvalidProfileError(LedgerServiceError):
    code = "InvalidProfile"
    status_code = 422


class AdNotFoundError(LedgerServiceError):
    code = "AdNotFound"
    status_code = 404


class AlreadyClaimedTodayError(LedgerServiceError):
    code = "AlreadyClaimedToday"
    status_code = 409


class InvalidAmountError(LedgerServiceError):
    code = "InvalidAmount"
    status_code = 422


class BelowMinimumError(LedgerServiceError):
    code = "BelowMinimum"
    status_code = 422


class InsufficientBalanceError(LedgerServiceError):
    code = "InsufficientBalance"
    status_code = 409


class WithdrawalNotFoundError(LedgerServiceError):
    code = "NotFound"
    status_code = 404


class InvalidStateTransitionError(LedgerServiceError):
    code = "InvalidState"
    status_code = 409


class BusyError(LedgerServiceError):
    """Lock contention. The only error callers should retry automatically."""
    code = "Busy"
    status_code = 503
    retryable = True
