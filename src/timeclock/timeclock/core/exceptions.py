class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class NotFoundError(DomainError):
    """Raised when a referenced record does not exist."""


class UserNotFoundError(NotFoundError):
    """Raised when an identity does not resolve to a stored user."""


class NotificationNotFoundError(NotFoundError):
    pass


class StoreFailure(DomainError):
    """Raised when the event store cannot be read or written. Never retried."""


class PolicyRejection(ValidationError):
    """An attendance action refused by the state machine.

    Carries a stable ``code`` for API clients and a human readable corrective
    message as ``str(exc)``.
    """

    code = "POLICY_REJECTION"


class UserIsOnBreakError(PolicyRejection):
    code = "USER_IS_ON_BREAK"


class NotOnBreakError(PolicyRejection):
    code = "NOT_ON_BREAK"


class NoCheckInYetError(PolicyRejection):
    code = "NO_CHECK_IN_YET"


class NoCheckInTodayError(PolicyRejection):
    code = "NO_CHECK_IN_TODAY"


class InvalidNavigation(ValidationError):
    """Raised for drill-down moves or view parameters that are not legal."""
