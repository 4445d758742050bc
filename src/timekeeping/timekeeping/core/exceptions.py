class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class StateError(DomainError):
    """Raised when an entity is not in a state that allows the operation."""


class NotFoundError(DomainError):
    """Raised when a referenced entity does not exist."""


class ConflictError(DomainError):
    """Raised when a uniqueness constraint rejects a write."""


# Validation
class PastDateNotAllowed(ValidationError):
    pass


class FutureDateNotAllowed(ValidationError):
    pass


class InvalidTimeRange(ValidationError):
    pass


class HoursMismatch(ValidationError):
    pass


class NonPositiveHours(ValidationError):
    pass


class OverlappingRequest(ValidationError):
    pass


class DuplicatePendingRequest(ValidationError):
    pass


class SessionAlreadyRecorded(ValidationError):
    """The in/out slot for this day already has a session."""


class InsufficientLeaveBalance(ValidationError):
    pass


# State
class AlreadyProcessed(StateError):
    pass


class CannotDeleteProcessed(StateError):
    pass


class EmployeeInactive(StateError):
    pass


class PayrollRecordLocked(StateError):
    """A processed or paid payroll record cannot be re-materialized."""


# Not found
class EmployeeNotFound(NotFoundError):
    pass


class RequestNotFound(NotFoundError):
    pass


class RecordNotFound(NotFoundError):
    pass


class SessionNotFound(NotFoundError):
    pass


class PayrollPeriodNotFound(NotFoundError):
    pass
