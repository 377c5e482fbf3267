"""Domain-specific exceptions — framework-independent."""


class EntityNotFoundError(Exception):
    """Raised when a requested entity does not exist."""

    def __init__(self, entity_type: str, entity_id: int | str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"No {entity_type} found with ID: {entity_id}")


class DomainValidationError(Exception):
    """Raised when input breaks a business rule (bad hours, empty activity set...)."""

    def __init__(self, message: str, field: str | None = None):
        self.message = message
        self.field = field
        super().__init__(message)


class InvalidStatusTransitionError(DomainValidationError):
    """Raised when a CRA status change is not allowed by the transition table."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(
            f"Cannot change CRA status from '{current}' to '{requested}'",
            field="status",
        )


class TransactionError(Exception):
    """Raised after a multi-statement write failed and was rolled back.

    No partial state is left behind, so the caller may retry.
    """

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        self.reason = reason
        super().__init__(f"{operation} failed and was rolled back: {reason}")


class ConnectivityError(Exception):
    """Raised when the database cannot be reached or the pool is exhausted."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Database unavailable: {reason}")
