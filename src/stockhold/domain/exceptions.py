"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class OrderStatusError(ValidationError):
    """An order transition or order-level business rule was rejected."""


class InsufficientStockError(DomainException):
    """Not enough unreserved stock to satisfy a reservation or deduction."""

    def __init__(self, message: str, product_id: str | None = None) -> None:
        super().__init__(message)
        self.product_id = product_id


class ResourceNotFoundError(DomainException):
    """A requested order, product or reservation does not exist."""


class ReservationConflict(DomainException):
    """A reservation transition lost the race to another terminal transition.

    Never surfaced to callers: stores turn it into a no-op.
    """
