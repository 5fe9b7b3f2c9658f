"""Domain errors raised by the functional core.

The core is made of total functions wherever possible. These errors mark the
few places where a caller contract is enforced instead of silently degraded.
"""


class TriptiError(Exception):
    """Base class for errors raised by this package."""


class InvalidInputError(TriptiError, ValueError):
    """Raised when caller-supplied data breaks a documented contract.

    Example: resolving the default trip link for a trip without an id.
    """


class UnsupportedOperatorError(TriptiError, ValueError):
    """Raised when a query predicate uses an operator we cannot evaluate."""

    def __init__(self, operator: str) -> None:
        super().__init__(f"Unsupported query operator: {operator}")
        self.operator = operator
