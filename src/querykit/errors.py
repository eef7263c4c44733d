"""
Exception taxonomy for querykit.

Every failure raised by the library is a QueryKitError.

    QueryKitError
        InvalidArgumentError        (also a ValueError)
            MissingArgumentError    required argument is None
            PropertyNotFoundError   named property absent on element type
        UnsupportedExpressionError  (also a TypeError)

IMPORTANT:
    Nothing here is retried or recovered.
    Errors are raised at call time and propagate to the caller.
"""

from typing import Optional


class QueryKitError(Exception):
    """Base class for all querykit errors."""
    pass


class InvalidArgumentError(QueryKitError, ValueError):
    """
    Raised when an argument has an unusable value.

    Properties:
        argument: Name of the offending parameter (optional)
    """

    def __init__(self, message: str, argument: Optional[str] = None):
        super().__init__(message)
        self.argument = argument


class MissingArgumentError(InvalidArgumentError):
    """Raised when a required argument is None."""

    def __init__(self, argument: str):
        super().__init__(f"Value cannot be None. (Parameter '{argument}')", argument)


class PropertyNotFoundError(InvalidArgumentError):
    """
    Raised when a property name does not resolve on the element type.

    Properties:
        type_name: Qualified name of the element type searched
        property_name: The name that failed to resolve
    """

    def __init__(self, type_name: str, property_name: str, argument: str = "property_name"):
        super().__init__(
            f"Type of {type_name} does not contain property {property_name}!",
            argument,
        )
        self.type_name = type_name
        self.property_name = property_name


class UnsupportedExpressionError(QueryKitError, TypeError):
    """Raised when the interpreter meets a node it cannot evaluate."""
    pass


def require(value, argument: str):
    """Return value unchanged, or raise MissingArgumentError if it is None."""
    if value is None:
        raise MissingArgumentError(argument)
    return value
