"""
Error taxonomy for reflective member access.

Every error derives from the builtin exception a caller would already catch
for the same condition, so existing ``except AttributeError`` or
``except ValueError`` handlers keep working.
"""

from enum import Enum
from typing import Optional


class ShapeViolation(Enum):
    """Why an accessor expression was rejected."""
    NOT_MEMBER_ACCESS = "not_member_access"
    NOT_PROPERTY = "not_property"
    STATIC_PROPERTY = "static_property"


class ReflectAccessError(Exception):
    """Base class for all reflectaccess errors."""


class InvalidArgumentError(ReflectAccessError, ValueError):
    """A required argument was None or structurally invalid."""

    def __init__(self, argument: str, message: Optional[str] = None):
        self.argument = argument
        super().__init__(message or f"Argument '{argument}' must not be None")


class MemberNotFoundError(ReflectAccessError, AttributeError):
    """The whole type chain was walked without finding the member."""

    def __init__(self, member_name: str, type_name: str, member_kind: str):
        self.member_name = member_name
        self.type_name = type_name
        self.member_kind = member_kind
        super().__init__(f"{member_kind} {member_name} was not found in Type {type_name}")


class InvalidExpressionShapeError(ReflectAccessError, ValueError):
    """An accessor expression is not a direct, non-static property read."""

    def __init__(self, reason: ShapeViolation, message: str):
        self.reason = reason
        super().__init__(message)


class MemberTypeError(ReflectAccessError, TypeError):
    """A member value could not be returned as the requested type."""

    def __init__(self, member_name: str, expected_type, actual_value):
        self.member_name = member_name
        self.expected_type = expected_type
        self.actual_type = type(actual_value)
        expected = getattr(expected_type, '__name__', repr(expected_type))
        super().__init__(
            f"Value of {member_name} is {self.actual_type.__name__}, expected {expected}"
        )
