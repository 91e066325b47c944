"""
Reflective get/set of properties and fields.

All four operations share one sequence: validate the arguments, resolve the
member against the target's type chain, then read or write it through the
member's own storage. Reads and writes bypass ``__getattribute__`` and
``__setattr__`` overrides on the target, so private and frozen members are
reachable. Errors raised by the underlying getter, setter or slot propagate
unchanged.
"""

import logging
import types
from typing import Annotated, Any, Literal, Optional, Union, get_args, get_origin

from reflectaccess.errors import InvalidArgumentError, MemberNotFoundError, MemberTypeError
from reflectaccess.member_resolver import (
    MemberDescriptor,
    MemberKind,
    MemberStorage,
    qualified_type_name,
    resolve_field,
    resolve_property,
)

logger = logging.getLogger(__name__)


def _validate(target: Any, name: Any) -> None:
    if target is None:
        raise InvalidArgumentError('target')
    if not isinstance(name, str) or not name:
        raise InvalidArgumentError('name', f"Member name must be a non-empty string, got {name!r}")


def _instance_namespace(target: Any) -> Optional[dict]:
    """The target's own ``__dict__``, or None for slotted objects and classes."""
    if isinstance(target, type):
        return None
    try:
        namespace = object.__getattribute__(target, '__dict__')
    except AttributeError:
        return None
    return namespace if isinstance(namespace, dict) else None


def _resolve(target: Any, name: str, kind: MemberKind) -> MemberDescriptor:
    target_type = type(target)
    if kind is MemberKind.PROPERTY:
        member = resolve_property(target_type, name)
    else:
        member = resolve_field(target_type, name, _instance_namespace(target))
    if member is None:
        raise MemberNotFoundError(name, qualified_type_name(target_type), kind.value)
    return member


def _read(member: MemberDescriptor, target: Any) -> Any:
    storage = member.storage
    if storage in (MemberStorage.PROPERTY, MemberStorage.CACHED_PROPERTY, MemberStorage.SLOT):
        return member.descriptor.__get__(target, type(target))
    if storage is MemberStorage.CLASS_PROPERTY:
        return member.descriptor.get_value(type(target))
    if storage is MemberStorage.CLASS:
        return vars(member.declaring_type)[member.attribute]

    namespace = _instance_namespace(target)
    if namespace is not None and member.attribute in namespace:
        return namespace[member.attribute]
    # Unassigned: class default, or the interpreter's own AttributeError
    return object.__getattribute__(target, member.attribute)


def _write(member: MemberDescriptor, target: Any, value: Any) -> None:
    storage = member.storage
    logger.debug(
        f"Writing {member.kind.value.lower()} {member.declaring_type.__qualname__}.{member.attribute} "
        f"({storage.value})"
    )
    if storage in (MemberStorage.PROPERTY, MemberStorage.SLOT):
        member.descriptor.__set__(target, value)
    elif storage is MemberStorage.CLASS_PROPERTY:
        member.descriptor.set_value(type(target), value)
    elif storage is MemberStorage.CLASS:
        type.__setattr__(member.declaring_type, member.attribute, value)
    else:
        # INSTANCE fields and cached_property values live in the instance dict
        attribute = member.descriptor.attrname if storage is MemberStorage.CACHED_PROPERTY else member.attribute
        namespace = _instance_namespace(target)
        if namespace is None:
            # no __dict__: let the interpreter raise its own error
            object.__setattr__(target, attribute, value)
        else:
            namespace[attribute] = value


def _matches_type(value: Any, expected: Any) -> bool:
    if expected is Any or expected is object:
        return True
    if expected is None or expected is type(None):
        return value is None
    origin = get_origin(expected)
    if origin is Union or origin is types.UnionType:
        return any(_matches_type(value, arg) for arg in get_args(expected))
    if origin is Annotated:
        return _matches_type(value, get_args(expected)[0])
    if origin is Literal:
        return value in get_args(expected)
    if origin is not None:
        return isinstance(value, origin)
    return isinstance(value, expected)


def _is_checkable(expected: Any) -> bool:
    """True if _matches_type() can test values against ``expected``."""
    if expected is Any or expected is None:
        return True
    origin = get_origin(expected)
    if origin is Union or origin is types.UnionType:
        return all(_is_checkable(arg) for arg in get_args(expected))
    if origin is Annotated:
        return _is_checkable(get_args(expected)[0])
    if origin is Literal:
        return True
    if origin is not None:
        return isinstance(origin, type)
    if not isinstance(expected, type):
        # string forward references, TypeVar, NewType
        return False
    # isinstance() refuses protocols not marked @runtime_checkable
    return not getattr(expected, '_is_protocol', False) or getattr(expected, '_is_runtime_protocol', False)


def _validate_expected_type(expected_type: Any) -> None:
    if not _is_checkable(expected_type):
        raise InvalidArgumentError(
            'expected_type', f"expected_type {expected_type!r} cannot be checked with isinstance()"
        )


def _as_expected(member: MemberDescriptor, value: Any, expected_type: Any) -> Any:
    if expected_type is None or _matches_type(value, expected_type):
        return value
    raise MemberTypeError(member.name, expected_type, value)


def get_property_value(target: Any, name: str, expected_type: Any = None) -> Any:
    """
    Read a property declared anywhere in the target's type chain.

    Args:
        target: Object to read from
        name: Property name, public or private
        expected_type: If given, the value must be an instance of it

    Returns:
        The value returned by the property's getter

    Raises:
        InvalidArgumentError: target is None or name is empty
        InvalidArgumentError: expected_type cannot be checked with isinstance()
        MemberNotFoundError: no property of that name in the chain
        MemberTypeError: the value is not an ``expected_type``
    """
    _validate(target, name)
    _validate_expected_type(expected_type)
    member = _resolve(target, name, MemberKind.PROPERTY)
    return _as_expected(member, _read(member, target), expected_type)


def set_property_value(target: Any, name: str, value: Any) -> None:
    """Write a property through its setter. Setter errors propagate."""
    _validate(target, name)
    member = _resolve(target, name, MemberKind.PROPERTY)
    _write(member, target, value)


def get_field_value(target: Any, name: str, expected_type: Any = None) -> Any:
    """
    Read a field declared anywhere in the target's type chain.

    Same contract as get_property_value(), for fields. Reading a declared
    field that was never assigned raises the interpreter's AttributeError.
    """
    _validate(target, name)
    _validate_expected_type(expected_type)
    member = _resolve(target, name, MemberKind.FIELD)
    return _as_expected(member, _read(member, target), expected_type)


def set_field_value(target: Any, name: str, value: Any) -> None:
    """Write a field directly, bypassing ``__setattr__`` and frozen guards."""
    _validate(target, name)
    member = _resolve(target, name, MemberKind.FIELD)
    _write(member, target, value)


class ReflectiveAccessMixin:
    """Exposes the reflective accessors as methods of the object itself."""

    def get_private_property_value(self, name: str, expected_type: Any = None) -> Any:
        return get_property_value(self, name, expected_type)

    def set_private_property_value(self, name: str, value: Any) -> None:
        set_property_value(self, name, value)

    def get_private_field_value(self, name: str, expected_type: Any = None) -> Any:
        return get_field_value(self, name, expected_type)

    def set_private_field_value(self, name: str, value: Any) -> None:
        set_field_value(self, name, value)
