"""
Member resolution over a type chain.

Resolution walks ``type.__mro__`` from the most derived class to ``object``,
inspecting one class namespace at a time, and stops at the first class that
declares a member of the requested name and kind. A declaration in a derived
class therefore hides same-named members of its ancestors.

What counts as a member:

    Properties   property, functools.cached_property, classproperty (static)
    Fields       __slots__ entries, non-ClassVar annotations (dataclass fields
                 included), entries of the instance __dict__, plain class
                 attributes (static)

Private names (``__x``) are looked up as ``_Class__x`` at each class first,
the way the compiler mangles them inside that class body.

Descriptors are built fresh on every call. Nothing is cached.
"""

import functools
import inspect
import logging
import sys
import types
from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Iterator, List, Mapping, Optional, Tuple, get_origin

from reflectaccess.config import AccessorSettings, get_accessor_settings
from reflectaccess.descriptors import classproperty

logger = logging.getLogger(__name__)

_MISSING = object()


class MemberKind(Enum):
    PROPERTY = "Property"
    FIELD = "Field"


class MemberStorage(Enum):
    """How a resolved member is read and written."""
    PROPERTY = "property"
    CACHED_PROPERTY = "cached_property"
    CLASS_PROPERTY = "classproperty"
    SLOT = "slot"
    INSTANCE = "instance"
    CLASS = "class"


_STATIC_STORAGE = frozenset({MemberStorage.CLASS_PROPERTY, MemberStorage.CLASS})


@dataclass(frozen=True)
class MemberDescriptor:
    """One resolved property or field.

    ``name`` is what the caller asked for, ``attribute`` is the real attribute
    name (they differ only for mangled private names). ``descriptor`` is the
    class-level object backing the member, when there is one.
    """
    name: str
    attribute: str
    kind: MemberKind
    storage: MemberStorage
    declaring_type: type
    value_type: Any = None
    descriptor: Any = None

    @property
    def is_static(self) -> bool:
        return self.storage in _STATIC_STORAGE


if sys.version_info >= (3, 14):
    import annotationlib

    def _annotations_of(obj) -> Mapping[str, Any]:
        # FORWARDREF keeps unresolvable names from raising NameError
        return annotationlib.get_annotations(obj, format=annotationlib.Format.FORWARDREF)
else:
    def _annotations_of(obj) -> Mapping[str, Any]:
        return inspect.get_annotations(obj)


def iter_type_chain(cls: type) -> Iterator[type]:
    """Yield ``cls`` and its ancestors, most derived first."""
    if not isinstance(cls, type):
        raise TypeError(f"Expected a type, got {type(cls).__name__}")
    yield from cls.__mro__


def qualified_type_name(cls: type) -> str:
    module = getattr(cls, '__module__', None)
    if module in (None, 'builtins'):
        return cls.__qualname__
    return f"{module}.{cls.__qualname__}"


def is_private_name(name: str) -> bool:
    return name.startswith('__') and not name.endswith('__')


def mangle_private_name(name: str, cls: type) -> str:
    """Return ``name`` as the compiler would store it inside ``cls``'s body."""
    class_name = cls.__name__.lstrip('_')
    if not class_name or not is_private_name(name):
        return name
    return f"_{class_name}{name}"


def _candidate_attributes(name: str, cls: type, settings: AccessorSettings) -> List[Tuple[str, bool]]:
    """(attribute, is_mangled) pairs to try at ``cls``, in order."""
    if settings.mangle_private_names and is_private_name(name):
        mangled = mangle_private_name(name, cls)
        if mangled != name:
            return [(mangled, True), (name, False)]
    return [(name, False)]


def _property_storage(raw: Any) -> Optional[MemberStorage]:
    # classproperty first: it must never be mistaken for an instance property
    if isinstance(raw, classproperty):
        return MemberStorage.CLASS_PROPERTY
    if isinstance(raw, functools.cached_property):
        return MemberStorage.CACHED_PROPERTY
    if isinstance(raw, property):
        return MemberStorage.PROPERTY
    return None


def _is_class_var(annotation: Any) -> bool:
    if annotation is ClassVar or get_origin(annotation) is ClassVar:
        return True
    if isinstance(annotation, str):
        return annotation.startswith(('ClassVar', 'typing.ClassVar'))
    return False


def _is_plain_class_attribute(raw: Any) -> bool:
    """True for values stored on a class that behave like static fields."""
    if isinstance(raw, type) or callable(raw):
        return False
    # methods, slots and other descriptors are not fields
    return not hasattr(type(raw), '__get__')


def _getter_return_type(raw: Any, storage: MemberStorage) -> Any:
    fget = raw.func if storage is MemberStorage.CACHED_PROPERTY else raw.fget
    if fget is None:
        return None
    return _annotations_of(fget).get('return')


def _property_on(cls: type, name: str, settings: AccessorSettings) -> Optional[MemberDescriptor]:
    namespace = vars(cls)
    for attribute, _ in _candidate_attributes(name, cls, settings):
        raw = namespace.get(attribute, _MISSING)
        if raw is _MISSING:
            continue
        storage = _property_storage(raw)
        if storage is None:
            continue
        if storage in _STATIC_STORAGE and not settings.include_static:
            continue
        return MemberDescriptor(
            name=name,
            attribute=attribute,
            kind=MemberKind.PROPERTY,
            storage=storage,
            declaring_type=cls,
            value_type=_getter_return_type(raw, storage),
            descriptor=raw,
        )
    return None


def _annotating_type(chain: Tuple[type, ...], attribute: str) -> Optional[type]:
    for cls in chain:
        annotation = _annotations_of(cls).get(attribute, _MISSING)
        if annotation is not _MISSING and not _is_class_var(annotation):
            return cls
    return None


def _field_on(
    cls: type,
    name: str,
    chain: Tuple[type, ...],
    instance_namespace: Optional[Mapping[str, Any]],
    settings: AccessorSettings,
) -> Optional[MemberDescriptor]:
    namespace = vars(cls)
    annotations = _annotations_of(cls)
    is_runtime_type = cls is chain[0]

    for attribute, is_mangled in _candidate_attributes(name, cls, settings):
        raw = namespace.get(attribute, _MISSING)
        annotation = annotations.get(attribute, _MISSING)

        # A property with this name makes cls declare a property, not a field
        if raw is not _MISSING and _property_storage(raw) is not None:
            continue

        if isinstance(raw, types.MemberDescriptorType):
            value_type = None if annotation is _MISSING else annotation
            return MemberDescriptor(name, attribute, MemberKind.FIELD, MemberStorage.SLOT, cls, value_type, raw)

        if annotation is not _MISSING and not _is_class_var(annotation):
            return MemberDescriptor(name, attribute, MemberKind.FIELD, MemberStorage.INSTANCE, cls, annotation)

        # Instance attributes belong to the runtime type, except mangled ones
        # which belong to the class whose body assigned them
        if (settings.search_instance_namespace
                and instance_namespace is not None
                and attribute in instance_namespace
                and (is_mangled or is_runtime_type)):
            declaring = cls if is_mangled else (_annotating_type(chain, attribute) or cls)
            value_type = _annotations_of(declaring).get(attribute)
            return MemberDescriptor(name, attribute, MemberKind.FIELD, MemberStorage.INSTANCE, declaring, value_type)

        if settings.include_static and raw is not _MISSING and _is_plain_class_attribute(raw):
            value_type = annotation if annotation is not _MISSING else None
            return MemberDescriptor(name, attribute, MemberKind.FIELD, MemberStorage.CLASS, cls, value_type)
    return None


def resolve_property(
    cls: type,
    name: str,
    settings: Optional[AccessorSettings] = None,
) -> Optional[MemberDescriptor]:
    """
    Find the property ``name`` on ``cls`` or its nearest ancestor.

    Args:
        cls: The runtime type to start from
        name: Property name; ``__x`` is also tried in mangled form
        settings: Overrides the context's AccessorSettings

    Returns:
        The MemberDescriptor of the most derived declaration, or None
    """
    settings = settings or get_accessor_settings()
    for chain_type in iter_type_chain(cls):
        member = _property_on(chain_type, name, settings)
        if member is not None:
            logger.debug(
                f"Resolved property {cls.__qualname__}.{name} -> "
                f"{chain_type.__qualname__}.{member.attribute} ({member.storage.value})"
            )
            return member
    logger.debug(f"No property {name!r} in chain of {cls.__qualname__}")
    return None


def resolve_field(
    cls: type,
    name: str,
    instance_namespace: Optional[Mapping[str, Any]] = None,
    settings: Optional[AccessorSettings] = None,
) -> Optional[MemberDescriptor]:
    """
    Find the field ``name`` on ``cls`` or its nearest ancestor.

    Args:
        cls: The runtime type to start from
        name: Field name; ``__x`` is also tried in mangled form
        instance_namespace: ``vars()`` of the target instance, if it has one.
            Undeclared instance attributes are only found through it.
        settings: Overrides the context's AccessorSettings

    Returns:
        The MemberDescriptor of the most derived declaration, or None
    """
    settings = settings or get_accessor_settings()
    chain = tuple(iter_type_chain(cls))
    for chain_type in chain:
        member = _field_on(chain_type, name, chain, instance_namespace, settings)
        if member is not None:
            logger.debug(
                f"Resolved field {cls.__qualname__}.{name} -> "
                f"{member.declaring_type.__qualname__}.{member.attribute} ({member.storage.value})"
            )
            return member
    logger.debug(f"No field {name!r} in chain of {cls.__qualname__}")
    return None
