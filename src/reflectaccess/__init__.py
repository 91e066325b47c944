"""
Reflective member access for arbitrary Python objects.

Reads and writes properties and fields by name, wherever they are declared
in the object's type chain and whatever their visibility.

Quick Start:
    >>> from reflectaccess import get_field_value, set_property_value
    >>>
    >>> class Person:
    ...     def __init__(self):
    ...         self.__id = 7
    >>>
    >>> class Employee(Person):
    ...     pass
    >>>
    >>> get_field_value(Employee(), "__id")   # mangled as _Person__id
    7

Resolution:
    The search starts at type(target) and follows its MRO. The first class
    declaring a member of the requested name and kind wins, so a derived
    declaration hides its ancestors'. Properties and fields are searched
    separately.

Modules:
    - accessor: get/set property and field values
    - member_resolver: type chain walk and member descriptors
    - expressions: property-name extraction from accessor lambdas
    - descriptors: classproperty (static properties)
    - config: contextvars-scoped resolution settings
    - errors: error taxonomy
"""

# Accessors
from reflectaccess.accessor import (
    get_property_value,
    set_property_value,
    get_field_value,
    set_field_value,
    ReflectiveAccessMixin,
)

# Resolution
from reflectaccess.member_resolver import (
    MemberDescriptor,
    MemberKind,
    MemberStorage,
    iter_type_chain,
    mangle_private_name,
    resolve_field,
    resolve_property,
)

# Expressions
from reflectaccess.expressions import extract_property_name

# Descriptors
from reflectaccess.descriptors import classproperty

# Configuration
from reflectaccess.config import (
    AccessorSettings,
    accessor_context,
    get_accessor_settings,
    set_default_accessor_settings,
    reset_accessor_settings,
)

# Errors
from reflectaccess.errors import (
    ReflectAccessError,
    InvalidArgumentError,
    MemberNotFoundError,
    InvalidExpressionShapeError,
    MemberTypeError,
    ShapeViolation,
)

__all__ = [
    # Accessors
    'get_property_value',
    'set_property_value',
    'get_field_value',
    'set_field_value',
    'ReflectiveAccessMixin',
    # Resolution
    'MemberDescriptor',
    'MemberKind',
    'MemberStorage',
    'iter_type_chain',
    'mangle_private_name',
    'resolve_field',
    'resolve_property',
    # Expressions
    'extract_property_name',
    # Descriptors
    'classproperty',
    # Configuration
    'AccessorSettings',
    'accessor_context',
    'get_accessor_settings',
    'set_default_accessor_settings',
    'reset_accessor_settings',
    # Errors
    'ReflectAccessError',
    'InvalidArgumentError',
    'MemberNotFoundError',
    'InvalidExpressionShapeError',
    'MemberTypeError',
    'ShapeViolation',
]

__version__ = '1.0.0'
__description__ = 'Reflective property and field access across the type chain'
