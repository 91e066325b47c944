"""
Tests for member resolution.

Tests cover:
- Type chain order
- Private name mangling
- Property resolution (instance, cached, static, shadowing)
- Field resolution (slots, annotations, instance namespace, class attributes)
- Settings that narrow the search
"""

import pytest
from reflectaccess import (
    AccessorSettings,
    MemberKind,
    MemberStorage,
    iter_type_chain,
    mangle_private_name,
    resolve_field,
    resolve_property,
)

from models import Address, Base, Contractor, Derived, Employee, Person, Point, Point3D


class TestTypeChain:
    """Test the MRO walk order."""

    def test_most_derived_first(self):
        """Chain starts at the class and ends at object."""
        assert tuple(iter_type_chain(Contractor)) == (Contractor, Employee, Person, object)

    def test_rejects_instances(self):
        """Only types have a chain."""
        with pytest.raises(TypeError):
            list(iter_type_chain(Person("x")))


class TestMangling:
    """Test private name mangling."""

    def test_private_name(self):
        assert mangle_private_name("__id", Person) == "_Person__id"

    def test_dunder_untouched(self):
        """__dunder__ names are never mangled."""
        assert mangle_private_name("__init__", Person) == "__init__"

    def test_single_underscore_untouched(self):
        assert mangle_private_name("_salary", Employee) == "_salary"

    def test_leading_underscores_of_class_stripped(self):
        """The compiler strips the class name's leading underscores."""
        _Hidden = type("_Hidden", (), {})
        assert mangle_private_name("__x", _Hidden) == "_Hidden__x"


class TestResolveProperty:
    """Test property lookup over the chain."""

    def test_inherited_property(self):
        member = resolve_property(Employee, "display_name")
        assert member.kind is MemberKind.PROPERTY
        assert member.storage is MemberStorage.PROPERTY
        assert member.declaring_type is Person
        assert member.value_type is str
        assert not member.is_static

    def test_derived_declaration_shadows_base(self):
        """Employee._secret hides Person._secret."""
        assert resolve_property(Employee, "_secret").declaring_type is Employee
        assert resolve_property(Person, "_secret").declaring_type is Person

    def test_mangled_property(self):
        member = resolve_property(Employee, "__badge")
        assert member.name == "__badge"
        assert member.attribute == "_Employee__badge"

    def test_static_property(self):
        member = resolve_property(Employee, "headcount")
        assert member.storage is MemberStorage.CLASS_PROPERTY
        assert member.is_static
        assert member.value_type is int

    def test_cached_property(self):
        member = resolve_property(Employee, "initials")
        assert member.storage is MemberStorage.CACHED_PROPERTY
        assert member.value_type is str

    def test_fields_are_not_properties(self):
        assert resolve_property(Employee, "species") is None
        assert resolve_property(Employee, "_salary_cents") is None

    def test_methods_are_not_properties(self):
        assert resolve_property(Employee, "get_name") is None

    def test_missing(self):
        assert resolve_property(Employee, "Nonexistent") is None

    def test_exclude_static(self):
        """include_static=False skips classproperty."""
        settings = AccessorSettings(include_static=False)
        assert resolve_property(Employee, "headcount", settings) is None

    def test_fresh_descriptor_per_call(self):
        """Descriptors are rebuilt, never cached."""
        first = resolve_property(Employee, "display_name")
        second = resolve_property(Employee, "display_name")
        assert first == second
        assert first is not second


class TestResolveField:
    """Test field lookup over the chain."""

    def test_class_attribute_is_static_field(self):
        member = resolve_field(Employee, "species")
        assert member.kind is MemberKind.FIELD
        assert member.storage is MemberStorage.CLASS
        assert member.declaring_type is Person
        assert member.is_static

    def test_derived_class_attribute_shadows_base(self):
        assert resolve_field(Derived, "label").declaring_type is Derived
        assert resolve_field(Base, "label").declaring_type is Base

    def test_instance_attribute_needs_namespace(self):
        """Undeclared instance attributes are only visible through vars()."""
        employee = Employee("ada")
        assert resolve_field(Employee, "name") is None
        member = resolve_field(Employee, "name", vars(employee))
        assert member.storage is MemberStorage.INSTANCE
        assert member.declaring_type is Employee

    def test_mangled_instance_attribute_belongs_to_assigning_class(self):
        employee = Employee("ada")
        member = resolve_field(Employee, "__id", vars(employee))
        assert member.attribute == "_Person__id"
        assert member.declaring_type is Person

    def test_mangled_attribute_in_derived_class_wins(self):
        contractor = Contractor("alan", contract_id="c-1")
        member = resolve_field(Contractor, "__id", vars(contractor))
        assert member.attribute == "_Contractor__id"
        assert member.declaring_type is Contractor

    def test_slots(self):
        member = resolve_field(Point3D, "x")
        assert member.storage is MemberStorage.SLOT
        assert member.declaring_type is Point
        assert resolve_field(Point3D, "z").declaring_type is Point3D

    def test_dataclass_fields(self):
        member = resolve_field(Address, "street")
        assert member.storage is MemberStorage.INSTANCE
        assert member.value_type is str
        assert resolve_field(Address, "city").declaring_type is Address

    def test_classvar_is_static(self):
        member = resolve_field(Address, "kind")
        assert member.storage is MemberStorage.CLASS
        assert member.is_static

    def test_callables_are_not_fields(self):
        """Callables without __get__, such as builtins, are not static fields."""
        class Holder:
            formatter = len
            limit = 10

        assert resolve_field(Holder, "formatter") is None
        assert resolve_field(Holder, "limit").storage is MemberStorage.CLASS

    def test_properties_and_methods_are_not_fields(self):
        assert resolve_field(Employee, "display_name") is None
        assert resolve_field(Employee, "get_name") is None
        assert resolve_field(Employee, "headcount") is None

    def test_mangling_disabled(self):
        employee = Employee("ada")
        settings = AccessorSettings(mangle_private_names=False)
        assert resolve_field(Employee, "__id", vars(employee), settings) is None
        assert resolve_field(Employee, "_Person__id", vars(employee), settings) is not None

    def test_instance_namespace_disabled(self):
        employee = Employee("ada")
        settings = AccessorSettings(search_instance_namespace=False)
        assert resolve_field(Employee, "name", vars(employee), settings) is None

    def test_exclude_static(self):
        settings = AccessorSettings(include_static=False)
        assert resolve_field(Employee, "species", settings=settings) is None

    def test_instance_attribute_beats_class_attribute(self):
        """An instance value shadows a class default of the same name."""
        person = Person("grace")
        vars(person)['species'] = 'cyborg'
        member = resolve_field(Person, "species", vars(person))
        assert member.storage is MemberStorage.INSTANCE
