"""
Static (class-level) property descriptor.

Python's ``property`` is always bound to an instance. ``classproperty`` is
its static counterpart: the getter and setter receive the owning class, and
reading works through both the class and its instances.

    class Employee:
        _headcount = 0

        @classproperty
        def headcount(cls):
            return cls._headcount

        @headcount.setter
        def headcount(cls, value):
            cls._headcount = value

Assigning ``Employee.headcount = 3`` replaces the descriptor (there is no
metaclass hook); use set_property_value() or the setter directly.
"""

from typing import Any, Callable, Optional


class classproperty:
    """Property whose accessors take the class instead of the instance."""

    def __init__(self, fget: Optional[Callable] = None, fset: Optional[Callable] = None, doc: Optional[str] = None):
        self.fget = fget
        self.fset = fset
        self.__doc__ = doc if doc is not None else getattr(fget, '__doc__', None)
        self.__name__ = getattr(fget, '__name__', None)

    def __set_name__(self, owner, name):
        self.__name__ = name

    def __get__(self, instance, owner=None):
        if owner is None:
            owner = type(instance)
        return self.get_value(owner)

    def get_value(self, owner: type) -> Any:
        if self.fget is None:
            raise AttributeError(f"classproperty '{self.__name__}' has no getter")
        return self.fget(owner)

    def set_value(self, owner: type, value: Any) -> None:
        if self.fset is None:
            raise AttributeError(f"classproperty '{self.__name__}' has no setter")
        self.fset(owner, value)

    def getter(self, fget: Callable) -> 'classproperty':
        return type(self)(fget, self.fset, self.__doc__)

    def setter(self, fset: Callable) -> 'classproperty':
        return type(self)(self.fget, fset, self.__doc__)
