"""Pytest configuration and shared fixtures."""
import uuid

import pytest

from reflectaccess import reset_accessor_settings
from models import Address, Contractor, Employee, Person, Point3D


@pytest.fixture(autouse=True)
def reset_settings():
    """Start and finish every test with the built-in accessor settings."""
    reset_accessor_settings()
    yield
    reset_accessor_settings()


@pytest.fixture(autouse=True)
def reset_class_state(monkeypatch):
    """Restore class-level state that static writes may change."""
    monkeypatch.setattr(Person, 'species', 'human')
    monkeypatch.setattr(Employee, '_headcount', 0)


@pytest.fixture
def person_id():
    return uuid.UUID('12345678-1234-5678-1234-567812345678')


@pytest.fixture
def person(person_id):
    return Person("grace hopper", person_id=person_id)


@pytest.fixture
def employee(person_id):
    return Employee("ada lovelace", salary=5000, person_id=person_id)


@pytest.fixture
def contractor():
    return Contractor("alan turing", contract_id="contract-1")


@pytest.fixture
def point():
    return Point3D(1, 2, 3)


@pytest.fixture
def address():
    return Address("Main St")
