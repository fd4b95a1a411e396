"""Pytest configuration and shared fixtures."""
import pytest

from entitystate import default_registry, reset_config
from tests.entities import Person


@pytest.fixture(autouse=True)
def reset_framework_state():
    """Reset configuration and the default rule registry around each test."""
    reset_config()
    default_registry.clear()

    yield

    reset_config()
    default_registry.clear()


@pytest.fixture
def person_rules():
    """Rules for Person: name required, age non-negative."""
    rules = default_registry.for_type(Person)
    rules.add('name', 'Required', lambda p: bool(p.name))
    rules.add('age', 'Must not be negative', lambda p: p.age >= 0)
    return rules


@pytest.fixture
def person(person_rules):
    """A valid Person named 'x'."""
    person = Person()
    person.name = "x"
    return person


@pytest.fixture
def recorder():
    """Subscribe to a stream and collect what it delivers.

    Usage: received = recorder(entity.when_property_changed)
    """
    subscriptions = []

    def record(stream):
        received = []
        subscriptions.append(stream.subscribe(received.append))
        return received

    yield record

    for subscription in subscriptions:
        subscription.dispose()
