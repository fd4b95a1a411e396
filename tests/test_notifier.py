"""Tests for property change notification."""
import logging

import pytest

from entitystate import DisposedStateError, InvalidArgumentError, configure
from tests.entities import Counter, Point


@pytest.fixture
def counter():
    return Counter()


def test_equal_write_is_silent(counter, recorder):
    """Writing the current value raises nothing and reports unchanged."""
    changing = recorder(counter.when_property_changing)
    changed = recorder(counter.when_property_changed)

    assert counter.set_property('_count', 0) is False

    assert changing == []
    assert changed == []


def test_changing_before_and_changed_after_mutation(counter):
    """Subscribers see the old value on "changing" and the new one on "changed"."""
    events = []
    counter.when_property_changing.subscribe(lambda name: events.append(("changing", name, counter.count)))
    counter.when_property_changed.subscribe(lambda name: events.append(("changed", name, counter.count)))

    counter.count = 5

    assert events == [("changing", "count", 0), ("changed", "count", 5)]


def test_set_property_returns_true_on_change(counter):
    assert counter.set_property('_count', 2) is True
    assert counter.count == 2


def test_set_property_with_several_names(counter, recorder):
    """One logical mutation notifies every name, each in order."""
    changing = recorder(counter.when_property_changing)
    changed = recorder(counter.when_property_changed)

    counter.set_property('_count', 3, 'count', 'doubled')

    assert changing == ['count', 'doubled']
    assert changed == ['count', 'doubled']
    assert counter.doubled == 6


def test_set_property_with_equality_and_action(recorder):
    point = Point(1, 2)
    changed = recorder(point.when_property_changed)

    assert point.move_to(1, 2) is False
    assert changed == []

    assert point.move_to(3, 4) is True
    assert (point.x, point.y) == (3, 4)
    assert [name for name in changed if name in ('x', 'y')] == ['x', 'y']


def test_set_property_with_requires_names(counter):
    with pytest.raises(InvalidArgumentError):
        counter.set_property_with(lambda: False, lambda: None)


def test_batch_raise_in_order(counter, recorder):
    changed = recorder(counter.when_property_changed)
    counter.property_changed('count', 'doubled')
    assert changed == ['count', 'doubled']


def test_hot_stream_misses_earlier_emissions(counter, recorder):
    counter.count = 1
    changed = recorder(counter.when_property_changed)
    counter.count = 2
    assert changed == ['count']


def test_multiple_subscribers(counter, recorder):
    first = recorder(counter.when_property_changed)
    second = recorder(counter.when_property_changed)
    counter.count = 1
    assert first == second == ['count']


class TestPropertyNameCheck:
    """Raised names are checked against the owner's type (non-fatal)."""

    def test_unknown_name_logs_warning(self, counter, caplog):
        caplog.set_level(logging.WARNING)
        counter.property_changed('missing')
        assert "missing" in caplog.text

    def test_known_name_is_quiet(self, counter, caplog):
        caplog.set_level(logging.WARNING)
        counter.property_changed('count', None)
        assert caplog.text == ""

    def test_check_can_be_disabled(self, counter, caplog):
        caplog.set_level(logging.WARNING)
        configure(check_property_names=False)
        counter.property_changed('missing')
        assert caplog.text == ""


class TestDisposal:
    """Every notifier operation is refused after disposal."""

    def test_operations_raise_after_dispose(self, counter):
        counter.dispose()
        with pytest.raises(DisposedStateError):
            counter.count = 1
        with pytest.raises(DisposedStateError):
            counter.property_changed('count')
        with pytest.raises(DisposedStateError):
            counter.property_changing('count')
        with pytest.raises(DisposedStateError):
            counter.when_property_changed
        with pytest.raises(DisposedStateError):
            counter.when_property_changing

    def test_dispose_twice(self, counter):
        counter.dispose()
        counter.dispose()
        assert counter.is_disposed
