"""Tests for ObservableField declarations and Entity lifecycle."""
import pytest

from entitystate import DisposedStateError, Entity, ObservableField, observable_fields
from tests.entities import Bare, Employee, Person, Point


class TestObservableField:

    def test_defaults(self):
        person = Person()
        assert (person.name, person.age, person.tags) == ("", 0, [])

    def test_default_factory_gives_each_instance_its_own_value(self):
        first, second = Person(), Person()
        first.tags.append("a")
        assert second.tags == []

    def test_mutable_default_is_copied(self):
        class Tagged(Entity):
            labels = ObservableField(default=["base"])

        first, second = Tagged(), Tagged()
        first.labels.append("extra")
        assert second.labels == ["base"]

    def test_write_notifies_field_name(self, recorder):
        person = Person()
        changed = recorder(person.when_property_changed)
        person.age = 3
        assert changed[0] == 'age'

    def test_equal_write_is_silent(self, recorder):
        person = Person()
        changed = recorder(person.when_property_changed)
        person.age = 0
        assert changed == []

    def test_class_access_returns_descriptor(self):
        assert isinstance(Person.name, ObservableField)

    def test_fields_collected_base_first(self):
        assert list(observable_fields(Employee)) == ['name', 'age', 'tags', 'department']
        assert observable_fields(Bare) == {}


class TestStructuralEquality:

    def test_same_state(self):
        first, second = Person(), Person()
        first.name = second.name = "Ada"
        assert first.is_same_state(second)
        second.tags = ["x"]
        assert not first.is_same_state(second)

    def test_none_is_never_same(self):
        assert not Person().is_same_state(None)

    def test_entities_keep_identity_equality(self):
        """is_same_state is separate from ==, so entities stay hashable by identity."""
        first, second = Person(), Person()
        assert first.is_same_state(second)
        assert first != second
        assert len({first, second}) == 2

    def test_entity_without_state_must_override(self):
        with pytest.raises(NotImplementedError, match="is_same_state"):
            Bare().is_same_state(Bare())

    def test_custom_override(self):
        assert Point(1, 2).is_same_state(Point(1, 2))
        assert not Point(1, 2).is_same_state(Point(2, 1))


class TestLifecycle:

    def test_context_manager(self):
        with Person() as person:
            person.name = "Ada"
        assert person.is_disposed

    def test_dispose_twice_is_one_dispose(self):
        person = Person()
        person.dispose()
        person.dispose()
        assert person.is_disposed

    def test_everything_refused_after_dispose(self, person):
        person.dispose()
        with pytest.raises(DisposedStateError):
            person.name = "y"
        with pytest.raises(DisposedStateError):
            person.has_errors
        with pytest.raises(DisposedStateError):
            person.get_errors('name')
        with pytest.raises(DisposedStateError):
            person.get_error_text()
        with pytest.raises(DisposedStateError):
            person.when_errors_changed
        with pytest.raises(DisposedStateError):
            person.validate()
        with pytest.raises(DisposedStateError):
            person.set_property_with(lambda: False, lambda: None, 'name')

    def test_state_flags_refused_after_dispose(self, person):
        person.dispose()
        for flag in ('is_changed', 'is_new', 'is_change_tracking_enabled',
                     'is_editing', 'original', 'rules'):
            with pytest.raises(DisposedStateError):
                getattr(person, flag)

    def test_values_readable_after_dispose(self, person):
        person.dispose()
        assert person.name == "x"

    def test_dispose_drops_subscribers(self, recorder):
        person = Person()
        changed = recorder(person.when_property_changed)
        person.dispose()
        assert person._notifier.is_disposed
        assert changed == []
