"""
Entity base classes.

ObservableObject gives any class property change notification.
Entity composes notification, validation, editing and change tracking, wiring
the components to the notifier in the order every property write must follow:

    1. ChangeTracker.on_property_changing   implicit begin_edit()
    2. "changing" broadcast
    3. field assignment
    4. "changed" broadcast
    5. ErrorAggregator.on_property_changed  rules re-evaluated, has_errors broadcast
                                           (skipped for the tracking flags)
    6. ChangeTracker.on_property_changed    is_changed recomputed

Declaring an entity:

    class Person(Entity):
        name = ObservableField(default="")
        tags = ObservableField(default_factory=list)

    default_registry.for_type(Person).add('name', 'Required', lambda p: bool(p.name))
"""
import copy
import logging
from typing import Any, Callable, Dict, List, Optional, TypeVar

from entitystate.channel import Stream
from entitystate.disposable import Disposable
from entitystate.editing import EditSession
from entitystate.notifier import PropertyNotifier
from entitystate.rules import RuleCollection, default_registry
from entitystate.tracking import UNTRACKED_PROPERTIES, ChangeTracker
from entitystate.validation import ErrorAggregator

logger = logging.getLogger(__name__)

E = TypeVar('E', bound='Entity')

_MISSING = object()


class ObservableField:
    """Descriptor for a property that notifies on change.

    Values live in the instance under '_<name>'; writes go through the
    owner's set_property() so unchanged writes raise nothing.
    """

    def __init__(self, default: Any = None, default_factory: Optional[Callable[[], Any]] = None):
        self.default = default
        self.default_factory = default_factory
        self.name = ''
        self.field_name = ''

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name
        self.field_name = f'_{name}'

    def make_default(self) -> Any:
        if self.default_factory is not None:
            return self.default_factory()
        return copy.deepcopy(self.default)

    def __get__(self, instance: Any, owner: type) -> Any:
        if instance is None:
            return self
        value = instance.__dict__.get(self.field_name, _MISSING)
        if value is _MISSING:
            value = self.make_default()
            instance.__dict__[self.field_name] = value
        return value

    def __set__(self, instance: 'ObservableObject', value: Any) -> None:
        # Materialize the default so set_property has something to compare against
        self.__get__(instance, type(instance))
        instance.set_property(self.field_name, value, self.name)


def observable_fields(cls: type) -> Dict[str, ObservableField]:
    """ObservableFields declared on cls and its bases, base classes first."""
    fields: Dict[str, ObservableField] = {}
    for klass in reversed(cls.__mro__):
        for name, value in vars(klass).items():
            if isinstance(value, ObservableField):
                fields[name] = value
    return fields


class ObservableObject(Disposable):
    """Object raising property changing/changed notifications."""

    def __init__(self):
        self._notifier = PropertyNotifier(self)

    @property
    def when_property_changing(self) -> Stream[Optional[str]]:
        self.throw_if_disposed()
        return self._notifier.when_property_changing

    @property
    def when_property_changed(self) -> Stream[Optional[str]]:
        self.throw_if_disposed()
        return self._notifier.when_property_changed

    def property_changing(self, *property_names: Optional[str]) -> None:
        self.throw_if_disposed()
        self._notifier.property_changing(*property_names)

    def property_changed(self, *property_names: Optional[str]) -> None:
        self.throw_if_disposed()
        self._notifier.property_changed(*property_names)

    def set_property(self, field_name: str, new_value: Any, *property_names: str) -> bool:
        """Assign self.<field_name> if it differs. See PropertyNotifier.set_property."""
        self.throw_if_disposed()
        return self._notifier.set_property(field_name, new_value, *property_names)

    def set_property_with(self, equal: Callable[[], bool], action: Callable[[], None], *property_names: str) -> bool:
        self.throw_if_disposed()
        return self._notifier.set_property_with(equal, action, *property_names)

    def dispose_managed(self) -> None:
        self._notifier.dispose()


class Entity(ObservableObject):
    """Validating, editable, change-tracked entity.

    Subclasses either declare ObservableFields (load / is_same_state are then
    derived from them) or override load() and is_same_state() themselves.
    create() must return a default instance; override it when __init__
    requires arguments.

    Once disposed, every operation, stream and state flag (has_errors,
    is_changed, is_new, is_editing, original, rules) raises
    DisposedStateError. Declared field values stay readable since they are
    plain instance data.
    """

    def __init__(self, rules: Optional[RuleCollection] = None):
        super().__init__()
        if rules is None:
            rules = default_registry.for_type(type(self))
        self._validation = ErrorAggregator(self, self._notifier, rules, UNTRACKED_PROPERTIES)
        self._editing = EditSession(self)
        self._tracking = ChangeTracker(self, self._notifier, self._editing)

        # Hook order is the write-path ordering; do not reorder
        self._notifier.add_changing_hook(self._tracking.on_property_changing)
        self._notifier.add_changed_hook(self._validation.on_property_changed)
        self._notifier.add_changed_hook(self._tracking.on_property_changed)

    # === Collaborator operations supplied by the entity type ===

    def create(self: E) -> E:
        """Construct a default instance of this entity's type, sharing its rules."""
        instance = type(self)()
        instance._validation.rules = self.rules
        return instance

    def load(self: E, other: E) -> None:
        """Copy state from other into self, through the notifying setters."""
        for name in self._require_fields('load'):
            setattr(self, name, copy.deepcopy(getattr(other, name)))

    def is_same_state(self: E, other: E) -> bool:
        """Structural equality used for dirty tracking."""
        if other is None:
            return False
        return all(
            getattr(self, name) == getattr(other, name)
            for name in self._require_fields('is_same_state')
        )

    # === Validation ===

    @property
    def rules(self) -> RuleCollection:
        self.throw_if_disposed()
        return self._validation.rules

    @property
    def when_errors_changed(self) -> Stream[str]:
        self.throw_if_disposed()
        return self._validation.when_errors_changed

    @property
    def has_errors(self) -> bool:
        self.throw_if_disposed()
        return self._validation.has_errors

    def get_errors(self, property_name: Optional[str] = None) -> List[Any]:
        self.throw_if_disposed()
        return self._validation.get_errors(property_name)

    def get_error_text(self, property_name: Optional[str] = None) -> str:
        self.throw_if_disposed()
        return self._validation.get_error_text(property_name)

    def validate(self) -> None:
        """Re-validate the whole object."""
        self.property_changed(None)

    # === Editing ===

    @property
    def original(self: E) -> Optional[E]:
        self.throw_if_disposed()
        return self._editing.original

    @property
    def is_editing(self) -> bool:
        self.throw_if_disposed()
        return self._editing.is_editing

    @property
    def when_begin_editing(self) -> Stream[None]:
        self.throw_if_disposed()
        return self._editing.when_begin_editing

    @property
    def when_cancel_editing(self) -> Stream[None]:
        self.throw_if_disposed()
        return self._editing.when_cancel_editing

    @property
    def when_end_editing(self) -> Stream[None]:
        self.throw_if_disposed()
        return self._editing.when_end_editing

    def clone(self: E) -> E:
        self.throw_if_disposed()
        return self._editing.clone()

    def begin_edit(self) -> None:
        self.throw_if_disposed()
        self._editing.begin_edit()

    def cancel_edit(self) -> None:
        self.throw_if_disposed()
        self._editing.cancel_edit()
        self._tracking.after_cancel_edit()

    def end_edit(self) -> None:
        self.throw_if_disposed()
        self._editing.end_edit()

    # === Change tracking ===

    @property
    def is_change_tracking_enabled(self) -> bool:
        self.throw_if_disposed()
        return self._tracking.is_change_tracking_enabled

    @is_change_tracking_enabled.setter
    def is_change_tracking_enabled(self, value: bool) -> None:
        self.throw_if_disposed()
        self._tracking.is_change_tracking_enabled = value

    @property
    def is_changed(self) -> bool:
        self.throw_if_disposed()
        return self._tracking.is_changed

    @property
    def is_new(self) -> bool:
        self.throw_if_disposed()
        return self._tracking.is_new

    def accept_changes(self) -> None:
        self.throw_if_disposed()
        self._tracking.accept_changes()

    def reject_changes(self) -> None:
        self.cancel_edit()

    def dispose_managed(self) -> None:
        self._tracking.dispose()
        self._editing.dispose()
        self._validation.dispose()
        super().dispose_managed()

    def _require_fields(self, operation: str) -> List[str]:
        names = list(observable_fields(type(self)))
        if not names:
            raise NotImplementedError(
                f"{type(self).__name__} declares no ObservableFields; override {operation}()"
            )
        return names
