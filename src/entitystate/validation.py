"""
Error aggregation for rule-based validation.

ErrorAggregator keeps a map of property name -> error list for one entity and
refreshes it from the entity's RuleCollection whenever it is told a property
changed. It is registered as a "changed" hook on the entity's notifier, so it
always sees the new value.
"""
import logging
from typing import Any, Dict, FrozenSet, Iterable, List, Optional

from entitystate.channel import Channel, Stream
from entitystate.disposable import Disposable
from entitystate.notifier import PropertyNotifier
from entitystate.rules import RuleCollection

logger = logging.getLogger(__name__)

HAS_ERRORS_PROPERTY = 'has_errors'


class ErrorAggregator(Disposable):
    """Per-entity error map maintained from rule evaluation.

    The map is built lazily: on the first has_errors / get_errors() call or
    the first property notification, whichever comes first. Properties with
    no failing rules have no entry at all, so has_errors is just "map is
    non-empty".

    Notifications for ignored_properties (the owner's own bookkeeping flags)
    neither re-validate nor re-announce has_errors.
    """

    def __init__(
        self,
        owner: Any,
        notifier: PropertyNotifier,
        rules: RuleCollection,
        ignored_properties: Iterable[str] = (),
    ):
        self._owner = owner
        self._notifier = notifier
        self.rules = rules
        self._ignored_properties: FrozenSet[str] = frozenset(ignored_properties)
        self._errors: Optional[Dict[str, List[Any]]] = None
        self._errors_changed: Channel[str] = Channel("errors_changed")

    @property
    def when_errors_changed(self) -> Stream[str]:
        self.throw_if_disposed()
        return self._errors_changed.as_stream()

    @property
    def has_errors(self) -> bool:
        self.throw_if_disposed()
        return bool(self._ensure_errors())

    def get_errors(self, property_name: Optional[str] = None) -> List[Any]:
        """Errors for one property, or all errors flattened when no name is given."""
        self.throw_if_disposed()
        errors = self._ensure_errors()
        if not property_name:
            return [error for property_errors in errors.values() for error in property_errors]
        return list(errors.get(property_name, []))

    def get_error_text(self, property_name: Optional[str] = None) -> str:
        """Errors joined into a single message, '' when there are none."""
        return ". ".join(str(error) for error in self.get_errors(property_name))

    def on_property_changed(self, property_name: Optional[str]) -> None:
        """Notifier hook: re-validate property_name, then announce has_errors."""
        if property_name in self._ignored_properties:
            return
        if self._errors is None:
            # First build already evaluated every rule
            self._ensure_errors()
        elif not property_name:
            self.validate_all()
        else:
            self.validate(property_name)
        self._notifier.broadcast_changed(HAS_ERRORS_PROPERTY)

    def validate_all(self) -> None:
        """Re-evaluate every property that has rules."""
        for property_name in self.rules.property_names():
            self.validate(property_name)

    def validate(self, property_name: str) -> None:
        """Re-evaluate rules for one property and update its entry."""
        errors = self._ensure_errors()
        property_errors = self.rules.apply(self._owner, property_name)
        if property_errors:
            errors[property_name] = property_errors
            logger.debug(f"Errors for {type(self._owner).__name__}.{property_name}: {property_errors}")
            self._errors_changed.publish(property_name)
        elif property_name in errors:
            del errors[property_name]
            logger.debug(f"Errors cleared for {type(self._owner).__name__}.{property_name}")
            self._errors_changed.publish(property_name)

    def dispose_managed(self) -> None:
        self._errors_changed.dispose()

    def _ensure_errors(self) -> Dict[str, List[Any]]:
        if self._errors is None:
            self._errors = {}
            self.validate_all()
        return self._errors
