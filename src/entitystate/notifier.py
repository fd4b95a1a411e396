"""
Property change notification engine.

PropertyNotifier raises "changing" / "changed" signals for an owner object and
exposes each as a Stream of property names. Collaborators that must react in
a fixed order (validation, change tracking) register hooks instead of
subscribing, so their position relative to the public broadcast is explicit:

    changing hooks -> "changing" broadcast -> mutation
                   -> "changed" broadcast -> changed hooks

A property name of None means "the whole object".
"""
import logging
from typing import Any, Callable, List, Optional, Tuple

from entitystate.channel import Channel, Stream
from entitystate.config import get_config
from entitystate.disposable import Disposable
from entitystate.exceptions import InvalidArgumentError

logger = logging.getLogger(__name__)

PropertyHook = Callable[[Optional[str]], None]


class PropertyNotifier(Disposable):
    """Change notifier bound to one owner object."""

    def __init__(self, owner: Any):
        self._owner = owner
        self._changing: Channel[Optional[str]] = Channel("property_changing")
        self._changed: Channel[Optional[str]] = Channel("property_changed")
        self._changing_hooks: List[PropertyHook] = []
        self._changed_hooks: List[PropertyHook] = []

    # === Streams ===

    @property
    def when_property_changing(self) -> Stream[Optional[str]]:
        self.throw_if_disposed()
        return self._changing.as_stream()

    @property
    def when_property_changed(self) -> Stream[Optional[str]]:
        self.throw_if_disposed()
        return self._changed.as_stream()

    # === Ordered hooks ===

    def add_changing_hook(self, hook: PropertyHook) -> None:
        """Run hook before every "changing" broadcast, after hooks added earlier."""
        self._changing_hooks.append(hook)

    def add_changed_hook(self, hook: PropertyHook) -> None:
        """Run hook after every "changed" broadcast, after hooks added earlier."""
        self._changed_hooks.append(hook)

    # === Raising ===

    def property_changing(self, *property_names: Optional[str]) -> None:
        """Raise "changing" for each name, in order."""
        self.throw_if_disposed()
        for name in property_names:
            self._check_property_name(name)
            for hook in self._changing_hooks:
                hook(name)
            self._changing.publish(name)

    def property_changed(self, *property_names: Optional[str]) -> None:
        """Raise "changed" for each name, in order."""
        self.throw_if_disposed()
        for name in property_names:
            self._check_property_name(name)
            self._changed.publish(name)
            for hook in self._changed_hooks:
                hook(name)

    def broadcast_changed(self, property_name: str) -> None:
        """Publish "changed" to subscribers only, bypassing hooks."""
        self.throw_if_disposed()
        self._changed.publish(property_name)

    # === Setting ===

    def set_property(self, field_name: str, new_value: Any, *property_names: str) -> bool:
        """Assign owner.<field_name> = new_value if it differs, notifying around it.

        Args:
            field_name: Backing attribute on the owner (e.g. '_name').
            new_value: Value to assign.
            *property_names: Names to notify. Defaults to field_name without
                leading underscores.

        Returns:
            True if the value changed, False if it was equal and nothing happened.
        """
        self.throw_if_disposed()
        if not property_names:
            property_names = (field_name.lstrip('_'),)
        current_value = getattr(self._owner, field_name)
        return self.set_property_with(
            lambda: current_value == new_value,
            lambda: setattr(self._owner, field_name, new_value),
            *property_names,
        )

    def set_property_with(
        self,
        equal: Callable[[], bool],
        action: Callable[[], None],
        *property_names: str,
    ) -> bool:
        """Run action if equal() is False, notifying every name around it.

        For computed or multi-field properties where there is no single
        backing attribute to compare.
        """
        self.throw_if_disposed()
        names = self._require_names(property_names)
        if equal():
            return False
        self.property_changing(*names)
        action()
        self.property_changed(*names)
        return True

    def dispose_managed(self) -> None:
        self._changing.dispose()
        self._changed.dispose()
        self._changing_hooks.clear()
        self._changed_hooks.clear()

    # === Internals ===

    @staticmethod
    def _require_names(property_names: Tuple[str, ...]) -> Tuple[str, ...]:
        if not property_names:
            raise InvalidArgumentError('property_names')
        return property_names

    def _check_property_name(self, property_name: Optional[str]) -> None:
        """Warn when a raised name is not an attribute of the owner's type."""
        if not property_name or not get_config().check_property_names:
            return
        if not hasattr(type(self._owner), property_name):
            logger.warning(
                f"Property '{property_name}' raised by {type(self._owner).__name__} "
                f"does not exist on that type"
            )
