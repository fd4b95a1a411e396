"""
Dirty-state tracking on top of an EditSession.

While tracking is enabled, the first "changing" notification snapshots the
entity (implicit begin_edit) and every "changed" notification recomputes
is_changed by comparing the entity against that snapshot.

Flag lifecycle:
- is_new: True until the first accept_changes()
- accept_changes() while new: is_new=False, tracking enabled
- accept_changes() while dirty: end_edit(), is_changed=False
- cancel_edit(): snapshot restored, is_changed=False
"""
import logging
from typing import Any, FrozenSet, Optional

from entitystate.disposable import Disposable
from entitystate.editing import EditSession
from entitystate.notifier import PropertyNotifier
from entitystate.validation import HAS_ERRORS_PROPERTY

logger = logging.getLogger(__name__)

IS_CHANGED_PROPERTY = 'is_changed'
IS_NEW_PROPERTY = 'is_new'
IS_CHANGE_TRACKING_ENABLED_PROPERTY = 'is_change_tracking_enabled'

# Bookkeeping properties never start an edit or affect the dirty flag
UNTRACKED_PROPERTIES: FrozenSet[str] = frozenset({
    IS_CHANGED_PROPERTY,
    IS_NEW_PROPERTY,
    IS_CHANGE_TRACKING_ENABLED_PROPERTY,
    HAS_ERRORS_PROPERTY,
})


class ChangeTracker(Disposable):
    """Tracking flags and dirty computation for one entity.

    The owner must provide is_same_state(other) -> bool, a structural
    comparison of its state against another instance of its type.
    """

    def __init__(self, owner: Any, notifier: PropertyNotifier, session: EditSession):
        self._owner = owner
        self._notifier = notifier
        self._session = session
        self._is_changed = False
        self._is_new = True
        self._is_change_tracking_enabled = False

    # === Flags ===

    @property
    def is_change_tracking_enabled(self) -> bool:
        return self._is_change_tracking_enabled

    @is_change_tracking_enabled.setter
    def is_change_tracking_enabled(self, value: bool) -> None:
        self._set_flag('_is_change_tracking_enabled', value, IS_CHANGE_TRACKING_ENABLED_PROPERTY)

    @property
    def is_changed(self) -> bool:
        return self._is_changed

    @property
    def is_new(self) -> bool:
        return self._is_new

    # === Notifier hooks ===

    def on_property_changing(self, property_name: Optional[str]) -> None:
        if self._is_tracked(property_name):
            self._session.begin_edit()

    def on_property_changed(self, property_name: Optional[str]) -> None:
        if self._is_tracked(property_name):
            self._set_flag('_is_changed', self._compute_is_changed(), IS_CHANGED_PROPERTY)

    # === Operations ===

    def accept_changes(self) -> None:
        """Commit: first save of a new entity, or end of a dirty edit."""
        self.throw_if_disposed()
        if self._is_new:
            self._set_flag('_is_new', False, IS_NEW_PROPERTY)
            self.is_change_tracking_enabled = True
            logger.debug(f"Accepted new {type(self._owner).__name__}, tracking enabled")
        elif self._is_changed:
            self._session.end_edit()
            self._set_flag('_is_changed', False, IS_CHANGED_PROPERTY)
            logger.debug(f"Accepted changes to {type(self._owner).__name__}")

    def after_cancel_edit(self) -> None:
        """Clear the dirty flag once the session has restored the snapshot."""
        self._set_flag('_is_changed', False, IS_CHANGED_PROPERTY)

    # === Internals ===

    def _is_tracked(self, property_name: Optional[str]) -> bool:
        return self._is_change_tracking_enabled and property_name not in UNTRACKED_PROPERTIES

    def _compute_is_changed(self) -> bool:
        original = self._session.original
        if original is None:
            return False
        return not self._owner.is_same_state(original)

    def _set_flag(self, field_name: str, value: bool, property_name: str) -> None:
        self.throw_if_disposed()
        self._notifier.set_property_with(
            lambda: getattr(self, field_name) == value,
            lambda: setattr(self, field_name, value),
            property_name,
        )
