"""
Transactional editing via snapshots.

EditSession holds an entity's `original` snapshot between begin_edit() and the
matching cancel_edit() / end_edit(). Snapshots are full clones produced by the
entity's own create() + load(), so each entity type decides what "its state"
is.

    session.begin_edit()     # Clean -> Editing, snapshot taken
    person.name = "changed"
    session.cancel_edit()    # Editing -> Clean, snapshot loaded back
"""
import logging
from typing import Any, Optional

from entitystate.channel import Channel, Stream
from entitystate.disposable import Disposable

logger = logging.getLogger(__name__)


class EditSession(Disposable):
    """Begin/cancel/end editing state machine for one entity.

    The owner must provide:
    - create(): a fresh default instance of its own type
    - load(other): copy state from another instance of its type
    """

    def __init__(self, owner: Any):
        self._owner = owner
        self._original: Optional[Any] = None
        self._begin_editing: Channel[None] = Channel("begin_editing")
        self._cancel_editing: Channel[None] = Channel("cancel_editing")
        self._end_editing: Channel[None] = Channel("end_editing")

    @property
    def original(self) -> Optional[Any]:
        """Snapshot taken by begin_edit(), None when not editing."""
        return self._original

    @property
    def is_editing(self) -> bool:
        return self._original is not None

    @property
    def when_begin_editing(self) -> Stream[None]:
        self.throw_if_disposed()
        return self._begin_editing.as_stream()

    @property
    def when_cancel_editing(self) -> Stream[None]:
        self.throw_if_disposed()
        return self._cancel_editing.as_stream()

    @property
    def when_end_editing(self) -> Stream[None]:
        self.throw_if_disposed()
        return self._end_editing.as_stream()

    def clone(self) -> Any:
        """New instance of the owner's type loaded from the owner."""
        self.throw_if_disposed()
        clone = self._owner.create()
        clone.load(self._owner)
        return clone

    def begin_edit(self) -> None:
        """Snapshot the owner. Does nothing if a snapshot is already held."""
        self.throw_if_disposed()
        if self._original is not None:
            return
        self._original = self.clone()
        logger.debug(f"Begin edit: {type(self._owner).__name__}")
        self._begin_editing.publish(None)

    def cancel_edit(self) -> None:
        """Restore the owner from the snapshot. Does nothing if not editing."""
        self.throw_if_disposed()
        if self._original is None:
            return
        # Snapshot stays held while loading so nested begin_edit() calls are no-ops
        self._owner.load(self._original)
        self._discard_original()
        logger.debug(f"Cancel edit: {type(self._owner).__name__}")
        self._cancel_editing.publish(None)

    def end_edit(self) -> None:
        """Commit current values by dropping any snapshot."""
        self.throw_if_disposed()
        self._discard_original()
        logger.debug(f"End edit: {type(self._owner).__name__}")
        self._end_editing.publish(None)

    def dispose_managed(self) -> None:
        self._discard_original()
        self._begin_editing.dispose()
        self._cancel_editing.dispose()
        self._end_editing.dispose()

    def _discard_original(self) -> None:
        original, self._original = self._original, None
        if isinstance(original, Disposable):
            original.dispose()
