"""
Scoped lifecycle primitive.

Disposable guarantees exactly-once release and lets every other component
refuse to work once released.
"""
import logging

from entitystate.exceptions import DisposedStateError

logger = logging.getLogger(__name__)


class Disposable:
    """Base class with idempotent dispose() and a post-disposal guard.

    Subclasses release what they own in dispose_managed(). Public operations
    call throw_if_disposed() before touching internal state.

    Usable as a context manager:
        with Person() as person:
            ...
    """

    _disposed: bool = False

    @property
    def is_disposed(self) -> bool:
        return self._disposed

    def dispose(self) -> None:
        """Release owned resources. Second and later calls do nothing."""
        if self._disposed:
            return
        self.dispose_managed()
        self._disposed = True
        logger.debug(f"Disposed {type(self).__name__}")

    def dispose_managed(self) -> None:
        """Release managed resources. Called once, from dispose()."""

    def throw_if_disposed(self) -> None:
        if self._disposed:
            raise DisposedStateError(type(self).__name__)

    def __enter__(self):
        self.throw_if_disposed()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()
