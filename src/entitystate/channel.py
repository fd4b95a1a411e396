"""
Publish/subscribe channels and the streams exposed on top of them.

A Channel is a hot, multicast signal: publish() delivers synchronously to the
subscribers attached at that moment, in subscription order, and nothing is
buffered or replayed. A Stream is the read-only face handed to consumers. It
attaches lazily (only when subscribe() is called) and can be subscribed any
number of times, each subscription being independent.

    changed = Channel("property_changed")
    stream = changed.as_stream().filter(lambda name: name == "name")
    with stream.subscribe(print):
        changed.publish("name")   # prints "name"
    changed.publish("name")       # subscription disposed, nothing printed
"""
import logging
from typing import Callable, Generic, List, TypeVar

from entitystate.config import get_config
from entitystate.disposable import Disposable

logger = logging.getLogger(__name__)

T = TypeVar('T')
U = TypeVar('U')


class Subscription(Disposable):
    """Handle returned by subscribe(). Disposing it detaches the callback."""

    def __init__(self, unsubscribe: Callable[[], None]):
        self._unsubscribe = unsubscribe

    def dispose_managed(self) -> None:
        self._unsubscribe()


class Channel(Disposable, Generic[T]):
    """Hot multicast channel for one signal."""

    def __init__(self, name: str):
        self.name = name
        self._callbacks: List[Callable[[T], None]] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._callbacks)

    def subscribe(self, callback: Callable[[T], None]) -> Subscription:
        """Attach a callback. Only values published from now on are delivered."""
        self.throw_if_disposed()
        # Wrap so the same function can hold several independent subscriptions
        entry = lambda value: callback(value)
        self._callbacks.append(entry)

        def unsubscribe() -> None:
            if entry in self._callbacks:
                self._callbacks.remove(entry)

        return Subscription(unsubscribe)

    def publish(self, value: T) -> None:
        """Deliver value to every current subscriber, on the caller's thread."""
        self.throw_if_disposed()
        for callback in list(self._callbacks):
            try:
                callback(value)
            except Exception as e:
                if get_config().propagate_subscriber_errors:
                    raise
                logger.warning(f"Error in {self.name} subscriber: {e}")

    def as_stream(self) -> 'Stream[T]':
        self.throw_if_disposed()
        return Stream(self.subscribe)

    def dispose_managed(self) -> None:
        """Drop all subscribers. Later subscribe/publish calls raise."""
        self._callbacks.clear()


class Stream(Generic[T]):
    """Lazy, restartable view over a channel.

    Operators return new streams; nothing is attached to the source until
    subscribe() is called, and every subscribe() attaches anew.
    """

    def __init__(self, source: Callable[[Callable[[T], None]], Subscription]):
        self._source = source

    def subscribe(self, callback: Callable[[T], None]) -> Subscription:
        return self._source(callback)

    def filter(self, predicate: Callable[[T], bool]) -> 'Stream[T]':
        def source(callback: Callable[[T], None]) -> Subscription:
            return self._source(lambda value: callback(value) if predicate(value) else None)
        return Stream(source)

    def map(self, selector: Callable[[T], U]) -> 'Stream[U]':
        def source(callback: Callable[[U], None]) -> Subscription:
            return self._source(lambda value: callback(selector(value)))
        return Stream(source)
