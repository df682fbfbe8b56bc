"""Live-reload fan-out to connected viewers.

Each connected viewer is a ``Subscriber`` wrapping an ``EventSink``.  A
subscriber moves through ``CONNECTING -> OPEN -> CLOSED``; CLOSED is
terminal.  Entering OPEN sends the ``connected`` acknowledgement.

``ChangeNotifier.broadcast`` delivers every event to every OPEN
subscriber in emission order.  A sink that raises is moved to CLOSED and
dropped after the loop; it never interrupts delivery to the others.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from enum import Enum
from typing import Protocol, runtime_checkable

from slidef.models.events import ChangeEvent, LiveReloadEvent

logger = logging.getLogger(__name__)


class SubscriberState(str, Enum):
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


VALID_TRANSITIONS: dict[SubscriberState, set[SubscriberState]] = {
    SubscriberState.CONNECTING: {SubscriberState.OPEN, SubscriberState.CLOSED},
    SubscriberState.OPEN: {SubscriberState.CLOSED},
    SubscriberState.CLOSED: set(),  # terminal
}


class InvalidTransitionError(RuntimeError):
    """Raised when a subscriber is moved along a transition that does not exist."""


class SinkClosedError(RuntimeError):
    """Raised by a sink that can no longer accept events."""


@runtime_checkable
class EventSink(Protocol):
    """Anything that can take a live-reload event.

    ``send`` may raise for any reason; the subscriber treats that as the
    remote end having gone away.
    """

    def send(self, event: LiveReloadEvent) -> None:
        ...


class QueueSink:
    """Unbounded queue feeding one streaming response.

    The producer side (``send``) never blocks.  The streaming response
    awaits ``receive`` and calls ``close`` when the client disconnects.
    """

    def __init__(self) -> None:
        self._queue: asyncio.Queue[LiveReloadEvent] = asyncio.Queue()
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, event: LiveReloadEvent) -> None:
        if self._closed:
            raise SinkClosedError("sink is closed")
        self._queue.put_nowait(event)

    async def receive(self) -> LiveReloadEvent:
        return await self._queue.get()

    def close(self) -> None:
        self._closed = True


class Subscriber:
    """One live-reload connection and its lifecycle state."""

    def __init__(self, sink: EventSink, subscriber_id: str | None = None) -> None:
        self.subscriber_id = subscriber_id or f"sub-{uuid.uuid4().hex[:8]}"
        self._sink = sink
        self._state = SubscriberState.CONNECTING

    @property
    def state(self) -> SubscriberState:
        return self._state

    @property
    def is_open(self) -> bool:
        return self._state is SubscriberState.OPEN

    def _transition(self, target: SubscriberState) -> None:
        if target not in VALID_TRANSITIONS[self._state]:
            raise InvalidTransitionError(
                f"Cannot move {self.subscriber_id} from "
                f"{self._state.value} to {target.value}"
            )
        self._state = target

    def open(self) -> bool:
        """Enter OPEN and send the connected acknowledgement."""
        self._transition(SubscriberState.OPEN)
        return self.deliver(LiveReloadEvent.connected())

    def deliver(self, event: LiveReloadEvent) -> bool:
        """Attempt one write.

        Returns True on success.  A failed write moves the subscriber to
        CLOSED and returns False.  Writes to a non-OPEN subscriber are not
        attempted.
        """
        if self._state is not SubscriberState.OPEN:
            return False
        try:
            self._sink.send(event)
        except Exception as exc:  # noqa: BLE001
            logger.info(
                "Subscriber %s write failed, closing: %s", self.subscriber_id, exc
            )
            self._transition(SubscriberState.CLOSED)
            return False
        return True

    def close(self) -> None:
        if self._state is not SubscriberState.CLOSED:
            self._transition(SubscriberState.CLOSED)


class ChangeNotifier:
    """Owns the set of live-reload subscribers and broadcasts to them."""

    def __init__(self) -> None:
        self._subscribers: list[Subscriber] = []

    # ------------------------------------------------------------------
    # Membership
    # ------------------------------------------------------------------

    def connect(self, sink: EventSink) -> Subscriber:
        """Register a sink, open it and return its subscriber."""
        subscriber = Subscriber(sink)
        self._subscribers.append(subscriber)
        if subscriber.open():
            logger.debug("Subscriber %s connected", subscriber.subscriber_id)
        else:
            self._prune()
        return subscriber

    def disconnect(self, subscriber: Subscriber) -> None:
        """Close a subscriber and drop it.  Safe to call more than once."""
        subscriber.close()
        self._prune()
        logger.debug("Subscriber %s disconnected", subscriber.subscriber_id)

    @property
    def subscribers(self) -> list[Subscriber]:
        """Snapshot of the currently open subscribers."""
        return [s for s in self._subscribers if s.is_open]

    def close_all(self) -> None:
        for subscriber in self._subscribers:
            subscriber.close()
        self._subscribers.clear()

    # ------------------------------------------------------------------
    # Broadcast
    # ------------------------------------------------------------------

    def broadcast(self, event: LiveReloadEvent) -> int:
        """Deliver *event* to all open subscribers.

        Iterates over a snapshot, so subscribers added during delivery only
        see later events.  Returns the number of successful deliveries.
        """
        delivered = 0
        for subscriber in list(self._subscribers):
            if subscriber.deliver(event):
                delivered += 1
        self._prune()
        return delivered

    def notify_change(self, change: ChangeEvent) -> int:
        """Broadcast a reload for a stabilized file change."""
        logger.info("File %s: %s", change.kind.value, change.path)
        return self.broadcast(LiveReloadEvent.reload(change))

    def _prune(self) -> None:
        before = len(self._subscribers)
        self._subscribers = [
            s for s in self._subscribers if s.state is not SubscriberState.CLOSED
        ]
        dropped = before - len(self._subscribers)
        if dropped:
            logger.info("Dropped %d closed subscriber(s)", dropped)
