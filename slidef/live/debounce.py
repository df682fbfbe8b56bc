"""Per-path coalescing of rapid filesystem events.

Every path is either idle (absent from the table) or pending with a
deadline.  A new event for a pending path pushes its deadline out again;
once the deadline passes with no further events a single ``ChangeEvent``
is emitted and the path returns to idle.  Paths are independent, so a busy
path never holds back an unrelated one.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass

from slidef.models.events import ChangeEvent, ChangeKind


@dataclass
class _Pending:
    first: ChangeKind
    last: ChangeKind
    deadline: float
    handle: asyncio.TimerHandle


def coalesce(first: ChangeKind, last: ChangeKind) -> ChangeKind:
    """Kind reported for a burst that started with *first* and ended with *last*.

    A burst ending in a removal is a removal.  A burst that began with a
    creation is an addition.  Anything else (including remove-then-create,
    as done by atomic replaces) is a change.
    """
    if last is ChangeKind.REMOVED:
        return ChangeKind.REMOVED
    if first is ChangeKind.ADDED:
        return ChangeKind.ADDED
    return ChangeKind.CHANGED


class PathDebouncer:
    """Coalesces events per path using a stability window.

    Parameters
    ----------
    window:
        Quiet period in seconds before a path's burst is emitted.
    callback:
        Receives each coalesced ``ChangeEvent``; called on the event loop.
    loop:
        Loop used for timers.  Defaults to the running loop at ``touch`` time.
    """

    def __init__(
        self,
        window: float,
        callback: Callable[[ChangeEvent], object],
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        if window < 0:
            raise ValueError("window must not be negative")
        self._window = window
        self._callback = callback
        self._loop = loop
        self._pending: dict[str, _Pending] = {}

    @property
    def pending_paths(self) -> list[str]:
        return sorted(self._pending)

    def deadline(self, path: str) -> float | None:
        """Loop time at which *path* will fire, or None when idle."""
        pending = self._pending.get(path)
        return pending.deadline if pending is not None else None

    def touch(self, path: str, kind: ChangeKind) -> None:
        """Record a raw event; must be called on the event loop thread."""
        loop = self._loop or asyncio.get_running_loop()
        deadline = loop.time() + self._window

        pending = self._pending.get(path)
        if pending is not None:
            pending.handle.cancel()
            first = pending.first
        else:
            first = kind

        handle = loop.call_at(deadline, self._fire, path)
        self._pending[path] = _Pending(first, kind, deadline, handle)

    def _fire(self, path: str) -> None:
        pending = self._pending.pop(path, None)
        if pending is None:
            return
        self._callback(
            ChangeEvent(kind=coalesce(pending.first, pending.last), path=path)
        )

    def cancel_all(self) -> None:
        """Drop every pending burst without emitting it."""
        for pending in self._pending.values():
            pending.handle.cancel()
        self._pending.clear()
