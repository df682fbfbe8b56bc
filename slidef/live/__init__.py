"""Live reload: file watching, debouncing and subscriber fan-out."""

from slidef.live.debounce import PathDebouncer
from slidef.live.notifier import ChangeNotifier, QueueSink, Subscriber, SubscriberState
from slidef.live.watcher import ChangeWatcher

__all__ = [
    "ChangeNotifier",
    "ChangeWatcher",
    "PathDebouncer",
    "QueueSink",
    "Subscriber",
    "SubscriberState",
]
