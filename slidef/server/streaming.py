"""Server-Sent Events stream for live reload."""

from __future__ import annotations

from collections.abc import AsyncIterator

from slidef.live.notifier import ChangeNotifier, QueueSink


def format_sse(data: str) -> str:
    return f"data: {data}\n\n"


async def live_reload_stream(notifier: ChangeNotifier) -> AsyncIterator[str]:
    """Yield SSE frames for one viewer until it disconnects.

    The first frame is always the ``connected`` acknowledgement.  When the
    response is torn down the sink is closed and the subscriber dropped.
    """
    sink = QueueSink()
    subscriber = notifier.connect(sink)
    try:
        while subscriber.is_open:
            event = await sink.receive()
            yield format_sse(event.to_json())
    finally:
        sink.close()
        notifier.disconnect(subscriber)
