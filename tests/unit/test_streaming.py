"""Tests for the Server-Sent Events live-reload stream."""

from __future__ import annotations

import asyncio

from slidef.live.notifier import ChangeNotifier
from slidef.models.events import ChangeEvent, ChangeKind
from slidef.server.streaming import format_sse, live_reload_stream


class TestLiveReloadStream:
    def test_frames_and_cleanup(self):
        async def scenario() -> tuple[str, str, int, int]:
            notifier = ChangeNotifier()
            stream = live_reload_stream(notifier)

            first = await stream.__anext__()
            connected = len(notifier.subscribers)

            notifier.notify_change(
                ChangeEvent(kind=ChangeKind.REMOVED, path="slides/old/metadata.json")
            )
            second = await stream.__anext__()

            await stream.aclose()
            return first, second, connected, len(notifier.subscribers)

        first, second, connected, remaining = asyncio.run(scenario())
        assert first == 'data: {"type":"connected"}\n\n'
        assert second == (
            'data: {"type":"reload","reason":"file-removed",'
            '"file":"slides/old/metadata.json"}\n\n'
        )
        assert connected == 1
        assert remaining == 0

    def test_format_sse(self):
        assert format_sse("{}") == "data: {}\n\n"
