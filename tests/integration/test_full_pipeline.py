"""Integration test: import, edit, publish and remove decks end to end."""

from __future__ import annotations

import asyncio
import json

from slidef.core.index_builder import build_index
from slidef.core.publisher import publish
from slidef.core.slide_store import SlideStore
from slidef.live.notifier import ChangeNotifier
from slidef.live.watcher import ChangeWatcher
from slidef.models.config import ProjectConfig
from slidef.models.slides import RenderOptions


class TestFullPipeline:
    def test_import_publish_remove(self, tmp_dir, make_pdf):
        store = SlideStore(tmp_dir / "slides")
        options = RenderOptions(scale=1, format="jpeg", quality=60)

        talk = store.create(make_pdf(pages=3), name="My Talk", options=options)
        again = store.create(make_pdf(pages=2), name="My Talk", options=options)
        assert (talk.name, again.name) == ("my-talk", "my-talk-2")

        for deck in (talk, again):
            images = sorted(p.name for p in store.images_dir(deck.name).iterdir())
            assert len(images) == deck.page_count
            assert images[0] == "page-001.jpg"

        store.update("my-talk-2", {"title": "Second Run"})

        result = publish(store, tmp_dir / "public", ProjectConfig())
        index = json.loads(result.index_path.read_text())
        assert [s["name"] for s in index["slides"]] == ["my-talk", "my-talk-2"]
        assert index["slides"][1]["title"] == "Second Run"

        store.remove("my-talk")
        assert [s.name for s in build_index(store.list_all()).slides] == ["my-talk-2"]

    def test_import_triggers_live_reload(self, tmp_dir, make_pdf):
        project = tmp_dir.resolve()
        store = SlideStore(project / "slides")

        class _Sink:
            def __init__(self) -> None:
                self.files: list[str] = []

            def send(self, event) -> None:
                if event.type == "reload":
                    self.files.append(event.file)

        async def scenario() -> list[str]:
            notifier = ChangeNotifier()
            sink = _Sink()
            notifier.connect(sink)
            watcher = ChangeWatcher(
                project,
                [store.root],
                project / "slidef.config.json",
                notifier,
                stability_window=0.1,
            )
            watcher.start(asyncio.get_running_loop())
            try:
                await asyncio.sleep(0.2)
                store.create(
                    make_pdf(pages=2),
                    name="Live",
                    options=RenderOptions(scale=1, format="png"),
                )
                for _ in range(50):
                    await asyncio.sleep(0.1)
                    if "slides/live/metadata.json" in sink.files:
                        break
            finally:
                watcher.stop()
            return sink.files

        files = asyncio.run(scenario())
        assert "slides/live/metadata.json" in files
        assert files.count("slides/live/metadata.json") == 1
        assert not any("/." in f for f in files)
