"""Development server: JSON API over the slide store plus live reload.

Routes
------
GET    /api/slides            list every deck
GET    /api/slides/{name}     one deck's metadata
PUT    /api/slides/{name}     merge metadata edits
DELETE /api/slides/{name}     remove a deck (idempotent)
POST   /api/import            convert a PDF sent as the raw request body
GET    /api/config            current project config
POST   /api/config            shallow-merge config changes
GET    /api/live-reload       Server-Sent Events stream
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import AsyncIterator
from datetime import date
from pathlib import Path
from typing import Any

from starlette.applications import Starlette
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse, StreamingResponse
from starlette.routing import Route

from slidef.config import settings
from slidef.core.errors import ConversionError, SlidefError, ValidationError
from slidef.core.project import (
    config_path,
    load_project_config,
    resolve_dir,
    update_project_config,
)
from slidef.core.slide_store import SlideStore
from slidef.live.notifier import ChangeNotifier
from slidef.live.watcher import ChangeWatcher
from slidef.models.slides import RenderOptions
from slidef.server.streaming import live_reload_stream

logger = logging.getLogger(__name__)

_STATUS_BY_KIND: dict[str, int] = {
    "not_found": 404,
    "validation": 400,
    "document_parse": 422,
    "page_render": 422,
    "duplicate_name": 409,
}


async def _slidef_error(request: Request, exc: Exception) -> JSONResponse:
    kind = getattr(exc, "kind", "slidef")
    status = _STATUS_BY_KIND.get(kind, 500)
    if status >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse({"error": str(exc), "kind": kind}, status_code=status)


async def _json_object(request: Request) -> dict[str, Any]:
    try:
        body = await request.json()
    except ValueError as exc:
        raise ValidationError("Request body must be JSON") from exc
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


# ----------------------------------------------------------------------
# Handlers
# ----------------------------------------------------------------------


async def list_slides(request: Request) -> JSONResponse:
    store: SlideStore = request.app.state.store
    slides = await run_in_threadpool(store.list_all)
    return JSONResponse({"slides": [s.to_record() for s in slides]})


async def get_slide(request: Request) -> JSONResponse:
    store: SlideStore = request.app.state.store
    metadata = await run_in_threadpool(store.get, request.path_params["name"])
    return JSONResponse(metadata.to_record())


async def update_slide(request: Request) -> JSONResponse:
    store: SlideStore = request.app.state.store
    changes = await _json_object(request)
    metadata = await run_in_threadpool(
        store.update, request.path_params["name"], changes
    )
    return JSONResponse({"success": True, "metadata": metadata.to_record()})


async def delete_slide(request: Request) -> JSONResponse:
    store: SlideStore = request.app.state.store
    await run_in_threadpool(store.remove, request.path_params["name"])
    return JSONResponse({"success": True})


async def import_slide(request: Request) -> JSONResponse:
    store: SlideStore = request.app.state.store
    params = request.query_params

    source = await request.body()
    if not source:
        raise ValidationError("No file uploaded")

    options = RenderOptions.from_values(
        scale=params.get("scale"),
        format=params.get("format"),
        quality=params.get("quality"),
    )
    created_at = None
    if params.get("createdAt"):
        try:
            created_at = date.fromisoformat(params["createdAt"])
        except ValueError as exc:
            raise ValidationError(f"createdAt must be YYYY-MM-DD: {exc}") from exc

    filename = params.get("filename")
    name = params.get("name") or (Path(filename).stem if filename else "untitled")

    # One import at a time: slug allocation is check-then-act.
    async with request.app.state.import_lock:
        try:
            metadata = await run_in_threadpool(
                store.create,
                source,
                name=name,
                options=options,
                title=params.get("title") or name,
                filename=filename,
                created_at=created_at,
            )
        except ConversionError as exc:
            if exc.output_dir is not None:
                slug = exc.output_dir.parent.name
                logger.warning("Import of %r failed, discarding %s", name, slug)
                await run_in_threadpool(store.remove, slug)
            raise

    return JSONResponse({"success": True, "metadata": metadata.to_record()})


async def get_config(request: Request) -> JSONResponse:
    config = await run_in_threadpool(load_project_config, request.app.state.project_root)
    return JSONResponse(config.to_record())


async def post_config(request: Request) -> JSONResponse:
    changes = await _json_object(request)
    config = await run_in_threadpool(
        update_project_config, request.app.state.project_root, changes
    )
    return JSONResponse({"success": True, "config": config.to_record()})


async def live_reload(request: Request) -> StreamingResponse:
    return StreamingResponse(
        live_reload_stream(request.app.state.notifier),
        media_type="text/event-stream",
        headers={"Cache-Control": "no-cache", "Connection": "keep-alive"},
    )


# ----------------------------------------------------------------------
# Application factory
# ----------------------------------------------------------------------


def create_app(
    project_root: Path | str = ".",
    *,
    slides_dir: Path | str | None = None,
    watch: bool = True,
) -> Starlette:
    """Build the development server for the project at *project_root*.

    With ``watch=False`` no filesystem observer is started.
    """
    root = Path(project_root).resolve()
    config = load_project_config(root)
    store = SlideStore(resolve_dir(root, config.slides_dir, slides_dir))
    notifier = ChangeNotifier()

    watch_roots: list[Path] = [store.root]
    if settings.templates_dir is not None:
        watch_roots.append(resolve_dir(root, str(settings.templates_dir)))
    watcher = ChangeWatcher(root, watch_roots, config_path(root), notifier)

    @contextlib.asynccontextmanager
    async def lifespan(app: Starlette) -> AsyncIterator[None]:
        if watch:
            watcher.start(asyncio.get_running_loop())
        try:
            yield
        finally:
            watcher.stop()
            notifier.close_all()

    app = Starlette(
        routes=[
            Route("/api/slides", list_slides, methods=["GET"]),
            Route("/api/slides/{name}", get_slide, methods=["GET"]),
            Route("/api/slides/{name}", update_slide, methods=["PUT"]),
            Route("/api/slides/{name}", delete_slide, methods=["DELETE"]),
            Route("/api/import", import_slide, methods=["POST"]),
            Route("/api/config", get_config, methods=["GET"]),
            Route("/api/config", post_config, methods=["POST"]),
            Route("/api/live-reload", live_reload, methods=["GET"]),
        ],
        exception_handlers={SlidefError: _slidef_error},
        lifespan=lifespan,
    )
    app.state.project_root = root
    app.state.store = store
    app.state.notifier = notifier
    app.state.watcher = watcher
    app.state.import_lock = asyncio.Lock()
    return app
