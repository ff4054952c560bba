"""Static development server for the Spice test pages."""

from __future__ import annotations

import logging

import uvicorn
from asgi_correlation_id import CorrelationIdMiddleware
from fastapi import FastAPI, HTTPException, status
from fastapi.responses import FileResponse

from spicebuild.config import Settings
from spicebuild.config import settings as default_settings
from spicebuild.staticfiles import DevStaticFiles

logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings
    app = FastAPI(
        title="Spice dev server",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.add_middleware(CorrelationIdMiddleware, header_name="X-Request-ID")

    static_root = settings.path(settings.static_root)
    for name in settings.static_dirs:
        app.mount(f"/{name}", DevStaticFiles(directory=static_root / name), name=name)

    index_file = settings.path(settings.index_file)

    @app.api_route("/", methods=["GET", "HEAD"], include_in_schema=False)
    async def index() -> FileResponse:
        if not index_file.is_file():
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND, detail="Index page not found"
            )
        return FileResponse(index_file, headers={"Cache-Control": "no-store"})

    return app


def serve(settings: Settings | None = None, watch: bool = True) -> None:
    """Run uvicorn in the foreground, optionally with the rebuild watcher."""
    settings = settings or default_settings
    watcher = None
    if watch:
        from spicebuild.orchestration import TaskContext, build_default_graph
        from spicebuild.watcher import BuildWatcher

        watcher = BuildWatcher(build_default_graph(), TaskContext(settings))
        watcher.start()
    logger.info("Dev server listening on http://%s:%d", settings.host, settings.port)
    try:
        uvicorn.run(
            create_app(settings),
            host=settings.host,
            port=settings.port,
            log_config=None,
        )
    finally:
        if watcher is not None:
            watcher.stop()
