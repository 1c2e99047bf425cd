# chirpy/middleware/metrics.py
from __future__ import annotations

from fastapi import FastAPI, Request

FILESERVER_PREFIX = "/app"


def _is_fileserver_path(path: str) -> bool:
    return path == FILESERVER_PREFIX or path.startswith(FILESERVER_PREFIX + "/")


def install_metrics_middleware(app: FastAPI) -> None:
    """Count every request served under /app on app.state.context.hits."""

    @app.middleware("http")
    async def count_fileserver_hits(request: Request, call_next):
        if _is_fileserver_path(request.url.path):
            request.app.state.context.hits.increment()
        return await call_next(request)
