"""FastAPI application factory.

Routers
-------
The URL metadata router is mounted twice:

    /urlInfo                 current path
    /client/common/urlInfo   path used by existing frontends
"""

from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from urlinfo.config import settings

from urlinfo.api.routers import url_info as url_info_router


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    settings.configure_logging()

    app = FastAPI(
        title="URL Info API",
        description=(
            "Extracts preview metadata (title, description, preview image, "
            "favicon) from user-supplied URLs."
        ),
        version="0.1.0",
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(url_info_router.router, prefix="/urlInfo", tags=["urlInfo"])
    app.include_router(
        url_info_router.router,
        prefix="/client/common/urlInfo",
        tags=["urlInfo"],
        include_in_schema=False,
    )

    @app.get("/health", include_in_schema=False)
    def health() -> dict[str, str]:
        return {"status": "ok"}

    return app


# Module-level instance used by uvicorn:
#   uvicorn urlinfo.api.app:app --reload
app = create_app()
