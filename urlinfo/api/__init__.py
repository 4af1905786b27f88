"""HTTP surface of the URL info service.

``create_app`` builds a fresh application (tests use one per case);
``app`` is the shared instance served by ``uvicorn urlinfo.api:app``.
"""

from urlinfo.api.app import app, create_app

__all__ = ["app", "create_app"]
