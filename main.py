"""
Main API module for the Short Link service.

Responsibilities:
    - GET/POST /add/<domain>/<path...> creates a short link for an allowed domain
    - Any method on /<short link> redirects (302) to the stored long link
    - Anything shorter than a short link (including "/") redirects to the fallback URL

Architecture:
    - App Factory pattern (create_app) with explicit settings and storage, so
      tests can inject the in-memory Storage and no state lives in module globals.
    - Manager owns parsing, allow-list checks, short-link derivation and lookups.
    - Errors raised by the manager are rendered as plain-text responses.

Run:
    ALLOWED_DOMAINS=example.com MONGO_URI=mongodb://127.0.0.1:27017 MONGO_DB=links python main.py
"""

import logging
import sys
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse, Response
from pydantic import BaseModel

from shortlink_platform.config import PORT, ConfigError, Settings
from shortlink_platform.manager.link_manager import LinkError, LinkManager
from shortlink_platform.storage.base import BaseStorage, StorageError
from shortlink_platform.storage.storage_factory import get_storage


class LinkResponse(BaseModel):
    """Response payload for a created short link."""
    link: str


REDIRECT_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


def _plain_error(message: str, status_code: int) -> PlainTextResponse:
    return PlainTextResponse(message + "\n", status_code=status_code)


def create_app(settings: Optional[Settings] = None, storage: Optional[BaseStorage] = None) -> FastAPI:
    """
    Factory function to build and configure a new FastAPI app instance.

    Args:
        settings: Service settings; read from the environment when omitted.
        storage: Storage backend; a connected MongoStorage when omitted.

    Returns:
        FastAPI: A configured application with its own manager instance.

    Raises:
        ConfigError: Required environment variables are missing.
        StorageError: MongoDB could not be pinged or indexed.
    """
    settings = settings or Settings.from_env()

    if not logging.getLogger().handlers:
        logging.basicConfig(level=settings.log_level)
    log = logging.getLogger("shortlink")

    if storage is None:
        storage = get_storage(settings)
    manager = LinkManager(storage=storage, allowed_domains=settings.allowed_domains)

    app = FastAPI(
        title="Short Link Service",
        description="Allow-listed URL shortener with deterministic process-id links",
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.state.settings = settings
    app.state.manager = manager

    log.info("Allowed domains: %s", settings.allowed_domains)
    log.info("MongoDB URI: %s", settings.mongo_uri)
    log.info("MongoDB DB: %s", settings.mongo_db)

    @app.exception_handler(LinkError)
    async def link_error_handler(request: Request, exc: LinkError) -> PlainTextResponse:
        return _plain_error(str(exc), exc.status_code)

    # ----------------------------------------------------------------
    # Routes (order matters: /add/ must win over the catch-all)
    # ----------------------------------------------------------------
    @app.api_route("/add/{target:path}", methods=["GET", "POST"])
    def add_link(target: str) -> Response:
        """
        Create a short link for https://<domain>/<path>.

        Returns:
            JSONResponse: {"link": "<short link>"}

        Raises:
            LinkError: 400 for malformed paths or disallowed domains, 500 on store failure.
        """
        mapping = manager.create_link(f"/add/{target}")
        try:
            body = LinkResponse(link=mapping.short_link).model_dump()
            return JSONResponse(body)
        except (TypeError, ValueError):
            log.exception("encoding response for %s failed", mapping.short_link)
            return _plain_error("Error encoding response", 500)

    @app.api_route("/{short_link:path}", methods=REDIRECT_METHODS)
    def redirect_link(short_link: str) -> RedirectResponse:
        """Redirect (302) to the stored long link or the fallback URL."""
        return RedirectResponse(url=manager.resolve_link(short_link), status_code=302)

    return app


def main() -> None:
    try:
        app = create_app()
    except (ConfigError, StorageError) as exc:
        logging.basicConfig(level=logging.INFO)
        logging.getLogger("shortlink").critical("startup failed: %s", exc)
        sys.exit(1)
    logging.getLogger("shortlink").info("Server started")
    uvicorn.run(app, host="0.0.0.0", port=PORT)


if __name__ == "__main__":
    main()
