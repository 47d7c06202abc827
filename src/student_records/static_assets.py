"""Static page assets for the student records client."""

import logging
from pathlib import Path

from fastapi import APIRouter
from fastapi.responses import PlainTextResponse, Response

logger = logging.getLogger(__name__)

DEFAULT_STATIC_DIR = Path(__file__).parent / "static"

# Assets answer every method; OPTIONS is handled by the CORS middleware
ASSET_METHODS = ["GET", "HEAD", "POST", "PUT", "DELETE", "PATCH"]

# URL path -> (file name, content type)
STATIC_ROUTES: dict[str, tuple[str, str]] = {
    "/": ("index.html", "text/html"),
    "/index.html": ("index.html", "text/html"),
    "/style.css": ("style.css", "text/css"),
    "/script.js": ("script.js", "application/javascript"),
}


def load_asset(static_dir: Path, filename: str, media_type: str) -> Response:
    """
    Read an asset from disk on every call.

    A read failure yields a 500 plain-text response naming the file.
    """
    try:
        content = (static_dir / filename).read_bytes()
    except OSError as e:
        logger.error(f"Failed to load {filename}: {e}")
        return PlainTextResponse(f"Error loading {filename}", status_code=500)
    return Response(content=content, media_type=media_type)


def create_static_router(static_dir: Path | str | None = None) -> APIRouter:
    """
    Create the router serving the fixed set of page assets.

    Args:
        static_dir: Directory holding index.html, style.css and script.js.
            Defaults to the assets packaged with this module.
    """
    directory = Path(static_dir) if static_dir else DEFAULT_STATIC_DIR
    router = APIRouter()

    def _make_endpoint(filename: str, media_type: str):
        async def endpoint() -> Response:
            return load_asset(directory, filename, media_type)

        return endpoint

    for path, (filename, media_type) in STATIC_ROUTES.items():
        router.add_api_route(
            path,
            _make_endpoint(filename, media_type),
            methods=ASSET_METHODS,
            include_in_schema=False,
        )

    return router
