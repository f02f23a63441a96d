from typing import Iterable, Optional

from starlette.responses import Response

ALLOWED_METHODS = "GET, POST, OPTIONS"
ALLOWED_HEADERS = "Content-Type, Authorization, X-Requested-With"
NO_CACHE = "no-cache, no-store, must-revalidate"


def apply_cors_headers(response: Response, origin: Optional[str], allowed_origins: Iterable[str]) -> Response:
    """Set CORS and no-cache headers; the origin is echoed only when allowed."""
    allowed = list(allowed_origins)
    if "*" in allowed:
        response.headers["Access-Control-Allow-Origin"] = origin or "*"
    elif origin and origin in allowed:
        response.headers["Access-Control-Allow-Origin"] = origin
        response.headers["Vary"] = "Origin"

    response.headers["Access-Control-Allow-Methods"] = ALLOWED_METHODS
    response.headers["Access-Control-Allow-Headers"] = ALLOWED_HEADERS
    response.headers["Access-Control-Allow-Credentials"] = "true"
    response.headers["Cache-Control"] = NO_CACHE
    return response
