import logging
import secrets

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)


class BearerTokenMiddleware(BaseHTTPMiddleware):
    """
    Starlette middleware that enforces Bearer-token authentication on the
    MCP endpoint.

    Only paths under `protected_path` are checked; everything else (the
    /health liveness route in particular) passes straight through. The
    check runs before the request body is read, so unauthenticated
    requests never reach FastMCP.
    """

    def __init__(self, app, api_key: str, protected_path: str = "/mcp"):
        super().__init__(app)
        if not api_key:
            raise ValueError("api_key must not be empty")
        self._expected = f"Bearer {api_key}".encode()
        self.protected_path = protected_path.rstrip("/")

    def _is_protected(self, path: str) -> bool:
        return path == self.protected_path or path.startswith(self.protected_path + "/")

    def _is_authorized(self, request) -> bool:
        auth = request.headers.get("authorization")
        if auth is None:
            return False
        # Exact, case-sensitive match on the whole header value.
        return secrets.compare_digest(auth.encode(), self._expected)

    async def dispatch(self, request, call_next):
        if self._is_protected(request.url.path) and not self._is_authorized(request):
            logger.debug(f"Rejected unauthenticated {request.method} {request.url.path}")
            # JSON-RPC-style error so MCP clients can parse the failure.
            return JSONResponse(
                {"jsonrpc": "2.0", "id": None,
                 "error": {"code": -32001, "message": "Unauthorized"}},
                status_code=401,
            )
        return await call_next(request)
