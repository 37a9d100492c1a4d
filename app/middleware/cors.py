"""
CORS Middleware - Cross-Origin Resource Sharing headers.

Browser clients call the messaging endpoints directly, so every response
carries permissive CORS headers, errors included.

Behaviour:
- OPTIONS (preflight): answered here with 200 "ok", never reaches a route
- Everything else: passed through, CORS headers added to the response
- Unhandled exceptions: turned into a 500 error envelope so the browser
  still sees CORS headers and a readable body

Usage:
    from app.middleware.cors import CORSMiddleware

    app.add_middleware(CORSMiddleware, headers=settings.cors_headers())

Headers added:
- Access-Control-Allow-Origin
- Access-Control-Allow-Headers
- Access-Control-Allow-Methods
"""

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse, PlainTextResponse

from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class CORSMiddleware(BaseHTTPMiddleware):
    """
    Permissive CORS middleware.

    Handles preflight OPTIONS requests and adds CORS headers to responses.
    """

    def __init__(self, app, headers: dict[str, str]):
        """
        Initialize CORS middleware.

        Args:
            app: FastAPI application
            headers: CORS headers to attach to every response
        """
        super().__init__(app)
        self.headers = dict(headers)

        logger.info(
            "CORS middleware initialized",
            allow_origin=self.headers.get("Access-Control-Allow-Origin"),
        )

    async def dispatch(self, request, call_next):
        if request.method == "OPTIONS":
            logger.debug("CORS preflight request handled", path=request.url.path)
            return PlainTextResponse("ok", status_code=200, headers=self.headers)

        try:
            response = await call_next(request)
        except Exception as e:
            logger.exception(
                "Unhandled error while processing request",
                method=request.method,
                path=request.url.path,
                error_type=type(e).__name__,
            )
            response = JSONResponse(
                status_code=500,
                content={"status": "error", "code": 500, "message": str(e)},
            )

        response.headers.update(self.headers)
        return response
