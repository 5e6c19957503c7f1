from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from src.utils.settings.app import AppSettings
from src.api.core.exceptions.base import KeyHubException
from src.api.core.messages import MessageCode
from src.api.core.constants import API_VERSION_HEADER
from src.utils.logger import get_client_ip, get_logger

logger = get_logger(__name__)

CORS_HEADERS = frozenset(
    {
        "Access-Control-Allow-Origin",
        "Access-Control-Allow-Methods",
        "Access-Control-Allow-Headers",
        "Access-Control-Allow-Credentials",
        "Access-Control-Expose-Headers",
        "Access-Control-Max-Age",
    }
)


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    def __init__(self, app, is_production: bool = False):
        super().__init__(app)
        self.is_production = is_production
        self.app_settings = AppSettings()

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)

        headers = {
            "X-Content-Type-Options": "nosniff",
            "X-Frame-Options": "DENY",
            "X-XSS-Protection": "1; mode=block",
            "Referrer-Policy": "strict-origin-when-cross-origin",
            "Permissions-Policy": "geolocation=(), microphone=(), camera=(), payment=()",
            "Cache-Control": "no-store",
        }

        if self.is_production:
            headers["Content-Security-Policy"] = self._get_csp()

        # HSTS only makes sense over HTTPS
        if self.is_production and request.url.scheme == "https":
            headers["Strict-Transport-Security"] = "max-age=31536000; includeSubDomains"

        headers.update(
            {
                API_VERSION_HEADER: self.app_settings.API_VERSION,
                "X-Permitted-Cross-Domain-Policies": "none",
            }
        )

        for key, value in headers.items():
            if key not in response.headers and key not in CORS_HEADERS:
                response.headers[key] = value

        return response

    def _get_csp(self) -> str:
        """Generate Content Security Policy for a JSON-only API."""
        csp = {
            "default-src": ["'none'"],
            "connect-src": ["'self'"],
            "object-src": ["'none'"],
            "base-uri": ["'none'"],
            "form-action": ["'none'"],
            "frame-ancestors": ["'none'"],
        }

        return "; ".join(
            f"{directive} {' '.join(sources)}" for directive, sources in csp.items()
        )


class PayloadSizeMiddleware(BaseHTTPMiddleware):
    """Reject request bodies above the configured size."""

    def __init__(self, app, max_request_size: int | None = None):
        super().__init__(app)
        self.max_request_size = max_request_size or AppSettings().MAX_REQUEST_SIZE

    async def dispatch(self, request: Request, call_next) -> Response:
        content_length = request.headers.get("Content-Length")
        if content_length and content_length.isdigit():
            if int(content_length) > self.max_request_size:
                logger.warning(
                    f"Request too large: {content_length} bytes from {get_client_ip(request)}"
                )
                # Middleware runs outside the exception handlers
                error = KeyHubException(
                    MessageCode.BAD_REQUEST,
                    413,
                    details={
                        "description": f"Request size ({content_length} bytes) exceeds maximum allowed ({self.max_request_size} bytes)"
                    },
                )
                return JSONResponse(
                    status_code=error.status_code,
                    content=error.to_response_dict(),
                )

        return await call_next(request)
