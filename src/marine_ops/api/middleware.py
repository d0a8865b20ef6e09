import time
import hashlib
import logging
from typing import Dict, List
from collections import defaultdict, deque
from urllib.parse import urlparse
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import JSONResponse

logger = logging.getLogger(__name__)

MAX_BODY_BYTES = 10 * 1024 * 1024  # 10MB, covers spreadsheet uploads


class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()

        response = await call_next(request)

        process_time = time.time() - start_time
        logger.info(
            f"{request.method} {request.url.path} -> {response.status_code} in {process_time:.3f}s"
        )

        response.headers["X-Process-Time"] = f"{process_time:.4f}"
        return response


class SecurityHeadersMiddleware(BaseHTTPMiddleware):
    """Add security headers to all responses."""

    async def dispatch(self, request: Request, call_next):
        response = await call_next(request)

        response.headers["X-Content-Type-Options"] = "nosniff"
        response.headers["X-Frame-Options"] = "DENY"
        response.headers["Referrer-Policy"] = "strict-origin-when-cross-origin"
        response.headers["Content-Security-Policy"] = "default-src 'self'; frame-ancestors 'none';"
        response.headers["Server"] = "MarineOps"

        return response


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Sliding window rate limiting with stricter limits on login."""

    def __init__(self, app, default_calls: int = 120, default_period: int = 60):
        super().__init__(app)
        self.default_calls = default_calls
        self.default_period = default_period
        self.limits = {
            "/api/v1/auth/login": {"calls": 10, "period": 300},
            "/api/v1/finance/import": {"calls": 10, "period": 60},
            "/api/v1/admin/sync": {"calls": 5, "period": 60},
        }
        self.clients: Dict[str, deque] = defaultdict(deque)
        self.periods: Dict[str, int] = {}
        self.last_sweep = time.time()

    def _get_limit(self, path: str) -> Dict[str, int]:
        for limit_path, limit_config in self.limits.items():
            if path.startswith(limit_path):
                return limit_config
        return {"calls": self.default_calls, "period": self.default_period}

    def _get_client_key(self, request: Request, path_prefix: str) -> str:
        user_agent = request.headers.get("user-agent", "")
        ip = request.client.host if request.client else "unknown"
        client_string = f"{ip}:{user_agent}:{path_prefix}"
        return hashlib.sha256(client_string.encode()).hexdigest()[:16]

    def _evict_idle_clients(self, now: float):
        """Forget clients with no request inside their window."""
        if now - self.last_sweep < self.default_period:
            return
        self.last_sweep = now
        idle = [key for key, stamps in self.clients.items()
                if not stamps or now - stamps[-1] > self.periods[key]]
        for key in idle:
            del self.clients[key]
            del self.periods[key]

    async def dispatch(self, request: Request, call_next):
        if request.url.path == "/health":
            return await call_next(request)

        limit_config = self._get_limit(request.url.path)
        prefix = next((p for p in self.limits if request.url.path.startswith(p)), "")
        client_key = self._get_client_key(request, prefix)
        now = time.time()

        self._evict_idle_clients(now)

        self.periods[client_key] = limit_config["period"]
        client_requests = self.clients[client_key]
        while client_requests and now - client_requests[0] > limit_config["period"]:
            client_requests.popleft()

        if len(client_requests) >= limit_config["calls"]:
            logger.warning(f"Rate limit exceeded for {client_key} on {request.url.path}")
            return JSONResponse(
                status_code=429,
                content={
                    "detail": "Rate limit exceeded",
                    "retry_after": int(limit_config["period"] - (now - client_requests[0]))
                }
            )

        client_requests.append(now)

        response = await call_next(request)
        response.headers["X-RateLimit-Limit"] = str(limit_config["calls"])
        response.headers["X-RateLimit-Remaining"] = str(
            max(0, limit_config["calls"] - len(client_requests))
        )
        return response


class InputValidationMiddleware(BaseHTTPMiddleware):
    """Reject obvious attack patterns and oversized bodies."""

    suspicious_patterns = (
        "<script", "javascript:", "vbscript:", "onload=", "onerror=",
        "../", "..\\", "etc/passwd",
    )

    async def dispatch(self, request: Request, call_next):
        url_path = request.url.path.lower()
        query_string = str(request.url.query).lower()

        for pattern in self.suspicious_patterns:
            if pattern in url_path or pattern in query_string:
                logger.warning(f"Suspicious pattern detected: {pattern} in {request.url.path}")
                return JSONResponse(status_code=400, content={"detail": "Invalid request"})

        if request.method in ("POST", "PUT", "PATCH"):
            content_length = request.headers.get("content-length")
            if content_length and content_length.isdigit() and int(content_length) > MAX_BODY_BYTES:
                return JSONResponse(status_code=413, content={"detail": "Request entity too large"})

        return await call_next(request)


class CSRFProtectionMiddleware(BaseHTTPMiddleware):
    """Reject state-changing requests whose Origin is neither this host nor an allowed origin."""

    def __init__(self, app, allowed_origins: List[str] = None, exempt_paths: List[str] = None):
        super().__init__(app)
        self.allowed_origins = set(allowed_origins or [])
        self.exempt_paths = exempt_paths or ["/health", "/api/docs", "/api/v1/auth/login"]

    async def dispatch(self, request: Request, call_next):
        if (request.method in ("GET", "HEAD", "OPTIONS") or
                any(request.url.path.startswith(path) for path in self.exempt_paths)):
            return await call_next(request)

        origin = request.headers.get("origin")
        host = request.headers.get("host")

        if origin and host:
            if origin not in self.allowed_origins and urlparse(origin).netloc != host:
                logger.warning(f"CSRF attempt blocked: {origin} vs {host}")
                return JSONResponse(status_code=403, content={"detail": "CSRF validation failed"})

        return await call_next(request)
