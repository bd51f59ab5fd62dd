"""
Rate Limiting Middleware

Per-client rate limiting using Redis.

ARCHITECTURE: Fixed window counter per client IP. Every request increments
the counter; a counter found without a TTL gets one equal to the window
length. Requests past the limit get 429 until the key expires.
Defaults: 100 requests per 15 minutes.

PRODUCTION NOTES:
- Redis is a single point of failure (use Redis Cluster/Sentinel)
- Behind a proxy, request.client is the proxy; run uvicorn with
  --proxy-headers so the real client address is used
"""
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from typing import Optional
import redis
import logging
from farm_api.config import Settings, get_settings
from farm_api.utils.responses import error_body

logger = logging.getLogger(__name__)

RATE_LIMIT_MESSAGE = "Demasiadas solicitudes desde esta IP, intenta de nuevo más tarde."


class RateLimitMiddleware(BaseHTTPMiddleware):
    """
    Fixed window rate limiter per client.

    Uses Redis so the limit holds across worker processes.
    """

    def __init__(self, app, settings: Optional[Settings] = None, redis_client=None):
        super().__init__(app)
        self.settings = settings or get_settings()
        self.window = self.settings.RATE_LIMIT_WINDOW_SECONDS
        self.max_requests = self.settings.RATE_LIMIT_MAX_REQUESTS

        if redis_client is not None:
            self.redis_client = redis_client
            self.redis_available = True
        else:
            try:
                self.redis_client = redis.from_url(
                    self.settings.REDIS_URL,
                    decode_responses=True,
                    socket_connect_timeout=5
                )
                # Test connection
                self.redis_client.ping()
                self.redis_available = True
                logger.info("Redis connection established for rate limiting")
            except (redis.ConnectionError, redis.TimeoutError) as e:
                logger.error(f"Redis connection failed: {e}")
                self.redis_available = False
                # FALLBACK: Rate limiting is skipped while Redis is down

        self.excluded_paths = [
            "/docs",
            "/redoc",
            "/openapi.json",
            "/health",
        ]

    async def dispatch(self, request: Request, call_next):
        """Apply rate limiting per client."""

        if any(request.url.path.startswith(path) for path in self.excluded_paths):
            return await call_next(request)

        # TRADEOFF: We choose availability over strict rate limiting
        if not self.redis_available:
            return await call_next(request)

        client_id = self._get_client_identifier(request)
        allowed, retry_after = self._check_rate_limit(client_id)

        if not allowed:
            logger.warning(
                f"Rate limit exceeded for client {client_id}",
                extra={"path": request.url.path, "method": request.method}
            )
            return JSONResponse(
                status_code=429,
                content=error_body(RATE_LIMIT_MESSAGE, 429),
                headers={"Retry-After": str(retry_after)}
            )

        return await call_next(request)

    def _check_rate_limit(self, client_id: str) -> tuple[bool, int]:
        """
        Count this request against the client's current window.

        Returns: (allowed: bool, retry_after: int)
        """
        key = f"rate_limit:{client_id}"

        try:
            pipe = self.redis_client.pipeline()
            pipe.incr(key)
            pipe.ttl(key)
            count, ttl = pipe.execute()

            # -1: counter without expiry (new window, or an earlier EXPIRE was lost)
            if ttl == -1:
                self.redis_client.expire(key, self.window)
                ttl = self.window

            if count <= self.max_requests:
                return True, 0

            return False, ttl if ttl and ttl > 0 else self.window

        except redis.RedisError as e:
            logger.error(f"Redis error in rate limiting: {e}")
            # Graceful degradation - allow request if Redis fails
            return True, 0

    def _get_client_identifier(self, request: Request) -> str:
        return request.client.host if request.client else "unknown"
