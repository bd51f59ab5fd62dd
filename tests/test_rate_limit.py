import pytest
import redis
from fastapi import FastAPI
from fastapi.testclient import TestClient

from farm_api.config import Settings
from farm_api.middleware.rate_limit import RATE_LIMIT_MESSAGE, RateLimitMiddleware


class StubPipeline:
    def __init__(self, client):
        self.client = client
        self.calls = []

    def incr(self, key):
        self.calls.append(("incr", key))

    def ttl(self, key):
        self.calls.append(("ttl", key))

    def execute(self):
        return [getattr(self.client, name)(key) for name, key in self.calls]


class StubRedis:
    """Just enough of the redis client for a fixed window counter."""

    def __init__(self):
        self.counts = {}
        self.ttls = {}

    def pipeline(self):
        return StubPipeline(self)

    def incr(self, key):
        self.counts[key] = self.counts.get(key, 0) + 1
        return self.counts[key]

    def expire(self, key, seconds):
        self.ttls[key] = seconds

    def ttl(self, key):
        return self.ttls.get(key, -1)


class BrokenRedis(StubRedis):
    def incr(self, key):
        raise redis.ConnectionError("down")


class LostExpireRedis(StubRedis):
    """The first EXPIRE fails, leaving the counter without a TTL."""

    def __init__(self):
        super().__init__()
        self.failed = False

    def expire(self, key, seconds):
        if not self.failed:
            self.failed = True
            raise redis.ConnectionError("down")
        super().expire(key, seconds)


def _app(redis_client, max_requests=2):
    settings = Settings(RATE_LIMIT_MAX_REQUESTS=max_requests, RATE_LIMIT_WINDOW_SECONDS=60)
    app = FastAPI()
    app.add_middleware(RateLimitMiddleware, settings=settings, redis_client=redis_client)

    @app.get("/ping")
    def ping():
        return {"ok": True}

    @app.get("/health")
    def health():
        return {"status": "OK"}

    return app


def test_requests_over_limit_get_429():
    stub = StubRedis()
    client = TestClient(_app(stub))

    assert client.get("/ping").status_code == 200
    assert client.get("/ping").status_code == 200
    response = client.get("/ping")

    assert response.status_code == 429
    assert response.json()["error"] == RATE_LIMIT_MESSAGE
    assert response.json()["statusCode"] == 429
    assert response.headers["Retry-After"] == "60"
    assert list(stub.ttls.values()) == [60]


def test_health_is_not_counted():
    client = TestClient(_app(StubRedis(), max_requests=1))

    for _ in range(3):
        assert client.get("/health").status_code == 200
    assert client.get("/ping").status_code == 200


@pytest.mark.parametrize("attempts", [1, 5])
def test_redis_failure_lets_requests_through(attempts):
    client = TestClient(_app(BrokenRedis(), max_requests=1))

    for _ in range(attempts):
        assert client.get("/ping").status_code == 200


def test_counter_without_ttl_gets_one_again():
    stub = LostExpireRedis()
    client = TestClient(_app(stub, max_requests=1))

    assert client.get("/ping").status_code == 200
    assert stub.ttls == {}

    response = client.get("/ping")

    assert response.status_code == 429
    assert response.headers["Retry-After"] == "60"
    assert list(stub.ttls.values()) == [60]
