"""Health check endpoints."""

import falcon.asgi
from psycopg_pool import AsyncConnectionPool


class HealthResource:
    """Liveness and readiness endpoints."""

    def __init__(self, pool: AsyncConnectionPool | None = None) -> None:
        self._pool = pool

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/health - liveness."""
        resp.media = {"status": "ok"}
        resp.status = falcon.HTTP_200

    async def on_get_ready(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """GET /v1/health/ready - readiness (database reachable)."""
        if self._pool is not None:
            async with self._pool.connection() as conn:
                await conn.execute("SELECT 1")
        resp.media = {"status": "ready"}
        resp.status = falcon.HTTP_200
