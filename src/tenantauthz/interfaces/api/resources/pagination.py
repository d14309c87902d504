"""Query-string helpers for list endpoints."""

import falcon.asgi

from tenantauthz.application.dto import clamp_limit
from tenantauthz.application.dto.pagination import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT


class PageParams:
    """Reads `limit` and `cursor` and clamps limit to the configured bounds."""

    def __init__(
        self,
        default_limit: int = DEFAULT_PAGE_LIMIT,
        max_limit: int = MAX_PAGE_LIMIT,
    ) -> None:
        self.default_limit = default_limit
        self.max_limit = max_limit

    def read(self, req: falcon.asgi.Request) -> tuple[int, str | None]:
        limit = req.get_param_as_int("limit")
        cursor = req.get_param("cursor") or None
        return clamp_limit(limit, self.default_limit, self.max_limit), cursor
