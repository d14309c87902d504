"""List roles use case."""

from tenantauthz.application.dto import Page
from tenantauthz.domain.entities import Role
from tenantauthz.domain.value_objects import CreatedAtCursor


class ListRolesUseCase:
    """Page through a tenant's roles ordered by (created_at, role_id)."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self,
        tenant_id: str,
        *,
        limit: int = 50,
        cursor: str | None = None,
    ) -> Page[Role]:
        after = None
        if cursor:
            decoded = CreatedAtCursor.decode(cursor)
            after = (decoded.created_at, decoded.id)

        async with self._uow_factory() as uow:
            rows = await uow.roles.list_by_tenant(tenant_id, after=after, limit=limit + 1)

        items = rows[:limit]
        next_cursor = None
        if len(rows) > limit and items:
            last = items[-1]
            next_cursor = CreatedAtCursor(created_at=last.created_at, id=last.role_id).encode()
        return Page(items=items, limit=limit, next_cursor=next_cursor)
