"""List permissions use case."""

from tenantauthz.application.dto import Page
from tenantauthz.domain.entities import Permission
from tenantauthz.domain.value_objects import PermissionStatus, SequenceCursor


class ListPermissionsUseCase:
    """Page through the registry in insertion order."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def execute(
        self,
        *,
        status: PermissionStatus | None = None,
        query: str | None = None,
        limit: int = 50,
        cursor: str | None = None,
    ) -> Page[Permission]:
        """Return at most `limit` permissions after `cursor`.

        Fetches limit + 1 rows so the presence of a next page is known
        without a second query. `query` is a case-insensitive substring match
        on key or description.
        """
        after_seq = SequenceCursor.decode(cursor).seq if cursor else None
        query = query.strip() if query else None

        async with self._uow_factory() as uow:
            rows = await uow.permissions.list(
                status=status,
                query=query or None,
                after_seq=after_seq,
                limit=limit + 1,
            )

        items = rows[:limit]
        next_cursor = None
        if len(rows) > limit and items:
            next_cursor = SequenceCursor(seq=items[-1].seq).encode()
        return Page(items=items, limit=limit, next_cursor=next_cursor)
