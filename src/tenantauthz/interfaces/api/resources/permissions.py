"""Permission registry API resources."""

import falcon.asgi

from tenantauthz.application.use_cases.permission.create_permission import (
    CreatePermissionUseCase,
)
from tenantauthz.application.use_cases.permission.deprecate_permission import (
    DeprecatePermissionUseCase,
)
from tenantauthz.application.use_cases.permission.list_permissions import (
    ListPermissionsUseCase,
)
from tenantauthz.domain.exceptions import NotFound, ValidationError
from tenantauthz.domain.value_objects import PermissionStatus
from tenantauthz.interfaces.api.resources.pagination import PageParams
from tenantauthz.interfaces.api.schemas import CreatePermissionBody, parse_body
from tenantauthz.interfaces.api.serializers import page_to_dict, permission_to_dict


class PermissionsResource:
    """GET/POST /v1/permissions - list and create permissions."""

    def __init__(
        self,
        list_permissions: ListPermissionsUseCase,
        create_permission: CreatePermissionUseCase,
        page_params: PageParams | None = None,
    ) -> None:
        self._list = list_permissions
        self._create = create_permission
        self._page_params = page_params or PageParams()

    async def on_get(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """List permissions, filtered by ?status= and ?query=."""
        limit, cursor = self._page_params.read(req)
        raw_status = req.get_param("status")
        try:
            status = PermissionStatus(raw_status.upper()) if raw_status else None
        except ValueError as e:
            raise ValidationError(f"Invalid status: {raw_status}") from e

        page = await self._list.execute(
            status=status,
            query=req.get_param("query"),
            limit=limit,
            cursor=cursor,
        )
        resp.media = page_to_dict(page, permission_to_dict)
        resp.status = falcon.HTTP_200

    async def on_post(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        """Create permission."""
        body = await parse_body(req, CreatePermissionBody)
        permission = await self._create.execute(body.key, body.description)
        resp.media = permission_to_dict(permission)
        resp.status = falcon.HTTP_201


class PermissionResource:
    """GET /v1/permissions/{permission_id}."""

    def __init__(self, unit_of_work_factory: type) -> None:
        self._uow_factory = unit_of_work_factory

    async def on_get(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        permission_id: str,
    ) -> None:
        async with self._uow_factory() as uow:
            permission = await uow.permissions.get_by_id(permission_id)
        if not permission:
            raise NotFound("Permission", permission_id)
        resp.media = permission_to_dict(permission)
        resp.status = falcon.HTTP_200


class PermissionDeprecateResource:
    """PATCH /v1/permissions/{permission_id}/deprecate."""

    def __init__(self, deprecate_permission: DeprecatePermissionUseCase) -> None:
        self._deprecate = deprecate_permission

    async def on_patch(
        self,
        req: falcon.asgi.Request,
        resp: falcon.asgi.Response,
        permission_id: str,
    ) -> None:
        permission = await self._deprecate.execute(permission_id)
        resp.media = {
            "permission_id": permission.permission_id,
            "status": permission.status.value,
            "updated_at": permission.updated_at.isoformat(),
        }
        resp.status = falcon.HTTP_200
