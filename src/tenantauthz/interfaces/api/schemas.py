"""Request body models for the API."""

from datetime import datetime
from typing import Literal

import falcon.asgi
from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from tenantauthz.domain.exceptions import ValidationError


class CreatePermissionBody(BaseModel):
    key: str = Field(min_length=1)
    description: str = Field(min_length=1)


class CreateRoleBody(BaseModel):
    name: str


class IdSetUpdateBody(BaseModel):
    """add/remove id lists; both default to empty."""

    add: list[str] = Field(default_factory=list)
    remove: list[str] = Field(default_factory=list)


class OverrideBody(BaseModel):
    permission_id: str = Field(min_length=1)
    reason: str | None = None


class AddMembershipBody(BaseModel):
    status: Literal["ACTIVE", "INVITED"] = "ACTIVE"
    expires_at: datetime | None = None


class StatusChangeBody(BaseModel):
    reason: str | None = None


async def parse_body(req: falcon.asgi.Request, model: type[BaseModel]) -> BaseModel:
    """Read JSON media into `model`; a missing body counts as {}."""
    body = await req.get_media(default_when_empty={})
    try:
        return model.model_validate(body)
    except PydanticValidationError as e:
        first = e.errors()[0]
        field = ".".join(str(p) for p in first.get("loc", ())) or "body"
        raise ValidationError(f"{field}: {first.get('msg', 'invalid value')}") from e
