"""Response payload builders."""

from dataclasses import asdict

from tenantauthz.application.dto import (
    EffectivePermissions,
    MembershipRolesOutput,
    MembershipStatusOutput,
    OverrideRemovedOutput,
    OverrideSetOutput,
    Page,
)
from tenantauthz.domain.entities import (
    MembershipPermissionOverride,
    Permission,
    Role,
    TenantMembership,
)


def _iso(value) -> str | None:
    return value.isoformat() if value else None


def permission_to_dict(p: Permission) -> dict:
    return {
        "permission_id": p.permission_id,
        "key": p.key,
        "description": p.description,
        "status": p.status.value,
        "created_at": _iso(p.created_at),
        "updated_at": _iso(p.updated_at),
    }


def role_to_dict(r: Role) -> dict:
    return {
        "role_id": r.role_id,
        "tenant_id": r.tenant_id,
        "name": r.name,
        "status": r.status.value,
        "permissions": list(r.permissions),
        "role_version": r.role_version,
        "created_at": _iso(r.created_at),
    }


def membership_to_dict(m: TenantMembership) -> dict:
    return {
        "membership_id": m.membership_id,
        "tenant_id": m.tenant_id,
        "user_id": m.user_id,
        "roles": list(m.roles),
        "status": m.status.value,
        "expires_at": _iso(m.expires_at),
        "membership_version": m.membership_version,
        "created_at": _iso(m.created_at),
        "updated_at": _iso(m.updated_at),
    }


def override_to_dict(o: MembershipPermissionOverride) -> dict:
    return {
        "permission_id": o.permission_id,
        "effect": o.effect.value,
        "reason": o.reason,
        "created_at": _iso(o.created_at),
        "updated_at": _iso(o.updated_at),
    }


def page_to_dict(page: Page, serialize) -> dict:
    return {
        "items": [serialize(item) for item in page.items],
        "page": {"limit": page.limit, "next_cursor": page.next_cursor},
    }


def output_to_dict(
    output: MembershipRolesOutput
    | MembershipStatusOutput
    | OverrideSetOutput
    | OverrideRemovedOutput,
) -> dict:
    data = asdict(output)
    for key, value in data.items():
        if hasattr(value, "isoformat"):
            data[key] = value.isoformat()
        elif hasattr(value, "value"):
            data[key] = value.value
    return data


def effective_to_dict(e: EffectivePermissions) -> dict:
    return {
        "tenant_id": e.tenant_id,
        "user_id": e.user_id,
        "allowed": sorted(e.allowed),
        "denied": sorted(e.denied),
        "membership_version": e.membership_version,
        "role_versions": dict(e.role_versions),
    }
