"""Domain exceptions."""


class TenantAuthzError(Exception):
    """Base exception for tenantauthz.

    Every subclass carries the HTTP-style status the API layer maps it to.
    """

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(TenantAuthzError):
    """Validation failed for input data."""

    status_code = 400


class UnknownReference(ValidationError):
    """An add/remove list references ids that do not exist."""

    def __init__(self, message: str, missing: list[str] | None = None) -> None:
        super().__init__(message)
        self.missing = missing or []


class NotFound(TenantAuthzError):
    """Requested resource was not found."""

    status_code = 404

    def __init__(self, resource: str, key: object | None = None) -> None:
        message = f"{resource} not found" if key is None else f"{resource} not found: {key}"
        super().__init__(message)
        self.resource = resource
        self.key = key


class Conflict(TenantAuthzError):
    """A uniqueness constraint or state precondition was violated."""

    status_code = 409
