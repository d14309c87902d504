"""Error handlers mapping exceptions to HTTP responses."""

import falcon
import falcon.asgi

from tenantauthz.domain.exceptions import TenantAuthzError, UnknownReference
from tenantauthz.telemetry import get_logger

logger = get_logger(__name__)


async def handle_domain_error(
    req: falcon.asgi.Request,
    resp: falcon.asgi.Response,
    ex: TenantAuthzError,
    params: dict,
) -> None:
    """Render a typed domain error with its status code."""
    status = ex.status_code
    if status >= 500:
        logger.error("server_error method=%s path=%s error=%s", req.method, req.path, ex.message)
    else:
        logger.warning(
            "client_error method=%s path=%s status=%d error=%s",
            req.method,
            req.path,
            status,
            ex.message,
        )
    if isinstance(ex, UnknownReference) and ex.missing:
        logger.info("unknown ids rejected path=%s ids=%s", req.path, ",".join(ex.missing))
    resp.status = falcon.code_to_http_status(status)
    resp.media = {"error": ex.message}


async def handle_http_error(
    req: falcon.asgi.Request,
    resp: falcon.asgi.Response,
    ex: falcon.HTTPError,
    params: dict,
) -> None:
    """Render falcon HTTP errors (bad query params, malformed JSON) in the same envelope."""
    logger.warning(
        "client_error method=%s path=%s status=%s error=%s",
        req.method,
        req.path,
        ex.status,
        ex.title,
    )
    resp.status = ex.status
    if ex.headers:
        resp.set_headers(ex.headers)
    resp.media = {"error": ex.description or ex.title}


async def handle_unexpected_error(
    req: falcon.asgi.Request,
    resp: falcon.asgi.Response,
    ex: Exception,
    params: dict,
) -> None:
    """Log the traceback and render a generic 500."""
    logger.exception("server_error method=%s path=%s", req.method, req.path)
    resp.status = falcon.HTTP_500
    resp.media = {"error": "Internal server error"}


def register_error_handlers(app: falcon.asgi.App) -> None:
    """Register handlers; the more specific one wins in Falcon."""
    app.add_error_handler(Exception, handle_unexpected_error)
    app.add_error_handler(falcon.HTTPError, handle_http_error)
    app.add_error_handler(TenantAuthzError, handle_domain_error)
