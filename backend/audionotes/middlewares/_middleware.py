import time
from typing import List

from loguru import logger
from starlette.middleware import Middleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import Response
from starlette_context import context
from starlette_context.middleware import RawContextMiddleware
from starlette_context.plugins import RequestIdPlugin

from audionotes.core.config.logging import method_ctx, path_ctx, request_id_ctx, uid_ctx
from audionotes.core.config.settings import settings


DEFAULT_ALLOWED_ORIGINS = (
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
)


def get_allowed_origins() -> List[str]:
    """Local dev origins plus the comma separated CORS_ALLOWED_ORIGINS."""
    extra = (settings.CORS_ALLOWED_ORIGINS or "").split(",")
    origins = list(DEFAULT_ALLOWED_ORIGINS)
    origins += [o.strip() for o in extra if o.strip() and o.strip() not in origins]
    return origins


def build_middlewares() -> List[Middleware]:
    """
    Outermost first. RawContextMiddleware has to wrap the others so the
    request id and the ``user_id`` set by the auth dependency are available
    to them.
    """
    return [
        Middleware(RawContextMiddleware, plugins=(RequestIdPlugin(),)),
        Middleware(RequestContextMiddleware),
        Middleware(
            CORSMiddleware,
            allow_origins=get_allowed_origins(),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        ),
        Middleware(VersionHeaderMiddleware),
    ]


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tags log records with the current request and logs one line per request."""

    async def dispatch(self, request: Request, call_next):
        started = time.perf_counter()
        tokens = [
            (request_id_ctx, request_id_ctx.set(context.get("X-Request-ID") or "-")),
            (method_ctx, method_ctx.set(request.method)),
            (path_ctx, path_ctx.set(request.url.path)),
            (uid_ctx, uid_ctx.set("guest")),
        ]
        try:
            response = await call_next(request)
        except Exception:
            logger.exception(f"Unhandled error after {_elapsed_ms(started)} ms")
            raise
        else:
            # the auth dependency stores the caller once the route has run
            user = getattr(request.state, "user", None)
            level = "WARNING" if response.status_code >= 500 else "INFO"
            logger.bind(uid=str(user.id) if user else "guest").log(
                level, f"{response.status_code} in {_elapsed_ms(started)} ms"
            )
            return response
        finally:
            for var, token in reversed(tokens):
                var.reset(token)


class VersionHeaderMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        response: Response = await call_next(request)
        response.headers["X-API-Version"] = str(settings.API_VERSION)
        return response


def _elapsed_ms(started: float) -> str:
    return f"{(time.perf_counter() - started) * 1000:.1f}"
