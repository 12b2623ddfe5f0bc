import logging
from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi_injector import InjectorMiddleware, RequestScopeOptions, attach_injector
from audionotes.core.config.logging import init_logging
from audionotes.api.v1.routes._routes import register_routers
from audionotes.core.config.settings import settings
from audionotes.core.exceptions.error_messages import validate_error_messages
from audionotes.core.exceptions.exception_handler import init_error_handlers
from audionotes.db.session import session_manager
from audionotes.dependencies.injector import injector
from audionotes.middlewares._middleware import build_middlewares
from audionotes.services.inference import InferenceClient
from audionotes.services.object_storage import ObjectStorageService
from audionotes.services.processing_guard import ProcessingGuard


init_logging()
logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """
    Application-factory entry-point.
    Wires middlewares, DI, error handlers and routers.
    """
    app = FastAPI(
        title="Audionotes API",
        version=str(settings.API_VERSION),
        lifespan=_lifespan,
        middleware=build_middlewares(),
    )

    add_di_middleware(app)

    validate_env()

    init_error_handlers(app)
    validate_error_messages()

    register_routers(app)

    return app


def add_di_middleware(app):
    app.add_middleware(InjectorMiddleware, injector=injector)
    # fastapi-injector closes the request-scoped AsyncSession through its context manager
    options = RequestScopeOptions(enable_cleanup=True)
    attach_injector(app, injector, options)


def validate_env():
    if not settings.DB_NAME:
        raise RuntimeError("Missing required env var: DB_NAME")
    if not settings.R2_ENDPOINT:
        raise RuntimeError("Missing required env var: R2_ACCOUNT_ID or R2_ENDPOINT_URL")


def warm_up_singletons():
    """Build the external clients now so bad configuration fails start-up."""
    injector.get(ObjectStorageService)
    injector.get(InferenceClient)
    injector.get(ProcessingGuard)


# --------------------------------------------------------------------------- #
# Lifespan handler                                                            #
# --------------------------------------------------------------------------- #
@asynccontextmanager
async def _lifespan(app: FastAPI):
    """
    Startup / shutdown scaffold.
    Runs **before** the first request and **after** the last response.
    """
    logger.debug("Running lifespan startup tasks …")

    await session_manager.initialize()
    warm_up_singletons()
    try:
        yield
    finally:
        await session_manager.close()
        logger.debug("Lifespan shutdown complete.")
