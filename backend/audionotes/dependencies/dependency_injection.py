from injector import Module, provider, singleton
import logging
from sqlalchemy.ext.asyncio import AsyncSession

from fastapi_injector import request_scope
from fastapi_injector import RequestScopeFactory
from audionotes.core.config.settings import settings
from audionotes.db.session import session_manager
from audionotes.repositories.recordings import RecordingsRepository
from audionotes.services.auth import AuthService
from audionotes.services.inference import InferenceClient
from audionotes.services.object_storage import ObjectStorageService
from audionotes.services.processing import ProcessingService
from audionotes.services.processing_guard import ProcessingGuard
from audionotes.services.recordings import RecordingService


logger = logging.getLogger(__name__)


class Dependencies(Module):

    # ------------------------------------------------------------------
    # PROVIDERS
    # ------------------------------------------------------------------
    @provider
    @request_scope
    def provide_session(self) -> AsyncSession:
        """
        Returns an AsyncSession instance managed by fastapi-injector's request scope.
        """
        return session_manager.get_session_factory()()

    @provider
    @singleton
    def provide_object_storage(self) -> ObjectStorageService:
        logger.debug("DI: creating object storage client")
        return ObjectStorageService.from_settings(settings)

    @provider
    @singleton
    def provide_inference_client(self) -> InferenceClient:
        logger.debug("DI: creating inference client")
        return InferenceClient()

    @provider
    @singleton
    def provide_auth_service(self) -> AuthService:
        return AuthService()

    def configure(self, binder):
        binder.bind(RecordingService, scope=request_scope)
        binder.bind(ProcessingService, scope=request_scope)
        binder.bind(RecordingsRepository, scope=request_scope)

        # Global singletons
        # - ProcessingGuard: in-flight pipelines must be visible to every request
        binder.bind(ProcessingGuard, to=ProcessingGuard, scope=singleton)
        binder.bind(RequestScopeFactory, scope=singleton)
