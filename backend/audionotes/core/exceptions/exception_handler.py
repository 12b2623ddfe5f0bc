import logging
import os
from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from audionotes.core.exceptions.error_messages import ErrorKey, get_error_message
from audionotes.core.exceptions.exception_classes import AppException


logger = logging.getLogger(__name__)


def _is_dev() -> bool:
    return os.getenv("ENV") == "dev"


def init_error_handlers(app):
    @app.exception_handler(AppException)
    def handle_app_exception(request: Request, error: AppException):
        if error.error_detail:
            logger.error(f"{error.error_key.value}: {error.error_detail}")
        logger.info(f"Handled bad request: {error}")
        response = {
            "error": get_error_message(
                request=request,
                error_key=error.error_key,
                error_variables=error.error_variables,
            ),
            "error_code": error.status_code,
            "error_key": error.error_key.value,
            "error_detail": error.error_detail if _is_dev() else None,
        }
        return JSONResponse(
            content=jsonable_encoder(response), status_code=error.status_code
        )

    @app.exception_handler(RequestValidationError)
    def handle_validation_error(request: Request, error: RequestValidationError):
        logger.info(f"Rejected invalid request: {error.errors()}")
        response = {
            "error": get_error_message(error_key=ErrorKey.BAD_REQUEST, request=request),
            "error_code": 400,
            "error_key": ErrorKey.BAD_REQUEST.value,
            "error_detail": error.errors() if _is_dev() else None,
        }
        return JSONResponse(content=jsonable_encoder(response), status_code=400)

    @app.exception_handler(500)
    def handle_internal_server_error(request: Request, _: Exception):
        response = {
            "error": get_error_message(
                error_key=ErrorKey.INTERNAL_ERROR, request=request
            ),
            "error_code": 500,
            "error_key": ErrorKey.INTERNAL_ERROR.value,
        }
        return JSONResponse(content=jsonable_encoder(response), status_code=500)
