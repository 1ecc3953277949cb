"""Main entry point for the evaluation relay."""

import logging
import os
import typing as t

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import anatomyguard
from anatomyguard.core import AnatomyGuardContainer, BootConfiguration, di
from anatomyguard.core.config import EvaluatorWebSettings
from anatomyguard.llm.evaluation import DocumentTooLarge, EmptyDocument, EmptyResponse, EvaluationError, \
    GatewayUnavailable, MalformedPayload, SchemaViolation, UndecodableDocument, UnsupportedMediaType
from anatomyguard.model import DeploymentEnvironment

from .route import router
from .view import ErrorView

logger = logging.getLogger(__name__)

BOOT_ENV_VAR = "__AnatomyGuard_BOOT"

STATUS_BY_ERROR: dict[type[EvaluationError], int] = {
    UnsupportedMediaType: status.HTTP_415_UNSUPPORTED_MEDIA_TYPE,
    DocumentTooLarge: status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
    EmptyDocument: status.HTTP_400_BAD_REQUEST,
    UndecodableDocument: status.HTTP_400_BAD_REQUEST,
    MalformedPayload: status.HTTP_502_BAD_GATEWAY,
    SchemaViolation: status.HTTP_502_BAD_GATEWAY,
    EmptyResponse: status.HTTP_502_BAD_GATEWAY,
    GatewayUnavailable: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_for(error: EvaluationError) -> int:
    for cls in type(error).__mro__:
        if cls in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorView(error=message).model_dump(mode="json"))


async def handle_evaluation_error(request: Request, exc: Exception) -> JSONResponse:
    error = t.cast(EvaluationError, exc)
    status_code = status_for(error)
    logger.warning(
        "evaluation failed",
        extra={
            "path": request.url.path,
            "code": error.code,
            "status": status_code,
        },
    )
    return _error_response(status_code, error.user_message)


async def handle_validation_error(request: Request, exc: Exception) -> JSONResponse:
    errors = t.cast(RequestValidationError, exc).errors()
    if errors:
        first = errors[0]
        where = ".".join(str(part) for part in first["loc"] if part != "body")
        message = f"Invalid request at {where!r}: {first['msg']}" if where else f"Invalid request: {first['msg']}"
    else:
        message = "Invalid request"
    return _error_response(status.HTTP_400_BAD_REQUEST, message)


@di.inject
def _create_app(
    config: EvaluatorWebSettings = di.Provide["config.web.evaluator", di.as_(EvaluatorWebSettings)],
    env: DeploymentEnvironment = di.Provide["env"],
) -> FastAPI:
    app = FastAPI(
        title="AnatomyGuard",
        description="Audited evaluation reports for anatomy exams",
        version=anatomyguard.__version__,
    )

    if env is DeploymentEnvironment.Local:
        assert config.frontend is not None
        app.add_middleware(
            CORSMiddleware,
            allow_origins=[
                f"http://{config.frontend.host}:{config.frontend.port}",
                f"http://localhost:{config.frontend.port}",
            ],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.add_exception_handler(EvaluationError, handle_evaluation_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.include_router(router)
    return app


def create_app() -> FastAPI:
    """Factory function for uvicorn."""
    boot_vars = os.getenv(BOOT_ENV_VAR)
    if boot_vars:
        boot_cf = BootConfiguration.model_validate_json(boot_vars)
        ct = AnatomyGuardContainer()
        AnatomyGuardContainer.boot(ct, **dict(boot_cf))
        ct.wire(modules=["anatomyguard.web.evaluator.main", "anatomyguard.web.evaluator.route.evaluation"])
        return _create_app(config=EvaluatorWebSettings(**ct.config.web.evaluator()), env=boot_cf.env)
    return _create_app()
