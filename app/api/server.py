"""FastAPI application exposing document extraction and analysis.

Endpoints:
    POST /api/process-document   - multipart `document` + X-Azure-Endpoint / X-Azure-Key
    POST /api/analyze-with-claude - JSON body + X-Claude-Api-Key
    GET  /api/health
"""

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.analysis.analyzer import Analyzer
from app.analysis.factory import AnalyzerFactory
from app.api.routes import router
from app.config.settings import Settings
from app.exceptions import (
    ConfigurationError,
    DocumentIntakeError,
    EmptyResponseError,
    ExtractionError,
    JobFailedError,
    JobTimeoutError,
    TransportError,
    ValidationError,
)
from app.extraction.base import BaseExtractionClient
from app.extraction.factory import ExtractionClientFactory
from app.logging.logger import Log

# Checked in order; subclasses before their bases.
_ERROR_STATUS_CODES: list[tuple[type[DocumentIntakeError], int]] = [
    (ValidationError, 400),
    (ConfigurationError, 400),
    (JobTimeoutError, 504),
    (TransportError, 502),
    (JobFailedError, 502),
    (EmptyResponseError, 502),
    (ExtractionError, 502),
]


def status_code_for(exc: DocumentIntakeError) -> int:
    for error_type, status_code in _ERROR_STATUS_CODES:
        if isinstance(exc, error_type):
            return status_code
    return 500


async def _handle_intake_error(request: Request, exc: DocumentIntakeError) -> JSONResponse:
    status_code = status_code_for(exc)
    Log.error(f"{request.method} {request.url.path} failed ({status_code}): {exc}")
    return JSONResponse(status_code=status_code, content={"error": str(exc)})


def create_app(
    settings: Settings | None = None,
    *,
    extraction_client: BaseExtractionClient | None = None,
    analyzer: Analyzer | None = None,
) -> FastAPI:
    """Build the API with clients from settings unless they are passed in."""
    settings = settings or Settings()
    app = FastAPI(title="Document Intake API")
    app.state.extraction_client = extraction_client or ExtractionClientFactory.create(settings)
    app.state.analyzer = analyzer or AnalyzerFactory.create(settings)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(DocumentIntakeError, _handle_intake_error)  # type: ignore[arg-type]
    app.include_router(router)
    return app
