import logging
from contextlib import asynccontextmanager
from typing import Optional

import openai
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ..config import Settings, settings as default_settings
from ..exceptions import FeedbackAppError, ValidationFailedError
from ..services.cycle_service import CycleService
from ..services.enhancement_service import EnhancementService
from ..services.openai_gateway import OpenAIGateway
from ..services.report_service import ReportService
from ..services.request_service import RequestService
from ..services.response_service import ResponseService
from ..services.transcription_service import TranscriptionService
from ..storage.memory_storage import InMemoryStorageService
from ..storage.seed import seed_demo_data
from .routers import direct_reports, gateways, requests

logger = logging.getLogger(__name__)

APP_VERSION = "0.1.0"


def _error_location(loc) -> str:
    """Dotted field path of a validation error, without its location prefix."""
    parts = [str(part) for part in loc]
    if parts and parts[0] in ("body", "query", "path", "header"):
        parts = parts[1:]
    return ".".join(parts)


def validation_error_from(exc: RequestValidationError) -> ValidationFailedError:
    """Maps a FastAPI body/query validation failure onto the JSON error body."""
    raw = exc.errors()
    if any(err["type"] == "json_invalid" for err in raw):
        return ValidationFailedError("Request body is not valid JSON", debug={"errors": [err["msg"] for err in raw]})

    errors = [{"field": _error_location(err["loc"]), "message": err["msg"]} for err in raw]
    field = errors[0]["field"] if errors and errors[0]["field"] else None
    return ValidationFailedError("Invalid request body", debug={"errors": errors}, field=field)


def create_app(
    settings: Settings = default_settings,
    storage: Optional[InMemoryStorageService] = None,
    openai_client: Optional[openai.AsyncOpenAI] = None,
) -> FastAPI:
    """
    Builds the API application and wires its services.

    `storage` and `openai_client` can be injected, which is how the tests
    replace the OpenAI client with a mock.
    """
    storage = storage or InMemoryStorageService()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if settings.SEED_DEMO_DATA:
            await seed_demo_data(storage)
        if not settings.openai.API_KEY and openai_client is None:
            logger.warning("OPENAI_API_KEY is not set; AI endpoints will return errors.")
        yield

    app = FastAPI(
        title="LendMe360 API",
        description="360-degree feedback requests, responses and AI summaries",
        version=APP_VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def log_request(request: Request, call_next):
        response = await call_next(request)
        logger.info(f"{request.method} {request.url.path} -> {response.status_code}")
        return response

    @app.exception_handler(FeedbackAppError)
    async def handle_app_error(request: Request, exc: FeedbackAppError):
        logger.warning(f"{request.method} {request.url.path} failed: {type(exc).__name__}: {exc.message}")
        return JSONResponse(status_code=exc.status_code, content=exc.to_dict())

    @app.exception_handler(RequestValidationError)
    async def handle_invalid_body(request: Request, exc: RequestValidationError):
        error = validation_error_from(exc)
        logger.warning(f"{request.method} {request.url.path} rejected: {error.debug['errors']}")
        return JSONResponse(status_code=error.status_code, content=error.to_dict())

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    # Initialize services
    gateway = OpenAIGateway(config=settings.openai, client=openai_client)
    enhancement_service = EnhancementService(gateway)
    report_service = ReportService(gateway)
    transcription_service = TranscriptionService(gateway)
    request_service = RequestService(storage)

    app.state.storage = storage
    app.state.enhancement_service = enhancement_service
    app.state.report_service = report_service
    app.state.transcription_service = transcription_service
    app.state.request_service = request_service
    app.state.response_service = ResponseService(
        storage=storage,
        request_service=request_service,
        enhancement_service=enhancement_service,
        transcription_service=transcription_service,
    )
    app.state.cycle_service = CycleService(
        storage=storage,
        report_service=report_service,
        min_submissions_to_complete=settings.MIN_SUBMISSIONS_TO_COMPLETE,
    )

    # Register routers
    app.include_router(gateways.router)
    app.include_router(requests.router)
    app.include_router(direct_reports.router)

    @app.get("/health")
    async def health():
        return {"status": "healthy", "service": "LendMe360", "version": APP_VERSION}

    return app
