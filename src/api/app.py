"""
Comment API Application

FastAPI application serving the durable comment and event membership
endpoints. Validation problems answer 400 with field detail and store
failures answer 500; neither takes the process down.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.orm import sessionmaker

from store import CommentBridge, ParticipantService, StorageFailure, ValidationError

from .routes import events_router

logger = logging.getLogger(__name__)


def create_app(session_factory: sessionmaker) -> FastAPI:
    """
    Build the API application around a session factory.

    Args:
        session_factory: Factory producing sessions for the durable store

    Returns:
        FastAPI: The configured application
    """
    app = FastAPI(title="Event Chat API")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.comment_bridge = CommentBridge(session_factory)
    app.state.participant_service = ParticipantService(session_factory)

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning(f"Rejected {request.method} {request.url.path}: {exc}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid request", "detail": exc.field_errors},
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation_error(
        request: Request, exc: RequestValidationError
    ):
        logger.warning(f"Malformed body for {request.method} {request.url.path}")
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={
                "error": "Invalid request format",
                "detail": jsonable_encoder(exc.errors()),
            },
        )

    @app.exception_handler(StorageFailure)
    async def handle_storage_failure(request: Request, exc: StorageFailure):
        logger.error(
            f"Storage failure during {exc.operation} "
            f"for {request.method} {request.url.path}: {exc}"
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Internal Server Error"},
        )

    app.include_router(events_router)

    logger.info("Event chat API initialized")
    return app
