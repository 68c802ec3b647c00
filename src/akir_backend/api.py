# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""FastAPI application factory for the restaurant backend.

Endpoints:
  GET  /                  plain-text banner
  GET  /health            liveness plus whether email delivery is configured
  GET  /metrics           Prometheus metrics
  POST /api/reservations  table reservation form
  POST /api/contact       contact form

Example:
    Creating and running the application::

        from akir_backend.api import create_app
        from akir_backend.config import load_settings

        app = create_app(load_settings())
        uvicorn.run(app, host="0.0.0.0", port=4000)
"""

from __future__ import annotations

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from datetime import datetime, timezone

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from .config import Settings
from .handlers import FormService
from .logger import get_logger
from .models import (
    ContactRequest,
    ErrorResponse,
    HealthResponse,
    MissingFieldsError,
    ReservationRequest,
    SubmissionResponse,
)
from .notifier import Notifier
from .selector import select_transport

logger = get_logger("api")

BANNER = "AKIR Restaurant Backend"


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(message=message).model_dump())


def create_app(
    settings: Settings,
    notifier: Notifier | None = None,
    *,
    lifespan: Callable[[FastAPI], AbstractAsyncContextManager[None]] | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Parameters
    ----------
    settings:
        Frozen settings loaded at startup.
    notifier:
        Dispatcher to use. When omitted one is built around the transport
        chosen by :func:`akir_backend.selector.select_transport`.
    lifespan:
        Optional lifespan context manager for startup/shutdown events.

    Returns
    -------
    FastAPI
        A configured application ready to be served by Uvicorn.
    """
    if notifier is None:
        notifier = Notifier(select_transport(settings.transport))
    forms = FormService(notifier, settings.transport.mail_to)

    api = FastAPI(title=BANNER, lifespan=lifespan)
    api.state.settings = settings
    api.state.notifier = notifier
    api.state.forms = forms

    api.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @api.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Log malformed bodies and answer with the form error shape."""
        logger.error("Validation error on %s %s: %s", request.method, request.url.path, exc.errors())
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid request body")

    @api.get("/", response_class=PlainTextResponse)
    async def root():
        return BANNER

    @api.get("/health", response_model=HealthResponse)
    async def health():
        """Liveness check; reports whether real email delivery is possible."""
        transport = settings.transport
        return HealthResponse(
            message=f"{BANNER} is running",
            emailConfigured=notifier.is_configured and bool(transport.mail_from and transport.mail_to),
            transport=notifier.transport_name,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )

    @api.get("/metrics")
    async def metrics():
        """Expose Prometheus metrics collected by the notifier."""
        return Response(content=notifier.metrics.generate_latest(), media_type="text/plain; version=0.0.4")

    @api.post("/api/reservations", response_model=SubmissionResponse, response_model_exclude_none=True)
    async def create_reservation(payload: ReservationRequest):
        """Accept a reservation request and notify operator and customer."""
        try:
            outcome = await forms.submit_reservation(payload)
        except MissingFieldsError as exc:
            logger.info("Reservation rejected: %s", exc)
            return _error(status.HTTP_400_BAD_REQUEST, "Missing required fields")
        except Exception:
            logger.exception("Error processing reservation")
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server error")
        return SubmissionResponse(message="Reservation request received", reservationId=outcome.reservation_id)

    @api.post("/api/contact", response_model=SubmissionResponse, response_model_exclude_none=True)
    async def submit_contact(payload: ContactRequest):
        """Accept a contact inquiry and forward it to the operator inbox."""
        try:
            await forms.submit_contact(payload)
        except MissingFieldsError as exc:
            logger.info("Contact form rejected: %s", exc)
            return _error(status.HTTP_400_BAD_REQUEST, "Missing required fields")
        except Exception:
            logger.exception("Error processing contact form")
            return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server error")
        return SubmissionResponse(message="Contact form submitted successfully")

    return api
