# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Data models for the restaurant backend.

This module defines the transient entities that live for the duration of a
single request: the normalized outbound message handed to the transports,
the outcome of one send attempt, and the Pydantic schemas for the two public
forms together with their JSON responses.

Models:
    - OutboundMessage: recipients, subject and HTML body of one email
    - SendResult: outcome of one dispatcher call
    - ReservationRequest: table reservation form
    - ContactRequest: contact inquiry form
    - HealthResponse / SubmissionResponse / ErrorResponse: JSON responses
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Annotated, Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CONTACT_SUBJECT = "General Inquiry"


class MissingFieldsError(ValueError):
    """Raised when a submitted form lacks one or more mandatory fields."""

    code = "missing_required_fields"

    def __init__(self, fields: Iterable[str]):
        self.fields = list(fields)
        super().__init__(f"Missing required fields: {', '.join(self.fields)}")


@dataclass(frozen=True)
class OutboundMessage:
    """A single email as seen by the transports.

    Attributes:
        recipients: Ordered, non-empty tuple of recipient addresses.
        subject: Subject line.
        html: HTML body.
    """

    recipients: tuple[str, ...]
    subject: str
    html: str

    def __post_init__(self) -> None:
        if isinstance(self.recipients, str):
            object.__setattr__(self, "recipients", (self.recipients,))
        cleaned = tuple(str(addr).strip() for addr in self.recipients if addr and str(addr).strip())
        if not cleaned:
            raise ValueError("OutboundMessage requires at least one recipient")
        object.__setattr__(self, "recipients", cleaned)


@dataclass(frozen=True)
class SendResult:
    """Outcome of one :meth:`Notifier.send_email` call.

    ``simulated`` is true when no transport is configured and the send was
    only logged.
    """

    ok: bool
    transport: str
    error: str | None = None
    simulated: bool = False


FormValue = str | int | float | bool | None


class _FormModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    required_fields: ClassVar[tuple[str, ...]] = ()

    def missing_fields(self) -> list[str]:
        """Return the names of required fields whose value is empty.

        ``None``, empty strings, ``0`` and ``False`` all count as missing.
        """
        return [name for name in self.required_fields if not getattr(self, name)]

    def ensure_complete(self) -> None:
        missing = self.missing_fields()
        if missing:
            raise MissingFieldsError(missing)


class ReservationRequest(_FormModel):
    """Table reservation form posted to ``/api/reservations``."""

    required_fields: ClassVar[tuple[str, ...]] = ("name", "email", "phone", "date", "time", "guests")

    name: FormValue = None
    email: FormValue = None
    phone: FormValue = None
    date: FormValue = None
    time: FormValue = None
    guests: FormValue = None
    special_requests: Annotated[FormValue, Field(default=None, alias="specialRequests")]
    message: FormValue = None

    @property
    def notes(self) -> str:
        """Special requests, falling back to the generic message, else ``""``."""
        if self.special_requests is not None:
            return str(self.special_requests)
        if self.message is not None:
            return str(self.message)
        return ""


class ContactRequest(_FormModel):
    """Contact inquiry form posted to ``/api/contact``."""

    required_fields: ClassVar[tuple[str, ...]] = ("name", "email", "message")

    name: FormValue = None
    email: FormValue = None
    subject: FormValue = None
    message: FormValue = None

    @property
    def subject_or_default(self) -> str:
        return str(self.subject) if self.subject else DEFAULT_CONTACT_SUBJECT


class SubmissionResponse(BaseModel):
    """Successful form submission."""

    success: bool = True
    message: str
    reservationId: str | None = None


class ErrorResponse(BaseModel):
    success: bool = False
    message: str


class HealthResponse(BaseModel):
    status: str = "OK"
    message: str
    emailConfigured: bool
    transport: str
    timestamp: str


def as_text(value: Any) -> str:
    """Render a submitted form value for inclusion in an email body."""
    if value is None:
        return ""
    return str(value)
