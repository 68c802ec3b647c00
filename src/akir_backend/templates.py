# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Subjects and HTML bodies of the notification emails."""

from __future__ import annotations

from datetime import date, datetime
from typing import NamedTuple

from .models import ContactRequest, ReservationRequest, as_text

RESTAURANT_NAME = "AKIR Restaurant"


class Content(NamedTuple):
    subject: str
    html: str


def format_date(value: object) -> str:
    """Render an ISO date as ``M/D/YYYY``; anything else is returned unchanged."""
    text = as_text(value).strip()
    try:
        parsed = date.fromisoformat(text)
    except ValueError:
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            return text
    return f"{parsed.month}/{parsed.day}/{parsed.year}"


def reservation_for_operator(req: ReservationRequest) -> Content:
    notes = req.notes
    html = (
        f"<h2>New Reservation Request - {RESTAURANT_NAME}</h2>\n"
        "<h3>Customer</h3>\n"
        f"<p><b>Name:</b> {as_text(req.name)}<br/>"
        f"<b>Email:</b> {as_text(req.email)}<br/>"
        f"<b>Phone:</b> {as_text(req.phone)}</p>\n"
        "<h3>Reservation</h3>\n"
        f"<p><b>Date:</b> {format_date(req.date)}<br/>"
        f"<b>Time:</b> {as_text(req.time)}<br/>"
        f"<b>Guests:</b> {as_text(req.guests)}</p>\n"
    )
    if notes:
        html += f"<p><b>Notes:</b> {notes}</p>\n"
    return Content(f"New Reservation Request - {as_text(req.name)}", html)


def reservation_for_customer(req: ReservationRequest) -> Content:
    notes = req.notes
    html = (
        f"<h2>Thanks, {as_text(req.name)}!</h2>\n"
        "<p>We received your reservation request.</p>\n"
        f"<p><b>Date:</b> {format_date(req.date)} | "
        f"<b>Time:</b> {as_text(req.time)} | "
        f"<b>Guests:</b> {as_text(req.guests)}</p>\n"
    )
    if notes:
        html += f"<p><b>Your notes:</b> {notes}</p>\n"
    html += "<p>We will contact you within 24 hours to confirm.</p>\n"
    return Content(f"Reservation Request Received - {RESTAURANT_NAME}", html)


def contact_for_operator(req: ContactRequest) -> Content:
    subject = req.subject_or_default
    html = (
        "<h2>New Contact Form Submission</h2>\n"
        f"<p><b>Name:</b> {as_text(req.name)}<br/><b>Email:</b> {as_text(req.email)}</p>\n"
        f"<p><b>Subject:</b> {subject}</p>\n"
        f'<pre style="white-space:pre-wrap">{as_text(req.message)}</pre>\n'
    )
    return Content(f"Contact Form: {subject}", html)
