# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Resend email API transport."""

from __future__ import annotations

from typing import Any

from ..models import OutboundMessage
from .http import HttpApiTransport

RESEND_ENDPOINT = "https://api.resend.com/emails"


class ResendTransport(HttpApiTransport):
    """Flat recipient list, sender passed through as a single string."""

    name = "resend"
    provider = "Resend"
    endpoint = RESEND_ENDPOINT

    def build_payload(self, message: OutboundMessage, sender: str) -> dict[str, Any]:
        return {
            "from": sender,
            "to": list(message.recipients),
            "subject": message.subject,
            "html": message.html,
        }
