# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""SendGrid v3 mail send transport."""

from __future__ import annotations

from email.utils import parseaddr
from typing import Any

from ..models import OutboundMessage
from .http import HttpApiTransport

SENDGRID_ENDPOINT = "https://api.sendgrid.com/v3/mail/send"


def parse_sender(value: str) -> dict[str, str]:
    """Split ``"Display Name <address>"`` (or a bare address) into SendGrid's form."""
    name, address = parseaddr(value)
    sender = {"email": address or value.strip()}
    if name:
        sender["name"] = name
    return sender


class SendGridTransport(HttpApiTransport):
    """Recipients grouped in one personalization block, structured sender."""

    name = "sendgrid"
    provider = "SendGrid"
    endpoint = SENDGRID_ENDPOINT

    def build_payload(self, message: OutboundMessage, sender: str) -> dict[str, Any]:
        return {
            "personalizations": [{"to": [{"email": addr} for addr in message.recipients]}],
            "from": parse_sender(sender),
            "subject": message.subject,
            "content": [{"type": "text/html", "value": message.html}],
        }
