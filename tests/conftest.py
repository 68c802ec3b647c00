"""Shared fixtures: fake transports and settings builders."""

from __future__ import annotations

import pytest

from akir_backend.config import Settings, TransportConfig
from akir_backend.models import OutboundMessage
from akir_backend.notifier import Notifier
from akir_backend.transports import MailTransport, TransportError

OPERATOR = "owner@akir.test"


class RecordingTransport(MailTransport):
    """Transport that records every message and optionally fails some."""

    name = "recording"

    def __init__(self, fail_for: set[str] | None = None, fail_all: bool = False):
        self.sent: list[OutboundMessage] = []
        self.attempts: list[OutboundMessage] = []
        self.fail_for = fail_for or set()
        self.fail_all = fail_all
        self.verified = False
        self.closed = False

    async def send(self, message: OutboundMessage) -> None:
        self.attempts.append(message)
        if self.fail_all or self.fail_for.intersection(message.recipients):
            raise TransportError("550 mailbox unavailable")
        self.sent.append(message)

    async def verify(self) -> None:
        self.verified = True

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def transport_config():
    return TransportConfig(mail_from="AKIR Restaurant <bookings@akir.test>", mail_to=OPERATOR)


@pytest.fixture
def settings(transport_config):
    return Settings(transport=transport_config, cors_origins=("http://localhost:5175",))


@pytest.fixture
def recording_transport():
    return RecordingTransport()


@pytest.fixture
def notifier(recording_transport):
    return Notifier(recording_transport)
