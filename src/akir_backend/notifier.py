# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Uniform email entry point used by the form handlers.

The :class:`Notifier` wraps whichever transport was selected at startup.
Callers never learn which one it is and never see transport exceptions:
every call returns a :class:`~akir_backend.models.SendResult`.

When no transport is configured the notifier simulates: the would-be send is
logged and reported as successful, without any network activity.
"""

from __future__ import annotations

from collections.abc import Iterable

from .logger import get_logger
from .models import OutboundMessage, SendResult
from .prometheus import NotificationMetrics
from .transports import MailTransport, TransportError

SIMULATION = "simulation"


class Notifier:
    """Send one message through the active transport, or simulate it."""

    def __init__(
        self,
        transport: MailTransport | None,
        metrics: NotificationMetrics | None = None,
    ):
        self.transport = transport
        self.metrics = metrics or NotificationMetrics()
        self.logger = get_logger("notifier")

    @property
    def transport_name(self) -> str:
        return self.transport.name if self.transport is not None else SIMULATION

    @property
    def is_configured(self) -> bool:
        return self.transport is not None

    async def send_email(self, to: str | Iterable[str], subject: str, html: str) -> SendResult:
        """Attempt one delivery of ``subject``/``html`` to ``to``.

        Transport failures are logged and returned as ``SendResult(ok=False)``;
        nothing is retried.
        """
        recipients = (to,) if isinstance(to, str) else tuple(to)
        message = OutboundMessage(recipients=recipients, subject=subject, html=html)

        if self.transport is None:
            self.logger.info(
                "[SIMULATION] Would email %s: %s",
                ", ".join(message.recipients),
                message.subject,
            )
            self.metrics.inc_simulated()
            return SendResult(ok=True, transport=SIMULATION, simulated=True)

        name = self.transport.name
        try:
            await self.transport.send(message)
        except TransportError as exc:
            self.logger.error(
                "Email to %s via %s failed: %s",
                ", ".join(message.recipients),
                name,
                exc,
            )
            self.metrics.inc_error(name)
            return SendResult(ok=False, transport=name, error=str(exc))

        self.logger.info("Email sent to %s via %s: %s", ", ".join(message.recipients), name, message.subject)
        self.metrics.inc_sent(name)
        return SendResult(ok=True, transport=name)

    async def verify(self) -> bool:
        """Run the transport's verification handshake for diagnostics only.

        Returns False on failure or in simulation mode; never raises for
        transport errors.
        """
        if self.transport is None:
            self.logger.info("Email disabled (missing credentials). Using simulation.")
            return False
        try:
            await self.transport.verify()
        except TransportError as exc:
            self.logger.error("Transport verify failed: %s", exc)
            return False
        self.logger.info("Transport verified: %s", self.transport.describe())
        return True

    async def close(self) -> None:
        if self.transport is not None:
            await self.transport.close()
