# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""SMTP submission transport backed by :class:`~akir_backend.smtp_pool.SMTPPool`."""

from __future__ import annotations

import asyncio
from email.message import EmailMessage

import aiosmtplib

from ..config import TransportConfig
from ..logger import get_logger
from ..models import OutboundMessage
from ..smtp_pool import SMTPPool
from .base import MailTransport
from .errors import TransportError, describe_error


class SmtpTransport(MailTransport):
    """Deliver messages through an authenticated SMTP submission server."""

    name = "smtp"

    def __init__(self, config: TransportConfig, pool: SMTPPool | None = None):
        self.config = config
        self.logger = get_logger("smtp")
        self.pool = pool or SMTPPool(
            config.smtp_host,
            config.smtp_port,
            config.smtp_user,
            config.smtp_password,
            implicit_tls=config.smtp_implicit_tls,
            timeouts=config.smtp_timeouts,
            max_connections=config.smtp_max_connections,
            max_messages=config.smtp_max_messages,
        )

    def build_email(self, message: OutboundMessage) -> EmailMessage:
        """Build the MIME message for ``message``."""
        sender = self.config.mail_from or self.config.smtp_user
        if not sender:
            raise TransportError("Sender address not configured")
        msg = EmailMessage()
        msg["From"] = sender
        msg["To"] = ", ".join(message.recipients)
        msg["Subject"] = message.subject
        msg.set_content(message.html, subtype="html")
        return msg

    async def send(self, message: OutboundMessage) -> None:
        try:
            msg = self.build_email(message)
            async with self.pool.connection() as smtp:
                await asyncio.wait_for(
                    smtp.send_message(msg),
                    timeout=self.config.smtp_timeouts.socket,
                )
        except (aiosmtplib.SMTPException, asyncio.TimeoutError, OSError, ValueError) as exc:
            raise TransportError(f"SMTP send via {self.describe()} failed: {describe_error(exc)}") from exc

    async def verify(self) -> None:
        try:
            await self.pool.verify()
        except (aiosmtplib.SMTPException, asyncio.TimeoutError, OSError) as exc:
            raise TransportError(f"SMTP verify of {self.describe()} failed: {describe_error(exc)}") from exc

    async def close(self) -> None:
        await self.pool.close()

    def describe(self) -> str:
        mode = "tls" if self.config.smtp_implicit_tls else "starttls"
        return f"smtp://{self.config.smtp_host}:{self.config.smtp_port} ({mode})"
