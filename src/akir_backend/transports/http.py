# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Shared plumbing for the HTTPS transactional email providers.

Each provider posts one JSON envelope per message with a bearer API key.
Subclasses only describe the endpoint and the envelope shape.
"""

from __future__ import annotations

import asyncio
from abc import abstractmethod
from typing import Any

import aiohttp

from ..config import TransportConfig
from ..logger import get_logger
from ..models import OutboundMessage
from .base import MailTransport
from .errors import TransportError, describe_error

DEFAULT_REQUEST_TIMEOUT = 20.0


class HttpApiTransport(MailTransport):
    """Base class for providers reached through an authenticated JSON POST."""

    endpoint: str = ""
    provider: str = "HTTP"

    def __init__(
        self,
        config: TransportConfig,
        api_key: str,
        *,
        session: aiohttp.ClientSession | None = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
    ):
        self.config = config
        self.api_key = api_key
        self.timeout = timeout
        self.logger = get_logger(self.name)
        self._session = session
        self._owns_session = session is None

    @abstractmethod
    def build_payload(self, message: OutboundMessage, sender: str) -> dict[str, Any]:
        """Return the provider's JSON envelope for ``message``."""

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout))
            self._owns_session = True
        return self._session

    async def send(self, message: OutboundMessage) -> None:
        sender = self.config.mail_from
        if not sender:
            raise TransportError("Sender address not configured")
        payload = self.build_payload(message, sender)
        session = self._get_session()
        try:
            async with session.post(self.endpoint, json=payload, headers=self._headers()) as resp:
                if not 200 <= resp.status < 300:
                    body = await resp.text(errors="replace")
                    raise TransportError(
                        f"{self.provider} API error {resp.status}: {body}",
                        status=resp.status,
                    )
        except (aiohttp.ClientError, asyncio.TimeoutError) as exc:
            raise TransportError(f"{self.provider} request failed: {describe_error(exc)}") from exc

    async def verify(self) -> None:
        self.logger.info("%s transport uses HTTPS API at %s; nothing to verify", self.provider, self.endpoint)

    async def close(self) -> None:
        if self._session is not None and self._owns_session and not self._session.closed:
            await self._session.close()
        self._session = None

    def describe(self) -> str:
        return f"{self.provider} API"
