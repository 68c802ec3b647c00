# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Common interface implemented by every outbound mail transport."""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..models import OutboundMessage


class MailTransport(ABC):
    """One way of delivering an :class:`OutboundMessage`.

    ``send`` performs exactly one delivery attempt and raises
    :class:`~akir_backend.transports.errors.TransportError` on any failure.
    Retrying is left to the caller.
    """

    name: str = "transport"

    @abstractmethod
    async def send(self, message: OutboundMessage) -> None:
        """Deliver ``message`` once."""

    async def verify(self) -> None:
        """Check that the transport is usable without sending anything.

        The default implementation has nothing to check.
        """

    async def close(self) -> None:
        """Release pooled connections or HTTP sessions."""

    def describe(self) -> str:
        return self.name
