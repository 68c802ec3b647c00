# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Exceptions raised by the outbound mail transports."""

from __future__ import annotations


class TransportError(RuntimeError):
    """Raised when a single send attempt through a transport fails.

    ``status`` carries the HTTP status code for provider API failures and is
    ``None`` for SMTP and network level errors.
    """

    code = "transport_error"

    def __init__(self, message: str, *, status: int | None = None):
        super().__init__(message)
        self.status = status


class TransportNotConfiguredError(TransportError):
    """Raised when an operation needs a real transport but none is configured."""

    code = "transport_not_configured"

    def __init__(self, message: str = "Mail transport not configured"):
        super().__init__(message)


def describe_error(exc: BaseException) -> str:
    """Readable one-line description; timeouts often carry no message."""
    return str(exc) or type(exc).__name__
