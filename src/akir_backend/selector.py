# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Pick the single active mail transport from the configuration.

Priority order, evaluated once at startup:

1. SendGrid, when ``SENDGRID_API_KEY`` is set
2. Resend, when ``RESEND_API_KEY`` is set
3. SMTP, when both ``SMTP_USER`` and ``SMTP_PASS`` are set
4. none: the notifier runs in simulation mode
"""

from __future__ import annotations

from .config import TransportConfig
from .logger import get_logger
from .transports import (
    MailTransport,
    ResendTransport,
    SendGridTransport,
    SmtpTransport,
    TransportNotConfiguredError,
)

logger = get_logger("selector")


def select_transport(config: TransportConfig, *, required: bool = False) -> MailTransport | None:
    """Build the transport the configuration calls for.

    Args:
        config: Immutable transport configuration.
        required: Raise instead of returning ``None`` when nothing is configured.

    Raises:
        TransportNotConfiguredError: If ``required`` and no credentials are present.
    """
    transport: MailTransport | None
    if config.sendgrid_api_key:
        transport = SendGridTransport(config, config.sendgrid_api_key)
    elif config.resend_api_key:
        transport = ResendTransport(config, config.resend_api_key)
    elif config.has_smtp_credentials:
        transport = SmtpTransport(config)
    else:
        transport = None

    if transport is None:
        if required:
            raise TransportNotConfiguredError(
                "No mail transport configured (set SENDGRID_API_KEY, RESEND_API_KEY or SMTP_USER/SMTP_PASS)"
            )
        logger.info("Email disabled (no provider key or SMTP_USER/PASS). Using simulation.")
        return None

    logger.info("Mail transport selected: %s", transport.describe())
    return transport
