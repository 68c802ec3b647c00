# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Outbound mail transports.

Three interchangeable implementations of :class:`MailTransport`:

- :class:`SendGridTransport`: SendGrid v3 HTTPS API
- :class:`ResendTransport`: Resend HTTPS API
- :class:`SmtpTransport`: authenticated SMTP submission through a bounded pool
"""

from .base import MailTransport
from .errors import TransportError, TransportNotConfiguredError, describe_error
from .resend import ResendTransport
from .sendgrid import SendGridTransport
from .smtp import SmtpTransport

__all__ = [
    "MailTransport",
    "ResendTransport",
    "SendGridTransport",
    "SmtpTransport",
    "TransportError",
    "TransportNotConfiguredError",
    "describe_error",
]
