# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Configuration for the restaurant backend.

Settings are read once at startup from an optional INI file with environment
variables as fallbacks, and frozen into immutable dataclasses that are passed
explicitly to the transport selector, the notifier and the HTTP layer.

Example:
    Configuration file format (config.ini)::

        [server]
        host = 0.0.0.0
        port = 4000
        cors_origins = https://akir.example.com, http://localhost:5175

        [smtp]
        host = smtp.gmail.com
        port = 587
        user = bookings@example.com
        password = app-password

        [mail]
        from = AKIR Restaurant <bookings@example.com>
        to = owner@example.com

        [providers]
        sendgrid_api_key =
        resend_api_key =

        [logging]
        level = INFO

Environment variables:
    AKIR_CONFIG - Path to the INI file (default: config.ini)
    AKIR_LOG_LEVEL - Logging level (default: INFO)
    HOST, PORT - Listening address (default: 0.0.0.0, 4000)
    CORS_ORIGINS - Comma separated allowed origins (default: http://localhost:5175)
    SMTP_HOST, SMTP_PORT, SMTP_SECURE - SMTP server (default: smtp.gmail.com, 587)
    SMTP_USER / EMAIL_USER, SMTP_PASS / EMAIL_PASS - SMTP credentials
    MAIL_FROM - Sender address (default: the SMTP user)
    MAIL_TO / RESTAURANT_EMAIL - Operator inbox (default: the SMTP user)
    SENDGRID_API_KEY, RESEND_API_KEY - HTTPS provider credentials
"""

from __future__ import annotations

import configparser
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DEFAULT_PORT = 4000
DEFAULT_HOST = "0.0.0.0"
DEFAULT_CORS_ORIGINS = ("http://localhost:5175",)
DEFAULT_SMTP_HOST = "smtp.gmail.com"
DEFAULT_SMTP_PORT = 587
IMPLICIT_TLS_PORT = 465


@dataclass(frozen=True)
class SmtpTimeouts:
    """Per-phase SMTP timeouts in seconds."""

    connect: float = 15.0
    """TCP connect (and implicit TLS handshake)."""

    greeting: float = 10.0
    """Wait for the server's 220 greeting."""

    socket: float = 20.0
    """Any single command once the session is established."""


@dataclass(frozen=True)
class TransportConfig:
    """Credentials and endpoints for every supported mail transport.

    Only one transport is ever active; see
    :func:`akir_backend.selector.select_transport`.
    """

    sendgrid_api_key: str | None = None
    resend_api_key: str | None = None
    smtp_host: str = DEFAULT_SMTP_HOST
    smtp_port: int = DEFAULT_SMTP_PORT
    smtp_secure: bool = False
    smtp_user: str | None = None
    smtp_password: str | None = None
    mail_from: str | None = None
    mail_to: str | None = None
    smtp_timeouts: SmtpTimeouts = field(default_factory=SmtpTimeouts)
    smtp_max_connections: int = 2
    smtp_max_messages: int = 50

    @property
    def smtp_implicit_tls(self) -> bool:
        """True when the SMTP session must start encrypted (port 465)."""
        return self.smtp_secure or self.smtp_port == IMPLICIT_TLS_PORT

    @property
    def has_smtp_credentials(self) -> bool:
        return bool(self.smtp_user and self.smtp_password)

    def masked(self) -> dict[str, Any]:
        """Loggable view of the configuration with secrets hidden."""

        def secret(value: str | None) -> str:
            return "***" if value else "(missing)"

        return {
            "SENDGRID_API_KEY": secret(self.sendgrid_api_key),
            "RESEND_API_KEY": secret(self.resend_api_key),
            "SMTP_HOST": self.smtp_host,
            "SMTP_PORT": self.smtp_port,
            "SMTP_SECURE": self.smtp_implicit_tls,
            "SMTP_USER": secret(self.smtp_user),
            "SMTP_PASS": secret(self.smtp_password),
            "MAIL_FROM": self.mail_from or "(missing)",
            "MAIL_TO": self.mail_to or "(missing)",
        }


@dataclass(frozen=True)
class Settings:
    """Process-wide settings, immutable after startup."""

    transport: TransportConfig = field(default_factory=TransportConfig)
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    cors_origins: tuple[str, ...] = DEFAULT_CORS_ORIGINS
    log_level: str = "INFO"

    def masked(self) -> dict[str, Any]:
        return {
            "PORT": self.port,
            "HOST": self.host,
            "CORS_ORIGINS": list(self.cors_origins),
            **self.transport.masked(),
        }


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _parse_bool(value: str | None, default: bool = False) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    return default


def _parse_int(name: str, value: str | None, default: int) -> int:
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Invalid integer for {name}: {value!r}") from None


def _split_origins(value: str | None) -> tuple[str, ...]:
    if value is None:
        return DEFAULT_CORS_ORIGINS
    return tuple(part.strip() for part in value.split(",") if part.strip())


def load_settings(
    config_path: str | os.PathLike[str] | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Load settings from an INI file with environment variables as fallbacks.

    Args:
        config_path: INI file to read. Defaults to ``$AKIR_CONFIG`` or
            ``config.ini``; a missing file is not an error.
        environ: Environment mapping, ``os.environ`` when omitted.

    Returns:
        A frozen :class:`Settings` instance.

    Raises:
        ValueError: If a numeric option cannot be parsed.
    """
    env = os.environ if environ is None else environ
    path = Path(config_path or env.get("AKIR_CONFIG", "config.ini"))
    parser = configparser.ConfigParser(interpolation=None)
    parser.read(path)

    def get(section: str, option: str, *env_names: str) -> str | None:
        if parser.has_option(section, option):
            return parser.get(section, option)
        for name in env_names:
            if name in env:
                return env[name]
        return None

    smtp_user = _clean(get("smtp", "user", "SMTP_USER")) or _clean(env.get("EMAIL_USER"))
    smtp_password = _clean(get("smtp", "password", "SMTP_PASS")) or _clean(env.get("EMAIL_PASS"))

    transport = TransportConfig(
        sendgrid_api_key=_clean(get("providers", "sendgrid_api_key", "SENDGRID_API_KEY")),
        resend_api_key=_clean(get("providers", "resend_api_key", "RESEND_API_KEY")),
        smtp_host=_clean(get("smtp", "host", "SMTP_HOST")) or DEFAULT_SMTP_HOST,
        smtp_port=_parse_int("SMTP_PORT", get("smtp", "port", "SMTP_PORT"), DEFAULT_SMTP_PORT),
        smtp_secure=_parse_bool(get("smtp", "secure", "SMTP_SECURE")),
        smtp_user=smtp_user,
        smtp_password=smtp_password,
        mail_from=_clean(get("mail", "from", "MAIL_FROM")) or smtp_user,
        mail_to=(
            _clean(get("mail", "to", "MAIL_TO"))
            or _clean(env.get("RESTAURANT_EMAIL"))
            or smtp_user
        ),
    )

    return Settings(
        transport=transport,
        host=_clean(get("server", "host", "HOST")) or DEFAULT_HOST,
        port=_parse_int("PORT", get("server", "port", "PORT"), DEFAULT_PORT),
        cors_origins=_split_origins(get("server", "cors_origins", "CORS_ORIGINS")),
        log_level=(_clean(get("logging", "level", "AKIR_LOG_LEVEL")) or "INFO").upper(),
    )
