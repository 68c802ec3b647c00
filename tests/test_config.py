"""Tests for settings loading from config.ini and the environment."""

import pytest

from akir_backend.config import (
    DEFAULT_CORS_ORIGINS,
    DEFAULT_PORT,
    Settings,
    SmtpTimeouts,
    TransportConfig,
    load_settings,
)


def test_defaults_without_file_or_env(tmp_path):
    settings = load_settings(tmp_path / "missing.ini", environ={})

    assert settings.port == DEFAULT_PORT == 4000
    assert settings.host == "0.0.0.0"
    assert settings.cors_origins == DEFAULT_CORS_ORIGINS
    assert settings.log_level == "INFO"
    transport = settings.transport
    assert transport.smtp_host == "smtp.gmail.com"
    assert transport.smtp_port == 587
    assert transport.smtp_implicit_tls is False
    assert transport.smtp_user is None
    assert transport.mail_from is None
    assert transport.mail_to is None
    assert transport.smtp_timeouts == SmtpTimeouts(connect=15.0, greeting=10.0, socket=20.0)
    assert transport.smtp_max_connections == 2


def test_environment_names_and_fallbacks(tmp_path):
    env = {
        "PORT": "8080",
        "CORS_ORIGINS": "https://akir.example.com, http://localhost:5175 ,",
        "EMAIL_USER": "bookings@example.com",
        "EMAIL_PASS": "app-password",
        "RESTAURANT_EMAIL": "owner@example.com",
        "SMTP_PORT": "465",
        "AKIR_LOG_LEVEL": "debug",
    }
    settings = load_settings(tmp_path / "missing.ini", environ=env)

    assert settings.port == 8080
    assert settings.cors_origins == ("https://akir.example.com", "http://localhost:5175")
    assert settings.log_level == "DEBUG"
    transport = settings.transport
    assert transport.smtp_user == "bookings@example.com"
    assert transport.smtp_password == "app-password"
    assert transport.has_smtp_credentials is True
    # sender defaults to the SMTP user, operator inbox to RESTAURANT_EMAIL
    assert transport.mail_from == "bookings@example.com"
    assert transport.mail_to == "owner@example.com"
    assert transport.smtp_implicit_tls is True


def test_primary_env_names_win_over_legacy_aliases(tmp_path):
    env = {
        "SMTP_USER": "primary@example.com",
        "EMAIL_USER": "legacy@example.com",
        "SMTP_PASS": "p1",
        "EMAIL_PASS": "p2",
        "MAIL_TO": "inbox@example.com",
        "RESTAURANT_EMAIL": "other@example.com",
    }
    transport = load_settings(tmp_path / "missing.ini", environ=env).transport

    assert transport.smtp_user == "primary@example.com"
    assert transport.smtp_password == "p1"
    assert transport.mail_to == "inbox@example.com"


def test_ini_file_takes_precedence_over_environment(tmp_path):
    config_file = tmp_path / "config.ini"
    config_file.write_text(
        """
[server]
port = 5000
cors_origins = https://a.example.com

[smtp]
host = mail.example.com
port = 2525
secure = true
user = ini-user
password = ini-pass

[mail]
from = AKIR <noreply@example.com>
to = owner@example.com

[providers]
resend_api_key = re_123
"""
    )
    env = {"PORT": "9999", "SMTP_HOST": "ignored.example.com", "SENDGRID_API_KEY": "SG.abc"}
    settings = load_settings(config_file, environ=env)

    assert settings.port == 5000
    assert settings.cors_origins == ("https://a.example.com",)
    transport = settings.transport
    assert transport.smtp_host == "mail.example.com"
    assert transport.smtp_port == 2525
    assert transport.smtp_implicit_tls is True
    assert transport.mail_from == "AKIR <noreply@example.com>"
    assert transport.resend_api_key == "re_123"
    assert transport.sendgrid_api_key == "SG.abc"


def test_config_path_from_environment(tmp_path):
    config_file = tmp_path / "custom.ini"
    config_file.write_text("[server]\nport = 6000\n")

    settings = load_settings(environ={"AKIR_CONFIG": str(config_file)})

    assert settings.port == 6000


def test_blank_values_are_treated_as_missing(tmp_path):
    env = {"SENDGRID_API_KEY": "   ", "SMTP_USER": "", "SMTP_PORT": ""}
    transport = load_settings(tmp_path / "missing.ini", environ=env).transport

    assert transport.sendgrid_api_key is None
    assert transport.smtp_user is None
    assert transport.smtp_port == 587


def test_invalid_port_raises(tmp_path):
    with pytest.raises(ValueError, match="SMTP_PORT"):
        load_settings(tmp_path / "missing.ini", environ={"SMTP_PORT": "abc"})


def test_masked_hides_secrets():
    settings = Settings(
        transport=TransportConfig(
            sendgrid_api_key="SG.secret",
            smtp_user="user@example.com",
            smtp_password="hunter2",
            mail_to="owner@example.com",
        )
    )
    masked = settings.masked()

    assert masked["SENDGRID_API_KEY"] == "***"
    assert masked["RESEND_API_KEY"] == "(missing)"
    assert masked["SMTP_USER"] == "***"
    assert masked["SMTP_PASS"] == "***"
    assert masked["MAIL_FROM"] == "(missing)"
    assert masked["MAIL_TO"] == "owner@example.com"
    assert "hunter2" not in repr(masked)
    assert "SG.secret" not in repr(masked)


def test_settings_are_immutable():
    settings = Settings()
    with pytest.raises(AttributeError):
        settings.port = 1  # type: ignore[misc]
