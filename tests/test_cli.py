"""Tests for CLI commands and helper functions."""

import json

import pytest
from click.testing import CliRunner

from akir_backend import cli
from akir_backend.cli import main, run_async
from conftest import RecordingTransport

ENV_NAMES = (
    "PORT", "HOST", "CORS_ORIGINS", "SMTP_HOST", "SMTP_PORT", "SMTP_SECURE",
    "SMTP_USER", "SMTP_PASS", "EMAIL_USER", "EMAIL_PASS", "MAIL_FROM", "MAIL_TO",
    "RESTAURANT_EMAIL", "SENDGRID_API_KEY", "RESEND_API_KEY", "AKIR_LOG_LEVEL", "AKIR_CONFIG",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "akir.ini"
    path.write_text(
        "[smtp]\n"
        "user = bookings@akir.test\n"
        "password = app-password\n"
        "port = 465\n"
        "[mail]\n"
        "to = owner@akir.test\n"
    )
    return str(path)


def test_run_async():
    async def answer():
        return 42

    assert run_async(answer()) == 42


def test_config_json_masks_secrets(runner, config_file):
    result = runner.invoke(main, ["--config", config_file, "config", "--json"])

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["SMTP_USER"] == "***"
    assert data["MAIL_FROM"] == "bookings@akir.test"
    assert data["SMTP_PASS"] == "***"
    assert data["SENDGRID_API_KEY"] == "(missing)"
    assert data["MAIL_TO"] == "owner@akir.test"
    assert data["TRANSPORT"] == "smtp://smtp.gmail.com:465 (tls)"
    assert "app-password" not in result.output


def test_config_table_in_simulation_mode(runner):
    result = runner.invoke(main, ["config"])
    assert result.exit_code == 0, result.output
    assert "simulation" in result.output


def test_invalid_port_exits_with_usage_error(runner, monkeypatch):
    monkeypatch.setenv("SMTP_PORT", "abc")
    result = runner.invoke(main, ["config"])
    assert result.exit_code == 2
    assert "Invalid integer for SMTP_PORT" in result.output


def test_verify_without_transport_fails(runner):
    result = runner.invoke(main, ["verify"])
    assert result.exit_code == 1
    assert "No mail transport configured" in result.output


def test_verify_success(runner, monkeypatch):
    transport = RecordingTransport()
    monkeypatch.setattr(cli, "select_transport", lambda config, required=False: transport)

    result = runner.invoke(main, ["verify"])

    assert result.exit_code == 0, result.output
    assert transport.verified is True
    assert transport.closed is True
    assert "Transport verified" in result.output


def test_send_test_uses_operator_inbox_by_default(runner, monkeypatch, config_file):
    transport = RecordingTransport()
    monkeypatch.setattr(cli, "select_transport", lambda config, required=False: transport)

    result = runner.invoke(main, ["--config", config_file, "send-test"])

    assert result.exit_code == 0, result.output
    (message,) = transport.sent
    assert message.recipients == ("owner@akir.test",)
    assert message.subject == "AKIR Restaurant - recording test"
    assert transport.closed is True


def test_send_test_failure_exits_nonzero(runner, monkeypatch):
    transport = RecordingTransport(fail_all=True)
    monkeypatch.setattr(cli, "select_transport", lambda config, required=False: transport)

    result = runner.invoke(main, ["send-test", "--to", "me@akir.test"])

    assert result.exit_code == 1
    assert "550 mailbox unavailable" in result.output
    assert transport.attempts[0].recipients == ("me@akir.test",)


def test_send_test_without_recipient(runner, monkeypatch):
    monkeypatch.setattr(cli, "select_transport", lambda config, required=False: RecordingTransport())
    result = runner.invoke(main, ["send-test"])
    assert result.exit_code == 1
    assert "No recipient" in result.output


def test_serve_passes_settings_to_uvicorn(runner, monkeypatch):
    calls = {}
    monkeypatch.setattr(cli.uvicorn, "run", lambda app, **kwargs: calls.update(app=app, **kwargs))
    monkeypatch.setenv("PORT", "4100")

    result = runner.invoke(main, ["serve"])

    assert result.exit_code == 0, result.output
    assert calls["app"] == "akir_backend.server:app"
    assert calls["port"] == 4100
    assert calls["host"] == "0.0.0.0"
