# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Command-line interface for the AKIR restaurant backend.

Usage:
    akir-backend serve --port 4000
    akir-backend config
    akir-backend config --json
    akir-backend verify
    akir-backend send-test --to you@example.com

All commands read the same settings as the server (``config.ini`` plus
environment variables, see :mod:`akir_backend.config`).
"""

from __future__ import annotations

import asyncio
import json
import sys
from datetime import datetime, timezone
from typing import Any, cast

import click
import uvicorn
from rich.console import Console
from rich.table import Table

from .config import Settings, load_settings
from .logger import configure_logging
from .notifier import Notifier
from .selector import select_transport
from .transports import MailTransport, TransportError, TransportNotConfiguredError

console = Console()
err_console = Console(stderr=True)


def run_async(coro):
    """Run an async coroutine synchronously."""
    return asyncio.run(coro)


def print_error(message: str) -> None:
    """Print an error message to stderr."""
    err_console.print(f"[red]Error:[/red] {message}")


def print_success(message: str) -> None:
    console.print(f"[green]✓[/green] {message}")


def print_json(data: Any) -> None:
    console.print_json(json.dumps(data, indent=2, default=str))


def _required_transport(settings: Settings) -> MailTransport:
    try:
        transport = select_transport(settings.transport, required=True)
    except TransportNotConfiguredError as exc:
        print_error(str(exc))
        sys.exit(1)
    return cast(MailTransport, transport)


@click.group()
@click.option("--config", "config_path", default=None, help="Path to config.ini (default: $AKIR_CONFIG or config.ini).")
@click.pass_context
def main(ctx: click.Context, config_path: str | None) -> None:
    """AKIR restaurant backend: reservation and contact form mailer."""
    try:
        settings = load_settings(config_path)
    except ValueError as exc:
        print_error(str(exc))
        sys.exit(2)
    configure_logging(settings.log_level)
    ctx.obj = settings


@main.command("serve")
@click.option("--host", "-h", default=None, help="Host to bind to (default from settings).")
@click.option("--port", "-p", type=int, default=None, help="Port to listen on (default from settings).")
@click.option("--reload", is_flag=True, help="Enable auto-reload for development.")
@click.pass_obj
def serve(settings: Settings, host: str | None, port: int | None, reload: bool) -> None:
    """Run the HTTP server with uvicorn."""
    uvicorn.run(
        "akir_backend.server:app",
        host=host or settings.host,
        port=port or settings.port,
        reload=reload,
        log_config=None,
    )


@main.command("config")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_obj
def show_config(settings: Settings, as_json: bool) -> None:
    """Show the effective configuration with secrets masked."""
    transport = select_transport(settings.transport)
    data = settings.masked()
    data["TRANSPORT"] = transport.describe() if transport is not None else "simulation"
    if as_json:
        print_json(data)
        return
    table = Table(title="AKIR backend configuration")
    table.add_column("Option", style="cyan")
    table.add_column("Value")
    for key, value in data.items():
        table.add_row(key, str(value))
    console.print(table)


@main.command("verify")
@click.pass_obj
def verify(settings: Settings) -> None:
    """Check that the active transport accepts our credentials."""
    transport = _required_transport(settings)

    async def _verify() -> None:
        try:
            await transport.verify()
        finally:
            await transport.close()

    try:
        run_async(_verify())
    except TransportError as exc:
        print_error(str(exc))
        sys.exit(1)
    print_success(f"Transport verified: {transport.describe()}")


@main.command("send-test")
@click.option("--to", "recipient", default=None, help="Recipient (default: the operator inbox).")
@click.pass_obj
def send_test(settings: Settings, recipient: str | None) -> None:
    """Send a one-off test email through the active transport."""
    transport = _required_transport(settings)
    to = recipient or settings.transport.mail_to or settings.transport.smtp_user
    if not to:
        print_error("No recipient: pass --to or configure MAIL_TO")
        sys.exit(1)

    notifier = Notifier(transport)
    sent_at = datetime.now(timezone.utc).isoformat()

    async def _send():
        try:
            return await notifier.send_email(
                to,
                f"AKIR Restaurant - {transport.name} test",
                f"<p>{transport.name} test at {sent_at}</p>",
            )
        finally:
            await notifier.close()

    result = run_async(_send())
    if not result.ok:
        print_error(result.error or "send failed")
        sys.exit(1)
    print_success(f"Test email sent to {to} via {transport.describe()}")


if __name__ == "__main__":
    main()
