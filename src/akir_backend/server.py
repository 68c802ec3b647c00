# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""ASGI application entry point for uvicorn.

Settings are loaded from ``config.ini`` / the environment when the module is
imported, the mail transport is selected once, and its verification handshake
runs in the background at startup purely for diagnostics.

Usage:
    uvicorn akir_backend.server:app --host 0.0.0.0 --port 4000
"""

from __future__ import annotations

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI

from .api import BANNER, create_app
from .config import Settings, load_settings
from .logger import configure_logging, get_logger
from .notifier import Notifier
from .selector import select_transport

logger = get_logger("server")


def build_app(settings: Settings) -> FastAPI:
    """Wire settings, transport, notifier and lifespan into an application."""
    notifier = Notifier(select_transport(settings.transport))

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("%s starting on port %s", BANNER, settings.port)
        logger.info("Email: %s", "Configured" if notifier.is_configured else "Simulation (set SMTP_USER/PASS)")
        logger.info("Config: %s", settings.masked())
        verify_task = asyncio.create_task(notifier.verify())
        yield
        verify_task.cancel()
        with suppress(asyncio.CancelledError):
            await verify_task
        await notifier.close()

    return create_app(settings, notifier, lifespan=lifespan)


_settings = load_settings()
configure_logging(_settings.log_level)
app = build_app(_settings)
