# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Bounded asyncio-friendly SMTP connection pool.

This module provides a small pool of authenticated SMTP sessions shared by
every request of the process. At most ``max_connections`` sessions exist at
any time; callers beyond that wait for a session to be released.

The pool handles the session lifecycle:
- Implicit TLS (port 465) or mandatory STARTTLS before authentication
- Separate connect, greeting and socket timeouts
- TTL and per-session message caps
- NOOP health checks before an idle session is reused
- Discarding sessions that failed during a send

Example:
    Sending through the pool::

        pool = SMTPPool(
            host="smtp.gmail.com",
            port=587,
            user="bookings@example.com",
            password="secret",
            implicit_tls=False,
        )

        async with pool.connection() as smtp:
            await smtp.send_message(message)

        await pool.close()
"""

from __future__ import annotations

import asyncio
import ssl
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import aiosmtplib

from .config import SmtpTimeouts
from .logger import get_logger

logger = get_logger("smtp")


class StartTLSError(aiosmtplib.SMTPException):
    """Raised when the STARTTLS upgrade could not be completed."""


def create_tls_context() -> ssl.SSLContext:
    """Default TLS context for SMTP sessions (system trust store, TLS 1.2+)."""
    context = ssl.create_default_context()
    context.minimum_version = ssl.TLSVersion.TLSv1_2
    return context


@dataclass
class _PooledSession:
    smtp: aiosmtplib.SMTP
    created: float
    messages: int = 0


class SMTPPool:
    """Pool of authenticated SMTP sessions capped at ``max_connections``.

    Attributes:
        host: SMTP submission host.
        port: SMTP port. 465 implies implicit TLS.
        implicit_tls: Whether the connection is encrypted from the start.
        max_connections: Maximum number of simultaneous sessions.
        max_messages: Messages delivered before a session is retired.
        ttl: Maximum age in seconds of an idle session before it is replaced.
    """

    def __init__(
        self,
        host: str,
        port: int,
        user: str | None,
        password: str | None,
        *,
        implicit_tls: bool,
        timeouts: SmtpTimeouts | None = None,
        max_connections: int = 2,
        max_messages: int = 50,
        ttl: int = 300,
        tls_context: ssl.SSLContext | None = None,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.implicit_tls = implicit_tls
        self.timeouts = timeouts or SmtpTimeouts()
        self.max_connections = max_connections
        self.max_messages = max_messages
        self.ttl = ttl
        self.tls_context = tls_context or create_tls_context()
        self._idle: list[_PooledSession] = []
        self._slots = asyncio.Semaphore(max_connections)
        self._lock = asyncio.Lock()

    async def _connect(self) -> aiosmtplib.SMTP:
        """Open, secure and authenticate a new SMTP session.

        TLS behavior:
        - implicit TLS: the socket is wrapped before the greeting
        - otherwise: plain connect, then an explicit STARTTLS which must
          succeed before credentials are sent

        Raises:
            asyncio.TimeoutError: If any phase exceeds its timeout.
            StartTLSError: If the STARTTLS upgrade fails.
            aiosmtplib.SMTPException: If connecting or authenticating fails.
        """
        smtp = aiosmtplib.SMTP(
            hostname=self.host,
            port=self.port,
            use_tls=self.implicit_tls,
            start_tls=False,
            tls_context=self.tls_context,
            timeout=self.timeouts.socket,
        )
        # greeting read is bounded by the connect call's own timeout
        await asyncio.wait_for(
            smtp.connect(timeout=self.timeouts.greeting),
            timeout=self.timeouts.connect + self.timeouts.greeting,
        )
        try:
            if not self.implicit_tls:
                try:
                    await asyncio.wait_for(
                        smtp.starttls(tls_context=self.tls_context),
                        timeout=self.timeouts.socket,
                    )
                except (aiosmtplib.SMTPException, asyncio.TimeoutError, OSError) as exc:
                    raise StartTLSError(f"STARTTLS failed on {self.host}:{self.port}: {exc}") from exc
            if self.user and self.password:
                await asyncio.wait_for(smtp.login(self.user, self.password), timeout=self.timeouts.socket)
        except BaseException:
            await self._quit(smtp)
            raise
        return smtp

    async def _is_alive(self, smtp: aiosmtplib.SMTP) -> bool:
        """Send NOOP and report whether the server answered 250."""
        try:
            code, _ = await asyncio.wait_for(smtp.noop(), timeout=5.0)
            return code == 250
        except Exception:
            return False

    async def _quit(self, smtp: aiosmtplib.SMTP) -> None:
        try:
            await asyncio.wait_for(smtp.quit(), timeout=5.0)
        except Exception:
            # quit is best effort; the socket is being discarded anyway
            logger.debug("SMTP quit failed on %s:%s", self.host, self.port)

    def _expired(self, session: _PooledSession) -> bool:
        return (time.time() - session.created) > self.ttl or session.messages >= self.max_messages

    async def _acquire(self) -> _PooledSession:
        while True:
            async with self._lock:
                session = self._idle.pop() if self._idle else None
            if session is None:
                return _PooledSession(smtp=await self._connect(), created=time.time())
            if not self._expired(session) and await self._is_alive(session.smtp):
                return session
            await self._quit(session.smtp)

    async def _release(self, session: _PooledSession, *, healthy: bool) -> None:
        if healthy and not self._expired(session):
            async with self._lock:
                self._idle.append(session)
            return
        await self._quit(session.smtp)

    @asynccontextmanager
    async def connection(self) -> AsyncIterator[aiosmtplib.SMTP]:
        """Borrow a ready session, waiting for a free slot if needed.

        A session that raised while borrowed is closed instead of being
        returned to the pool.
        """
        async with self._slots:
            session = await self._acquire()
            try:
                yield session.smtp
            except BaseException:
                await self._release(session, healthy=False)
                raise
            session.messages += 1
            await self._release(session, healthy=True)

    async def verify(self) -> None:
        """Open and authenticate one session, then close it."""
        async with self._slots:
            smtp = await self._connect()
            await self._quit(smtp)

    async def close(self) -> None:
        """Quit every idle session."""
        async with self._lock:
            sessions, self._idle = self._idle, []
        for session in sessions:
            await self._quit(session.smtp)

    @property
    def idle_count(self) -> int:
        return len(self._idle)
