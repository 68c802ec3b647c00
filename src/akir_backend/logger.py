# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Logging utilities for the AKIR restaurant backend.

Handlers, level and format are configured once by the entry points
(:mod:`akir_backend.server` and :mod:`akir_backend.cli`) through
:func:`configure_logging`. Modules only ask for a named logger.

Example:
    Typical usage in a module::

        from akir_backend.logger import get_logger

        logger = get_logger("smtp")
        logger.info("SMTP verified")
"""

import logging

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(message)s"
LOG_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def get_logger(name: str = "AkirBackend") -> logging.Logger:
    """Retrieve a logger bound to ``name``.

    No handlers are attached here; that responsibility lies with the
    application entry point.
    """
    return logging.getLogger(name)


def configure_logging(level: str = "INFO") -> None:
    """Apply the process-wide logging configuration.

    Unknown level names fall back to ``INFO``.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATE_FORMAT,
        force=True,
    )
