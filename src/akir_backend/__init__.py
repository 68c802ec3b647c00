"""AKIR restaurant backend: reservation and contact forms with email notification.

This package provides a small HTTP service with:

- Table reservation and contact form endpoints (FastAPI)
- Email notification through SendGrid, Resend or SMTP, chosen from configuration
- Simulation mode that logs would-be emails when no transport is configured
- A bounded, TLS-enforcing SMTP connection pool
- Prometheus metrics and a click-based CLI

Example:
    Building the application::

        from akir_backend.api import create_app
        from akir_backend.config import load_settings

        app = create_app(load_settings())
"""

__version__ = "0.1.0"
