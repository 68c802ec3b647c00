# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Prometheus metrics for the notification dispatcher.

Metrics exposed (``akir_`` prefix):
    - ``akir_emails_sent_total``: emails accepted by the transport, per transport.
    - ``akir_email_errors_total``: failed send attempts, per transport.
    - ``akir_emails_simulated_total``: sends logged in simulation mode.
    - ``akir_form_submissions_total``: accepted form submissions, per form.

Example:
    Scraping the metrics::

        GET /metrics
"""

from prometheus_client import CollectorRegistry, Counter, generate_latest


class NotificationMetrics:
    """Counters for email dispatch and form traffic.

    Each instance owns its registry so tests and multiple apps in one process
    do not collide.
    """

    def __init__(self, registry: CollectorRegistry | None = None):
        self.registry = registry or CollectorRegistry()
        self.sent = Counter(
            "akir_emails_sent_total",
            "Emails accepted by the mail transport",
            ["transport"],
            registry=self.registry,
        )
        self.errors = Counter(
            "akir_email_errors_total",
            "Failed email send attempts",
            ["transport"],
            registry=self.registry,
        )
        self.simulated = Counter(
            "akir_emails_simulated_total",
            "Emails logged instead of sent because no transport is configured",
            registry=self.registry,
        )
        self.submissions = Counter(
            "akir_form_submissions_total",
            "Accepted form submissions",
            ["form"],
            registry=self.registry,
        )

    def inc_sent(self, transport: str) -> None:
        self.sent.labels(transport=transport).inc()

    def inc_error(self, transport: str) -> None:
        self.errors.labels(transport=transport).inc()

    def inc_simulated(self) -> None:
        self.simulated.inc()

    def inc_submission(self, form: str) -> None:
        self.submissions.labels(form=form).inc()

    def generate_latest(self) -> bytes:
        """Render the registry in the Prometheus text format."""
        return generate_latest(self.registry)
