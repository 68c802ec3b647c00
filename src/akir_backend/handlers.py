# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Business logic for the reservation and contact forms.

Both handlers validate presence of the mandatory fields, compose the
notification emails and hand them to the :class:`~akir_backend.notifier.Notifier`.
Delivery is best effort: a failed send is logged but never changes the
answer given to the customer.

Example:
    Driving the handlers without HTTP::

        service = FormService(notifier, operator_inbox="owner@example.com")
        outcome = await service.submit_reservation(ReservationRequest(**payload))
        print(outcome.reservation_id)
"""

from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass, field

from . import templates
from .logger import get_logger
from .models import ContactRequest, ReservationRequest, SendResult, as_text
from .notifier import Notifier
from .prometheus import NotificationMetrics

RESERVATION_PREFIX = "AKIR"


class ReservationIdGenerator:
    """Produce ``AKIR-<milliseconds>`` references.

    Values increase strictly within one process; they are advisory only and
    are not unique across processes.
    """

    def __init__(self, prefix: str = RESERVATION_PREFIX, clock=time.time):
        self.prefix = prefix
        self._clock = clock
        self._last = 0

    def __call__(self) -> str:
        value = max(int(self._clock() * 1000), self._last + 1)
        self._last = value
        return f"{self.prefix}-{value}"


@dataclass
class ReservationOutcome:
    reservation_id: str
    deliveries: list[SendResult] = field(default_factory=list)


@dataclass
class ContactOutcome:
    delivery: SendResult


class FormService:
    """Reservation and contact handlers bound to one notifier.

    Attributes:
        notifier: Dispatcher used for every email.
        operator_inbox: Address that receives reservation and contact summaries.
    """

    def __init__(
        self,
        notifier: Notifier,
        operator_inbox: str | None,
        *,
        id_generator: ReservationIdGenerator | None = None,
        metrics: NotificationMetrics | None = None,
    ):
        self.notifier = notifier
        self.operator_inbox = operator_inbox
        self.next_reservation_id = id_generator or ReservationIdGenerator()
        self.metrics = metrics or notifier.metrics
        self.logger = get_logger("forms")

    async def _deliver(self, to: str | None, subject: str, html: str) -> SendResult:
        if not to:
            self.logger.error("Email '%s' not sent: no recipient address configured", subject)
            return SendResult(ok=False, transport=self.notifier.transport_name, error="No recipient")
        return await self.notifier.send_email(to, subject, html)

    async def submit_reservation(self, req: ReservationRequest) -> ReservationOutcome:
        """Validate ``req``, email operator and customer, return a reference.

        Both emails are sent concurrently and both are awaited to completion;
        their outcomes never affect the returned reference.

        Raises:
            MissingFieldsError: If a mandatory field is empty. No email is sent.
        """
        req.ensure_complete()

        operator = templates.reservation_for_operator(req)
        customer = templates.reservation_for_customer(req)
        results = await asyncio.gather(
            self._deliver(self.operator_inbox, operator.subject, operator.html),
            self._deliver(as_text(req.email), customer.subject, customer.html),
            return_exceptions=True,
        )

        deliveries: list[SendResult] = []
        for label, result in zip(("operator", "customer"), results, strict=True):
            if isinstance(result, BaseException):
                self.logger.error("Reservation %s email raised unexpectedly: %r", label, result)
                result = SendResult(ok=False, transport=self.notifier.transport_name, error=repr(result))
            elif not result.ok:
                self.logger.error("Reservation %s email failed: %s", label, result.error)
            deliveries.append(result)

        reservation_id = self.next_reservation_id()
        self.metrics.inc_submission("reservation")
        self.logger.info(
            "New reservation %s: name=%s date=%s time=%s guests=%s",
            reservation_id,
            as_text(req.name),
            as_text(req.date),
            as_text(req.time),
            as_text(req.guests),
        )
        return ReservationOutcome(reservation_id=reservation_id, deliveries=deliveries)

    async def submit_contact(self, req: ContactRequest) -> ContactOutcome:
        """Validate ``req`` and email its content to the operator inbox.

        Raises:
            MissingFieldsError: If name, email or message is empty. No email is sent.
        """
        req.ensure_complete()
        content = templates.contact_for_operator(req)
        try:
            result = await self._deliver(self.operator_inbox, content.subject, content.html)
        except Exception as exc:
            self.logger.error("Contact email raised unexpectedly: %r", exc)
            result = SendResult(ok=False, transport=self.notifier.transport_name, error=repr(exc))
        if not result.ok:
            self.logger.error("Contact email failed: %s", result.error)
        self.metrics.inc_submission("contact")
        return ContactOutcome(delivery=result)
