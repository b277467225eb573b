"""
MailService
===========

Renders transactional emails and hands them to a :class:`Notifier` on a
background executor. Delivery is fire-and-forget: failures are logged and
never reach the HTTP caller.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from typing import Any

from lumir_auth.services._shared.ports.notifier import MailMessage, Notifier

log = logging.getLogger(__name__)

Renderer = Callable[..., str]


@dataclass(frozen=True, slots=True)
class MailTemplate:
    """Template name plus the subject line it is sent with."""

    name: str
    subject: str


CONFIRMATION = MailTemplate("confirmation", "Please confirm your email")
WELCOME = MailTemplate("welcome", "Welcome aboard")
GOODBYE = MailTemplate("goodbye", "Your account has been closed")
RESET_PASSWORD = MailTemplate("reset-password", "Reset your password")

TEMPLATES: dict[str, MailTemplate] = {
    t.name: t for t in (CONFIRMATION, WELCOME, GOODBYE, RESET_PASSWORD)
}


class MailService:
    """
    Build and dispatch templated notifications.

    :param notifier: Delivery adapter (SMTP or logging).
    :param executor: Pool running deliveries off the request thread.
    :param render: ``render(template_path, **context) -> str``; Flask's
        ``render_template`` in the application.
    """

    def __init__(self, *, notifier: Notifier, executor: Executor, render: Renderer) -> None:
        self.notifier = notifier
        self.executor = executor
        self.render = render

    def send(self, template: MailTemplate, *, to: str, context: dict[str, Any]) -> Future[None]:
        """
        Render ``template`` for ``to`` and schedule delivery.

        Rendering happens on the caller's thread (it needs the application
        context); only the blocking delivery runs on the executor.

        :returns: Future completing once delivery was attempted.
        """
        message = MailMessage(
            to=to,
            subject=template.subject,
            html=self.render(f"mail/{template.name}.html", **context),
            text=self.render(f"mail/{template.name}.txt", **context),
            template=template.name,
        )
        future = self.executor.submit(self.notifier.send, message)
        future.add_done_callback(_log_delivery_outcome(message))
        return future

    def send_confirmation(self, *, email: str, name: str, redirection: str) -> Future[None]:
        return self.send(
            CONFIRMATION, to=email, context={"name": name, "confirmation_link": redirection}
        )

    def send_welcome(self, *, email: str, name: str, redirection: str) -> Future[None]:
        return self.send(WELCOME, to=email, context={"name": name, "link": redirection})

    def send_goodbye(self, *, email: str, name: str, redirection: str) -> Future[None]:
        return self.send(GOODBYE, to=email, context={"name": name, "link": redirection})

    def send_reset_password(self, *, email: str, name: str, redirection: str) -> Future[None]:
        return self.send(
            RESET_PASSWORD, to=email, context={"name": name, "reset_link": redirection}
        )


def _log_delivery_outcome(message: MailMessage) -> Callable[[Future[None]], None]:
    def _done(future: Future[None]) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            log.error(
                "Failed to deliver %s email: %s",
                message.template,
                exc,
                extra={"at": "MailService.send"},
                exc_info=exc,
            )
        else:
            log.info("Delivered %s email", message.template, extra={"at": "MailService.send"})

    return _done
