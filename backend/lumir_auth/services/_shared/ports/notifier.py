from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol


@dataclass(frozen=True, slots=True)
class MailMessage:
    """
    Rendered email ready for delivery.

    :ivar to: Recipient address.
    :ivar subject: Subject line.
    :ivar html: Rendered HTML body.
    :ivar text: Plain-text alternative.
    :ivar template: Template name the body was rendered from.
    """

    to: str
    subject: str
    html: str
    text: str
    template: str = ""


class Notifier(Protocol):
    """Port for delivering rendered emails. Implementations may block."""

    def send(self, message: MailMessage) -> None: ...


@dataclass
class RecordingNotifier(Notifier):
    """Collects messages in memory for assertions in tests."""

    sent: list[MailMessage] = field(default_factory=list)

    def send(self, message: MailMessage) -> None:
        self.sent.append(message)
