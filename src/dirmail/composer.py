"""Builds outbound messages from scan results."""

from typing import Optional

import jinja2

from .exceptions import ConfigurationError, InvalidRecipient
from .models import Message, RecipientEntry

DEFAULT_BODY_TEMPLATE = "see attached\n"


class MessageComposer:
    """Turns a recipient entry into an immutable Message.

    The body is a Jinja2 template whose only variable is ``subject``.
    """

    def __init__(self, body_template: Optional[str] = None):
        """Initialize the composer.

        Args:
            body_template: Body template source, defaults to a short notice

        Raises:
            ConfigurationError: If the template does not parse or uses variables other than subject
        """
        self.body_template = body_template if body_template is not None else DEFAULT_BODY_TEMPLATE
        self.env = jinja2.Environment(
            autoescape=False,
            undefined=jinja2.StrictUndefined,
            keep_trailing_newline=True,
        )
        try:
            self._template = self.env.from_string(self.body_template)
            self._template.render(subject="")
        except jinja2.TemplateError as e:
            raise ConfigurationError(f"Invalid body template: {e}") from e

    def render_body(self, subject: str) -> str:
        """Render the message body for a subject."""
        return self._template.render(subject=subject)

    def compose(self, entry: RecipientEntry, sender: str, subject: str) -> Message:
        """Compose a message for one recipient entry.

        Args:
            entry: Recipient entry from the scanner
            sender: Sender account identifier
            subject: Message subject

        Returns:
            Message ready for a transport

        Raises:
            InvalidRecipient: If the entry has no recipient or sender is empty
        """
        if not entry.recipient or not entry.recipient.strip():
            raise InvalidRecipient(f"Empty recipient for attachment {entry.attachment}")
        if not sender or not sender.strip():
            raise InvalidRecipient("Sender must not be empty")

        return Message(
            sender=sender,
            recipient=entry.recipient,
            subject=subject,
            body=self.render_body(subject),
            attachment=entry.attachment.absolute(),
        )
