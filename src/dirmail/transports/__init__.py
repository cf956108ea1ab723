"""Transport implementations."""

from .base import BaseTransport
from .mail_app import MailAppTransport
from .mock import MockTransport
from .sendgrid import SendGridTransport
from .smtp import SMTPTransport

__all__ = ["BaseTransport", "MailAppTransport", "MockTransport", "SendGridTransport", "SMTPTransport"]
