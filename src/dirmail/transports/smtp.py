"""SMTP transport."""

import contextlib
import logging
import mimetypes
import smtplib
from email.message import EmailMessage
from email.utils import make_msgid
from typing import Optional

from ..exceptions import (
    AttachmentError,
    AuthenticationError,
    ClientUnavailableError,
    RecipientRejectedError,
    SendError,
)
from ..models import Acknowledgement, Message
from .base import BaseTransport

logger = logging.getLogger(__name__)


def build_mime_message(message: Message) -> EmailMessage:
    """Build a MIME message with the attachment embedded.

    Args:
        message: Message to convert

    Returns:
        EmailMessage ready for smtplib

    Raises:
        AttachmentError: If the attachment cannot be read
    """
    mime_message = EmailMessage()
    mime_message["From"] = message.sender
    mime_message["To"] = message.recipient
    mime_message["Subject"] = message.subject
    mime_message["Message-ID"] = make_msgid()
    mime_message.set_content(message.body, subtype="plain", charset="utf-8")

    path = message.attachment
    mime_type, _ = mimetypes.guess_type(path.name)
    if mime_type is None:
        maintype, subtype = "application", "octet-stream"
    else:
        maintype, subtype = mime_type.split("/", 1)

    try:
        with path.open("rb") as handle:
            mime_message.add_attachment(
                handle.read(),
                maintype=maintype,
                subtype=subtype,
                filename=path.name,
            )
    except OSError as e:
        raise AttachmentError(f"Cannot read attachment {path}: {e}") from e

    return mime_message


class SMTPTransport(BaseTransport):
    """Sends messages over SMTP, one connection per message."""

    name = "smtp"

    def __init__(
        self,
        host: str,
        port: int = 465,
        username: Optional[str] = None,
        password: Optional[str] = None,
        use_ssl: bool = True,
        use_starttls: bool = False,
        timeout: int = 30,
    ):
        if use_ssl and use_starttls:
            raise ValueError("use_ssl and use_starttls cannot both be enabled")
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_ssl = use_ssl
        self.use_starttls = use_starttls
        self.timeout = timeout

    def send(self, message: Message) -> Acknowledgement:
        """Send a message over SMTP.

        Raises:
            AuthenticationError: If login is rejected
            RecipientRejectedError: If the server refuses the recipient
            ClientUnavailableError: If the server cannot be reached
            SendError: For any other SMTP failure
        """
        mime_message = build_mime_message(message)

        try:
            server = self._connect()
        except smtplib.SMTPAuthenticationError as e:
            raise AuthenticationError(f"SMTP authentication failed: {e}") from e
        except (OSError, smtplib.SMTPException) as e:
            raise ClientUnavailableError(f"Cannot connect to {self.host}:{self.port}: {e}") from e

        try:
            refused = server.send_message(mime_message)
        except smtplib.SMTPRecipientsRefused as e:
            raise RecipientRejectedError(f"Recipient refused: {message.recipient}") from e
        except smtplib.SMTPServerDisconnected as e:
            raise ClientUnavailableError(f"SMTP server disconnected: {e}") from e
        except (OSError, smtplib.SMTPException) as e:
            raise SendError(f"SMTP error: {e}") from e
        finally:
            with contextlib.suppress(smtplib.SMTPException, OSError):
                server.quit()

        if message.recipient in refused:
            raise RecipientRejectedError(f"Recipient refused: {message.recipient}")

        return self._acknowledge(message, message_id=mime_message["Message-ID"])

    def validate_connection(self) -> bool:
        """Open and close a connection to the server."""
        try:
            server = self._connect()
        except (OSError, smtplib.SMTPException) as e:
            logger.error(f"SMTP connection validation failed: {e}")
            return False
        with contextlib.suppress(smtplib.SMTPException, OSError):
            server.quit()
        return True

    def _connect(self) -> smtplib.SMTP:
        if self.use_ssl:
            server = smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        else:
            server = smtplib.SMTP(self.host, self.port, timeout=self.timeout)

        try:
            if self.use_starttls and not self.use_ssl:
                server.starttls()
            if self.username and self.password:
                server.login(self.username, self.password)
        except (OSError, smtplib.SMTPException):
            # connected but unusable, drop the socket before re-raising
            with contextlib.suppress(OSError):
                server.close()
            raise
        return server
