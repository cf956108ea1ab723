"""SendGrid transport."""

import base64
import logging
import mimetypes

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Attachment, Content, Disposition, FileContent, FileName, FileType, Mail, To

from ..exceptions import (
    AttachmentError,
    AuthenticationError,
    RecipientRejectedError,
    SendError,
)
from ..models import Acknowledgement, Message
from .base import BaseTransport

logger = logging.getLogger(__name__)


class SendGridTransport(BaseTransport):
    """Sends messages through the SendGrid web API. No retries."""

    name = "sendgrid"

    def __init__(self, api_key: str, client: SendGridAPIClient = None):
        """Initialize SendGrid transport.

        Args:
            api_key: SendGrid API key
            client: Preconfigured API client, mostly for tests
        """
        self.api_key = api_key
        self.client = client or SendGridAPIClient(api_key)

    def validate_connection(self) -> bool:
        """Validate SendGrid connection.

        Returns:
            True if connection is valid
        """
        try:
            response = self.client.client.api_keys.get()
            return response.status_code in [200, 204]
        except Exception as e:
            logger.error(f"SendGrid connection validation failed: {e}")
            return False

    def build_mail(self, message: Message) -> Mail:
        """Build the SendGrid Mail object for a message."""
        mail = Mail(
            from_email=message.sender,
            to_emails=To(message.recipient),
            subject=message.subject,
        )
        mail.add_content(Content("text/plain", message.body))

        path = message.attachment
        try:
            data = path.read_bytes()
        except OSError as e:
            raise AttachmentError(f"Cannot read attachment {path}: {e}") from e

        mime_type, _ = mimetypes.guess_type(path.name)
        mail.add_attachment(
            Attachment(
                FileContent(base64.b64encode(data).decode()),
                FileName(path.name),
                FileType(mime_type or "application/octet-stream"),
                Disposition("attachment"),
            )
        )
        return mail

    def send(self, message: Message) -> Acknowledgement:
        """Send a message via SendGrid.

        Raises:
            AuthenticationError: If the API key is rejected
            RecipientRejectedError: If SendGrid rejects the request as invalid
            SendError: For any other API failure
        """
        mail = self.build_mail(message)

        try:
            response = self.client.send(mail)
        except Exception as e:
            status_code = getattr(e, "status_code", None)
            if status_code in (401, 403):
                raise AuthenticationError("SendGrid authentication failed") from e
            if status_code == 400:
                raise RecipientRejectedError(f"SendGrid rejected message to {message.recipient}: {e}") from e
            raise SendError(f"SendGrid error: {e}") from e

        if response.status_code not in [200, 201, 202]:
            raise SendError(f"SendGrid returned status {response.status_code}: {response.body}")

        return self._acknowledge(message, message_id=response.headers.get("X-Message-Id"))
