"""Base transport interface."""

from abc import ABC, abstractmethod
import logging

from ..models import Acknowledgement, Message

logger = logging.getLogger(__name__)


class BaseTransport(ABC):
    """Abstract base class for transports.

    A transport sends one message with one attachment to one recipient. It is
    the only part of dirmail that performs externally visible I/O.
    """

    name = "base"

    @abstractmethod
    def send(self, message: Message) -> Acknowledgement:
        """Send a message.

        Args:
            message: Message to send

        Returns:
            Acknowledgement describing the accepted message

        Raises:
            SendError: If the message could not be sent
        """
        pass

    def validate_connection(self) -> bool:
        """Validate that the transport is configured and reachable.

        Returns:
            True if the transport looks usable
        """
        return True

    def _acknowledge(self, message: Message, message_id: str = None, detail: str = None) -> Acknowledgement:
        logger.info(f"Sent {message.attachment.name} to {message.recipient} via {self.name}")
        return Acknowledgement(
            recipient=message.recipient,
            transport=self.name,
            message_id=message_id,
            detail=detail,
        )
