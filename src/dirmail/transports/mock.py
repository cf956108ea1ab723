"""Mock transport for tests and dry runs."""

from typing import Iterable, List, Optional

from ..exceptions import SendError
from ..models import Acknowledgement, Message
from .base import BaseTransport


class MockTransport(BaseTransport):
    """Transport that records messages instead of sending them."""

    name = "mock"

    def __init__(self, fail_for: Optional[Iterable[str]] = None, reason: str = "mock failure"):
        """Initialize the mock transport.

        Args:
            fail_for: Recipients whose sends should fail
            reason: Failure reason reported for those recipients
        """
        self.fail_for = set(fail_for or [])
        self.reason = reason
        self.sent: List[Message] = []
        self.attempted: List[Message] = []

    def send(self, message: Message) -> Acknowledgement:
        """Pretend to send a message."""
        self.attempted.append(message)
        if message.recipient in self.fail_for:
            raise SendError(self.reason)

        self.sent.append(message)
        return self._acknowledge(message, message_id=f"mock-{len(self.sent)}")
