"""Data models for dirmail."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

from .exceptions import InvalidRecipient


class SendStatus(str, Enum):
    """Status of a single dispatch."""

    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class RecipientEntry:
    """A recipient address paired with the one file to send to it."""

    recipient: str
    attachment: Path

    def __post_init__(self):
        if not self.recipient or not self.recipient.strip():
            raise InvalidRecipient("Recipient must not be empty")


@dataclass(frozen=True)
class Message:
    """An outbound message with exactly one attachment."""

    sender: str
    recipient: str
    subject: str
    body: str
    attachment: Path

    def __post_init__(self):
        if not self.sender or not self.sender.strip():
            raise InvalidRecipient("Sender must not be empty")
        if not self.recipient or not self.recipient.strip():
            raise InvalidRecipient("Recipient must not be empty")
        if not Path(self.attachment).is_absolute():
            raise ValueError(f"Attachment path must be absolute: {self.attachment}")


@dataclass(frozen=True)
class Acknowledgement:
    """What a transport reports back after a successful send."""

    recipient: str
    transport: str
    message_id: Optional[str] = None
    detail: Optional[str] = None


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of dispatching one recipient entry."""

    recipient: str
    status: SendStatus
    reason: Optional[str] = None
    attachment: Optional[Path] = None
    message_id: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == SendStatus.SUCCESS

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "recipient": self.recipient,
            "status": self.status.value,
            "reason": self.reason,
            "attachment": str(self.attachment) if self.attachment else None,
            "message_id": self.message_id,
        }


@dataclass
class BatchReport:
    """Ordered per-recipient outcomes of one run, in discovery order."""

    root: Optional[Path] = None
    results: List[DispatchResult] = field(default_factory=list)
    cancelled: bool = False

    def add(self, result: DispatchResult) -> None:
        """Append a result, refusing a second entry for the same recipient."""
        if any(existing.recipient == result.recipient for existing in self.results):
            raise ValueError(f"Duplicate result for recipient: {result.recipient}")
        self.results.append(result)

    @property
    def successes(self) -> List[DispatchResult]:
        return [r for r in self.results if r.succeeded]

    @property
    def failures(self) -> List[DispatchResult]:
        return [r for r in self.results if not r.succeeded]

    @property
    def total(self) -> int:
        return len(self.results)

    @property
    def has_failures(self) -> bool:
        return any(not r.succeeded for r in self.results)

    def __iter__(self):
        return iter(self.results)

    def __len__(self) -> int:
        return len(self.results)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "root": str(self.root) if self.root else None,
            "total": self.total,
            "sent": len(self.successes),
            "failed": len(self.failures),
            "cancelled": self.cancelled,
            "results": [r.to_dict() for r in self.results],
        }
