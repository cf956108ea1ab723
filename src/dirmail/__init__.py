"""Email one file from each recipient-named subdirectory, through a pluggable transport."""

__version__ = "0.1.0"

from .exceptions import (
    DirmailError,
    DirectoryUnreadable,
    InvalidRecipient,
    ConfigurationError,
    SendError,
    AttachmentError,
    ClientUnavailableError,
    RecipientRejectedError,
    AuthenticationError,
)
from .models import Acknowledgement, BatchReport, DispatchResult, Message, RecipientEntry, SendStatus
from .scanner import DirectoryScanner
from .composer import MessageComposer
from .dispatcher import BatchDispatcher
from .report import ReportEmitter
from .transports import BaseTransport, MailAppTransport, MockTransport, SendGridTransport, SMTPTransport

__all__ = [
    "DirmailError",
    "DirectoryUnreadable",
    "InvalidRecipient",
    "ConfigurationError",
    "SendError",
    "AttachmentError",
    "ClientUnavailableError",
    "RecipientRejectedError",
    "AuthenticationError",
    "Acknowledgement",
    "BatchReport",
    "DispatchResult",
    "Message",
    "RecipientEntry",
    "SendStatus",
    "DirectoryScanner",
    "MessageComposer",
    "BatchDispatcher",
    "ReportEmitter",
    "BaseTransport",
    "MailAppTransport",
    "MockTransport",
    "SendGridTransport",
    "SMTPTransport",
]
