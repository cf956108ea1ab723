"""Custom exceptions for dirmail."""


class DirmailError(Exception):
    """Base exception for all dirmail errors."""

    pass


class DirectoryUnreadable(DirmailError):
    """Raised when the root directory cannot be listed. Fatal for a run."""

    pass


class InvalidRecipient(DirmailError):
    """Raised when a message would be composed without a usable recipient or sender."""

    pass


class ConfigurationError(DirmailError):
    """Raised when settings cannot be turned into a working transport."""

    pass


class SendError(DirmailError):
    """Raised by a transport when a single message could not be sent."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason or "unknown"

    def __str__(self) -> str:
        return self.reason


class AttachmentError(SendError):
    """Raised when the attachment step fails."""

    pass


class ClientUnavailableError(SendError):
    """Raised when the mail client or server cannot be reached."""

    pass


class RecipientRejectedError(SendError):
    """Raised when the recipient address is refused."""

    pass


class AuthenticationError(SendError):
    """Raised when authentication with the mail service fails."""

    pass
