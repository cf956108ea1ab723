"""Transport that drives the macOS Mail application through osascript."""

import logging
import shutil
import subprocess
from typing import List

from ..exceptions import AttachmentError, ClientUnavailableError, SendError
from ..models import Acknowledgement, Message
from .base import BaseTransport

logger = logging.getLogger(__name__)

ATTACHMENT_ERROR_NUMBER = 1001

# Message fields arrive as argv items and are never spliced into the source.
SEND_SCRIPT = """
on run argv
    set theSender to item 1 of argv
    set theRecipient to item 2 of argv
    set theSubject to item 3 of argv
    set theBody to item 4 of argv
    set theAttachment to POSIX file (item 5 of argv)
    set attachTimeout to ((item 6 of argv) as integer) / 1000
    set pollInterval to ((item 7 of argv) as integer) / 1000
    set settleSeconds to ((item 8 of argv) as integer) / 1000

    tell application "Mail"
        set theNewMessage to make new outgoing message with properties {subject:theSubject, sender:theSender, content:theBody, visible:true}
        tell theNewMessage
            make new to recipient at end of to recipients with properties {address:theRecipient}
        end tell
        tell content of theNewMessage
            try
                make new attachment with properties {file name:theAttachment} at after the last word of the last paragraph
            on error errmess
                error "attachment failed: " & errmess number %(errnum)d
            end try
        end tell

        set waited to 0
        repeat while (count of attachments of content of theNewMessage) is 0
            if waited >= attachTimeout then
                error "attachment not ready after " & attachTimeout & " seconds" number %(errnum)d
            end if
            delay pollInterval
            set waited to waited + pollInterval
        end repeat

        delay settleSeconds
        send theNewMessage
    end tell
    return "sent"
end run
""" % {"errnum": ATTACHMENT_ERROR_NUMBER}

# osascript error numbers for an unreachable or unauthorized application
CLIENT_UNAVAILABLE_ERRORS = ("(-600)", "(-609)", "(-1712)", "(-1743)")


def _millis(seconds: float) -> str:
    return str(int(round(seconds * 1000)))


class MailAppTransport(BaseTransport):
    """Sends each message by scripting a locally running Mail application.

    Attaching a file in Mail is asynchronous. The script polls the outgoing
    message until the attachment shows up (bounded by ``attach_timeout``) and
    then waits ``settle_seconds`` before sending. That settle wait is a known
    timing dependency on the client and is exposed as configuration.
    """

    name = "mail"

    def __init__(
        self,
        osascript_path: str = "osascript",
        settle_seconds: float = 5.0,
        attach_timeout: float = 30.0,
        poll_interval: float = 0.5,
        timeout: float = 120.0,
        empty_response_is_success: bool = False,
    ):
        """Initialize the Mail transport.

        Args:
            osascript_path: Path or name of the osascript executable
            settle_seconds: Wait between attachment completion and send
            attach_timeout: Maximum time to wait for the attachment to appear
            poll_interval: Interval between attachment checks
            timeout: Maximum duration of a whole osascript invocation
            empty_response_is_success: Treat an empty script response as sent
        """
        self.osascript_path = osascript_path
        self.settle_seconds = settle_seconds
        self.attach_timeout = attach_timeout
        self.poll_interval = poll_interval
        self.timeout = timeout
        self.empty_response_is_success = empty_response_is_success

    def build_command(self, message: Message) -> List[str]:
        """Build the osascript argv for a message. The script itself is read from stdin."""
        return [
            self.osascript_path,
            "-",
            message.sender,
            message.recipient,
            message.subject,
            message.body,
            str(message.attachment),
            _millis(self.attach_timeout),
            _millis(self.poll_interval),
            _millis(self.settle_seconds),
        ]

    def send(self, message: Message) -> Acknowledgement:
        """Send a message through Mail.

        Raises:
            ClientUnavailableError: If osascript is missing, Mail cannot be driven, or the call times out
            AttachmentError: If the attachment step fails
            SendError: For any other failure, or an empty response when that is not accepted
        """
        command = self.build_command(message)
        logger.debug(f"Scripting Mail for {message.recipient} with {message.attachment}")
        try:
            completed = subprocess.run(
                command,
                input=SEND_SCRIPT,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except FileNotFoundError as e:
            raise ClientUnavailableError(f"osascript not found: {self.osascript_path}") from e
        except subprocess.TimeoutExpired as e:
            raise ClientUnavailableError(f"Mail did not respond within {self.timeout}s") from e
        except OSError as e:
            raise ClientUnavailableError(f"Cannot run osascript: {e}") from e

        stdout = (completed.stdout or "").strip()
        stderr = (completed.stderr or "").strip()

        if completed.returncode != 0:
            raise self._classify_error(stderr or f"osascript exited with status {completed.returncode}")

        if not stdout:
            if self.empty_response_is_success:
                return self._acknowledge(message)
            raise SendError("unknown")

        if stdout != "sent":
            logger.warning(f"Unexpected Mail response for {message.recipient}: {stdout}")
        return self._acknowledge(message, detail=stdout)

    def validate_connection(self) -> bool:
        """Check that osascript is available."""
        available = shutil.which(self.osascript_path) is not None
        if not available:
            logger.error(f"osascript not found: {self.osascript_path}")
        return available

    def _classify_error(self, stderr: str) -> SendError:
        if f"({ATTACHMENT_ERROR_NUMBER})" in stderr:
            return AttachmentError(stderr)
        if any(code in stderr for code in CLIENT_UNAVAILABLE_ERRORS):
            return ClientUnavailableError(stderr)
        return SendError(stderr)
