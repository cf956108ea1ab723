"""Batch dispatch: scan, compose and send for every recipient directory."""

import logging
import threading
from pathlib import Path
from typing import Optional, Union

from .composer import MessageComposer
from .exceptions import DirmailError, SendError
from .models import BatchReport, DispatchResult, RecipientEntry, SendStatus
from .scanner import DirectoryScanner
from .transports.base import BaseTransport

logger = logging.getLogger(__name__)


class BatchDispatcher:
    """Coordinates the scanner, composer and a transport for one batch.

    Recipients are processed sequentially in discovery order and each one is
    attempted exactly once. A failure for one recipient is recorded in the
    report and never stops the rest of the batch. Only an unreadable root is
    fatal.
    """

    def __init__(
        self,
        transport: Optional[BaseTransport] = None,
        scanner: Optional[DirectoryScanner] = None,
        composer: Optional[MessageComposer] = None,
    ):
        """Initialize the dispatcher.

        Args:
            transport: Default transport used when run() gets none
            scanner: Directory scanner
            composer: Message composer
        """
        self.transport = transport
        self.scanner = scanner or DirectoryScanner()
        self.composer = composer or MessageComposer()

    def run(
        self,
        root: Union[str, Path],
        sender: str,
        subject: str,
        transport: Optional[BaseTransport] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> BatchReport:
        """Dispatch one file to every recipient directory under root.

        Args:
            root: Root directory to scan
            sender: Sender account identifier
            subject: Subject used for every message
            transport: Transport to send with, overrides the default
            cancel_event: Checked between recipients; when set, the run stops early

        Returns:
            BatchReport with one result per recipient reached

        Raises:
            DirectoryUnreadable: If root cannot be scanned
            ValueError: If no transport is available
        """
        transport = transport or self.transport
        if transport is None:
            raise ValueError("No transport configured")

        entries = self.scanner.scan(root)
        report = BatchReport(root=Path(root))

        for index, entry in enumerate(entries, start=1):
            if cancel_event is not None and cancel_event.is_set():
                logger.warning(f"Run cancelled after {index - 1}/{len(entries)} recipient(s)")
                report.cancelled = True
                break

            result = self.dispatch_one(entry, sender, subject, transport)
            report.add(result)
            logger.info(
                f"Processed recipient {index}/{len(entries)}: {entry.recipient} - {result.status.value}"
            )

        return report

    def dispatch_one(
        self, entry: RecipientEntry, sender: str, subject: str, transport: BaseTransport
    ) -> DispatchResult:
        """Compose and send a single entry, mapping any failure into a result."""
        try:
            message = self.composer.compose(entry, sender, subject)
            ack = transport.send(message)
        except SendError as e:
            logger.error(f"Send failed for {entry.recipient}: {e.reason}")
            return self._failure(entry, e.reason)
        except DirmailError as e:
            logger.error(f"Cannot dispatch to {entry.recipient}: {e}")
            return self._failure(entry, str(e))
        except Exception as e:
            logger.exception(f"Unexpected error dispatching to {entry.recipient}")
            return self._failure(entry, str(e) or e.__class__.__name__)

        return DispatchResult(
            recipient=entry.recipient,
            status=SendStatus.SUCCESS,
            attachment=entry.attachment,
            message_id=ack.message_id,
        )

    def _failure(self, entry: RecipientEntry, reason: str) -> DispatchResult:
        return DispatchResult(
            recipient=entry.recipient,
            status=SendStatus.FAILED,
            reason=reason or "unknown",
            attachment=entry.attachment,
        )
