"""Discovery of (recipient, attachment) pairs from a directory layout."""

import logging
from pathlib import Path
from typing import List, Optional, Union

from .exceptions import DirectoryUnreadable, InvalidRecipient
from .models import RecipientEntry

logger = logging.getLogger(__name__)


def _is_hidden(path: Path) -> bool:
    return path.name.startswith(".")


class DirectoryScanner:
    """Finds one file to send for every recipient subdirectory of a root.

    The layout is ``root/<recipient-address>/<file>``. Subdirectories and the
    files inside them are visited in lexicographic order of their names, so
    the first eligible file by name is the one picked.
    """

    def scan(self, root: Union[str, Path]) -> List[RecipientEntry]:
        """Scan a root directory.

        Args:
            root: Directory whose subdirectories are named after recipients

        Returns:
            Recipient entries in discovery order

        Raises:
            DirectoryUnreadable: If root is missing, not a directory, or cannot be listed
        """
        root = Path(root).expanduser()
        if not root.is_dir():
            raise DirectoryUnreadable(f"Not a readable directory: {root}")

        try:
            children = sorted(root.iterdir(), key=lambda p: p.name)
        except OSError as e:
            raise DirectoryUnreadable(f"Cannot list directory {root}: {e}") from e

        entries = []
        for child in children:
            if _is_hidden(child) or not child.is_dir():
                continue

            attachment = self.select_attachment(child)
            if attachment is None:
                logger.debug(f"No eligible file in {child}, skipping")
                continue

            try:
                entries.append(RecipientEntry(recipient=child.name, attachment=attachment.absolute()))
            except InvalidRecipient:
                logger.warning(f"Blank recipient directory name {child.name!r}, skipping")

        logger.info(f"Found {len(entries)} recipient(s) under {root}")
        return entries

    def select_attachment(self, directory: Path) -> Optional[Path]:
        """Pick the first non-hidden regular file in a recipient directory.

        Nested directories (including bundle-style directories such as
        ``Something.app``) are never eligible.

        Args:
            directory: Recipient directory

        Returns:
            Path of the selected file, or None if there is none
        """
        try:
            candidates = sorted(directory.iterdir(), key=lambda p: p.name)
        except OSError as e:
            logger.warning(f"Cannot list {directory}, skipping: {e}")
            return None

        for candidate in candidates:
            if _is_hidden(candidate):
                continue
            if candidate.is_file():
                return candidate
        return None
