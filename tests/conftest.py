"""Shared test fixtures."""

import logging
import tempfile
from pathlib import Path

import pytest

from dirmail.models import Message


@pytest.fixture
def temp_root():
    """Create a temporary root directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def recipient_tree(temp_root):
    """Create a root with three recipients, an empty one and some noise."""
    for name, files in {
        "a@example.com": ["notes.txt"],
        "b@example.com": ["z-last.txt", "first.pdf"],
        "c@example.com": ["report.csv"],
        "empty@example.com": [],
    }.items():
        directory = temp_root / name
        directory.mkdir()
        for filename in files:
            (directory / filename).write_text(f"{name}/{filename}")

    # Hidden entries and loose files at the root are ignored
    (temp_root / ".hidden@example.com").mkdir()
    (temp_root / ".hidden@example.com" / "secret.txt").write_text("x")
    (temp_root / "loose-file.txt").write_text("x")

    return temp_root


@pytest.fixture
def sample_attachment(temp_root):
    """Create a single attachment file."""
    path = temp_root / "report.pdf"
    path.write_bytes(b"%PDF-1.4 test")
    return path


@pytest.fixture
def sample_message(sample_attachment):
    """Create a sample message."""
    return Message(
        sender="me@example.com",
        recipient="alice@example.com",
        subject="Weekly Report",
        body="see attached\n",
        attachment=sample_attachment,
    )


@pytest.fixture
def restore_root_logger():
    """Keep root logger changes local to a test."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
