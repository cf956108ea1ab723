"""Tests for the message composer."""

from pathlib import Path

import pytest

from dirmail.composer import MessageComposer
from dirmail.exceptions import ConfigurationError, InvalidRecipient
from dirmail.models import RecipientEntry


class TestMessageComposer:
    """Tests for MessageComposer."""

    def test_compose_fills_all_fields(self, sample_attachment):
        """Test composing a message from an entry."""
        entry = RecipientEntry(recipient="alice@example.com", attachment=sample_attachment)

        msg = MessageComposer().compose(entry, "me@example.com", "Weekly Report")

        assert msg.sender == "me@example.com"
        assert msg.recipient == "alice@example.com"
        assert msg.subject == "Weekly Report"
        assert msg.body == "see attached\n"
        assert msg.attachment == sample_attachment

    def test_compose_is_pure(self, sample_attachment):
        """Test that identical inputs give identical messages."""
        composer = MessageComposer()
        entry = RecipientEntry(recipient="alice@example.com", attachment=sample_attachment)

        first = composer.compose(entry, "me@example.com", "Weekly Report")
        second = composer.compose(entry, "me@example.com", "Weekly Report")

        assert first == second

    def test_body_template_can_use_subject(self, sample_attachment):
        """Test that a custom body can interpolate the subject."""
        composer = MessageComposer("Please find {{ subject }} attached.")
        entry = RecipientEntry(recipient="alice@example.com", attachment=sample_attachment)

        msg = composer.compose(entry, "me@example.com", "the report")

        assert msg.body == "Please find the report attached."

    def test_body_template_with_unknown_variable_rejected(self):
        """Test that only subject may be used in the body."""
        with pytest.raises(ConfigurationError):
            MessageComposer("Hello {{ name }}")

    def test_body_template_syntax_error_rejected(self):
        """Test that a broken template is rejected up front."""
        with pytest.raises(ConfigurationError):
            MessageComposer("Hello {{ subject")

    def test_relative_attachment_made_absolute(self, temp_root, monkeypatch):
        """Test that relative attachment paths become absolute."""
        monkeypatch.chdir(temp_root)
        entry = RecipientEntry(recipient="alice@example.com", attachment=Path("report.pdf"))

        msg = MessageComposer().compose(entry, "me@example.com", "s")

        assert msg.attachment.is_absolute()
        assert msg.attachment.name == "report.pdf"

    def test_empty_recipient_raises(self, sample_attachment):
        """Test the defensive guard against an empty recipient."""
        entry = RecipientEntry(recipient="alice@example.com", attachment=sample_attachment)
        object.__setattr__(entry, "recipient", "")

        with pytest.raises(InvalidRecipient):
            MessageComposer().compose(entry, "me@example.com", "s")

    def test_empty_sender_raises(self, sample_attachment):
        """Test that an empty sender is rejected."""
        entry = RecipientEntry(recipient="alice@example.com", attachment=sample_attachment)

        with pytest.raises(InvalidRecipient):
            MessageComposer().compose(entry, "", "s")
