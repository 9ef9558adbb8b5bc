"""
Tests for scenario data sets.
"""

import json
from pathlib import Path

import pytest

from tempgram_automation.data_sets import (
    Attachment,
    ChatDataSet,
    load_data_set,
)
from tempgram_automation.exceptions import DataSetError

DATA_SET_FILE = (
    Path(__file__).parent
    / "e2e"
    / "data_sets"
    / "chat"
    / "01-chat-with-registered-user.dataset.json"
)


@pytest.fixture
def data_set() -> ChatDataSet:
    return load_data_set(DATA_SET_FILE)


class TestLoadDataSet:
    """Tests for loading data set files."""

    def test_loads_bundled_data_set(self, data_set):
        assert data_set.transaction_id == "EXLC-000417"
        assert data_set.user.email == "olivia.baker@northwind-exports.test"
        assert data_set.conversation1.title == "Presentation documents"
        assert data_set.conversation2.participant2.name == "Marcus Lee"
        assert len(data_set.conversation1.messages.content) == 1

    def test_attachment_resolves_next_to_data_set(self, data_set):
        attachment = data_set.conversation2.messages.attachment

        assert attachment is not None
        assert attachment.full_path.is_file()
        assert attachment.full_path.name == "amendment-draft.txt"

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataSetError, match="not found"):
            load_data_set(tmp_path / "absent.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{ not json", encoding="utf-8")

        with pytest.raises(DataSetError, match="not valid JSON"):
            load_data_set(path)

    def test_validation_error_lists_fields(self, tmp_path):
        raw = json.loads(DATA_SET_FILE.read_text(encoding="utf-8"))
        del raw["conversation1"]["participant"]
        raw["conversation2"]["messages"]["content"] = []
        path = tmp_path / "incomplete.json"
        path.write_text(json.dumps(raw), encoding="utf-8")

        with pytest.raises(DataSetError) as exc_info:
            load_data_set(path)

        locations = [error["loc"] for error in exc_info.value.details["errors"]]
        assert ("conversation1", "participant") in locations
        assert ("conversation2", "messages", "content") in locations


class TestDerivedValues:
    """Tests for names and texts derived from a data set."""

    def test_sender_names(self, data_set):
        assert data_set.user.sender_name == "Olivia Baker (Northwind Exports Ltd)"
        assert data_set.user.public_sender_name == "Olivia Baker (Northwind Exports)"
        assert data_set.conversation1.participant.display_name == (
            "Hana Sato (Northwind Exports Ltd)"
        )

    def test_notification_subject(self, data_set):
        assert data_set.notification_subject("Presentation documents") == (
            "New message(s): Northwind Exports #000417: Presentation documents"
        )

    def test_new_message_notification_text(self, data_set):
        assert data_set.new_message_notification_text == (
            "You have received new messages for transaction "
            "#000417 - Northwind Exports in Tempgram"
        )


class TestAttachment:
    """Tests for attachment paths."""

    def test_relative_without_base_dir(self):
        attachment = Attachment(path="files", file_name="a.pdf")
        assert attachment.full_path == Path("files") / "a.pdf"

    def test_absolute_path_ignores_base_dir(self, tmp_path):
        attachment = Attachment(
            path=str(tmp_path), file_name="a.pdf", base_dir=Path("/elsewhere")
        )
        assert attachment.full_path == tmp_path / "a.pdf"

    def test_base_dir_is_not_serialized(self, tmp_path):
        attachment = Attachment(path="files", file_name="a.pdf", base_dir=tmp_path)
        assert "base_dir" not in attachment.model_dump()
