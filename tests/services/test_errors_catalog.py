import pytest

from mysqlbackup.errors_catalog import actionable_error


def test_actionable_error_formats_message_with_suggested_action():
    message = actionable_error("local_file_not_found", path="/tmp/backup.sql")

    assert "Backup file does not exist: /tmp/backup.sql" in message
    assert "Suggested action:" in message


def test_actionable_error_rejects_unknown_code():
    with pytest.raises(KeyError):
        actionable_error("nope")
