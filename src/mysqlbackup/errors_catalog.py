"""Actionable error catalog for MySQLBackup."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "sftp_not_configured": {
        "what": "Remote backup requested but no SFTP config was provided.",
        "next": "Add an `sftp` section with host, port, username and password.",
    },
    "local_file_not_found": {
        "what": "Backup file does not exist: {path}",
        "next": "Check the path or run a backup before uploading it.",
    },
    "local_file_unreadable": {
        "what": "Backup file could not be read: {path} ({error})",
        "next": "Check the file permissions and retry.",
    },
    "sftp_connect_failed": {
        "what": "Could not connect to SFTP server {host}:{port}: {error}",
        "next": "Verify the SFTP host, port and credentials.",
    },
    "sftp_upload_failed": {
        "what": "Failed to upload {local_path} to {remote_path}: {error}",
        "next": "Check that the remote directory exists and is writable.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
