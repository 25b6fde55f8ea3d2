"""Config and webhook URL validation for MySQLBackup."""

import re
from collections.abc import Mapping
from typing import Any, List

from mysqlbackup.constants import (
    REQUIRED_MYSQL_CONFIG_FIELDS,
    REQUIRED_SFTP_CONFIG_FIELDS,
    WEBHOOK_URL_PATTERN,
)
from mysqlbackup.errors import BackupError
from mysqlbackup.models import MySQLConfig, SFTPConfig, ValidationResult


class ConfigValidator:
    """Validates raw MySQL connection mappings against the fixed schema."""

    REQUIRED_FIELDS = REQUIRED_MYSQL_CONFIG_FIELDS

    def validate(self, raw: Any) -> ValidationResult:
        if not isinstance(raw, Mapping):
            return ValidationResult(errors=["MySQL config must be a mapping."])

        errors: List[str] = [
            f"{key} is an invalid MySQL config key."
            for key in raw
            if key not in self.REQUIRED_FIELDS or not isinstance(raw[key], str)
        ]

        if sorted(map(str, raw.keys())) != sorted(self.REQUIRED_FIELDS):
            errors.append("Missing values in MySQL config.")

        if errors:
            return ValidationResult(errors=errors)

        config = MySQLConfig(
            host=raw["host"],
            user=raw["user"],
            password=raw["password"],
            database=raw["database"],
        )
        return ValidationResult(config=config)


class WebhookValidator:
    """Accepts Discord webhook URLs. The match is anchored at the start only."""

    pattern = re.compile(WEBHOOK_URL_PATTERN)

    def is_valid(self, url: Any) -> bool:
        if not isinstance(url, str):
            return False
        return self.pattern.match(url) is not None


def build_sftp_config(raw: Any) -> SFTPConfig:
    if isinstance(raw, SFTPConfig):
        return raw
    if not isinstance(raw, Mapping):
        raise BackupError("SFTP config must be a mapping.")

    unknown = sorted(set(raw.keys()) - set(REQUIRED_SFTP_CONFIG_FIELDS))
    if unknown:
        raise BackupError(f"Unknown SFTP config keys: {', '.join(map(str, unknown))}")

    missing = [key for key in REQUIRED_SFTP_CONFIG_FIELDS if key not in raw]
    if missing:
        raise BackupError(f"Missing SFTP config keys: {', '.join(missing)}")

    # YAML parses a bare port as int; it is stored as text.
    values = {key: str(raw[key]) if key == "port" else raw[key] for key in REQUIRED_SFTP_CONFIG_FIELDS}
    invalid = [key for key, value in values.items() if not isinstance(value, str)]
    if invalid:
        raise BackupError(f"SFTP config values must be text: {', '.join(invalid)}")

    return SFTPConfig(**values)
