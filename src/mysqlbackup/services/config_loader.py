"""Configuration loader for MySQLBackup."""

from collections.abc import Mapping
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from mysqlbackup.errors import BackupError

MAPPING = "mapping"
TEXT = "text"
NUMBER = "number"
FLAG = "flag"


class ConfigLoader:
    """Loads and type-checks the YAML file holding CLI defaults."""

    KEY_TYPES = {
        "mysql": MAPPING,
        "sftp": MAPPING,
        "backup_dir": TEXT,
        "backup_name": TEXT,
        "remote_dir": TEXT,
        "max_age": NUMBER,
        "webhook_url": TEXT,
        "webhook_enabled": FLAG,
        "verbose": FLAG,
        "debug": FLAG,
        "log_file": TEXT,
        "sftp_known_hosts": TEXT,
        "dump_timeout": NUMBER,
        "sftp_timeout": NUMBER,
        "webhook_timeout": NUMBER,
    }
    SUPPORTED_KEYS = set(KEY_TYPES)

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise BackupError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise BackupError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise BackupError("Config file must contain a YAML mapping at the root.")

        unknown = sorted(str(key) for key in set(parsed.keys()) - self.SUPPORTED_KEYS)
        if unknown:
            unknown_list = ", ".join(unknown)
            raise BackupError(f"Unknown configuration keys: {unknown_list}")

        for key, value in parsed.items():
            self._check_value(key, value)

        # An empty YAML value means "not set".
        return {key: value for key, value in parsed.items() if value is not None}

    def _check_value(self, key: str, value: Any):
        if value is None:
            return

        kind = self.KEY_TYPES[key]
        if kind == MAPPING and not isinstance(value, Mapping):
            raise BackupError(f"Config key '{key}' must be a mapping.")
        if kind == TEXT and not isinstance(value, str):
            raise BackupError(f"Config key '{key}' must be a string.")
        if kind == FLAG and not isinstance(value, bool):
            raise BackupError(f"Config key '{key}' must be true or false, got {value!r}.")
        if kind == NUMBER:
            # bool is an int subclass; `max_age: yes` must not pass as 1.
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise BackupError(f"Config key '{key}' must be a number, got {value!r}.")
            if value < 0:
                raise BackupError(f"Config key '{key}' must not be negative.")
