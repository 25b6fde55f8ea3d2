"""Filesystem helpers for MySQLBackup."""

import logging
import os
import time
from typing import List, Optional


class FileSystemService:
    """Encapsulates file and directory side effects."""

    def __init__(self, logger: logging.Logger):
        self.logger = logger

    def ensure_dir(self, path: str):
        if path and not os.path.isdir(path):
            os.makedirs(path, exist_ok=True)
            self.logger.debug("Created directory: %s", path)

    def remove_file(self, path: str) -> bool:
        try:
            os.remove(path)
        except FileNotFoundError:
            return False
        except OSError as exc:
            self.logger.warning("Could not remove %s: %s", path, exc)
            return False
        self.logger.debug("Removed file: %s", path)
        return True

    def delete_older_than(
        self,
        directory: str,
        max_age_seconds: float,
        extension: str,
        now: Optional[float] = None,
    ) -> List[str]:
        """Delete files under ``directory`` older than ``max_age_seconds``.

        Only files whose name ends with ``extension`` (case-sensitive) are
        considered. Returns the removed paths.
        """
        if not os.path.isdir(directory):
            self.logger.debug("Backup directory does not exist: %s", directory)
            return []

        cutoff = (time.time() if now is None else now) - max_age_seconds
        removed: List[str] = []

        for current_root, _dirs, files in os.walk(directory):
            for file_name in files:
                if not file_name.endswith(extension):
                    continue
                path = os.path.join(current_root, file_name)
                try:
                    if os.path.getmtime(path) > cutoff:
                        continue
                    os.remove(path)
                except FileNotFoundError:
                    continue
                except OSError as exc:
                    self.logger.warning("Could not remove %s: %s", path, exc)
                    continue
                removed.append(path)
                self.logger.debug("Removed old backup: %s", path)

        return removed
