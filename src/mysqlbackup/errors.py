"""Domain errors for MySQLBackup."""

from typing import List, Optional


class BackupError(RuntimeError):
    """Raised when a backup step cannot continue safely."""


class ConfigValidationError(BackupError):
    """Raised when the MySQL connection config does not match the schema."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("Invalid MySQL config: " + " ".join(self.errors))


class BackupFailedError(BackupError):
    """Raised by ``create_backup`` with the failure outcome attached."""

    def __init__(self, outcome, cause: Optional[BaseException] = None):
        self.outcome = outcome
        self.cause = cause
        super().__init__(outcome.message)
