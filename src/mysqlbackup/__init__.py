"""
MySQLBackup - MySQL dump, SFTP upload and retention tool
"""

__version__ = "1.0.0"

from .core import MySQLBackup
from .errors import BackupError, BackupFailedError, ConfigValidationError
from .models import MySQLConfig, Outcome, SFTPConfig

__all__ = [
    "MySQLBackup",
    "BackupError",
    "BackupFailedError",
    "ConfigValidationError",
    "MySQLConfig",
    "Outcome",
    "SFTPConfig",
]
