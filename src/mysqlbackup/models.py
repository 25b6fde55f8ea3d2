"""Shared domain models for MySQLBackup."""

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class MySQLConfig:
    """Validated MySQL connection parameters."""

    host: str
    user: str
    password: str
    database: str


@dataclass(frozen=True)
class SFTPConfig:
    """Remote endpoint used to ship backup files."""

    host: str
    port: str
    username: str
    password: str


@dataclass(frozen=True)
class Outcome:
    message: str
    success: bool


@dataclass(frozen=True)
class ValidationResult:
    config: Optional[MySQLConfig] = None
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.config is not None and not self.errors
