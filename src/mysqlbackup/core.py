import logging
from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Union

import requests

from .constants import (
    BACKUP_EXTENSION,
    DEBUG_LOG_PREFIX,
    DEFAULT_SFTP_TIMEOUT,
    DEFAULT_WEBHOOK_TIMEOUT,
    OUTPUT_LOG_PREFIX,
)
from .errors import BackupError, BackupFailedError, ConfigValidationError
from .errors_catalog import actionable_error
from .models import MySQLConfig, Outcome, SFTPConfig
from .services.command_runner import CommandRunner
from .services.dump import DumpService
from .services.filesystem import FileSystemService
from .services.sftp import SFTPService
from .services.validation import ConfigValidator, WebhookValidator, build_sftp_config

logger = logging.getLogger("mysqlbackup")


class MySQLBackup:
    """Drives MySQL dumps, SFTP uploads, pruning and webhook notifications.

    Instances always hold a validated :class:`MySQLConfig`. Use :meth:`create`
    to validate a raw mapping; a rejected config raises
    :class:`ConfigValidationError` and no instance is built.

    Calls on one instance are not serialized: overlapping calls run
    independently and there is no in-flight deduplication.
    """

    def __init__(
        self,
        mysql_config: MySQLConfig,
        backup_dir: Optional[str] = None,
        output_mode: bool = False,
        debug_mode: bool = False,
        sftp_config: Optional[Union[SFTPConfig, Mapping[str, Any]]] = None,
        webhook_url: Optional[str] = None,
        webhook_enabled: bool = False,
        dump_timeout: Optional[float] = None,
        sftp_timeout: Optional[float] = DEFAULT_SFTP_TIMEOUT,
        sftp_known_hosts: Optional[str] = None,
        webhook_timeout: float = DEFAULT_WEBHOOK_TIMEOUT,
        command_runner: Optional[CommandRunner] = None,
        sftp_service: Optional[SFTPService] = None,
        filesystem_service: Optional[FileSystemService] = None,
        requests_module=requests,
    ):
        if not isinstance(mysql_config, MySQLConfig):
            raise TypeError("mysql_config must be a MySQLConfig; use MySQLBackup.create for raw mappings.")

        self.mysql_config = mysql_config
        self.sftp_config = build_sftp_config(sftp_config) if sftp_config is not None else None
        self.backup_dir = backup_dir
        self.debug_mode = bool(debug_mode)
        self.output_mode = bool(output_mode) or self.debug_mode
        self.webhook_mode = bool(webhook_enabled)
        self.webhook_url: Optional[str] = None
        self.dump_timeout = dump_timeout
        self.webhook_timeout = webhook_timeout

        self.webhook_validator = WebhookValidator()
        self.command_runner = command_runner or CommandRunner(logger=logger)
        self.dump_service = DumpService(command_runner=self.command_runner, logger=logger)
        self.sftp_service = sftp_service or SFTPService(
            logger=logger,
            timeout=sftp_timeout,
            known_hosts=sftp_known_hosts,
        )
        self.filesystem_service = filesystem_service or FileSystemService(logger=logger)
        self.requests = requests_module

        if webhook_url is not None:
            self.set_webhook(webhook_url)

    @classmethod
    def create(cls, config: Any, **kwargs) -> "MySQLBackup":
        """Validate ``config`` and build an instance, or raise ConfigValidationError."""
        debug_mode = bool(kwargs.get("debug_mode", False))
        result = ConfigValidator().validate(config)
        if not result.ok:
            if debug_mode:
                for error in result.errors:
                    logger.debug("%s %s", DEBUG_LOG_PREFIX, error)
                logger.debug("%s Invalid MySQL Config", DEBUG_LOG_PREFIX)
            raise ConfigValidationError(result.errors)

        instance = cls(result.config, **kwargs)
        instance.send_debug_log("MySQL Config Validated")
        return instance

    @staticmethod
    def _timestamp() -> str:
        return datetime.now(timezone.utc).isoformat(timespec="seconds")

    def create_backup(self, file_name: str) -> Outcome:
        """Dump the database to ``file_name`` + ``.sql``.

        Returns a success Outcome. On failure raises BackupFailedError whose
        ``outcome`` carries the failure message.
        """
        dest_path = f"{file_name}{BACKUP_EXTENSION}"

        try:
            self.dump_service.dump(self.mysql_config, dest_path, timeout=self.dump_timeout)
        except BackupError as exc:
            # Drop any truncated dump so pruning never counts it as a backup.
            if self.filesystem_service.remove_file(dest_path):
                self.send_debug_log(f"Removed partial backup file: {dest_path}")
            taken_at = self._timestamp()
            summary = f"Error while taking backup at {taken_at} to: {dest_path}"
            outcome = Outcome(message=f"{summary}\nError:\n{exc}", success=False)
            self.send_output_log(summary)
            self.send_debug_log(outcome.message)
            self.send_webhook(summary)
            raise BackupFailedError(outcome, cause=exc) from exc

        outcome = Outcome(message=f"Backup taken at {self._timestamp()} to: {dest_path}", success=True)
        self.send_output_log(outcome.message)
        self.send_webhook(outcome.message)
        return outcome

    def remote_backup(self, local_path: str, remote_path: str) -> Outcome:
        """Upload ``local_path`` to ``remote_path`` on the configured SFTP server."""
        if self.sftp_config is None:
            return self._remote_failure(actionable_error("sftp_not_configured"), notify=False)

        try:
            with open(local_path, "rb"):
                pass
        except FileNotFoundError:
            return self._remote_failure(actionable_error("local_file_not_found", path=local_path))
        except OSError as exc:
            return self._remote_failure(
                actionable_error("local_file_unreadable", path=local_path, error=str(exc))
            )

        try:
            session = self.sftp_service.connect(self.sftp_config)
        except BackupError as exc:
            return self._remote_failure(
                actionable_error(
                    "sftp_connect_failed",
                    host=self.sftp_config.host,
                    port=self.sftp_config.port,
                    error=str(exc),
                )
            )

        try:
            session.put(local_path, remote_path)
        except BackupError as exc:
            return self._remote_failure(
                actionable_error(
                    "sftp_upload_failed",
                    local_path=local_path,
                    remote_path=remote_path,
                    error=str(exc),
                )
            )
        finally:
            session.close()

        message = f"Uploaded {local_path} to {self.sftp_config.host}:{remote_path}"
        self.send_output_log(message)
        self.send_debug_log(f"SFTP session to {self.sftp_config.host} closed")
        self.send_webhook(message)
        return Outcome(message=message, success=True)

    def _remote_failure(self, message: str, notify: bool = True) -> Outcome:
        self.send_output_log("Remote backup failed.")
        self.send_debug_log(message)
        if notify:
            self.send_webhook(message)
        return Outcome(message=message, success=False)

    def remove_old_backups(self, age: float) -> int:
        """Delete ``.sql`` files in the backup directory older than ``age`` seconds."""
        if not self.backup_dir:
            self.send_debug_log("No backup directory configured; nothing to remove.")
            return 0

        removed = self.filesystem_service.delete_older_than(self.backup_dir, age, BACKUP_EXTENSION)
        removed_files = len(removed)
        self.send_output_log(f"Deleted a total of {removed_files} old backups.")
        return removed_files

    def set_webhook(self, url: str):
        if self.webhook_validator.is_valid(url):
            self.webhook_url = url
            self.send_debug_log("Webhook set to: " + url)
        else:
            self.send_debug_log("Invalid webhook link provided!")

    def get_webhook(self) -> Optional[str]:
        return self.webhook_url

    def enable_webhook(self):
        self.webhook_mode = True
        self.send_debug_log("Webhook enabled")

    def disable_webhook(self):
        self.webhook_mode = False
        self.send_debug_log("Webhook disabled")

    def is_webhook_enabled(self) -> bool:
        return self.webhook_mode

    def send_webhook(self, message: str) -> bool:
        """Post ``message`` to the webhook. Delivery errors are logged, never raised."""
        if not self.webhook_mode or not self.webhook_url:
            return False

        try:
            response = self.requests.post(
                self.webhook_url,
                data={"content": message},
                headers={"Content-Type": "application/x-www-form-urlencoded"},
                timeout=self.webhook_timeout,
            )
            response.raise_for_status()
        except self.requests.RequestException as exc:
            self.send_output_log(f"Error sending webhook: {exc}")
            return False

        self.send_debug_log("Webhook message delivered")
        return True

    def send_output_log(self, message: str):
        if self.output_mode:
            logger.info("%s %s", OUTPUT_LOG_PREFIX, message)

    def send_debug_log(self, message: str):
        if self.debug_mode:
            logger.debug("%s %s", DEBUG_LOG_PREFIX, message)
