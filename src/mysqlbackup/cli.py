import logging
import os
import posixpath
from datetime import datetime

import click
from rich.console import Console
from rich.logging import RichHandler

from .constants import (
    BACKUP_EXTENSION,
    DEFAULT_CONFIG_FILE,
    DEFAULT_SFTP_TIMEOUT,
    DEFAULT_WEBHOOK_TIMEOUT,
)
from .core import MySQLBackup
from .errors import BackupError, BackupFailedError, ConfigValidationError
from .services.config_loader import ConfigLoader

console = Console()


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


def _optional_float(value):
    return None if value is None else float(value)


logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=False)],
)


@click.command()
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help=f"Path to a YAML configuration file. Defaults to {DEFAULT_CONFIG_FILE} if present.",
)
@click.option("--backup-dir", required=False, type=click.Path(), help="Directory for local backup files")
@click.option("--backup-name", required=False, help="Backup file name prefix (default: database name)")
@click.option("--remote-dir", required=False, help="Remote SFTP directory for uploads")
@click.option(
    "--max-age",
    required=False,
    type=float,
    default=None,
    help="Delete local backups older than this many seconds.",
)
@click.option("--webhook-url", required=False, help="Discord webhook URL for notifications")
@click.option("--verbose", is_flag=True, default=None, help="Log program output")
@click.option("--debug", is_flag=True, default=None, help="Log debug output (implies --verbose)")
@click.option("--log-file", type=click.Path(), help="Path to log file")
@click.option(
    "--known-hosts",
    required=False,
    type=click.Path(),
    help="known_hosts file used to verify the SFTP server host key.",
)
@click.option("--skip-upload", is_flag=True, default=False, help="Do not upload the backup over SFTP")
@click.option("--skip-prune", is_flag=True, default=False, help="Do not delete old backups")
def main(
    config,
    backup_dir,
    backup_name,
    remote_dir,
    max_age,
    webhook_url,
    verbose,
    debug,
    log_file,
    known_hosts,
    skip_upload,
    skip_prune,
):
    """Take a MySQL backup, ship it over SFTP and prune old backups."""
    logger = logging.getLogger("mysqlbackup")

    try:
        config_loader = ConfigLoader()
        resolved_config = config
        if resolved_config is None:
            default_config_path = os.path.join(os.getcwd(), DEFAULT_CONFIG_FILE)
            if os.path.exists(default_config_path):
                resolved_config = default_config_path

        config_values = config_loader.load(resolved_config)
    except BackupError as exc:
        raise click.ClickException(str(exc)) from exc

    mysql_config = config_values.get("mysql")
    if mysql_config is None:
        raise click.ClickException("Missing 'mysql' section in config.")

    backup_dir = _resolve_option(backup_dir, config_values, "backup_dir", default=os.getcwd())
    backup_name = _resolve_option(backup_name, config_values, "backup_name")
    remote_dir = _resolve_option(remote_dir, config_values, "remote_dir", default=".")
    max_age = _optional_float(_resolve_option(max_age, config_values, "max_age"))
    webhook_url = _resolve_option(webhook_url, config_values, "webhook_url")
    webhook_enabled = _resolve_option(None, config_values, "webhook_enabled", default=webhook_url is not None)
    debug = _resolve_option(debug, config_values, "debug", default=False)
    verbose = _resolve_option(verbose, config_values, "verbose", default=False) or debug
    log_file = _resolve_option(log_file, config_values, "log_file")
    known_hosts = _resolve_option(known_hosts, config_values, "sftp_known_hosts")
    dump_timeout = _optional_float(config_values.get("dump_timeout"))
    sftp_timeout = float(config_values.get("sftp_timeout", DEFAULT_SFTP_TIMEOUT))
    webhook_timeout = float(config_values.get("webhook_timeout", DEFAULT_WEBHOOK_TIMEOUT))

    if debug:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if debug else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)

    try:
        backup = MySQLBackup.create(
            mysql_config,
            backup_dir=backup_dir,
            output_mode=verbose,
            debug_mode=debug,
            sftp_config=config_values.get("sftp"),
            webhook_url=webhook_url,
            webhook_enabled=webhook_enabled,
            dump_timeout=dump_timeout,
            sftp_timeout=sftp_timeout,
            webhook_timeout=webhook_timeout,
            sftp_known_hosts=known_hosts,
        )
    except ConfigValidationError as exc:
        raise click.ClickException("\n".join(exc.errors + ["Invalid MySQL Config"])) from exc
    except BackupError as exc:
        raise click.ClickException(str(exc)) from exc

    if webhook_url is not None and backup.get_webhook() is None:
        console.print("[yellow]Warning:[/yellow] Ignoring invalid webhook URL.")

    try:
        backup.filesystem_service.ensure_dir(backup_dir)
    except OSError as exc:
        raise click.ClickException(f"Could not create backup directory {backup_dir}: {exc}") from exc

    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    prefix = backup_name or backup.mysql_config.database
    base_path = os.path.join(backup_dir, f"{prefix}_{stamp}")

    try:
        outcome = backup.create_backup(base_path)
    except BackupFailedError as exc:
        console.print(f"[bold red]Error:[/bold red] {exc.outcome.message}")
        raise SystemExit(1)
    console.print(f"[green]{outcome.message}[/green]")

    exit_code = 0
    local_path = f"{base_path}{BACKUP_EXTENSION}"

    if backup.sftp_config is not None and not skip_upload:
        remote_path = posixpath.join(remote_dir, os.path.basename(local_path))
        upload = backup.remote_backup(local_path, remote_path)
        if upload.success:
            console.print(f"[green]{upload.message}[/green]")
        else:
            console.print(f"[bold red]Upload failed:[/bold red] {upload.message}")
            exit_code = 1

    if max_age is not None and not skip_prune:
        removed = backup.remove_old_backups(max_age)
        console.print(f"[blue]Removed {removed} old backup(s).[/blue]")

    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
