"""mysqldump wrapper for MySQLBackup."""

from typing import List, Optional

from mysqlbackup.models import MySQLConfig


class DumpService:
    """Writes a MySQL database dump to a file through ``mysqldump``."""

    def __init__(self, command_runner, logger, executable: str = "mysqldump"):
        self.command_runner = command_runner
        self.logger = logger
        self.executable = executable

    def build_command(self, config: MySQLConfig, dest_path: str) -> List[str]:
        # Password travels through MYSQL_PWD so it never shows in logged commands.
        return [
            self.executable,
            "--host",
            config.host,
            "--user",
            config.user,
            f"--result-file={dest_path}",
            config.database,
        ]

    def dump(self, config: MySQLConfig, dest_path: str, timeout: Optional[float] = None):
        self.logger.debug("Dumping database %s from %s to %s", config.database, config.host, dest_path)
        self.command_runner.run(
            self.build_command(config, dest_path),
            check=True,
            capture_output=True,
            timeout=timeout,
            env={"MYSQL_PWD": config.password},
        )
