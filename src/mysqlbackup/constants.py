"""Constants shared across MySQLBackup modules."""

REQUIRED_MYSQL_CONFIG_FIELDS = ("host", "user", "password", "database")
REQUIRED_SFTP_CONFIG_FIELDS = ("host", "port", "username", "password")

BACKUP_EXTENSION = ".sql"

WEBHOOK_URL_PATTERN = r"^https://discordapp\.com/api/webhooks/[0-9]{17,20}/[A-Za-z0-9_]{60,75}"

DEFAULT_CONFIG_FILE = ".mysqlbackup.yml"
DEFAULT_SFTP_PORT = 22
DEFAULT_WEBHOOK_TIMEOUT = 10.0
DEFAULT_SFTP_TIMEOUT = 30.0

OUTPUT_LOG_PREFIX = "[MySQL Backup Log]"
DEBUG_LOG_PREFIX = "[MySQL Backup Debug Log]"
