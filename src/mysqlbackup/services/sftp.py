"""SFTP transfer service for MySQLBackup."""

import socket
from typing import Optional

import paramiko

from mysqlbackup.constants import DEFAULT_SFTP_PORT, DEFAULT_SFTP_TIMEOUT
from mysqlbackup.errors import BackupError
from mysqlbackup.models import SFTPConfig


class SFTPSession:
    """An open SFTP channel. Closing it also closes the underlying transport."""

    def __init__(self, transport, client, logger):
        self.transport = transport
        self.client = client
        self.logger = logger
        self.closed = False

    def put(self, local_path: str, remote_path: str):
        self.logger.debug("Uploading %s to %s", local_path, remote_path)
        try:
            self.client.put(local_path, remote_path)
        except (OSError, paramiko.SSHException) as exc:
            raise BackupError(str(exc) or exc.__class__.__name__) from exc

    def close(self):
        if self.closed:
            return
        self.closed = True
        try:
            self.client.close()
        finally:
            self.transport.close()
        self.logger.debug("SFTP session closed")

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False


class SFTPService:
    """Opens password-authenticated SFTP sessions.

    When ``known_hosts`` is set the server must present the host key recorded
    there. Without it the server key is not verified.
    """

    def __init__(
        self,
        logger,
        timeout: Optional[float] = DEFAULT_SFTP_TIMEOUT,
        known_hosts: Optional[str] = None,
        paramiko_module=paramiko,
    ):
        self.logger = logger
        self.timeout = timeout
        self.known_hosts = known_hosts
        self.paramiko = paramiko_module

    @staticmethod
    def resolve_port(config: SFTPConfig) -> int:
        if config.port in (None, ""):
            return DEFAULT_SFTP_PORT
        try:
            return int(config.port)
        except (TypeError, ValueError) as exc:
            raise BackupError(f"Invalid SFTP port: {config.port}") from exc

    def load_host_key(self, host: str, port: int):
        try:
            host_keys = self.paramiko.HostKeys(self.known_hosts)
        except (OSError, self.paramiko.SSHException) as exc:
            raise BackupError(f"Could not read known_hosts file {self.known_hosts}: {exc}") from exc

        name = host if port == DEFAULT_SFTP_PORT else f"[{host}]:{port}"
        keys = host_keys.lookup(name)
        if not keys:
            raise BackupError(f"No host key for {name} in {self.known_hosts}")
        return next(iter(keys.values()))

    def connect(self, config: SFTPConfig) -> SFTPSession:
        port = self.resolve_port(config)
        self.logger.debug("Connecting to SFTP server %s:%s as %s", config.host, port, config.username)
        host_key = self.load_host_key(config.host, port) if self.known_hosts else None

        try:
            sock = socket.create_connection((config.host, port), timeout=self.timeout)
        except OSError as exc:
            raise BackupError(str(exc) or exc.__class__.__name__) from exc

        transport = None
        try:
            transport = self.paramiko.Transport(sock)
            if self.timeout is not None:
                transport.banner_timeout = self.timeout
                transport.auth_timeout = self.timeout
            transport.connect(hostkey=host_key, username=config.username, password=config.password)
            client = self.paramiko.SFTPClient.from_transport(transport)
        except (OSError, self.paramiko.SSHException) as exc:
            if transport is not None:
                transport.close()
            else:
                sock.close()
            raise BackupError(str(exc) or exc.__class__.__name__) from exc

        return SFTPSession(transport, client, self.logger)
