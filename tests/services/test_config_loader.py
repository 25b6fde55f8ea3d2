import pytest

from mysqlbackup.errors import BackupError
from mysqlbackup.services.config_loader import ConfigLoader


def test_config_loader_loads_yaml_mapping(tmp_path):
    config_file = tmp_path / ".mysqlbackup.yml"
    config_file.write_text(
        "mysql:\n"
        "  host: localhost\n"
        "  user: root\n"
        "  password: secret\n"
        "  database: shop\n"
        "backup_dir: ./backups\n"
        "max_age: 86400\n",
        encoding="utf-8",
    )

    loader = ConfigLoader()
    loaded = loader.load(str(config_file))

    assert loaded["mysql"]["database"] == "shop"
    assert loaded["backup_dir"] == "./backups"
    assert loaded["max_age"] == 86400


def test_config_loader_returns_empty_without_path():
    assert ConfigLoader().load(None) == {}


def test_config_loader_rejects_unknown_keys(tmp_path):
    config_file = tmp_path / ".mysqlbackup.yml"
    config_file.write_text("unknown_key: true\n", encoding="utf-8")

    loader = ConfigLoader()

    with pytest.raises(BackupError, match="Unknown configuration keys"):
        loader.load(str(config_file))


def test_config_loader_rejects_missing_file(tmp_path):
    with pytest.raises(BackupError, match="Config file not found"):
        ConfigLoader().load(str(tmp_path / "missing.yml"))


def test_config_loader_rejects_non_mapping_root(tmp_path):
    config_file = tmp_path / ".mysqlbackup.yml"
    config_file.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(BackupError, match="YAML mapping"):
        ConfigLoader().load(str(config_file))


@pytest.mark.parametrize(
    "body, message",
    [
        ("max_age: one-day\n", "'max_age' must be a number"),
        ("dump_timeout: '30'\n", "'dump_timeout' must be a number"),
        ("sftp_timeout: [1]\n", "'sftp_timeout' must be a number"),
        ("webhook_timeout: true\n", "'webhook_timeout' must be a number"),
        ("max_age: -5\n", "'max_age' must not be negative"),
        ("debug: 'false'\n", "'debug' must be true or false"),
        ("verbose: 1\n", "'verbose' must be true or false"),
        ("webhook_enabled: 'no'\n", "'webhook_enabled' must be true or false"),
        ("mysql: localhost\n", "'mysql' must be a mapping"),
        ("sftp: [host, port]\n", "'sftp' must be a mapping"),
        ("backup_dir: 42\n", "'backup_dir' must be a string"),
    ],
)
def test_config_loader_rejects_wrong_value_types(tmp_path, body, message):
    config_file = tmp_path / ".mysqlbackup.yml"
    config_file.write_text(body, encoding="utf-8")

    with pytest.raises(BackupError, match=message):
        ConfigLoader().load(str(config_file))


def test_config_loader_accepts_typed_values_and_drops_empty_ones(tmp_path):
    config_file = tmp_path / ".mysqlbackup.yml"
    config_file.write_text(
        "debug: false\n"
        "webhook_enabled: true\n"
        "max_age: 3600\n"
        "sftp_timeout: 12.5\n"
        "log_file:\n",
        encoding="utf-8",
    )

    loaded = ConfigLoader().load(str(config_file))

    assert loaded == {
        "debug": False,
        "webhook_enabled": True,
        "max_age": 3600,
        "sftp_timeout": 12.5,
    }
