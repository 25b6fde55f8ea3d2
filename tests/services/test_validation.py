import pytest

from mysqlbackup.errors import BackupError
from mysqlbackup.models import MySQLConfig, SFTPConfig
from mysqlbackup.services.validation import ConfigValidator, WebhookValidator, build_sftp_config

VALID_CONFIG = {"host": "localhost", "user": "root", "password": "secret", "database": "shop"}

VALID_URL_1 = "https://discordapp.com/api/webhooks/00000000000000000/" + "0" * 70
VALID_URL_2 = "https://discordapp.com/api/webhooks/00000000000000001/" + "0" * 69 + "1"


def test_config_validator_accepts_exact_schema():
    result = ConfigValidator().validate(dict(VALID_CONFIG))

    assert result.ok
    assert result.errors == []
    assert result.config == MySQLConfig(**VALID_CONFIG)


def test_config_validator_copies_fields_by_name_regardless_of_order():
    raw = {"database": "d", "password": "p", "user": "u", "host": "h"}

    result = ConfigValidator().validate(raw)

    assert result.config.host == "h"
    assert result.config.user == "u"
    assert result.config.password == "p"
    assert result.config.database == "d"


@pytest.mark.parametrize(
    "raw",
    [
        {},
        {"host": "test", "user": "test", "database": "test"},
    ],
)
def test_config_validator_rejects_missing_fields(raw):
    result = ConfigValidator().validate(raw)

    assert not result.ok
    assert result.config is None
    assert "Missing values in MySQL config." in result.errors


@pytest.mark.parametrize(
    "raw",
    [
        {"host": "test", "user": "test", "database": "test", "test": "test"},
        {"host": "test", "user": "test", "password": "test", "database": "test", "test": "test"},
        {"test": "test"},
    ],
)
def test_config_validator_rejects_extra_fields(raw):
    result = ConfigValidator().validate(raw)

    assert result.config is None
    assert "test is an invalid MySQL config key." in result.errors


def test_config_validator_rejects_non_text_values_without_missing_error():
    raw = {"host": "test", "user": False, "password": "test", "database": 543}

    result = ConfigValidator().validate(raw)

    assert result.config is None
    assert result.errors == [
        "user is an invalid MySQL config key.",
        "database is an invalid MySQL config key.",
    ]


def test_config_validator_rejects_non_mapping():
    result = ConfigValidator().validate(["host", "user"])

    assert result.config is None
    assert result.errors == ["MySQL config must be a mapping."]


def test_webhook_validator_accepts_discord_urls():
    validator = WebhookValidator()

    assert validator.is_valid(VALID_URL_1)
    assert validator.is_valid(VALID_URL_2)


@pytest.mark.parametrize(
    "url",
    [
        "",
        "hi there",
        "https://google.com",
        "https://discordapp.com/api/webhooks/00000000000000001/",
        "https://discordapp.com/api/webhooks/00000000000000001/34987539845",
        "https://discordapp.com/api/webhooks/0000000000000001/" + "0" * 70,
        "http://discordapp.com/api/webhooks/00000000000000000/" + "0" * 70,
        " " + VALID_URL_1,
        None,
    ],
)
def test_webhook_validator_rejects_invalid_urls(url):
    assert WebhookValidator().is_valid(url) is False


def test_webhook_validator_is_not_end_anchored():
    assert WebhookValidator().is_valid(VALID_URL_1 + "?wait=true")


def test_build_sftp_config_stringifies_port():
    config = build_sftp_config({"host": "sftp.local", "port": 2222, "username": "u", "password": "p"})

    assert config == SFTPConfig(host="sftp.local", port="2222", username="u", password="p")


def test_build_sftp_config_rejects_missing_and_unknown_keys():
    with pytest.raises(BackupError, match="Missing SFTP config keys: password"):
        build_sftp_config({"host": "h", "port": "22", "username": "u"})

    with pytest.raises(BackupError, match="Unknown SFTP config keys: key_file"):
        build_sftp_config({"host": "h", "port": "22", "username": "u", "password": "p", "key_file": "x"})
