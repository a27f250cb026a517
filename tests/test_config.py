"""Tests for autoday.conf parsing."""

from autoday.config import Config, load_config


def test_missing_file_gives_defaults(tmp_path):
    assert load_config(tmp_path / "nope.conf") == Config()


def test_parses_known_keys(tmp_path):
    conf = tmp_path / "autoday.conf"
    conf.write_text(
        "# Google\n"
        "GOOGLE_CONFIG_FOLDER=~/.config/autoday-google\n"
        'GOOGLE_CLIENT_SECRET_FILE="/home/me/client secret.json"\n'
        "GOOGLE_CALENDARS=Work, Personal ,\n"
        "\n"
        "TIMEZONE='Europe/Berlin'\n"
        "DATA_DIR=/tmp/autoday  # scratch\n"
    )

    config = load_config(conf)

    assert config.google_config_folder == "~/.config/autoday-google"
    assert config.google_client_secret_file == "/home/me/client secret.json"
    assert config.google_calendars == ["Work", "Personal"]
    assert config.timezone == "Europe/Berlin"
    assert config.data_dir == "/tmp/autoday"
    assert str(config.data_path) == "/tmp/autoday"


def test_ignores_unknown_keys_and_junk(tmp_path):
    conf = tmp_path / "autoday.conf"
    conf.write_text("TELEGRAM_TOKEN=abc\nnot a setting\nTIMEZONE=UTC\n")

    config = load_config(conf)

    assert config.timezone == "UTC"
    assert config.google_calendars == []


def test_data_path_expands_home():
    config = Config(data_dir="~/autoday-data")

    assert "~" not in str(config.data_path)
