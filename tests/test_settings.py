import pytest

from trackwork.errors import ConfigError
from trackwork.settings import (
    Settings,
    default_storage_path,
    get_settings,
    resolve_storage_path,
)
from trackwork.store import RecordStore


def test_cli_path_wins_over_env(tmp_path, monkeypatch):
    monkeypatch.setenv("TRACK_WORK_FILE", str(tmp_path / "env.csv"))
    path = resolve_storage_path(str(tmp_path / "cli.csv"), get_settings())
    assert path == tmp_path / "cli.csv"


def test_env_used_without_cli_path(tmp_path, monkeypatch):
    monkeypatch.setenv("TRACK_WORK_FILE", str(tmp_path / "env.csv"))
    assert resolve_storage_path(None, get_settings()) == tmp_path / "env.csv"


def test_empty_env_falls_back_to_default(monkeypatch):
    monkeypatch.setenv("TRACK_WORK_FILE", "")
    assert resolve_storage_path(None, get_settings()) == default_storage_path()


def test_default_path_created_on_first_write(tmp_path):
    path = resolve_storage_path(None, Settings())
    assert path == default_storage_path()
    assert tmp_path in path.parents
    assert path.name == "work.csv"
    assert path.parent.is_dir()
    assert not path.exists()
    RecordStore(path).start("first")
    assert path.exists()


def test_parent_directories_are_created(tmp_path):
    target = tmp_path / "a" / "b" / "work.csv"
    assert resolve_storage_path(str(target), Settings()) == target
    assert target.parent.is_dir()


def test_relative_path_kept_relative(tmp_path):
    path = resolve_storage_path("data/work.csv", Settings())
    assert not path.is_absolute()
    assert (tmp_path / "data").is_dir()


def test_uncreatable_parent_is_config_error(tmp_path):
    (tmp_path / "blocker").write_text("not a directory")
    with pytest.raises(ConfigError, match="cannot create directory"):
        resolve_storage_path(str(tmp_path / "blocker" / "work.csv"), Settings())


def test_directory_path_is_config_error(tmp_path):
    with pytest.raises(ConfigError, match="is a directory"):
        resolve_storage_path(str(tmp_path), Settings())


def test_settings_from_env_and_dotenv(tmp_path, monkeypatch):
    (tmp_path / ".env").write_text("TRACK_WORK_FILE=from-dotenv.csv\nOTHER=1\n")
    settings = Settings()
    assert settings.file == "from-dotenv.csv"
    assert settings.log_level == "WARNING"

    monkeypatch.setenv("TRACK_WORK_FILE", "from-env.csv")
    monkeypatch.setenv("TRACK_WORK_LOG_LEVEL", "debug")
    settings = Settings()
    assert settings.file == "from-env.csv"
    assert settings.log_level == "debug"
