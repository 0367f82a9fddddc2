# tests/packforge/app/test_settings.py
import pytest

from packforge.app.settings import (
    SETTINGS,
    SETTINGS_ENV_VAR,
    deepMerge,
    loadSettings,
    loadUserSettings,
    reloadSettings,
    settings,
    settingsBool,
    settingsInt,
)


def test_defaults():
    assert settings("logging.level") == "INFO"
    assert settings("logging.file") is None
    assert settingsInt("tasks.maxWorkers") == 4
    assert settingsInt("glyphs.firstCodepoint") == 0xE000
    assert settings("glyphs.font") == "minecraft:font/default.json"
    assert settingsInt("models.firstCustomModelData") == 1
    assert settings("repositories") == []
    assert settings("does.not.exist", "fallback") == "fallback"


def test_deepMerge_only_merges_objects():
    base = {"a": {"b": 1, "c": [1, 2]}, "d": "x"}
    override = {"a": {"c": [3], "e": True}, "d": None}

    merged = deepMerge(base, override)

    assert merged == {"a": {"b": 1, "c": [3], "e": True}, "d": None}
    # Inputs are not mutated
    assert base == {"a": {"b": 1, "c": [1, 2]}, "d": "x"}


def test_user_settings_from_env(tmp_path, monkeypatch):
    settingsFile = tmp_path / "packforge.json5"
    settingsFile.write_text(
        """
        {
            // json5 comments are allowed
            logging: {level: "DEBUG", json: true},
            tasks: {maxWorkers: "8"},
            artifact: {compressionLevel: 9},
        }
        """,
        encoding="utf-8",
    )
    monkeypatch.setenv(SETTINGS_ENV_VAR, str(settingsFile))
    reloadSettings()

    assert settings("logging.level") == "DEBUG"
    assert settings("logging.file") is None
    assert settingsInt("tasks.maxWorkers") == 8
    assert settingsInt("artifact.compressionLevel") == 9
    assert settingsBool("logging.json") is True
    assert loadSettings()["glyphs"]["height"] == 8


def test_settings_are_cached_until_reload(tmp_path, monkeypatch):
    settingsFile = tmp_path / "s.json5"
    settingsFile.write_text("{tasks: {maxWorkers: 2}}", encoding="utf-8")
    monkeypatch.setenv(SETTINGS_ENV_VAR, str(settingsFile))
    reloadSettings()
    assert settingsInt("tasks.maxWorkers") == 2

    settingsFile.write_text("{tasks: {maxWorkers: 3}}", encoding="utf-8")
    assert settingsInt("tasks.maxWorkers") == 2
    reloadSettings()
    assert settingsInt("tasks.maxWorkers") == 3


@pytest.mark.parametrize("content", ["{broken", "[1, 2, 3]"])
def test_unreadable_user_settings_fall_back_to_defaults(tmp_path, content):
    settingsFile = tmp_path / "bad.json5"
    settingsFile.write_text(content, encoding="utf-8")
    assert loadUserSettings(settingsFile) == {}


def test_missing_user_settings(tmp_path):
    assert loadUserSettings(tmp_path / "missing.json5") == {}
    assert loadUserSettings() == {}


def test_non_integer_setting_uses_default(tmp_path, monkeypatch):
    settingsFile = tmp_path / "s.json5"
    settingsFile.write_text("{tasks: {maxWorkers: 'many'}}", encoding="utf-8")
    monkeypatch.setenv(SETTINGS_ENV_VAR, str(settingsFile))
    reloadSettings()
    assert settingsInt("tasks.maxWorkers", 4) == 4


def test_defaults_are_not_mutated():
    loadSettings()["logging"]["level"] = "TRACE"
    try:
        assert SETTINGS["logging"]["level"] == "INFO"
    finally:
        reloadSettings()
