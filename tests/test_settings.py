"""Tests for YAML settings."""

from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from calpoint.config.settings import CONFIG_ENV_VAR, Settings


class TestSettingsLoad:
    """Tests for Settings.load."""

    def test_missing_file_gives_defaults(self, tmp_path) -> None:
        settings = Settings.load(tmp_path / "nope.yaml")

        assert settings.tracking.timezone == "UTC"
        assert settings.defaults.output_format == "table"
        assert settings.database.path.name == "calpoint.db"

    def test_load_values(self, tmp_path) -> None:
        config = tmp_path / "config.yaml"
        config.write_text(
            "database:\n"
            f"  path: {tmp_path / 'data.db'}\n"
            "tracking:\n"
            "  timezone: Europe/Berlin\n"
            "defaults:\n"
            "  output_format: json\n"
        )
        settings = Settings.load(config)

        assert settings.database.path == tmp_path / "data.db"
        assert settings.tracking.timezone == "Europe/Berlin"
        assert settings.defaults.output_format == "json"

    def test_empty_file(self, tmp_path) -> None:
        config = tmp_path / "config.yaml"
        config.write_text("")

        assert Settings.load(config).tracking.timezone == "UTC"

    def test_partial_section(self, tmp_path) -> None:
        config = tmp_path / "config.yaml"
        config.write_text("tracking:\n")

        assert Settings.load(config).tracking.timezone == "UTC"

    def test_unknown_timezone(self, tmp_path) -> None:
        config = tmp_path / "config.yaml"
        config.write_text("tracking:\n  timezone: Mars/Olympus\n")

        with pytest.raises(ValueError, match="timezone"):
            Settings.load(config)

    def test_bad_output_format(self, tmp_path) -> None:
        config = tmp_path / "config.yaml"
        config.write_text("defaults:\n  output_format: xml\n")

        with pytest.raises(ValueError, match="output_format"):
            Settings.load(config)

    def test_env_var_path(self, tmp_path, monkeypatch) -> None:
        config = tmp_path / "alt.yaml"
        config.write_text("tracking:\n  timezone: Asia/Tokyo\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(config))

        assert Settings.load().tracking.timezone == "Asia/Tokyo"


class TestSettingsSave:
    """Tests for Settings.save."""

    def test_round_trip(self, tmp_path) -> None:
        config = tmp_path / "nested" / "config.yaml"
        settings = Settings()
        settings.database.path = Path(tmp_path / "x.db")
        settings.tracking.timezone = "America/New_York"
        settings.save(config)

        loaded = Settings.load(config)
        assert loaded.database.path == tmp_path / "x.db"
        assert loaded.tracking.timezone == "America/New_York"


class TestToday:
    """Tests for Settings.today."""

    def test_returns_date(self) -> None:
        assert isinstance(Settings().today(), date)


class TestGlobalSettings:
    """Tests for the cached global settings."""

    def test_reload_picks_up_changes(self, tmp_path, monkeypatch) -> None:
        from calpoint.config import get_settings, reload_settings, settings as settings_module

        # Restored by monkeypatch after the test
        monkeypatch.setattr(settings_module, "_settings", None)

        config = tmp_path / "config.yaml"
        config.write_text("tracking:\n  timezone: Asia/Tokyo\n")
        monkeypatch.setenv(CONFIG_ENV_VAR, str(config))
        assert reload_settings().tracking.timezone == "Asia/Tokyo"

        config.write_text("tracking:\n  timezone: Europe/Paris\n")
        assert get_settings().tracking.timezone == "Asia/Tokyo"
        assert reload_settings().tracking.timezone == "Europe/Paris"

