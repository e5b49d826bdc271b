"""Tests for FactSettings — unified settings with TOML source."""

from pathlib import Path

import click
import pytest

from factctl.config.settings import FactSettings
from factctl.domain.lifecycle import OverlapPolicy
from factctl.infrastructure.receivers import DEFAULT_FACT_URL


class TestFactSettingsDefaults:
    def test_all_defaults(self, tmp_path: Path) -> None:
        settings = FactSettings.from_cli(start_dir=tmp_path)
        assert settings.config_path is None
        assert settings.json_output is False
        assert settings.quiet is False
        assert settings.verbose is False
        assert settings.fetch.url == DEFAULT_FACT_URL
        assert settings.fetch.timeout == 10.0
        assert settings.schedule.interval == 5
        assert settings.schedule.overlap is OverlapPolicy.ALLOW

    def test_frozen(self, tmp_path: Path) -> None:
        settings = FactSettings.from_cli(start_dir=tmp_path)
        with pytest.raises(Exception):
            settings.quiet = True  # type: ignore[misc]


class TestTomlSource:
    def test_loads_from_toml(self, tmp_path: Path) -> None:
        toml = tmp_path / "factctl.toml"
        toml.write_text('[schedule]\ninterval = 3\noverlap = "skip"\n')
        settings = FactSettings.from_cli(start_dir=tmp_path)
        assert settings.schedule.interval == 3
        assert settings.schedule.overlap is OverlapPolicy.SKIP
        assert settings.fetch.url == DEFAULT_FACT_URL  # default preserved
        assert settings.config_path == toml.resolve()

    def test_discovered_from_subdirectory(self, tmp_path: Path) -> None:
        (tmp_path / "factctl.toml").write_text("[fetch]\ntimeout = 2.5\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        settings = FactSettings.from_cli(start_dir=nested)
        assert settings.fetch.timeout == 2.5

    def test_explicit_config_path(self, tmp_path: Path) -> None:
        custom = tmp_path / "custom" / "facts.toml"
        custom.parent.mkdir(parents=True)
        custom.write_text('[fetch]\nurl = "https://example.org/fact"\n')
        settings = FactSettings.from_cli(config_path=str(custom))
        assert settings.fetch.url == "https://example.org/fact"
        assert settings.config_path == custom

    def test_invalid_toml_is_click_error(self, tmp_path: Path) -> None:
        (tmp_path / "factctl.toml").write_text("[schedule\ninterval = ")
        with pytest.raises(click.ClickException, match="Invalid TOML"):
            FactSettings.from_cli(start_dir=tmp_path)

    def test_invalid_interval_rejected(self, tmp_path: Path) -> None:
        (tmp_path / "factctl.toml").write_text("[schedule]\ninterval = 0\n")
        with pytest.raises(Exception):
            FactSettings.from_cli(start_dir=tmp_path)


class TestEnvAndFlags:
    def test_env_overrides_toml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / "factctl.toml").write_text("[schedule]\ninterval = 3\n")
        monkeypatch.setenv("FACTCTL_SCHEDULE__INTERVAL", "7")
        settings = FactSettings.from_cli(start_dir=tmp_path)
        assert settings.schedule.interval == 7

    def test_cli_flags_override(self, tmp_path: Path) -> None:
        settings = FactSettings.from_cli(
            start_dir=tmp_path,
            json_output=True,
            quiet=True,
            verbose=True,
        )
        assert settings.json_output is True
        assert settings.quiet is True
        assert settings.verbose is True
