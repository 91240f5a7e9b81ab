"""Tests for configuration loading and validation."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from gitty.config.loader import (
    load_global_config,
    load_local_config,
    resolve_config,
    resolve_provider,
)
from gitty.config.schema import (
    ConfigOverrides,
    GittyConfig,
    LocalConfig,
    OpenAIConfig,
    ProviderOverrides,
    ResolvedConfig,
    Settings,
)
from gitty.utils.errors import ConfigError, ConfigValidationError


@pytest.fixture
def global_config(valid_global_config: Path, display) -> GittyConfig:
    """The fixture global config, parsed."""
    return load_global_config(valid_global_config, display)


@pytest.fixture
def settings(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> Settings:
    """Settings with no API keys in the environment."""
    clean_env.chdir(tmp_path)
    return Settings()


class TestSchema:
    """Test config model validation."""

    def test_defaults(self) -> None:
        """An empty document yields the built-in defaults."""
        config = GittyConfig.model_validate({})
        assert config.default_provider == "openai"
        assert config.providers.openai.model == "gpt-4o-mini"
        assert config.providers.openai.max_tokens == 500
        assert config.providers.gemini.model == "gemini-1.5-flash"
        assert config.providers.gemini.max_tokens == 2048
        assert config.default.style == "concise"
        assert config.default.language == "en"
        assert config.presets == {}

    def test_camel_case_and_snake_case(self) -> None:
        """Both key spellings are accepted."""
        camel = GittyConfig.model_validate({"defaultProvider": "gemini"})
        snake = GittyConfig.model_validate({"default_provider": "gemini"})
        assert camel.default_provider == snake.default_provider == "gemini"

    def test_unknown_keys_ignored(self) -> None:
        config = GittyConfig.model_validate({"theme": "dark", "defaultProvider": "openai"})
        assert config.default_provider == "openai"

    def test_unknown_provider_rejected(self) -> None:
        with pytest.raises(ValidationError):
            GittyConfig.model_validate({"defaultProvider": "claude"})

    def test_max_tokens_bounds(self) -> None:
        with pytest.raises(ValidationError):
            OpenAIConfig(max_tokens=4001)
        with pytest.raises(ValidationError):
            OpenAIConfig(max_tokens=0)

    def test_temperature_bounds(self) -> None:
        with pytest.raises(ValidationError):
            OpenAIConfig(temperature=2.5)

    def test_configured_providers(self) -> None:
        overrides = ProviderOverrides.model_validate({"gemini": {"apiKey": "k"}})
        assert overrides.configured() == ["gemini"]
        assert overrides.get("openai") is None

    def test_resolved_config_hides_api_key(self) -> None:
        resolved = ResolvedConfig(
            provider="openai",
            api_key="sk-very-secret",
            prepend="",
            style="concise",
            language="en",
            model="gpt-4o-mini",
            temperature=0.7,
            max_tokens=500,
        )
        assert "sk-very-secret" not in repr(resolved)


class TestSettings:
    """Test environment-driven settings."""

    def test_defaults(self, settings: Settings) -> None:
        assert settings.global_config_path == Path.home() / ".gitty" / "config.json"
        assert settings.log_level == "WARNING"
        assert settings.api_key_for("openai") is None

    def test_config_dir_from_env(
        self, clean_env: pytest.MonkeyPatch, tmp_path: Path
    ) -> None:
        clean_env.setenv("GITTY_CONFIG_DIR", str(tmp_path))
        assert Settings().global_config_path == tmp_path / "config.json"

    def test_provider_keys_from_env(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("OPENAI_API_KEY", "env-openai")
        clean_env.setenv("GOOGLE_API_KEY", "env-google")
        settings = Settings()
        assert settings.api_key_for("openai") == "env-openai"
        assert settings.api_key_for("gemini") == "env-google"

    def test_gemini_key_preferred_over_google(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("GEMINI_API_KEY", "gemini")
        clean_env.setenv("GOOGLE_API_KEY", "google")
        assert Settings().api_key_for("gemini") == "gemini"


class TestLoadGlobalConfig:
    """Test loading the global config file."""

    def test_load_valid_config(self, global_config: GittyConfig) -> None:
        assert global_config.default_provider == "gemini"
        assert global_config.providers.gemini.api_key == "gemini-test-key"
        assert global_config.presets["work"].prepend == "WORK"
        assert global_config.presets["work"].default_provider == "openai"

    def test_missing_file_yields_defaults(self, tmp_path: Path, display) -> None:
        config = load_global_config(tmp_path / "config.json", display)
        assert config == GittyConfig()
        assert display.messages == []

    def test_malformed_file_exits(self, tmp_path: Path, display, broken_config_text: str) -> None:
        path = tmp_path / "config.json"
        path.write_text(broken_config_text)
        with pytest.raises(SystemExit) as exc_info:
            load_global_config(path, display)
        assert exc_info.value.code == 1
        assert display.of_kind("error") == ["Your gitty configuration has invalid JSON syntax"]

    def test_schema_mismatch_raises(self, tmp_path: Path, display) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"defaultProvider": "claude"}))
        with pytest.raises(ConfigValidationError, match="Invalid configuration"):
            load_global_config(path, display)


class TestLoadLocalConfig:
    """Test loading a repository's local config."""

    def test_valid(self, tmp_path: Path, display) -> None:
        path = tmp_path / "gittyrc.json"
        path.write_text(json.dumps({"preset": "work", "prepend": "API"}))
        local = load_local_config(path, display)
        assert local == LocalConfig(preset="work", prepend="API")

    def test_missing(self, tmp_path: Path, display) -> None:
        assert load_local_config(tmp_path / "gittyrc.json", display) is None
        assert display.messages == []

    def test_malformed_falls_back(
        self, tmp_path: Path, display, broken_config_text: str
    ) -> None:
        """A broken local config warns and never stops the program."""
        path = tmp_path / "gittyrc.json"
        path.write_text(broken_config_text)
        assert load_local_config(path, display) is None
        assert display.of_kind("warning")
        assert display.of_kind("error") == []

    def test_non_json_content_ignored_silently(self, tmp_path: Path, display) -> None:
        path = tmp_path / "gittyrc.json"
        path.write_text("preset = work\n")
        assert load_local_config(path, display) is None
        assert display.messages == []

    def test_schema_mismatch_falls_back(self, tmp_path: Path, display) -> None:
        path = tmp_path / "gittyrc.json"
        path.write_text(json.dumps({"style": "shouty"}))
        assert load_local_config(path, display) is None
        assert display.of_kind("warning") == [
            "Local repository configuration does not match the expected format"
        ]

    def test_unreadable_falls_back(self, tmp_path: Path, display) -> None:
        """A directory in place of the file is reported and skipped."""
        path = tmp_path / "gittyrc.json"
        path.mkdir()
        assert load_local_config(path, display) is None
        assert display.of_kind("warning")


class TestResolveProvider:
    """Test provider selection."""

    def test_command_line_wins(self, global_config: GittyConfig) -> None:
        local = LocalConfig(default_provider="gemini")
        overrides = ConfigOverrides(provider="openai")
        assert resolve_provider(global_config, local, overrides) == "openai"

    def test_single_local_provider_section(self, global_config: GittyConfig) -> None:
        local = LocalConfig.model_validate({"providers": {"openai": {"apiKey": "k"}}})
        assert resolve_provider(global_config, local, ConfigOverrides()) == "openai"

    def test_two_local_provider_sections_fall_through(self, global_config: GittyConfig) -> None:
        local = LocalConfig.model_validate(
            {"providers": {"openai": {"apiKey": "a"}, "gemini": {"apiKey": "b"}}}
        )
        assert resolve_provider(global_config, local, ConfigOverrides()) == "gemini"

    def test_preset_provider(self, global_config: GittyConfig) -> None:
        overrides = ConfigOverrides(preset="work")
        assert resolve_provider(global_config, None, overrides) == "openai"


class TestResolveConfig:
    """Test layered configuration resolution."""

    def test_global_only(self, global_config: GittyConfig, settings: Settings) -> None:
        resolved = resolve_config(global_config, settings=settings)
        assert resolved.provider == "gemini"
        assert resolved.model == "gemini-1.5-pro"
        assert resolved.temperature == 0.4
        assert resolved.style == "detailed"
        assert resolved.api_key == "gemini-test-key"

    def test_preset_switches_provider(
        self, global_config: GittyConfig, settings: Settings
    ) -> None:
        """A preset that changes provider takes that provider's settings."""
        resolved = resolve_config(
            global_config, overrides=ConfigOverrides(preset="work"), settings=settings
        )
        assert resolved.provider == "openai"
        assert resolved.model == "gpt-4o"
        assert resolved.temperature == 0.7
        assert resolved.max_tokens == 500
        assert resolved.prepend == "WORK"
        assert resolved.style == "concise"
        assert resolved.language == "de"
        assert resolved.api_key == "work-openai-key"

    def test_local_links_preset(self, global_config: GittyConfig, settings: Settings) -> None:
        resolved = resolve_config(global_config, LocalConfig(preset="work"), settings=settings)
        assert resolved.provider == "openai"
        assert resolved.prepend == "WORK"

    def test_command_line_provider_is_kept(
        self, global_config: GittyConfig, settings: Settings
    ) -> None:
        overrides = ConfigOverrides(preset="work", provider="gemini")
        resolved = resolve_config(global_config, overrides=overrides, settings=settings)
        assert resolved.provider == "gemini"
        assert resolved.model == "gemini-1.5-pro"
        assert resolved.api_key == "gemini-test-key"
        assert resolved.prepend == "WORK"

    def test_local_overrides_preset(
        self, global_config: GittyConfig, settings: Settings
    ) -> None:
        local = LocalConfig(preset="work", style="funny", prepend="")
        resolved = resolve_config(global_config, local, settings=settings)
        assert resolved.style == "funny"
        assert resolved.prepend == ""

    def test_command_line_values_win(
        self, global_config: GittyConfig, settings: Settings
    ) -> None:
        overrides = ConfigOverrides(style="funny", language="fr", model="m", max_tokens=99)
        resolved = resolve_config(global_config, overrides=overrides, settings=settings)
        assert (resolved.style, resolved.language, resolved.model, resolved.max_tokens) == (
            "funny",
            "fr",
            "m",
            99,
        )

    def test_prepend_added(self, global_config: GittyConfig, settings: Settings) -> None:
        resolved = resolve_config(
            global_config, overrides=ConfigOverrides(prepend="JIRA-1"), settings=settings
        )
        assert resolved.prepend == "JIRA-1"

    def test_force_prepend_replaces(
        self, global_config: GittyConfig, settings: Settings
    ) -> None:
        overrides = ConfigOverrides(preset="work", prepend="HOTFIX", force_prepend=True)
        resolved = resolve_config(global_config, overrides=overrides, settings=settings)
        assert resolved.prepend == "HOTFIX"

    def test_unknown_preset_ignored(
        self, global_config: GittyConfig, settings: Settings
    ) -> None:
        resolved = resolve_config(
            global_config, overrides=ConfigOverrides(preset="nope"), settings=settings
        )
        assert resolved.provider == "gemini"

    def test_local_api_key(self, global_config: GittyConfig, settings: Settings) -> None:
        local = LocalConfig.model_validate({"providers": {"openai": {"apiKey": "local-key"}}})
        resolved = resolve_config(global_config, local, settings=settings)
        assert resolved.provider == "openai"
        assert resolved.api_key == "local-key"

    def test_env_api_key_fallback(self, clean_env: pytest.MonkeyPatch) -> None:
        clean_env.setenv("OPENAI_API_KEY", "env-key")
        resolved = resolve_config(GittyConfig(), settings=Settings())
        assert resolved.api_key == "env-key"

    def test_missing_api_key(self, settings: Settings) -> None:
        with pytest.raises(ConfigError, match="No API key found for openai"):
            resolve_config(GittyConfig(), settings=settings)
