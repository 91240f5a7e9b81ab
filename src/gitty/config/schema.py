"""Pydantic models for configuration schema.

Config files use camelCase keys (``defaultProvider``, ``maxTokens``); the
models expose snake_case attributes and accept either spelling.
"""

from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pydantic_settings import BaseSettings, SettingsConfigDict

Provider = Literal["openai", "gemini"]
Style = Literal["concise", "detailed", "funny"]

PROVIDERS: tuple[Provider, ...] = ("openai", "gemini")


class ConfigModel(BaseModel):
    """Base for models read from JSON config files."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class OpenAIConfig(ConfigModel):
    """OpenAI-specific configuration."""

    api_key: str = ""
    model: str = "gpt-4o-mini"
    temperature: float = Field(0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(500, ge=1, le=4000)


class GeminiConfig(ConfigModel):
    """Gemini-specific configuration."""

    api_key: str = ""
    model: str = "gemini-1.5-flash"
    temperature: float = Field(0.7, ge=0.0, le=2.0)
    max_tokens: int = Field(2048, ge=1, le=8192)


class ProvidersConfig(ConfigModel):
    """Per-provider settings in the global config."""

    openai: OpenAIConfig = Field(default_factory=OpenAIConfig)
    gemini: GeminiConfig = Field(default_factory=GeminiConfig)

    def get(self, provider: Provider) -> OpenAIConfig | GeminiConfig:
        return self.openai if provider == "openai" else self.gemini


class ProviderOverride(ConfigModel):
    """Partial provider settings used by presets and local configs."""

    api_key: str | None = None
    model: str | None = None
    temperature: float | None = Field(None, ge=0.0, le=2.0)
    max_tokens: int | None = Field(None, ge=1)


class ProviderOverrides(ConfigModel):
    """Partial per-provider settings."""

    openai: ProviderOverride | None = None
    gemini: ProviderOverride | None = None

    def get(self, provider: Provider) -> ProviderOverride | None:
        return self.openai if provider == "openai" else self.gemini

    def configured(self) -> list[Provider]:
        """Providers that have a section in this override."""
        return [p for p in PROVIDERS if self.get(p) is not None]


class DefaultsConfig(ConfigModel):
    """Message generation defaults."""

    prepend: str = ""
    style: Style = "concise"
    language: str = "en"


class PresetConfig(DefaultsConfig):
    """Named bundle of settings a repository can link to."""

    default_provider: Provider | None = None
    providers: ProviderOverrides | None = None


class GittyConfig(ConfigModel):
    """Root of the global config file (``~/.gitty/config.json``)."""

    default_provider: Provider = "openai"
    providers: ProvidersConfig = Field(default_factory=ProvidersConfig)
    default: DefaultsConfig = Field(default_factory=DefaultsConfig)
    presets: dict[str, PresetConfig] = {}


class LocalConfig(ConfigModel):
    """Per-repository config (``.git/gittyrc.json``); every field optional."""

    preset: str | None = None
    prepend: str | None = None
    style: Style | None = None
    language: str | None = None
    default_provider: Provider | None = None
    providers: ProviderOverrides | None = None


class ConfigOverrides(BaseModel):
    """Values given on the command line, highest precedence."""

    provider: Provider | None = None
    preset: str | None = None
    prepend: str | None = None
    force_prepend: bool = False
    style: Style | None = None
    language: str | None = None
    model: str | None = None
    temperature: float | None = Field(None, ge=0.0, le=2.0)
    max_tokens: int | None = Field(None, ge=1, le=100000)


class ResolvedConfig(BaseModel):
    """Final settings for one generation run."""

    model_config = ConfigDict(frozen=True)

    provider: Provider
    api_key: str = Field(repr=False)
    prepend: str
    style: Style
    language: str
    model: str
    temperature: float
    max_tokens: int


class Settings(BaseSettings):
    """Environment-driven settings.

    ``GITTY_CONFIG_DIR``, ``GITTY_LOG_LEVEL`` and ``GITTY_LOG_FORMAT`` control
    the tool itself; provider keys come from their conventional variables.
    """

    config_dir: Path = Field(default_factory=lambda: Path.home() / ".gitty")
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"
    log_format: Literal["json", "console"] = "console"
    openai_api_key: str | None = Field(None, validation_alias="OPENAI_API_KEY")
    gemini_api_key: str | None = Field(
        None, validation_alias=AliasChoices("GEMINI_API_KEY", "GOOGLE_API_KEY")
    )

    model_config = SettingsConfigDict(
        env_prefix="GITTY_",
        populate_by_name=True,
        env_file=".env",
        extra="ignore",
    )

    @property
    def global_config_path(self) -> Path:
        return self.config_dir.expanduser() / "config.json"

    def api_key_for(self, provider: Provider) -> str | None:
        return self.openai_api_key if provider == "openai" else self.gemini_api_key
