"""Configuration loading and validation."""

from .loader import (
    LOCAL_CONFIG_PATH,
    load_global_config,
    load_local_config,
    resolve_api_key,
    resolve_config,
    resolve_provider,
)
from .schema import (
    ConfigOverrides,
    GeminiConfig,
    GittyConfig,
    LocalConfig,
    OpenAIConfig,
    PresetConfig,
    ProviderOverride,
    ProviderOverrides,
    ProvidersConfig,
    ResolvedConfig,
    Settings,
)

__all__ = [
    # Loader
    "LOCAL_CONFIG_PATH",
    "load_global_config",
    "load_local_config",
    "resolve_api_key",
    "resolve_config",
    "resolve_provider",
    # Root configs
    "GittyConfig",
    "LocalConfig",
    "ResolvedConfig",
    "Settings",
    # Nested configs
    "ConfigOverrides",
    "PresetConfig",
    "ProvidersConfig",
    "ProviderOverride",
    "ProviderOverrides",
    # Provider-specific configs
    "OpenAIConfig",
    "GeminiConfig",
]
