"""Configuration loading and layered resolution.

Two files feed the final configuration:

- the global config (``~/.gitty/config.json``), which must be valid JSON:
  a syntax error stops the program with an explanation;
- the repository's local config (``.git/gittyrc.json``), which may be
  broken without blocking work: problems are reported and the global
  config is used instead.
"""

from __future__ import annotations

from pathlib import Path
from typing import TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from gitty.adapters.console import ConsoleDisplay
from gitty.core.config_extractor import MalformedPolicy, extract, read_json_file
from gitty.interfaces.display import Display
from gitty.models.outcome import value_or_none
from gitty.utils.errors import ConfigError, ConfigValidationError

from .schema import (
    ConfigOverrides,
    GittyConfig,
    LocalConfig,
    PresetConfig,
    Provider,
    ResolvedConfig,
    Settings,
)

log = structlog.get_logger()

LOCAL_CONFIG_PATH = Path(".git") / "gittyrc.json"

ModelT = TypeVar("ModelT", bound=BaseModel)


def _validate(model: type[ModelT], data: object, path: Path | str) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration in {path}: {e}") from e


def load_global_config(path: Path | str, display: Display | None = None) -> GittyConfig:
    """
    Load the global configuration file.

    A missing file yields the defaults. Invalid JSON terminates the
    process after explaining the problem.

    Args:
        path: Path to the global config JSON file
        display: Surface for user-facing diagnostics

    Returns:
        Validated GittyConfig instance

    Raises:
        ConfigValidationError: If the JSON does not match the schema
        SystemExit: If the file is not valid JSON
    """
    outcome = read_json_file(
        path,
        allow_missing=True,
        on_malformed=MalformedPolicy.ABORT,
        description="gitty configuration",
        display=display,
    )
    data = value_or_none(outcome)
    if data is None:
        log.debug("global_config_defaults", path=str(path))
        return GittyConfig()

    config = _validate(GittyConfig, data, path)
    log.debug("global_config_loaded", path=str(path), presets=len(config.presets))
    return config


def load_local_config(path: Path | str, display: Display | None = None) -> LocalConfig | None:
    """
    Load a repository's local configuration file.

    Never fails: a missing, unreadable, malformed or schema-invalid file
    yields None so the caller falls back to the global configuration.
    Content that does not look like JSON at all is ignored silently.

    Args:
        path: Path to the local config JSON file
        display: Surface for user-facing diagnostics

    Returns:
        Validated LocalConfig, or None
    """
    file_path = Path(path)
    display = display if display is not None else ConsoleDisplay()

    try:
        text = file_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as e:
        log.warning("local_config_unreadable", path=str(file_path), error=str(e))
        display.warning(f"Could not read local repository configuration: {file_path}")
        return None

    trimmed = text.strip()
    if trimmed and not trimmed.startswith(("{", "[")):
        log.info("local_config_not_json", path=str(file_path))
        return None

    outcome = extract(
        lambda: text,
        allow_missing=True,
        on_malformed=MalformedPolicy.FALLBACK,
        location=str(file_path),
        description="local repository configuration",
        display=display,
    )
    data = value_or_none(outcome)
    if data is None:
        return None

    try:
        return _validate(LocalConfig, data, file_path)
    except ConfigValidationError as e:
        log.warning("local_config_invalid", path=str(file_path), error=str(e))
        display.warning("Local repository configuration does not match the expected format")
        display.hint(f"Please fix or delete {file_path} to reset")
        return None


def _preset(
    global_config: GittyConfig, overrides: ConfigOverrides, local: LocalConfig | None
) -> PresetConfig | None:
    name = overrides.preset or (local.preset if local else None)
    if not name:
        return None
    preset = global_config.presets.get(name)
    if preset is None:
        log.warning("preset_not_found", preset=name)
    return preset


def resolve_provider(
    global_config: GittyConfig,
    local: LocalConfig | None,
    overrides: ConfigOverrides,
) -> Provider:
    """Pick the provider: command line, local config, preset, then global."""
    if overrides.provider:
        return overrides.provider
    if local and local.default_provider:
        return local.default_provider

    if local and local.providers:
        configured = local.providers.configured()
        if len(configured) == 1:
            log.info("provider_auto_detected", provider=configured[0])
            return configured[0]

    preset = _preset(global_config, overrides, local)
    if preset and preset.default_provider:
        return preset.default_provider

    return global_config.default_provider


def resolve_api_key(
    provider: Provider,
    global_config: GittyConfig,
    local: LocalConfig | None,
    preset: PresetConfig | None,
    settings: Settings,
) -> str:
    """
    Find the API key for ``provider``.

    Local config wins over a preset, a preset over the global config; the
    environment is consulted only when no file provides a key.

    Raises:
        ConfigError: If no key is configured anywhere
    """
    api_key = global_config.providers.get(provider).api_key

    if preset and preset.providers:
        override = preset.providers.get(provider)
        if override and override.api_key:
            api_key = override.api_key

    if local and local.providers:
        override = local.providers.get(provider)
        if override and override.api_key:
            api_key = override.api_key

    if not api_key:
        api_key = settings.api_key_for(provider) or ""

    if not api_key:
        raise ConfigError(
            f'No API key found for {provider}. Run "gitty --set-key --provider {provider}" '
            "or set the appropriate environment variable"
        )
    return api_key


def resolve_config(
    global_config: GittyConfig,
    local: LocalConfig | None = None,
    overrides: ConfigOverrides | None = None,
    settings: Settings | None = None,
) -> ResolvedConfig:
    """
    Merge every configuration layer into the settings for one run.

    Precedence, lowest first: global defaults, preset, local config,
    command line. A preset or local config that switches provider resets
    model and sampling settings to that provider's global values, unless
    the provider was chosen on the command line.

    Args:
        global_config: Parsed global config
        local: Parsed local config, if any
        overrides: Command line values
        settings: Environment settings (API key fallback)

    Returns:
        ResolvedConfig

    Raises:
        ConfigError: If no API key can be found
    """
    overrides = overrides or ConfigOverrides()
    settings = settings or Settings()
    provider_from_cli = overrides.provider is not None

    provider = resolve_provider(global_config, local, overrides)
    preset = _preset(global_config, overrides, local)

    values = global_config.default.model_dump()
    values["provider"] = provider
    provider_config = global_config.providers.get(provider)
    values.update(
        model=provider_config.model,
        temperature=provider_config.temperature,
        max_tokens=provider_config.max_tokens,
    )

    def switch_provider(new_provider: Provider | None) -> None:
        if provider_from_cli or not new_provider or new_provider == values["provider"]:
            return
        defaults = global_config.providers.get(new_provider)
        values.update(
            provider=new_provider,
            model=defaults.model,
            temperature=defaults.temperature,
            max_tokens=defaults.max_tokens,
        )

    def apply_provider_override(layer: PresetConfig | LocalConfig) -> None:
        if not layer.providers:
            return
        override = layer.providers.get(values["provider"])
        if override is None:
            return
        values["model"] = override.model or values["model"]
        if override.temperature is not None:
            values["temperature"] = override.temperature
        if override.max_tokens is not None:
            values["max_tokens"] = override.max_tokens

    if preset is not None:
        values.update(prepend=preset.prepend, style=preset.style, language=preset.language)
        switch_provider(preset.default_provider)
        apply_provider_override(preset)

    if local is not None:
        if local.prepend is not None:
            values["prepend"] = local.prepend
        if local.style:
            values["style"] = local.style
        if local.language:
            values["language"] = local.language
        switch_provider(local.default_provider)
        apply_provider_override(local)

    for key in ("style", "language", "model", "temperature", "max_tokens"):
        value = getattr(overrides, key)
        if value is not None:
            values[key] = value

    if overrides.prepend is not None:
        if overrides.force_prepend:
            values["prepend"] = overrides.prepend
        else:
            values["prepend"] = (values["prepend"] or "") + overrides.prepend

    values["api_key"] = resolve_api_key(
        values["provider"], global_config, local, preset, settings
    )

    resolved = ResolvedConfig(**values)
    log.debug(
        "config_resolved",
        provider=resolved.provider,
        model=resolved.model,
        style=resolved.style,
        preset=overrides.preset or (local.preset if local else None),
    )
    return resolved
