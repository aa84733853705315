"""Resolve a TypeLensConfig from YAML files, the environment and overrides.

Later sources win: built-in defaults, then the global file
(``~/.config/typelens/config.yaml``), then the repo file
(``<root>/.typelens/config.yaml``), then ``TYPELENS__SECTION__KEY``
environment variables, then keyword overrides.
"""

from functools import reduce
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from pydantic_settings import (
    BaseSettings,
    InitSettingsSource,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from typelens.config.models import TypeLensConfig
from typelens.core.errors import ConfigError

ENV_PREFIX = "TYPELENS__"
GLOBAL_CONFIG_PATH = Path("~/.config/typelens/config.yaml").expanduser()
REPO_CONFIG_PATH = Path(".typelens") / "config.yaml"


def _load_yaml(path: Path) -> dict[str, Any]:
    """Read one config file; a missing or empty file contributes nothing."""
    if not path.is_file():
        return {}
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigError.parse_error(str(path), str(e)) from e
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError.parse_error(str(path), "top level must be a mapping")
    return data


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    merged = dict(base)
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = _deep_merge(current, value)
        else:
            merged[key] = value
    return merged


def _settings_class(file_values: dict[str, Any]) -> type[BaseSettings]:
    # A class per load keeps the file values off shared state.
    class _Settings(BaseSettings, TypeLensConfig):
        model_config = SettingsConfigDict(
            env_prefix=ENV_PREFIX,
            env_nested_delimiter="__",
            case_sensitive=False,
            extra="ignore",
        )

        @classmethod
        def settings_customise_sources(
            cls,
            settings_cls: type[BaseSettings],
            init_settings: PydanticBaseSettingsSource,
            env_settings: PydanticBaseSettingsSource,
            dotenv_settings: PydanticBaseSettingsSource,
            file_secret_settings: PydanticBaseSettingsSource,
        ) -> tuple[PydanticBaseSettingsSource, ...]:
            del dotenv_settings, file_secret_settings
            files = InitSettingsSource(settings_cls, init_kwargs=file_values)
            return (init_settings, env_settings, files)

    return _Settings


def _config_error(error: ValidationError) -> ConfigError:
    first = error.errors()[0]
    field = ".".join(str(part) for part in first["loc"]) or "<root>"
    return ConfigError.invalid_value(field, first.get("input"), first["msg"])


def load_config(
    project_root: Path | None = None,
    *,
    global_path: Path | None = None,
    **kwargs: Any,
) -> TypeLensConfig:
    """Load the effective configuration for ``project_root``.

    Args:
        project_root: Directory whose ``.typelens/config.yaml`` applies.
            Defaults to the current working directory.
        global_path: Alternative location of the global config file.
        **kwargs: Section overrides, applied last.

    Raises:
        ConfigError: A config file is not valid YAML, or a resolved value
            fails validation.
    """
    root = project_root or Path.cwd()
    layers = [_load_yaml(global_path or GLOBAL_CONFIG_PATH), _load_yaml(root / REPO_CONFIG_PATH)]
    file_values = reduce(_deep_merge, layers, {})

    try:
        settings = _settings_class(file_values)(**kwargs)
        return TypeLensConfig.model_validate(settings.model_dump())
    except ValidationError as e:
        raise _config_error(e) from e
