# Copyright 2026 The FileScout Authors
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Type-safe configuration with YAML/TOML files, env vars, and typed binding."""

from __future__ import annotations

import dataclasses
import importlib.resources
import os
import re
import tomllib
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar, cast, get_type_hints

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ValidationError

from filescout.kernel.exceptions import ConfigurationException

T = TypeVar("T")

ENV_PREFIX = "FILESCOUT_"
ACTIVE_PROFILES_KEY = "filescout.profiles.active"

_PLACEHOLDER_RE = re.compile(r"\$\{([^}]+)\}")

_CONFIG_PROPERTIES_ATTR = "__filescout_config_prefix__"


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Mark a class as bindable to a configuration prefix.

    Works with dataclasses and Pydantic ``BaseModel`` subclasses.  Pydantic
    models get coercion and fail-fast validation through ``model_validate()``.

    Usage:
        @config_properties(prefix="filescout.web")
        @dataclass
        class WebProperties:
            port: int = 8080
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _CONFIG_PROPERTIES_ATTR, prefix)
        return cls

    return decorator


def env_key_for(key: str) -> str:
    """Environment variable name overriding a dot-notation key.

    ``filescout.web.cors.allowed-origins`` -> ``FILESCOUT_WEB_CORS_ALLOWED_ORIGINS``
    """
    base = key.removeprefix("filescout.")
    return ENV_PREFIX + base.upper().replace(".", "_").replace("-", "_")


class Config:
    """Hierarchical configuration with dot-notation access and env var overrides.

    Priority (highest wins):
    1. Environment variables (FILESCOUT_SECTION_KEY format)
    2. Profile overlays, then project files, then packaged defaults
    3. Property class defaults
    """

    def __init__(self, data: dict[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = data or {}
        self._loaded_sources: list[str] = []

    @property
    def loaded_sources(self) -> list[str]:
        """Config sources that were merged, in merge order."""
        return list(self._loaded_sources)

    def to_dict(self) -> dict[str, Any]:
        return dict(self._data)

    @classmethod
    def from_sources(
        cls,
        base_dir: str | Path,
        active_profiles: list[str] | None = None,
        load_defaults: bool = True,
    ) -> Config:
        """Load and merge config from every known location.

        Merge order (later wins):
        1. Packaged defaults (``filescout-defaults.yaml``)
        2. ``config/filescout.yaml`` or ``config/filescout.toml``
        3. ``filescout.yaml`` or ``filescout.toml`` in *base_dir*
        4. Profile overlays ``filescout-{profile}.*`` from both locations
        5. Environment variables (applied at read time in :meth:`get`)
        """
        base_dir = Path(base_dir)
        data: dict[str, Any] = {}
        sources: list[str] = []

        if load_defaults:
            data = cls.load_defaults()
            sources.append("filescout-defaults.yaml (defaults)")

        for search_dir in (base_dir / "config", base_dir):
            for ext in (".yaml", ".toml"):
                candidate = search_dir / f"filescout{ext}"
                if candidate.is_file():
                    data = cls._deep_merge(data, cls._load_config_data(candidate))
                    sources.append(str(candidate))

        for profile in active_profiles or []:
            for search_dir in (base_dir / "config", base_dir):
                for ext in (".yaml", ".toml"):
                    candidate = search_dir / f"filescout-{profile}{ext}"
                    if candidate.is_file():
                        data = cls._deep_merge(data, cls._load_config_data(candidate))
                        sources.append(f"{candidate} (profile: {profile})")

        instance = cls(data)
        instance._loaded_sources = sources
        return instance

    @classmethod
    def from_file(cls, path: str | Path, load_defaults: bool = True) -> Config:
        """Load a single YAML or TOML file on top of the packaged defaults."""
        path = Path(path)
        data: dict[str, Any] = cls.load_defaults() if load_defaults else {}
        sources = ["filescout-defaults.yaml (defaults)"] if load_defaults else []

        if not path.is_file():
            raise ConfigurationException(
                f"Configuration file not found: {path}",
                code="CONFIG_NOT_FOUND",
                context={"path": str(path)},
            )
        data = cls._deep_merge(data, cls._load_config_data(path))
        sources.append(str(path))

        instance = cls(data)
        instance._loaded_sources = sources
        return instance

    @staticmethod
    def resolve_active_profiles(explicit: list[str] | None = None) -> list[str]:
        """Active profiles from *explicit* or ``FILESCOUT_PROFILES_ACTIVE``."""
        if explicit:
            return list(explicit)
        raw = os.environ.get(env_key_for(ACTIVE_PROFILES_KEY), "")
        return [p.strip() for p in raw.split(",") if p.strip()]

    @staticmethod
    def _load_config_data(path: Path) -> dict[str, Any]:
        try:
            if path.suffix == ".toml":
                with open(path, "rb") as f:
                    return tomllib.load(f) or {}
            with open(path) as f:
                return yaml.safe_load(f) or {}
        except (yaml.YAMLError, tomllib.TOMLDecodeError) as exc:
            raise ConfigurationException(
                f"Cannot parse configuration file {path}: {exc}",
                code="CONFIG_PARSE_ERROR",
                context={"path": str(path)},
            ) from exc

    @staticmethod
    def load_defaults() -> dict[str, Any]:
        """Load the defaults shipped in ``filescout.resources``."""
        defaults_file = importlib.resources.files("filescout.resources").joinpath("filescout-defaults.yaml")
        with importlib.resources.as_file(defaults_file) as p, open(p) as f:
            return yaml.safe_load(f) or {}

    @staticmethod
    def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
        """Recursively merge override into base, with override values winning."""
        merged = dict(base)
        for key, value in override.items():
            if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
                merged[key] = Config._deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key, checking env vars first.

        Keys may use ``-`` or ``_`` interchangeably.  String values containing
        ``${...}`` placeholders are resolved:
        - ``${ENV_VAR}``: from environment variables
        - ``${config.key}``: from other config values
        - ``${key:default}``: *default* if neither is found
        """
        env_val = os.environ.get(env_key_for(key))
        if env_val is not None:
            return env_val

        current = self._lookup(key)
        if current is None:
            return default

        if isinstance(current, str) and "${" in current:
            return self._resolve_placeholders(current)

        return current

    def _lookup(self, key: str) -> Any:
        current: Any = self._data
        for part in key.split("."):
            if not isinstance(current, dict):
                return None
            if part in current:
                current = current[part]
            else:
                current = current.get(part.replace("_", "-"), current.get(part.replace("-", "_")))
            if current is None:
                return None
        return current

    def _resolve_placeholders(self, value: str, _depth: int = 0) -> str:
        """Resolve ``${...}`` placeholders, guarding against circular references."""
        if _depth > 10:
            raise ConfigurationException(
                f"Max recursion depth exceeded resolving placeholders in '{value}'. Check for circular references.",
                code="CONFIG_PLACEHOLDER_CYCLE",
            )

        def _replace(match: re.Match[str]) -> str:
            inner = match.group(1)
            if ":" in inner:
                ref_key, default_val = inner.split(":", 1)
            else:
                ref_key, default_val = inner, None

            env_val = os.environ.get(ref_key)
            if env_val is not None:
                return env_val

            current = self._lookup(ref_key)
            if current is not None:
                resolved = str(current)
                if "${" in resolved:
                    resolved = self._resolve_placeholders(resolved, _depth + 1)
                return resolved

            if default_val is not None:
                return cast(str, default_val)

            raise ConfigurationException(
                f"Cannot resolve placeholder '${{{inner}}}': not found in environment or config",
                code="CONFIG_PLACEHOLDER_UNRESOLVED",
                context={"placeholder": inner},
            )

        return _PLACEHOLDER_RE.sub(_replace, value)

    def get_section(self, prefix: str) -> dict[str, Any]:
        """All values under *prefix*, with keys normalised to snake_case."""
        current = self._lookup(prefix)
        return _normalize_keys(current) if isinstance(current, dict) else {}

    def bind(self, config_cls: type[T]) -> T:
        """Bind configuration to a ``@config_properties`` dataclass or Pydantic model.

        Each field may be overridden by its environment variable
        (``FILESCOUT_<PREFIX>_<FIELD>``).
        """
        prefix = getattr(config_cls, _CONFIG_PROPERTIES_ATTR, None)
        if prefix is None:
            raise ConfigurationException(
                f"{config_cls.__name__} is not decorated with @config_properties",
                code="CONFIG_NOT_BINDABLE",
            )

        section = self.get_section(prefix)

        if isinstance(config_cls, type) and issubclass(config_cls, BaseModel):
            for name in config_cls.model_fields:
                value = self.get(f"{prefix}.{name}")
                if value is not None:
                    section[name] = _normalize_keys(value)
            try:
                return config_cls.model_validate(section)
            except ValidationError as exc:
                raise ConfigurationException(
                    f"Configuration validation failed for '{config_cls.__name__}' (prefix='{prefix}'):\n{exc}",
                    code="CONFIG_INVALID",
                    context={"prefix": prefix},
                ) from exc

        hints = get_type_hints(config_cls)
        kwargs: dict[str, Any] = {}
        for field in dataclasses.fields(config_cls):  # type: ignore[arg-type]
            value = self.get(f"{prefix}.{field.name}")
            if value is None:
                continue
            expected_type = hints.get(field.name)
            try:
                if expected_type is int and isinstance(value, str):
                    value = int(value)
                elif expected_type is float and isinstance(value, str):
                    value = float(value)
                elif expected_type is bool and isinstance(value, str):
                    value = value.lower() in ("true", "1", "yes")
            except ValueError as exc:
                raise ConfigurationException(
                    f"Invalid value for '{prefix}.{field.name}': {value!r}",
                    code="CONFIG_INVALID",
                    context={"prefix": prefix, "field": field.name},
                ) from exc
            kwargs[field.name] = _normalize_keys(value)

        return config_cls(**kwargs)


def _normalize_keys(value: Any) -> Any:
    """Convert kebab-case mapping keys to snake_case, recursively."""
    if isinstance(value, dict):
        return {str(k).replace("-", "_"): _normalize_keys(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_normalize_keys(v) for v in value]
    return value
