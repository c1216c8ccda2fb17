# Copyright 2026 Firefly Software Solutions Inc.
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
"""Untyped configuration records with dot-notation access and model binding."""

from __future__ import annotations

import os
import tomllib
from collections.abc import Callable, Mapping
from pathlib import Path
from typing import Any, TypeVar

import yaml  # type: ignore[import-untyped]
from pydantic import BaseModel, ValidationError

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

_CONFIG_PROPERTIES_ATTR = "__corsfly_config_prefix__"


def config_properties(prefix: str) -> Callable[[type[T]], type[T]]:
    """Mark a class as bindable to a configuration prefix.

    Usage:
        @config_properties(prefix="corsfly.cors")
        class CORSProperties(BaseModel):
            allow_origins: list[str] = Field(default_factory=lambda: ["*"])
    """

    def decorator(cls: type[T]) -> type[T]:
        setattr(cls, _CONFIG_PROPERTIES_ATTR, prefix)
        return cls

    return decorator


def _env_key(key: str) -> str:
    # corsfly.cors.debug -> CORSFLY_CORS_DEBUG
    env_base = key.removeprefix("corsfly.")
    return "CORSFLY_" + env_base.upper().replace(".", "_").replace("-", "_")


class Config:
    """Hierarchical configuration record.

    Wraps the host application's raw (untyped) configuration. Values are
    addressed with dot-notation keys; environment variables in
    ``CORSFLY_SECTION_KEY`` form override the record in both ``get()`` and
    ``get_section()``.
    """

    def __init__(self, data: Mapping[str, Any] | None = None) -> None:
        self._data: dict[str, Any] = dict(data or {})

    @classmethod
    def of(cls, raw: Config | Mapping[str, Any] | None) -> Config:
        """Return *raw* as a Config, wrapping plain mappings."""
        if isinstance(raw, Config):
            return raw
        return cls(raw)

    @classmethod
    def from_file(cls, path: str | Path) -> Config:
        """Load configuration from a YAML or TOML file.

        A missing file yields an empty configuration.
        """
        path = Path(path)
        if not path.exists():
            return cls()
        if path.suffix == ".toml":
            with open(path, "rb") as f:
                return cls(tomllib.load(f) or {})
        with open(path) as f:
            return cls(yaml.safe_load(f) or {})

    def to_dict(self) -> dict[str, Any]:
        """Return a shallow copy of the raw configuration data."""
        return dict(self._data)

    def _walk(self, key: str) -> Any:
        current: Any = self._data
        for part in key.split("."):
            if not isinstance(current, dict) or part not in current:
                return None
            current = current[part]
        return current

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key, checking env vars first."""
        env_val = os.environ.get(_env_key(key))
        if env_val is not None:
            return env_val

        value = self._walk(key)
        return default if value is None else value

    def has_section(self, prefix: str) -> bool:
        """Return ``True`` when *prefix* names a mapping in the record.

        Environment variables alone never create a section.
        """
        return isinstance(self._walk(prefix), dict)

    def get_section(self, prefix: str) -> dict[str, Any]:
        """Get all values under a prefix, or an empty dict.

        ``CORSFLY_<PREFIX>_<KEY>`` variables override (or add) top-level keys
        of the section; the key is the lower-cased remainder of the name.
        """
        section = self._walk(prefix)
        merged = dict(section) if isinstance(section, dict) else {}

        env_prefix = _env_key(prefix) + "_"
        for name, value in os.environ.items():
            if name.startswith(env_prefix) and len(name) > len(env_prefix):
                merged[name[len(env_prefix):].lower()] = value
        return merged

    def bind(self, config_cls: type[M]) -> M:
        """Bind the section named by a @config_properties Pydantic model.

        Raises:
            ValueError: the class is undecorated or the section fails validation.
        """
        prefix = getattr(config_cls, _CONFIG_PROPERTIES_ATTR, None)
        if prefix is None:
            raise ValueError(f"{config_cls.__name__} is not decorated with @config_properties")

        try:
            return config_cls.model_validate(self.get_section(prefix))
        except ValidationError as exc:
            raise ValueError(
                f"Configuration validation failed for '{config_cls.__name__}' (prefix='{prefix}'):\n{exc}"
            ) from exc
