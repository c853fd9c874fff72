"""Engine settings with ``HECTO_ENGINE_*`` environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass, fields
from typing import Optional

ENV_PREFIX = "HECTO_ENGINE_"

_TRUTHY = {"1", "true", "yes", "on"}


def env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def env_flag(name: str, default: bool) -> bool:
    raw = env(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUTHY


def env_int(name: str, default: int) -> int:
    raw = env(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{ENV_PREFIX}{name} must be an integer, got {raw!r}") from exc


@dataclass(slots=True)
class EngineConfig:
    """Tunables for a single editing session.

    Every field can be overridden from the environment by upper-casing its
    name and prefixing it with ``HECTO_ENGINE_`` (for example
    ``HECTO_ENGINE_UNDO_LIMIT=200``).
    """

    indent_fallback_width: int = 4
    indent_fallback_tabs: bool = False
    undo_limit: int = 1000
    search_case_sensitive: bool = False
    expand_tabs_on_load: bool = True
    auto_indent: bool = True

    def __post_init__(self) -> None:
        if self.indent_fallback_width < 1:
            raise ValueError("indent_fallback_width must be positive")
        if self.undo_limit < 1:
            raise ValueError("undo_limit must be positive")

    @classmethod
    def from_env(cls, **overrides: object) -> "EngineConfig":
        values: dict[str, object] = {}
        defaults = cls()
        for spec in fields(cls):
            current = getattr(defaults, spec.name)
            key = spec.name.upper()
            if isinstance(current, bool):
                values[spec.name] = env_flag(key, current)
            else:
                values[spec.name] = env_int(key, int(current))
        values.update(overrides)
        return cls(**values)  # type: ignore[arg-type]


__all__ = ["ENV_PREFIX", "EngineConfig", "env", "env_flag", "env_int"]
