"""Configuration and telemetry shared by every engine component."""

from .config import EngineConfig

__all__ = ["EngineConfig"]
