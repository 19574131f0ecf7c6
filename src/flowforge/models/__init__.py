"""Data models for flowforge."""

from .config_models import IntelligenceConfig

__all__ = ["IntelligenceConfig"]
