"""Data models for binding-mcp."""

from .config_models import BindingConfig

__all__ = ["BindingConfig"]
