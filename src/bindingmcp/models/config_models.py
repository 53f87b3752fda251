"""Configuration data models."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from bindingmcp.domains.bindings import DeviceGroup


@dataclass
class BindingConfig:
    """Centralized configuration for discovery and export."""

    # Export settings
    export_dir: str = "."
    sentinel_name: str = "modified_bindings.json"

    # Hierarchical discovery
    max_hierarchy_depth: int = 10
    ui_root_markers: List[str] = field(default_factory=lambda: ["ui", "canvas"])

    # Display lookup
    keyboard_group: str = DeviceGroup.KEYBOARD_MOUSE
    gamepad_group: str = DeviceGroup.GAMEPAD

    # Scene description loaded at startup
    scene_path: Optional[str] = None

    @classmethod
    def from_dict(cls, config: Dict) -> 'BindingConfig':
        """Create configuration from dictionary."""
        instance = cls()
        for key, value in config.items():
            if hasattr(instance, key):
                setattr(instance, key, value)
        return instance

    @classmethod
    def from_env(cls) -> 'BindingConfig':
        """Create configuration from BINDINGMCP_* environment variables."""
        instance = cls()
        export_dir = os.environ.get("BINDINGMCP_EXPORT_DIR")
        if export_dir:
            instance.export_dir = export_dir
        sentinel = os.environ.get("BINDINGMCP_SENTINEL")
        if sentinel:
            instance.sentinel_name = sentinel
        max_depth = os.environ.get("BINDINGMCP_MAX_DEPTH", "").strip()
        if max_depth:
            try:
                instance.max_hierarchy_depth = int(max_depth)
            except ValueError:
                raise ValueError(f"BINDINGMCP_MAX_DEPTH must be an integer, got '{max_depth}'")
        scene = os.environ.get("BINDINGMCP_SCENE")
        if scene:
            instance.scene_path = scene
        return instance

    def to_dict(self) -> Dict:
        """Convert configuration to dictionary."""
        return {
            key: value for key, value in self.__dict__.items()
            if not key.startswith('_')
        }

    def update(self, **kwargs) -> None:
        """Update configuration values."""
        for key, value in kwargs.items():
            if hasattr(self, key):
                setattr(self, key, value)
            else:
                raise ValueError(f"Unknown configuration key: {key}")

    def validate(self) -> List[str]:
        """Validate configuration values and return any errors."""
        errors = []

        if self.max_hierarchy_depth < 0:
            errors.append("max_hierarchy_depth must not be negative")

        if not self.sentinel_name:
            errors.append("sentinel_name must not be empty")

        if not self.ui_root_markers:
            errors.append("ui_root_markers must name at least one marker")

        return errors

    @property
    def sentinel_path(self) -> Path:
        return Path(self.export_dir) / self.sentinel_name
