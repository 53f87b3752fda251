"""Dependency Injection Container for binding-mcp DDD domains.

This container wires together the bounded contexts:
- Discovery Context: host runtime, entity locator and binding collector
- Export Context: export gate and document exporter
- Rebind Context: runtime binding overrides

Usage:
    from bindingmcp.container import get_container

    container = get_container()
    container.load_scene("scenes/game.json")
    records = container.collector.collect()
    result = container.exporter.run()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union, TYPE_CHECKING

from bindingmcp.models.config_models import BindingConfig

if TYPE_CHECKING:
    from bindingmcp.adapters import SceneGraphHost
    from bindingmcp.domains.discovery import BindingCollector, EntityLocator
    from bindingmcp.domains.export import BindingExporter, ExportGate
    from bindingmcp.domains.rebind import RebindApplicator

logger = logging.getLogger(__name__)

# Singleton container instance
_container: Optional["ServiceContainer"] = None


@dataclass
class ServiceContainer:
    """Simple dependency injection container for domain services.

    Every service shares the one injected logger. Replacing the host
    (``load_scene``/``set_host``) drops the collector and exporter, which
    hold a reference to it.
    """

    config: BindingConfig = field(default_factory=BindingConfig)
    log: logging.Logger = field(default=logger, repr=False)

    _host: Optional["SceneGraphHost"] = field(default=None, repr=False)
    _locator: Optional["EntityLocator"] = field(default=None, repr=False)
    _collector: Optional["BindingCollector"] = field(default=None, repr=False)
    _gate: Optional["ExportGate"] = field(default=None, repr=False)
    _exporter: Optional["BindingExporter"] = field(default=None, repr=False)
    _rebind_applicator: Optional["RebindApplicator"] = field(default=None, repr=False)

    @property
    def host(self) -> "SceneGraphHost":
        """Get the host runtime; loads ``config.scene_path`` when set."""
        if self._host is None:
            if self.config.scene_path:
                from bindingmcp.adapters import load_scene
                self._host = load_scene(self.config.scene_path)
            else:
                from bindingmcp.adapters import SceneGraphHost
                self._host = SceneGraphHost()
        return self._host

    @property
    def locator(self) -> "EntityLocator":
        if self._locator is None:
            from bindingmcp.domains.discovery import EntityLocator
            self._locator = EntityLocator()
        return self._locator

    @property
    def collector(self) -> "BindingCollector":
        """Get the binding collector for the current host."""
        if self._collector is None:
            from bindingmcp.domains.discovery import BindingCollector, default_surfaces
            self._collector = BindingCollector(
                self.host,
                surfaces=default_surfaces(
                    max_depth=self.config.max_hierarchy_depth,
                    root_markers=self.config.ui_root_markers,
                    log=self.log,
                ),
                locator=self.locator,
                log=self.log,
            )
        return self._collector

    @property
    def gate(self) -> "ExportGate":
        if self._gate is None:
            from bindingmcp.domains.export import ExportGate
            self._gate = ExportGate(self.config.sentinel_path, log=self.log)
        return self._gate

    @property
    def exporter(self) -> "BindingExporter":
        """Get the exporter writing into ``config.export_dir``."""
        if self._exporter is None:
            from bindingmcp.domains.export import BindingExporter
            self._exporter = BindingExporter(
                self.collector,
                self.gate,
                self.config.export_dir,
                log=self.log,
            )
        return self._exporter

    @property
    def rebind_applicator(self) -> "RebindApplicator":
        if self._rebind_applicator is None:
            from bindingmcp.domains.rebind import RebindApplicator
            self._rebind_applicator = RebindApplicator(log=self.log)
        return self._rebind_applicator

    def set_host(self, host: "SceneGraphHost") -> None:
        """Replace the host runtime.

        Args:
            host: The new host
        """
        self._host = host
        self._collector = None
        self._exporter = None
        self.log.debug("Host replaced; collector and exporter reset")

    def load_scene(self, path: Union[str, Path]) -> "SceneGraphHost":
        """Load a scene description and make it the current host.

        Raises:
            SceneLoadError: If the description cannot be loaded
        """
        from bindingmcp.adapters import load_scene
        host = load_scene(path)
        self.config.scene_path = str(path)
        self.set_host(host)
        return host


def get_container() -> ServiceContainer:
    """Get the singleton service container.

    Returns:
        The shared ServiceContainer instance, configured from the environment
    """
    global _container
    if _container is None:
        _container = ServiceContainer(config=BindingConfig.from_env())
    return _container


def reset_container() -> None:
    """Reset the container (for testing).

    Clears the singleton instance so a fresh container is created
    on next get_container() call.
    """
    global _container
    _container = None
