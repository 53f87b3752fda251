"""Binding Collector - aggregate root of the Discovery Context.

A collection pass has two phases, Scan then Report, and starts from an empty
state every time. During Scan each configured surface runs for each binder
kind, in order; every new component is filed by category and handed to the
entity locator. Assets are merged by identity with a first-seen-wins policy,
so an asset reachable from several surfaces is recorded once, with the
provenance of the surface that ran first. Components found again by a later
surface are ignored; components that lead to an already known asset are
still kept for control-name queries.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional, Sequence, Set, Tuple

from bindingmcp.domains.bindings import InputActionAsset, InputActionReference
from bindingmcp.domains.discovery.host import HostRuntime, is_active, owner_name
from bindingmcp.domains.discovery.locator import EntityLocator
from bindingmcp.domains.discovery.surfaces import DiscoverySurface, default_surfaces
from bindingmcp.domains.discovery.value_objects import (
    BinderCategory,
    BinderKind,
    DiscoveryRecord,
    LocatorInspectionError,
    ProvenanceKind,
)

logger = logging.getLogger(__name__)


def merge_first_seen(
    records: Dict[InputActionAsset, DiscoveryRecord],
    record: DiscoveryRecord,
) -> bool:
    """Add ``record`` unless its asset is already known.

    Returns:
        True if the record was added, False if an earlier finding wins
    """
    if record.asset in records:
        return False
    records[record.asset] = record
    return True


def control_name(binder: Any) -> Optional[str]:
    """Name of the UI control a binder is attached to, or None."""
    try:
        return getattr(binder, "control_name", None)
    except Exception:
        logger.debug("Could not resolve control for %s", owner_name(binder), exc_info=True)
        return None


class BindingCollector:
    """Collects binders and the assets they reference.

    The collector exclusively owns its discovered set; callers get tuples.
    It is not re-entrant: ``collect()`` rebuilds its own state in place.

    Example:
        collector = BindingCollector(host, kinds=DEFAULT_BINDER_KINDS)
        records = collector.collect()
        ref = collector.find_specified_action_ref("Next Round")
    """

    def __init__(
        self,
        host: HostRuntime,
        kinds: Optional[Iterable[BinderKind]] = None,
        surfaces: Optional[Sequence[DiscoverySurface]] = None,
        locator: Optional[EntityLocator] = None,
        log: Optional[logging.Logger] = None,
    ):
        self.host = host
        self.log = log or logger
        if kinds is None:
            kinds = getattr(host, "binder_kinds", ())
        self.kinds: List[BinderKind] = list(kinds)
        self.surfaces: List[DiscoverySurface] = (
            list(surfaces) if surfaces is not None else default_surfaces(log=self.log)
        )
        self.locator = locator or EntityLocator()
        self._reset()

    def _reset(self) -> None:
        self._binders: Dict[BinderCategory, List[Any]] = {
            category: [] for category in BinderCategory
        }
        self._seen: Set[int] = set()
        self._records: Dict[InputActionAsset, DiscoveryRecord] = {}
        self._surface_counts: Dict[str, Dict[str, int]] = {}
        self._failures: List[str] = []
        self.collected_at: Optional[datetime] = None

    # ------------------------------------------------------------------
    # Scan
    # ------------------------------------------------------------------

    def collect(self) -> Tuple[DiscoveryRecord, ...]:
        """Run every surface for every kind and return the discovered set."""
        self._reset()
        for kind in self.kinds:
            for surface in self.surfaces:
                try:
                    candidates = surface.scan(self.host, kind.type)
                except Exception as e:
                    self.log.error(f"Discovery surface '{surface.name}' failed for {kind.name}: {e}")
                    self._failures.append(f"{surface.name}/{kind.name}: {e}")
                    continue
                self._surface_counts.setdefault(surface.name, {})[kind.name] = len(candidates)
                for provenance, component in candidates:
                    self._record(kind, provenance, component)
        self.collected_at = datetime.now()
        self._log_summary()
        return self.records

    def _record(self, kind: BinderKind, provenance, component: Any) -> None:
        if component is None or id(component) in self._seen:
            return
        self._seen.add(id(component))
        self._binders[kind.category].append(component)
        if provenance.kind == ProvenanceKind.HIERARCHICAL:
            self.log.info(f"Found {kind.name} in UI hierarchy: {owner_name(component)}")

        try:
            located = self.locator.locate(component)
        except LocatorInspectionError as e:
            self.log.error(f"Locator failed on {kind.name} at {e.owner} (field {e.field_name}): {e}")
            self._failures.append(str(e))
            return
        except Exception as e:
            self.log.error(f"Locator failed on {kind.name} at {owner_name(component)}: {e}")
            self._failures.append(f"{owner_name(component)}: {e}")
            return
        if located is None:
            return

        record = DiscoveryRecord(
            asset=located.asset,
            provenance=provenance,
            owner_description=located.owner_description,
        )
        if merge_first_seen(self._records, record):
            self.log.info(
                f"Discovered asset '{located.asset.name}': {record.source} ({record.owner_description})"
            )
        else:
            self.log.debug(
                f"Asset '{located.asset.name}' already discovered; "
                f"dropping finding {provenance.format()}"
            )

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def button_binders(self) -> Tuple[Any, ...]:
        return tuple(self._binders[BinderCategory.MOMENTARY])

    @property
    def toggle_binders(self) -> Tuple[Any, ...]:
        return tuple(self._binders[BinderCategory.PERSISTENT])

    @property
    def binders(self) -> Tuple[Any, ...]:
        """Legacy view: the button binders."""
        return self.button_binders

    @property
    def owners(self) -> Tuple[Any, ...]:
        return tuple(self._binders[BinderCategory.OWNER])

    @property
    def records(self) -> Tuple[DiscoveryRecord, ...]:
        return tuple(self._records.values())

    @property
    def assets(self) -> Tuple[InputActionAsset, ...]:
        return tuple(self._records.keys())

    @property
    def failures(self) -> Tuple[str, ...]:
        return tuple(self._failures)

    @property
    def surface_counts(self) -> Dict[str, Dict[str, int]]:
        return {name: dict(counts) for name, counts in self._surface_counts.items()}

    def entries(self) -> List[Tuple[str, InputActionAsset]]:
        """``(source, asset)`` pairs in discovery order, ready for encoding."""
        return [(record.source, record.asset) for record in self._records.values()]

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find_button_binder(self, name: str) -> Optional[Any]:
        for binder in self._binders[BinderCategory.MOMENTARY]:
            if control_name(binder) == name:
                return binder
        return None

    def find_toggle_binder(self, name: str) -> Optional[Any]:
        for binder in self._binders[BinderCategory.PERSISTENT]:
            if control_name(binder) == name:
                return binder
        return None

    def find_specified_action_ref(self, name: str) -> Optional[InputActionReference]:
        """Action reference of the control named ``name``.

        Button binders are searched before toggle binders.
        """
        button = self.find_button_binder(name)
        if button is not None and getattr(button, "action", None) is not None:
            return button.action
        toggle = self.find_toggle_binder(name)
        if toggle is not None and getattr(toggle, "action", None) is not None:
            return toggle.action
        self.log.warning(f"No action reference found for control '{name}'")
        return None

    # ------------------------------------------------------------------
    # Report
    # ------------------------------------------------------------------

    def _log_summary(self) -> None:
        buttons = self._binders[BinderCategory.MOMENTARY]
        toggles = self._binders[BinderCategory.PERSISTENT]
        self.log.info("=== Action Binder Collection Summary ===")
        self.log.info(f"Button binders: {len(buttons)}")
        self.log.info(f"Toggle binders: {len(toggles)}")
        self.log.info(f"Total binders: {len(buttons) + len(toggles)}")
        self.log.info(f"Asset owners: {len(self._binders[BinderCategory.OWNER])}")
        self.log.info(f"Discovered assets: {len(self._records)}")
        for label, binders in (("Button", buttons), ("Toggle", toggles)):
            self._log_binder_details(label, binders)
        self.log.info("=== End Collection Summary ===")

    def _log_binder_details(self, label: str, binders: List[Any]) -> None:
        active = sum(1 for binder in binders if is_active(binder))
        self.log.info(f"--- {label} binder details ---")
        self.log.info(f"Active: {active}, Inactive: {len(binders) - active}")
        for binder in binders:
            state = "Active" if is_active(binder) else "Inactive"
            self.log.info(f"[{state}] {type(binder).__name__} on: {owner_name(binder)}")
            control = control_name(binder)
            if control:
                self.log.info(f"  - Associated with control: {control}")
            action_ref = getattr(binder, "action", None)
            if action_ref is not None:
                self.log.info(f"  - Bound to action: {getattr(action_ref, 'name', action_ref)}")


def _category_stats(binders: Sequence[Any]) -> Dict[str, int]:
    active = sum(1 for binder in binders if is_active(binder))
    return {"total": len(binders), "active": active, "inactive": len(binders) - active}


def describe_discovery(collector: BindingCollector) -> Dict[str, Any]:
    """Provenance and statistics of the last collection, for display."""
    return {
        "collected_at": collector.collected_at.isoformat() if collector.collected_at else None,
        "assets": [record.to_dict() for record in collector.records],
        "binders": {
            "button": _category_stats(collector.button_binders),
            "toggle": _category_stats(collector.toggle_binders),
            "owner": _category_stats(collector.owners),
        },
        "surfaces": collector.surface_counts,
        "failures": list(collector.failures),
    }
