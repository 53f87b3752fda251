"""Main MCP Server implementation for input binding discovery and export."""

import argparse
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from fastmcp import FastMCP

from bindingmcp.adapters import SceneLoadError
from bindingmcp.container import get_container
from bindingmcp.domains.codec import (
    NOT_FOUND,
    BindingTableReader,
    decode_asset,
    find_binding_display,
)
from bindingmcp.domains.discovery import BinderCategory, describe_discovery
from bindingmcp.domains.discovery.collector import control_name as binder_control_name
from bindingmcp.domains.discovery.host import is_active, owner_name
from bindingmcp.domains.rebind import BindingOverride
from bindingmcp.domains.shared import (
    BinderCategoryName,
    DeviceQuery,
    OptionalCoercedStringList,
    group_for_device,
)

logger = logging.getLogger(__name__)

SERVER_INSTRUCTIONS = (
    "Discovers input action assets in a loaded scene, exports them as binding "
    "documents and answers binding lookups. Load a scene with load_scene, then "
    "call collect_bindings or export_bindings."
)

mcp = FastMCP("Input Binding MCP Server", instructions=SERVER_INSTRUCTIONS)


def _ensure_collected():
    """Collector of the current host, collected at least once."""
    collector = get_container().collector
    if collector.collected_at is None:
        collector.collect()
    return collector


def _read_document(path: Optional[str]) -> Dict[str, Any]:
    """Read a limited-schema document; the sentinel when no path is given."""
    target = Path(path) if path else get_container().config.sentinel_path
    try:
        return {"success": True, "path": str(target), "content": target.read_text(encoding="utf-8")}
    except FileNotFoundError:
        return {"success": False, "path": str(target), "error": f"Bindings file not found: {target}"}
    except OSError as e:
        logger.error(f"Failed to read bindings file {target}: {e}")
        return {"success": False, "path": str(target), "error": str(e)}


def _binder_summary(binder: Any, category: BinderCategory) -> Dict[str, Any]:
    action_ref = getattr(binder, "action", None)
    return {
        "category": category.value,
        "type": type(binder).__name__,
        "owner": owner_name(binder),
        "active": is_active(binder),
        "control": binder_control_name(binder),
        "action": getattr(action_ref, "name", None),
    }


@mcp.tool
async def load_scene(path: str) -> Dict[str, Any]:
    """Load a JSON scene description and make it the current host.

    Args:
        path: Path to the scene description file.

    Returns:
        Dict with success flag, asset names, root paths and template names.
    """
    container = get_container()
    try:
        host = container.load_scene(path)
    except SceneLoadError as e:
        logger.error(f"Failed to load scene {path}: {e}")
        return {"success": False, "error": str(e), "path": path}
    return {
        "success": True,
        "path": path,
        "assets": sorted(host.assets),
        "roots": [root.path for root in host.roots],
        "templates": [template.name for template in host.templates],
    }


@mcp.tool
async def collect_bindings(
    root_markers: OptionalCoercedStringList = None,
    max_depth: Optional[int] = None,
) -> Dict[str, Any]:
    """Run discovery over the current host.

    Args:
        root_markers: Optional name fragments marking UI roots (e.g. "ui,canvas").
        max_depth: Optional depth bound for the UI hierarchy walk.

    Returns:
        Dict with the discovered assets (with provenance), binder counts and failures.
    """
    container = get_container()
    overrides = {}
    if root_markers:
        overrides["ui_root_markers"] = list(root_markers)
    if max_depth is not None:
        if max_depth < 0:
            return {"success": False, "error": "max_depth must not be negative"}
        overrides["max_hierarchy_depth"] = max_depth
    if overrides:
        container.config.update(**overrides)
        container.set_host(container.host)

    collector = container.collector
    records = collector.collect()
    return {
        "success": True,
        "asset_count": len(records),
        "assets": [record.to_dict() for record in records],
        "button_binders": len(collector.button_binders),
        "toggle_binders": len(collector.toggle_binders),
        "owners": len(collector.owners),
        "failures": list(collector.failures),
    }


@mcp.tool
async def get_discovery_report(category: BinderCategoryName = "all") -> Dict[str, Any]:
    """Provenance and statistics of the last discovery pass.

    Args:
        category: Which binders to list: button, toggle, owner or all.

    Returns:
        Dict with assets, per-category binder stats, per-surface counts,
        failures and the listed binders.
    """
    collector = _ensure_collected()
    groups = {
        BinderCategory.MOMENTARY: collector.button_binders,
        BinderCategory.PERSISTENT: collector.toggle_binders,
        BinderCategory.OWNER: collector.owners,
    }
    listed: List[Dict[str, Any]] = []
    for binder_category, binders in groups.items():
        if category != "all" and binder_category.value != category:
            continue
        listed.extend(_binder_summary(binder, binder_category) for binder in binders)

    report = describe_discovery(collector)
    report.update({"success": True, "category": category, "binder_list": listed})
    return report


@mcp.tool
async def export_bindings(force: bool = False) -> Dict[str, Any]:
    """Export discovered assets to a new timestamped bindings document.

    Skipped when the sentinel file already exists, unless ``force`` is set.

    Args:
        force: Bypass the sentinel check.

    Returns:
        Dict with skipped flag, document and sentinel paths and asset count.
    """
    result = get_container().exporter.run(force=force)
    return result.to_dict()


@mcp.tool
async def dump_control_bindings(control_path: str, filename: str = "modified_bindings.json") -> Dict[str, Any]:
    """Write the asset behind one UI control, e.g. "MainUI/Next Round".

    Args:
        control_path: Path of the control's node.
        filename: File name inside the export directory.
    """
    path = get_container().exporter.dump_control_asset(control_path, filename=filename)
    if path is None:
        return {"success": False, "error": f"No input action asset found at {control_path}"}
    return {"success": True, "path": str(path)}


@mcp.tool
async def get_binding_table(path: Optional[str] = None) -> Dict[str, Any]:
    """Keyboard and gamepad bindings of every Button action in a document.

    Args:
        path: Limited-schema document to read; the sentinel file by default.

    Returns:
        Dict with rows (map, action, keyboard, gamepad) and a rendered text table.
    """
    document = _read_document(path)
    if not document["success"]:
        return document

    config = get_container().config
    reader = BindingTableReader(
        document["content"],
        keyboard_group=config.keyboard_group,
        gamepad_group=config.gamepad_group,
    )
    if not reader.has_data:
        return {
            "success": False,
            "path": document["path"],
            "error": BindingTableReader.EMPTY_MESSAGE,
            "text": reader.render_text(),
        }
    return {
        "success": True,
        "path": document["path"],
        "rows": [row.to_dict() for row in reader.rows()],
        "text": reader.render_text(),
    }


@mcp.tool
async def lookup_binding(
    action: str,
    group: DeviceQuery = "keyboard",
    path: Optional[str] = None,
    map_name: Optional[str] = None,
) -> Dict[str, Any]:
    """Display text of an action's binding for one device.

    Args:
        action: Action name, e.g. "Next Round".
        group: Device to look up: keyboard or gamepad.
        path: Limited-schema document to read; the sentinel file by default.
        map_name: Restrict the lookup to one action map.

    Returns:
        Dict with the binding display text ("None" when nothing matches).
    """
    document = _read_document(path)
    if not document["success"]:
        return document

    config = get_container().config
    group_tag = group_for_device(
        group,
        {"keyboard": config.keyboard_group, "gamepad": config.gamepad_group},
    )
    asset = decode_asset(document["content"])
    if not asset.has_data:
        return {"success": False, "path": document["path"], "error": BindingTableReader.EMPTY_MESSAGE}

    for action_map in asset.maps:
        if map_name and action_map.name.lower() != map_name.lower():
            continue
        display = find_binding_display(action_map.bindings, action, group_tag)
        if display != NOT_FOUND:
            return {
                "success": True,
                "action": action,
                "group": group_tag,
                "map": action_map.name,
                "binding": display,
            }
    return {"success": True, "action": action, "group": group_tag, "map": None, "binding": NOT_FOUND}


@mcp.tool
async def find_action_for_control(control_name: str) -> Dict[str, Any]:
    """Action reference of the UI control named ``control_name``.

    Button binders are searched before toggle binders.

    Args:
        control_name: Name of the button or toggle.

    Returns:
        Dict with the action, its asset and its current bindings.
    """
    collector = _ensure_collected()
    reference = collector.find_specified_action_ref(control_name)
    if reference is None or reference.action is None:
        return {"success": False, "error": f"No action reference found for control '{control_name}'"}

    action = reference.action
    asset = reference.asset
    return {
        "success": True,
        "control": control_name,
        "reference": reference.name,
        "action": action.qualified_name,
        "asset": asset.name if asset is not None else None,
        "bindings": [
            {
                "index": index,
                "path": binding.path,
                "groups": binding.groups,
                "interactions": binding.interactions,
                "isComposite": binding.is_composite,
                "isPartOfComposite": binding.is_part_of_composite,
            }
            for index, binding in enumerate(action.bindings)
        ],
    }


@mcp.tool
async def apply_rebind(
    action: str,
    binding_index: int,
    new_path: str,
    interactions: str = "",
    asset: Optional[str] = None,
) -> Dict[str, Any]:
    """Overwrite the path and interactions of one binding of a live action.

    Args:
        action: "Map/Action" or a bare action name.
        binding_index: Index into the action's bindings.
        new_path: Device control path, e.g. "<Keyboard>/k".
        interactions: Encoded interactions, e.g. "hold(duration=1.0)".
        asset: Restrict to the asset with this name.

    Returns:
        Dict with the applied change (old and new path and interactions).
    """
    try:
        override = BindingOverride(action, binding_index, new_path, interactions)
    except ValueError as e:
        return {"success": False, "error": str(e)}

    container = get_container()
    collector = _ensure_collected()
    candidates = list(collector.assets)
    for known in container.host.assets.values():
        if known not in candidates:
            candidates.append(known)
    if asset:
        candidates = [candidate for candidate in candidates if candidate.name == asset]

    applicator = container.rebind_applicator
    for candidate in candidates:
        if candidate.find_action(override.action_path) is None:
            continue
        event = applicator.apply_override(candidate, override)
        if event is None:
            return {
                "success": False,
                "error": f"Binding index {binding_index} out of range for action '{action}'",
            }
        result = event.to_dict()
        result.update({"success": True, "asset": candidate.name})
        return result
    return {"success": False, "error": f"Action '{action}' not found in any discovered asset"}


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Input binding MCP server entry point."
    )
    parser.add_argument(
        "--transport",
        dest="transport",
        choices=["stdio", "http", "sse"],
        help="Transport to use for the MCP server (default: stdio).",
    )
    parser.add_argument(
        "--host",
        dest="host",
        help="Host/interface for HTTP transport (default 127.0.0.1).",
    )
    parser.add_argument(
        "--port",
        dest="port",
        type=int,
        help="Port for HTTP transport (default 8000).",
    )
    parser.add_argument(
        "--scene",
        dest="scene",
        help="Scene description to load at startup (overrides BINDINGMCP_SCENE).",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Log level for the server process (default INFO).",
    )
    return parser


def main(argv: List[str] | None = None) -> None:
    """Start the input binding MCP server."""

    parser = _build_arg_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level or "INFO"))

    container = get_container()
    if args.scene:
        container.config.scene_path = args.scene
    if container.config.scene_path:
        try:
            container.load_scene(container.config.scene_path)
        except SceneLoadError as e:
            logger.error(f"Could not load scene {container.config.scene_path}: {e}")

    errors = container.config.validate()
    for error in errors:
        logger.warning(f"Configuration problem: {error}")

    try:
        run_kwargs: Dict[str, Any] = {}

        # Default to stdio when no transport is provided
        transport = args.transport or "stdio"
        run_kwargs["transport"] = transport

        if args.log_level:
            run_kwargs["log_level"] = args.log_level

        # Only pass host/port when using HTTP/SSE transports
        if transport != "stdio":
            if args.host:
                run_kwargs["host"] = args.host
            if args.port:
                run_kwargs["port"] = args.port

        mcp.run(**run_kwargs)
    except KeyboardInterrupt:
        logger.info("Input binding MCP server interrupted by user")


if __name__ == "__main__":
    main()
