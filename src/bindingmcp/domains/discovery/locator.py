"""Entity Locator - finds the asset a container or component refers to.

Candidates are inspected by their exposed fields, not by static type, since
many binder components are only reachable generically. A field matches when:

(a) its value is an InputActionAsset, or
(b) its declared kind names an action reference; the reference is resolved
    one extra hop through ``action.action_map.asset``.

Components may instead opt in to an explicit capability,
``exposes_binding() -> Optional[InputActionAsset]``, which is checked first
and avoids reflection entirely.
"""

from __future__ import annotations

import dataclasses
from typing import Any, Dict, Iterator, List, Optional, Protocol, runtime_checkable

from bindingmcp.domains.bindings import InputActionAsset
from bindingmcp.domains.discovery.host import owner_name
from bindingmcp.domains.discovery.value_objects import (
    FieldInfo,
    LocatedAsset,
    LocatorInspectionError,
)

REFERENCE_MARKER = "ActionReference"


@runtime_checkable
class FieldInspectable(Protocol):
    """Objects that describe their own fields."""

    def inspect_fields(self) -> List[FieldInfo]:
        ...


@runtime_checkable
class BindingExposer(Protocol):
    """Objects that hand out their asset directly."""

    def exposes_binding(self) -> Optional[InputActionAsset]:
        ...


def _kind_name(annotation: Any) -> str:
    if isinstance(annotation, str):
        return annotation
    return getattr(annotation, "__name__", None) or str(annotation)


def _class_annotations(obj: Any) -> Dict[str, Any]:
    annotations: Dict[str, Any] = {}
    for klass in reversed(type(obj).__mro__):
        annotations.update(getattr(klass, "__annotations__", {}))
    return annotations


def reflect_fields(obj: Any) -> List[FieldInfo]:
    """Reflect ``(name, declared kind, value)`` triples off an object.

    Dataclass fields report their annotation; plain objects report the class
    annotation when there is one, else the runtime type of the value.
    """
    if isinstance(obj, FieldInspectable):
        return list(obj.inspect_fields())

    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return [
            FieldInfo(f.name, _kind_name(f.type), getattr(obj, f.name))
            for f in dataclasses.fields(obj)
        ]

    annotations = _class_annotations(obj)
    fields: List[FieldInfo] = []
    for name, value in getattr(obj, "__dict__", {}).items():
        if name in annotations:
            kind = _kind_name(annotations[name])
        else:
            kind = type(value).__name__
        fields.append(FieldInfo(name, kind, value))
    return fields


class EntityLocator:
    """Answers "which asset, if any, does this candidate carry?".

    Pure inspection: the locator never mutates what it looks at. Failures
    while reading a field raise LocatorInspectionError so the caller can
    recover per candidate.

    Example:
        locator = EntityLocator()
        located = locator.locate(binder)
        if located:
            print(located.owner_description, located.asset.name)
    """

    def locate(self, target: Any) -> Optional[LocatedAsset]:
        """First asset reachable from ``target``, or None.

        Args:
            target: A container (its ``components`` are inspected in order)
                or a single component

        Raises:
            LocatorInspectionError: If reading a field fails
        """
        return next(self.iter_located(target), None)

    def locate_all(self, target: Any) -> List[LocatedAsset]:
        """Every asset reachable from ``target``, in field order."""
        return list(self.iter_located(target))

    def iter_located(self, target: Any) -> Iterator[LocatedAsset]:
        if target is None:
            return
        components = getattr(target, "components", None)
        if components is None:
            components = [target]
        for component in list(components):
            if component is None:
                continue
            yield from self._inspect(component)

    def _inspect(self, component: Any) -> Iterator[LocatedAsset]:
        owner = owner_name(component)
        type_name = type(component).__name__

        if isinstance(component, BindingExposer):
            try:
                asset = component.exposes_binding()
            except Exception as e:
                raise LocatorInspectionError(owner, "exposes_binding", e) from e
            if isinstance(asset, InputActionAsset):
                yield LocatedAsset(f"{type_name}.exposes_binding() on {owner}", asset)
            return

        try:
            fields = reflect_fields(component)
        except Exception as e:
            raise LocatorInspectionError(owner, "*", e) from e

        for info in fields:
            value = info.value
            if value is None:
                continue
            if isinstance(value, InputActionAsset):
                yield LocatedAsset(f"Field {type_name}.{info.name} on {owner}", value)
            elif REFERENCE_MARKER in info.declared_kind:
                asset = self._resolve_reference(value, owner, info.name)
                if asset is not None:
                    yield LocatedAsset(
                        f"InputActionReference field {type_name}.{info.name} on {owner}",
                        asset,
                    )

    @staticmethod
    def _resolve_reference(value: Any, owner: str, field_name: str) -> Optional[InputActionAsset]:
        try:
            action = getattr(value, "action", None)
            action_map = getattr(action, "action_map", None) if action is not None else None
            asset = getattr(action_map, "asset", None) if action_map is not None else None
        except Exception as e:
            raise LocatorInspectionError(owner, field_name, e) from e
        return asset if isinstance(asset, InputActionAsset) else None
