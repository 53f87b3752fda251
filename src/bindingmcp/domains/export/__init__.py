"""Export Domain - Bounded Context for persisting binding documents.

Example usage:
    from bindingmcp.domains.export import BindingExporter, ExportGate

    gate = ExportGate(export_dir / "modified_bindings.json")
    exporter = BindingExporter(collector, gate, export_dir)
    result = exporter.run()   # skipped on the second call
"""

from .value_objects import ExportResult
from .gate import ExportGate
from .services import BindingExporter, write_text_atomic

__all__ = [
    "BindingExporter",
    "ExportGate",
    "ExportResult",
    "write_text_atomic",
]
