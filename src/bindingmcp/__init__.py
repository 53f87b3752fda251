"""Input Binding MCP Server - discovery, export and lookup of input bindings."""

__version__ = "0.1.0"
