"""Domain-Driven Design bounded contexts for binding-mcp.

- bindings: canonical model (asset -> action map -> action -> binding)
- codec: export document encoding and display decoding
- discovery: entity locator, discovery surfaces and the binding collector
- rebind: runtime binding overrides
- export: export gate and document persistence
"""
