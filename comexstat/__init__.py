# =============================================================================
# comexstat/__init__.py
# =============================================================================
# Core of the Comexstat adapter: the operation catalog, argument validation,
# the operation → HTTP route table and the HTTP client.
#
# Nothing in this package imports FastMCP.  The MCP wiring lives in
# comexstat_tools/, which calls ComexstatService and nothing deeper.
# =============================================================================
