# =============================================================================
# comexstat_tools/__init__.py
# =============================================================================
# FastMCP wrappers around comexstat.service.ComexstatService.
#
# Each tool here:
#   1. Takes loosely-typed arguments from the MCP caller
#   2. Passes them to ComexstatService.call() under the tool's name
#   3. Returns the shaped result as text
#
# Tools hold no logic of their own: validation, routing and response
# unwrapping all live in comexstat/.
# =============================================================================
