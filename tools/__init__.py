# =============================================================================
# tools/__init__.py
# =============================================================================
# This package contains the FastMCP tool server.
#
# tools/ is the translation layer between MCP and core/:
#   - it registers each core/games.py operation as a named tool
#   - it logs calls and responses to stderr
#   - it converts exceptions into MCP error results
#
# It does NOT build queries, talk to IGDB or format games (that's core/).
# =============================================================================
