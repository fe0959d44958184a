# =============================================================================
# core/__init__.py
# =============================================================================
# This package contains the IGDB client and everything it needs: settings,
# the token manager, the query builder, data models and text formatting.
#
# Nothing in this package imports FastMCP.  The MCP wiring lives in tools/;
# everything here can be used (and tested) from a plain asyncio program.
# =============================================================================
