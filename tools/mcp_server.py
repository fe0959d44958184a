# =============================================================================
# tools/mcp_server.py  —  FastMCP Tool Server
# =============================================================================
#
# WHAT THIS FILE DOES:
#   Registers the two IGDB tools with FastMCP.  Each tool is a thin wrapper
#   around a core/games.py function: it logs the call, runs the operation
#   and turns any failure into an MCP error result.
#
# HOW IT WORKS (the flow):
#   1. The assistant calls a tool by name via MCP (e.g., "search_games")
#   2. FastMCP validates the argument types and routes to the function below
#   3. The function calls core/, which validates, queries IGDB and formats
#   4. The text comes back as the tool result (or, on failure, an error
#      result whose text starts with "Error:")
#
# ERROR BOUNDARY:
#   This is the only place exceptions are caught.  IGDBError (validation,
#   auth, API, decoding) and httpx.HTTPError (network) become a ToolError,
#   which FastMCP sends back with isError=true.  Nothing propagates further.
#
# RUNNING THIS SERVER:
#   python main.py  (loads .env, checks credentials, installs the client,
#                    then serves over stdio)
#
# ARGUMENTS:
#   Tool parameters default to None so that a call with a missing argument
#   reaches core/games.py and comes back as "Error: <name> parameter is
#   required" instead of a schema-validation dump.
# =============================================================================

import logging
import sys
from contextlib import asynccontextmanager
from typing import Annotated, AsyncIterator, Awaitable, Callable, Optional

import httpx
from fastmcp import FastMCP
from fastmcp.exceptions import ToolError
from pydantic import Field

from core import games
from core.errors import IGDBError
from core.igdb import DEFAULT_LIMIT, IGDBClient

# =============================================================================
# Logging Setup
# =============================================================================
# Logs go to STDERR: stdout is the MCP stdio transport, and anything else
# written there corrupts the JSON-RPC stream.
#
#   CYAN   → incoming tool calls with their parameters
#   YELLOW → intermediate status
#   GREEN  → successful responses
#   RED    → error results
# =============================================================================

_CYAN = "\033[36m"
_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RED = "\033[31m"
_RESET = "\033[0m"

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [MCP] %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stderr,
)

logger = logging.getLogger("igdb.mcp")


def _log_request(tool_name: str, **params) -> None:
    """Log an incoming tool call with its parameters in CYAN."""
    param_str = ", ".join(f"{k}={v!r}" for k, v in params.items())
    logger.info(f"{_CYAN}{tool_name} called with: {param_str}{_RESET}")


def _log_status(message: str) -> None:
    """Log an intermediate status message in YELLOW."""
    logger.info(f"{_YELLOW}  → {message}{_RESET}")


def _log_response(tool_name: str, text: str) -> str:
    """Log the size and first line of a tool response in GREEN, then return it."""
    first_line = text.splitlines()[0] if text else ""
    logger.info(f"{_GREEN}  ← {tool_name} response ({len(text)} chars): {first_line}{_RESET}")
    return text


def _log_error(tool_name: str, message: str) -> None:
    logger.info(f"{_RED}  ✗ {tool_name} failed: {message}{_RESET}")


# =============================================================================
# IGDB client
# =============================================================================
# One client per process, so every tool call shares the cached token.
# main.py installs it at startup with set_client() after checking the
# configuration; the server lifespan closes it on shutdown.
# =============================================================================
_client: Optional[IGDBClient] = None


def set_client(client: Optional[IGDBClient]) -> None:
    global _client
    _client = client


def get_client() -> IGDBClient:
    if _client is None:
        raise RuntimeError("IGDB client is not installed; start the server with main.py")
    return _client


async def _invoke(
    tool_name: str,
    operation: Callable[[IGDBClient], Awaitable[str]],
) -> str:
    """Run one tool operation, converting failures into an error result."""
    try:
        text = await operation(get_client())
    except (IGDBError, httpx.HTTPError) as exc:
        message = str(exc) or type(exc).__name__
        _log_error(tool_name, message)
        raise ToolError(f"Error: {message}") from exc
    return _log_response(tool_name, text)


# =============================================================================
# Create the FastMCP server instance
# =============================================================================
@asynccontextmanager
async def _lifespan(server: FastMCP) -> AsyncIterator[dict]:
    try:
        yield {}
    finally:
        if _client is not None:
            await _client.aclose()


mcp = FastMCP("igdb-mcp-server", lifespan=_lifespan)


# =============================================================================
# TOOL 1: search_games
# =============================================================================
@mcp.tool()
async def search_games(
    query: Annotated[
        Optional[str],
        Field(description="The game name or search query to look for (required)."),
    ] = None,
    limit: Annotated[
        Optional[int],
        Field(description="Maximum number of results to return (default: 10, max: 50)."),
    ] = DEFAULT_LIMIT,
) -> str:
    """Search for games in the IGDB database by name.

    Returns a list of matching games with basic information including name,
    rating, genres, platforms, and release date.  Use the ID shown for each
    game with get_game_details to get the full report.

    Args:
        query: The game name or search query to look for.
        limit: Maximum number of results to return (default: 10, max: 50).
    """
    _log_request("search_games", query=query, limit=limit)
    return await _invoke(
        "search_games",
        lambda client: games.search_games(client, query, limit),
    )


# =============================================================================
# TOOL 2: get_game_details
# =============================================================================
@mcp.tool()
async def get_game_details(
    game_id: Annotated[
        Optional[int],
        Field(description="The IGDB game ID, as returned by search_games (required)."),
    ] = None,
) -> str:
    """Get detailed information about a specific game by its IGDB ID.

    Returns comprehensive details including storyline, themes, game modes,
    involved companies, and similar games.

    Args:
        game_id: The IGDB game ID (as returned by search_games).
    """
    _log_request("get_game_details", game_id=game_id)
    if game_id:
        _log_status(f"Looking up IGDB game {game_id}")
    return await _invoke(
        "get_game_details",
        lambda client: games.get_game_details(client, game_id),
    )

