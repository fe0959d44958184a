# =============================================================================
# core/games.py  —  Tool Operations
# =============================================================================
#
# One function per MCP tool.  Each validates its arguments, calls the
# IGDBClient and returns the text the assistant will read.  Missing
# arguments raise ValidationError before any network call; IGDB failures
# propagate unchanged.  Turning exceptions into MCP error results is the
# tools/ layer's job.
# =============================================================================

from typing import Optional

from core.errors import ValidationError
from core.formatting import format_game_details, format_search_results
from core.igdb import DEFAULT_LIMIT, IGDBClient, clamp_limit


async def search_games(
    client: IGDBClient,
    query: Optional[str],
    limit: Optional[int] = DEFAULT_LIMIT,
) -> str:
    """Search IGDB and render the matches as text."""
    if not query or not query.strip():
        raise ValidationError("query parameter is required")

    games = await client.search_games(query, clamp_limit(limit))
    return format_search_results(query, games)


async def get_game_details(client: IGDBClient, game_id: Optional[int]) -> str:
    """Fetch one game and render its full report."""
    if not game_id:
        raise ValidationError("game_id parameter is required")

    game = await client.get_game_details(game_id)
    if game is None:
        return f"No game found with ID {game_id}"
    return format_game_details(game)
