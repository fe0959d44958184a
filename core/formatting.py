# =============================================================================
# core/formatting.py  —  Text Rendering for Game Records
# =============================================================================
#
# The assistant reads tool output as text, so games are rendered as short
# Markdown blocks:
#   - format_game()          → compact block used in search results
#   - format_game_details()  → full report for a single game
#
# Missing fields are skipped rather than printed as "N/A"; a zero rating is
# treated the same as a missing one.
# =============================================================================

from datetime import datetime, timezone
from typing import Optional

from core.models import Game, NamedRef


def format_rating(value: float) -> str:
    return f"{value:.1f}/100"


def format_release_date(timestamp: int) -> str:
    """Epoch seconds → "YYYY-MM-DD" (UTC)."""
    return datetime.fromtimestamp(timestamp, tz=timezone.utc).strftime("%Y-%m-%d")


def _names(refs: tuple[NamedRef, ...]) -> Optional[str]:
    if not refs:
        return None
    return ", ".join(ref.name for ref in refs)


def format_game(game: Game) -> str:
    """Render the summary block shown for each search result."""
    lines = [f"**{game.name}** (ID: {game.id})"]

    if game.rating:
        lines.append(f"Rating: {format_rating(game.rating)}")
    if game.aggregated_rating:
        lines.append(f"Critic Rating: {format_rating(game.aggregated_rating)}")
    if game.first_release_date:
        lines.append(f"Released: {format_release_date(game.first_release_date)}")

    genres = _names(game.genres)
    if genres:
        lines.append(f"Genres: {genres}")
    platforms = _names(game.platforms)
    if platforms:
        lines.append(f"Platforms: {platforms}")

    if game.summary:
        lines.append(f"\nSummary: {game.summary}")

    return "\n".join(lines)


def format_search_results(query: str, games: list[Game]) -> str:
    if not games:
        return f'No games found matching "{query}"'
    blocks = "\n\n---\n\n".join(format_game(game) for game in games)
    return f'Found {len(games)} game(s) matching "{query}":\n\n{blocks}'


def format_game_details(game: Game) -> str:
    """Render the full Markdown report for one game."""
    lines = [f"# {game.name}", f"**IGDB ID:** {game.id}", ""]

    if game.rating:
        lines.append(f"**User Rating:** {format_rating(game.rating)}")
    if game.aggregated_rating:
        lines.append(f"**Critic Rating:** {format_rating(game.aggregated_rating)}")
    if game.first_release_date:
        lines.append(f"**Released:** {format_release_date(game.first_release_date)}")

    lines.append("")

    for label, refs in (
        ("Genres", game.genres),
        ("Themes", game.themes),
        ("Platforms", game.platforms),
        ("Game Modes", game.game_modes),
    ):
        names = _names(refs)
        if names:
            lines.append(f"**{label}:** {names}")

    if game.involved_companies:
        lines.append(f"**Companies:** {', '.join(game.company_names)}")
    if game.cover:
        lines.append(f"**Cover:** {game.cover.absolute_url}")

    lines.append("")

    if game.summary:
        lines.extend(["## Summary", game.summary, ""])
    if game.storyline:
        lines.extend(["## Storyline", game.storyline, ""])

    if game.similar_games:
        lines.append("## Similar Games")
        lines.extend(f"- {similar.name} (ID: {similar.id})" for similar in game.similar_games)

    return "\n".join(lines)
