# =============================================================================
# core/models.py  —  Data Models (the "nouns" of the system)
# =============================================================================
#
# Two kinds of data flow through the server:
#
#   Credential  : the Twitch bearer token and when it stops being usable.
#   Game        : a flat projection of an IGDB game record.  Only the fields
#                 named in the query's `fields` clause come back, so every
#                 field except id and name is optional.
#
# All models are frozen dataclasses with tuples for collections: a Game is
# built once from a response and never changes afterwards.
#
# DECODING:
#   IGDB answers with loosely-shaped JSON.  Game.from_payload() checks the
#   shape of every field it knows about and raises DeserializationError
#   naming the field when something doesn't fit.  It also remembers which
#   keys were present, so "absent" and "present but null" can be told apart
#   with Game.has().
# =============================================================================

from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from core.errors import DeserializationError

# Credentials are treated as expired this many seconds before they really are.
TOKEN_EXPIRY_MARGIN_SECONDS = 300


# -----------------------------------------------------------------------------
# Credential: the cached bearer token
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Credential:
    """A bearer token with its absolute expiry (epoch seconds)."""

    token: str
    expires_at: float

    def is_usable(self, now: float) -> bool:
        """True while `now` is more than the safety margin before expiry."""
        return now < self.expires_at - TOKEN_EXPIRY_MARGIN_SECONDS

    def __repr__(self) -> str:
        return f"Credential(token='***', expires_at={self.expires_at!r})"


# -----------------------------------------------------------------------------
# Relation types
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class NamedRef:
    """An (id, name) pair: genres, platforms, themes, game modes, etc."""

    id: int
    name: str


@dataclass(frozen=True)
class InvolvedCompany:
    """IGDB wraps each company in an involved_companies entry."""

    company: NamedRef


@dataclass(frozen=True)
class Cover:
    url: str

    @property
    def absolute_url(self) -> str:
        # IGDB returns scheme-relative URLs ("//images.igdb.com/...").
        if self.url.startswith("//"):
            return "https:" + self.url
        return self.url


# -----------------------------------------------------------------------------
# Field decoders
# -----------------------------------------------------------------------------
def _require_object(value: Any, where: str) -> dict:
    if not isinstance(value, dict):
        raise DeserializationError(
            f"{where}: expected an object, got {type(value).__name__}"
        )
    return value


def _decode_int(value: Any, where: str) -> int:
    # bool is an int subclass; true/false is never a valid id or timestamp.
    if isinstance(value, bool) or not isinstance(value, int):
        raise DeserializationError(
            f"{where}: expected an integer, got {type(value).__name__}"
        )
    return value


def _decode_number(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DeserializationError(
            f"{where}: expected a number, got {type(value).__name__}"
        )
    return float(value)


def _decode_str(value: Any, where: str) -> str:
    if not isinstance(value, str):
        raise DeserializationError(
            f"{where}: expected a string, got {type(value).__name__}"
        )
    return value


def _decode_named_ref(value: Any, where: str) -> NamedRef:
    obj = _require_object(value, where)
    if "id" not in obj:
        raise DeserializationError(f"{where}.id: missing")
    if "name" not in obj:
        raise DeserializationError(f"{where}.name: missing")
    return NamedRef(
        id=_decode_int(obj["id"], f"{where}.id"),
        name=_decode_str(obj["name"], f"{where}.name"),
    )


def _decode_involved_company(value: Any, where: str) -> InvolvedCompany:
    obj = _require_object(value, where)
    if "company" not in obj:
        raise DeserializationError(f"{where}.company: missing")
    return InvolvedCompany(company=_decode_named_ref(obj["company"], f"{where}.company"))


def _decode_cover(value: Any, where: str) -> Cover:
    obj = _require_object(value, where)
    if "url" not in obj:
        raise DeserializationError(f"{where}.url: missing")
    return Cover(url=_decode_str(obj["url"], f"{where}.url"))


def _decode_list(item_decoder: Callable[[Any, str], Any]) -> Callable[[Any, str], tuple]:
    def decode(value: Any, where: str) -> tuple:
        if not isinstance(value, list):
            raise DeserializationError(
                f"{where}: expected a list, got {type(value).__name__}"
            )
        return tuple(item_decoder(item, f"{where}[{i}]") for i, item in enumerate(value))

    return decode


# Optional Game fields and how to decode each one.  Keys missing from this
# table (IGDB adds ids and checksums we never asked for) are ignored.
_OPTIONAL_FIELDS: dict[str, Callable[[Any, str], Any]] = {
    "summary": _decode_str,
    "storyline": _decode_str,
    "rating": _decode_number,
    "aggregated_rating": _decode_number,
    "first_release_date": _decode_int,
    "cover": _decode_cover,
    "genres": _decode_list(_decode_named_ref),
    "platforms": _decode_list(_decode_named_ref),
    "themes": _decode_list(_decode_named_ref),
    "game_modes": _decode_list(_decode_named_ref),
    "similar_games": _decode_list(_decode_named_ref),
    "involved_companies": _decode_list(_decode_involved_company),
}


# -----------------------------------------------------------------------------
# Game: one IGDB game record
# -----------------------------------------------------------------------------
@dataclass(frozen=True)
class Game:
    """A game as returned by IGDB, limited to the requested fields."""

    id: int
    name: str

    summary: Optional[str] = None
    storyline: Optional[str] = None
    rating: Optional[float] = None             # User rating, 0–100
    aggregated_rating: Optional[float] = None  # Critic rating, 0–100
    first_release_date: Optional[int] = None   # Epoch seconds
    cover: Optional[Cover] = None

    genres: tuple[NamedRef, ...] = ()
    platforms: tuple[NamedRef, ...] = ()
    themes: tuple[NamedRef, ...] = ()
    game_modes: tuple[NamedRef, ...] = ()
    involved_companies: tuple[InvolvedCompany, ...] = ()
    similar_games: tuple[NamedRef, ...] = ()

    # Keys that appeared in the response, including ones whose value was null.
    present: frozenset[str] = field(default=frozenset(), compare=False, repr=False)

    def has(self, name: str) -> bool:
        """True if the response carried `name`, even as null."""
        return name in self.present

    @property
    def company_names(self) -> list[str]:
        return [entry.company.name for entry in self.involved_companies]

    @classmethod
    def from_payload(cls, payload: Any, where: str = "game") -> "Game":
        """Decode one element of an IGDB /games response.

        Raises:
            DeserializationError: if the payload is not an object, lacks an
                integer id or a string name, or any known optional field has
                the wrong shape.
        """
        obj = _require_object(payload, where)

        if "id" not in obj:
            raise DeserializationError(f"{where}.id: missing")
        if "name" not in obj:
            raise DeserializationError(f"{where}.name: missing")

        values: dict[str, Any] = {
            "id": _decode_int(obj["id"], f"{where}.id"),
            "name": _decode_str(obj["name"], f"{where}.name"),
        }

        for key, decoder in _OPTIONAL_FIELDS.items():
            if key not in obj or obj[key] is None:
                continue
            values[key] = decoder(obj[key], f"{where}.{key}")

        return cls(present=frozenset(obj.keys()), **values)


def decode_games(payload: Any) -> list[Game]:
    """Decode a /games response body (a JSON array of game objects)."""
    if not isinstance(payload, list):
        raise DeserializationError(
            f"response: expected a list of games, got {type(payload).__name__}"
        )
    return [Game.from_payload(item, f"game[{i}]") for i, item in enumerate(payload)]
