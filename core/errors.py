# =============================================================================
# core/errors.py  —  Error Taxonomy
# =============================================================================
#
# Every failure the core can produce is an IGDBError subclass.  The tools
# layer catches IGDBError at the tool boundary and turns it into an MCP
# error result; nothing in core/ knows how errors are rendered.
#
#   ConfigurationError    → missing/invalid environment at startup (fatal)
#   AuthenticationError   → Twitch refused the client-credentials grant
#   ApiError              → IGDB rejected or failed the query
#   ValidationError       → a tool argument is missing or malformed
#   DeserializationError  → IGDB answered with something that isn't a game
# =============================================================================


class IGDBError(Exception):
    """Base class for all errors raised by the IGDB core."""


class ConfigurationError(IGDBError):
    """Required configuration is absent or invalid."""


class ValidationError(IGDBError):
    """A caller-supplied argument is missing or has the wrong shape."""


class DeserializationError(IGDBError):
    """A response body does not match the expected schema."""


class HTTPStatusError(IGDBError):
    """An upstream endpoint answered with a non-success status."""

    prefix = "HTTP error"

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"{self.prefix}: {status_code} {body}")


class AuthenticationError(HTTPStatusError):
    """The identity provider refused to issue a token."""

    prefix = "Failed to authenticate with Twitch"


class ApiError(HTTPStatusError):
    """The IGDB data service refused or failed a query."""

    prefix = "IGDB API error"
