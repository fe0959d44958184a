# =============================================================================
# core/config.py  —  Process Configuration
# =============================================================================
#
# All settings come from environment variables.  main.py calls
# load_dotenv() before reading them, so a local .env file works too.
#
#   IGDB_CLIENT_ID      (required)  Twitch application client id
#   IGDB_CLIENT_SECRET  (required)  Twitch application client secret
#   IGDB_HTTP_TIMEOUT   (optional)  seconds per HTTP request, default 30
#   IGDB_LOG_LEVEL      (optional)  logging level name, default INFO
# =============================================================================

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from core.errors import ConfigurationError

DEFAULT_HTTP_TIMEOUT = 30.0
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class IGDBSettings:
    """Credentials and transport settings for the IGDB client."""

    client_id: str
    client_secret: str
    http_timeout: float = DEFAULT_HTTP_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL

    def __repr__(self) -> str:
        # Keep the secret out of logs and tracebacks.
        return (
            f"IGDBSettings(client_id={self.client_id!r}, client_secret='***', "
            f"http_timeout={self.http_timeout!r}, log_level={self.log_level!r})"
        )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "IGDBSettings":
        """Read settings from the environment.

        Raises:
            ConfigurationError: if either credential is missing or blank, or
                if IGDB_HTTP_TIMEOUT is not a positive number.
        """
        env = os.environ if environ is None else environ

        client_id = env.get("IGDB_CLIENT_ID", "").strip()
        client_secret = env.get("IGDB_CLIENT_SECRET", "").strip()

        missing = [
            name
            for name, value in (
                ("IGDB_CLIENT_ID", client_id),
                ("IGDB_CLIENT_SECRET", client_secret),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                "Missing IGDB credentials. Please set "
                + " and ".join(missing)
                + " environment variable" + ("s." if len(missing) > 1 else ".")
            )

        raw_timeout = env.get("IGDB_HTTP_TIMEOUT", "").strip()
        http_timeout = DEFAULT_HTTP_TIMEOUT
        if raw_timeout:
            try:
                http_timeout = float(raw_timeout)
            except ValueError:
                raise ConfigurationError(
                    f"IGDB_HTTP_TIMEOUT must be a number of seconds, got {raw_timeout!r}"
                ) from None
            if http_timeout <= 0:
                raise ConfigurationError(
                    f"IGDB_HTTP_TIMEOUT must be positive, got {raw_timeout!r}"
                )

        log_level = env.get("IGDB_LOG_LEVEL", "").strip().upper() or DEFAULT_LOG_LEVEL
        if not isinstance(logging.getLevelName(log_level), int):
            raise ConfigurationError(f"IGDB_LOG_LEVEL is not a logging level: {log_level!r}")

        return cls(
            client_id=client_id,
            client_secret=client_secret,
            http_timeout=http_timeout,
            log_level=log_level,
        )
