# =============================================================================
# main.py  —  Entry Point for the IGDB MCP Server
# =============================================================================
#
# HOW TO RUN:
#   uv run python main.py          (or the `igdb-mcp-server` console script)
#
# WHAT HAPPENS:
#   1. Loads environment variables from .env (IGDB_CLIENT_ID, etc.)
#   2. Reads and checks the IGDB configuration; missing credentials stop
#      the process here with exit status 1, before any tool is served
#   3. Builds the shared IGDBClient and hands it to the tool server
#   4. Serves MCP over stdio until the assistant disconnects
# =============================================================================

import logging
import sys

from dotenv import load_dotenv

# Load .env BEFORE importing the server so every module sees the same
# environment.
load_dotenv()

from core.config import IGDBSettings
from core.errors import ConfigurationError
from core.igdb import IGDBClient
from tools.mcp_server import mcp, set_client

logger = logging.getLogger("igdb.main")


def main() -> None:
    """Validate configuration, install the IGDB client and serve over stdio."""
    try:
        settings = IGDBSettings.from_env()
    except ConfigurationError as exc:
        logger.error("Error initializing IGDB client: %s", exc)
        sys.exit(1)

    logging.getLogger().setLevel(settings.log_level)
    set_client(IGDBClient(settings))

    logger.info("IGDB MCP Server running on stdio")
    mcp.run()


# =============================================================================
# Script entry point
# =============================================================================
if __name__ == "__main__":
    main()
