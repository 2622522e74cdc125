# =============================================================================
# main.py - Entry Point for the Comexstat MCP Server
# =============================================================================
#
# HOW TO RUN:
#   python main.py                          # stdio transport (default)
#   COMEXSTAT_HTTP_MODE=true python main.py # streamable HTTP on MCP_HOST:MCP_PORT
#   comexstat-mcp                           # same, via the installed script
#
# WHAT HAPPENS:
#   1. .env is loaded into the environment (if present)
#   2. Settings are read from the environment
#   3. Logging is configured (stderr only)
#   4. The HTTP client and service are built and injected into the server
#   5. The server runs until its transport closes
# =============================================================================

import logging
import sys

from dotenv import load_dotenv

# Must run before Settings.from_env() reads os.environ.
load_dotenv()

from comexstat.client import ComexstatClient
from comexstat.config import Settings
from comexstat.errors import ConfigurationError
from comexstat.service import ComexstatService
from comexstat_tools.mcp_server import build_server, setup_logging

logger = logging.getLogger("comexstat.main")


def main() -> None:
    try:
        settings = Settings.from_env()
    except ConfigurationError as exc:
        setup_logging()
        logger.error("Error starting Comexstat MCP server: %s", exc)
        sys.exit(1)

    setup_logging(settings.log_level)
    service = ComexstatService(ComexstatClient(settings))
    server = build_server(service)

    if settings.http_mode:
        logger.info(
            "Starting Comexstat MCP server transport=http host=%s port=%s api=%s",
            settings.host, settings.port, settings.base_url,
        )
        server.run(transport="http", host=settings.host, port=settings.port)
    else:
        logger.info("Starting Comexstat MCP server transport=stdio api=%s", settings.base_url)
        server.run()


if __name__ == "__main__":
    main()
