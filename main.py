"""
Entry point for the Google Docs MCP server.

Loads configuration, sets up the Google service factory, registers the Docs tools
and runs the server over stdio or streamable HTTP.
"""

import argparse
import logging
import sys

from auth.google_auth import GoogleServiceFactory, configure_service_factory
from core.config import (
    GOOGLE_OAUTH_CREDENTIALS_PATH,
    GOOGLE_OAUTH_TOKEN_PATH,
    VALID_TRANSPORTS,
    WORKSPACE_MCP_PORT,
    get_transport_mode,
)
from core.server import server, set_transport_mode, get_version

logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(
        description="Google Docs MCP server",
        formatter_class=argparse.RawDescriptionHelpFormatter
    )
    parser.add_argument('--transport', choices=VALID_TRANSPORTS,
                        default=get_transport_mode(),
                        help='Transport to serve on (default: stdio, or MCP_TRANSPORT)')
    parser.add_argument('--port', type=int, default=WORKSPACE_MCP_PORT,
                        help='Port for streamable-http transport (default: WORKSPACE_MCP_PORT or 8000)')
    args = parser.parse_args()

    set_transport_mode(args.transport)
    configure_service_factory(
        GoogleServiceFactory.from_files(GOOGLE_OAUTH_CREDENTIALS_PATH, GOOGLE_OAUTH_TOKEN_PATH)
    )

    # Registers the tools on the server
    import gdocs.docs_tools  # noqa: F401

    logger.info(f"Starting Google Docs MCP server {get_version()}")
    try:
        if args.transport == "streamable-http":
            server.run(transport="streamable-http", host="0.0.0.0", port=args.port)
        else:
            server.run(transport="stdio")
    except KeyboardInterrupt:
        logger.info("Server shutdown requested")
        sys.exit(0)


if __name__ == "__main__":
    main()
