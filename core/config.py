"""
Shared configuration for the Google Docs MCP server.

Values come from environment variables; a .env file in the working directory or
next to the project is loaded first so local setups don't need to export them.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

_PROJECT_ROOT = Path(__file__).resolve().parent.parent

load_dotenv(_PROJECT_ROOT / ".env")
load_dotenv()

VALID_TRANSPORTS = ("stdio", "streamable-http")

GOOGLE_OAUTH_CREDENTIALS_PATH = os.getenv(
    "GOOGLE_OAUTH_CREDENTIALS_PATH", "credentials.json"
)
GOOGLE_OAUTH_TOKEN_PATH = os.getenv("GOOGLE_OAUTH_TOKEN_PATH", "token.json")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
WORKSPACE_MCP_PORT = int(os.getenv("WORKSPACE_MCP_PORT", "8000"))

_current_transport_mode = os.getenv("MCP_TRANSPORT", "stdio")


def set_transport_mode(mode: str):
    """Sets the current transport mode."""
    global _current_transport_mode
    if mode not in VALID_TRANSPORTS:
        raise ValueError(
            f"Unknown transport '{mode}'. Expected one of: {', '.join(VALID_TRANSPORTS)}"
        )
    _current_transport_mode = mode


def get_transport_mode() -> str:
    """Returns the current transport mode."""
    return _current_transport_mode
