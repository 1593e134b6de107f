import logging
from importlib import metadata

from starlette.requests import Request
from starlette.responses import JSONResponse

from fastmcp import FastMCP

from core.config import (
    LOG_LEVEL,
    get_transport_mode,
    set_transport_mode as _set_transport_mode,
)

logging.basicConfig(
    level=getattr(logging, LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logging.getLogger("googleapiclient.discovery_cache").setLevel(logging.ERROR)
logger = logging.getLogger(__name__)

server = FastMCP(name="google_docs")


def set_transport_mode(mode: str):
    """Sets the transport mode for the server."""
    _set_transport_mode(mode)
    logger.info(f"Transport: {mode}")


def get_version() -> str:
    try:
        return metadata.version("gdocs-mcp")
    except metadata.PackageNotFoundError:
        return "dev"


@server.custom_route("/health", methods=["GET"])
async def health_check(request: Request):
    return JSONResponse(
        {
            "status": "healthy",
            "service": "gdocs-mcp",
            "version": get_version(),
            "transport": get_transport_mode(),
        }
    )
