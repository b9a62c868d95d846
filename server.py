"""FastMCP entry point for the vibecheck pull-request analyzers."""

from __future__ import annotations

import logging
from typing import Optional

from fastmcp import FastMCP

from vibecheck.config import SERVER_HOST, SERVER_NAME, SERVER_PORT, SERVER_VERSION
from vibecheck.mcp_tools import register_tools

# ── Logging ──────────────────────────────────────────────────────────────────
# Analyzer modules log per-call results at DEBUG and tool calls at INFO.

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
    datefmt="%H:%M:%S",
)
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("uvicorn.access").setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


def create_server(checks: Optional[list[str]] = None) -> FastMCP:
    """Build a server exposing the tools for ``checks`` (all checks when None)."""
    mcp = FastMCP(name=SERVER_NAME, version=SERVER_VERSION)
    tools = register_tools(mcp, checks)
    logger.info("Enabled tools: %s", ", ".join(tools) or "none")
    return mcp


# Served by the FastMCP CLI as well as main()
mcp = create_server()


def main() -> None:
    """Run the default server over streamable HTTP."""
    logger.info("Starting %s v%s on %s:%d", SERVER_NAME, SERVER_VERSION, SERVER_HOST, SERVER_PORT)
    try:
        mcp.run(transport="streamable-http", host=SERVER_HOST, port=SERVER_PORT)
    except OSError as e:
        logger.error("Could not bind %s:%d: %s", SERVER_HOST, SERVER_PORT, e)
        raise SystemExit(1) from e


if __name__ == "__main__":
    main()
