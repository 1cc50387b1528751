# =============================================================================
# main.py  -  Entry Point for the LINE MCP Server
# =============================================================================
#
# HOW TO RUN:
#   LINE_CHANNEL_ACCESS_TOKEN=... uv run python main.py
#
# WHAT HAPPENS:
#   1. Loads a .env file if one exists (real environment variables win)
#   2. Sends all logging to STDERR (STDOUT belongs to the MCP transport)
#   3. Reads the configuration; no token → message on stderr, exit 1
#   4. Builds ONE LineClient and ONE ToolDispatcher for the whole process
#   5. Builds the MCP server (compatible or strict mode) and serves stdio
#      until the host closes the stream
# =============================================================================

import asyncio
import logging
import sys

from dotenv import load_dotenv

from line_core.config import ConfigurationError, ServerConfig, load_config
from line_core.dispatcher import ToolDispatcher
from line_core.line_client import LineClient
from line_core.logging_setup import configure_logging
from line_tools.mcp_server import SERVER_NAME, create_server, create_strict_server, run_stdio

logger = logging.getLogger(__name__)


async def serve(config: ServerConfig) -> None:
    """Run the MCP server on stdio for the lifetime of the process."""
    async with LineClient(
        config.channel_access_token,
        base_url=config.api_base_url,
        timeout=config.request_timeout,
    ) as line_client:
        dispatcher = ToolDispatcher(line_client)

        logger.info("Connecting server to transport...")
        if config.strict_errors:
            logger.info("Strict error mode: tool failures are reported as MCP errors")
            await create_strict_server(dispatcher).run_async(transport="stdio")
        else:
            await run_stdio(create_server(dispatcher))


def main() -> int:
    """Start the server; returns the process exit status."""
    load_dotenv()

    try:
        config = load_config()
    except ConfigurationError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    configure_logging(config.log_level)
    logger.info(f"Starting {SERVER_NAME}...")

    try:
        asyncio.run(serve(config))
    except KeyboardInterrupt:
        logger.info("Interrupted, shutting down")
    except Exception:
        logger.exception("Fatal error in main()")
        return 1
    return 0


def run() -> None:
    """Console-script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
