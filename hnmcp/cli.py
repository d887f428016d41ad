"""Command line entry point: run the server over stdio or HTTP/SSE."""

from __future__ import annotations

import argparse
import asyncio
import ipaddress
import logging
import sys
from collections.abc import Sequence

from hnmcp.client import HnClient, HnError
from hnmcp.router import HnRouter, SERVER_VERSION
from hnmcp.server import run_stdio
from hnmcp.sse import SSE_PATH, serve

logger = logging.getLogger(__name__)

DEFAULT_ADDRESS = "0.0.0.0:3000"


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse the command line; a subcommand is required."""
    parser = argparse.ArgumentParser(prog="hn-mcp", description="HN MCP Server")
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {SERVER_VERSION}")
    commands = parser.add_subparsers(dest="command", required=True)

    stdio = commands.add_parser("stdio", help="Run the server in stdin/stdout mode")
    stdio.add_argument("-d", "--debug", action="store_true", help="Enable debug logging")

    http = commands.add_parser("http", help="Run the server with HTTP/SSE interface")
    http.add_argument(
        "-a",
        "--address",
        default=DEFAULT_ADDRESS,
        help="Address to bind the HTTP server to",
    )
    http.add_argument("-d", "--debug", action="store_true", help="Enable debug logging")
    return parser.parse_args(argv)


def _parse_address(address: str) -> tuple[str, int]:
    host, sep, port_text = address.rpartition(":")
    invalid = ValueError(f"invalid socket address syntax: {address}")
    if not sep or not host or not port_text.isdigit():
        raise invalid
    bracketed = host.startswith("[") and host.endswith("]")
    if bracketed:
        host = host[1:-1]
    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        raise invalid from None
    if (ip.version == 6) != bracketed:
        raise invalid
    port = int(port_text)
    if port > 65535:
        raise invalid
    return host, port


async def _run_stdio() -> None:
    async with HnClient() as client:
        await run_stdio(HnRouter(client))


async def _run_http(host: str, port: int) -> None:
    async with HnClient() as client:
        await serve(HnRouter(client), host, port)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the chosen server; returns the process exit status."""
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        stream=sys.stderr,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        if args.command == "stdio":
            logger.info("Starting HN MCP server in STDIN/STDOUT mode")
            asyncio.run(_run_stdio())
        else:
            host, port = _parse_address(args.address)
            logger.debug("HN MCP Server listening on %s", args.address)
            logger.info("Access the HN MCP Server at http://%s%s", args.address, SSE_PATH)
            asyncio.run(_run_http(host, port))
    except KeyboardInterrupt:
        logger.info("Shutting down server...")
    except (ValueError, OSError, HnError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())