"""Hacker News client, MCP tools, and stdio and HTTP/SSE servers for them."""

__version__ = "0.1.0"
__all__ = ["__version__"]