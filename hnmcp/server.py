"""JSON-RPC message handling for the MCP protocol and the stdio transport."""

from __future__ import annotations

import asyncio
import json
import logging
import sys
from collections.abc import Mapping
from typing import Any, TextIO

from hnmcp.router import HnRouter

logger = logging.getLogger(__name__)

JSONRPC_VERSION = "2.0"

PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class _RpcError(Exception):
    def __init__(self, code: int, message: str) -> None:
        super().__init__(message)
        self.code = code
        self.message = message


def error_response(request_id: Any, code: int, message: str) -> dict[str, Any]:
    """A JSON-RPC error object answering ``request_id``."""
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": request_id,
        "error": {"code": code, "message": message},
    }


class McpServer:
    """Answers MCP requests by dispatching them to an :class:`HnRouter`."""

    def __init__(self, router: HnRouter) -> None:
        self._router = router

    async def handle_message(self, message: Any) -> dict[str, Any] | None:
        """Answer one decoded JSON-RPC message; notifications get no answer."""
        if not isinstance(message, dict):
            return error_response(None, INVALID_REQUEST, "Invalid request")
        if "method" not in message and ("result" in message or "error" in message):
            logger.debug("Ignoring response message from client")
            return None
        method = message.get("method")
        if message.get("jsonrpc") != JSONRPC_VERSION or not isinstance(method, str):
            return error_response(message.get("id"), INVALID_REQUEST, "Invalid request")
        if "id" not in message:
            logger.debug("Received notification: %s", method)
            return None

        request_id = message["id"]
        try:
            result = await self._dispatch(method, message.get("params"))
        except _RpcError as exc:
            return error_response(request_id, exc.code, exc.message)
        except Exception as exc:  # a failing tool must not bring the server down
            logger.exception("Error handling %s", method)
            return error_response(request_id, INTERNAL_ERROR, str(exc) or type(exc).__name__)
        return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}

    async def _dispatch(self, method: str, params: Any) -> Any:
        if params is None:
            params = {}
        if not isinstance(params, Mapping):
            raise _RpcError(INVALID_PARAMS, "params must be an object")
        if method == "initialize":
            return self._router.get_info()
        if method == "ping":
            return {}
        if method == "tools/list":
            return {"tools": self._router.list_tools()}
        if method == "tools/call":
            return await self._call_tool(params)
        raise _RpcError(METHOD_NOT_FOUND, f"Method not found: {method}")

    async def _call_tool(self, params: Mapping[str, Any]) -> dict[str, Any]:
        name = params.get("name")
        if not isinstance(name, str):
            raise _RpcError(INVALID_PARAMS, "tool name must be a string")
        arguments = params.get("arguments") or {}
        if not isinstance(arguments, Mapping):
            raise _RpcError(INVALID_PARAMS, "arguments must be an object")
        try:
            text = await self._router.call_tool(name, arguments)
        except KeyError:
            raise _RpcError(INVALID_PARAMS, f"tool not found: {name}") from None
        except ValueError as exc:
            raise _RpcError(INVALID_PARAMS, str(exc)) from None
        return {"content": [{"type": "text", "text": text}], "isError": False}


async def run_stdio(
    router: HnRouter, stdin: TextIO | None = None, stdout: TextIO | None = None
) -> None:
    """Serve newline-delimited JSON-RPC messages until the input ends."""
    server = McpServer(router)
    source = sys.stdin if stdin is None else stdin
    sink = sys.stdout if stdout is None else stdout
    while True:
        line = await asyncio.to_thread(source.readline)
        if not line:
            break
        line = line.strip()
        if not line:
            continue
        try:
            message = json.loads(line)
        except json.JSONDecodeError:
            response: dict[str, Any] | None = error_response(None, PARSE_ERROR, "Parse error")
        else:
            response = await server.handle_message(message)
        if response is not None:
            sink.write(json.dumps(response) + "\n")
            sink.flush()
    logger.info("Input closed, stopping stdio server")