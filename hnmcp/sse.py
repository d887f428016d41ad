"""HTTP transport: server-sent events for replies, POST for requests."""

from __future__ import annotations

import asyncio
import json
import logging
import uuid
from typing import Any

from aiohttp import web

from hnmcp.router import HnRouter
from hnmcp.server import McpServer

logger = logging.getLogger(__name__)

SSE_PATH = "/sse"
MESSAGE_PATH = "/message"
KEEP_ALIVE_SECONDS = 15.0


def _event(name: str, data: str) -> bytes:
    return f"event: {name}\ndata: {data}\n\n".encode()


class _SseTransport:
    def __init__(self, router: HnRouter) -> None:
        self._server = McpServer(router)
        self._sessions: dict[str, asyncio.Queue[dict[str, Any]]] = {}
        self._tasks: set[asyncio.Task[None]] = set()

    async def stream(self, request: web.Request) -> web.StreamResponse:
        session_id = uuid.uuid4().hex
        queue: asyncio.Queue[dict[str, Any]] = asyncio.Queue()
        self._sessions[session_id] = queue
        logger.info("New SSE session %s", session_id)

        response = web.StreamResponse()
        response.content_type = "text/event-stream"
        response.headers["Cache-Control"] = "no-cache"
        await response.prepare(request)
        try:
            await response.write(_event("endpoint", f"{MESSAGE_PATH}?sessionId={session_id}"))
            while True:
                try:
                    message = await asyncio.wait_for(queue.get(), KEEP_ALIVE_SECONDS)
                except asyncio.TimeoutError:
                    await response.write(b": ping\n\n")
                    continue
                await response.write(_event("message", json.dumps(message)))
        except ConnectionResetError:
            logger.debug("SSE session %s disconnected", session_id)
        finally:
            self._sessions.pop(session_id, None)
        return response

    async def message(self, request: web.Request) -> web.Response:
        session_id = request.query.get("sessionId")
        if session_id is None:
            raise web.HTTPBadRequest(text="missing sessionId")
        queue = self._sessions.get(session_id)
        if queue is None:
            raise web.HTTPNotFound(text="unknown session")
        try:
            message = await request.json()
        except ValueError:
            raise web.HTTPBadRequest(text="invalid JSON") from None
        task = asyncio.create_task(self._process(queue, message))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return web.Response(status=202, text="Accepted")

    async def _process(self, queue: asyncio.Queue[dict[str, Any]], message: Any) -> None:
        response = await self._server.handle_message(message)
        if response is not None:
            await queue.put(response)

    async def shutdown(self, app: web.Application) -> None:
        for task in list(self._tasks):
            task.cancel()


def create_app(router: HnRouter) -> web.Application:
    """An aiohttp application serving MCP over server-sent events."""
    transport = _SseTransport(router)
    app = web.Application()
    app.router.add_get(SSE_PATH, transport.stream)
    app.router.add_post(MESSAGE_PATH, transport.message)
    app.on_shutdown.append(transport.shutdown)
    return app


async def serve(router: HnRouter, host: str = "0.0.0.0", port: int = 3000) -> None:
    """Serve until the surrounding task is cancelled."""
    runner = web.AppRunner(create_app(router))
    await runner.setup()
    try:
        site = web.TCPSite(runner, host, port)
        await site.start()
        logger.info("SSE server listening on %s:%d", host, port)
        await asyncio.Event().wait()
    finally:
        logger.info("Shutting down server...")
        await runner.cleanup()