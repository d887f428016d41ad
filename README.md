# hnmcp

A Model Context Protocol (MCP) server that gives language-model clients access
to Hacker News. It offers story listings (top, latest, best, Ask HN, Show HN)
and single stories by ID. The results are plain text, and listings are sorted by
score with the highest first.

## Installation

```
pip install .
```

This installs the `hn-mcp` command.

## Running the server

Over standard input and output, for clients that start the server themselves.
Each line in is one JSON-RPC message, and each reply goes out as one line:

```
hn-mcp stdio
hn-mcp stdio --debug
```

Over HTTP with Server-Sent Events:

```
hn-mcp http
hn-mcp http --address 127.0.0.1:8080 --debug
```

Options:

- `-d`, `--debug`: log at debug level instead of info level.
- `-a`, `--address` (http only): the `IP:PORT` to bind to. The default is `0.0.0.0:3000`.
  Write IPv6 addresses in brackets, for example `[::1]:3000`. Host names are not accepted.
- `-V`, `--version`: print the version and exit.

Logs go to standard error. If the address is invalid, or the server cannot start,
`hn-mcp` prints `Error: ...` and exits with status 1. Press Ctrl+C to stop the
HTTP server.

In HTTP mode a client opens `GET /sse`. The first event is named `endpoint`. Its
data is the path to post requests to: `/message?sessionId=<id>`. Each request
posted there is answered `202 Accepted`, and its reply comes back as a `message`
event on the stream. A `: ping` comment goes out after 15 seconds without
traffic.

The server answers the MCP methods `initialize`, `ping`, `tools/list` and
`tools/call`. It ignores notifications, and any other method gets a
"method not found" error.

## Tools

| Tool                | Arguments             |
|---------------------|-----------------------|
| `hn_top_stories`    | `count`, `chunk_size` |
| `hn_latest_stories` | `count`, `chunk_size` |
| `hn_best_stories`   | `count`, `chunk_size` |
| `hn_ask_stories`    | `count`, `chunk_size` |
| `hn_show_stories`   | `count`, `chunk_size` |
| `hn_story_by_id`    | `id` (required)       |

- `count` defaults to 10 and is capped at 30.
- `chunk_size` sets how many stories are fetched at once. It defaults to 5 and is
  kept between 1 and 10.
- If an argument is negative or not an integer, the request fails with an
  invalid-params error.
- If Hacker News cannot be reached, the tool returns the error as its text, for
  example `Error fetching top stories: ...`.
- If a listing is empty, the tool returns `No stories found`.

Each story is printed like this, and stories in a listing are separated by a line
holding `---`. The `URL:` and `Text:` lines appear only when the story has them:

```
Title: An example story
URL: https://example.com/story
By: someone
Score: 214
Date: 2025-05-04 14:03:11.000 +00:00:00
Comments: 132
ID: 39617052
```

## Using the client from Python

```python
import asyncio
from hnmcp.client import HnClient, format_story

async def show_top():
    async with HnClient() as client:
        ids = await client.get_top_stories(3)
        for story in await client.get_stories_details(ids, 2):
            print(format_story(story))

asyncio.run(show_top())
```

`HnClient(cache_size=100, http_client=None, base_url=...)` takes these arguments:

- `cache_size`: the size of the LRU cache for story details. It is at least 1.
- `http_client`: an `httpx.AsyncClient` to use. The client does not close one
  that is passed in.
- `base_url`: the API root.

Methods of `HnClient`:

- `get_top_stories`, `get_latest_stories`, `get_best_stories`, `get_ask_stories`
  and `get_show_stories` return lists of story IDs, at most `limit` of them.
- `get_story_details(story_id)` returns a `Story` and caches it.
- `get_stories_details(ids, chunk_size)` returns the cached stories first, then
  fetches the rest concurrently, `chunk_size` at a time. Stories that fail to
  load are logged and left out.

Failures raise `HnError`.

The pieces of the server can also be used on their own:

- `hnmcp.router.HnRouter`: the tools, plus `list_tools()`, `call_tool()` and `get_info()`.
- `hnmcp.server.McpServer.handle_message()`: answers one decoded JSON-RPC message.
- `hnmcp.server.run_stdio()`: runs the stdio transport.
- `hnmcp.sse.create_app()` and `hnmcp.sse.serve()`: the aiohttp application and server.

## Limits

- Story details are cached in memory only. Nothing is stored between runs.
- The server offers tools only. It has no MCP resources or prompts.
- It reads stories only. It does not fetch comments or user profiles.

## Running the tests

```
pip install ".[test]"
pytest
```