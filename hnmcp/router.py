"""MCP tool router exposing Hacker News listings and story lookup."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from typing import Any

from hnmcp.client import HnClient, HnError, format_story

logger = logging.getLogger(__name__)

PROTOCOL_VERSION = "2024-11-05"
SERVER_NAME = "hn-mcp"
SERVER_VERSION = "0.1.0"

DEFAULT_COUNT = 10
MAX_COUNT = 30
DEFAULT_CHUNK_SIZE = 5
MIN_CHUNK_SIZE = 1
MAX_CHUNK_SIZE = 10
MAX_STORY_ID = 2**32 - 1

NO_STORIES = "No stories found"
STORY_SEPARATOR = "\n---\n"

INSTRUCTIONS = """\
Hacker News (HN) MCP Server providing access to content categories from Hacker News (HN), \
a popular tech-focused news aggregation site. Note: 'HN' is commonly used as an abbreviation \
for 'Hacker News' in function names and throughout this documentation. This server provides \
access to top, latest, best, Ask HN, and Show HN stories. Supports retrieval by story ID and \
concurrent processing for efficiency.

## Example Usage with Input/Output:

1. Get top stories:
   Input: hn_top_stories(count=3)
   Output: up to three stories, highest score first, separated by '---'.
   Each story lists Title, URL (when present), Text (when present), By, Score, Date,
   Comments and ID, for example:
   Title: Find My Apple Watch
   URL: https://support.apple.com/en-us/108602
   By: andygambles
   Score: 214
   Date: 2025-05-04 14:03:11.000 +00:00:00
   Comments: 132
   ID: 39617052

2. Get latest stories with parallelism:
   Input: hn_latest_stories(count=2, chunk_size=2)

3. Find Ask HN discussions:
   Input: hn_ask_stories(count=2)

4. View Show HN projects:
   Input: hn_show_stories(count=2)

5. Lookup by specific ID:
   Input: hn_story_by_id(id=39617052)
"""

_COUNT_DOC = (
    "Number of stories to fetch (1-30, default 10). Controls how many {kind} will be "
    "returned; larger values give more comprehensive results but take longer."
)
_CHUNK_DOC = (
    "Number of stories to process in parallel (1-10, default 5). Higher values may speed "
    "up retrieval but increase API load. This affects performance but not the results."
)
_ID_DOC = (
    "Numeric ID of the Hacker News story to fetch. Every HN story has a unique ID which can "
    "be found in story listings, in the output of the other HN tools, or in HN URLs."
)

_LISTING_DESCRIPTIONS = {
    "hn_top_stories": (
        "top stories",
        "Retrieves the top trending stories from Hacker News (HN is the common abbreviation "
        "for Hacker News) with their complete details including title, URL, text, author, "
        "score, date, and comment count. Results are sorted by score in descending order. "
        "Example: `hn_top_stories(count=3)` returns the three highest-scored stories "
        "currently trending on HN.",
    ),
    "hn_latest_stories": (
        "latest stories",
        "Retrieves the most recently submitted stories from Hacker News (HN is the common "
        "abbreviation for Hacker News) with their complete details including title, URL, "
        "text, author, score, date, and comment count. Useful for discovering brand new "
        "content. Results are sorted by score in descending order.",
    ),
    "hn_best_stories": (
        "best stories",
        "Retrieves the highest-quality stories from Hacker News (HN is the common "
        "abbreviation for Hacker News) based on a combination of score, comments, and other "
        "factors. Returns complete details including title, URL, text, author, score, date, "
        "and comment count. Results are sorted by score in descending order.",
    ),
    "hn_ask_stories": (
        "Ask HN stories",
        "Retrieves 'Ask HN' question posts from Hacker News (HN is the common abbreviation "
        "for Hacker News) where users ask the community for advice, opinions, or information. "
        "Returns complete details including title, text, author, score, date, and comment "
        "count. Results are sorted by score in descending order.",
    ),
    "hn_show_stories": (
        "Show HN stories",
        "Retrieves 'Show HN' posts from Hacker News (HN is the common abbreviation for "
        "Hacker News) where users showcase their projects to get feedback from the "
        "community. Returns complete details including title, URL, text, author, score, "
        "date, and comment count. Results are sorted by score in descending order.",
    ),
}

_STORY_BY_ID_DESCRIPTION = (
    "Retrieves complete details of a specific Hacker News (HN is the common abbreviation for "
    "Hacker News) story by its unique ID. Returns all available information including title, "
    "URL, text, author, score, date, and comment count."
)


def _check_count(value: int | None) -> int | None:
    if value is not None and value < 0:
        raise ValueError("count must not be negative")
    return value


def _check_chunk(value: int | None) -> int | None:
    if value is not None and value < 0:
        raise ValueError("chunk_size must not be negative")
    return value


def _optional_uint(arguments: Mapping[str, Any], key: str) -> int | None:
    value = arguments.get(key)
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{key} must be a non-negative integer")
    if value < 0:
        raise ValueError(f"{key} must be a non-negative integer")
    return value


def _required_story_id(arguments: Mapping[str, Any]) -> int:
    value = arguments.get("id")
    if value is None:
        raise ValueError("missing required argument: id")
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError("id must be an integer")
    if not 0 <= value <= MAX_STORY_ID:
        raise ValueError("id is out of range")
    return value


def _listing_schema(kind: str) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": {
            "count": {
                "type": ["integer", "null"],
                "format": "uint",
                "minimum": 0,
                "description": _COUNT_DOC.format(kind=kind),
            },
            "chunk_size": {
                "type": ["integer", "null"],
                "format": "uint",
                "minimum": 0,
                "description": _CHUNK_DOC,
            },
        },
    }


class HnRouter:
    """The set of Hacker News tools offered to MCP clients."""

    def __init__(self, client: HnClient) -> None:
        self._client = client

    async def _stories(
        self,
        label: str,
        fetch_ids: Callable[[int], Awaitable[list[int]]],
        count: int | None,
        chunk_size: int | None,
    ) -> str:
        limit = min(DEFAULT_COUNT if count is None else count, MAX_COUNT)
        chunk = DEFAULT_CHUNK_SIZE if chunk_size is None else chunk_size
        chunk = max(MIN_CHUNK_SIZE, min(chunk, MAX_CHUNK_SIZE))
        try:
            story_ids = await fetch_ids(limit)
            logger.info("Retrieved %d story IDs", len(story_ids))
            if not story_ids:
                return NO_STORIES
            stories = await self._client.get_stories_details(story_ids, chunk)
            logger.info("Fetched details for %d stories", len(stories))
        except HnError as exc:
            return f"Error fetching {label}: {exc}"
        if not stories:
            return NO_STORIES
        ranked = sorted(stories, key=lambda story: story.score, reverse=True)
        return STORY_SEPARATOR.join(format_story(story) for story in ranked)

    async def hn_top_stories(
        self, count: int | None = None, chunk_size: int | None = None
    ) -> str:
        """Top stories, highest score first."""
        return await self._stories(
            "top stories", self._client.get_top_stories, _check_count(count), _check_chunk(chunk_size)
        )

    async def hn_latest_stories(
        self, count: int | None = None, chunk_size: int | None = None
    ) -> str:
        """Newest stories, highest score first."""
        return await self._stories(
            "latest stories",
            self._client.get_latest_stories,
            _check_count(count),
            _check_chunk(chunk_size),
        )

    async def hn_best_stories(
        self, count: int | None = None, chunk_size: int | None = None
    ) -> str:
        """Best stories, highest score first."""
        return await self._stories(
            "best stories", self._client.get_best_stories, _check_count(count), _check_chunk(chunk_size)
        )

    async def hn_ask_stories(
        self, count: int | None = None, chunk_size: int | None = None
    ) -> str:
        """Ask HN stories, highest score first."""
        return await self._stories(
            "Ask HN stories", self._client.get_ask_stories, _check_count(count), _check_chunk(chunk_size)
        )

    async def hn_show_stories(
        self, count: int | None = None, chunk_size: int | None = None
    ) -> str:
        """Show HN stories, highest score first."""
        return await self._stories(
            "Show HN stories",
            self._client.get_show_stories,
            _check_count(count),
            _check_chunk(chunk_size),
        )

    async def hn_story_by_id(self, story_id: int) -> str:
        """One story by its ID, formatted."""
        try:
            story = await self._client.get_story_details(story_id)
        except HnError as exc:
            return f"Error fetching story with ID {story_id}: {exc}"
        return format_story(story)

    def get_info(self) -> dict[str, Any]:
        """The server description sent in reply to an initialize request."""
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {}},
            "serverInfo": {"name": SERVER_NAME, "version": SERVER_VERSION},
            "instructions": INSTRUCTIONS,
        }

    def list_tools(self) -> list[dict[str, Any]]:
        """Descriptions and input schemas of every tool."""
        tools = [
            {
                "name": name,
                "description": description,
                "inputSchema": _listing_schema(kind),
            }
            for name, (kind, description) in _LISTING_DESCRIPTIONS.items()
        ]
        tools.append(
            {
                "name": "hn_story_by_id",
                "description": _STORY_BY_ID_DESCRIPTION,
                "inputSchema": {
                    "type": "object",
                    "properties": {
                        "id": {
                            "type": "integer",
                            "format": "uint32",
                            "minimum": 0,
                            "description": _ID_DOC,
                        }
                    },
                    "required": ["id"],
                },
            }
        )
        return tools

    async def call_tool(self, name: str, arguments: Mapping[str, Any] | None = None) -> str:
        """Run the named tool with JSON arguments.

        Raises KeyError for an unknown tool and ValueError for invalid arguments.
        """
        args: Mapping[str, Any] = arguments or {}
        if name == "hn_story_by_id":
            return await self.hn_story_by_id(_required_story_id(args))
        listings = {
            "hn_top_stories": self.hn_top_stories,
            "hn_latest_stories": self.hn_latest_stories,
            "hn_best_stories": self.hn_best_stories,
            "hn_ask_stories": self.hn_ask_stories,
            "hn_show_stories": self.hn_show_stories,
        }
        try:
            tool = listings[name]
        except KeyError:
            raise KeyError(name) from None
        return await tool(
            count=_optional_uint(args, "count"),
            chunk_size=_optional_uint(args, "chunk_size"),
        )