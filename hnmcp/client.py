"""Asynchronous Hacker News API client with an LRU story cache."""

from __future__ import annotations

import asyncio
import logging
from collections import OrderedDict
from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

import httpx

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://hacker-news.firebaseio.com/v0"
DEFAULT_CACHE_SIZE = 100
DEFAULT_CHUNK_SIZE = 5

_EPOCH = datetime.fromtimestamp(0, timezone.utc)


class HnError(Exception):
    """Raised when the Hacker News API cannot deliver what was asked for."""


@dataclass(frozen=True)
class Story:
    """A Hacker News story with the fields the tools report."""

    id: int
    title: str = ""
    url: str = ""
    text: str = ""
    by: str = ""
    score: int = 0
    created_at: datetime = field(default=_EPOCH)
    number_of_comments: int = 0
    comments: tuple[int, ...] = ()

    @classmethod
    def from_item(cls, item: dict[str, Any]) -> Story:
        """Build a story from a decoded API item."""
        return cls(
            id=int(item["id"]),
            title=item.get("title") or "",
            url=item.get("url") or "",
            text=item.get("text") or "",
            by=item.get("by") or "",
            score=int(item.get("score") or 0),
            created_at=datetime.fromtimestamp(int(item.get("time") or 0), timezone.utc),
            number_of_comments=int(item.get("descendants") or 0),
            comments=tuple(int(kid) for kid in item.get("kids") or ()),
        )


def _format_offset(moment: datetime) -> str:
    offset = moment.utcoffset()
    seconds = int(offset.total_seconds()) if offset is not None else 0
    sign = "-" if seconds < 0 else "+"
    hours, rest = divmod(abs(seconds), 3600)
    minutes, secs = divmod(rest, 60)
    return f"{sign}{hours:02d}:{minutes:02d}:{secs:02d}"


def _format_datetime(moment: datetime) -> str:
    millis = moment.microsecond // 1000
    return f"{moment:%Y-%m-%d %H:%M:%S}.{millis:03d} {_format_offset(moment)}"


def format_story(story: Story) -> str:
    """Render a story as the multi-line text block the tools return."""
    url_section = f"URL: {story.url}\n" if story.url else ""
    text_section = f"Text: {story.text}\n" if story.text else ""
    return (
        f"Title: {story.title}\n"
        f"{url_section}"
        f"{text_section}"
        f"By: {story.by}\n"
        f"Score: {story.score}\n"
        f"Date: {_format_datetime(story.created_at)}\n"
        f"Comments: {story.number_of_comments}\n"
        f"ID: {story.id}\n"
    )


class HnClient:
    """Fetches story listings and story details, caching details in an LRU cache."""

    def __init__(
        self,
        cache_size: int = DEFAULT_CACHE_SIZE,
        http_client: httpx.AsyncClient | None = None,
        base_url: str = DEFAULT_BASE_URL,
    ) -> None:
        self._capacity = max(1, cache_size)
        self._cache: OrderedDict[int, Story] = OrderedDict()
        self._lock = asyncio.Lock()
        self._owns_http = http_client is None
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=30.0)
        self._base_url = base_url.rstrip("/")

    async def __aenter__(self) -> HnClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this object created it."""
        if self._owns_http:
            await self._http.aclose()

    async def _get_json(self, path: str) -> Any:
        try:
            response = await self._http.get(f"{self._base_url}/{path}")
            response.raise_for_status()
            return response.json()
        except httpx.HTTPError as exc:
            raise HnError(str(exc) or type(exc).__name__) from exc
        except ValueError as exc:
            raise HnError(f"invalid JSON: {exc}") from exc

    async def _story_ids(self, endpoint: str, label: str, limit: int | None) -> list[int]:
        if limit is not None and limit < 0:
            raise ValueError("limit must not be negative")
        try:
            data = await self._get_json(f"{endpoint}.json")
            if not isinstance(data, list):
                raise HnError("unexpected response shape")
            ids = [int(story_id) for story_id in data]
        except (HnError, TypeError, ValueError) as exc:
            raise HnError(f"Failed to fetch {label}: {exc}") from exc
        return ids if limit is None else ids[:limit]

    async def get_top_stories(self, limit: int | None = None) -> list[int]:
        """IDs of the current top stories, at most ``limit`` of them."""
        return await self._story_ids("topstories", "top stories", limit)

    async def get_latest_stories(self, limit: int | None = None) -> list[int]:
        """IDs of the newest stories, at most ``limit`` of them."""
        return await self._story_ids("newstories", "latest stories", limit)

    async def get_best_stories(self, limit: int | None = None) -> list[int]:
        """IDs of the best stories, at most ``limit`` of them."""
        return await self._story_ids("beststories", "best stories", limit)

    async def get_ask_stories(self, limit: int | None = None) -> list[int]:
        """IDs of Ask HN stories, at most ``limit`` of them."""
        return await self._story_ids("askstories", "Ask HN stories", limit)

    async def get_show_stories(self, limit: int | None = None) -> list[int]:
        """IDs of Show HN stories, at most ``limit`` of them."""
        return await self._story_ids("showstories", "Show HN stories", limit)

    async def _cached(self, story_id: int) -> Story | None:
        async with self._lock:
            story = self._cache.get(story_id)
            if story is not None:
                self._cache.move_to_end(story_id)
            return story

    async def _remember(self, story: Story) -> None:
        async with self._lock:
            self._cache[story.id] = story
            self._cache.move_to_end(story.id)
            while len(self._cache) > self._capacity:
                self._cache.popitem(last=False)

    async def get_story_details(self, story_id: int) -> Story:
        """Details of one story, served from the cache when present."""
        cached = await self._cached(story_id)
        if cached is not None:
            logger.debug("Cache hit for story ID: %s", story_id)
            return cached

        logger.debug("Cache miss for story ID: %s, fetching from API", story_id)
        try:
            item = await self._get_json(f"item/{story_id}.json")
            if item is None:
                raise HnError("item not found")
            if not isinstance(item, dict) or item.get("type") != "story":
                raise HnError("item is not a story")
            story = Story.from_item(item)
        except (HnError, KeyError, TypeError, ValueError) as exc:
            raise HnError(f"Failed to fetch story with ID {story_id}: {exc}") from exc

        await self._remember(story)
        return story

    async def get_stories_details(
        self, ids: Iterable[int], chunk_size: int | None = None
    ) -> list[Story]:
        """Details of many stories, fetched concurrently in chunks.

        Cached stories come first; stories that fail to load are logged and skipped.
        """
        size = DEFAULT_CHUNK_SIZE if chunk_size is None else chunk_size
        if size < 1:
            raise ValueError("chunk_size must be at least 1")
        ids = list(ids)
        logger.debug("Fetching %d stories with chunk size %d", len(ids), size)

        stories: list[Story] = []
        to_fetch: list[int] = []
        for story_id in ids:
            cached = await self._cached(story_id)
            if cached is not None:
                logger.debug("Cache hit for story ID: %s", story_id)
                stories.append(cached)
            else:
                to_fetch.append(story_id)

        if not to_fetch:
            logger.debug("All stories were in cache. No API requests needed.")
            return stories

        logger.debug(
            "%d stories found in cache, fetching %d from API",
            len(ids) - len(to_fetch),
            len(to_fetch),
        )

        for start in range(0, len(to_fetch), size):
            chunk = to_fetch[start:start + size]
            logger.debug("Processing chunk of %d story IDs", len(chunk))
            results = await asyncio.gather(
                *(self.get_story_details(story_id) for story_id in chunk),
                return_exceptions=True,
            )
            for result in results:
                if isinstance(result, Story):
                    stories.append(result)
                elif isinstance(result, Exception):
                    logger.error("Error fetching story: %s", result)
                else:
                    raise result

        logger.debug("Fetched %d stories successfully", len(stories))
        return stories