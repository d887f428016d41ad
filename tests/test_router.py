import httpx
import pytest

from hnmcp.client import HnClient, format_story
from hnmcp.router import HnRouter

BASE_URL = "https://hn.example.com/v0"


def _item(story_id, score, title=None, **extra):
    item = {
        "id": story_id,
        "type": "story",
        "title": title or f"Story {story_id}",
        "by": "alice",
        "score": score,
        "time": 1700000000,
        "descendants": 3,
    }
    item.update(extra)
    return item


def _make(listings=None, items=None, failing=()):
    listings = listings or {}
    items = items or {}
    requested = []

    def handler(request):
        path = request.url.path
        requested.append(path)
        name = path.rsplit("/", 1)[-1]
        if name in failing:
            return httpx.Response(500)
        if "/item/" in path:
            story_id = int(name.removesuffix(".json"))
            return httpx.Response(200, json=items.get(story_id))
        listing = name.removesuffix(".json")
        return httpx.Response(200, json=listings.get(listing, []))

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = HnClient(http_client=http, base_url=BASE_URL)
    return HnRouter(client), client, requested


@pytest.mark.asyncio
async def test_top_stories_sorted_by_score_descending():
    items = {1: _item(1, 5), 2: _item(2, 50), 3: _item(3, 20)}
    router, client, _ = _make({"topstories": [1, 2, 3]}, items)
    result = await router.hn_top_stories(count=3)
    blocks = result.split("\n---\n")
    assert len(blocks) == 3
    assert [b.split("\n")[0] for b in blocks] == ["Title: Story 2", "Title: Story 3", "Title: Story 1"]
    expected = await client.get_story_details(2)
    assert blocks[0] == format_story(expected)


@pytest.mark.asyncio
async def test_default_count_is_ten():
    ids = list(range(1, 41))
    items = {i: _item(i, i) for i in ids}
    router, _, requested = _make({"topstories": ids}, items)
    result = await router.hn_top_stories()
    assert len(result.split("\n---\n")) == 10
    assert sum("/item/" in path for path in requested) == 10


@pytest.mark.asyncio
async def test_count_is_capped_at_thirty():
    ids = list(range(1, 41))
    items = {i: _item(i, i) for i in ids}
    router, _, _ = _make({"beststories": ids}, items)
    result = await router.hn_best_stories(count=100)
    assert len(result.split("\n---\n")) == 30


@pytest.mark.asyncio
async def test_zero_count_finds_nothing():
    router, _, requested = _make({"topstories": [1, 2]}, {1: _item(1, 1)})
    assert await router.hn_top_stories(count=0) == "No stories found"
    assert not any("/item/" in path for path in requested)


@pytest.mark.asyncio
async def test_empty_listing_finds_nothing():
    router, _, _ = _make({"newstories": []})
    assert await router.hn_latest_stories() == "No stories found"


@pytest.mark.asyncio
async def test_all_details_failing_finds_nothing():
    router, _, _ = _make({"showstories": [7]}, {})
    assert await router.hn_show_stories(count=1) == "No stories found"


@pytest.mark.asyncio
async def test_failed_details_are_skipped():
    items = {1: _item(1, 4), 3: _item(3, 9)}
    router, _, _ = _make({"askstories": [1, 2, 3]}, items)
    result = await router.hn_ask_stories(count=3)
    assert result.count("Title: ") == 2
    assert "ID: 2\n" not in result


@pytest.mark.parametrize(
    "tool, endpoint, label",
    [
        ("hn_top_stories", "topstories", "top stories"),
        ("hn_latest_stories", "newstories", "latest stories"),
        ("hn_best_stories", "beststories", "best stories"),
        ("hn_ask_stories", "askstories", "Ask HN stories"),
        ("hn_show_stories", "showstories", "Show HN stories"),
    ],
)
@pytest.mark.asyncio
async def test_listing_errors_are_reported(tool, endpoint, label):
    router, _, requested = _make(failing={f"{endpoint}.json"})
    result = await getattr(router, tool)()
    assert result.startswith(f"Error fetching {label}: Failed to fetch {label}")
    assert requested == [f"/v0/{endpoint}.json"]


@pytest.mark.parametrize("chunk_size", [0, 1, 50])
@pytest.mark.asyncio
async def test_chunk_size_is_clamped(chunk_size):
    ids = [1, 2, 3, 4]
    items = {i: _item(i, i) for i in ids}
    router, _, _ = _make({"topstories": ids}, items)
    result = await router.hn_top_stories(count=4, chunk_size=chunk_size)
    assert result.count("Title: ") == 4


@pytest.mark.asyncio
async def test_story_by_id_matches_format_story():
    router, client, _ = _make(items={42: _item(42, 8, url="https://example.com/a")})
    result = await router.hn_story_by_id(42)
    assert result == format_story(await client.get_story_details(42))
    assert "URL: https://example.com/a\n" in result


@pytest.mark.asyncio
async def test_story_by_id_error():
    router, _, _ = _make()
    result = await router.hn_story_by_id(99)
    assert result.startswith("Error fetching story with ID 99: Failed to fetch story with ID 99")


@pytest.mark.asyncio
async def test_call_tool_dispatches():
    items = {1: _item(1, 2), 2: _item(2, 6)}
    router, _, _ = _make({"topstories": [1, 2]}, items)
    direct = await router.hn_top_stories(count=2, chunk_size=2)
    via_call = await router.call_tool("hn_top_stories", {"count": 2, "chunk_size": 2})
    assert via_call == direct
    by_id = await router.call_tool("hn_story_by_id", {"id": 1})
    assert by_id == await router.hn_story_by_id(1)


@pytest.mark.asyncio
async def test_call_tool_unknown_name():
    router, _, _ = _make()
    with pytest.raises(KeyError):
        await router.call_tool("hn_nope", {})


@pytest.mark.parametrize(
    "name, arguments",
    [
        ("hn_story_by_id", {}),
        ("hn_story_by_id", {"id": "12"}),
        ("hn_story_by_id", {"id": -1}),
        ("hn_story_by_id", {"id": 2**32}),
        ("hn_top_stories", {"count": -1}),
        ("hn_top_stories", {"count": "5"}),
        ("hn_latest_stories", {"chunk_size": True}),
    ],
)
@pytest.mark.asyncio
async def test_call_tool_rejects_bad_arguments(name, arguments):
    router, _, _ = _make()
    with pytest.raises(ValueError):
        await router.call_tool(name, arguments)


def test_list_tools_names_and_schemas():
    router, _, _ = _make()
    tools = {tool["name"]: tool for tool in router.list_tools()}
    assert set(tools) == {
        "hn_top_stories",
        "hn_latest_stories",
        "hn_best_stories",
        "hn_ask_stories",
        "hn_show_stories",
        "hn_story_by_id",
    }
    assert tools["hn_story_by_id"]["inputSchema"]["required"] == ["id"]
    assert set(tools["hn_top_stories"]["inputSchema"]["properties"]) == {"count", "chunk_size"}
    assert all(tool["description"] for tool in tools.values())


def test_get_info():
    router, _, _ = _make()
    info = router.get_info()
    assert info["protocolVersion"] == "2024-11-05"
    assert "tools" in info["capabilities"]
    assert "Hacker News" in info["instructions"]