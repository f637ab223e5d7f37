"""
Tests for the JSON-file caches (transcripts, summaries, channel videos).
"""
import json

import pytest

from tubeblog.models import VideoSummary
from tubeblog.repositories.summaries import SummaryCache
from tubeblog.repositories.transcripts import TranscriptCache
from tubeblog.repositories.videos import VideoCache


def read_json(path):
    return json.loads(path.read_text(encoding="utf-8"))


@pytest.mark.asyncio
async def test_missing_file_loads_empty(tmp_path):
    cache = SummaryCache(tmp_path / "nested" / "summaries.json")
    await cache.load()

    assert len(cache) == 0
    assert (tmp_path / "nested").is_dir()


@pytest.mark.asyncio
async def test_invalid_json_loads_empty(tmp_path):
    path = tmp_path / "summaries.json"
    path.write_text("{not json", encoding="utf-8")

    cache = SummaryCache(path)
    await cache.load()

    assert len(cache) == 0
    assert await cache.get("abc") is None


@pytest.mark.asyncio
async def test_summary_set_get_and_persist(tmp_path):
    path = tmp_path / "summaries.json"
    cache = SummaryCache(path)
    await cache.load()

    assert await cache.set("vid1", "# Blog post") is True
    assert await cache.get("vid1") == "# Blog post"
    assert read_json(path) == {"vid1": "# Blog post"}

    reloaded = SummaryCache(path)
    await reloaded.load()
    assert await reloaded.get("vid1") == "# Blog post"


@pytest.mark.asyncio
async def test_summary_delete_keeps_other_entries(tmp_path):
    path = tmp_path / "summaries.json"
    cache = SummaryCache(path)
    await cache.load()
    await cache.set("a", "summary a")
    await cache.set("b", "summary b")

    await cache.delete("a")

    assert await cache.get("a") is None
    assert await cache.get("b") == "summary b"
    assert read_json(path) == {"b": "summary b"}


@pytest.mark.asyncio
async def test_summary_clear_all(tmp_path):
    path = tmp_path / "summaries.json"
    cache = SummaryCache(path)
    await cache.load()
    await cache.set("a", "summary a")
    await cache.set("b", "summary b")

    await cache.clear_all()

    assert len(cache) == 0
    assert read_json(path) == {}


@pytest.mark.asyncio
async def test_mutation_merges_changes_made_on_disk(tmp_path):
    path = tmp_path / "summaries.json"
    cache = SummaryCache(path)
    await cache.load()

    path.write_text(json.dumps({"external": "written elsewhere"}), encoding="utf-8")
    await cache.set("local", "written here")

    assert read_json(path) == {"external": "written elsewhere", "local": "written here"}
    assert await cache.get("external") == "written elsewhere"


@pytest.mark.asyncio
async def test_write_failure_is_swallowed(tmp_path, log_messages):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    cache = SummaryCache(blocker / "summaries.json")
    await cache.load()

    assert await cache.set("vid1", "summary") is False
    assert any("Error writing summary cache" in m for m in log_messages)


@pytest.mark.asyncio
async def test_summary_non_text_entries_are_dropped(tmp_path):
    path = tmp_path / "summaries.json"
    path.write_text(json.dumps({"good": "text", "bad": {"nested": True}}), encoding="utf-8")

    cache = SummaryCache(path)
    await cache.load()

    assert cache.keys() == ["good"]


@pytest.mark.asyncio
async def test_transcript_roundtrip_with_timestamp(tmp_path, clock):
    path = tmp_path / "transcripts.json"
    cache = TranscriptCache(path, ttl=60, clock=clock)
    await cache.load()

    await cache.set("vid1", "hello world")

    assert await cache.get("vid1") == "hello world"
    assert read_json(path) == {"vid1": {"transcript": "hello world", "timestamp": 1_000_000}}


@pytest.mark.asyncio
async def test_transcript_rejects_non_string(tmp_path, clock, log_messages):
    path = tmp_path / "transcripts.json"
    cache = TranscriptCache(path, clock=clock)
    await cache.load()
    await cache.set("vid1", "kept")
    before = path.read_text(encoding="utf-8")

    assert await cache.set("vid2", ["not", "a", "string"]) is False

    assert path.read_text(encoding="utf-8") == before
    assert "vid2" not in cache
    assert "Rejected transcript for vid2: expected str, got list" in log_messages


@pytest.mark.asyncio
async def test_transcript_expires_after_ttl(tmp_path, clock):
    path = tmp_path / "transcripts.json"
    cache = TranscriptCache(path, ttl=60, clock=clock)
    await cache.load()
    await cache.set("vid1", "hello")

    clock.advance(59)
    assert await cache.get("vid1") == "hello"

    clock.advance(2)
    assert await cache.get("vid1") is None
    assert read_json(path) == {}


@pytest.mark.asyncio
async def test_transcript_legacy_layouts_are_upgraded(tmp_path, clock):
    path = tmp_path / "transcripts.json"
    path.write_text(
        json.dumps({
            "plain": "bare string",
            "wrapped": {"data": "wrapped text", "timestamp": 999_000},
            "broken": {"transcript": 42, "timestamp": 999_000},
        }),
        encoding="utf-8",
    )

    cache = TranscriptCache(path, clock=clock)
    await cache.load()

    assert await cache.get("plain") == "bare string"
    assert await cache.get("wrapped") == "wrapped text"
    assert await cache.get("broken") is None


def make_video(video_id: str) -> VideoSummary:
    return VideoSummary(
        id=video_id,
        title=f"Video {video_id}",
        thumbnail="https://i.ytimg.com/vi/x/mqdefault.jpg",
        published_at="2024-01-02T03:04:05Z",
    )


@pytest.mark.asyncio
async def test_video_cache_roundtrip_and_expiry(tmp_path, clock):
    path = tmp_path / "videos.json"
    cache = VideoCache(path, ttl=3600, clock=clock)
    await cache.load()

    await cache.set("chan1", [make_video("a"), make_video("b")])

    stored = read_json(path)["chan1"]
    assert stored["timestamp"] == 1_000_000
    assert stored["videos"][0]["publishedAt"] == "2024-01-02T03:04:05Z"

    videos = await cache.get("chan1")
    assert [v.id for v in videos] == ["a", "b"]

    clock.advance(3601)
    assert await cache.get("chan1") is None


@pytest.mark.asyncio
async def test_video_cache_reads_legacy_list(tmp_path, clock):
    path = tmp_path / "videos.json"
    legacy = [make_video("a").model_dump(by_alias=True)]
    path.write_text(json.dumps({"chan1": legacy}), encoding="utf-8")

    cache = VideoCache(path, clock=clock)
    await cache.load()

    videos = await cache.get("chan1")
    assert [v.id for v in videos] == ["a"]
