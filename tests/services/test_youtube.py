import httpx
import pytest
import pytest_asyncio
from tenacity import wait_none

from tubeblog.core.cache import MemoryCache
from tubeblog.core.constants import YouTubeConfig
from tubeblog.core.exceptions import NotFoundError, UpstreamServiceError
from tubeblog.repositories.videos import VideoCache
from tubeblog.services.youtube import YouTubeService

VIDEO_RESPONSE = {
    "items": [
        {
            "id": "vid1",
            "snippet": {
                "title": "Market outlook",
                "description": "Weekly update",
                "publishedAt": "2024-03-01T10:00:00Z",
                "thumbnails": {
                    "default": {"url": "https://i.ytimg.com/vi/vid1/default.jpg"},
                    "medium": {"url": "https://i.ytimg.com/vi/vid1/mqdefault.jpg"},
                },
            },
        }
    ]
}

SEARCH_RESPONSE = {
    "items": [
        {
            "id": {"kind": "youtube#video", "videoId": "new"},
            "snippet": {
                "title": "Newest",
                "publishedAt": "2024-03-02T10:00:00Z",
                "thumbnails": {"default": {"url": "https://i.ytimg.com/vi/new/default.jpg"}},
            },
        },
        {
            "id": {"kind": "youtube#video", "videoId": "old"},
            "snippet": {"title": "Older", "publishedAt": "2024-02-01T10:00:00Z"},
        },
    ]
}


class FakeYouTubeApi:
    """Records requests and answers with canned JSON per endpoint."""

    def __init__(self):
        self.requests = []
        self.responses = {"/youtube/v3/videos": (200, VIDEO_RESPONSE), "/youtube/v3/search": (200, SEARCH_RESPONSE)}

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        status_code, body = self.responses[request.url.path]
        return httpx.Response(status_code, json=body)


@pytest.fixture
def fake_api():
    return FakeYouTubeApi()


@pytest_asyncio.fixture
async def video_cache(tmp_path, clock):
    cache = VideoCache(tmp_path / "videos.json", clock=clock)
    await cache.load()
    return cache


@pytest_asyncio.fixture
async def youtube_service(fake_api, video_cache, clock):
    client = httpx.AsyncClient(
        base_url=YouTubeConfig.API_BASE_URL, transport=httpx.MockTransport(fake_api)
    )
    service = YouTubeService(
        api_key="test-key",
        memory_cache=MemoryCache(default_ttl=3600, timer=clock),
        video_cache=video_cache,
        client=client,
        max_results=2,
    )
    yield service
    await service.aclose()


@pytest.mark.asyncio
async def test_video_metadata_is_parsed_and_memoised(youtube_service, fake_api):
    metadata = await youtube_service.get_video_metadata("vid1")
    again = await youtube_service.get_video_metadata("vid1")

    assert metadata.title == "Market outlook"
    assert metadata.description == "Weekly update"
    assert metadata.thumbnail == "https://i.ytimg.com/vi/vid1/mqdefault.jpg"
    assert metadata.published_at == "2024-03-01T10:00:00Z"
    assert again == metadata
    assert len(fake_api.requests) == 1

    params = fake_api.requests[0].url.params
    assert params["part"] == "snippet"
    assert params["id"] == "vid1"
    assert params["key"] == "test-key"


@pytest.mark.asyncio
async def test_unknown_video_raises_not_found(youtube_service, fake_api):
    fake_api.responses["/youtube/v3/videos"] = (200, {"items": []})

    with pytest.raises(NotFoundError):
        await youtube_service.get_video_metadata("missing")


@pytest.mark.asyncio
async def test_quota_error_is_upstream_error(youtube_service, fake_api):
    fake_api.responses["/youtube/v3/videos"] = (403, {"error": {"code": 403}})

    with pytest.raises(UpstreamServiceError) as exc_info:
        await youtube_service.get_video_metadata("vid1")

    assert exc_info.value.status_code == 502
    assert len(fake_api.requests) == 1


@pytest.mark.asyncio
async def test_missing_api_key_is_upstream_error(youtube_service, fake_api):
    youtube_service.api_key = None

    with pytest.raises(UpstreamServiceError, match="API key is not configured"):
        await youtube_service.get_video_metadata("vid1")

    assert fake_api.requests == []


@pytest.mark.asyncio
async def test_channel_videos_are_listed_and_cached(youtube_service, fake_api, video_cache):
    videos = await youtube_service.list_channel_videos("chan1")

    assert [v.id for v in videos] == ["new", "old"]
    assert videos[0].thumbnail == "https://i.ytimg.com/vi/new/default.jpg"
    assert videos[1].thumbnail is None

    params = fake_api.requests[0].url.params
    assert params["channelId"] == "chan1"
    assert params["order"] == "date"
    assert params["maxResults"] == "2"

    cached = await youtube_service.list_channel_videos("chan1")
    assert cached == videos
    assert len(fake_api.requests) == 1
    assert "chan1" in video_cache


@pytest.mark.asyncio
async def test_refresh_bypasses_channel_cache(youtube_service, fake_api):
    await youtube_service.list_channel_videos("chan1")
    fake_api.responses["/youtube/v3/search"] = (200, {"items": SEARCH_RESPONSE["items"][:1]})

    videos = await youtube_service.list_channel_videos("chan1", refresh=True)

    assert [v.id for v in videos] == ["new"]
    assert len(fake_api.requests) == 2


@pytest.mark.asyncio
async def test_expired_channel_cache_is_refetched(youtube_service, fake_api, clock):
    await youtube_service.list_channel_videos("chan1")
    clock.advance(3601)

    await youtube_service.list_channel_videos("chan1")

    assert len(fake_api.requests) == 2


def make_service(handler, video_cache, clock):
    client = httpx.AsyncClient(
        base_url=YouTubeConfig.API_BASE_URL, transport=httpx.MockTransport(handler)
    )
    return YouTubeService(
        api_key="test-key",
        memory_cache=MemoryCache(timer=clock),
        video_cache=video_cache,
        client=client,
    )


@pytest.mark.asyncio
async def test_network_failure_becomes_upstream_error(video_cache, clock, monkeypatch):
    monkeypatch.setattr(YouTubeService._request.retry, "wait", wait_none())
    attempts = []

    def refuse(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        raise httpx.ConnectError("connection refused", request=request)

    service = make_service(refuse, video_cache, clock)
    try:
        with pytest.raises(UpstreamServiceError) as exc_info:
            await service.get_video_metadata("vid1")
    finally:
        await service.aclose()

    assert exc_info.value.status_code == 502
    assert "ConnectError" in exc_info.value.detail
    assert len(attempts) == YouTubeConfig.RETRY_ATTEMPTS


@pytest.mark.asyncio
async def test_transient_network_failure_is_retried(video_cache, clock, monkeypatch):
    monkeypatch.setattr(YouTubeService._request.retry, "wait", wait_none())
    attempts = []

    def flaky(request: httpx.Request) -> httpx.Response:
        attempts.append(request)
        if len(attempts) == 1:
            raise httpx.ReadTimeout("timed out", request=request)
        return httpx.Response(200, json=VIDEO_RESPONSE)

    service = make_service(flaky, video_cache, clock)
    try:
        metadata = await service.get_video_metadata("vid1")
    finally:
        await service.aclose()

    assert metadata.title == "Market outlook"
    assert len(attempts) == 2


@pytest.mark.asyncio
async def test_non_json_body_becomes_upstream_error(video_cache, clock):
    service = make_service(
        lambda request: httpx.Response(200, text="<html>maintenance</html>"), video_cache, clock
    )
    try:
        with pytest.raises(UpstreamServiceError, match="invalid JSON"):
            await service.list_channel_videos("chan1")
    finally:
        await service.aclose()
