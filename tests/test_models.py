"""
Unit tests for Pydantic models.
"""
import pytest
from pydantic import ValidationError

from tubeblog.core.config import Settings
from tubeblog.models import (
    ApiSearchListResponse,
    ApiVideoListResponse,
    CaptionCue,
    CaptionsFetched,
    SummarizeRequest,
    TranscriptRecord,
    TranscriptUnavailable,
    VideoSummary,
    language_name,
)


def test_captions_text_joins_cues_with_spaces():
    """Test that cue texts are joined by single spaces, timing dropped."""
    attempt = CaptionsFetched(
        language="en",
        cues=[
            CaptionCue(text="Hello", start=0.0, duration=1.0),
            CaptionCue(text="World", start=1.0, duration=1.0),
        ],
    )
    assert attempt.text == "Hello World"


def test_caption_cue_immutable():
    """Test that CaptionCue is immutable (frozen)."""
    cue = CaptionCue(text="Hello", start=0.0, duration=1.0)
    with pytest.raises(ValidationError):
        cue.text = "Changed"


def test_transcript_record_requires_string():
    with pytest.raises(ValidationError):
        TranscriptRecord(transcript=123, timestamp=0)


def test_unavailable_details_join_errors():
    result = TranscriptUnavailable(
        video_id="vid1", error="No transcript available", errors=["English: a", "Hindi: b"]
    )
    assert result.transcript == ""
    assert result.details == "English: a, Hindi: b"


def test_video_summary_accepts_both_field_names():
    by_alias = VideoSummary.model_validate({"id": "a", "publishedAt": "2024-01-01T00:00:00Z"})
    by_name = VideoSummary(id="a", published_at="2024-01-01T00:00:00Z")
    assert by_alias == by_name
    assert by_name.model_dump(by_alias=True)["publishedAt"] == "2024-01-01T00:00:00Z"


def test_api_video_list_prefers_medium_thumbnail():
    data = ApiVideoListResponse.model_validate({
        "kind": "youtube#videoListResponse",
        "items": [{
            "id": "vid1",
            "snippet": {
                "title": "T",
                "publishedAt": "2024-01-01T00:00:00Z",
                "thumbnails": {
                    "default": {"url": "d.jpg", "width": 120},
                    "medium": {"url": "m.jpg", "width": 320},
                },
            },
        }],
    })
    snippet = data.items[0].snippet
    assert snippet.thumbnails.best_url == "m.jpg"
    assert snippet.published_at == "2024-01-01T00:00:00Z"
    assert snippet.description == ""


def test_api_search_items_without_video_id():
    data = ApiSearchListResponse.model_validate({
        "items": [{"id": {"kind": "youtube#channel", "channelId": "c"}, "snippet": {}}],
    })
    assert data.items[0].id.video_id is None
    assert data.items[0].snippet.thumbnails.best_url is None


def test_summarize_request_rejects_blank_transcript():
    with pytest.raises(ValidationError, match="Transcript is required"):
        SummarizeRequest(transcript=" \n ")


def test_language_name_falls_back_to_code():
    assert language_name("hi") == "Hindi"
    assert language_name("xx") == "xx"


def test_settings_split_comma_separated_values():
    settings = Settings(
        _env_file=None,
        TRANSCRIPT_LANGUAGES="en, de ,fr",
        BACKEND_CORS_ORIGINS="http://a.test,http://b.test",
    )
    assert settings.TRANSCRIPT_LANGUAGES == ["en", "de", "fr"]
    assert settings.BACKEND_CORS_ORIGINS == ["http://a.test", "http://b.test"]
