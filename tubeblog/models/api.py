"""
Pydantic models for API request/response schemas.

Response fields are camelCase on the wire to match the front-end contract.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from tubeblog.models.youtube import VideoSummary


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VideoDetailsResponse(CamelModel):
    """Metadata, transcript and summary of one video."""

    id: str
    title: str
    description: str
    thumbnail: Optional[str] = None
    published_at: Optional[str] = None
    transcript: str = ""
    summary: str = ""
    error: Optional[str] = None


class TranscriptResponse(CamelModel):
    transcript: str


class TranscriptDetailResponse(CamelModel):
    transcript: str
    language: Optional[str] = None
    total_captions: Optional[int] = None


class TranscriptErrorResponse(CamelModel):
    error: str
    details: str
    available_languages: Optional[List[str]] = None
    suggestions: Optional[List[str]] = None


class ChannelVideosResponse(CamelModel):
    videos: List[VideoSummary]


class SummarizeRequest(BaseModel):
    """Request model for ad-hoc transcript summarization."""

    transcript: str

    model_config = ConfigDict(extra="forbid")

    @field_validator("transcript")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Transcript is required")
        return v


class SummaryResponse(CamelModel):
    summary: str
    provider: Optional[str] = None


class CacheClearedResponse(CamelModel):
    message: str
    cleared: dict[str, bool] = {}
