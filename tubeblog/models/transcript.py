"""
Transcript records and the tagged results of transcript acquisition.
"""
from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictStr

from tubeblog.models.youtube import CaptionCue


class TranscriptRecord(BaseModel):
    """Persisted transcript; ``timestamp`` is milliseconds since the epoch."""

    transcript: StrictStr
    timestamp: int

    model_config = ConfigDict(frozen=True)


# --- Outcome of one language attempt ---

class CaptionsFetched(BaseModel):
    status: Literal["fetched"] = "fetched"
    language: str
    cues: List[CaptionCue]

    @property
    def text(self) -> str:
        """Cue texts joined by single spaces; cue timing is dropped."""
        return " ".join(cue.text for cue in self.cues)


class CaptionsEmpty(BaseModel):
    status: Literal["empty"] = "empty"
    language: str


class CaptionsFailed(BaseModel):
    status: Literal["failed"] = "failed"
    language: str
    error: str


LanguageAttempt = Union[CaptionsFetched, CaptionsEmpty, CaptionsFailed]


# --- Outcome of a whole acquisition request ---

class TranscriptFetched(BaseModel):
    status: Literal["fetched"] = "fetched"
    video_id: str
    transcript: str
    language: Optional[str] = None
    total_captions: Optional[int] = None
    from_cache: bool = False

    model_config = ConfigDict(frozen=True)


class TranscriptUnavailable(BaseModel):
    status: Literal["unavailable"] = "unavailable"
    video_id: str
    transcript: str = ""
    error: str
    errors: List[str] = Field(default_factory=list)
    available_languages: List[str] = Field(default_factory=list)
    suggestions: List[str] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True)

    @property
    def details(self) -> str:
        return ", ".join(self.errors)


TranscriptResult = Union[TranscriptFetched, TranscriptUnavailable]
