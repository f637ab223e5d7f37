from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

# --- Internal Parsing Models (YouTube Data API v3) ---

class ApiThumbnail(BaseModel):
    url: Optional[str] = None

    model_config = ConfigDict(extra='ignore')

class ApiThumbnails(BaseModel):
    default: Optional[ApiThumbnail] = None
    medium: Optional[ApiThumbnail] = None
    high: Optional[ApiThumbnail] = None

    model_config = ConfigDict(extra='ignore')

    @property
    def best_url(self) -> Optional[str]:
        """Medium thumbnail, falling back to the default one."""
        for thumb in (self.medium, self.default):
            if thumb and thumb.url:
                return thumb.url
        return None

class ApiSnippet(BaseModel):
    title: str = ""
    description: str = ""
    published_at: Optional[str] = Field(default=None, alias="publishedAt")
    thumbnails: ApiThumbnails = Field(default_factory=ApiThumbnails)

    model_config = ConfigDict(extra='ignore', populate_by_name=True)

class ApiVideoItem(BaseModel):
    id: str
    snippet: ApiSnippet = Field(default_factory=ApiSnippet)

    model_config = ConfigDict(extra='ignore')

class ApiSearchId(BaseModel):
    video_id: Optional[str] = Field(default=None, alias="videoId")

    model_config = ConfigDict(extra='ignore', populate_by_name=True)

class ApiSearchItem(BaseModel):
    id: ApiSearchId = Field(default_factory=ApiSearchId)
    snippet: ApiSnippet = Field(default_factory=ApiSnippet)

    model_config = ConfigDict(extra='ignore')

class ApiVideoListResponse(BaseModel):
    items: List[ApiVideoItem] = Field(default_factory=list)

    model_config = ConfigDict(extra='ignore')

class ApiSearchListResponse(BaseModel):
    items: List[ApiSearchItem] = Field(default_factory=list)

    model_config = ConfigDict(extra='ignore')

# --- Core Data Models ---

class CaptionCue(BaseModel):
    text: str
    start: float = 0.0
    duration: float = 0.0

    model_config = ConfigDict(frozen=True)

class VideoSummary(BaseModel):
    """One entry of a channel's video list, replaced wholesale on refresh."""
    id: str
    title: str = ""
    thumbnail: Optional[str] = None
    published_at: Optional[str] = None

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

class VideoMetadata(BaseModel):
    id: str
    title: str = ""
    description: str = ""
    thumbnail: Optional[str] = None
    published_at: Optional[str] = None

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)
