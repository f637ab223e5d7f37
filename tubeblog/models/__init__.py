from .youtube import (
    ApiSearchListResponse,
    ApiVideoListResponse,
    CaptionCue,
    VideoMetadata,
    VideoSummary,
)
from .transcript import (
    CaptionsEmpty,
    CaptionsFailed,
    CaptionsFetched,
    LanguageAttempt,
    TranscriptFetched,
    TranscriptRecord,
    TranscriptResult,
    TranscriptUnavailable,
)
from .api import (
    CacheClearedResponse,
    ChannelVideosResponse,
    SummarizeRequest,
    SummaryResponse,
    TranscriptDetailResponse,
    TranscriptErrorResponse,
    TranscriptResponse,
    VideoDetailsResponse,
)
from .enums import LLMProviderType, LLMRole, language_name
