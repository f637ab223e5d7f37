"""
Application errors and their RFC 7807 rendering.

Every error the API reports on purpose derives from :class:`AppException`;
subclasses fix the HTTP status, problem type and title, callers only supply
the human readable detail.
"""
from typing import Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict

PROBLEM_BASE_URL = "https://problems.tubeblog.dev"


class ErrorResponse(BaseModel):
    """RFC 7807 Problem Details response model."""
    type: str
    title: str
    status: int
    detail: str
    instance: Optional[str] = None

    model_config = ConfigDict(frozen=True)


class AppException(Exception):
    """Base application exception."""

    status_code: int = 500
    error_type: str = f"{PROBLEM_BASE_URL}/internal-error"
    title: str = "Internal Server Error"

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(detail)


class NotFoundError(AppException):
    """A video (or other resource) does not exist upstream."""

    status_code = 404
    error_type = f"{PROBLEM_BASE_URL}/not-found"
    title = "Resource Not Found"

    def __init__(self, resource: str, resource_id: str):
        super().__init__(f"{resource} with id '{resource_id}' was not found.")


class RateLimitError(AppException):
    status_code = 429
    error_type = f"{PROBLEM_BASE_URL}/rate-limit-exceeded"
    title = "Too Many Requests"

    def __init__(self, detail: str = "Rate limit exceeded. Please try again later."):
        super().__init__(detail)


class InternalServerError(AppException):
    def __init__(self, detail: str = "An unexpected error occurred."):
        super().__init__(detail)


class UpstreamServiceError(AppException):
    """The YouTube Data API failed or is not configured."""

    status_code = 502
    error_type = f"{PROBLEM_BASE_URL}/upstream-error"
    title = "Upstream Service Error"

    def __init__(self, service: str, detail: str):
        self.service = service
        super().__init__(f"{service}: {detail}")


class ProviderError(InternalServerError):
    """A summary provider failed for a reason other than its rate limit."""

    error_type = f"{PROBLEM_BASE_URL}/summary-provider-error"

    def __init__(self, provider: str, detail: str):
        self.provider = provider
        super().__init__(f"{provider} API error: {detail}")


class InvalidProviderResponseError(ProviderError):
    """A summary provider answered without usable completion content."""

    def __init__(self, provider: str):
        super().__init__(provider, f"Invalid response structure from {provider}")


class ProviderRateLimitError(RateLimitError):
    """
    A summary provider rejected the call because of its quota.

    Raised by providers so the summarization service can fall through to the
    next provider instead of failing the request.
    """

    def __init__(self, provider: str, detail: str = "rate limit reached"):
        self.provider = provider
        super().__init__(f"{provider} {detail}")


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Render an AppException as ``application/problem+json``."""
    error = ErrorResponse(
        type=exc.error_type,
        title=exc.title,
        status=exc.status_code,
        detail=exc.detail,
        instance=str(request.url.path),
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=error.model_dump(),
        media_type="application/problem+json",
    )
