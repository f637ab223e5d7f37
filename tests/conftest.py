"""
Shared pytest fixtures and configuration.
"""
import asyncio

import pytest
from unittest.mock import AsyncMock
from loguru import logger

from tubeblog.main import app
from tubeblog.api.dependencies import (
    get_summarization_service,
    get_transcript_service,
    get_video_service,
    get_youtube_service,
)


class FakeClock:
    """Manually advanced clock, usable as a timer and as an async sleep."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds

    async def sleep(self, seconds: float) -> None:
        self.now += seconds
        await asyncio.sleep(0)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def log_messages():
    """Collect loguru messages emitted during a test."""
    messages = []
    handler_id = logger.add(lambda m: messages.append(m.record["message"]), level="DEBUG")
    yield messages
    logger.remove(handler_id)


@pytest.fixture
def mock_video_service():
    return AsyncMock()


@pytest.fixture
def mock_transcript_service():
    return AsyncMock()


@pytest.fixture
def mock_summarization_service():
    return AsyncMock()


@pytest.fixture
def mock_youtube_service():
    return AsyncMock()


@pytest.fixture
def override_dependencies(
    mock_video_service,
    mock_transcript_service,
    mock_summarization_service,
    mock_youtube_service,
):
    """Override FastAPI dependencies for testing."""
    app.dependency_overrides[get_video_service] = lambda: mock_video_service
    app.dependency_overrides[get_transcript_service] = lambda: mock_transcript_service
    app.dependency_overrides[get_summarization_service] = lambda: mock_summarization_service
    app.dependency_overrides[get_youtube_service] = lambda: mock_youtube_service

    yield

    # Clean up
    app.dependency_overrides.clear()
