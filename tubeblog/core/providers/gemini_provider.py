"""
Google Gemini implementation of LLMProvider.
"""
from typing import Any, Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
from loguru import logger

from tubeblog.core.exceptions import (
    InvalidProviderResponseError,
    ProviderError,
    ProviderRateLimitError,
)
from tubeblog.core.providers.llm_provider import (
    LLMProvider,
    LLMMessage,
    LLMResponse,
    looks_rate_limited,
)
from tubeblog.models.enums import LLMRole


class GeminiProvider(LLMProvider):
    """
    Gemini through the google-generativeai SDK.

    System messages become the model's ``system_instruction``; user and
    assistant turns are sent as ``user`` / ``model`` contents.

    Example:
        provider = GeminiProvider(api_key="...", model_name="gemini-2.5-flash")
        response = await provider.generate_text(messages)
    """

    name = "Gemini"

    def __init__(self, api_key: str, model_name: str = "gemini-2.5-flash"):
        genai.configure(api_key=api_key)
        self.model_name = model_name

    @staticmethod
    def _split_messages(messages: list[LLMMessage]) -> tuple[Optional[str], list[dict[str, Any]]]:
        system_parts = []
        contents = []
        for msg in messages:
            if msg.role == LLMRole.SYSTEM:
                system_parts.append(msg.content)
            else:
                role = "model" if msg.role == LLMRole.ASSISTANT else "user"
                contents.append({"role": role, "parts": [msg.content]})
        return ("\n\n".join(system_parts) or None), contents

    async def generate_text(
        self,
        messages: list[LLMMessage],
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        system_instruction, contents = self._split_messages(messages)
        model = genai.GenerativeModel(self.model_name, system_instruction=system_instruction)
        config = genai.GenerationConfig(temperature=temperature, max_output_tokens=max_tokens)

        logger.info(f"Sending request to Gemini ({self.model_name})")
        try:
            response = await model.generate_content_async(contents, generation_config=config)
        except google_exceptions.ResourceExhausted as e:
            raise ProviderRateLimitError(self.name) from e
        except google_exceptions.GoogleAPIError as e:
            if looks_rate_limited(e):
                raise ProviderRateLimitError(self.name) from e
            raise ProviderError(self.name, str(e)) from e

        # .text raises ValueError when the candidate was blocked or empty
        try:
            content = response.text
        except ValueError as e:
            raise InvalidProviderResponseError(self.name) from e
        if not content or not content.strip():
            raise InvalidProviderResponseError(self.name)

        usage = None
        metadata = response.usage_metadata
        if metadata:
            usage = {
                "prompt_tokens": metadata.prompt_token_count,
                "completion_tokens": metadata.candidates_token_count,
                "total_tokens": metadata.total_token_count,
            }
            logger.debug(f"Gemini token usage: {usage}")

        return LLMResponse(
            content=content,
            model=self.model_name,
            provider=self.name,
            usage=usage,
        )
