"""
OpenAI-SDK based implementations of LLMProvider.

Azure OpenAI, OpenRouter and Groq all speak the OpenAI chat completions
protocol, so they share one request path and differ only in client
construction.
"""
from typing import Optional

import openai
from openai import AsyncAzureOpenAI, AsyncOpenAI
from loguru import logger

from tubeblog.core.exceptions import ProviderError, ProviderRateLimitError
from tubeblog.core.providers.llm_provider import (
    LLMMessage,
    LLMProvider,
    LLMResponse,
    completion_content,
    completion_usage,
    looks_rate_limited,
)

OPENROUTER_BASE_URL = "https://openrouter.ai/api/v1"
OPENROUTER_APP_TITLE = "Blog Automator Wizard"


class OpenAICompatibleProvider(LLMProvider):
    """
    Chat completions over an ``AsyncOpenAI``-style client.

    ``sdk`` is the module whose error classes the client raises; the groq SDK
    mirrors the openai one.
    """

    sdk = openai
    # Azure's newer API versions only accept max_completion_tokens
    token_limit_param = "max_tokens"

    def __init__(self, client: AsyncOpenAI, model_name: str):
        self.client = client
        self.model_name = model_name

    async def generate_text(
        self,
        messages: list[LLMMessage],
        temperature: float = 0.7,
        max_tokens: Optional[int] = None,
    ) -> LLMResponse:
        """Generate text completion through the chat completions endpoint."""
        payload = [{"role": msg.role.value, "content": msg.content} for msg in messages]
        options = {}
        if max_tokens is not None:
            options[self.token_limit_param] = max_tokens

        logger.info(f"Sending request to {self.name} ({self.model_name})")
        try:
            response = await self.client.chat.completions.create(
                model=self.model_name,
                messages=payload,
                temperature=temperature,
                **options,
            )
        except self.sdk.RateLimitError as e:
            raise ProviderRateLimitError(self.name) from e
        except self.sdk.APIStatusError as e:
            if e.status_code == 429 or looks_rate_limited(e):
                raise ProviderRateLimitError(self.name) from e
            raise ProviderError(self.name, e.message) from e
        except self.sdk.APIError as e:
            if looks_rate_limited(e):
                raise ProviderRateLimitError(self.name) from e
            raise ProviderError(self.name, str(e)) from e

        content = completion_content(self.name, response)
        usage = completion_usage(response)
        if usage:
            logger.debug(f"{self.name} token usage: {usage}")
        logger.info(f"Received response from {self.name}")

        return LLMResponse(
            content=content,
            model=self.model_name,
            provider=self.name,
            usage=usage,
        )


class AzureOpenAIProvider(OpenAICompatibleProvider):
    """
    Azure OpenAI deployment.

    Example:
        provider = AzureOpenAIProvider(
            api_key="...",
            endpoint="https://my-resource.openai.azure.com",
            deployment="gpt-4o-mini",
        )
    """

    name = "Azure OpenAI"
    token_limit_param = "max_completion_tokens"

    def __init__(
        self,
        api_key: str,
        endpoint: str,
        deployment: str,
        api_version: str = "2024-12-01-preview",
    ):
        client = AsyncAzureOpenAI(
            api_key=api_key,
            azure_endpoint=endpoint,
            api_version=api_version,
        )
        super().__init__(client=client, model_name=deployment)


class OpenRouterProvider(OpenAICompatibleProvider):
    """OpenRouter gateway, addressed through the OpenAI SDK."""

    name = "OpenRouter"

    def __init__(
        self,
        api_key: str,
        model_name: str = "mistralai/mixtral-8x7b-instruct",
        app_url: str = "http://localhost:3005",
    ):
        client = AsyncOpenAI(
            api_key=api_key,
            base_url=OPENROUTER_BASE_URL,
            default_headers={
                "HTTP-Referer": app_url,
                "X-Title": OPENROUTER_APP_TITLE,
            },
        )
        super().__init__(client=client, model_name=model_name)
