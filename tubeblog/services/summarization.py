"""
Blog summary generation with rate limiting and provider fallback.

The service holds an ordered pair of providers, each behind its own
``RequestLimiter``:

1. **Primary** (quota-limited, e.g. Azure OpenAI): reservoir limiter. A
   rate-limit refusal is a soft failure that hands the request to the fallback.
   Any other primary error fails the request.
2. **Fallback** (e.g. OpenRouter): spacing-only limiter. Its errors always
   propagate.

Responses are validated by the providers; an unusable response is an error,
never an empty summary. Caching is the caller's job: this service is only
invoked on a summary cache miss.
"""
from dataclasses import dataclass
from typing import Optional

from loguru import logger

from tubeblog.core.constants import SummaryConfig
from tubeblog.core.exceptions import InternalServerError, ProviderRateLimitError
from tubeblog.core.prompts import SummaryPrompts
from tubeblog.core.providers.llm_provider import LLMMessage, LLMProvider, LLMResponse
from tubeblog.core.rate_limit import RequestLimiter
from tubeblog.models.enums import LLMRole


@dataclass(frozen=True)
class ProviderSlot:
    """A provider with the limiter and prompt it is used with."""

    provider: LLMProvider
    limiter: RequestLimiter
    system_prompt: str
    user_prompt: str
    max_tokens: int

    def build_messages(self, transcript: str) -> list[LLMMessage]:
        return [
            LLMMessage(role=LLMRole.SYSTEM, content=self.system_prompt),
            LLMMessage(
                role=LLMRole.USER,
                content=self.user_prompt.format(transcript=transcript),
            ),
        ]


class SummarizationService:
    """
    Turns a transcript into a blog-style summary.

    Attributes:
        primary: Quota-limited provider slot, or None when not configured.
        fallback: Provider slot used when the primary is disabled or rate limited.
        use_primary: Configuration switch; when False only the fallback is used.
    """

    def __init__(
        self,
        primary: Optional[ProviderSlot],
        fallback: Optional[ProviderSlot],
        use_primary: bool = True,
    ):
        self.primary = primary
        self.fallback = fallback
        self.use_primary = use_primary

    @classmethod
    def from_providers(
        cls,
        primary: Optional[LLMProvider],
        fallback: Optional[LLMProvider],
        primary_limiter: RequestLimiter,
        fallback_limiter: RequestLimiter,
        use_primary: bool = True,
    ) -> "SummarizationService":
        """Wire providers to their limiters and prompts."""
        primary_slot = None
        if primary is not None:
            primary_slot = ProviderSlot(
                provider=primary,
                limiter=primary_limiter,
                system_prompt=SummaryPrompts.FINANCE_SYSTEM,
                user_prompt=SummaryPrompts.FINANCE_USER,
                max_tokens=SummaryConfig.PRIMARY_MAX_TOKENS,
            )
        fallback_slot = None
        if fallback is not None:
            fallback_slot = ProviderSlot(
                provider=fallback,
                limiter=fallback_limiter,
                system_prompt=SummaryPrompts.GENERAL_SYSTEM,
                user_prompt=SummaryPrompts.GENERAL_USER,
                max_tokens=SummaryConfig.FALLBACK_MAX_TOKENS,
            )
        return cls(primary=primary_slot, fallback=fallback_slot, use_primary=use_primary)

    async def _generate(self, slot: ProviderSlot, transcript: str) -> LLMResponse:
        if slot.limiter.queued:
            logger.info(
                f"Waiting for {slot.provider.name} rate limit "
                f"({slot.limiter.queued} request(s) queued)"
            )
        return await slot.limiter.schedule(
            slot.provider.generate_text,
            messages=slot.build_messages(transcript),
            temperature=SummaryConfig.TEMPERATURE,
            max_tokens=slot.max_tokens,
        )

    async def generate_summary(self, transcript: str) -> LLMResponse:
        """
        Generate a blog summary for ``transcript``.

        Args:
            transcript: Plain transcript text.

        Returns:
            The provider response; ``content`` holds the summary markdown.

        Raises:
            ProviderRateLimitError: The fallback (or the only provider) is rate limited.
            ProviderError: A provider failed or answered with an invalid structure.
            InternalServerError: No provider is configured.
        """
        if self.use_primary and self.primary is not None:
            try:
                response = await self._generate(self.primary, transcript)
                logger.info(f"Summary generated by {response.provider}")
                return response
            except ProviderRateLimitError as e:
                if self.fallback is None:
                    raise
                logger.warning(
                    f"{e.provider} rate limit reached, falling back to {self.fallback.provider.name}"
                )

        if self.fallback is None:
            raise InternalServerError("No summary provider is configured")

        response = await self._generate(self.fallback, transcript)
        logger.info(f"Summary generated by {response.provider}")
        return response
