# codehire/core/llm_client.py
import logging
from typing import Protocol

import groq

from codehire.core.config import Settings
from codehire.core.errors import AppError, ServiceUnavailableError

logger = logging.getLogger(__name__)


class AnalysisProvider(Protocol):
    """Anything that turns a prompt pair into raw model text."""

    def complete(self, system_prompt: str, user_prompt: str, temperature: float = 0.3) -> str:
        ...


class ProviderAuthError(AppError):
    status_code = 401
    message = "Invalid API key. Please check your GROQ_API_KEY configuration."


class ProviderRateLimitError(AppError):
    status_code = 429
    message = "Rate limit exceeded. Please try again later."


class GroqAnalysisProvider:
    """
    Chat-completion provider backed by the Groq SDK.

    The client is created lazily on first use; without GROQ_API_KEY the
    tools answer 503 instead of failing at startup.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str,
        max_tokens: int = 4096,
        expose_errors: bool = False,
    ):
        self.api_key = api_key
        self.model = model
        self.max_tokens = max_tokens
        self.expose_errors = expose_errors
        self._client = None

    @classmethod
    def from_settings(cls, settings: Settings) -> "GroqAnalysisProvider":
        return cls(
            api_key=settings.GROQ_API_KEY,
            model=settings.GROQ_MODEL,
            expose_errors=not settings.is_production,
        )

    def _get_client(self):
        if self._client is None:
            if not self.api_key:
                logger.warning("GROQ_API_KEY not set; analysis tools are unavailable")
                raise ServiceUnavailableError("Analysis provider is not configured")
            logger.info("Initializing Groq client...")
            self._client = groq.Groq(api_key=self.api_key)
        return self._client

    def complete(self, system_prompt: str, user_prompt: str, temperature: float = 0.3) -> str:
        client = self._get_client()
        try:
            completion = client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=temperature,
                max_tokens=self.max_tokens,
            )
        except groq.AuthenticationError:
            logger.error("Groq rejected the API key")
            raise ProviderAuthError()
        except groq.RateLimitError:
            logger.warning("Groq rate limit hit")
            raise ProviderRateLimitError()
        except groq.APIError as exc:
            logger.error("Groq request failed: %s", exc)
            # AppError falls back to the generic message
            raise AppError(str(exc) if self.expose_errors else None)

        if not completion.choices:
            return ""
        return completion.choices[0].message.content or ""
