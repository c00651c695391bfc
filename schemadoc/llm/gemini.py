"""
Gemini Client

Rate-limited client for the Gemini ``generateContent`` REST endpoint.

Every attempt passes through the owned RateLimiter. HTTP 429 is the
throttling signal: the client waits a fixed cooldown and retries up to the
configured attempt ceiling. Any other failure is raised immediately.
"""

import asyncio
import logging

import httpx
from pydantic import ValidationError

from schemadoc.config import Settings
from schemadoc.errors import GenerationError
from schemadoc.llm.models import GenerateContentRequest, GenerateContentResponse
from schemadoc.llm.rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

_ERROR_BODY_LIMIT = 500


class GeminiClient:
    """
    Gemini text-generation client.

    Usage:
        async with GeminiClient(settings) as client:
            text = await client.generate("Describe this schema ...")
    """

    def __init__(
        self,
        settings: Settings,
        rate_limiter: RateLimiter | None = None,
        http_client: httpx.AsyncClient | None = None,
    ):
        """
        Initialize Gemini client.

        Args:
            settings: Application settings (uses ``api`` and ``generation``)
            rate_limiter: Limiter shared by every attempt; built from settings if omitted
            http_client: Optional preconfigured client; closed only when owned

        Raises:
            ValueError: If no API key is configured
        """
        self.api_key = settings.api.require_api_key()
        self.model = settings.api.model
        self.base_url = settings.api.base_url
        self.temperature = settings.api.temperature
        self.cooldown_seconds = settings.generation.cooldown_seconds
        self.max_attempts = settings.generation.max_attempts

        self.rate_limiter = rate_limiter or RateLimiter.from_settings(settings.generation)
        self._owns_client = http_client is None
        self.client = http_client or httpx.AsyncClient(timeout=settings.api.timeout)

        logger.info(
            f"Gemini client initialized with model: {self.model}",
            extra={"model": self.model, "max_attempts": self.max_attempts},
        )

    @property
    def endpoint(self) -> str:
        return f"{self.base_url}/{self.model}:generateContent"

    async def generate(self, prompt: str) -> str:
        """
        Generate text for one prompt.

        Returns:
            Text of the first candidate's first part

        Raises:
            GenerationError: On throttling past the retry ceiling, a non-2xx
                status, a transport failure or an unexpected response shape
        """
        payload = GenerateContentRequest.for_prompt(prompt, self.temperature).to_payload()

        for attempt in range(1, self.max_attempts + 1):
            async with self.rate_limiter.slot():
                try:
                    response = await self.client.post(
                        self.endpoint,
                        params={"key": self.api_key},
                        json=payload,
                    )
                except httpx.HTTPError as exc:
                    logger.error(f"Gemini request failed: {exc.__class__.__name__}: {exc}")
                    raise GenerationError(
                        f"Gemini request failed: {exc.__class__.__name__}: {exc}"
                    ) from exc

            if response.status_code == 429:
                logger.warning(
                    f"Gemini throttled the request ({attempt}/{self.max_attempts}), "
                    f"cooling down for {self.cooldown_seconds}s",
                    extra={
                        "attempt": attempt,
                        "max_attempts": self.max_attempts,
                        "body": response.text[:_ERROR_BODY_LIMIT],
                    },
                )
                if attempt < self.max_attempts:
                    await self._sleep(self.cooldown_seconds)
                continue

            if not response.is_success:
                body = response.text[:_ERROR_BODY_LIMIT]
                logger.error(f"Gemini request failed with HTTP {response.status_code}: {body}")
                raise GenerationError(
                    f"Gemini request failed with HTTP {response.status_code}: {body}"
                )

            text = self._parse_response(response)
            logger.debug(
                f"Gemini response received ({len(text)} chars)",
                extra={"attempt": attempt, "prompt_chars": len(prompt), "response_chars": len(text)},
            )
            return text

        raise GenerationError(
            f"Gemini request still throttled after {self.max_attempts} attempts "
            f"(retry ceiling of {self.max_attempts} reached)"
        )

    def _parse_response(self, response: httpx.Response) -> str:
        try:
            decoded = GenerateContentResponse.model_validate_json(response.content)
        except ValidationError as exc:
            raise GenerationError(
                f"Gemini response shape unexpected: {exc.error_count()} validation error(s)"
            ) from exc
        return decoded.text

    async def _sleep(self, seconds: float) -> None:
        await asyncio.sleep(seconds)

    async def close(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    async def __aenter__(self) -> "GeminiClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.close()
