"""
LLM Module

Rate-limited client for the Gemini generateContent endpoint.

Usage:
    from schemadoc.llm import GeminiClient

    async with GeminiClient(settings) as client:
        text = await client.generate(prompt)
"""

from schemadoc.llm.gemini import GeminiClient
from schemadoc.llm.models import GenerateContentRequest, GenerateContentResponse
from schemadoc.llm.rate_limiter import RateLimiter, RateWindow

__all__ = [
    "GeminiClient",
    "GenerateContentRequest",
    "GenerateContentResponse",
    "RateLimiter",
    "RateWindow",
]
