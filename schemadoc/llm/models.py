"""
Gemini Request and Response Models

Pydantic models for the generateContent endpoint. Responses are decoded
strictly: a body without a first candidate carrying a text part fails
validation instead of surfacing as a missing key later on.
"""

from pydantic import BaseModel, ConfigDict, Field


class Part(BaseModel):
    """One content part. Only text parts are produced or consumed."""

    text: str = Field(..., description="Part text")


class Content(BaseModel):
    """Content block made of ordered parts."""

    parts: list[Part] = Field(..., min_length=1, description="Content parts")


class GenerationConfig(BaseModel):
    """Sampling parameters sent with each request."""

    temperature: float = Field(..., ge=0.0, le=2.0, description="Sampling temperature")


class GenerateContentRequest(BaseModel):
    """Request body for ``{model}:generateContent``."""

    model_config = ConfigDict(populate_by_name=True)

    contents: list[Content] = Field(..., min_length=1)
    generation_config: GenerationConfig = Field(..., alias="generationConfig")

    @classmethod
    def for_prompt(cls, prompt: str, temperature: float) -> "GenerateContentRequest":
        return cls(
            contents=[Content(parts=[Part(text=prompt)])],
            generation_config=GenerationConfig(temperature=temperature),
        )

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True)


class Candidate(BaseModel):
    """One generated candidate."""

    content: Content


class GenerateContentResponse(BaseModel):
    """Response body of ``{model}:generateContent``."""

    candidates: list[Candidate] = Field(..., min_length=1)

    @property
    def text(self) -> str:
        """Text of the first part of the first candidate."""
        return self.candidates[0].content.parts[0].text
