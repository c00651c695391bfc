"""Prompt builders for documentation generation."""

from schemadoc.prompts.documentation import (
    DEFAULT_LANGUAGE,
    build_detail_prompt,
    build_overview_prompt,
    describe_column,
)

__all__ = [
    "DEFAULT_LANGUAGE",
    "build_detail_prompt",
    "build_overview_prompt",
    "describe_column",
]
