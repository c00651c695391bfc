"""
Document Assembler

Orchestrates generation of one Markdown document from selected tables.

Small selections are documented in a single call that covers both the
overview and the table details. Larger selections get one overview call over
the full selection followed by one detail call per batch, issued strictly in
order through the same rate-limited client.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Protocol

from schemadoc.config import GenerationSettings
from schemadoc.connectors.base import TableInfo
from schemadoc.documentation.batching import plan_batches
from schemadoc.errors import NoSelectionError
from schemadoc.prompts.documentation import build_detail_prompt, build_overview_prompt

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int, int], None]

_CODE_FENCE_MARKERS = ("```markdown", "```")


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> str: ...


class SectionKind(StrEnum):
    OVERVIEW = "overview"
    TABLE_DETAIL = "table-detail"


@dataclass(frozen=True)
class GeneratedSection:
    """Text returned by exactly one API call."""

    kind: SectionKind
    text: str


def strip_code_fences(text: str) -> str:
    """Remove literal Markdown code-fence markers anywhere in the text."""
    for marker in _CODE_FENCE_MARKERS:
        text = text.replace(marker, "")
    return text


class DocumentAssembler:
    """
    Generates the schema document for a table selection.

    Usage:
        assembler = DocumentAssembler(client, settings.generation)
        document = await assembler.generate(tables, progress=on_progress)
    """

    def __init__(self, client: TextGenerator, settings: GenerationSettings | None = None):
        self.client = client
        self.settings = settings or GenerationSettings()

    async def generate(
        self,
        tables: Sequence[TableInfo],
        progress: ProgressCallback | None = None,
    ) -> str:
        """
        Generate the document for every included table.

        Args:
            tables: Introspected tables with caller-set ``included`` flags
            progress: Called as ``progress(label, step, total)`` before each
                API call; steps are 1-based

        Raises:
            NoSelectionError: If no table is included
            GenerationError: If any API call fails; no partial document is returned
        """
        sections = await self.generate_sections(tables, progress)
        return self.render(sections)

    async def generate_sections(
        self,
        tables: Sequence[TableInfo],
        progress: ProgressCallback | None = None,
    ) -> list[GeneratedSection]:
        """Issue the API calls for a selection, one section per call, in output order."""
        selected = [table for table in tables if table.included]
        if not selected:
            raise NoSelectionError("No tables selected for documentation")

        language = self.settings.language

        if len(selected) <= self.settings.max_tables_per_batch:
            self._notify(progress, f"Documenting {len(selected)} tables...", 1, 1)
            text = await self.client.generate(
                build_detail_prompt(selected, include_overview=True, language=language)
            )
            logger.info(f"Generated documentation for {len(selected)} tables in one call")
            return [GeneratedSection(SectionKind.TABLE_DETAIL, text)]

        batches = plan_batches(
            selected,
            max_tables=self.settings.max_tables_per_batch,
            max_weight=self.settings.max_prompt_weight,
        )
        total = len(batches) + 1

        self._notify(progress, "Generating database overview...", 1, total)
        overview = await self.client.generate(build_overview_prompt(selected, language=language))
        sections = [GeneratedSection(SectionKind.OVERVIEW, overview)]

        for index, batch in enumerate(batches, start=1):
            self._notify(
                progress,
                f"Processing batch {index}/{len(batches)} ({len(batch)} tables)...",
                index + 1,
                total,
            )
            text = await self.client.generate(
                build_detail_prompt(batch.tables, include_overview=False, language=language)
            )
            sections.append(GeneratedSection(SectionKind.TABLE_DETAIL, text))

        logger.info(
            f"Generated documentation for {len(selected)} tables in {total} calls",
            extra={"tables": len(selected), "batches": len(batches)},
        )
        return sections

    def render(self, sections: Sequence[GeneratedSection]) -> str:
        """
        Concatenate generated sections into the final document.

        A lone section (the single-call path) is returned verbatim. Otherwise
        overview sections come first, then the detail heading, then the detail
        sections, each stripped and separated by one blank line. Code fences
        are removed from the concatenated result.
        """
        if len(sections) == 1:
            return strip_code_fences(sections[0].text)

        parts = [s.text.strip() for s in sections if s.kind is SectionKind.OVERVIEW]
        parts.append(self.settings.detail_heading)
        parts.extend(s.text.strip() for s in sections if s.kind is SectionKind.TABLE_DETAIL)
        return strip_code_fences("\n\n".join(parts))

    @staticmethod
    def _notify(progress: ProgressCallback | None, label: str, step: int, total: int) -> None:
        logger.debug(f"[{step}/{total}] {label}")
        if progress is not None:
            progress(label, step, total)
