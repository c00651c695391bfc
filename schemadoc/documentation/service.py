"""
Documentation Service

End-to-end entry point: introspect a database, apply a name-based table
selection and generate the document.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from schemadoc.config import Settings
from schemadoc.connectors.base import BaseConnector
from schemadoc.documentation.assembler import DocumentAssembler, ProgressCallback, TextGenerator
from schemadoc.documentation.selection import apply_selection
from schemadoc.llm.gemini import GeminiClient

logger = logging.getLogger(__name__)


async def generate_documentation(
    connector: BaseConnector,
    settings: Settings,
    table_names: Iterable[str] | None = None,
    progress: ProgressCallback | None = None,
    client: TextGenerator | None = None,
) -> str:
    """
    Introspect ``connector`` and document the selected tables.

    Args:
        connector: Connector for the target database
        settings: Application settings
        table_names: Tables to document; all tables when omitted
        progress: Optional progress callback passed to the assembler
        client: Text generator to use; a GeminiClient is created (and closed)
            when omitted

    Raises:
        ConnectionError, IntrospectionError: From introspection
        NoSelectionError: If the selection is empty or names an unknown table
        GenerationError: If generation fails
    """
    tables = await connector.list_tables()
    selected = apply_selection(tables, table_names)
    logger.info(
        f"Documenting {len(selected)} of {len(tables)} tables from {connector.spec.describe()}"
    )

    if client is not None:
        return await DocumentAssembler(client, settings.generation).generate(tables, progress)

    async with GeminiClient(settings) as gemini:
        return await DocumentAssembler(gemini, settings.generation).generate(tables, progress)
