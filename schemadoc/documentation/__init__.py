"""
Documentation Module

Batch planning, document assembly and the end-to-end generation service.

Usage:
    from schemadoc.documentation import generate_documentation

    document = await generate_documentation(connector, settings, ["orders"])
"""

from schemadoc.documentation.assembler import (
    DocumentAssembler,
    GeneratedSection,
    ProgressCallback,
    SectionKind,
    strip_code_fences,
)
from schemadoc.documentation.batching import Batch, plan_batches, table_weight
from schemadoc.documentation.selection import (
    apply_selection,
    deselect_all,
    select_all,
    selected_tables,
)
from schemadoc.documentation.service import generate_documentation

__all__ = [
    "Batch",
    "DocumentAssembler",
    "GeneratedSection",
    "ProgressCallback",
    "SectionKind",
    "apply_selection",
    "deselect_all",
    "generate_documentation",
    "plan_batches",
    "select_all",
    "selected_tables",
    "strip_code_fences",
    "table_weight",
]
