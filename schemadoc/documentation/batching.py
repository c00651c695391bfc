"""
Batch Planner

Partitions selected tables into size-bounded batches for generation calls.
Placement is greedy over tables sorted by estimated prompt weight, which
keeps batches roughly balanced without attempting optimal packing.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from schemadoc.connectors.base import TableInfo

logger = logging.getLogger(__name__)

COLUMN_WEIGHT = 20


@dataclass
class Batch:
    """Ordered, non-empty group of tables submitted in one call."""

    tables: list[TableInfo] = field(default_factory=list)
    weight: int = 0

    def add(self, table: TableInfo) -> None:
        self.tables.append(table)
        self.weight += table_weight(table)

    def __len__(self) -> int:
        return len(self.tables)


def table_weight(table: TableInfo) -> int:
    """Estimated prompt size of one table: name length plus 20 per column."""
    return len(table.table_name) + COLUMN_WEIGHT * len(table.columns)


def plan_batches(
    tables: Sequence[TableInfo],
    max_tables: int = 5,
    max_weight: int = 8000,
) -> list[Batch]:
    """
    Split tables into batches.

    A selection of at most ``max_tables`` tables is returned as one batch in
    input order. Larger selections are sorted by weight (descending, stable)
    and filled greedily; a batch closes when it holds ``max_tables`` tables or
    when the next table would push it over ``max_weight``. A table heavier
    than ``max_weight`` still gets a batch of its own.
    """
    if max_tables <= 0:
        raise ValueError("max_tables must be positive")
    if not tables:
        return []

    if len(tables) <= max_tables:
        single = Batch()
        for table in tables:
            single.add(table)
        return [single]

    batches: list[Batch] = []
    current = Batch()
    for table in sorted(tables, key=table_weight, reverse=True):
        weight = table_weight(table)
        if len(current) >= max_tables or (
            len(current) > 0 and current.weight + weight > max_weight
        ):
            batches.append(current)
            current = Batch()
        current.add(table)

    if len(current) > 0:
        batches.append(current)

    logger.debug(
        f"Planned {len(batches)} batches for {len(tables)} tables",
        extra={"batch_sizes": [len(b) for b in batches]},
    )
    return batches
