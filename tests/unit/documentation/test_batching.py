"""Unit tests for the batch planner."""

import pytest

from schemadoc.documentation.batching import plan_batches, table_weight


def _ids(tables):
    return [id(t) for t in tables]


class TestTableWeight:
    """Weight estimate used for batch placement."""

    def test_name_length_plus_twenty_per_column(self, table_factory):
        table = table_factory("orders", 4)

        assert table_weight(table) == len("orders") + 20 * 4


class TestPlanBatches:
    """Partition and cap invariants."""

    def test_empty_selection_has_no_batches(self):
        assert plan_batches([]) == []

    @pytest.mark.parametrize("count", [1, 3, 5])
    def test_small_selection_is_one_batch_in_input_order(self, table_factory, count):
        tables = [table_factory(f"t{i}", (i * 7) % 5 + 1) for i in range(count)]

        batches = plan_batches(tables)

        assert len(batches) == 1
        assert batches[0].tables == tables
        assert batches[0].weight == sum(table_weight(t) for t in tables)

    def test_small_selection_ignores_weight_cap(self, table_factory):
        tables = [table_factory("huge_a", 500), table_factory("huge_b", 500)]

        batches = plan_batches(tables, max_weight=100)

        assert len(batches) == 1

    @pytest.mark.parametrize("count,columns", [(6, 2), (11, 30), (23, 90), (40, 3)])
    def test_batches_partition_selection(self, table_factory, count, columns):
        tables = [table_factory(f"table_{i}", columns + i % 4) for i in range(count)]

        batches = plan_batches(tables)

        planned = [t for batch in batches for t in batch.tables]
        assert sorted(_ids(planned)) == sorted(_ids(tables))
        assert len(set(_ids(planned))) == len(planned)
        assert all(1 <= len(batch) <= 5 for batch in batches)

    def test_multi_table_batches_stay_under_weight_cap(self, table_factory):
        tables = [table_factory(f"t{i}", 30 + (i * 37) % 150) for i in range(17)]

        batches = plan_batches(tables, max_weight=8000)

        for batch in batches:
            if len(batch) > 1:
                assert batch.weight <= 8000

    def test_oversized_table_gets_its_own_batch(self, table_factory):
        giant = table_factory("giant", 500)
        others = [table_factory(f"small_{i}", 3) for i in range(6)]

        batches = plan_batches([*others, giant], max_weight=8000)

        assert batches[0].tables == [giant]
        assert batches[0].weight > 8000
        assert sum(len(b) for b in batches) == 7

    def test_sorted_by_weight_descending_with_stable_ties(self, table_factory):
        tables = [
            table_factory("aa", 2),
            table_factory("bb", 9),
            table_factory("cc", 2),
            table_factory("dd", 9),
            table_factory("ee", 1),
            table_factory("ff", 5),
        ]

        batches = plan_batches(tables)

        names = [t.table_name for batch in batches for t in batch.tables]
        assert names == ["bb", "dd", "ff", "aa", "cc", "ee"]
        assert [len(b) for b in batches] == [5, 1]

    def test_twelve_heavy_tables(self, table_factory):
        # 95 columns each: 1900+ weight, so at most four fit under 8000.
        tables = [table_factory(f"heavy_table_{i:02d}", 95) for i in range(12)]

        batches = plan_batches(tables)

        assert len(batches) >= 3
        assert all(len(b) <= 4 for b in batches)
        assert sum(len(b) for b in batches) == 12

    def test_invalid_max_tables(self, table_factory):
        with pytest.raises(ValueError):
            plan_batches([table_factory("a", 1)], max_tables=0)
