"""Tests for tree traversal helpers."""

import pytest

from budgettree import (
    category_sizes,
    count_entries,
    deficit,
    descend,
    filter_by_name,
    find_budget_summary,
    find_container,
    flatten,
    iter_entries,
    leaf_magnitude,
    parse,
    revenue_item,
    spending_items,
    summary_items,
    to_rows,
)

DOC = """A: BUDGET SUMMARY {
  B: OPERATING {
    C: Accounts {
      D: AS Revenue | $1,200.00
      D: Payroll – ($450.00)
      D: Remaining Funds | ($587,367.41)
    }
  }
}
A: STUDENT EVENTS {
  D: Concerts | $300.00
  E: Notes
}"""


@pytest.fixture
def nodes():
    return parse(DOC).nodes


class TestFlatten:
    def test_pre_order(self, nodes):
        assert [n.name for n in flatten(nodes)] == [
            "BUDGET SUMMARY",
            "OPERATING",
            "Accounts",
            "AS Revenue",
            "Payroll",
            "Remaining Funds",
            "STUDENT EVENTS",
            "Concerts",
            "Notes",
        ]

    def test_text_nodes_included(self):
        nodes = parse("[G] {\n  [Note]\n}").nodes
        assert len(flatten(nodes)) == 2


class TestFilter:
    def test_case_insensitive(self, nodes):
        assert [n.name for n in filter_by_name(nodes, "revenue")] == ["AS Revenue"]

    def test_matches_containers_and_entries(self, nodes):
        names = [n.name for n in filter_by_name(nodes, "EVENTS")]
        assert names == ["STUDENT EVENTS"]

    def test_no_match(self, nodes):
        assert filter_by_name(nodes, "capital") == []


class TestLookup:
    def test_find_container_by_level(self, nodes):
        assert find_container(nodes, "A", "budget summary") is nodes[0]
        assert find_container(nodes, "B", "budget") is None

    def test_find_container_any_level(self, nodes):
        assert find_container(nodes, None, "accounts").name == "Accounts"

    def test_budget_summary_labeled(self, nodes):
        assert find_budget_summary(nodes) is nodes[0]

    def test_budget_summary_bracketed(self):
        nodes = parse("[Other] {\n}\n[Budget Summary] {\n  x | $1\n}").nodes
        assert find_budget_summary(nodes) is nodes[1]

    def test_budget_summary_missing(self):
        assert find_budget_summary(parse("A: X {\n}").nodes) is None

    def test_descend(self, nodes):
        accounts = descend(nodes[0], "B", "C")
        assert accounts.name == "Accounts"
        assert len(accounts.entries()) == 3

    def test_descend_missing_level(self, nodes):
        assert descend(nodes[0], "C") is None

    def test_descend_no_levels(self, nodes):
        assert descend(nodes[0]) is nodes[0]


class TestEntries:
    def test_iter_entries_by_level(self, nodes):
        assert [e.name for e in iter_entries(nodes, levels=["E"])] == ["Notes"]

    def test_count_excludes_bare_leaves(self, nodes):
        assert count_entries(nodes) == 4

    def test_rows(self, nodes):
        rows = to_rows(nodes)
        assert rows[0] == (
            "BUDGET SUMMARY / OPERATING / Accounts",
            "D",
            "AS Revenue",
            1200.0,
        )
        assert rows[-1] == ("STUDENT EVENTS", "E", "Notes", None)
        assert len(rows) == 5

    def test_count_includes_empty_values(self):
        nodes = parse("A: X {\n  D: a |\n  D: b | $1\n}").nodes
        assert count_entries(nodes) == 2


class TestDashboardItems:
    @pytest.fixture
    def items(self, nodes):
        return summary_items(find_budget_summary(nodes))

    def test_summary_items(self, items):
        assert [e.name for e in items] == ["AS Revenue", "Payroll", "Remaining Funds"]

    def test_summary_items_skip_unvalued_and_other_levels(self):
        nodes = parse(
            "A: BUDGET SUMMARY {\n"
            "  B: OPS {\n"
            "    C: Accounts {\n"
            "      D: Pending |\n"
            "      E: Detail | $5\n"
            "      D: Rent | ($10)\n"
            "    }\n"
            "  }\n"
            "}"
        ).nodes
        assert [e.name for e in summary_items(nodes[0])] == ["Rent"]

    def test_summary_items_missing(self, nodes):
        assert summary_items(None) == []
        assert summary_items(nodes[1]) == []

    def test_revenue_item(self, items):
        assert revenue_item(items).name == "AS Revenue"
        assert revenue_item(items, "grants") is None

    def test_spending_items(self, items):
        assert [e.name for e in spending_items(items)] == ["Payroll", "Remaining Funds"]

    def test_negative_revenue_is_not_spending(self):
        nodes = parse(
            "A: BUDGET SUMMARY {\n  B: O {\n    C: A {\n"
            "      D: AS Revenue | ($5)\n      D: Rent | ($10)\n"
            "    }\n  }\n}"
        ).nodes
        items = summary_items(nodes[0])
        assert [e.name for e in spending_items(items)] == ["Rent"]

    def test_deficit(self, items):
        assert deficit(items) == pytest.approx(-587367.41)

    def test_deficit_missing(self, items):
        assert deficit(items[:2]) is None
        assert deficit([]) is None


class TestLeafMagnitude:
    def test_ignores_declared_amounts(self):
        container = parse("A: GROUP: $9,999.00 {\n  D: a | ($4)\n  E: b | $6\n}").nodes[0]
        assert leaf_magnitude(container) == 10.0

    def test_ignores_other_levels(self):
        container = parse("A: GROUP {\n  B: SUB {\n    D: a | $3\n  }\n  C: c | $100\n}").nodes[0]
        assert leaf_magnitude(container) == 3.0
        assert leaf_magnitude(container, levels=["C"]) == 100.0

    def test_category_sizes(self, nodes):
        sizes = category_sizes(nodes)
        assert [name for name, _ in sizes] == ["BUDGET SUMMARY", "STUDENT EVENTS"]
        assert sizes[0][1] == pytest.approx(1200.0 + 450.0 + 587367.41)
        assert sizes[1][1] == 300.0
