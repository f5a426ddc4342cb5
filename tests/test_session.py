"""Tests for per-load session state and drill-down navigation."""

import pytest

from budgettree import (
    BudgetSession,
    Container,
    Entry,
    LoadError,
    NavigationError,
    ParserConfig,
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
A: EMPTY {
}"""


@pytest.fixture
def session():
    s = BudgetSession()
    s.load_text(DOC)
    return s


class TestLoading:
    def test_summary_totals(self, session):
        summary = session.summary()
        assert summary.name == "BUDGET SUMMARY"
        assert summary.total == pytest.approx(1200.0 - 450.0 - 587367.41)
        assert summary.magnitude == pytest.approx(1200.0 + 450.0 + 587367.41)

    def test_load_file(self, tmp_path):
        path = tmp_path / "data.txt"
        path.write_text(DOC, encoding="utf-8")
        session = BudgetSession()
        result = session.load_file(path)
        assert result.path == str(path)
        assert len(session.nodes) == 2

    def test_failed_load_keeps_previous_tree(self, session, tmp_path):
        with pytest.raises(LoadError):
            session.load_file(tmp_path / "missing.txt")
        assert session.summary() is not None

    def test_failed_load_is_logged(self, tmp_path, caplog):
        with pytest.raises(LoadError):
            BudgetSession().load_file(tmp_path / "missing.txt")
        assert "Error loading" in caplog.text

    def test_nothing_loaded(self):
        session = BudgetSession()
        assert session.nodes == []
        assert session.diagnostics == []
        assert session.summary() is None

    def test_diagnostics_include_mismatches(self):
        session = BudgetSession(ParserConfig(declared_amount="replace"))
        session.load_text("[Fund: $10] {\n  a | $4\n  ???\n}")
        codes = [d.code for d in session.diagnostics]
        assert codes == ["unrecognized-line", "declared-mismatch"]
        assert session.nodes[0].total == 10.0

    def test_reload_replaces_everything(self, session):
        session.open("BUDGET SUMMARY")
        session.load_text("A: OTHER {\n}")
        assert session.current.children == session.nodes
        assert session.breadcrumbs() == ["All Categories"]
        assert session.summary() is None


class TestNavigation:
    def test_home(self, session):
        assert session.current.name == "All Categories"
        assert [c.name for c in session.current.children] == ["BUDGET SUMMARY", "EMPTY"]

    def test_home_has_totals(self, session):
        root = session.home()
        assert root.total == pytest.approx(1200.0 - 450.0 - 587367.41)
        assert root.magnitude == pytest.approx(1200.0 + 450.0 + 587367.41)
        assert root.children[1].total == 0.0

    def test_drill_down(self, session):
        summary = session.open("BUDGET SUMMARY")
        assert isinstance(summary, Container)
        assert session.current is summary
        session.open("OPERATING")
        session.open("Accounts")
        assert session.breadcrumbs() == [
            "All Categories",
            "BUDGET SUMMARY",
            "OPERATING",
            "Accounts",
        ]

    def test_leaf_detail_does_not_move(self, session):
        session.open("BUDGET SUMMARY")
        session.open("OPERATING")
        session.open("Accounts")
        detail = session.open("Payroll")
        assert isinstance(detail, Entry)
        assert detail.value == -450.0
        assert session.current.name == "Accounts"

    def test_empty_container_does_not_move(self, session):
        empty = session.open("EMPTY")
        assert empty.children == []
        assert session.current.name == "All Categories"

    def test_back_and_home(self, session):
        session.open("BUDGET SUMMARY")
        session.open("OPERATING")
        assert session.back().name == "BUDGET SUMMARY"
        assert session.back().name == "All Categories"
        assert session.back().name == "All Categories"
        session.open("BUDGET SUMMARY")
        assert session.home().name == "All Categories"
        assert session.breadcrumbs() == ["All Categories"]

    def test_unknown_child(self, session):
        with pytest.raises(NavigationError):
            session.open("Payroll")
