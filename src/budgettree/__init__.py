"""budgettree: parse hierarchical budget text into a tree with derived sums.

Pipeline: split text into lines -> recursive descent parse -> aggregate sums
-> hand the tree to renderers (charts, drill-down views).

Example:
    from budgettree import parse, annotate, find_budget_summary

    result = parse(open("data.txt").read())
    annotate(result)
    summary = find_budget_summary(result.nodes)
    print(summary.total, summary.magnitude)
"""

__version__ = "0.1.0"

from .aggregate import (
    DeclaredAmountPolicy,
    SumComputer,
    annotate,
    compute_magnitude,
    compute_sum,
    grand_total,
)
from .config import ConfigError, ParserConfig, load_config
from .dialects import BRACKETED, LABELED, Dialect, detect_dialect, get_dialect
from .nodes import Container, Entry, Node, Text, Tree
from .parser import (
    Diagnostic,
    ParseError,
    Parser,
    ParseResult,
    ParseStatus,
    parse,
    parse_file,
    parse_lines,
)
from .query import (
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
    revenue_item,
    spending_items,
    summary_items,
    to_rows,
    walk,
)
from .session import BudgetSession, LoadError, NavigationError
from .values import is_numeric, parse_value

__all__ = [
    # Parse
    "parse",
    "parse_lines",
    "parse_file",
    "Parser",
    "ParseError",
    "ParseResult",
    "ParseStatus",
    "Diagnostic",
    # Dialects
    "Dialect",
    "LABELED",
    "BRACKETED",
    "detect_dialect",
    "get_dialect",
    # Nodes
    "Node",
    "Container",
    "Entry",
    "Text",
    "Tree",
    # Values
    "parse_value",
    "is_numeric",
    # Aggregate
    "compute_sum",
    "compute_magnitude",
    "grand_total",
    "annotate",
    "SumComputer",
    "DeclaredAmountPolicy",
    # Query
    "walk",
    "flatten",
    "filter_by_name",
    "find_container",
    "find_budget_summary",
    "descend",
    "iter_entries",
    "count_entries",
    "to_rows",
    "summary_items",
    "revenue_item",
    "spending_items",
    "deficit",
    "leaf_magnitude",
    "category_sizes",
    # Config
    "ParserConfig",
    "ConfigError",
    "load_config",
    # Session
    "BudgetSession",
    "LoadError",
    "NavigationError",
]
