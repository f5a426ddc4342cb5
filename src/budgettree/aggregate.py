"""Derived sums for budget trees.

Two rollups are kept side by side on every Container:

- ``total``: signed sum, preserving deficit/surplus semantics.
- ``magnitude``: every numeric entry counted by absolute value, for consumers
  that size areas (treemaps, pies) and cannot draw negative values.

Non-numeric entry values contribute 0 to both. A container's declared header
amount is added to its children (``add``) or taken as the total on its own
(``replace``); either way, a declared amount that disagrees with the children
by more than ``tolerance`` is reported.
"""

import logging
from collections.abc import Iterable
from enum import Enum

from .config import ParserConfig
from .nodes import Container, Entry, Node, Text
from .parser import DECLARED_MISMATCH, Diagnostic, ParseResult

logger = logging.getLogger(__name__)


class DeclaredAmountPolicy(str, Enum):
    ADD = "add"
    REPLACE = "replace"


class SumComputer:
    """Computes and caches container sums, collecting declared-amount mismatches."""

    def __init__(
        self,
        policy: DeclaredAmountPolicy | str = DeclaredAmountPolicy.ADD,
        tolerance: float = 0.01,
    ):
        self.policy = DeclaredAmountPolicy(policy)
        self.tolerance = tolerance
        self.discrepancies: list[Diagnostic] = []
        self._checked: set[int] = set()

    def compute(self, node: Node) -> float:
        """Signed sum; cached on ``Container.total``."""
        return self._rollup(node, signed=True)

    def magnitude(self, node: Node) -> float:
        """Unsigned sum; cached on ``Container.magnitude``."""
        return self._rollup(node, signed=False)

    def _rollup(self, node: Node, signed: bool) -> float:
        if isinstance(node, Entry):
            value = node.numeric
            if value is None:
                return 0.0
            return value if signed else abs(value)
        if isinstance(node, Text):
            return 0.0
        if not isinstance(node, Container):
            raise TypeError(f"not a budget node: {type(node).__name__}")

        children = sum((self._rollup(child, signed) for child in node.children), 0.0)

        if node.declared_amount is None:
            result = children
        else:
            if signed:
                self._check_declared(node, children)
            declared = node.declared_amount if signed else abs(node.declared_amount)
            if self.policy is DeclaredAmountPolicy.REPLACE:
                result = declared
            else:
                result = declared + children

        if signed:
            node.total = result
        else:
            node.magnitude = result
        return result

    def _check_declared(self, node: Container, children: float) -> None:
        if id(node) in self._checked or not _has_amounts(node.children):
            return
        self._checked.add(id(node))

        if abs(node.declared_amount - children) > self.tolerance:
            message = (
                f"container '{node.name}' declares {node.declared_amount:,.2f} "
                f"but its children sum to {children:,.2f}"
            )
            logger.warning("line %d: %s", node.line, message)
            self.discrepancies.append(
                Diagnostic(code=DECLARED_MISMATCH, message=message, line=node.line)
            )


def _has_amounts(nodes: Iterable[Node]) -> bool:
    for node in nodes:
        if isinstance(node, Entry) and node.numeric is not None:
            return True
        if isinstance(node, Container):
            if node.declared_amount is not None or _has_amounts(node.children):
                return True
    return False


def compute_sum(node: Node, policy: DeclaredAmountPolicy | str = DeclaredAmountPolicy.ADD) -> float:
    """Signed sum of a node, cached on containers."""
    return SumComputer(policy).compute(node)


def compute_magnitude(
    node: Node, policy: DeclaredAmountPolicy | str = DeclaredAmountPolicy.ADD
) -> float:
    """Absolute-valued rollup of a node, cached on containers."""
    return SumComputer(policy).magnitude(node)


def grand_total(
    nodes: Iterable[Node],
    policy: DeclaredAmountPolicy | str = DeclaredAmountPolicy.ADD,
    signed: bool = True,
) -> float:
    """Sum over a top-level node sequence."""
    computer = SumComputer(policy)
    rollup = computer.compute if signed else computer.magnitude
    return sum((rollup(node) for node in nodes), 0.0)


def annotate(result: ParseResult, config: ParserConfig | None = None) -> list[Diagnostic]:
    """Fill ``total`` and ``magnitude`` on every container of a parse result.

    Returns the declared-amount mismatches found.
    """
    config = config or ParserConfig()
    computer = SumComputer(config.declared_amount, config.tolerance)
    for node in result.nodes:
        computer.compute(node)
        computer.magnitude(node)
    return computer.discrepancies
