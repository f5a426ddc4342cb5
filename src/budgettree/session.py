"""Per-load state: the parsed tree plus drill-down navigation.

A session is created for each load and replaced wholesale on the next one,
so nothing about a previous document leaks into the current view.
"""

import logging
from pathlib import Path

from .aggregate import SumComputer
from .config import ParserConfig
from .nodes import Container, Entry, Node
from .parser import Diagnostic, ParseResult, parse
from .query import find_budget_summary

logger = logging.getLogger(__name__)

ROOT_NAME = "All Categories"


class LoadError(Exception):
    """The source text could not be acquired; the parser never ran."""


class NavigationError(Exception):
    pass


class BudgetSession:
    def __init__(self, config: ParserConfig | None = None):
        self.config = config or ParserConfig()
        self.result: ParseResult | None = None
        self.discrepancies: list[Diagnostic] = []
        self._root = Container(name=ROOT_NAME)
        self._stack: list[Container] = []

    # -- loading --------------------------------------------------------

    def load_text(self, text: str, path: str = "") -> ParseResult:
        result = parse(text, self.config, path)
        root = Container(name=ROOT_NAME, children=list(result.nodes))
        computer = SumComputer(self.config.declared_amount, self.config.tolerance)
        computer.compute(root)
        computer.magnitude(root)
        self.discrepancies = computer.discrepancies
        self.result = result
        self._root = root
        self._stack = []
        return result

    def load_file(self, filepath: str | Path) -> ParseResult:
        """Read and parse a file. No retry: a read failure raises LoadError."""
        filepath = Path(filepath)
        try:
            text = filepath.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            logger.error("Error loading %s: %s", filepath, e)
            raise LoadError(f"cannot load {filepath}: {e}") from e
        return self.load_text(text, str(filepath))

    @property
    def nodes(self) -> list[Node]:
        return self.result.nodes if self.result is not None else []

    @property
    def diagnostics(self) -> list[Diagnostic]:
        parsed = self.result.diagnostics if self.result is not None else []
        return parsed + self.discrepancies

    def summary(self) -> Container | None:
        return find_budget_summary(self.nodes, self.config.summary_name)

    # -- drill-down -----------------------------------------------------

    @property
    def current(self) -> Container:
        return self._stack[-1] if self._stack else self._root

    def open(self, name: str) -> Container | Entry:
        """Open a child of the current view by exact name.

        Containers with children become the current view; anything else is
        returned as a detail without moving.
        """
        for child in self.current.children:
            if isinstance(child, (Container, Entry)) and child.name == name:
                if isinstance(child, Container) and child.children:
                    self._stack.append(child)
                return child
        raise NavigationError(f"'{name}' not found under '{self.current.name}'")

    def back(self) -> Container:
        if self._stack:
            self._stack.pop()
        return self.current

    def home(self) -> Container:
        self._stack = []
        return self._root

    def breadcrumbs(self) -> list[str]:
        return [self._root.name] + [c.name for c in self._stack]
