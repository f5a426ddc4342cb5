"""Traversal helpers for consumers of a parsed budget tree."""

from collections.abc import Iterable, Iterator

from .nodes import Container, Entry, Node, Text


def walk(nodes: Iterable[Node]) -> Iterator[Node]:
    """Pre-order traversal."""
    for node in nodes:
        yield node
        if isinstance(node, Container):
            yield from walk(node.children)


def flatten(nodes: Iterable[Node]) -> list[Node]:
    return list(walk(nodes))


def node_name(node: Node) -> str:
    if isinstance(node, Text):
        return node.content
    return node.name


def filter_by_name(nodes: Iterable[Node], text: str) -> list[Node]:
    """All nodes whose name contains ``text``, ignoring case."""
    needle = text.casefold()
    return [n for n in walk(nodes) if needle in node_name(n).casefold()]


def find_container(
    nodes: Iterable[Node], level: str | None, text: str
) -> Container | None:
    """First container (pre-order) with this level tag whose name contains ``text``.

    ``level=None`` matches any level.
    """
    needle = text.casefold()
    for node in walk(nodes):
        if not isinstance(node, Container):
            continue
        if level is not None and node.level != level:
            continue
        if needle in node.name.casefold():
            return node
    return None


def find_budget_summary(
    nodes: Iterable[Node], name: str = "BUDGET SUMMARY"
) -> Container | None:
    """Locate the summary container.

    Labeled documents keep it at level A; bracketed ones have no levels.
    """
    nodes = list(nodes)
    return find_container(nodes, "A", name) or find_container(nodes, None, name)


def descend(node: Container, *levels: str) -> Container | None:
    """Follow the first child container of each level in turn.

    ``descend(summary, "B", "C")`` is the C group under the summary's first B group.
    """
    current = node
    for level in levels:
        current = next((c for c in current.containers() if c.level == level), None)
        if current is None:
            return None
    return current


def iter_entries(nodes: Iterable[Node], levels: Iterable[str] | None = None) -> Iterator[Entry]:
    wanted = set(levels) if levels is not None else None
    for node in walk(nodes):
        if isinstance(node, Entry) and (wanted is None or node.level in wanted):
            yield node


def count_entries(nodes: Iterable[Node]) -> int:
    """Number of key/value entries (bare named leaves excluded)."""
    return sum(1 for e in iter_entries(nodes) if e.keyed)


def to_rows(nodes: Iterable[Node], sep: str = " / ") -> list[tuple[str, str, str, float | str | None]]:
    """Flatten entries into ``(path, level, name, value)`` rows for export.

    ``path`` joins the names of the enclosing containers.
    """
    rows = []

    def visit(items: Iterable[Node], trail: list[str]) -> None:
        for node in items:
            if isinstance(node, Container):
                visit(node.children, trail + [node.name])
            elif isinstance(node, Entry):
                rows.append((sep.join(trail), node.level or "", node.name, node.value))

    visit(nodes, [])
    return rows


# Dashboard extraction: summary -> first B group -> first C group -> D items.

REVENUE_NAME = "AS REVENUE"
DEFICIT_NAME = "REMAINING FUNDS"


def summary_items(summary: Container | None) -> list[Entry]:
    """Valued D-level entries of the summary's first B/C group."""
    if summary is None:
        return []
    group = descend(summary, "B", "C")
    if group is None:
        return []
    return [e for e in group.entries() if e.level == "D" and e.value is not None]


def _find_item(items: Iterable[Entry], text: str) -> Entry | None:
    needle = text.casefold()
    return next((e for e in items if needle in e.name.casefold()), None)


def revenue_item(items: Iterable[Entry], name: str = REVENUE_NAME) -> Entry | None:
    return _find_item(items, name)


def spending_items(items: Iterable[Entry], name: str = REVENUE_NAME) -> list[Entry]:
    """Negative numeric items, the revenue item excluded."""
    items = list(items)
    revenue = revenue_item(items, name)
    return [
        e for e in items
        if e is not revenue and e.numeric is not None and e.numeric < 0
    ]


def deficit(items: Iterable[Entry], name: str = DEFICIT_NAME) -> float | None:
    """Signed value of the remaining-funds item, None when absent or non-numeric."""
    item = _find_item(items, name)
    return item.numeric if item is not None else None


def leaf_magnitude(node: Node, levels: Iterable[str] = ("D", "E")) -> float:
    """Absolute sum of numeric leaves at the given levels only.

    Declared amounts and leaves at other levels are ignored; this is the
    sizing used for per-category treemap tiles.
    """
    wanted = set(levels)
    return sum(
        (abs(e.numeric) for e in iter_entries([node], wanted) if e.numeric is not None),
        0.0,
    )


def category_sizes(nodes: Iterable[Node], levels: Iterable[str] = ("D", "E")) -> list[tuple[str, float]]:
    """``(name, leaf_magnitude)`` for each top-level container."""
    levels = tuple(levels)
    return [(n.name, leaf_magnitude(n, levels)) for n in nodes if isinstance(n, Container)]
