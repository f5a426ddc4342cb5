"""Command line for budget text files.

Usage:
    budgettree show budget.txt
    budgettree check data/*.txt --strict
    budgettree export budget.txt -o budget.csv
    budgettree json budget.txt --dialect bracketed
"""

import argparse
import csv
import logging
import sys
from pathlib import Path

from .aggregate import annotate, grand_total
from .config import ConfigError, ParserConfig, load_config
from .nodes import Container, Entry, Node, Text, Tree
from .parser import ParseError, ParseResult, ParseStatus, parse_file
from .query import to_rows
from .session import BudgetSession, LoadError


def _format_amount(value: float | str | None) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if value < 0:
        return f"(${-value:,.2f})"
    return f"${value:,.2f}"


def render_tree(nodes: list[Node], indent: int = 0) -> list[str]:
    """Indented text rendering with signed container totals."""
    out = []
    pad = "  " * indent
    for node in nodes:
        if isinstance(node, Container):
            prefix = f"{node.level}: " if node.level else ""
            out.append(f"{pad}{prefix}{node.name}  [{_format_amount(node.total)}]")
            out.extend(render_tree(node.children, indent + 1))
        elif isinstance(node, Entry):
            prefix = f"{node.level}: " if node.level else ""
            amount = _format_amount(node.value)
            out.append(f"{pad}{prefix}{node.name}" + (f" | {amount}" if amount else ""))
        elif isinstance(node, Text):
            out.append(f"{pad}{node.content}")
    return out


def _load(path: Path, config: ParserConfig) -> BudgetSession:
    session = BudgetSession(config)
    session.load_file(path)
    return session


def cmd_show(args, config: ParserConfig) -> int:
    session = _load(args.file, config)
    for line in render_tree(session.nodes):
        print(line)
    print()
    total = grand_total(session.nodes, config.declared_amount)
    print(f"  Total: {_format_amount(total)}")
    for diag in session.diagnostics:
        print(f"  {diag}", file=sys.stderr)
    return 0


def check_file(path: Path, config: ParserConfig) -> tuple[ParseResult | None, list[str]]:
    """Parse one file; returns the result (None on a strict failure) and messages."""
    try:
        result = parse_file(path, config)
    except ParseError as e:
        return None, [str(e)]
    messages = [str(d) for d in result.diagnostics]
    messages.extend(str(d) for d in annotate(result, config))
    return result, messages


def cmd_check(args, config: ParserConfig) -> int:
    failed = 0
    for path in args.files:
        try:
            result, messages = check_file(path, config)
        except (OSError, UnicodeDecodeError) as e:
            result, messages = None, [f"cannot read: {e}"]

        bad = result is None or result.status is ParseStatus.UNBALANCED
        if config.strict and messages:
            bad = True
        failed += bad

        status = "FAIL" if bad else ("WARN" if messages else "OK")
        print(f"  {status:4s}  {path}")
        if bad or args.verbose:
            for message in messages:
                print(f"        {message}")

    print()
    print(f"  Total: {len(args.files) - failed}/{len(args.files)} files parse")
    return 1 if failed else 0


def cmd_export(args, config: ParserConfig) -> int:
    session = _load(args.file, config)
    rows = to_rows(session.nodes)
    out = open(args.output, "w", newline="") if args.output else sys.stdout
    try:
        writer = csv.writer(out)
        writer.writerow(["path", "level", "name", "value"])
        writer.writerows(rows)
    finally:
        if args.output:
            out.close()
    return 0


def cmd_json(args, config: ParserConfig) -> int:
    session = _load(args.file, config)
    print(Tree(nodes=session.nodes).model_dump_json(indent=2))
    return 0


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", type=Path, default=None, help="YAML config file")
    common.add_argument(
        "--dialect",
        choices=["auto", "labeled", "bracketed"],
        default=None,
        help="Line grammar (default: auto-detect)",
    )
    common.add_argument(
        "--strict",
        action="store_true",
        default=None,
        help="Fail on unbalanced braces or unrecognized lines",
    )
    common.add_argument(
        "--declared-amount",
        choices=["add", "replace"],
        default=None,
        help="How a header amount combines with its children",
    )
    common.add_argument("--verbose", "-v", action="store_true")

    parser = argparse.ArgumentParser(
        prog="budgettree", description="Parse and summarize budget text files"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    show = sub.add_parser("show", parents=[common], help="Print the tree with totals")
    show.add_argument("file", type=Path)
    show.set_defaults(func=cmd_show)

    check = sub.add_parser("check", parents=[common], help="Report parse diagnostics")
    check.add_argument("files", type=Path, nargs="+")
    check.set_defaults(func=cmd_check)

    export = sub.add_parser("export", parents=[common], help="Write entries as CSV")
    export.add_argument("file", type=Path)
    export.add_argument("--output", "-o", type=Path, default=None)
    export.set_defaults(func=cmd_export)

    dump = sub.add_parser("json", parents=[common], help="Print the tree as JSON")
    dump.add_argument("file", type=Path)
    dump.set_defaults(func=cmd_json)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.ERROR,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = load_config(
            args.config,
            dialect=args.dialect,
            strict=args.strict,
            declared_amount=args.declared_amount,
        )
        return args.func(args, config)
    except (ConfigError, LoadError, ParseError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
