"""Recursive descent parser for budget text documents.

Grammar (per line, after trimming):
    document   = item*
    item       = blank | container | entry | text
    container  = header "{" item* terminator
    terminator = "}" | "};"
    entry      = key SEP value          (SEP: "|" or "–"; bracketed also " - ")
    header     = "L: Name" | "[Name]" | "[Name: $Amount]"

The parser owns a single cursor into the line list. Nested containers are
parsed by recursive calls that share the cursor, so line numbers in
diagnostics are always absolute.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pydantic import BaseModel

from .config import ParserConfig
from .dialects import TERMINATORS, Dialect, Header, detect_dialect, get_dialect
from .nodes import Container, Entry, Node, Text
from .values import parse_value

logger = logging.getLogger(__name__)

UNRECOGNIZED_LINE = "unrecognized-line"
UNTERMINATED_CONTAINER = "unterminated-container"
UNMATCHED_TERMINATOR = "unmatched-terminator"
DECLARED_MISMATCH = "declared-mismatch"

BRACE_CODES = {UNTERMINATED_CONTAINER, UNMATCHED_TERMINATOR}


@dataclass
class Line:
    text: str  # trimmed
    index: int  # 0-based position in the document

    @property
    def number(self) -> int:
        return self.index + 1


class ParseError(Exception):
    def __init__(self, msg: str, line: int):
        super().__init__(f"line {line}: {msg}")
        self.line = line


class ParseStatus(str, Enum):
    CLEAN = "clean"
    WITH_DIAGNOSTICS = "with_diagnostics"
    UNBALANCED = "unbalanced"


class Diagnostic(BaseModel):
    """A non-fatal problem found while parsing or aggregating."""

    code: str
    message: str
    line: int
    severity: str = "warning"

    def __str__(self) -> str:
        return f"line {self.line}: {self.message} [{self.code}]"


class ParseResult(BaseModel):
    """Parsed top-level nodes plus everything the parser had to report."""

    nodes: list[Node] = []
    next_index: int = 0
    dialect: str = "labeled"
    path: str = ""
    diagnostics: list[Diagnostic] = []

    @property
    def status(self) -> ParseStatus:
        if any(d.code in BRACE_CODES for d in self.diagnostics):
            return ParseStatus.UNBALANCED
        if self.diagnostics:
            return ParseStatus.WITH_DIAGNOSTICS
        return ParseStatus.CLEAN

    @property
    def ok(self) -> bool:
        return self.status is ParseStatus.CLEAN


class Parser:
    """Recursive descent parser over a list of lines."""

    def __init__(
        self,
        lines: list[str],
        start: int = 0,
        config: ParserConfig | None = None,
    ):
        self.config = config or ParserConfig()
        self.lines = [Line(raw.strip(), i) for i, raw in enumerate(lines)]
        self.pos = start
        if self.config.dialect == "auto":
            self.dialect: Dialect = detect_dialect(lines, start)
        else:
            self.dialect = get_dialect(self.config.dialect)
        self.diagnostics: list[Diagnostic] = []

    def at_end(self) -> bool:
        return self.pos >= len(self.lines)

    def peek(self) -> Line | None:
        if self.at_end():
            return None
        return self.lines[self.pos]

    def advance(self) -> Line:
        line = self.lines[self.pos]
        self.pos += 1
        return line

    def parse_document(self, path: str = "") -> ParseResult:
        """Parse from the cursor to the end of the document."""
        nodes = self.parse_block(None)
        return ParseResult(
            nodes=nodes,
            next_index=self.pos,
            dialect=self.dialect.name,
            path=path,
            diagnostics=self.diagnostics,
        )

    def parse_block(self, opener: Header | None, opened_at: int = 0) -> list[Node]:
        """Parse items until the opener's terminator (or end of input)."""
        items: list[Node] = []

        while not self.at_end():
            line = self.advance()
            if not line.text:
                continue

            if line.text in TERMINATORS:
                if opener is not None:
                    return items
                # Stray terminator at top level: consume it and keep going.
                self._report(
                    UNMATCHED_TERMINATOR,
                    f"'{line.text}' has no matching opener",
                    line.number,
                )
                continue

            node = self.parse_item(line)
            if node is not None:
                items.append(node)

        if opener is not None:
            self._report(
                UNTERMINATED_CONTAINER,
                f"container '{opener.name}' opened at line {opened_at} is never closed",
                opened_at,
            )
        return items

    def parse_item(self, line: Line) -> Node | None:
        """Parse one non-blank, non-terminator line."""
        header = self.dialect.match_header(line.text)
        if header is not None and header.opens:
            children = self.parse_block(header, line.number)
            return Container(
                name=header.name,
                level=header.level,
                declared_amount=header.declared_amount,
                children=children,
                line=line.number,
            )

        kv = self.dialect.match_entry(line.text)
        if kv is not None:
            value = parse_value(kv.raw_value) if kv.raw_value else None
            return Entry(name=kv.name, level=kv.level, value=value, keyed=True, line=line.number)

        if header is not None:
            if self.dialect.bare_header == "entry":
                return Entry(name=header.text, level=header.level, line=line.number)
            return Text(content=line.text, line=line.number)

        self._report(UNRECOGNIZED_LINE, f"unrecognized line: {line.text!r}", line.number)
        if self.config.keep_unrecognized:
            return Text(content=line.text, line=line.number)
        return None

    def _report(self, code: str, message: str, line: int) -> None:
        if self.config.strict:
            raise ParseError(message, line)
        logger.warning("line %d: %s", line, message)
        self.diagnostics.append(Diagnostic(code=code, message=message, line=line))


def parse_lines(
    lines: list[str],
    start: int = 0,
    config: ParserConfig | None = None,
    path: str = "",
) -> ParseResult:
    """Parse an already split document starting at line index ``start``."""
    parser = Parser(lines, start, config)
    return parser.parse_document(path)


def parse(source: str, config: ParserConfig | None = None, path: str = "") -> ParseResult:
    """Parse budget text into a tree of nodes."""
    return parse_lines(source.splitlines(), 0, config, path)


def parse_file(filepath: str | Path, config: ParserConfig | None = None) -> ParseResult:
    """Parse a budget text file."""
    filepath = Path(filepath)
    source = filepath.read_text(encoding="utf-8")
    return parse(source, config, str(filepath))
