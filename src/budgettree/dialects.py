"""Line grammars for the two budget text dialects.

Labeled (dialect A):
    A: OPERATING RESERVES {
        D: Total Reserves | $1,189,555.55
        D: Transfer – ($12,000.00)
        E: Notes
    }

Bracketed (dialect B):
    [Student Services: $250,000.00] {
        Events | $1,200.00
        Refunds – ($300.00)
        Co-op Fund - $75.00
    };
"""

import re
from dataclasses import dataclass

from .values import parse_value

TERMINATORS = {"}", "};"}


@dataclass(frozen=True)
class Header:
    level: str | None
    name: str
    text: str  # full name text, declared amount included
    declared_amount: float | None
    opens: bool


@dataclass(frozen=True)
class KeyValue:
    level: str | None
    name: str
    raw_value: str


@dataclass(frozen=True)
class Dialect:
    """A line grammar: how headers and key/value lines are recognised."""

    name: str
    header_pattern: re.Pattern
    entry_pattern: re.Pattern
    bare_header: str  # "entry" or "text": what a header without '{' becomes
    has_levels: bool

    def match_header(self, line: str) -> Header | None:
        m = self.header_pattern.match(line)
        if not m:
            return None
        level = m.group("level") if self.has_levels else None
        text = m.group("name").strip()
        name, declared = split_declared(text)
        return Header(
            level=level,
            name=name,
            text=text,
            declared_amount=declared,
            opens=m.group("brace") is not None,
        )

    def match_entry(self, line: str) -> KeyValue | None:
        m = self.entry_pattern.match(line)
        if not m:
            return None
        level = m.group("level") if self.has_levels else None
        return KeyValue(level=level, name=m.group("name").strip(), raw_value=m.group("value").strip())


def split_declared(text: str) -> tuple[str, float | None]:
    """Split 'NAME: $1,234.00' into ('NAME', 1234.0).

    The part after the last colon must be a currency amount ('$' or
    parenthesised); anything else, e.g. 'FY: 2024', is returned whole.
    """
    text = text.strip()
    name, sep, amount = text.rpartition(":")
    amount = amount.strip()
    has_marker = "$" in amount or (amount.startswith("(") and amount.endswith(")"))
    if sep and name.strip() and has_marker:
        value = parse_value(amount)
        if isinstance(value, float):
            return name.strip(), value
    return text, None


LABELED = Dialect(
    name="labeled",
    header_pattern=re.compile(r"^(?P<level>[A-E]):\s*(?P<name>.+?)\s*(?P<brace>\{)?$"),
    entry_pattern=re.compile(r"^(?P<level>[A-E]):\s*(?P<name>.+?)\s*[|–]\s*(?P<value>.*)$"),
    bare_header="entry",
    has_levels=True,
)

BRACKETED = Dialect(
    name="bracketed",
    header_pattern=re.compile(r"^\[(?P<name>[^\]]+)\]\s*(?P<brace>\{)?$"),
    # A plain hyphen separates only when surrounded by whitespace.
    entry_pattern=re.compile(r"^(?P<name>[^\[].*?)(?:\s*[|–]\s*|\s+-\s+)(?P<value>.*)$"),
    bare_header="text",
    has_levels=False,
)

DIALECTS = {d.name: d for d in (LABELED, BRACKETED)}


def get_dialect(name: str) -> Dialect:
    try:
        return DIALECTS[name]
    except KeyError:
        raise ValueError(f"unknown dialect: {name!r} (expected one of {sorted(DIALECTS)})") from None


def detect_dialect(lines: list[str], start: int = 0) -> Dialect:
    """Pick the dialect of the first header line; labeled when there is none."""
    for raw in lines[start:]:
        line = raw.strip()
        if not line:
            continue
        if LABELED.header_pattern.match(line):
            return LABELED
        if BRACKETED.header_pattern.match(line):
            return BRACKETED
    return LABELED
