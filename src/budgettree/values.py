"""Numeric value extraction for budget amounts.

Recognised forms: ``1234``, ``$1,234.56``, ``($587,367.41)`` (negative),
``$.50``. Only parenthesis wrapping negates; ``-$100`` is not a number.
Anything else is passed through as the trimmed raw string.
"""

import re

NUMBER_PATTERN = re.compile(r"^(\d+(\.\d*)?|\.\d+)$")


def parse_value(raw: str) -> float | str:
    """Parse a value cell into a float, or return the trimmed raw text."""
    original = raw.strip()
    s = original.replace(",", "")

    negative = False
    if s.startswith("(") and s.endswith(")"):
        negative = True
        s = s[1:-1]

    s = s.replace("$", "", 1).strip()
    if not NUMBER_PATTERN.match(s):
        return original

    num = float(s)
    return -num if negative else num


def is_numeric(value: object) -> bool:
    """True for parsed numbers (bools excluded)."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)
