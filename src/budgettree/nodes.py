"""Tree nodes for parsed budget documents."""

from typing import Annotated
from typing import Literal as TypingLiteral

from pydantic import BaseModel, Field


class Entry(BaseModel):
    """A measured quantity (e.g., 'D: Total Reserves | $1,189,555.55')."""

    kind: TypingLiteral["entry"] = "entry"
    name: str
    level: str | None = None  # A..E in the labeled dialect
    value: float | str | None = None  # str = non-numeric pass-through
    keyed: bool = False  # parsed from a "key SEP value" line, even if the value is empty
    line: int = 0  # 1-based source line

    @property
    def numeric(self) -> float | None:
        """Value as a number, or None when missing or non-numeric."""
        if isinstance(self.value, float):
            return self.value
        return None


class Text(BaseModel):
    """An opaque line kept verbatim."""

    kind: TypingLiteral["text"] = "text"
    content: str
    line: int = 0


class Container(BaseModel):
    """A named group opened by a header line and closed by '}' or '};'.

    ``total`` and ``magnitude`` are derived by the aggregator and are
    recomputed on demand; the parser always leaves them unset.
    """

    kind: TypingLiteral["container"] = "container"
    name: str
    level: str | None = None
    declared_amount: float | None = None  # from 'NAME: $1,234.00' headers
    children: list["Node"] = []
    line: int = 0
    total: float | None = None
    magnitude: float | None = None

    def containers(self) -> list["Container"]:
        return [c for c in self.children if isinstance(c, Container)]

    def entries(self) -> list[Entry]:
        return [c for c in self.children if isinstance(c, Entry)]


Node = Annotated[Container | Entry | Text, Field(discriminator="kind")]


class Tree(BaseModel):
    """Top-level node sequence, used to (de)serialise a whole document."""

    nodes: list[Node] = []


# Rebuild models for forward references
Container.model_rebuild()
Tree.model_rebuild()
