"""Parser and aggregation options, optionally loaded from YAML.

Example ``budgettree.yaml``:

    dialect: bracketed
    strict: false
    keep_unrecognized: true
    declared_amount: replace
    tolerance: 0.5
"""

from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError


class ConfigError(Exception):
    pass


class ParserConfig(BaseModel):
    """Options shared by the parser, the aggregator and the CLI."""

    model_config = ConfigDict(extra="forbid")

    dialect: Literal["auto", "labeled", "bracketed"] = "auto"
    strict: bool = False  # raise ParseError instead of recording diagnostics
    keep_unrecognized: bool = False  # keep unparsed lines as Text nodes
    declared_amount: Literal["add", "replace"] = "add"
    tolerance: float = Field(default=0.01, ge=0)
    summary_name: str = "BUDGET SUMMARY"


def load_config(filepath: str | Path | None = None, **overrides) -> ParserConfig:
    """Load a config file, then apply keyword overrides (None values ignored)."""
    data: dict = {}
    if filepath is not None:
        filepath = Path(filepath)
        try:
            with open(filepath) as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise ConfigError(f"cannot read {filepath}: {e}") from e
        except yaml.YAMLError as e:
            raise ConfigError(f"invalid YAML in {filepath}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError(f"{filepath}: expected a mapping, got {type(data).__name__}")

    data.update({k: v for k, v in overrides.items() if v is not None})
    try:
        return ParserConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(str(e)) from e
