"""Engine configuration, optionally loaded from a tpltree.yaml file."""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel


class LocaleSettings(BaseModel):
    """Number and date formatting rules.

    Defaults reproduce the en-US output of a browser's toLocaleString().
    Date patterns are str.format() strings over the fields
    year, month, day, hour, hour12, minute, second, ampm. The datetime
    pattern may also use {date} and {time}.
    """

    thousands_sep: str = ","
    decimal_sep: str = "."
    max_fraction_digits: int = 3
    date_format: str = "{month}/{day}/{year}"
    time_format: str = "{hour12}:{minute:02d}:{second:02d} {ampm}"
    datetime_format: str = "{date}, {time}"


class EngineConfig(BaseModel):
    """Full tpltree.yaml configuration"""

    locale: LocaleSettings = LocaleSettings()
    markdown_extensions: list[str] = []

    @classmethod
    def load(cls, path: Path) -> "EngineConfig":
        """Load config from yaml file"""
        if not path.exists():
            return cls()

        with open(path) as f:
            data = yaml.safe_load(f) or {}

        return cls.model_validate(data)


DEFAULT_CONFIG = EngineConfig()
