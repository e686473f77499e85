"""Record schema for the reference catalogue.

One CSV row describes one tool. Most columns are single strings; the tag
columns (``Platform``, ``Type``, ``OS``, ``Language``, ``Category``) hold a
comma-separated list inside a single cell, e.g. ``"Windows, Linux, macOS"``.
All tag columns share :func:`split_multi_value` so they decode identically.
"""

from __future__ import annotations

import re
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

__all__ = [
    "MULTI_VALUE_FIELDS",
    "Record",
    "split_multi_value",
]

MULTI_VALUE_FIELDS = ("platform", "type", "os", "language", "category")

_UNSIGNED_DIGITS = re.compile(r"\+?[0-9]+")


def split_multi_value(raw: str) -> List[str]:
    """Split a tag cell on ``,`` and strip each piece, keeping order.

    ``"Windows, Linux, macOS"`` -> ``["Windows", "Linux", "macOS"]``.
    An empty cell yields ``[""]``.
    """

    return [piece.strip() for piece in raw.split(",")]


class Record(BaseModel):
    """One decoded catalogue row.

    Populated from column names (``Name``, ``URL``, ...) and serialized back
    with the same names by :meth:`to_json_dict`.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)

    name: str = Field(alias="Name")
    notes: str = Field(alias="Notes")
    url: str = Field(alias="URL")
    level: int = Field(alias="Level", ge=0, le=255)
    example: Optional[str] = Field(default=None, alias="Example")

    platform: List[str] = Field(default_factory=list, alias="Platform")
    type: List[str] = Field(default_factory=list, alias="Type")
    os: List[str] = Field(default_factory=list, alias="OS")
    language: List[str] = Field(default_factory=list, alias="Language")
    category: List[str] = Field(default_factory=list, alias="Category")

    @field_validator(*MULTI_VALUE_FIELDS, mode="before")
    @classmethod
    def _decode_multi_value(cls, value: Any) -> Any:
        if isinstance(value, str):
            return split_multi_value(value)
        return value

    @field_validator("level", mode="before")
    @classmethod
    def _decode_level(cls, value: Any) -> Any:
        # CSV cells arrive as text; only plain unsigned digits are a u8.
        if isinstance(value, str):
            if not _UNSIGNED_DIGITS.fullmatch(value):
                raise ValueError(f"invalid digit found in {value!r}")
            return int(value)
        return value

    @field_validator("example", mode="before")
    @classmethod
    def _empty_example_is_absent(cls, value: Any) -> Any:
        if value == "":
            return None
        return value

    def to_json_dict(self) -> Dict[str, Any]:
        """Serialize with column names, dropping empty tag lists and a missing example."""

        data = self.model_dump(by_alias=True, exclude_none=True)
        return {key: value for key, value in data.items() if value != []}
