from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Union


@dataclass(frozen=True)
class ExtractedToken:
    """
    Abbreviation found under the cursor.

    Columns are zero-based offsets into the single line the token was
    extracted from; the token is only meaningful for that line.
    """

    start_column: int
    end_column: int
    abbreviation: str

    def __post_init__(self) -> None:
        if self.start_column < 0 or self.end_column < self.start_column:
            raise ValueError(
                f"invalid token span {self.start_column}..{self.end_column}"
            )


@dataclass(frozen=True)
class FieldPlaceholder:
    """Tab-stop produced while serializing an expansion."""

    index: int
    default_text: str | None = None


@dataclass(frozen=True)
class LocateOk:
    token: ExtractedToken


@dataclass(frozen=True)
class LocateErr:
    reason: str


LocateResult = Union[LocateOk, LocateErr]

# Renders one field placeholder as inline snippet text: (index, default) -> str
FieldFormatter = Callable[[int, "str | None"], str]
