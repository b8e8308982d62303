from __future__ import annotations

import re
from dataclasses import dataclass


_TRUE_FLAGS = frozenset({"true", "1", "yes", "on"})
_FALSE_FLAGS = frozenset({"false", "0", "no", "off", ""})


class PatternSyntaxError(ValueError):
    """Raised when a begin or end pattern is not a valid regular expression."""

    def __init__(self, role: str, pattern: str, reason: str) -> None:
        super().__init__(f"Invalid {role} pattern {pattern!r}: {reason}")
        self.role = role
        self.pattern = pattern


def _compile(role: str, pattern: str | re.Pattern[str]) -> re.Pattern[str]:
    if isinstance(pattern, re.Pattern):
        return pattern
    try:
        return re.compile(pattern)
    except re.error as exc:
        raise PatternSyntaxError(role, pattern, str(exc)) from exc


def parse_flag(value: str | bool | None) -> bool:
    """Parse an inclusion flag coming from JSON or form parameters."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    s = value.strip().lower()
    if s in _TRUE_FLAGS:
        return True
    if s in _FALSE_FLAGS:
        return False
    raise ValueError(f"Unrecognized boolean flag: {value!r}")


@dataclass(frozen=True)
class PatternConfig:
    """
    Begin/end delimiters of a region search.

    Pattern strings are compiled on construction; a ``PatternSyntaxError`` is
    raised before any document is touched. ``include_begin`` / ``include_end``
    decide whether the matched anchor lines fall inside the region.
    """

    begin_pattern: re.Pattern[str]
    end_pattern: re.Pattern[str]
    include_begin: bool = False
    include_end: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "begin_pattern", _compile("begin", self.begin_pattern))
        object.__setattr__(self, "end_pattern", _compile("end", self.end_pattern))

    @classmethod
    def from_strings(
        cls,
        begin_pattern: str,
        include_begin: str | bool | None,
        end_pattern: str,
        include_end: str | bool | None,
    ) -> PatternConfig:
        return cls(
            begin_pattern=begin_pattern,  # type: ignore[arg-type]
            end_pattern=end_pattern,  # type: ignore[arg-type]
            include_begin=parse_flag(include_begin),
            include_end=parse_flag(include_end),
        )

    @property
    def begin_text(self) -> str:
        return self.begin_pattern.pattern

    @property
    def end_text(self) -> str:
        return self.end_pattern.pattern
