from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping


@dataclass(frozen=True)
class Rectangle:
    """Page-relative rectangle; y grows downward from the top of the page."""

    top: float
    left: float
    width: float
    height: float

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def right(self) -> float:
        return self.left + self.width

    def rounded(self) -> tuple[int, int, int, int]:
        """Integer ``(top, left, width, height)`` for pixel-oriented consumers."""
        return (round(self.top), round(self.left), round(self.width), round(self.height))


@dataclass(frozen=True)
class PageGeometry:
    width: float
    height: float
    natural_text_top: float
    natural_text_bottom: float


@dataclass(frozen=True)
class TextToken:
    text: str
    x: float
    y: float
    height: float


@dataclass(frozen=True)
class ExclusionZone:
    """
    Header/footer bands to drop from the text search and from region geometry.

    Attributes:
        header_fraction: Fraction of the page height excluded from the top.
        footer_fraction: Fraction of the page height excluded from the bottom.

    A fraction of zero means "no configured band": the natural text bounds of
    each page are used instead.
    """

    header_fraction: float = 0.0
    footer_fraction: float = 0.0

    def __post_init__(self) -> None:
        for name in ("header_fraction", "footer_fraction"):
            value = getattr(self, name)
            if not (0.0 <= value <= 1.0):
                raise ValueError(f"{name} must be in [0, 1], got {value!r}.")

    def header_boundary(self, page_height: float) -> float | None:
        if self.header_fraction > 0:
            return page_height * self.header_fraction
        return None

    def footer_boundary(self, page_height: float) -> float | None:
        if self.footer_fraction > 0:
            return page_height - page_height * self.footer_fraction
        return None


class AnchorKind(Enum):
    BEGIN = "begin"
    END = "end"


@dataclass(frozen=True)
class AnchorMatch:
    page: int
    kind: AnchorKind
    char_offset: int
    end_offset: int


@dataclass(frozen=True)
class AnchorPoint:
    page: int
    y: float


class CandidateState(Enum):
    EMPTY = "empty"
    BEGIN_ONLY = "begin_only"
    END_ONLY = "end_only"
    VALID_CLOSED = "valid_closed"
    INVALID_CLOSED = "invalid_closed"


@dataclass(frozen=True)
class Candidate:
    """A begin/end pair under construction; unset slots are ``None``."""

    begin: AnchorPoint | None = None
    end: AnchorPoint | None = None

    @property
    def state(self) -> CandidateState:
        if self.begin is None and self.end is None:
            return CandidateState.EMPTY
        if self.end is None:
            return CandidateState.BEGIN_ONLY
        if self.begin is None:
            return CandidateState.END_ONLY
        if self.end.page < self.begin.page:
            return CandidateState.INVALID_CLOSED
        if self.end.page == self.begin.page and self.end.y < self.begin.y:
            return CandidateState.INVALID_CLOSED
        return CandidateState.VALID_CLOSED

    @property
    def is_valid(self) -> bool:
        return self.state is CandidateState.VALID_CLOSED

    def with_anchor(self, kind: AnchorKind, point: AnchorPoint) -> Candidate:
        if kind is AnchorKind.BEGIN:
            return Candidate(begin=point, end=self.end)
        return Candidate(begin=self.begin, end=point)


@dataclass(frozen=True)
class SubSection:
    page: int
    rect: Rectangle


@dataclass(frozen=True)
class MatchingArea:
    """
    All rectangles produced by one begin/end pair.

    ``sections`` is keyed by page number and covers every page from
    ``start_page`` to ``end_page`` inclusive.
    """

    start_page: int
    end_page: int
    sections: Mapping[int, tuple[SubSection, ...]] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "sections", MappingProxyType(dict(self.sections)))

    def subsections(self) -> list[SubSection]:
        return [sub for page in sorted(self.sections) for sub in self.sections[page]]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MatchingArea):
            return NotImplemented
        return (
            self.start_page == other.start_page
            and self.end_page == other.end_page
            and dict(self.sections) == dict(other.sections)
        )

    def __hash__(self) -> int:
        return hash((self.start_page, self.end_page, tuple(self.subsections())))
