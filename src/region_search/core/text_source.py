from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol, Sequence

from .geometry import PageGeometry, TextToken


class TextSource(Protocol):
    """
    Read-only view of a paginated document.

    Pages are 1-based. ``tokens_in_band`` must return tokens in the page's
    natural reading order: their concatenated text is the string the anchor
    patterns are searched in.
    """

    def page_count(self) -> int: ...

    def page_geometry(self, page: int) -> PageGeometry: ...

    def tokens_in_band(self, page: int, top: float, bottom: float) -> list[TextToken]: ...


def token_in_band(token: TextToken, top: float, bottom: float) -> bool:
    return token.y >= top and token.y + token.height <= bottom


@dataclass(frozen=True)
class StaticPage:
    width: float
    height: float
    tokens: Sequence[TextToken] = field(default_factory=tuple)
    natural_text_top: float | None = None
    natural_text_bottom: float | None = None

    @classmethod
    def from_lines(
        cls,
        lines: Sequence[tuple[float, str]],
        *,
        width: float = 600.0,
        height: float = 800.0,
        line_height: float = 10.0,
        char_width: float = 5.0,
    ) -> StaticPage:
        """One token per character of each ``(y, text)`` line, lines in the given order."""
        tokens = [
            TextToken(text=ch, x=i * char_width, y=y, height=line_height)
            for y, text in lines
            for i, ch in enumerate(text)
        ]
        return cls(width=width, height=height, tokens=tuple(tokens))

    def geometry(self) -> PageGeometry:
        top = self.natural_text_top
        bottom = self.natural_text_bottom
        if top is None:
            top = min((t.y for t in self.tokens), default=0.0)
        if bottom is None:
            bottom = max((t.y + t.height for t in self.tokens), default=self.height)
        return PageGeometry(
            width=self.width,
            height=self.height,
            natural_text_top=top,
            natural_text_bottom=bottom,
        )


class StaticTextSource:
    """In-memory ``TextSource`` over pre-extracted tokens."""

    def __init__(self, pages: Sequence[StaticPage]) -> None:
        self._pages = tuple(pages)

    def _page(self, page: int) -> StaticPage:
        if not 1 <= page <= len(self._pages):
            raise ValueError(f"page must be in 1..{len(self._pages)}, got {page}.")
        return self._pages[page - 1]

    def page_count(self) -> int:
        return len(self._pages)

    def page_geometry(self, page: int) -> PageGeometry:
        return self._page(page).geometry()

    def tokens_in_band(self, page: int, top: float, bottom: float) -> list[TextToken]:
        return [t for t in self._page(page).tokens if token_in_band(t, top, bottom)]
