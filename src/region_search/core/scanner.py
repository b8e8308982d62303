from __future__ import annotations

from bisect import bisect_right
from dataclasses import dataclass
from typing import Sequence

from .geometry import AnchorKind, AnchorMatch, TextToken
from .patterns import PatternConfig


@dataclass(frozen=True)
class PageText:
    """Linearized page text with the start offset of every token."""

    text: str
    token_starts: tuple[int, ...]

    @classmethod
    def from_tokens(cls, tokens: Sequence[TextToken]) -> PageText:
        starts: list[int] = []
        pos = 0
        for token in tokens:
            starts.append(pos)
            pos += len(token.text)
        return cls(text="".join(t.text for t in tokens), token_starts=tuple(starts))

    def token_index(self, char_offset: int) -> int:
        """Index of the token containing ``char_offset`` (clamped to the last token)."""
        if not self.token_starts:
            raise IndexError("page text has no tokens")
        idx = bisect_right(self.token_starts, char_offset) - 1
        return min(max(idx, 0), len(self.token_starts) - 1)


def find_next_anchors(
    text: str,
    offset: int,
    patterns: PatternConfig,
) -> tuple[tuple[int, int] | None, tuple[int, int] | None]:
    """
    Earliest ``(start, end)`` of each pattern at or after ``offset``.

    Both patterns are searched independently from the same offset.
    """
    begin = patterns.begin_pattern.search(text, offset)
    end = patterns.end_pattern.search(text, offset)
    return (
        (begin.start(), begin.end()) if begin else None,
        (end.start(), end.end()) if end else None,
    )


def next_anchor(
    text: str,
    offset: int,
    patterns: PatternConfig,
    *,
    page: int,
    begin_unset: bool,
) -> AnchorMatch | None:
    """
    The next anchor to consume, or None when neither pattern matches.

    When both patterns start at the same offset the begin slot wins only if
    the candidate being filled has no begin yet.
    """
    begin, end = find_next_anchors(text, offset, patterns)
    if begin is None and end is None:
        return None
    if begin is not None and end is not None:
        if begin[0] == end[0]:
            kind = AnchorKind.BEGIN if begin_unset else AnchorKind.END
        else:
            kind = AnchorKind.BEGIN if begin[0] < end[0] else AnchorKind.END
    else:
        kind = AnchorKind.BEGIN if begin is not None else AnchorKind.END

    start, stop = begin if kind is AnchorKind.BEGIN else end  # type: ignore[misc]
    return AnchorMatch(page=page, kind=kind, char_offset=start, end_offset=stop)
