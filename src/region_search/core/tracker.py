from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from .geometry import (
    AnchorKind,
    AnchorPoint,
    Candidate,
    ExclusionZone,
    PageGeometry,
    TextToken,
)
from .patterns import PatternConfig
from .scanner import PageText, next_anchor
from .text_source import TextSource


# Multiples of the anchor token's line height added to its y coordinate.
BEGIN_INCLUDED_FACTOR = -0.5
BEGIN_EXCLUDED_FACTOR = 1.0
END_INCLUDED_FACTOR = 1.5
END_EXCLUDED_FACTOR = 0.0


def offset_factor(kind: AnchorKind, patterns: PatternConfig) -> float:
    if kind is AnchorKind.BEGIN:
        return BEGIN_INCLUDED_FACTOR if patterns.include_begin else BEGIN_EXCLUDED_FACTOR
    return END_INCLUDED_FACTOR if patterns.include_end else END_EXCLUDED_FACTOR


@dataclass(frozen=True)
class TrackerState:
    """
    Scan state carried from one page to the next.

    Attributes:
        current: The candidate that the next anchor may fill.
        closed: Valid candidates already completed, in document order.
    """

    current: Candidate = Candidate()
    closed: tuple[Candidate, ...] = ()


def search_band(geometry: PageGeometry, zone: ExclusionZone | None) -> tuple[float, float]:
    """Vertical ``(top, bottom)`` band whose tokens are searched for anchors."""
    top = geometry.natural_text_top
    bottom = geometry.natural_text_bottom
    if zone is not None:
        header = zone.header_boundary(geometry.height)
        footer = zone.footer_boundary(geometry.height)
        if header is not None:
            top = header
        if footer is not None:
            bottom = footer
    return top, bottom


def scan_page(
    state: TrackerState,
    page: int,
    tokens: Sequence[TextToken],
    patterns: PatternConfig,
) -> TrackerState:
    """
    Consume every anchor on one page and return the updated state.

    A valid candidate is closed only when another anchor arrives; incomplete
    or out-of-order candidates keep absorbing anchors, overwriting the slot
    each new anchor belongs to.
    """
    if not tokens:
        return state

    page_text = PageText.from_tokens(tokens)
    current = state.current
    closed = list(state.closed)
    offset = 0

    while offset <= len(page_text.text):
        target = Candidate() if current.is_valid else current
        match = next_anchor(
            page_text.text,
            offset,
            patterns,
            page=page,
            begin_unset=target.begin is None,
        )
        if match is None:
            break
        if target is not current:
            closed.append(current)

        token = tokens[page_text.token_index(match.char_offset)]
        y = token.y + token.height * offset_factor(match.kind, patterns)
        current = target.with_anchor(match.kind, AnchorPoint(page=page, y=y))
        # Empty matches still have to move the scan forward.
        offset = max(match.end_offset, match.char_offset + 1)

    return TrackerState(current=current, closed=tuple(closed))


def finish(state: TrackerState) -> list[Candidate]:
    """Closed candidates plus the trailing one when it is complete and ordered."""
    closed = list(state.closed)
    if state.current.is_valid:
        closed.append(state.current)
    return closed


def track_candidates(
    text_source: TextSource,
    patterns: PatternConfig,
    zone: ExclusionZone | None = None,
) -> list[Candidate]:
    state = TrackerState()
    for page in range(1, text_source.page_count() + 1):
        top, bottom = search_band(text_source.page_geometry(page), zone)
        tokens = text_source.tokens_in_band(page, top, bottom)
        state = scan_page(state, page, tokens, patterns)
    return finish(state)
