from __future__ import annotations

from typing import Iterable

from .geometry import (
    Candidate,
    ExclusionZone,
    MatchingArea,
    PageGeometry,
    Rectangle,
    SubSection,
)
from .text_source import TextSource


# Without a configured exclusion zone, continuation pages start halfway into
# the natural top margin and stop halfway into the natural bottom margin.
HALF_MARGIN_FACTOR = 0.5


def _rect(top: float, bottom: float, width: float) -> Rectangle:
    return Rectangle(top=top, left=0.0, width=width, height=max(0.0, bottom - top))


def continuation_top(
    geometry: PageGeometry,
    zone: ExclusionZone | None,
    *,
    half_margin_factor: float = HALF_MARGIN_FACTOR,
) -> float:
    header = zone.header_boundary(geometry.height) if zone is not None else None
    if header is not None:
        return header
    return half_margin_factor * geometry.natural_text_top


def continuation_bottom(
    geometry: PageGeometry,
    zone: ExclusionZone | None,
    *,
    half_margin_factor: float = HALF_MARGIN_FACTOR,
) -> float:
    footer = zone.footer_boundary(geometry.height) if zone is not None else None
    if footer is not None:
        return footer
    return geometry.height - half_margin_factor * (geometry.height - geometry.natural_text_bottom)


def first_page_bottom(geometry: PageGeometry, zone: ExclusionZone | None) -> float:
    footer = zone.footer_boundary(geometry.height) if zone is not None else None
    if footer is not None:
        return footer
    return geometry.natural_text_bottom


def build_matching_area(
    candidate: Candidate,
    text_source: TextSource,
    zone: ExclusionZone | None = None,
    *,
    half_margin_factor: float = HALF_MARGIN_FACTOR,
) -> MatchingArea:
    """
    Turn a valid candidate into one full-width rectangle per spanned page.

    Args:
        candidate: A candidate in the ``VALID_CLOSED`` state.
        text_source: Supplies page width/height and natural text bounds.
        zone: Optional header/footer exclusion; zero fractions fall back to
            the natural text bounds.
        half_margin_factor: Share of the natural margins kept on continuation
            pages when no exclusion zone band is configured.

    Returns:
        MatchingArea: Sections keyed by every page from begin to end.

    Raises:
        ValueError: If the candidate is incomplete or out of order.
    """
    if not candidate.is_valid:
        raise ValueError(f"Cannot build an area from a {candidate.state.value} candidate.")
    begin = candidate.begin
    end = candidate.end
    assert begin is not None and end is not None

    if begin.page == end.page:
        width = text_source.page_geometry(begin.page).width
        section = SubSection(page=begin.page, rect=_rect(begin.y, end.y, width))
        return MatchingArea(
            start_page=begin.page,
            end_page=end.page,
            sections={begin.page: (section,)},
        )

    sections: dict[int, tuple[SubSection, ...]] = {}

    geometry = text_source.page_geometry(begin.page)
    rect = _rect(begin.y, first_page_bottom(geometry, zone), geometry.width)
    sections[begin.page] = (SubSection(page=begin.page, rect=rect),)

    for page in range(begin.page + 1, end.page):
        geometry = text_source.page_geometry(page)
        top = continuation_top(geometry, zone, half_margin_factor=half_margin_factor)
        bottom = continuation_bottom(geometry, zone, half_margin_factor=half_margin_factor)
        sections[page] = (SubSection(page=page, rect=_rect(top, bottom, geometry.width)),)

    geometry = text_source.page_geometry(end.page)
    top = continuation_top(geometry, zone, half_margin_factor=half_margin_factor)
    sections[end.page] = (SubSection(page=end.page, rect=_rect(top, end.y, geometry.width)),)

    return MatchingArea(start_page=begin.page, end_page=end.page, sections=sections)


def build_matching_areas(
    candidates: Iterable[Candidate],
    text_source: TextSource,
    zone: ExclusionZone | None = None,
    *,
    half_margin_factor: float = HALF_MARGIN_FACTOR,
) -> list[MatchingArea]:
    return [
        build_matching_area(c, text_source, zone, half_margin_factor=half_margin_factor)
        for c in candidates
        if c.is_valid
    ]
