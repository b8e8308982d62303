from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

import polars as pl

from region_search.core.areas import HALF_MARGIN_FACTOR, build_matching_areas
from region_search.core.geometry import ExclusionZone, MatchingArea, Rectangle
from region_search.core.patterns import PatternConfig
from region_search.core.text_source import TextSource
from region_search.core.tracker import track_candidates
from region_search.io.parquet import regions_frame


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchEvent:
    """Notification that one matching area was found."""

    start_page: int
    end_page: int

    @property
    def message(self) -> str:
        if self.start_page == self.end_page:
            return f"Match Found - page #{self.start_page}"
        return f"Match Found - pages #{self.start_page}-{self.end_page}"


@dataclass(frozen=True)
class BuildResult:
    areas: tuple[MatchingArea, ...]
    events: tuple[MatchEvent, ...]


@dataclass(frozen=True)
class RecomputeResult:
    """
    Outcome of re-running a search under a new exclusion zone.

    ``removed`` is the full previous set and ``added`` the full new set; no
    diff is computed. ``overlaps_another_search`` is always False.
    """

    added: tuple[MatchingArea, ...]
    removed: tuple[MatchingArea, ...]
    overlaps_another_search: bool = False


def build_with_events(
    text_source: TextSource,
    patterns: PatternConfig,
    zone: ExclusionZone | None = None,
    *,
    half_margin_factor: float = HALF_MARGIN_FACTOR,
) -> BuildResult:
    candidates = track_candidates(text_source, patterns, zone)
    areas = build_matching_areas(
        candidates, text_source, zone, half_margin_factor=half_margin_factor
    )
    events = tuple(MatchEvent(start_page=a.start_page, end_page=a.end_page) for a in areas)
    logger.debug(
        "region search %r..%r: %d candidates, %d areas over %d pages",
        patterns.begin_text,
        patterns.end_text,
        len(candidates),
        len(areas),
        text_source.page_count(),
    )
    return BuildResult(areas=tuple(areas), events=events)


def build(
    text_source: TextSource,
    patterns: PatternConfig,
    zone: ExclusionZone | None = None,
    *,
    half_margin_factor: float = HALF_MARGIN_FACTOR,
) -> list[MatchingArea]:
    """Full rescan of ``text_source``; one MatchingArea per valid begin/end pair."""
    result = build_with_events(text_source, patterns, zone, half_margin_factor=half_margin_factor)
    return list(result.areas)


class RegionStore:
    """
    Matching areas of one search over one document.

    The areas are computed on construction and replaced as a whole by
    ``recompute``; a failed rebuild leaves the previous areas in place.
    """

    def __init__(
        self,
        text_source: TextSource,
        patterns: PatternConfig,
        zone: ExclusionZone | None = None,
        *,
        half_margin_factor: float = HALF_MARGIN_FACTOR,
    ) -> None:
        self._text_source = text_source
        self._patterns = patterns
        self._half_margin_factor = half_margin_factor
        self._zone = zone
        result = self._build(zone)
        self._areas = result.areas
        self._events = result.events

    def _build(self, zone: ExclusionZone | None) -> BuildResult:
        return build_with_events(
            self._text_source,
            self._patterns,
            zone,
            half_margin_factor=self._half_margin_factor,
        )

    @property
    def patterns(self) -> PatternConfig:
        return self._patterns

    @property
    def zone(self) -> ExclusionZone | None:
        return self._zone

    @property
    def matching_areas(self) -> tuple[MatchingArea, ...]:
        return self._areas

    @property
    def events(self) -> tuple[MatchEvent, ...]:
        return self._events

    def regions_for_page(self, page: int) -> list[Rectangle]:
        return [
            sub.rect
            for area in self._areas
            for sub in area.sections.get(page, ())
        ]

    def all_regions(self) -> list[Rectangle]:
        return [sub.rect for area in self._areas for sub in area.subsections()]

    def regions_frame(self) -> pl.DataFrame:
        return regions_frame(self._areas)

    def recompute(self, zone: ExclusionZone | None) -> RecomputeResult:
        result = self._build(zone)
        removed = self._areas
        self._areas, self._events, self._zone = result.areas, result.events, zone
        return RecomputeResult(added=result.areas, removed=removed)


def recompute_searches(
    stores: Iterable[RegionStore],
    zone: ExclusionZone | None,
) -> list[RecomputeResult]:
    """Apply a new exclusion zone to every search configured on a document."""
    return [store.recompute(zone) for store in stores]
