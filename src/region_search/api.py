from __future__ import annotations

from region_search.core.areas import HALF_MARGIN_FACTOR, build_matching_area, build_matching_areas
from region_search.core.geometry import (
    AnchorKind,
    AnchorPoint,
    Candidate,
    CandidateState,
    ExclusionZone,
    MatchingArea,
    PageGeometry,
    Rectangle,
    SubSection,
    TextToken,
)
from region_search.core.patterns import PatternConfig, PatternSyntaxError, parse_flag
from region_search.core.text_source import StaticPage, StaticTextSource, TextSource
from region_search.core.tracker import TrackerState, scan_page, track_candidates
from region_search.io.parquet import RegionSchema, read_regions_parquet, regions_frame, write_regions_parquet
from region_search.store import (
    BuildResult,
    MatchEvent,
    RecomputeResult,
    RegionStore,
    build,
    build_with_events,
    recompute_searches,
)


__all__ = [
    "HALF_MARGIN_FACTOR",
    "build_matching_area",
    "build_matching_areas",
    "AnchorKind",
    "AnchorPoint",
    "Candidate",
    "CandidateState",
    "ExclusionZone",
    "MatchingArea",
    "PageGeometry",
    "Rectangle",
    "SubSection",
    "TextToken",
    "PatternConfig",
    "PatternSyntaxError",
    "parse_flag",
    "StaticPage",
    "StaticTextSource",
    "TextSource",
    "TrackerState",
    "scan_page",
    "track_candidates",
    "RegionSchema",
    "read_regions_parquet",
    "regions_frame",
    "write_regions_parquet",
    "BuildResult",
    "MatchEvent",
    "RecomputeResult",
    "RegionStore",
    "build",
    "build_with_events",
    "recompute_searches",
]
