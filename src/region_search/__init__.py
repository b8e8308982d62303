from .api import (
    ExclusionZone,
    MatchingArea,
    PatternConfig,
    PatternSyntaxError,
    Rectangle,
    RegionStore,
    build,
    build_with_events,
)

__all__ = [
    "ExclusionZone",
    "MatchingArea",
    "PatternConfig",
    "PatternSyntaxError",
    "Rectangle",
    "RegionStore",
    "build",
    "build_with_events",
]
