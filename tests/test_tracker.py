from __future__ import annotations

import pytest

from region_search.core.geometry import (
    AnchorKind,
    AnchorPoint,
    Candidate,
    CandidateState,
    ExclusionZone,
    PageGeometry,
    TextToken,
)
from region_search.core.patterns import PatternConfig
from region_search.core.text_source import StaticPage, StaticTextSource
from region_search.core.tracker import (
    TrackerState,
    finish,
    offset_factor,
    scan_page,
    search_band,
    track_candidates,
)


def _patterns(include_begin: bool = False, include_end: bool = False) -> PatternConfig:
    return PatternConfig(
        begin_pattern="BEGIN",
        end_pattern="END",
        include_begin=include_begin,
        include_end=include_end,
    )


def _tokens(lines: list[tuple[float, str]]) -> list[TextToken]:
    return list(StaticPage.from_lines(lines).tokens)


def test_single_page_exclusive_anchors() -> None:
    source = StaticTextSource(
        [StaticPage.from_lines([(100, "intro"), (200, "BEGIN"), (300, "row"), (400, "END"), (500, "outro")])]
    )
    candidates = track_candidates(source, _patterns())
    assert candidates == [Candidate(begin=AnchorPoint(1, 210.0), end=AnchorPoint(1, 400.0))]


@pytest.mark.parametrize(
    ("include_begin", "include_end", "begin_y", "end_y"),
    [
        (False, False, 210.0, 400.0),
        (True, False, 195.0, 400.0),
        (False, True, 210.0, 415.0),
        (True, True, 195.0, 415.0),
    ],
)
def test_anchor_offsets_follow_inclusion_flags(
    include_begin: bool, include_end: bool, begin_y: float, end_y: float
) -> None:
    source = StaticTextSource([StaticPage.from_lines([(200, "BEGIN"), (300, "row"), (400, "END")])])
    (candidate,) = track_candidates(source, _patterns(include_begin, include_end))
    assert candidate.begin == AnchorPoint(1, begin_y)
    assert candidate.end == AnchorPoint(1, end_y)


def test_offset_factor_table() -> None:
    assert offset_factor(AnchorKind.BEGIN, _patterns(include_begin=True)) == -0.5
    assert offset_factor(AnchorKind.BEGIN, _patterns(include_begin=False)) == 1.0
    assert offset_factor(AnchorKind.END, _patterns(include_end=True)) == 1.5
    assert offset_factor(AnchorKind.END, _patterns(include_end=False)) == 0.0


def test_begin_without_end_is_discarded() -> None:
    source = StaticTextSource(
        [
            StaticPage.from_lines([(100, "BEGIN"), (200, "row")]),
            StaticPage.from_lines([(100, "row"), (200, "row")]),
        ]
    )
    assert track_candidates(source, _patterns()) == []


def test_no_matches_anywhere() -> None:
    source = StaticTextSource([StaticPage.from_lines([(100, "nothing here")])])
    assert track_candidates(source, _patterns()) == []


def test_zero_page_document() -> None:
    assert track_candidates(StaticTextSource([]), _patterns()) == []


def test_same_offset_collision_fills_begin_first() -> None:
    patterns = PatternConfig(begin_pattern="X", end_pattern="X")
    state = scan_page(TrackerState(), 1, _tokens([(100, "X")]), patterns)
    assert state.current.state is CandidateState.BEGIN_ONLY
    assert state.current.begin == AnchorPoint(1, 110.0)
    assert state.closed == ()


def test_same_offset_collision_fills_end_when_begin_is_set() -> None:
    patterns = PatternConfig(begin_pattern="X", end_pattern="X")
    start = TrackerState(current=Candidate(begin=AnchorPoint(1, 50.0)))
    state = scan_page(start, 2, _tokens([(100, "X")]), patterns)
    assert state.current == Candidate(begin=AnchorPoint(1, 50.0), end=AnchorPoint(2, 100.0))
    assert finish(state) == [state.current]


def test_same_offset_collision_after_close_starts_new_candidate() -> None:
    patterns = PatternConfig(begin_pattern="X", end_pattern="X")
    closed = Candidate(begin=AnchorPoint(1, 50.0), end=AnchorPoint(1, 60.0))
    state = scan_page(TrackerState(current=closed), 2, _tokens([(100, "X")]), patterns)
    assert state.closed == (closed,)
    assert state.current == Candidate(begin=AnchorPoint(2, 110.0))


def test_invalid_candidate_is_reused() -> None:
    source = StaticTextSource(
        [StaticPage.from_lines([(100, "END"), (300, "BEGIN"), (400, "row"), (500, "END")])]
    )
    assert track_candidates(source, _patterns()) == [
        Candidate(begin=AnchorPoint(1, 310.0), end=AnchorPoint(1, 500.0))
    ]


def test_repeated_begin_overwrites_slot() -> None:
    source = StaticTextSource(
        [StaticPage.from_lines([(100, "BEGIN"), (300, "BEGIN"), (500, "END")])]
    )
    (candidate,) = track_candidates(source, _patterns())
    assert candidate.begin == AnchorPoint(1, 310.0)


def test_two_regions_on_one_page() -> None:
    source = StaticTextSource(
        [StaticPage.from_lines([(100, "BEGIN"), (200, "END"), (300, "BEGIN"), (400, "END")])]
    )
    assert track_candidates(source, _patterns()) == [
        Candidate(begin=AnchorPoint(1, 110.0), end=AnchorPoint(1, 200.0)),
        Candidate(begin=AnchorPoint(1, 310.0), end=AnchorPoint(1, 400.0)),
    ]


def test_candidate_carries_across_empty_page() -> None:
    source = StaticTextSource(
        [
            StaticPage.from_lines([(100, "BEGIN")]),
            StaticPage(width=600.0, height=800.0),
            StaticPage.from_lines([(300, "END")]),
        ]
    )
    assert track_candidates(source, _patterns()) == [
        Candidate(begin=AnchorPoint(1, 110.0), end=AnchorPoint(3, 300.0))
    ]


def test_trailing_invalid_candidate_is_dropped() -> None:
    source = StaticTextSource(
        [StaticPage.from_lines([(100, "BEGIN"), (200, "END"), (300, "END"), (400, "BEGIN")])]
    )
    # The second END opens a new candidate that the final BEGIN leaves out of order.
    assert track_candidates(source, _patterns()) == [
        Candidate(begin=AnchorPoint(1, 110.0), end=AnchorPoint(1, 200.0)),
    ]


def test_empty_pattern_match_terminates() -> None:
    patterns = PatternConfig(begin_pattern="", end_pattern="END")
    state = scan_page(TrackerState(), 1, _tokens([(100, "ab"), (200, "END")]), patterns)
    assert state.closed == (Candidate(begin=AnchorPoint(1, 110.0), end=AnchorPoint(1, 200.0)),)
    assert state.current == Candidate(begin=AnchorPoint(1, 210.0))


def test_header_zone_hides_anchor() -> None:
    source = StaticTextSource(
        [StaticPage.from_lines([(20, "BEGIN"), (100, "row"), (300, "END")])]
    )
    assert len(track_candidates(source, _patterns())) == 1
    assert track_candidates(source, _patterns(), ExclusionZone(header_fraction=0.1)) == []


def test_search_band_uses_zone_when_configured() -> None:
    geometry = PageGeometry(width=600.0, height=800.0, natural_text_top=40.0, natural_text_bottom=700.0)
    assert search_band(geometry, None) == (40.0, 700.0)
    assert search_band(geometry, ExclusionZone()) == (40.0, 700.0)
    assert search_band(geometry, ExclusionZone(header_fraction=0.1, footer_fraction=0.05)) == (80.0, 760.0)
