"""Tests for the fuzzy locator, voting and box detection."""

from __future__ import annotations

from collections import Counter

import pytest

from ascii_box_repair import (
    Box,
    RepairConfig,
    count_votes,
    determine_right_col,
    find_boxes,
    find_char_near,
    index_box_rows,
    trace_box_from_bottom,
    trace_box_from_top,
    vote_winner,
)


def test_find_char_near_exact_hit():
    assert find_char_near("  │", 2, "│") == 2


def test_find_char_near_prefers_left_on_tie():
    # Bars at distance 2 on both sides of column 2.
    assert find_char_near("│ x │", 2, "│") == 0


def test_find_char_near_prefers_closest():
    assert find_char_near("│  │", 2, "│") == 3


def test_find_char_near_respects_window():
    line = "│     "
    assert find_char_near(line, 5, "│") is None
    assert find_char_near(line, 5, "│", max_offset=5) == 0


def test_find_char_near_missing_and_out_of_bounds():
    assert find_char_near("abc", 1, "│") is None
    assert find_char_near("", 0, "│") is None
    assert find_char_near("│", 10, "│") is None


def test_vote_winner_majority():
    assert vote_winner(Counter([3, 5, 5])) == 5


def test_vote_winner_tie_goes_to_first_inserted():
    votes = Counter()
    votes[5] += 2
    votes[3] += 2
    assert vote_winner(votes) == 5


def test_count_votes_ignores_missing():
    assert count_votes([4, None, 4, 2]) == Counter({4: 2, 2: 1})


def test_right_col_all_evidence_agrees():
    lines = ["┌────┐", "│ ab │", "└────┘"]
    assert determine_right_col(lines, [1], 0, 2, 0) == 5


def test_right_col_content_outweighs_borders():
    lines = ["┌────┐", "│ abcd │", "└────┘"]
    assert determine_right_col(lines, [1], 0, 2, 0) == 7


def test_right_col_border_weight_is_configurable():
    lines = ["┌────┐", "│ abcd │", "└────┘"]
    config = RepairConfig(border_weight=2)
    assert determine_right_col(lines, [1], 0, 2, 0, config) == 5


def test_right_col_compensates_duplicate_left_bar():
    lines = ["┌────┐", "││ ab │", "└────┘"]
    assert determine_right_col(lines, [1], 0, 2, 0) == 5


def test_right_col_without_evidence():
    lines = ["┌────", "│ ab", "text"]
    assert determine_right_col(lines, [1], 0, None, 0) is None


def test_trace_from_top_complete_box():
    lines = ["┌────┐", "│ ab │", "└────┘"]
    assert trace_box_from_top(lines, 0, 0) == Box(0, 2, 0, 5, has_top=True, has_bottom=True)


def test_trace_from_top_without_bottom():
    lines = ["┌────┐", "│ ab │", "plain prose"]
    assert trace_box_from_top(lines, 0, 0) == Box(0, 1, 0, 5, has_top=True, has_bottom=False)


def test_trace_from_top_needs_content_rows():
    assert trace_box_from_top(["┌────┐", "plain prose"], 0, 0) is None
    assert trace_box_from_top(["┌────┐", "└────┘"], 0, 0) is None


def test_trace_from_top_votes_left_column():
    # The top corner is two columns right of the body.
    lines = ["  ┌────┐", "│ ab   │", "│ cd   │", "└──────┘"]
    box = trace_box_from_top(lines, 0, 2)
    assert box == Box(0, 3, 0, 7)


def test_trace_from_bottom():
    lines = ["│ ab │", "│ cd │", "└────┘"]
    assert trace_box_from_bottom(lines, 2, 0) == Box(0, 2, 0, 5, has_top=False, has_bottom=True)


def test_trace_from_bottom_needs_content_rows():
    assert trace_box_from_bottom(["text", "└────┘"], 1, 0) is None
    assert trace_box_from_bottom(["└────┘"], 0, 0) is None


def test_find_boxes_side_by_side():
    lines = ["┌──┐ ┌──┐", "│a │ │b │", "└──┘ └──┘"]
    assert find_boxes(lines) == [Box(0, 2, 0, 3), Box(0, 2, 5, 8)]


def test_find_boxes_bottom_only_partial():
    lines = ["│ ab │", "└────┘"]
    assert find_boxes(lines) == [Box(0, 1, 0, 5, has_top=False, has_bottom=True)]


def test_find_boxes_orders_top_pass_first():
    lines = [
        "│ a │",
        "└───┘",
        "┌───┐",
        "│ b │",
        "└───┘",
    ]
    boxes = find_boxes(lines)
    assert boxes == [Box(2, 4, 0, 4), Box(0, 1, 0, 4, has_top=False)]


def test_find_boxes_ignores_lonely_corners():
    assert find_boxes(["┌ not a box", "just prose", "└ neither"]) == []


def test_index_box_rows():
    a = Box(0, 2, 0, 3)
    b = Box(1, 3, 5, 8)
    rows = index_box_rows([a, b])
    assert sorted(rows) == [0, 1, 2, 3]
    assert rows[1] == [a, b]
    assert rows[3] == [b]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"max_offset": -1},
        {"bottom_corner_offset": -2},
        {"covered_offset": -1},
        {"content_weight": 0},
        {"border_weight": -1},
    ],
)
def test_config_rejects_bad_values(kwargs):
    with pytest.raises(ValueError):
        RepairConfig(**kwargs)
