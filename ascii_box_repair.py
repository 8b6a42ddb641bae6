#!/usr/bin/env python3
"""Repair broken box-drawing diagrams in plain text.

Detects complete boxes (┌─┐ / │ │ / └─┘) and partial structures
(┌─┐ / │ │ without └, or │ │ / └─┘ without ┌), then rebuilds every row
they touch with consistent borders and aligned content.

Handles:
- borders of the wrong width, or with stray glyphs / gaps in them
- duplicated or missing vertical bars on content rows
- missing ┐ / ┘ corners
- borders indented differently from the box body
- orphan bars on connector rows between boxes
"""
from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set, Tuple
import argparse
import logging
import sys

log = logging.getLogger(__name__)

# =============================================================================
# Box-drawing characters
# =============================================================================

VERTICAL = '│'
HORIZONTAL = '─'
TOP_LEFT = '┌'
TOP_RIGHT = '┐'
BOTTOM_LEFT = '└'
BOTTOM_RIGHT = '┘'
TEE_DOWN = '┬'
TEE_UP = '┴'
ARROW_UP = '▲'
ARROW_DOWN = '▼'

CONNECTOR_CHARS = {TEE_DOWN, TEE_UP, '├', '┤', '┼'}
ARROW_CHARS = {ARROW_UP, ARROW_DOWN}

# A vertical run in the adjacent row that lands on a border becomes a tee.
PIPE_CHARS = {VERTICAL} | CONNECTOR_CHARS

# Neighbours that keep a bar alive on a standalone connector row.
LINK_CHARS = PIPE_CHARS | ARROW_CHARS

CONNECTOR_ROW_CHARS = {' ', VERTICAL} | ARROW_CHARS

# =============================================================================
# Types
# =============================================================================

@dataclass(frozen=True)
class Box:
    top_row: int
    bottom_row: int
    left_col: int
    right_col: int
    has_top: bool = True
    has_bottom: bool = True

    @property
    def width(self) -> int:
        return self.right_col - self.left_col + 1

    @property
    def inner_width(self) -> int:
        return self.right_col - self.left_col - 1


@dataclass(frozen=True)
class RepairConfig:
    """Tuning knobs for detection and voting.

    The defaults reproduce the stock behaviour; they only need changing for
    unusually noisy input.
    """
    max_offset: int = 3
    bottom_corner_offset: int = 6
    covered_offset: int = 3
    content_weight: int = 3
    border_weight: int = 1

    def __post_init__(self) -> None:
        for name in ('max_offset', 'bottom_corner_offset', 'covered_offset'):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must be >= 0, got {getattr(self, name)}")
        for name in ('content_weight', 'border_weight'):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be > 0, got {getattr(self, name)}")


DEFAULT_CONFIG = RepairConfig()

BoxRows = Dict[int, List[Box]]

# =============================================================================
# Voting
# =============================================================================

def count_votes(columns: Iterable[Optional[int]]) -> Counter:
    votes: Counter = Counter()
    for col in columns:
        if col is not None:
            votes[col] += 1
    return votes


def vote_winner(votes: Counter) -> int:
    """Column with the highest count; ties go to the first key inserted."""
    # max() keeps the first maximal element, and Counter iterates in
    # insertion order.
    return max(votes, key=lambda col: votes[col])

# =============================================================================
# Fuzzy character search
# =============================================================================

def find_char_near(line: str, target: int, char: str, max_offset: int = 3) -> Optional[int]:
    """Column of `char` closest to `target` within +/- `max_offset`.

    Offsets are scanned left to right and only a strictly closer hit
    replaces the current best, so `target - d` beats `target + d`.
    """
    best: Optional[int] = None
    best_dist = max_offset + 1
    for offset in range(-max_offset, max_offset + 1):
        col = target + offset
        if 0 <= col < len(line) and line[col] == char:
            dist = abs(offset)
            if dist < best_dist:
                best = col
                best_dist = dist
    return best


def scan_right(line: str, start: int, char: str) -> Optional[int]:
    idx = line.find(char, max(start, 0))
    return idx if idx >= 0 else None

# =============================================================================
# Box tracing
# =============================================================================

def trace_box_from_top(lines: List[str], top_row: int, initial_left: int,
                       config: RepairConfig = DEFAULT_CONFIG) -> Optional[Box]:
    content_rows: List[int] = []
    bottom_row: Optional[int] = None

    for row in range(top_row + 1, len(lines)):
        line = lines[row]
        if find_char_near(line, initial_left, BOTTOM_LEFT, config.bottom_corner_offset) is not None:
            bottom_row = row
            break
        if find_char_near(line, initial_left, VERTICAL, config.max_offset) is not None:
            content_rows.append(row)
        else:
            break

    if not content_rows:
        log.debug("corner at (%d, %d): no content rows below", top_row, initial_left)
        return None

    has_bottom = bottom_row is not None
    if bottom_row is None:
        bottom_row = content_rows[-1]

    observed: List[Optional[int]] = [initial_left]
    if has_bottom:
        observed.append(find_char_near(lines[bottom_row], initial_left, BOTTOM_LEFT, config.max_offset))
    observed.extend(find_char_near(lines[r], initial_left, VERTICAL, config.max_offset) for r in content_rows)
    left_col = vote_winner(count_votes(observed))

    right_col = determine_right_col(
        lines,
        content_rows,
        top_row,
        bottom_row if has_bottom else None,
        left_col,
        config,
    )
    if right_col is None or right_col <= left_col:
        log.debug("corner at (%d, %d): no usable right edge", top_row, initial_left)
        return None

    return Box(
        top_row=top_row,
        bottom_row=bottom_row,
        left_col=left_col,
        right_col=right_col,
        has_top=True,
        has_bottom=has_bottom,
    )


def trace_box_from_bottom(lines: List[str], bottom_row: int, initial_left: int,
                          config: RepairConfig = DEFAULT_CONFIG) -> Optional[Box]:
    """Trace a box whose top border is missing, walking up from its └."""
    content_rows: List[int] = []
    for row in range(bottom_row - 1, -1, -1):
        if find_char_near(lines[row], initial_left, VERTICAL, config.max_offset) is None:
            break
        content_rows.append(row)

    if not content_rows:
        log.debug("corner at (%d, %d): no content rows above", bottom_row, initial_left)
        return None

    content_rows.reverse()

    observed: List[Optional[int]] = [initial_left]
    observed.extend(find_char_near(lines[r], initial_left, VERTICAL, config.max_offset) for r in content_rows)
    left_col = vote_winner(count_votes(observed))

    right_col = determine_right_col(lines, content_rows, None, bottom_row, left_col, config)
    if right_col is None or right_col <= left_col:
        log.debug("corner at (%d, %d): no usable right edge", bottom_row, initial_left)
        return None

    return Box(
        top_row=content_rows[0],
        bottom_row=bottom_row,
        left_col=left_col,
        right_col=right_col,
        has_top=False,
        has_bottom=True,
    )


def skip_duplicate_bars(line: str, left_pipe: int) -> int:
    """Number of │ immediately following the one at `left_pipe`."""
    extra = 0
    pos = left_pipe + 1
    while pos < len(line) and line[pos] == VERTICAL:
        extra += 1
        pos += 1
    return extra


def determine_right_col(lines: List[str], content_rows: List[int], top_row: Optional[int],
                        bottom_row: Optional[int], left_col: int,
                        config: RepairConfig = DEFAULT_CONFIG) -> Optional[int]:
    content_votes: Counter = Counter()
    for r in content_rows:
        line = lines[r]
        left_pipe = find_char_near(line, left_col, VERTICAL, config.max_offset)
        if left_pipe is None:
            continue
        extra_left = skip_duplicate_bars(line, left_pipe)
        right_pipe = scan_right(line, left_pipe + 1 + extra_left, VERTICAL)
        if right_pipe is not None:
            # Shift back by the duplicates so every row votes in the same
            # coordinate space.
            content_votes[right_pipe - extra_left] += 1

    border_votes: Counter = Counter()
    if top_row is not None:
        corner = scan_right(lines[top_row], left_col + 1, TOP_RIGHT)
        if corner is not None:
            border_votes[corner] += 1

    if bottom_row is not None:
        bottom_line = lines[bottom_row]
        bl = find_char_near(bottom_line, left_col, BOTTOM_LEFT, config.max_offset)
        if bl is not None:
            corner = scan_right(bottom_line, bl + 1, BOTTOM_RIGHT)
            if corner is not None:
                border_votes[corner] += 1

    combined: Counter = Counter()
    for col, count in content_votes.items():
        combined[col] += count * config.content_weight
    for col, count in border_votes.items():
        combined[col] += count * config.border_weight

    if not combined:
        return None
    return vote_winner(combined)

# =============================================================================
# Box detection
# =============================================================================

def corner_positions(lines: List[str], corner: str) -> List[Tuple[int, int]]:
    return [
        (i, j)
        for i, line in enumerate(lines)
        for j, ch in enumerate(line)
        if ch == corner
    ]


def find_boxes(lines: List[str], config: RepairConfig = DEFAULT_CONFIG) -> List[Box]:
    boxes: List[Box] = []
    claimed: Set[Tuple[int, int]] = set()

    # Pass 1: boxes hanging from a ┌ (complete, or missing their bottom).
    for i, j in corner_positions(lines, TOP_LEFT):
        if (i, j) in claimed:
            continue
        box = trace_box_from_top(lines, i, j, config)
        if box is not None:
            claimed.add((i, box.left_col))
            boxes.append(box)
            log.debug("box from top: %s", box)

    # Pass 2: bottom-only partial boxes (└─┘ with │ above and no ┌).
    for i, j in corner_positions(lines, BOTTOM_LEFT):
        if (i, j) in claimed:
            continue
        covered = any(
            b.bottom_row == i and abs(b.left_col - j) <= config.covered_offset
            for b in boxes
        )
        if covered:
            continue
        box = trace_box_from_bottom(lines, i, j, config)
        if box is not None:
            claimed.add((i, j))
            boxes.append(box)
            log.debug("box from bottom: %s", box)

    return boxes


def index_box_rows(boxes: List[Box]) -> BoxRows:
    box_rows: BoxRows = {}
    for box in boxes:
        for row in range(box.top_row, box.bottom_row + 1):
            box_rows.setdefault(row, []).append(box)
    return box_rows

# =============================================================================
# Connector rows
# =============================================================================

def clean_connector_lines(lines: List[str], box_rows: BoxRows) -> None:
    """Drop orphan │ from rows that only carry connectors between boxes.

    A bar survives when the row above or below has a connector-class glyph
    in the same column. Arrow heads are always kept. Mutates `lines`.
    """
    for i, line in enumerate(lines):
        if i in box_rows:
            continue
        if any(ch not in CONNECTOR_ROW_CHARS for ch in line):
            continue

        pipes = [j for j, ch in enumerate(line) if ch == VERTICAL]
        if not pipes:
            continue

        valid: Set[int] = set()
        for pos in pipes:
            for adj in (i - 1, i + 1):
                if 0 <= adj < len(lines) and pos < len(lines[adj]) and lines[adj][pos] in LINK_CHARS:
                    valid.add(pos)
                    break

        if valid == set(pipes):
            continue

        cleaned = [' '] * len(line)
        for pos in valid:
            cleaned[pos] = VERTICAL
        for j, ch in enumerate(line):
            if ch in ARROW_CHARS:
                cleaned[j] = ch
        lines[i] = ''.join(cleaned).rstrip()
        log.debug("connector row %d: dropped bars at %s", i, sorted(set(pipes) - valid))

# =============================================================================
# Borders
# =============================================================================

def connectors_from_adjacent(lines: List[str], adj_row: int, box_left: int, width: int,
                             connector: str) -> Dict[int, str]:
    """Border offsets that should carry `connector`, keyed relative to `box_left`.

    Each contiguous vertical run in `adj_row` over the border interior
    contributes one connector, at the run's first column.
    """
    connectors: Dict[int, str] = {}
    if adj_row < 0 or adj_row >= len(lines):
        return connectors

    adj_line = lines[adj_row]
    prev_was_pipe = False
    for col in range(box_left + 1, box_left + width - 1):
        if col < len(adj_line) and adj_line[col] in PIPE_CHARS:
            if not prev_was_pipe:
                connectors[col - box_left] = connector
            prev_was_pipe = True
        else:
            prev_was_pipe = False
    return connectors


def draw_border(left: str, right: str, width: int, connectors: Dict[int, str]) -> str:
    border = list(left + HORIZONTAL * (width - 2) + right)
    for pos, ch in connectors.items():
        border[pos] = ch
    return ''.join(border)


def build_top_border(box: Box, lines: List[str], row: int) -> str:
    connectors = connectors_from_adjacent(lines, row - 1, box.left_col, box.width, TEE_UP)
    return draw_border(TOP_LEFT, TOP_RIGHT, box.width, connectors)


def build_bottom_border(box: Box, lines: List[str], row: int) -> str:
    connectors = connectors_from_adjacent(lines, row + 1, box.left_col, box.width, TEE_DOWN)
    return draw_border(BOTTOM_LEFT, BOTTOM_RIGHT, box.width, connectors)

# =============================================================================
# Content rows
# =============================================================================

def fit_content(content: str, inner_width: int) -> str:
    if len(content) < inner_width:
        return content.ljust(inner_width)
    if len(content) > inner_width:
        content = content.rstrip()
        if len(content) <= inner_width:
            return content.ljust(inner_width)
        return content[:inner_width]
    return content


def build_content(box: Box, original: str, config: RepairConfig = DEFAULT_CONFIG) -> str:
    inner_width = box.inner_width

    left_pipe = find_char_near(original, box.left_col, VERTICAL, config.max_offset)
    if left_pipe is None:
        return VERTICAL + ' ' * inner_width + VERTICAL

    content_start = left_pipe + 1 + skip_duplicate_bars(original, left_pipe)

    right_pipe = find_char_near(original, box.right_col, VERTICAL, config.max_offset)
    if right_pipe is not None and right_pipe > content_start:
        content = original[content_start:right_pipe]
    else:
        content = original[content_start:].rstrip()

    return VERTICAL + fit_content(content, inner_width) + VERTICAL

# =============================================================================
# Line reconstruction
# =============================================================================

def reconstruct_line(lines: List[str], boxes: List[Box], row: int,
                     config: RepairConfig = DEFAULT_CONFIG) -> str:
    original = lines[row]
    max_end = max(b.right_col for b in boxes) + 1
    result = [' '] * max(len(original), max_end)

    for box in sorted(boxes, key=lambda b: b.left_col):
        if row == box.top_row and box.has_top:
            region = build_top_border(box, lines, row)
        elif row == box.bottom_row and box.has_bottom:
            region = build_bottom_border(box, lines, row)
        else:
            region = build_content(box, original, config)
        result[box.left_col:box.left_col + len(region)] = region

    # Leading whitespace is kept as written so a border redrawn at the voted
    # column replaces a mis-indented one.
    return ''.join(result).rstrip()

# =============================================================================
# Top-level repair
# =============================================================================

def repair_ascii_art(text: str, config: Optional[RepairConfig] = None) -> str:
    """Return `text` with every detected box diagram redrawn.

    Text without boxes comes back unchanged. Rows outside any box are left
    alone, except pure connector rows whose orphan bars are removed.
    """
    if config is None:
        config = DEFAULT_CONFIG
    lines = text.split('\n')
    boxes = find_boxes(lines, config)
    if not boxes:
        return text

    box_rows = index_box_rows(boxes)

    # Connector rows are cleaned first so tees computed for borders see the
    # corrected │ positions.
    clean_connector_lines(lines, box_rows)

    for row in sorted(box_rows):
        lines[row] = reconstruct_line(lines, box_rows[row], row, config)

    log.debug("repaired %d boxes across %d rows", len(boxes), len(box_rows))
    return '\n'.join(lines)

# =============================================================================
# CLI
# =============================================================================

def read_input(path: str) -> str:
    if path == '-':
        text = sys.stdin.read()
    else:
        with open(path, 'r', encoding='utf-8') as f:
            text = f.read()
    return text.replace('\r\n', '\n').replace('\r', '\n')


def write_output(path: Optional[str], text: str) -> None:
    if path is None or path == '-':
        sys.stdout.write(text)
        return
    with open(path, 'w', encoding='utf-8') as f:
        f.write(text)


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description='Repair broken box-drawing diagrams in text.')
    parser.add_argument('input', nargs='?', default='-', help="Path to a UTF-8 text file ('-' for stdin)")
    parser.add_argument('-o', '--output', help='Write the repaired text here instead of stdout')
    parser.add_argument('--in-place', action='store_true', help='Overwrite the input file')
    parser.add_argument('--check', action='store_true',
                        help='Write nothing; exit 1 if the text would change')
    parser.add_argument('--loglevel', default='WARNING', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging verbosity (default: WARNING)')
    args = parser.parse_args(argv)

    logging.basicConfig(level=args.loglevel, format='%(asctime)s - %(levelname)s - %(message)s')

    if args.in_place and args.input == '-':
        parser.error('--in-place needs an input file')
    if args.in_place and args.output:
        parser.error('--in-place and --output are mutually exclusive')

    try:
        text = read_input(args.input)
    except OSError as e:
        print(f"Cannot read {args.input}: {e}", file=sys.stderr)
        return 1

    output = repair_ascii_art(text)

    if args.check:
        changed = output != text
        log.info("%s: %s", args.input, 'needs repair' if changed else 'ok')
        return 1 if changed else 0

    write_output(args.input if args.in_place else args.output, output)
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
