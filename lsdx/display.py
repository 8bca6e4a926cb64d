"""Laying out rendered cells as a grid or a tree."""

from __future__ import annotations

import enum
from dataclasses import dataclass, field

from wcwidth import wcwidth

EDGE = "\u251c\u2500\u2500"  # "├──"
LINE = "\u2502  "  # "│  "
CORNER = "\u2514\u2500\u2500"  # "└──"
BLANK = "   "

_ESCAPE_START = "\x1b["


def get_visible_width(text: str) -> int:
    """The number of terminal columns ``text`` occupies, ignoring colour sequences."""
    invisible = 0
    start = text.find(_ESCAPE_START)
    while start != -1:
        end = text.find("m", start)
        if end != -1:
            invisible += end - start
        start = text.find(_ESCAPE_START, start + 1)
    width = sum(max(wcwidth(ch), 0) for ch in text)
    return width - invisible


def tree_prefix(depth: int, prefix: str, is_last: bool) -> tuple[str, str]:
    """Return the prefix for an entry and the prefix for that entry's children.

    At depth 0 no branch is drawn and both prefixes are ``prefix`` unchanged.
    """
    if depth <= 0:
        return prefix, prefix
    if is_last:
        return f"{prefix}{CORNER} ", f"{prefix}{BLANK} "
    return f"{prefix}{EDGE} ", f"{prefix}{LINE} "


class Direction(enum.Enum):
    """The order in which cells fill the grid."""

    LEFT_TO_RIGHT = "left-to-right"
    TOP_TO_BOTTOM = "top-to-bottom"


@dataclass
class Cell:
    """A piece of text and its visible width; the width is measured if not given."""

    contents: str
    width: int | None = field(default=None)

    def __post_init__(self) -> None:
        if self.width is None:
            self.width = get_visible_width(self.contents)


@dataclass
class _Dimensions:
    num_lines: int
    widths: list[int]


class Grid:
    """Cells arranged into columns separated by a fixed number of spaces."""

    def __init__(self, direction: Direction = Direction.TOP_TO_BOTTOM, filling: int = 2) -> None:
        if filling < 0:
            raise ValueError("filling must not be negative")
        self.direction = direction
        self.filling = filling
        self.cells: list[Cell] = []
        self._widest = 0

    def add(self, cell: Cell) -> None:
        self._widest = max(self._widest, cell.width)
        self.cells.append(cell)

    def _column_widths(self, num_lines: int, num_columns: int) -> _Dimensions:
        widths = [0] * num_columns
        for index, cell in enumerate(self.cells):
            if self.direction is Direction.LEFT_TO_RIGHT:
                column = index % num_columns
            else:
                column = index // num_lines
            widths[column] = max(widths[column], cell.width)
        return _Dimensions(num_lines, widths)

    def _theoretical_max_num_lines(self, maximum_width: int) -> int:
        min_columns = 0
        total = 0
        count = len(self.cells)
        for width in sorted((c.width for c in self.cells), reverse=True):
            if width + total > maximum_width:
                return -(-count // min_columns)
            min_columns += 1
            total += width + self.filling
        return 1

    def _width_dimensions(self, maximum_width: int) -> _Dimensions | None:
        if self._widest > maximum_width:
            return None
        count = len(self.cells)
        if count == 0:
            return _Dimensions(0, [])
        if count == 1:
            return _Dimensions(1, [self.cells[0].width])
        max_lines = self._theoretical_max_num_lines(maximum_width)
        if max_lines == 1:
            return _Dimensions(1, [c.width for c in self.cells])
        smallest: _Dimensions | None = None
        for num_lines in range(max_lines, 0, -1):
            num_columns = -(-count // num_lines)
            separators = (num_columns - 1) * self.filling
            if maximum_width < separators:
                continue
            candidate = self._column_widths(num_lines, num_columns)
            if sum(candidate.widths) < maximum_width - separators:
                smallest = candidate
            else:
                return smallest
        return smallest

    def _render(self, dims: _Dimensions) -> str:
        lines = []
        columns = len(dims.widths)
        for y in range(dims.num_lines):
            parts = []
            for x, column_width in enumerate(dims.widths):
                if self.direction is Direction.LEFT_TO_RIGHT:
                    num = y * columns + x
                else:
                    num = y + dims.num_lines * x
                if num >= len(self.cells):
                    continue
                cell = self.cells[num]
                if x == columns - 1:
                    parts.append(cell.contents)
                else:
                    padding = column_width - cell.width + self.filling
                    parts.append(cell.contents + " " * padding)
            lines.append("".join(parts) + "\n")
        return "".join(lines)

    def fit_into_width(self, width: int) -> str | None:
        """Lay the cells out in as few lines as fit ``width``; None if they cannot."""
        dims = self._width_dimensions(width)
        return None if dims is None else self._render(dims)

    def fit_into_columns(self, columns: int) -> str:
        """Lay the cells out in exactly ``columns`` columns."""
        if columns <= 0:
            raise ValueError("the number of columns must be positive")
        num_lines = -(-len(self.cells) // columns)
        return self._render(self._column_widths(num_lines, columns))