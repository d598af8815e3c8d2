"""Square working grid with row/column views and snapshot helpers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional, Sequence, Tuple

from ..core.constants import LineType

CellValue = Optional[bool]


@dataclass(frozen=True)
class GridSnapshot:
    cells: Tuple[Tuple[CellValue, ...], ...]
    unknown_count: int


class NonogramGrid:
    """An N×N grid of cell states (``None`` unknown, ``True`` filled, ``False`` empty).

    Solvers and the flow simulator own private instances; player grids coming
    from the interaction layer are plain nested lists and are wrapped with
    :meth:`from_rows`, which copies them.
    """

    def __init__(self, size: int) -> None:
        if size <= 0:
            raise ValueError(f"Grid size must be positive, got {size}")
        self.size = size
        self.cells: List[List[CellValue]] = [[None] * size for _ in range(size)]
        self._unknown_count = size * size

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[CellValue]]) -> "NonogramGrid":
        grid = cls(len(rows))
        for r, row in enumerate(rows):
            if len(row) != grid.size:
                raise ValueError(f"Row {r} has length {len(row)}, expected {grid.size}")
            for c, value in enumerate(row):
                grid.set(r, c, value)
        return grid

    # ------------------------------------------------------------------
    # Cell access
    # ------------------------------------------------------------------
    def cell(self, row: int, col: int) -> CellValue:
        return self.cells[row][col]

    def set(self, row: int, col: int, value: CellValue) -> None:
        previous = self.cells[row][col]
        if previous is None and value is not None:
            self._unknown_count -= 1
        elif previous is not None and value is None:
            self._unknown_count += 1
        self.cells[row][col] = value

    def row(self, index: int) -> List[CellValue]:
        return list(self.cells[index])

    def column(self, index: int) -> List[CellValue]:
        return [self.cells[r][index] for r in range(self.size)]

    def line(self, line_type: LineType, index: int) -> List[CellValue]:
        if line_type == LineType.ROW:
            return self.row(index)
        return self.column(index)

    def line_coords(self, line_type: LineType, index: int) -> List[Tuple[int, int]]:
        if line_type == LineType.ROW:
            return [(index, c) for c in range(self.size)]
        return [(r, index) for r in range(self.size)]

    def lines(self) -> Iterator[Tuple[LineType, int, List[CellValue]]]:
        """Yield every row, then every column."""
        for r in range(self.size):
            yield LineType.ROW, r, self.row(r)
        for c in range(self.size):
            yield LineType.COLUMN, c, self.column(c)

    # ------------------------------------------------------------------
    # State queries
    # ------------------------------------------------------------------
    @property
    def unknown_count(self) -> int:
        return self._unknown_count

    def is_complete(self) -> bool:
        return self._unknown_count == 0

    def first_unknown(self) -> Optional[Tuple[int, int]]:
        """Row-major position of the first unknown cell, if any."""
        if self._unknown_count == 0:
            return None
        for r, row in enumerate(self.cells):
            for c, value in enumerate(row):
                if value is None:
                    return r, c
        return None

    # ------------------------------------------------------------------
    # Copies
    # ------------------------------------------------------------------
    def snapshot(self) -> GridSnapshot:
        return GridSnapshot(
            cells=tuple(tuple(row) for row in self.cells),
            unknown_count=self._unknown_count,
        )

    def restore(self, snapshot: GridSnapshot) -> None:
        self.cells = [list(row) for row in snapshot.cells]
        self._unknown_count = snapshot.unknown_count

    def copy(self) -> "NonogramGrid":
        clone = NonogramGrid(self.size)
        clone.restore(self.snapshot())
        return clone

    def to_lists(self) -> List[List[CellValue]]:
        return [list(row) for row in self.cells]

    def to_solution(self) -> List[List[bool]]:
        """Return the grid as booleans; unknown cells read as empty."""
        return [[bool(value) for value in row] for row in self.cells]


def create_empty_grid(size: int) -> List[List[CellValue]]:
    """A fresh all-unknown player grid."""

    return [[None] * size for _ in range(size)]
