"""Conversion between fully-known lines, clue sequences and arrangements."""

from __future__ import annotations

from functools import lru_cache
from typing import Iterable, List, Optional, Sequence, Tuple

from ..core.constants import EMPTY_CLUE
from ..core.exceptions import IncompleteLineError, InvalidClueError
from ..core.models import Arrangement, Clues


def normalize_clues(clues: Iterable[int]) -> Clues:
    """Return ``clues`` as a canonical tuple; an empty sequence becomes ``(0,)``."""

    values = tuple(int(value) for value in clues)
    if any(value < 0 for value in values):
        raise InvalidClueError(f"Negative run length in clues {values}")
    if not values or values == EMPTY_CLUE:
        return EMPTY_CLUE
    if 0 in values:
        raise InvalidClueError(f"Zero run length inside clues {values}")
    return values


def compute_clues(line: Sequence[Optional[bool]]) -> Clues:
    """Run-length encode the filled cells of a fully-known line."""

    clues: List[int] = []
    count = 0
    for index, cell in enumerate(line):
        if cell is None:
            raise IncompleteLineError(f"Cell {index} is unknown; clues need a complete line")
        if cell:
            count += 1
        elif count:
            clues.append(count)
            count = 0
    if count:
        clues.append(count)
    return tuple(clues) if clues else EMPTY_CLUE


def min_space(clues: Sequence[int]) -> int:
    """Smallest line length that can hold ``clues``: runs plus one gap between each."""

    runs = [value for value in clues if value > 0]
    if not runs:
        return 0
    return sum(runs) + len(runs) - 1


def generate_arrangements(clues: Sequence[int], length: int) -> List[Arrangement]:
    """Enumerate every arrangement of ``clues`` in a line of ``length``.

    Arrangements are produced leftmost-first, so the first entry packs every
    run to the left and the last packs every run to the right.
    """

    return list(_arrangements(normalize_clues(clues), length))


def count_arrangements(clues: Sequence[int], length: int) -> int:
    return len(_arrangements(normalize_clues(clues), length))


def matches_line(arrangement: Arrangement, line: Sequence[Optional[bool]]) -> bool:
    """True when ``arrangement`` agrees with every known cell of ``line``."""

    return all(cell is None or cell == value for cell, value in zip(line, arrangement))


def consistent_arrangements(
    clues: Sequence[int], line: Sequence[Optional[bool]]
) -> List[Arrangement]:
    return [arr for arr in _arrangements(normalize_clues(clues), len(line)) if matches_line(arr, line)]


@lru_cache(maxsize=4096)
def _arrangements(clues: Clues, length: int) -> Tuple[Arrangement, ...]:
    if clues == EMPTY_CLUE:
        return ((False,) * length,)

    results: List[Arrangement] = []
    count = len(clues)

    def place(index: int, position: int, current: List[bool]) -> None:
        if index == count:
            results.append(tuple(current + [False] * (length - len(current))))
            return
        run = clues[index]
        # Each later run needs its own cells plus one separating gap.
        remaining = sum(value + 1 for value in clues[index + 1:])
        latest = length - run - remaining
        for start in range(position, latest + 1):
            placed = current + [False] * (start - len(current)) + [True] * run
            if index < count - 1:
                placed.append(False)
            place(index + 1, len(placed), placed)

    place(0, 0, [])
    return tuple(results)
