"""Accumulation of guillotine cut segments into merged saw runs.

Neighbouring placements often border the same saw line. Counting the
edges of each placement separately would overstate both the number of
cuts and the total cut length, so collinear segments that overlap or
touch are merged into a single run.
"""

from __future__ import annotations

from typing import Iterable

from nesting.domain.geometry import EPSILON, CutAxis, CutSegment

# Line coordinates are keyed at this many decimals so that float noise
# from kerf arithmetic does not split one saw line into two.
_POSITION_DECIMALS = 6


def _line_key(axis: CutAxis, position: float) -> tuple[str, float]:
    return (axis.value, round(position, _POSITION_DECIMALS))


def _insert(runs: list[tuple[float, float]], start: float, end: float) -> float:
    """Insert an interval into sorted disjoint runs, returning the length added."""
    new_start, new_end = start, end
    covered = 0.0
    kept: list[tuple[float, float]] = []
    for run_start, run_end in runs:
        if run_end < new_start - EPSILON or run_start > new_end + EPSILON:
            kept.append((run_start, run_end))
            continue
        # Overlapping or touching: absorb
        covered += max(0.0, min(run_end, end) - max(run_start, start))
        new_start = min(new_start, run_start)
        new_end = max(new_end, run_end)
    kept.append((new_start, new_end))
    kept.sort()
    runs[:] = kept
    return (end - start) - covered


class CutAccumulator:
    """Merged cut runs for one sheet."""

    def __init__(self) -> None:
        self._lines: dict[tuple[str, float], list[tuple[float, float]]] = {}

    def add(self, segment: CutSegment) -> float:
        """Record a segment.

        Returns:
            The new cut length the segment contributed.
        """
        runs = self._lines.setdefault(_line_key(segment.axis, segment.position), [])
        return _insert(runs, segment.start, segment.end)

    def add_all(self, segments: Iterable[CutSegment]) -> float:
        return sum(self.add(segment) for segment in segments)

    def marginal_length(self, segments: Iterable[CutSegment]) -> float:
        """New cut length the segments would add, without recording them."""
        scratch: dict[tuple[str, float], list[tuple[float, float]]] = {}
        added = 0.0
        for segment in segments:
            key = _line_key(segment.axis, segment.position)
            if key not in scratch:
                scratch[key] = list(self._lines.get(key, []))
            added += _insert(scratch[key], segment.start, segment.end)
        return added

    def runs(self) -> tuple[CutSegment, ...]:
        """All merged runs, horizontal first, then by position and start."""
        result: list[CutSegment] = []
        for axis_value, position in sorted(self._lines):
            axis = CutAxis(axis_value)
            for start, end in self._lines[(axis_value, position)]:
                result.append(
                    CutSegment(axis=axis, position=position, start=start, end=end)
                )
        return tuple(result)

    @property
    def cut_count(self) -> int:
        return sum(len(runs) for runs in self._lines.values())

    @property
    def total_length(self) -> float:
        return sum(end - start for runs in self._lines.values() for start, end in runs)
