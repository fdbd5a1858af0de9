from __future__ import annotations

import itertools
from collections.abc import Iterable

from beacon_map.core.engine import AlignmentResult
from beacon_map.core.vector import Vector, manhattan_distance


def beacon_count(result: AlignmentResult) -> int:
    return len(result.beacon_map)


def greatest_manhattan_distance(points: Iterable[Vector]) -> int:
    """Largest Manhattan distance over all unordered pairs (0 for < 2 points)."""
    return max(
        (manhattan_distance(a, b) for a, b in itertools.combinations(sorted(set(points)), 2)),
        default=0,
    )


def summarize(result: AlignmentResult) -> dict:
    scanners = []
    for i, (pos, rot) in enumerate(zip(result.scanner_positions, result.orientations)):
        scanners.append(
            {
                "index": i,
                "position": list(pos) if pos is not None else None,
                "orientation": rot,
            }
        )
    return {
        "scanner_count": len(result.scanner_positions),
        "beacon_count": beacon_count(result),
        "greatest_manhattan_distance": greatest_manhattan_distance(result.scanner_map),
        "rounds": result.rounds,
        "complete": result.complete,
        "scanners": scanners,
        "hash": result.hash(),
    }
