from __future__ import annotations

import json

from beacon_map.core.engine import AlignmentSession
from beacon_map.core.vector import Vector
from beacon_map.report import beacon_count, greatest_manhattan_distance, summarize


def test_greatest_manhattan_distance_edge_cases():
    assert greatest_manhattan_distance([]) == 0
    assert greatest_manhattan_distance([Vector(1, 2, 3)]) == 0
    assert greatest_manhattan_distance([Vector(0, 0, 0), Vector(1, -1, 1), Vector(-2, 0, 0)]) == 5


def test_summarize_example(example_scanners):
    result = AlignmentSession(example_scanners).run()
    summary = summarize(result)
    assert beacon_count(result) == 79
    assert summary["beacon_count"] == 79
    assert summary["greatest_manhattan_distance"] == 3621
    assert summary["scanner_count"] == 5
    assert summary["complete"] is True
    assert summary["scanners"][1]["position"] == [68, -1246, -43]
    assert summary["hash"] == result.hash()
    # JSON-ready
    assert json.loads(json.dumps(summary)) == summary
