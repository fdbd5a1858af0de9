from __future__ import annotations

import itertools
from collections import defaultdict
from collections.abc import Iterable, Iterator
from dataclasses import dataclass

from .vector import Matrix, Vector, multiply

BeaconPair = frozenset[Vector]
Fingerprint = dict[Vector, frozenset[BeaconPair]]


def normalized_distance(a: Vector, b: Vector) -> Vector:
    """Sorted absolute coordinate differences of a and b.

    Unchanged by translating both points or applying any of the 24 cube
    rotations to both, so it can be compared across scanners whose frames
    are unknown.
    """
    d = a - b
    lo, mid, hi = sorted((abs(d.x), abs(d.y), abs(d.z)))
    return Vector(lo, mid, hi)


@dataclass(frozen=True, slots=True)
class Scanner:
    beacons: frozenset[Vector]

    @classmethod
    def of(cls, beacons: Iterable[Vector]) -> Scanner:
        return cls(frozenset(beacons))

    def __iter__(self) -> Iterator[Vector]:
        return iter(self.beacons)

    def __len__(self) -> int:
        return len(self.beacons)

    def __contains__(self, beacon: object) -> bool:
        return beacon in self.beacons

    def rotate(self, r: Matrix) -> Scanner:
        return Scanner(frozenset(multiply(p, r) for p in self.beacons))

    def translate(self, t: Vector) -> Scanner:
        return Scanner(frozenset(p + t for p in self.beacons))

    def transform(self, r: Matrix, t: Vector) -> Scanner:
        """Rotate by r, then translate by t."""
        return Scanner(frozenset(multiply(p, r) + t for p in self.beacons))

    def fingerprint(self) -> Fingerprint:
        """Group every unordered beacon pair by its normalized distance."""
        groups: defaultdict[Vector, set[BeaconPair]] = defaultdict(set)
        for a, b in itertools.combinations(sorted(self.beacons), 2):
            groups[normalized_distance(a, b)].add(frozenset((a, b)))
        return {key: frozenset(pairs) for key, pairs in groups.items()}

    def distance_keys(self) -> frozenset[Vector]:
        return frozenset(self.fingerprint())
