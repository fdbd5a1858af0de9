from __future__ import annotations

from dataclasses import dataclass

from beacon_map.core.rotations import ROTATION_INDEX, ROTATIONS, inverse_rotation_index
from beacon_map.core.vector import IDENTITY, Matrix, mat_mul


@dataclass(frozen=True, slots=True)
class RotationGroup:
    compose_table: list[list[int]]
    inverse_table: list[int]

    def compose(self, a: int, b: int) -> int:
        return self.compose_table[a][b]

    def inverse(self, a: int) -> int:
        return self.inverse_table[a]


def build_compose_table() -> RotationGroup:
    n = len(ROTATIONS)
    table: list[list[int]] = [[-1] * n for _ in range(n)]
    for a in range(n):
        for b in range(n):
            # Row vectors: v @ (A @ B) applies A first, then B.
            cmat: Matrix = mat_mul(ROTATIONS[a], ROTATIONS[b])
            try:
                c = ROTATION_INDEX[cmat]
            except KeyError as e:
                raise AssertionError("rotation closure violated") from e
            table[a][b] = c

    inverses = [inverse_rotation_index(a) for a in range(n)]
    identity = ROTATION_INDEX[IDENTITY]
    for a, inv in enumerate(inverses):
        if table[a][inv] != identity:
            raise AssertionError(f"rotation {a} has no inverse in the table")
    return RotationGroup(compose_table=table, inverse_table=inverses)
