from __future__ import annotations

from .vector import IDENTITY, Matrix, det3, mat_mul, transpose

# Quarter turn of the forward axis onto a new face.
ROLL = Matrix.from_rows(((0, 0, -1), (0, 1, 0), (1, 0, 0)))
# Quarter turns about the forward (x) axis.
TURN_CW = Matrix.from_rows(((1, 0, 0), (0, 0, -1), (0, 1, 0)))
TURN_CCW = Matrix.from_rows(((1, 0, 0), (0, 0, 1), (0, -1, 0)))


def _is_orthogonal(m: Matrix) -> bool:
    return mat_mul(m, transpose(m)) == IDENTITY


def generate_rotations() -> list[Matrix]:
    """Generate the 24 proper cube rotations, identity first.

    Walks the group with two generators: six rolls bring each face forward,
    and between rolls three turns visit the four rotations about the forward
    axis. Turn direction alternates with roll parity so that consecutive
    faces line up.
    """
    mats: list[Matrix] = []
    m = IDENTITY
    for face in range(6):
        mats.append(m)
        turn = TURN_CW if face % 2 == 0 else TURN_CCW
        for _ in range(3):
            m = mat_mul(m, turn)
            mats.append(m)
        m = mat_mul(m, ROLL)

    if len(set(mats)) != 24:
        raise AssertionError(f"expected 24 distinct rotations, got {len(set(mats))}")
    for r in mats:
        if det3(r) != 1:
            raise AssertionError(f"rotation is a reflection: {r.astuple()}")
        if not _is_orthogonal(r):
            raise AssertionError(f"rotation is not orthogonal: {r.astuple()}")
    return mats


ROTATIONS: list[Matrix] = generate_rotations()
ROTATION_INDEX: dict[Matrix, int] = {m: i for i, m in enumerate(ROTATIONS)}


def inverse_rotation_index(op_id: int) -> int:
    if not (0 <= op_id < len(ROTATIONS)):
        raise ValueError("op_id must be in [0..23]")
    inv = transpose(ROTATIONS[op_id])  # orthonormal => inverse == transpose
    return ROTATION_INDEX[inv]
