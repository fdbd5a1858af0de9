from __future__ import annotations

import random

import pytest

from beacon_map.core.rotations import ROTATION_INDEX, ROTATIONS, generate_rotations, inverse_rotation_index
from beacon_map.core.vector import IDENTITY, Vector, det3, mat_mul, multiply, transpose
from beacon_map.invariants.rotation_group import build_compose_table


def test_rotations_count_and_det():
    assert len(ROTATIONS) == 24
    assert len(set(ROTATIONS)) == 24
    for m in ROTATIONS:
        assert det3(m) == 1


def test_identity_is_first():
    assert ROTATIONS[0] == IDENTITY
    assert ROTATION_INDEX[IDENTITY] == 0


def test_rotations_are_orthogonal_signed_permutations():
    for m in ROTATIONS:
        assert mat_mul(m, transpose(m)) == IDENTITY
        for row in m.rows:
            assert sorted(abs(c) for c in row) == [0, 0, 1]


def test_generation_is_deterministic():
    assert generate_rotations() == ROTATIONS


def test_rotation_inverses_exist():
    for i, m in enumerate(ROTATIONS):
        inv = transpose(m)
        assert inv in ROTATION_INDEX
        j = inverse_rotation_index(i)
        assert ROTATIONS[j] == inv
        assert mat_mul(m, ROTATIONS[j]) == IDENTITY
        assert inverse_rotation_index(j) == i


def test_inverse_rotation_index_rejects_out_of_range():
    with pytest.raises(ValueError):
        inverse_rotation_index(24)
    with pytest.raises(ValueError):
        inverse_rotation_index(-1)


def test_apply_inverse_roundtrip_random_vectors():
    rng = random.Random(123)
    for _ in range(25):
        v = Vector(rng.randint(-1000, 1000), rng.randint(-1000, 1000), rng.randint(-1000, 1000))
        for op in range(24):
            inv = ROTATIONS[inverse_rotation_index(op)]
            assert multiply(multiply(v, ROTATIONS[op]), inv) == v


def test_rotation_composition_closure():
    grp = build_compose_table()
    for a in range(24):
        for b in range(24):
            c = grp.compose(a, b)
            assert 0 <= c < 24
            assert ROTATIONS[c] == mat_mul(ROTATIONS[a], ROTATIONS[b])
        assert grp.compose(a, grp.inverse(a)) == 0


def test_compose_table_rows_are_permutations():
    grp = build_compose_table()
    for a in range(24):
        assert sorted(grp.compose_table[a]) == list(range(24))
