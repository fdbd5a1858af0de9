from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

Rows3 = tuple[tuple[int, int, int], tuple[int, int, int], tuple[int, int, int]]


@dataclass(frozen=True, slots=True, order=True)
class Vector:
    x: int
    y: int
    z: int

    def __iter__(self) -> Iterator[int]:
        yield self.x
        yield self.y
        yield self.z

    def __getitem__(self, i: int) -> int:
        return (self.x, self.y, self.z)[i]

    def __add__(self, other: Vector) -> Vector:
        return Vector(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector) -> Vector:
        return Vector(self.x - other.x, self.y - other.y, self.z - other.z)

    def __matmul__(self, m: Matrix) -> Vector:
        return multiply(self, m)

    def astuple(self) -> tuple[int, int, int]:
        return (self.x, self.y, self.z)


ORIGIN = Vector(0, 0, 0)


@dataclass(frozen=True, slots=True)
class Matrix:
    rows: tuple[Vector, Vector, Vector]

    @classmethod
    def from_rows(cls, rows: Rows3) -> Matrix:
        r0, r1, r2 = rows
        return cls((Vector(*r0), Vector(*r1), Vector(*r2)))

    def __getitem__(self, i: int) -> Vector:
        return self.rows[i]

    def __matmul__(self, other: Matrix) -> Matrix:
        return mat_mul(self, other)

    def columns(self) -> tuple[Vector, Vector, Vector]:
        r0, r1, r2 = self.rows
        return (Vector(r0.x, r1.x, r2.x), Vector(r0.y, r1.y, r2.y), Vector(r0.z, r1.z, r2.z))

    def astuple(self) -> Rows3:
        r0, r1, r2 = self.rows
        return (r0.astuple(), r1.astuple(), r2.astuple())


IDENTITY = Matrix.from_rows(((1, 0, 0), (0, 1, 0), (0, 0, 1)))


def add(a: Vector, b: Vector) -> Vector:
    return a + b


def sub(a: Vector, b: Vector) -> Vector:
    return a - b


def multiply(v: Vector, m: Matrix) -> Vector:
    """Row vector times matrix: result[i] = sum_j v[j] * m[j][i]."""
    r0, r1, r2 = m.rows
    x, y, z = v.x, v.y, v.z
    return Vector(
        x * r0.x + y * r1.x + z * r2.x,
        x * r0.y + y * r1.y + z * r2.y,
        x * r0.z + y * r1.z + z * r2.z,
    )


def mat_mul(a: Matrix, b: Matrix) -> Matrix:
    # integer 3x3 multiply; each row of a is a row vector times b
    return Matrix((multiply(a[0], b), multiply(a[1], b), multiply(a[2], b)))


def det3(m: Matrix) -> int:
    (a, b, c), (d, e, f), (g, h, i) = m.astuple()
    return a * (e * i - f * h) - b * (d * i - f * g) + c * (d * h - e * g)


def transpose(m: Matrix) -> Matrix:
    return Matrix(m.columns())


def manhattan_distance(a: Vector, b: Vector) -> int:
    d = a - b
    return abs(d.x) + abs(d.y) + abs(d.z)
