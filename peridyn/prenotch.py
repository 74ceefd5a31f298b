"""Pre-notches: planar cracks that cut bonds before a simulation starts."""

from __future__ import annotations

import enum
import math
from typing import Any, Sequence

import numpy as np

from peridyn.timer import Timer

Vector = tuple[float, float, float]


def _vec(a: Sequence[float]) -> Vector:
    x, y, z = (float(c) for c in a)
    return (x, y, z)


def dot(a: Sequence[float], b: Sequence[float]) -> float:
    return sum(ai * bi for ai, bi in zip(a, b))


def norm(a: Sequence[float]) -> float:
    return math.sqrt(dot(a, a))


def cross(a: Sequence[float], b: Sequence[float]) -> Vector:
    return (
        a[1] * b[2] - a[2] * b[1],
        -(a[0] * b[2] - a[2] * b[0]),
        a[0] * b[1] - a[1] * b[0],
    )


def scale(a: Sequence[float], n: float) -> Vector:
    return _vec(c * n for c in a)


def diff(a: Sequence[float], b: Sequence[float]) -> Vector:
    return _vec(ai - bi for ai, bi in zip(a, b))


def add(a: Sequence[float], b: Sequence[float]) -> Vector:
    return _vec(ai + bi for ai, bi in zip(a, b))


class IntersectionCase(enum.IntEnum):
    """How a line meets a plane."""

    COINCIDENT = 1
    PARALLEL = 2
    SINGLE_POINT = 3


def line_plane_intersection(
    p0: Sequence[float],
    n: Sequence[float],
    l0: Sequence[float],
    l: Sequence[float],
    tol: float = 1e-10,
) -> IntersectionCase:
    """Classify the line l0 + t*l against the plane through p0 with normal n."""
    if abs(dot(l, n)) < tol:
        if abs(dot(diff(p0, l0), n)) < tol:
            return IntersectionCase.COINCIDENT
        return IntersectionCase.PARALLEL
    return IntersectionCase.SINGLE_POINT


def bond_prenotch_intersection(
    v1: Sequence[float],
    v2: Sequence[float],
    p0: Sequence[float],
    x_i: Sequence[float],
    x_j: Sequence[float],
    tol: float = 1e-10,
) -> bool:
    """Return True if the bond x_i-x_j is kept, False if the notch cuts it.

    The notch is the parallelogram p0 + a*v1 + b*v2 with a, b in [0, 1].
    """
    cross_v1_v2 = cross(v1, v2)
    norm_cross = norm(cross_v1_v2)
    if not norm_cross > tol:
        raise ValueError("pre-notch vectors v1 and v2 must not be parallel")

    n = scale(cross_v1_v2, 1.0 / norm_cross)
    l0 = x_i
    l = diff(x_j, x_i)
    norm2_cross = norm_cross * norm_cross

    def plane_coords(point: Sequence[float]) -> tuple[float, float]:
        rel = diff(point, p0)
        c1 = dot(cross(rel, v2), cross_v1_v2) / norm2_cross
        c2 = -dot(cross(rel, v1), cross_v1_v2) / norm2_cross
        return c1, c2

    case = line_plane_intersection(p0, n, l0, l)

    if case is IntersectionCase.COINCIDENT:
        li1, li2 = plane_coords(x_i)
        lj1, lj2 = plane_coords(x_j)
        outside = (
            min(li1, lj1) > 1 + tol
            or max(li1, lj1) < -tol
            or min(li2, lj2) > 1 + tol
            or max(li2, lj2) < -tol
        )
        return outside

    if case is IntersectionCase.SINGLE_POINT:
        d = dot(diff(p0, l0), n) / dot(l, n)
        if -tol < d < 1 + tol:
            p = add(l0, scale(l, d))
            c1, c2 = plane_coords(p)
            if -tol < min(c1, c2) and max(c1, c2) < 1 + tol:
                return False

    return True


def _is_single_vector(v: Any) -> bool:
    return np.asarray(v, dtype=float).ndim == 1


class Prenotch:
    """A set of planar pre-notches.

    Either one (v1, v2) orientation shared by all notch origins p0, or one
    orientation per notch.
    """

    def __init__(self, v1: Any, v2: Any, p0: Sequence[Sequence[float]]) -> None:
        self._p0 = [_vec(p) for p in p0]
        single1 = _is_single_vector(v1)
        single2 = _is_single_vector(v2)
        if single1 != single2:
            raise ValueError("v1 and v2 must both be single vectors or both lists")
        self.fixed_orientation = single1
        if self.fixed_orientation:
            self._v1 = [_vec(v1)]
            self._v2 = [_vec(v2)]
        else:
            self._v1 = [_vec(v) for v in v1]
            self._v2 = [_vec(v) for v in v2]
            if len(self._v1) != len(self._p0) or len(self._v2) != len(self._p0):
                raise ValueError(
                    "Number of orientation vectors must match number of pre-notches."
                )
        self._timer = Timer()

    @property
    def num_notch(self) -> int:
        return len(self._p0)

    @property
    def positions(self) -> list[Vector]:
        return list(self._p0)

    def v1_for(self, p: int) -> Vector:
        return self._v1[0] if self.fixed_orientation else self._v1[p]

    def v2_for(self, p: int) -> Vector:
        return self._v2[0] if self.fixed_orientation else self._v2[p]

    def create(
        self,
        mu: Any,
        positions: Any,
        neighbors: Any,
        local_offset: int | None = None,
    ) -> None:
        """Zero mu[i][n] for every bond of the first local_offset particles cut by a notch.

        ``neighbors`` is either an object with ``neighbors_of(i)`` or a sequence
        of neighbour index lists.
        """
        x = np.asarray(positions, dtype=float)
        count = len(x) if local_offset is None else local_offset
        with self._timer:
            for p, p0 in enumerate(self._p0):
                v1 = self.v1_for(p)
                v2 = self.v2_for(p)
                for i in range(count):
                    xi = _vec(x[i, :3])
                    for n, j in enumerate(self._neighbors_of(neighbors, i)):
                        xj = _vec(x[j, :3])
                        if not bond_prenotch_intersection(v1, v2, p0, xi, xj):
                            mu[i][n] = 0

    @staticmethod
    def _neighbors_of(neighbors: Any, i: int) -> Sequence[int]:
        lookup = getattr(neighbors, "neighbors_of", None)
        if lookup is not None:
            return lookup(i)
        return neighbors[i]

    def time(self) -> float:
        return self._timer.time()