import math

import numpy as np
import pytest

from peridyn.prenotch import (
    IntersectionCase,
    Prenotch,
    add,
    bond_prenotch_intersection,
    cross,
    diff,
    dot,
    line_plane_intersection,
    norm,
    scale,
)

# Notch in the plane x = 0 covering 0 <= y, z <= 1.
P0 = (0.0, 0.0, 0.0)
V1 = (0.0, 1.0, 0.0)
V2 = (0.0, 0.0, 1.0)


def test_cross_is_orthogonal_to_inputs():
    a = (1.0, 2.0, 3.0)
    b = (-2.0, 0.5, 4.0)
    c = cross(a, b)
    assert dot(c, a) == pytest.approx(0.0)
    assert dot(c, b) == pytest.approx(0.0)


def test_cross_of_basis_vectors():
    assert cross((1.0, 0.0, 0.0), (0.0, 1.0, 0.0)) == (0.0, 0.0, 1.0)


def test_add_diff_round_trip():
    a = (1.5, -2.0, 3.25)
    b = (0.5, 4.0, -1.0)
    assert diff(add(a, b), b) == pytest.approx(a)


def test_scale_and_norm():
    a = (3.0, -4.0, 12.0)
    assert norm(scale(a, 2.0)) == pytest.approx(2.0 * norm(a))
    assert norm(a) == pytest.approx(math.sqrt(dot(a, a)))


def test_line_plane_cases():
    n = (1.0, 0.0, 0.0)
    assert line_plane_intersection(P0, n, (0.0, 0.2, 0.2), V1) is IntersectionCase.COINCIDENT
    assert line_plane_intersection(P0, n, (1.0, 0.2, 0.2), V1) is IntersectionCase.PARALLEL
    assert (
        line_plane_intersection(P0, n, (-1.0, 0.2, 0.2), (2.0, 0.0, 0.0))
        is IntersectionCase.SINGLE_POINT
    )


def test_bond_crossing_notch_is_cut():
    assert bond_prenotch_intersection(V1, V2, P0, (-0.5, 0.5, 0.5), (0.5, 0.5, 0.5)) is False


def test_bond_crossing_plane_outside_notch_is_kept():
    assert bond_prenotch_intersection(V1, V2, P0, (-0.5, 2.0, 0.5), (0.5, 2.0, 0.5)) is True


def test_bond_not_reaching_plane_is_kept():
    assert bond_prenotch_intersection(V1, V2, P0, (0.2, 0.5, 0.5), (0.8, 0.5, 0.5)) is True


def test_bond_parallel_off_plane_is_kept():
    assert bond_prenotch_intersection(V1, V2, P0, (0.5, 0.2, 0.5), (0.5, 0.8, 0.5)) is True


def test_bond_lying_in_notch_is_cut():
    assert bond_prenotch_intersection(V1, V2, P0, (0.0, 0.2, 0.5), (0.0, 0.8, 0.5)) is False


def test_bond_in_plane_outside_notch_is_kept():
    assert bond_prenotch_intersection(V1, V2, P0, (0.0, 2.0, 0.5), (0.0, 3.0, 0.5)) is True


def test_bond_symmetric_in_direction():
    xi, xj = (-0.5, 0.3, 0.7), (0.5, 0.4, 0.6)
    assert bond_prenotch_intersection(V1, V2, P0, xi, xj) == bond_prenotch_intersection(
        V1, V2, P0, xj, xi
    )


def test_parallel_notch_vectors_rejected():
    with pytest.raises(ValueError):
        bond_prenotch_intersection(V1, scale(V1, 2.0), P0, (-1.0, 0.0, 0.0), (1.0, 0.0, 0.0))


def _line_system():
    positions = np.array([[x, 0.5, 0.5] for x in (-1.5, -0.5, 0.5, 1.5)])
    neighbors = [
        [j for j in range(len(positions)) if j != i and abs(positions[j, 0] - positions[i, 0]) < 1.1]
        for i in range(len(positions))
    ]
    width = max(len(n) for n in neighbors)
    mu = np.ones((len(positions), width), dtype=int)
    return positions, neighbors, mu


def test_create_cuts_only_crossing_bonds():
    positions, neighbors, mu = _line_system()
    notch = Prenotch(V1, V2, [P0])
    notch.create(mu, positions, neighbors)
    for i, neigh in enumerate(neighbors):
        for n, j in enumerate(neigh):
            crosses = (positions[i, 0] < 0) != (positions[j, 0] < 0)
            assert mu[i, n] == (0 if crosses else 1)
    assert notch.time() >= 0.0


def test_create_respects_local_offset_and_neighbor_objects():
    positions, neighbors, mu = _line_system()

    class Neigh:
        def neighbors_of(self, i):
            return neighbors[i]

    notch = Prenotch(V1, V2, [P0])
    notch.create(mu, positions, Neigh(), local_offset=2)
    # Particle 2 lies beyond the offset, so its bond to particle 1 survives.
    idx = neighbors[2].index(1)
    assert mu[2, idx] == 1
    idx = neighbors[1].index(2)
    assert mu[1, idx] == 0


def test_fixed_orientation_shared_by_all_notches():
    notch = Prenotch(V1, V2, [P0, (1.0, 0.0, 0.0)])
    assert notch.fixed_orientation is True
    assert notch.num_notch == 2
    assert notch.v1_for(1) == notch.v1_for(0) == V1
    assert notch.v2_for(1) == V2


def test_general_orientation_per_notch():
    other_v1 = (1.0, 0.0, 0.0)
    notch = Prenotch([V1, other_v1], [V2, V2], [P0, (0.0, 0.0, 2.0)])
    assert notch.fixed_orientation is False
    assert notch.v1_for(0) == V1
    assert notch.v1_for(1) == other_v1


def test_general_orientation_count_mismatch():
    with pytest.raises(ValueError):
        Prenotch([V1, V1], [V2, V2], [P0])