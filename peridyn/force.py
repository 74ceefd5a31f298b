"""Bond geometry, neighbour lists, particle state and the shared force machinery."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

import numpy as np

from peridyn.tags import OutputKind, is_energy_output, is_stress_output
from peridyn.timer import Timer


@dataclass(frozen=True)
class Bond:
    """Reference length xi, current length r, stretch s and their components."""

    xi: float
    r: float
    s: float
    rx: float
    ry: float
    rz: float
    xi_x: float
    xi_y: float
    xi_z: float


@dataclass(frozen=True)
class LinearBond:
    """Reference length xi, linearised stretch s and the reference components."""

    xi: float
    s: float
    xi_x: float
    xi_y: float
    xi_z: float


def _bond_components(x: Any, u: Any, i: int, j: int) -> tuple[float, ...]:
    xi_x = float(x[j][0] - x[i][0])
    xi_y = float(x[j][1] - x[i][1])
    xi_z = float(x[j][2] - x[i][2])
    eta_u = float(u[j][0] - u[i][0])
    eta_v = float(u[j][1] - u[i][1])
    eta_w = float(u[j][2] - u[i][2])
    return xi_x, xi_y, xi_z, eta_u, eta_v, eta_w


def get_distance(x: Any, u: Any, i: int, j: int) -> Bond:
    """Geometry of the bond from particle i to particle j."""
    xi_x, xi_y, xi_z, eta_u, eta_v, eta_w = _bond_components(x, u, i, j)
    rx = xi_x + eta_u
    ry = xi_y + eta_v
    rz = xi_z + eta_w
    r = float(np.sqrt(rx * rx + ry * ry + rz * rz))
    xi = float(np.sqrt(xi_x * xi_x + xi_y * xi_y + xi_z * xi_z))
    s = (r - xi) / xi
    return Bond(xi, r, s, rx, ry, rz, xi_x, xi_y, xi_z)


def get_linearized_distance(x: Any, u: Any, i: int, j: int) -> LinearBond:
    """Bond geometry with the stretch linearised in the displacement."""
    xi_x, xi_y, xi_z, eta_u, eta_v, eta_w = _bond_components(x, u, i, j)
    xi = float(np.sqrt(xi_x * xi_x + xi_y * xi_y + xi_z * xi_z))
    s = (xi_x * eta_u + xi_y * eta_v + xi_z * eta_w) / (xi * xi)
    return LinearBond(xi, s, xi_x, xi_y, xi_z)


class NeighborList:
    """Full neighbour list: every other particle within the cutoff of each particle in [begin, end)."""

    def __init__(self, positions: Any, begin: int, end: int, cutoff: float) -> None:
        self._neighbors: list[np.ndarray] = []
        self.build(positions, begin, end, cutoff)

    def build(self, positions: Any, begin: int, end: int, cutoff: float) -> None:
        pos = np.asarray(positions, dtype=float).reshape(-1, 3)
        if not 0 <= begin <= end <= len(pos):
            raise ValueError(f"invalid particle range [{begin}, {end}) for {len(pos)} particles")
        cutoff2 = float(cutoff) * float(cutoff)
        empty = np.empty(0, dtype=np.intp)
        lists = [empty] * len(pos)
        for i in range(begin, end):
            d2 = np.sum((pos - pos[i]) ** 2, axis=1)
            mask = d2 <= cutoff2
            mask[i] = False
            lists[i] = np.flatnonzero(mask)
        self._neighbors = lists

    def num_neighbors(self, i: int) -> int:
        return len(self._neighbors[i])

    def neighbor(self, i: int, n: int) -> int:
        return int(self._neighbors[i][n])

    def neighbors_of(self, i: int) -> list[int]:
        return [int(j) for j in self._neighbors[i]]

    def max_neighbors(self) -> int:
        return max((len(n) for n in self._neighbors), default=0)

    def total_neighbors(self) -> int:
        return sum(len(n) for n in self._neighbors)


@dataclass
class ParticleState:
    """Per-particle fields of a particle system.

    Particles [frozen_offset, local_offset) are the ones forces are computed
    for; anything beyond local_offset is ghost data.
    """

    x: np.ndarray
    u: Optional[np.ndarray] = None
    vol: Optional[np.ndarray] = None
    frozen_offset: int = 0
    local_offset: Optional[int] = None
    output: OutputKind = OutputKind.ENERGY_STRESS
    f: Optional[np.ndarray] = None
    W: Optional[np.ndarray] = None
    stress: Optional[np.ndarray] = None
    velocity: Optional[np.ndarray] = None
    density: Optional[np.ndarray] = None
    nofail: Optional[np.ndarray] = None
    damage: Optional[np.ndarray] = None
    weighted_volume: Optional[np.ndarray] = None
    dilatation: Optional[np.ndarray] = None
    u_neigh: Optional[np.ndarray] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        self.x = np.asarray(self.x, dtype=float).reshape(-1, 3)
        n = len(self.x)

        def vec(value: Any) -> np.ndarray:
            if value is None:
                return np.zeros((n, 3))
            return np.asarray(value, dtype=float).reshape(n, 3)

        def scalar(value: Any, fill: float = 0.0) -> np.ndarray:
            if value is None:
                return np.full(n, fill)
            return np.broadcast_to(np.asarray(value, dtype=float), (n,)).copy()

        self.u = vec(self.u)
        self.f = vec(self.f)
        self.velocity = vec(self.velocity)
        self.u_neigh = vec(self.u_neigh)
        self.vol = scalar(self.vol, 1.0)
        self.density = scalar(self.density, 1.0)
        self.W = scalar(self.W)
        self.damage = scalar(self.damage)
        self.weighted_volume = scalar(self.weighted_volume)
        self.dilatation = scalar(self.dilatation)
        self.nofail = (
            np.zeros(n, dtype=bool)
            if self.nofail is None
            else np.asarray(self.nofail, dtype=bool).reshape(n).copy()
        )
        self.stress = (
            np.zeros((n, 3, 3))
            if self.stress is None
            else np.asarray(self.stress, dtype=float).reshape(n, 3, 3)
        )
        if self.local_offset is None:
            self.local_offset = n
        if not 0 <= self.frozen_offset <= self.local_offset <= n:
            raise ValueError("offsets must satisfy 0 <= frozen <= local <= size")

    @property
    def num_particles(self) -> int:
        return len(self.x)

    @property
    def current_position(self) -> np.ndarray:
        return self.x + self.u

    def max_displacement(self) -> float:
        """Largest displacement of a local particle since the last neighbour build."""
        moved = self.u[: self.local_offset] - self.u_neigh[: self.local_offset]
        if len(moved) == 0:
            return 0.0
        return float(np.max(np.linalg.norm(moved, axis=1)))


class BaseForce:
    """Neighbour list and timers shared by all force calculations."""

    def __init__(
        self,
        half_neigh: bool,
        delta: float,
        positions: Any,
        frozen_offset: int = 0,
        local_offset: Optional[int] = None,
        tol: float = 1e-14,
    ) -> None:
        pos = np.asarray(positions, dtype=float).reshape(-1, 3)
        end = len(pos) if local_offset is None else local_offset
        neighbors = NeighborList(pos, frozen_offset, end, delta + tol)
        BaseForce._setup(self, half_neigh, neighbors)

    @classmethod
    def from_neighbors(cls, half_neigh: bool, neighbors: NeighborList) -> "BaseForce":
        """Create a force around an existing neighbour list."""
        force = cls.__new__(cls)
        BaseForce._setup(force, half_neigh, neighbors)
        return force

    def _setup(self, half_neigh: bool, neighbors: NeighborList) -> None:
        self._half_neigh = bool(half_neigh)
        self._neigh_list = neighbors
        self._timer = Timer()
        self._energy_timer = Timer()
        self._stress_timer = Timer()

    def update(self, particles: Any, require_update: bool = False) -> None:
        """Neighbour lists of non-contact forces are fixed; nothing to do."""

    def max_local_neighbors(self) -> int:
        return self._neigh_list.max_neighbors()

    def neighbor_statistics(self) -> tuple[int, int]:
        """Maximum and total neighbour counts."""
        return self._neigh_list.max_neighbors(), self._neigh_list.total_neighbors()

    def compute_weighted_volume(self, particles: ParticleState) -> None:
        """Pair models carry no weighted volume: clear it for the local particles."""
        particles.weighted_volume[particles.frozen_offset : particles.local_offset] = 0.0

    def compute_dilatation(self, particles: ParticleState) -> None:
        """Pair models carry no dilatation: clear it for the local particles."""
        particles.dilatation[particles.frozen_offset : particles.local_offset] = 0.0

    def neighbors(self) -> NeighborList:
        return self._neigh_list

    def time(self) -> float:
        return self._timer.time()

    def time_energy(self) -> float:
        return self._energy_timer.time()

    def time_neighbor(self) -> float:
        return 0.0


class BaseFracture:
    """Per-bond state: 1 for intact bonds, 0 for broken ones."""

    def __init__(self, local_particles: int, max_neighbors: int) -> None:
        self._mu = np.ones((int(local_particles), int(max_neighbors)), dtype=np.int64)

    def prenotch(self, particles: ParticleState, prenotch: Any, neighbors: Any) -> None:
        """Break every bond that a pre-notch cuts."""
        prenotch.create(self._mu, particles.x, neighbors, particles.local_offset)

    def broken_bonds(self) -> np.ndarray:
        return self._mu


def compute_force(force: Any, particles: ParticleState, reset: bool = True) -> None:
    """Accumulate internal forces into particles.f, clearing it first if reset."""
    if reset:
        particles.f[:] = 0.0
    force.compute_force_full(particles.f, particles)


def compute_energy(force: Any, particles: ParticleState) -> float:
    """Total strain energy, with per-particle densities in particles.W; 0 without energy output."""
    if not is_energy_output(particles.output):
        return 0.0
    particles.W[:] = 0.0
    return float(force.compute_energy_full(particles.W, particles))


def compute_stress(force: Any, particles: ParticleState) -> None:
    """Recompute particles.stress when stress is part of the output."""
    if is_stress_output(particles.output):
        particles.stress[:] = 0.0
        force.compute_stress_full(particles)