"""Contact forces between particles: normal repulsion and Hertzian contact."""

from __future__ import annotations

from typing import Any

import numpy as np

from peridyn.force import BaseForce, ParticleState, get_distance
from peridyn.timer import Timer


def relative_normal_velocity(
    vel: Any, i: int, j: int, rx: float, ry: float, rz: float, r: float
) -> tuple[float, float, float, float]:
    """Relative velocity of i with respect to j and its component along the bond.

    Returns ``(vx, vy, vz, vn)``.
    """
    vx = float(vel[i][0] - vel[j][0])
    vy = float(vel[i][1] - vel[j][1])
    vz = float(vel[i][2] - vel[j][2])
    vn = (vx * rx + vy * ry + vz * rz) / r
    return vx, vy, vz, vn


class BaseForceContact(BaseForce):
    """Contact force with a neighbour list on current positions, rebuilt as particles move.

    Neighbours are searched within twice the contact radius plus the radius
    extension, so the list stays valid until some particle has moved further
    than the extension.
    """

    def __init__(self, half_neigh: bool, particles: ParticleState, model: Any) -> None:
        self.search_radius = 2.0 * model.radius + model.radius_extend
        self.radius_extend = float(model.radius_extend)
        super().__init__(
            half_neigh,
            self.search_radius,
            particles.current_position,
            particles.frozen_offset,
            particles.local_offset,
        )
        self._neigh_timer = Timer()
        self.model = model

    def update(self, particles: ParticleState, require_update: bool = False) -> None:
        """Rebuild the neighbour list if particles moved far enough or if asked to."""
        if particles.max_displacement() > self.radius_extend or require_update:
            with self._neigh_timer:
                self._neigh_list.build(
                    particles.current_position,
                    particles.frozen_offset,
                    particles.local_offset,
                    self.search_radius,
                )
                particles.u_neigh[:] = particles.u

    def time_neighbor(self) -> float:
        return self._neigh_timer.time()

    def _refresh(self, particles: ParticleState) -> None:
        # Any displacement since the last build forces a rebuild.
        self.update(particles, bool(particles.max_displacement()))

    def compute_energy_full(self, W: Any, particles: ParticleState) -> float:
        """Contact adds nothing to W; returns the energy W already holds for local particles."""
        local = slice(particles.frozen_offset, particles.local_offset)
        W_local = np.asarray(W, dtype=float)[local]
        return float(np.sum(W_local * particles.vol[local]))


class NormalRepulsionForce(BaseForceContact):
    """Linear repulsion between particles closer than the contact radius."""

    def compute_force_full(self, fc: Any, particles: ParticleState) -> None:
        """Add the repulsive force on each local particle to fc."""
        model = self.model
        x, u, vol = particles.x, particles.u, particles.vol
        self._refresh(particles)
        with self._timer:
            for i in range(particles.frozen_offset, particles.local_offset):
                for j in self._neigh_list.neighbors_of(i):
                    bond = get_distance(x, u, i, j)
                    if bond.r < model.radius:
                        coeff = model.force_coeff(bond.r, vol[j])
                        fc[i, 0] += coeff * bond.rx / bond.r
                        fc[i, 1] += coeff * bond.ry / bond.r
                        fc[i, 2] += coeff * bond.rz / bond.r

    def compute_energy_full(self, W: Any, particles: ParticleState) -> float:
        """Repulsion adds nothing to W; returns the energy W already holds."""
        return super().compute_energy_full(W, particles)


class HertzianForce(BaseForceContact):
    """Hertzian normal contact with damping on the relative normal velocity."""

    def compute_force_full(self, fc: Any, particles: ParticleState) -> None:
        """Add the Hertzian contact force on each local particle to fc."""
        model = self.model
        x, u = particles.x, particles.u
        vol, rho, vel = particles.vol, particles.density, particles.velocity
        self._refresh(particles)
        with self._timer:
            for i in range(particles.frozen_offset, particles.local_offset):
                for j in self._neigh_list.neighbors_of(i):
                    bond = get_distance(x, u, i, j)
                    _, _, _, vn = relative_normal_velocity(
                        vel, i, j, bond.rx, bond.ry, bond.rz, bond.r
                    )
                    coeff = model.force_coeff(bond.r, vn, vol[i], rho[i])
                    fc[i, 0] += coeff * bond.rx / bond.r
                    fc[i, 1] += coeff * bond.ry / bond.r
                    fc[i, 2] += coeff * bond.rz / bond.r

    def compute_energy_full(self, W: Any, particles: ParticleState) -> float:
        """Hertzian contact adds nothing to W; returns the energy W already holds."""
        return super().compute_energy_full(W, particles)