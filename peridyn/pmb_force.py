"""Prototype microelastic brittle (PMB) bond-based force calculations."""

from __future__ import annotations

import math
from typing import Any, Protocol

import numpy as np

from peridyn.force import (
    BaseForce,
    BaseFracture,
    ParticleState,
    get_distance,
    get_linearized_distance,
)


class PMBModelLike(Protocol):
    """What a PMB force needs from its model.

    A model may also provide ``thermal_stretch(i, j, s)``, returning the stretch
    corrected for thermal expansion, and ``update_bonds(num_local,
    max_neighbors)`` for models that keep per-bond data.
    """

    def cutoff(self) -> float: ...

    def force_coeff(self, i: int, j: int, s: float, vol: float) -> float: ...

    def energy(self, i: int, j: int, s: float, xi: float, vol: float) -> float: ...


def _thermal_stretch(model: Any, i: int, j: int, s: float) -> float:
    adjust = getattr(model, "thermal_stretch", None)
    return s if adjust is None else adjust(i, j, s)


def _local_range(particles: ParticleState) -> range:
    return range(particles.frozen_offset, particles.local_offset)


def _add_stress(stress: np.ndarray, i: int, fx: float, fy: float, fz: float,
                xi_x: float, xi_y: float, xi_z: float) -> None:
    stress[i] += np.outer((fx, fy, fz), (xi_x, xi_y, xi_z))


class PMBForce(BaseForce):
    """PMB forces, energies and stresses with no bond breaking."""

    def __init__(self, half_neigh: bool, particles: ParticleState, model: Any) -> None:
        super().__init__(
            half_neigh,
            model.cutoff(),
            particles.x,
            particles.frozen_offset,
            particles.local_offset,
        )
        self.model = model

    def compute_force_full(self, f: Any, particles: ParticleState) -> None:
        """Add the force density of every bond to f."""
        model = self.model
        x, u, vol = particles.x, particles.u, particles.vol
        with self._timer:
            for i in _local_range(particles):
                for j in self._neigh_list.neighbors_of(i):
                    bond = get_distance(x, u, i, j)
                    s = _thermal_stretch(model, i, j, bond.s)
                    coeff = model.force_coeff(i, j, s, vol[j])
                    f[i, 0] += coeff * bond.rx / bond.r
                    f[i, 1] += coeff * bond.ry / bond.r
                    f[i, 2] += coeff * bond.rz / bond.r

    def compute_energy_full(self, W: Any, particles: ParticleState) -> float:
        """Add strain energy densities to W and return the total strain energy."""
        model = self.model
        x, u, vol = particles.x, particles.u, particles.vol
        total = 0.0
        with self._energy_timer:
            for i in _local_range(particles):
                for j in self._neigh_list.neighbors_of(i):
                    bond = get_distance(x, u, i, j)
                    s = _thermal_stretch(model, i, j, bond.s)
                    w = model.energy(i, j, s, bond.xi, vol[j])
                    W[i] += w
                    total += w * vol[i]
        return total

    def compute_stress_full(self, particles: ParticleState) -> None:
        """Add the bond contributions to particles.stress."""
        model = self.model
        x, u, vol = particles.x, particles.u, particles.vol
        stress = particles.stress
        with self._stress_timer:
            for i in _local_range(particles):
                for j in self._neigh_list.neighbors_of(i):
                    bond = get_distance(x, u, i, j)
                    s = _thermal_stretch(model, i, j, bond.s)
                    coeff = 0.5 * model.force_coeff(i, j, s, vol[j])
                    _add_stress(
                        stress, i,
                        coeff * bond.rx / bond.r,
                        coeff * bond.ry / bond.r,
                        coeff * bond.rz / bond.r,
                        bond.xi_x, bond.xi_y, bond.xi_z,
                    )


class PMBFractureForce(BaseForce, BaseFracture):
    """PMB forces with bonds that break beyond the model's critical stretch.

    The model must also provide ``critical_stretch(i, j, r, xi)``, true when
    the bond is stretched past breaking. Broken bonds stay broken.
    """

    def __init__(self, half_neigh: bool, particles: ParticleState, model: Any) -> None:
        BaseForce.__init__(
            self,
            half_neigh,
            model.cutoff(),
            particles.x,
            particles.frozen_offset,
            particles.local_offset,
        )
        max_neighbors = self.max_local_neighbors()
        BaseFracture.__init__(self, particles.local_offset, max_neighbors)
        self.model = model
        update_bonds = getattr(model, "update_bonds", None)
        if update_bonds is not None:
            update_bonds(particles.local_offset, max_neighbors)

    def prenotch(self, particles: ParticleState, prenotch: Any) -> None:  # type: ignore[override]
        """Break every bond cut by the given pre-notches."""
        BaseFracture.prenotch(self, particles, prenotch, self._neigh_list)

    def compute_force_full(self, f: Any, particles: ParticleState) -> None:
        """Break over-stretched bonds and add the forces of intact ones to f."""
        model = self.model
        mu = self._mu
        x, u, vol = particles.x, particles.u, particles.vol
        nofail = particles.nofail
        with self._timer:
            for i in _local_range(particles):
                for n, j in enumerate(self._neigh_list.neighbors_of(i)):
                    bond = get_distance(x, u, i, j)
                    s = _thermal_stretch(model, i, j, bond.s)
                    if (
                        model.critical_stretch(i, j, bond.r, bond.xi)
                        and not nofail[i]
                        and not nofail[j]
                    ):
                        mu[i, n] = 0
                    elif mu[i, n] > 0:
                        coeff = model.force_coeff(i, n, s, vol[j])
                        muij = float(mu[i, n])
                        f[i, 0] += muij * coeff * bond.rx / bond.r
                        f[i, 1] += muij * coeff * bond.ry / bond.r
                        f[i, 2] += muij * coeff * bond.rz / bond.r

    def compute_energy_full(self, W: Any, particles: ParticleState) -> float:
        """Add strain energy densities to W, update damage, return total energy."""
        model = self.model
        mu = self._mu
        x, u, vol = particles.x, particles.u, particles.vol
        damage = particles.damage
        total = 0.0
        with self._energy_timer:
            for i in _local_range(particles):
                intact_volume = 0.0
                horizon_volume = 0.0
                for n, j in enumerate(self._neigh_list.neighbors_of(i)):
                    bond = get_distance(x, u, i, j)
                    s = _thermal_stretch(model, i, j, bond.s)
                    W[i] += mu[i, n] * model.energy(i, j, s, bond.xi, vol[j])
                    intact_volume += mu[i, n] * vol[j]
                    horizon_volume += vol[j]
                total += W[i] * vol[i]
                damage[i] = (
                    1.0 - intact_volume / horizon_volume
                    if horizon_volume > 0.0
                    else math.nan
                )
        return float(total)

    def compute_stress_full(self, particles: ParticleState) -> None:
        """Add the contributions of intact bonds to particles.stress."""
        model = self.model
        mu = self._mu
        x, u, vol = particles.x, particles.u, particles.vol
        stress = particles.stress
        with self._stress_timer:
            for i in _local_range(particles):
                for n, j in enumerate(self._neigh_list.neighbors_of(i)):
                    bond = get_distance(x, u, i, j)
                    s = _thermal_stretch(model, i, j, bond.s)
                    coeff = 0.5 * model.force_coeff(i, n, s, vol[j])
                    muij = float(mu[i, n])
                    _add_stress(
                        stress, i,
                        muij * coeff * bond.rx / bond.r,
                        muij * coeff * bond.ry / bond.r,
                        muij * coeff * bond.rz / bond.r,
                        bond.xi_x, bond.xi_y, bond.xi_z,
                    )


class LinearPMBForce(BaseForce):
    """PMB forces with the bond stretch linearised in the displacement."""

    def __init__(self, half_neigh: bool, particles: ParticleState, model: Any) -> None:
        super().__init__(
            half_neigh,
            model.cutoff(),
            particles.x,
            particles.frozen_offset,
            particles.local_offset,
        )
        self.model = model

    def compute_force_full(self, f: Any, particles: ParticleState) -> None:
        """Add the linearised force density of every bond to f."""
        model = self.model
        x, u, vol = particles.x, particles.u, particles.vol
        with self._timer:
            for i in _local_range(particles):
                for j in self._neigh_list.neighbors_of(i):
                    bond = get_linearized_distance(x, u, i, j)
                    s = _thermal_stretch(model, i, j, bond.s)
                    coeff = model.force_coeff(i, j, s, vol[j])
                    f[i, 0] += coeff * bond.xi_x / bond.xi
                    f[i, 1] += coeff * bond.xi_y / bond.xi
                    f[i, 2] += coeff * bond.xi_z / bond.xi

    def compute_energy_full(self, W: Any, particles: ParticleState) -> float:
        """Add linearised strain energy densities to W and return the total."""
        model = self.model
        x, u, vol = particles.x, particles.u, particles.vol
        total = 0.0
        with self._energy_timer:
            for i in _local_range(particles):
                for j in self._neigh_list.neighbors_of(i):
                    bond = get_linearized_distance(x, u, i, j)
                    s = _thermal_stretch(model, i, j, bond.s)
                    w = model.energy(i, j, s, bond.xi, vol[j])
                    W[i] += w
                    total += w * vol[i]
        return total

    def compute_stress_full(self, particles: ParticleState) -> None:
        """Add the linearised bond contributions to particles.stress."""
        model = self.model
        x, u, vol = particles.x, particles.u, particles.vol
        stress = particles.stress
        with self._stress_timer:
            for i in _local_range(particles):
                for j in self._neigh_list.neighbors_of(i):
                    bond = get_linearized_distance(x, u, i, j)
                    s = _thermal_stretch(model, i, j, bond.s)
                    coeff = 0.5 * model.force_coeff(i, j, s, vol[j])
                    _add_stress(
                        stress, i,
                        coeff * bond.xi_x / bond.xi,
                        coeff * bond.xi_y / bond.xi,
                        coeff * bond.xi_z / bond.xi,
                        bond.xi_x, bond.xi_y, bond.xi_z,
                    )