"""Boundary conditions applied to selected particles."""

from __future__ import annotations

from typing import Any, Callable, Iterable, Optional

import numpy as np

from peridyn.force import ParticleState
from peridyn.timer import Timer


class BoundaryError(ValueError):
    """Raised for boundary conditions that do not fit the particles or are ill-specified."""


def _check_particle_count(expected: Optional[int], particles: ParticleState) -> None:
    if expected is not None and expected != particles.local_offset:
        raise BoundaryError(
            f"BoundaryCondition: particle count changed from {expected} to "
            f"{particles.local_offset}; recreate the boundary condition."
        )


def _as_indices(indices: Iterable[int]) -> np.ndarray:
    return np.asarray(list(indices), dtype=np.intp)


class BoundaryCondition:
    """Calls ``user(pid, time)`` for every selected particle."""

    def __init__(
        self,
        indices: Iterable[int],
        user: Callable[[int, float], Any],
        force_update: bool = False,
        particle_count: Optional[int] = None,
    ) -> None:
        self.indices = _as_indices(indices)
        self._user = user
        self.force_update = bool(force_update)
        self.particle_count = particle_count
        self._timer = Timer()

    def apply(self, particles: ParticleState, time: float) -> None:
        _check_particle_count(self.particle_count, particles)
        with self._timer:
            for pid in self.indices:
                self._user(int(pid), time)

    def time(self) -> float:
        return self._timer.time()


class ForceValueBoundaryCondition:
    """Sets every force component of the selected particles to a value."""

    force_update = True

    def __init__(
        self,
        value: float,
        indices: Iterable[int],
        particle_count: Optional[int] = None,
    ) -> None:
        self.value = float(value)
        self.indices = _as_indices(indices)
        self.particle_count = particle_count
        self._timer = Timer()

    def apply(self, particles: ParticleState, time: float = 0.0) -> None:
        _check_particle_count(self.particle_count, particles)
        with self._timer:
            particles.f[self.indices, :] = self.value

    def time(self) -> float:
        return self._timer.time()


class ForceUpdateBoundaryCondition:
    """Adds a value to every force component of the selected particles."""

    force_update = True

    def __init__(
        self,
        value: float,
        indices: Iterable[int],
        particle_count: Optional[int] = None,
    ) -> None:
        self.value = float(value)
        self.indices = _as_indices(indices)
        self.particle_count = particle_count
        self._timer = Timer()

    def apply(self, particles: ParticleState, time: float = 0.0) -> None:
        _check_particle_count(self.particle_count, particles)
        with self._timer:
            for pid in self.indices:
                particles.f[pid, :] += self.value

    def time(self) -> float:
        return self._timer.time()


_KINDS = {
    "value": ForceValueBoundaryCondition,
    "update": ForceUpdateBoundaryCondition,
}


def create_boundary_condition(
    indices: Iterable[int],
    particle_count: Optional[int] = None,
    user: Optional[Callable[[int, float], Any]] = None,
    force_update: bool = False,
    value: Optional[float] = None,
    kind: Optional[str] = None,
) -> Any:
    """Build a custom boundary condition from ``user``, or a force one from ``kind`` and ``value``.

    ``kind`` is ``"value"`` (set forces) or ``"update"`` (add to forces).
    """
    if user is not None:
        if kind is not None or value is not None:
            raise BoundaryError("Give either a user function or a kind and value, not both.")
        return BoundaryCondition(indices, user, force_update, particle_count)
    if kind is None or value is None:
        raise BoundaryError("A force boundary condition needs both a kind and a value.")
    try:
        cls = _KINDS[kind]
    except KeyError:
        raise BoundaryError(f"Unknown boundary condition kind: {kind!r}.") from None
    return cls(value, indices, particle_count)