"""Linear peridynamic solid (LPS) state-based force models."""

from __future__ import annotations

import math

from peridyn.tags import (
    FractureKind,
    MechanicsKind,
    ModelCategory,
    ModelKind,
    ThermalKind,
)


class LPSModel:
    """Elastic LPS model without fracture.

    ``influence_type`` 1 selects the influence function 1/xi; any other value
    selects a constant influence of 1.
    """

    base_model = ModelKind.LPS
    model_type = ModelKind.LPS
    category = ModelCategory.STATE
    mechanics_type = MechanicsKind.ELASTIC
    fracture_type = FractureKind.NO_FRACTURE
    thermal_type = ThermalKind.TEMPERATURE_INDEPENDENT

    def __init__(self, delta: float, K: float, G: float, influence_type: int = 0) -> None:
        self.delta = float(delta)
        self.K = float(K)
        self.G = float(G)
        self.influence_type = int(influence_type)
        self.theta_coeff = 3.0 * self.K - 5.0 * self.G
        self.s_coeff = 15.0 * self.G

    def influence_function(self, xi: float) -> float:
        if self.influence_type == 1:
            return 1.0 / xi
        return 1.0

    def weighted_volume(self, xi: float, vol: float) -> float:
        """Contribution of one bond to the weighted volume m."""
        return self.influence_function(xi) * xi * xi * vol

    def dilatation(self, s: float, xi: float, vol: float, m_i: float) -> float:
        """Contribution of one bond to the dilatation theta."""
        theta_i = self.influence_function(xi) * s * xi * xi * vol
        return 3.0 * theta_i / m_i

    def force_coeff(
        self,
        s: float,
        xi: float,
        vol: float,
        m_i: float,
        m_j: float,
        theta_i: float,
        theta_j: float,
    ) -> float:
        """Bond force magnitude coefficient."""
        return (
            self.theta_coeff * (theta_i / m_i + theta_j / m_j)
            + self.s_coeff * s * (1.0 / m_i + 1.0 / m_j)
        ) * self.influence_function(xi) * xi * vol

    def energy(
        self,
        s: float,
        xi: float,
        vol: float,
        m_i: float,
        theta_i: float,
        num_bonds: float,
    ) -> float:
        """Contribution of one bond to the strain energy density."""
        return (
            1.0 / num_bonds * 0.5 * self.theta_coeff / 3.0 * (theta_i * theta_i)
            + 0.5 * (self.s_coeff / m_i) * self.influence_function(xi) * s * s * xi * xi * vol
        )


class LPSFractureModel(LPSModel):
    """Elastic LPS model whose bonds break at a critical stretch derived from G0."""

    fracture_type = FractureKind.FRACTURE

    def __init__(
        self, delta: float, K: float, G: float, G0: float, influence_type: int = 0
    ) -> None:
        super().__init__(delta, K, G, influence_type)
        self.G0 = float(G0)
        if self.influence_type == 1:
            self.s0 = math.sqrt(5.0 * self.G0 / 9.0 / self.K / self.delta)
        else:
            self.s0 = math.sqrt(8.0 * self.G0 / 15.0 / self.K / self.delta)
        self.bond_break_coeff = (1.0 + self.s0) * (1.0 + self.s0)


class LinearLPSModel(LPSModel):
    """LPS model evaluated with linearised bond stretch."""

    model_type = ModelKind.LINEAR_LPS


class LinearLPSFractureModel(LPSFractureModel):
    """Linearised LPS model with bond breaking."""

    model_type = ModelKind.LINEAR_LPS