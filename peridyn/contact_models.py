"""Contact force models: normal repulsion and Hertzian contact."""

from __future__ import annotations

import math

from peridyn.tags import FractureKind, ModelKind, ThermalKind


class ContactModel:
    """Contact search radius and the extension that lets neighbour lists be reused."""

    base_model = ModelKind.CONTACT

    def __init__(self, radius: float, radius_extend: float) -> None:
        self.radius = float(radius)
        self.radius_extend = float(radius_extend)


class NormalRepulsionModel(ContactModel):
    """Linear repulsion between particles closer than the contact radius."""

    fracture_type = FractureKind.NO_FRACTURE
    thermal_type = ThermalKind.TEMPERATURE_INDEPENDENT

    def __init__(
        self, delta: float, radius: float, radius_extend: float, K: float
    ) -> None:
        super().__init__(radius, radius_extend)
        self.delta = float(delta)
        self.K = float(K)
        # Same micromodulus as PMB.
        self.c = 18.0 * self.K / (math.pi * self.delta**4)

    def force_coeff(self, r: float, vol: float) -> float:
        """Force magnitude coefficient; negative (repulsive) inside the radius."""
        sc = (r - self.radius) / self.delta
        return 15.0 * self.c * sc * vol


class HertzianModel(ContactModel):
    """Hertzian normal contact with velocity damping."""

    fracture_type = FractureKind.NO_FRACTURE
    thermal_type = ThermalKind.TEMPERATURE_INDEPENDENT

    def __init__(
        self, radius: float, radius_extend: float, nu: float, E: float, e: float
    ) -> None:
        super().__init__(radius, radius_extend)
        self.nu = float(nu)
        self.Rs = 0.5 * self.radius
        self.Es = float(E) / (2.0 * (1.0 - self.nu) ** 2)
        self.e = float(e)
        ln_e = math.log(self.e)
        self.beta = -ln_e / math.sqrt(ln_e**2 + math.pi**2)
        self.coeff_h_n = 4.0 / 3.0 * self.Es * math.sqrt(self.Rs)
        self.coeff_h_d = -2.0 * math.sqrt(5.0 / 6.0) * self.beta

    def force_coeff(self, r: float, vn: float, vol: float, rho: float) -> float:
        """Elastic plus damping force coefficient for separation r and normal velocity vn."""
        delta_n = r - 2.0 * self.radius

        coeff = 0.0
        if delta_n < 0.0:
            coeff = min(0.0, -self.coeff_h_n * abs(delta_n) ** 1.5)
        coeff /= vol

        Sn = 0.0
        if delta_n < 0.0:
            Sn = 2.0 * self.Es * math.sqrt(self.Rs * abs(delta_n))
        ms = rho * vol / 2.0
        coeff += self.coeff_h_d * math.sqrt(Sn * ms) * vn / vol
        return coeff