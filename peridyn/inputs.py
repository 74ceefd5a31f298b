"""Reading simulation inputs from JSON and deriving the quantities a run needs."""

from __future__ import annotations

import copy
import json
import logging
import math
from pathlib import Path
from typing import Any

import numpy as np

from peridyn.tags import is_heat_transfer

logger = logging.getLogger(__name__)

EXPORTED_INPUT_FILE = "cabanaPD.in.json"
DEFAULT_OUTPUT_FILE = "cabanaPD.out"
DEFAULT_ERROR_FILE = "cabanaPD.err"
DEFAULT_SAFETY_FACTOR = 0.85


class InputError(ValueError):
    """Raised for missing, malformed or inconsistent inputs."""


def parse(filename: str | Path) -> dict[str, Any]:
    """Load a JSON input file."""
    with open(filename, encoding="utf-8") as stream:
        return json.load(stream)


class Inputs:
    """User inputs plus derived values, each stored as ``{"value": ..., "unit": ...}``."""

    def __init__(self, filename: str | Path, export_dir: str | Path | None = None) -> None:
        self._inputs: dict[str, Any] = parse(filename)

        self.setup_size()

        tf = float(self._value("final_time"))
        dt = float(self._value("timestep"))

        dx = float(self._value("dx")[0])
        if "horizon" in self._inputs:
            delta = float(self._value("horizon"))
            self._set("m", math.floor(delta / dx))

        if "timestep_safety_factor" not in self._inputs:
            self._set("timestep_safety_factor", DEFAULT_SAFETY_FACTOR)

        if "bulk_modulus" not in self._inputs and "elastic_modulus" not in self._inputs:
            raise InputError("Must input either bulk_modulus or elastic_modulus.")

        self._set("num_steps", int(tf / dt))

        if "output_file" not in self._inputs:
            self._set("output_file", DEFAULT_OUTPUT_FILE)
        if "error_file" not in self._inputs:
            self._set("error_file", DEFAULT_ERROR_FILE)
        self._set("input_file", str(filename))

        if "exported_input_file" not in self._inputs:
            self._set("exported_input_file", EXPORTED_INPUT_FILE)
        export_path = Path(export_dir if export_dir is not None else ".") / EXPORTED_INPUT_FILE
        with open(export_path, "w", encoding="utf-8") as out:
            json.dump(self._inputs, out, separators=(",", ":"))

        if "output_reference" not in self._inputs:
            self._set("output_reference", True)

        # Not yet a user option.
        self._set("half_neigh", False)

    # -- internal helpers -------------------------------------------------

    def _entry(self, label: str) -> dict[str, Any]:
        return self._inputs.setdefault(label, {})

    def _set(self, label: str, value: Any) -> None:
        self._entry(label)["value"] = value

    def _value(self, label: str) -> Any:
        try:
            return self._inputs[label]["value"]
        except (KeyError, TypeError):
            raise InputError(f"Missing input: {label}.") from None

    def _unit(self, label: str) -> str:
        try:
            unit = self._inputs[label]["unit"]
        except (KeyError, TypeError):
            raise InputError(f"Missing unit for {label}.") from None
        return str(unit)

    def _vector3(self, label: str) -> list[float]:
        values = [float(v) for v in self._value(label)]
        if len(values) != 3:
            raise InputError(f"CabanaPD requires 3d ({label}).")
        return values

    # -- public API -------------------------------------------------------

    def setup_size(self) -> None:
        """Derive system size, corners, cell counts and spacing from what was given."""
        inputs = self._inputs
        if "system_size" in inputs:
            size = self._vector3("system_size")
            self._set("low_corner", [-0.5 * s for s in size])
            self._set("high_corner", [0.5 * s for s in size])
            size_unit = self._unit("system_size")
            self._entry("low_corner")["unit"] = size_unit
            self._entry("high_corner")["unit"] = size_unit
        elif "low_corner" in inputs and "high_corner" in inputs:
            low = self._vector3("low_corner")
            high = self._vector3("high_corner")
            self._set("system_size", [h - lo for lo, h in zip(low, high)])
            self._entry("system_size")["unit"] = self._unit("low_corner")
        else:
            raise InputError(
                "Must input either system_size or both low_corner and high_corner."
            )

        size = [float(s) for s in self._value("system_size")]
        if "dx" in inputs:
            dx = self._vector3("dx")
            self._set("num_cells", [int(s / d) for s, d in zip(size, dx)])
        elif "num_cells" in inputs:
            nc = self._vector3("num_cells")
            self._set("dx", [s / n for s, n in zip(size, nc)])
            self._entry("dx")["unit"] = self._unit("system_size")
        else:
            raise InputError("Must input either num_cells or dx.")

        # There is currently no unit conversion.
        if inputs["low_corner"].get("unit") != inputs["high_corner"].get("unit"):
            raise InputError("Units for low_corner and high_corner do not match.")
        if inputs["dx"].get("unit") != inputs["high_corner"].get("unit"):
            raise InputError("Units for dx do not match system units.")

    def compute_critical_timestep(self, model: Any) -> None:
        """Estimate stable timesteps (Silling & Askari, 2005) and store them.

        Stores ``critical_timestep_mechanics`` and, for heat-transfer models,
        ``critical_timestep_heat_transfer``; warns when the timestep is larger.
        """
        dx, dy, dz = (float(v) for v in self._value("dx"))
        v_p = dx * dy * dz

        if "bulk_modulus" in self._inputs:
            K = float(self._value("bulk_modulus"))
        else:
            E = float(self._value("elastic_modulus"))
            # Only exact for bond-based (PMB).
            nu = 0.25
            K = E / (3 * (1 - 2 * nu))

        m = int(self._value("m"))
        delta = float(self._value("horizon"))
        c = 18.0 * K / (math.pi * delta**4)

        offsets = np.arange(-(m + 1), m + 2, dtype=float)
        gx, gy, gz = np.meshgrid(offsets * dx, offsets * dy, offsets * dz, indexing="ij")
        r2 = (gx * gx + gy * gy + gz * gz).ravel()
        r2 = r2[(r2 < delta * delta + 1e-10) & (r2 > 0)]
        xi = np.sqrt(r2)

        total = float(np.sum(v_p * c / xi))

        dt = float(self._value("timestep"))
        rho = float(self._value("density"))
        self._compare_critical_timestep("mechanics", dt, math.sqrt(2.0 * rho / total))

        if is_heat_transfer(getattr(model, "thermal_type", None)):
            sum_ht = sum(
                v_p * float(model.microconductivity_function(float(x))) / float(rr)
                for x, rr in zip(xi, r2)
            )
            dt_ht = float(self._value("thermal_subcycle_steps")) * dt
            cp = float(self._value("specific_heat_capacity"))
            self._compare_critical_timestep("heat_transfer", dt_ht, rho * cp / sum_ht)

    def _compare_critical_timestep(self, name: str, dt: float, dt_crit: float) -> None:
        safety_factor = float(self._value("timestep_safety_factor"))
        dt_crit_safety = safety_factor * dt_crit
        if dt > dt_crit_safety:
            logger.warning(
                "WARNING: timestep (%s) is larger than estimated stable timestep "
                "for %s (%s), using safety factor of %s.",
                dt,
                name,
                dt_crit_safety,
                safety_factor,
            )
        self._set(f"critical_timestep_{name}", dt_crit_safety)

    def __getitem__(self, label: str) -> Any:
        try:
            return self._inputs[label]["value"]
        except (KeyError, TypeError):
            raise KeyError(label) from None

    def units(self, label: str) -> str:
        """The ``units`` entry of an input, or an empty string."""
        entry = self._inputs.get(label, {})
        return str(entry["units"]) if "units" in entry else ""

    def __contains__(self, label: object) -> bool:
        return label in self._inputs

    def to_dict(self) -> dict[str, Any]:
        """A deep copy of all inputs, including derived ones."""
        return copy.deepcopy(self._inputs)