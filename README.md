# peridyn

Building blocks for peridynamic solid mechanics in Python, built on NumPy:
force models, force kernels over neighbour lists, bond breaking, pre-notches,
contact forces, boundary conditions and input-deck handling.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

- `peridyn.tags`: the enumerations `ModelKind` (`PMB`, `LINEAR_PMB`, `LPS`,
  `LINEAR_LPS`, `CONTACT`), `FractureKind`, `MechanicsKind`, `ModelCategory`,
  `ThermalKind` and `OutputKind`. It also has the predicates `is_fracture`,
  `is_temperature_dependent`, `is_heat_transfer`, `is_temperature`,
  `is_output`, `is_energy_output`, `is_stress_output`, `is_contact` and
  `either_contact`, and the lookups `base_model` and `model_category`.
- `peridyn.timer`: `Timer` accumulates wall-clock time over `start()`/`stop()`
  pairs and also works as a context manager. Starting a timer twice, or
  stopping one that is not running, raises `TimerError`.
- `peridyn.prenotch`: the 3-vector helpers `dot`, `norm`, `cross`, `scale`,
  `diff` and `add`, plus `line_plane_intersection`, which returns an
  `IntersectionCase`, and `bond_prenotch_intersection`. `Prenotch` holds one
  or more parallelogram notches. They can share one `(v1, v2)` orientation or
  each have their own. `Prenotch.create(mu, positions, neighbors,
  local_offset)` sets `mu[i][n] = 0` for every bond that a notch cuts.
- `peridyn.inputs`: `Inputs` reads a JSON input deck and derives values from it
  (see below). Bad or missing inputs raise `InputError`.
- `peridyn.contact_models`: `NormalRepulsionModel` and `HertzianModel`, each
  with a `force_coeff` method.
- `peridyn.lps_model`: the linear peridynamic solid models `LPSModel`,
  `LPSFractureModel`, `LinearLPSModel` and `LinearLPSFractureModel`. Their
  methods are `influence_function`, `weighted_volume`, `dilatation`,
  `force_coeff` and `energy`. The fracture variants derive a critical stretch
  `s0` from the fracture energy `G0`.
- `peridyn.force`:
  - `get_distance` and `get_linearized_distance` return `Bond` and
    `LinearBond`.
  - `NeighborList` is a full, brute-force neighbour search within a cutoff.
  - `ParticleState` holds the per-particle arrays: positions, displacements,
    volumes, forces, energy, stress, velocity, density, damage and the rest.
  - `BaseForce` and `BaseFracture` hold the shared machinery.
  - The drivers are `compute_force`, `compute_energy` and `compute_stress`.
    `compute_energy` returns 0 unless the particles' `output` includes energy.
    `compute_stress` does nothing unless it includes stress.
- `peridyn.pmb_force`: the bond-based kernels `PMBForce`, `PMBFractureForce`
  and `LinearPMBForce`. `PMBFractureForce` breaks bonds past the critical
  stretch, except where `nofail` is set, and updates per-particle damage. It
  can apply a `Prenotch`.
- `peridyn.contact_force`: `NormalRepulsionForce` and `HertzianForce`. They
  build their neighbour list on current positions and rebuild it when
  particles have moved. `relative_normal_velocity` is a helper. Contact adds
  no strain energy.
- `peridyn.boundary`:
  - `BoundaryCondition` calls `user(pid, time)` for each selected particle.
  - `ForceValueBoundaryCondition` sets the force on selected particles.
  - `ForceUpdateBoundaryCondition` adds to the force on selected particles.
  - `create_boundary_condition` picks one of these.
  - If the particle count has changed since the condition was made,
    `BoundaryError` is raised.

## Input decks

An input deck is a JSON object. Each entry maps a name to an object with a
`value` and, optionally, a `unit`:

```json
{
  "system_size": {"value": [1.0, 1.0, 1.0], "unit": "m"},
  "dx": {"value": [0.1, 0.1, 0.1], "unit": "m"},
  "horizon": {"value": 0.3},
  "density": {"value": 2440.0},
  "elastic_modulus": {"value": 72e9},
  "timestep": {"value": 1e-7},
  "final_time": {"value": 1e-5}
}
```

```python
from peridyn.inputs import Inputs

inputs = Inputs("deck.json")
print(inputs["num_cells"], inputs["m"], inputs["num_steps"])
```

`Inputs` derives the following from the deck:

- the corners or the system size, whichever was not given;
- `num_cells` or `dx`, whichever was not given;
- the horizon ratio `m` and `num_steps`;
- defaults for the timestep safety factor and the output file names.

It writes the deck, including the derived values, to `cabanaPD.in.json` in
`export_dir`, which defaults to the current directory.

`compute_critical_timestep(model)` estimates the stable time step. It stores
the estimate as `critical_timestep_mechanics` and logs a warning if
`timestep` is larger. For a heat-transfer model it also stores
`critical_timestep_heat_transfer`.

## Pre-notches

```python
from peridyn.prenotch import bond_prenotch_intersection

keep = bond_prenotch_intersection(
    (1.0, 0.0, 0.0), (0.0, 0.0, 1.0), (0.0, 0.0, 0.0),
    (0.5, -0.1, 0.5), (0.5, 0.1, 0.5),
)
# keep is False: the bond crosses the notch
```

## What the package does not do

- It has no time integrator or solver loop. It has no particle generator for
  a mesh or region, and it writes no output or profile files beyond the
  exported input deck.
- It provides no PMB force model object. `PMBForce`, `PMBFractureForce` and
  `LinearPMBForce` take any model that provides `cutoff()`,
  `force_coeff(i, j, s, vol)` and `energy(i, j, s, xi, vol)`. The fracture
  kernel also needs `critical_stretch(i, j, r, xi)`. `thermal_stretch` and
  `update_bonds` are optional.
- It has no LPS force kernel; `peridyn.lps_model` supplies only the model
  formulas.
- It runs on one process, with no command-line program.