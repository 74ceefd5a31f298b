"""Kinds of fracture, mechanics, thermal, model and output behaviour, and predicates on them."""

from __future__ import annotations

import enum
from typing import Any


class FractureKind(enum.Enum):
    """Whether bonds may break."""

    NO_FRACTURE = "no_fracture"
    FRACTURE = "fracture"


class MechanicsKind(enum.Enum):
    """Constitutive behaviour of the material."""

    ELASTIC = "elastic"
    ELASTIC_PERFECTLY_PLASTIC = "elastic_perfectly_plastic"


class ModelCategory(enum.Enum):
    """Bond-based (pair) or state-based models."""

    PAIR = "pair"
    STATE = "state"


class ThermalKind(enum.Enum):
    """How temperature enters a model."""

    TEMPERATURE_INDEPENDENT = "temperature_independent"
    TEMPERATURE_DEPENDENT = "temperature_dependent"
    DYNAMIC_TEMPERATURE = "dynamic_temperature"


class ModelKind(enum.Enum):
    """Force model families."""

    PMB = "pmb"
    LINEAR_PMB = "linear_pmb"
    LPS = "lps"
    LINEAR_LPS = "linear_lps"
    CONTACT = "contact"


class OutputKind(enum.Enum):
    """Which derived fields are written as output."""

    BASE = "base"
    ENERGY = "energy"
    ENERGY_STRESS = "energy_stress"


_BASE_MODEL = {
    ModelKind.PMB: ModelKind.PMB,
    ModelKind.LINEAR_PMB: ModelKind.PMB,
    ModelKind.LPS: ModelKind.LPS,
    ModelKind.LINEAR_LPS: ModelKind.LPS,
    ModelKind.CONTACT: ModelKind.CONTACT,
}

_CATEGORY = {
    ModelKind.PMB: ModelCategory.PAIR,
    ModelKind.LINEAR_PMB: ModelCategory.PAIR,
    ModelKind.LPS: ModelCategory.STATE,
    ModelKind.LINEAR_LPS: ModelCategory.STATE,
    ModelKind.CONTACT: ModelCategory.PAIR,
}


def is_fracture(kind: Any) -> bool:
    """True only for FractureKind.FRACTURE."""
    return kind is FractureKind.FRACTURE


def is_temperature_dependent(kind: Any) -> bool:
    """True for temperature-dependent kinds, including dynamic temperature."""
    return kind in (
        ThermalKind.TEMPERATURE_DEPENDENT,
        ThermalKind.DYNAMIC_TEMPERATURE,
    )


def is_heat_transfer(kind: Any) -> bool:
    """True only when temperature evolves by heat transfer."""
    return kind is ThermalKind.DYNAMIC_TEMPERATURE


def is_temperature(kind: Any) -> bool:
    """True for any thermal kind."""
    return isinstance(kind, ThermalKind)


def is_output(kind: Any) -> bool:
    """True for any output kind."""
    return isinstance(kind, OutputKind)


def is_energy_output(kind: Any) -> bool:
    """True when strain energy is part of the output."""
    return kind in (OutputKind.ENERGY, OutputKind.ENERGY_STRESS)


def is_stress_output(kind: Any) -> bool:
    """True when stress is part of the output."""
    return kind is OutputKind.ENERGY_STRESS


def base_model(kind: ModelKind) -> ModelKind:
    """The model family a (possibly linearised) model belongs to."""
    try:
        return _BASE_MODEL[kind]
    except KeyError:
        raise ValueError(f"not a model kind: {kind!r}") from None


def model_category(kind: ModelKind) -> ModelCategory:
    """Whether a model is pair (bond) based or state based."""
    try:
        return _CATEGORY[kind]
    except KeyError:
        raise ValueError(f"not a model kind: {kind!r}") from None


def is_contact(model: Any) -> bool:
    """True for the contact kind or a model object whose base model is contact."""
    if isinstance(model, ModelKind):
        return model is ModelKind.CONTACT
    return getattr(model, "base_model", None) is ModelKind.CONTACT


def either_contact(model1: Any, model2: Any) -> bool:
    """True when either of two models is a contact model."""
    return is_contact(model1) or is_contact(model2)