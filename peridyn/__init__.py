"""Peridynamic force models and kernels, fracture, pre-notches, contact, boundary conditions and inputs."""

__version__ = "0.4.0"

__all__ = [
    "boundary",
    "contact_force",
    "contact_models",
    "force",
    "inputs",
    "lps_model",
    "pmb_force",
    "prenotch",
    "tags",
    "timer",
]