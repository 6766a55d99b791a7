"""
Rover 6DOF Dynamics - Configuration

This module provides an EnvironmentConfig dataclass for dependency injection,
so the same dynamics core can be evaluated under varied environmental
parameters without modifying global constants.
"""

from dataclasses import dataclass

from . import constants as C


@dataclass(frozen=True)
class EnvironmentConfig:
    """
    Immutable configuration for the environment and numerics.

    Create modified configs via dataclasses.replace() or create_test_config().

    Attributes:
        gravity: Gravitational acceleration magnitude (m/s^2)
        water_density: Density of the surrounding water (kg/m^3)
        singularity_tolerance: |det| threshold for matrix inversion
        renormalize_attitude: Re-orthonormalize the DCM after each integrator step
        orthonormality_tolerance: Drift above which a correction is logged
    """

    # ── Environment ──────────────────────────────────────────────────────
    gravity: float = C.G0
    water_density: float = C.WATER_DENSITY

    # ── Numerics ─────────────────────────────────────────────────────────
    singularity_tolerance: float = C.SINGULARITY_TOLERANCE
    renormalize_attitude: bool = True
    orthonormality_tolerance: float = C.DCM_DRIFT_WARNING_TOL


def create_default_config() -> EnvironmentConfig:
    """Create an EnvironmentConfig with default values from constants."""
    return EnvironmentConfig()


def create_test_config(**overrides) -> EnvironmentConfig:
    """Create a config for testing.

    Any keyword arg accepted by EnvironmentConfig can be passed as an override.
    """
    return EnvironmentConfig(**overrides)
