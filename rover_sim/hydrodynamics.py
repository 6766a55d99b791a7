"""
Rover 6DOF Dynamics - Hydrodynamic Extension Points

Added mass and external disturbances (drag, currents) are not modeled by the
dynamics core. They enter through the two protocols below, whose default
implementations contribute nothing.
"""

from typing import TYPE_CHECKING, Protocol, Tuple

from .linalg import Matrix3, Vector3

if TYPE_CHECKING:
    from .dynamics import RoverModel


class AddedMassModel(Protocol):
    """Protocol for added-mass models."""

    def added_mass(self, model: 'RoverModel') -> Tuple[Matrix3, float]:
        """Return (added inertia in body frame [kg*m^2], added mass [kg])."""
        ...


class DisturbanceModel(Protocol):
    """Protocol for external disturbance models (drag, currents, tether loads)."""

    def disturbance(self, model: 'RoverModel') -> Tuple[Vector3, Vector3]:
        """Return (force in inertial frame [N], torque in body frame [N*m])."""
        ...


class NoAddedMass:
    """Added-mass model for an inviscid, unmodeled fluid: zero effect."""

    def added_mass(self, model: 'RoverModel') -> Tuple[Matrix3, float]:
        return Matrix3.zeros(dtype=model.dtype), 0.0

    def __repr__(self) -> str:
        return "NoAddedMass()"


class NoDisturbance:
    """Disturbance model that applies no force and no torque."""

    def disturbance(self, model: 'RoverModel') -> Tuple[Vector3, Vector3]:
        return Vector3.zeros(dtype=model.dtype), Vector3.zeros(dtype=model.dtype)

    def __repr__(self) -> str:
        return "NoDisturbance()"
