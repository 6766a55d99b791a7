"""
Rover 6DOF Dynamics - State Containers

IntegratedState pairs the current value of a quantity with its time
derivative. RoverSnapshot is a flat, numpy-backed copy of the integrated
values of a rover, used by integrators and for logging trajectories.
"""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

import numpy as np

Quantity = TypeVar("Quantity")


@dataclass
class IntegratedState(Generic[Quantity]):
    """
    Current value of a quantity and its time derivative.

    The value is advanced only by the integrator; the derivative is
    written only by RoverModel.update().
    """

    value: Quantity
    derivative: Quantity


@dataclass
class RoverSnapshot:
    """
    Copy of the integrated rover state at one instant.

    Attributes:
        position: CG position in inertial frame (m) [3]
        velocity: CG velocity in inertial frame (m/s) [3]
        angvel: Angular velocity in body frame (rad/s) [3]
        attitude: Body-to-inertial DCM [3x3]
        t: Simulation time (s)
    """

    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    velocity: np.ndarray = field(default_factory=lambda: np.zeros(3))
    angvel: np.ndarray = field(default_factory=lambda: np.zeros(3))
    attitude: np.ndarray = field(default_factory=lambda: np.eye(3))
    t: float = 0.0

    VECTOR_SIZE = 18

    def __post_init__(self):
        """Ensure arrays are numpy arrays with correct shapes."""
        for attr in ['position', 'velocity', 'angvel']:
            setattr(self, attr, np.asarray(getattr(self, attr), dtype=np.float64).reshape(3))
        self.attitude = np.asarray(self.attitude, dtype=np.float64).reshape(3, 3)
        self.t = float(self.t)

    def copy(self) -> 'RoverSnapshot':
        """Create a deep copy of the snapshot."""
        return RoverSnapshot(
            position=self.position.copy(),
            velocity=self.velocity.copy(),
            angvel=self.angvel.copy(),
            attitude=self.attitude.copy(),
            t=self.t
        )

    def to_vector(self) -> np.ndarray:
        """Flatten to [position(3), velocity(3), angvel(3), attitude(9, row-major)]."""
        return np.concatenate([
            self.position, self.velocity, self.angvel, self.attitude.ravel()
        ])

    @classmethod
    def from_vector(cls, vec: np.ndarray, t: float) -> 'RoverSnapshot':
        """
        Create a snapshot from a flat numpy array.

        Args:
            vec: State vector [position(3), velocity(3), angvel(3), attitude(9)]
            t: Simulation time
        """
        vec = np.asarray(vec, dtype=np.float64)
        if vec.shape != (cls.VECTOR_SIZE,):
            raise ValueError(f"State vector must have shape ({cls.VECTOR_SIZE},), got {vec.shape}")
        return cls(
            position=vec[0:3].copy(),
            velocity=vec[3:6].copy(),
            angvel=vec[6:9].copy(),
            attitude=vec[9:18].reshape(3, 3).copy(),
            t=t
        )

    @property
    def speed(self) -> float:
        """Magnitude of velocity (m/s)."""
        return float(np.linalg.norm(self.velocity))

    @property
    def depth(self) -> float:
        """Depth below the inertial origin (m), positive downward."""
        return float(-self.position[2])

    def __str__(self) -> str:
        return (
            f"RoverSnapshot(t={self.t:.2f}s, "
            f"depth={self.depth:.2f}m, "
            f"v={self.speed:.3f}m/s, "
            f"|w|={np.linalg.norm(self.angvel):.3f}rad/s)"
        )
