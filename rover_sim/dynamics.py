"""
Rover 6DOF Dynamics - Equations of Motion

This module implements the rigid-body model of the rover and the
state-derivative evaluation consumed by an external integrator:
- Translational kinematics: ṙ = v
- Translational dynamics:   v̇ = F_inertial / (m + Δm)
- Rotational dynamics:      ω̇ = I⁻¹ (τ − ω × (Iω))
- Attitude kinematics:      Ṙ = R [ω]ₓ

Hydrodynamic drag and current disturbances are not modeled; they enter only
through the DisturbanceModel hook, which defaults to zero.
"""

import logging
from typing import NamedTuple, Optional, Sequence

import numpy as np

from . import constants as C
from .config import EnvironmentConfig, create_default_config
from .hydrodynamics import AddedMassModel, DisturbanceModel, NoAddedMass, NoDisturbance
from .linalg import Matrix3, Vector3
from .state import IntegratedState, RoverSnapshot

logger = logging.getLogger(__name__)


class Loads(NamedTuple):
    """
    Forces and torques acting on the rover for one set of thruster commands.

    net_force_inertial includes weight_inertial (m * g, inertial down) as well
    as buoyancy, so a neutrally buoyant rover at rest has zero net force.
    Pass an EnvironmentConfig with gravity=0 to see thrust alone.
    """
    thrust_force_body: Vector3
    thrust_torque_body: Vector3
    buoyancy_force_inertial: Vector3
    buoyancy_torque_body: Vector3
    weight_inertial: Vector3
    disturbance_force_inertial: Vector3
    disturbance_torque_body: Vector3
    net_force_inertial: Vector3
    net_torque_body: Vector3


def _as_vector(v, dtype) -> Vector3:
    if isinstance(v, Vector3):
        return Vector3.from_array(v.to_array(), dtype=dtype)
    return Vector3.from_array(v, dtype=dtype)


def _as_matrix(m, dtype) -> Matrix3:
    if isinstance(m, Matrix3):
        return Matrix3.from_array(m.to_array(), dtype=dtype)
    return Matrix3.from_array(m, dtype=dtype)


class RoverModel:
    """
    6DOF rigid-body model of an underwater rover.

    Integrated state:
        position, velocity: CG position/velocity, inertial frame
        angvel: Angular velocity of the body about the CG, body frame
        attitude: DCM mapping body-frame vectors to the inertial frame

    Physical parameters:
        mass: Total mass including internal water storage (kg)
        volume: Dry displaced volume (m^3)
        moi, moi_inv: Inertia tensor about CG and its inverse, body frame.
            Assigning moi recomputes moi_inv.
        cb: Center of buoyancy relative to CG, body frame (m)
        thrust_positions, thrust_vectors: Thruster mounting points and unit
            directions, body frame, fixed at construction

    The model is not thread-safe; each integrator owns its own instance.

    Example:
        >>> rover = create_reference_rover()
        >>> rover.update([10.0, 10.0, 0.0, 0.0, 0.0])
        >>> rover.velocity.derivative
    """

    def __init__(
        self,
        mass: float,
        volume: float,
        moi,
        cb,
        thrust_positions: Sequence,
        thrust_vectors: Sequence,
        config: Optional[EnvironmentConfig] = None,
        added_mass_model: Optional[AddedMassModel] = None,
        disturbance_model: Optional[DisturbanceModel] = None,
        position=None,
        velocity=None,
        angvel=None,
        attitude=None,
        dtype=np.float64,
    ) -> None:
        """
        Initialize a fully specified rover model.

        Args:
            mass: Total mass (kg)
            volume: Displaced volume (m^3)
            moi: 3x3 inertia tensor, body frame (Matrix3 or array-like)
            cb: Center of buoyancy offset from CG, body frame
            thrust_positions: N thruster positions, body frame
            thrust_vectors: N thruster unit directions, body frame
            config: Environment configuration (defaults from constants)
            added_mass_model: Added-mass strategy (default NoAddedMass)
            disturbance_model: Disturbance strategy (default NoDisturbance)
            position, velocity, angvel: Initial values (default zero)
            attitude: Initial DCM (default identity)
            dtype: Floating scalar type for all vectors and matrices

        Raises:
            ValueError: If the thruster arrays are empty or differ in length
            SingularMatrixError: If moi is singular
        """
        self.dtype = np.dtype(dtype)
        self.config = config or create_default_config()
        self.added_mass_model = added_mass_model or NoAddedMass()
        self.disturbance_model = disturbance_model or NoDisturbance()

        if len(thrust_positions) != len(thrust_vectors):
            raise ValueError(
                f"Thruster arrays differ in length: {len(thrust_positions)} positions, "
                f"{len(thrust_vectors)} vectors"
            )
        if len(thrust_positions) == 0:
            raise ValueError("Rover must have at least one thruster")

        self._thrust_positions = tuple(_as_vector(p, self.dtype) for p in thrust_positions)
        self._thrust_vectors = tuple(_as_vector(u, self.dtype) for u in thrust_vectors)

        self.mass = mass
        self.volume = volume
        self.cb = _as_vector(cb, self.dtype)
        self.moi = moi

        def zero():
            return Vector3.zeros(dtype=self.dtype)

        self.position = IntegratedState(
            _as_vector(position, self.dtype) if position is not None else zero(), zero())
        self.velocity = IntegratedState(
            _as_vector(velocity, self.dtype) if velocity is not None else zero(), zero())
        self.angvel = IntegratedState(
            _as_vector(angvel, self.dtype) if angvel is not None else zero(), zero())
        self.attitude = IntegratedState(
            _as_matrix(attitude, self.dtype) if attitude is not None
            else Matrix3.identity(dtype=self.dtype),
            Matrix3.zeros(dtype=self.dtype))

        logger.debug(
            f"RoverModel created: mass={mass} kg, volume={volume} m^3, "
            f"{self.n_thrusters} thrusters, dtype={self.dtype.name}"
        )

    # Physical parameters ----------------------------------------------------

    @property
    def moi(self) -> Matrix3:
        """Inertia tensor about CG, body frame (kg*m^2)."""
        return self._moi

    @moi.setter
    def moi(self, value) -> None:
        moi = _as_matrix(value, self.dtype)
        moi_inv = moi.inverse(tolerance=self.config.singularity_tolerance)
        self._moi = moi
        self._moi_inv = moi_inv

    @property
    def moi_inv(self) -> Matrix3:
        """Inverse inertia tensor, kept consistent with moi."""
        return self._moi_inv

    @property
    def thrust_positions(self) -> tuple:
        return self._thrust_positions

    @property
    def thrust_vectors(self) -> tuple:
        return self._thrust_vectors

    @property
    def n_thrusters(self) -> int:
        return len(self._thrust_positions)

    # Loads ------------------------------------------------------------------

    def _check_commands(self, thrust_commands: Sequence) -> None:
        if len(thrust_commands) != self.n_thrusters:
            raise ValueError(
                f"Expected {self.n_thrusters} thruster commands, got {len(thrust_commands)}"
            )

    def thrust_force_and_torque(self, thrust_commands: Sequence):
        """
        Net thrust force and torque about the CG, both in body frame.

        Args:
            thrust_commands: N signed thrust magnitudes (N)

        Returns:
            (force, torque) tuple of Vector3
        """
        self._check_commands(thrust_commands)
        force = Vector3.zeros(dtype=self.dtype)
        torque = Vector3.zeros(dtype=self.dtype)
        for pos, direction, cmd in zip(self._thrust_positions, self._thrust_vectors, thrust_commands):
            f = direction * cmd
            force += f
            torque += pos.cross(f)
        return force, torque

    def buoyancy_force(self) -> Vector3:
        """Buoyancy g * rho * V along inertial up, inertial frame (N)."""
        magnitude = self.config.gravity * self.config.water_density * self.volume
        return Vector3.from_array(C.UP_AXIS * magnitude, dtype=self.dtype)

    def weight(self) -> Vector3:
        """Gravitational force m * g along inertial down, inertial frame (N)."""
        return Vector3.from_array(-C.UP_AXIS * (self.config.gravity * self.mass), dtype=self.dtype)

    def compute_loads(self, thrust_commands: Sequence) -> Loads:
        """
        Aggregate all forces and torques for the current state.

        Does not modify the model.

        Args:
            thrust_commands: N signed thrust magnitudes (N)

        Returns:
            Loads breakdown
        """
        R = self.attitude.value

        thrust_force, thrust_torque = self.thrust_force_and_torque(thrust_commands)

        buoyancy_force = self.buoyancy_force()
        # Torque arms are body-frame, so bring buoyancy into the body frame first.
        buoyancy_torque = self.cb.cross(
            R.inverse(tolerance=self.config.singularity_tolerance) * buoyancy_force
        )

        weight = self.weight()
        dist_force, dist_torque = self.disturbance_model.disturbance(self)

        net_torque = buoyancy_torque + thrust_torque + dist_torque
        # Weight is part of the net force; see Loads.
        net_force = weight + buoyancy_force + R * thrust_force + dist_force

        return Loads(
            thrust_force_body=thrust_force,
            thrust_torque_body=thrust_torque,
            buoyancy_force_inertial=buoyancy_force,
            buoyancy_torque_body=buoyancy_torque,
            weight_inertial=weight,
            disturbance_force_inertial=dist_force,
            disturbance_torque_body=dist_torque,
            net_force_inertial=net_force,
            net_torque_body=net_torque,
        )

    # Equations of motion ----------------------------------------------------

    def update(self, thrust_commands: Sequence) -> None:
        """
        Recompute the derivative of every integrated state.

        Reads only the value fields and physical parameters; writes only the
        four derivative fields. Calling it twice with unchanged inputs gives
        identical derivatives.

        The DCM derivative does not preserve orthonormality; the integrator
        must re-orthonormalize attitude.value periodically.

        Args:
            thrust_commands: N signed thrust magnitudes (N)

        Raises:
            ValueError: If len(thrust_commands) != n_thrusters
        """
        # moi_added is not yet folded into the rotational equation; the
        # gyroscopic term below uses the rigid-body inertia only.
        moi_added, m_added = self.added_mass_model.added_mass(self)

        loads = self.compute_loads(thrust_commands)

        w = self.angvel.value

        self.position.derivative = self.velocity.value.copy()
        self.velocity.derivative = loads.net_force_inertial / (self.mass + m_added)
        self.angvel.derivative = self.moi_inv * (loads.net_torque_body - w.cross(self.moi * w))
        self.attitude.derivative = self.attitude.value * Matrix3.skew(w)

    # Snapshots --------------------------------------------------------------

    def snapshot(self, t: float = 0.0) -> RoverSnapshot:
        """Copy the integrated values into a RoverSnapshot."""
        return RoverSnapshot(
            position=self.position.value.to_array(),
            velocity=self.velocity.value.to_array(),
            angvel=self.angvel.value.to_array(),
            attitude=self.attitude.value.to_array(),
            t=t,
        )

    def restore(self, snapshot: RoverSnapshot) -> None:
        """Overwrite the integrated values from a RoverSnapshot."""
        self.position.value = Vector3.from_array(snapshot.position, dtype=self.dtype)
        self.velocity.value = Vector3.from_array(snapshot.velocity, dtype=self.dtype)
        self.angvel.value = Vector3.from_array(snapshot.angvel, dtype=self.dtype)
        self.attitude.value = Matrix3.from_array(snapshot.attitude, dtype=self.dtype)

    def derivative_vector(self) -> np.ndarray:
        """Flatten the derivatives in RoverSnapshot.to_vector() order."""
        return np.concatenate([
            self.position.derivative.to_array(),
            self.velocity.derivative.to_array(),
            self.angvel.derivative.to_array(),
            self.attitude.derivative.to_array().ravel(),
        ]).astype(np.float64)

    def __repr__(self) -> str:
        return (
            f"RoverModel(mass={self.mass}, volume={self.volume}, "
            f"n_thrusters={self.n_thrusters}, dtype={self.dtype.name})"
        )


def create_reference_rover(config: Optional[EnvironmentConfig] = None,
                           dtype=np.float64, **overrides) -> RoverModel:
    """
    Create the 5-thruster reference rover from constants.

    Args:
        config: Environment configuration
        dtype: Floating scalar type
        **overrides: Any RoverModel keyword argument

    Returns:
        RoverModel at rest at the origin with identity attitude
    """
    params = dict(
        mass=C.ROVER_MASS,
        volume=C.ROVER_VOLUME,
        moi=C.INERTIA_TENSOR,
        cb=C.CB_OFFSET,
        thrust_positions=list(C.THRUST_POSITIONS),
        thrust_vectors=list(C.THRUST_DIRECTIONS),
    )
    params.update(overrides)
    return RoverModel(config=config, dtype=dtype, **params)
