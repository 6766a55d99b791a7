"""
Rover 6DOF Dynamics Package

Single-step 6DOF dynamics for a thruster-driven underwater rover, meant to
be driven by a numerical integrator.

Modules:
    - constants: Environmental constants, tolerances and reference vehicle
    - config: EnvironmentConfig dataclass
    - linalg: Vector3 / Matrix3 value types
    - state: IntegratedState and RoverSnapshot containers
    - hydrodynamics: Added-mass and disturbance extension points
    - dynamics: RoverModel and its update() equations of motion
    - frames: DCM construction and re-orthonormalization
    - integrators: Euler / RK4 stepping
    - validation: Numerical health checks
"""

from .config import EnvironmentConfig, create_default_config, create_test_config
from .dynamics import Loads, RoverModel, create_reference_rover
from .hydrodynamics import AddedMassModel, DisturbanceModel, NoAddedMass, NoDisturbance
from .linalg import Matrix3, SingularMatrixError, Vector3
from .state import IntegratedState, RoverSnapshot

__version__ = "0.1.0"
__author__ = "Rover Simulation Team"

__all__ = [
    'Vector3',
    'Matrix3',
    'SingularMatrixError',
    'IntegratedState',
    'RoverSnapshot',
    'RoverModel',
    'Loads',
    'create_reference_rover',
    'AddedMassModel',
    'DisturbanceModel',
    'NoAddedMass',
    'NoDisturbance',
    'EnvironmentConfig',
    'create_default_config',
    'create_test_config',
]
