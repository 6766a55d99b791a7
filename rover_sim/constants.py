"""
Rover 6DOF Dynamics - Physical Constants and Vehicle Parameters

This module defines the environmental constants, numerical tolerances and
the reference vehicle configuration used throughout the package.

Frame conventions:
    Inertial frame: +Z points up (opposing gravity).
    Body frame: +X forward, +Y port, +Z up when attitude is identity.
"""

import numpy as np

# =============================================================================
# ENVIRONMENT
# =============================================================================

# Gravitational acceleration (m/s^2)
G0 = 9.81

# Density of seawater in the operating region (kg/m^3)
WATER_DENSITY = 1035.0

# Inertial "up" axis; buoyancy acts along it, weight against it
UP_AXIS = np.array([0.0, 0.0, 1.0])

# =============================================================================
# REFERENCE VEHICLE (5-thruster configuration)
# =============================================================================

N_THRUSTERS = 5

# Total mass including internal water storage (kg)
ROVER_MASS = 30.0

# Dry displaced volume (m^3), slightly positive buoyancy
ROVER_VOLUME = 0.0295

# Principal moments of inertia about CG, body frame (kg*m^2)
IXX = 0.8
IYY = 1.4
IZZ = 1.6
INERTIA_TENSOR = np.diag([IXX, IYY, IZZ])

# Center of buoyancy relative to CG, body frame (m)
CB_OFFSET = np.array([0.0, 0.0, 0.05])

# Thruster mounting positions relative to CG, body frame (m)
#   0, 1: aft port/starboard surge thrusters
#   2, 3: fore/aft heave thrusters
#   4:    lateral sway thruster
THRUST_POSITIONS = np.array([
    [-0.30,  0.15, 0.00],
    [-0.30, -0.15, 0.00],
    [ 0.25,  0.00, 0.00],
    [-0.25,  0.00, 0.00],
    [ 0.00,  0.00, -0.05],
])

# Thruster unit directions, body frame
THRUST_DIRECTIONS = np.array([
    [1.0, 0.0, 0.0],
    [1.0, 0.0, 0.0],
    [0.0, 0.0, 1.0],
    [0.0, 0.0, 1.0],
    [0.0, 1.0, 0.0],
])

# =============================================================================
# NUMERICAL TOLERANCES
# =============================================================================

SINGULARITY_TOLERANCE = 1e-12      # |det| at or below which inversion fails
ORTHONORMALITY_TOLERANCE = 1e-6    # Allowable ||R^T R - I|| for a valid DCM
DCM_DRIFT_WARNING_TOL = 1e-3       # Drift above which a re-orthonormalization is logged
INERTIA_CONSISTENCY_TOL = 1e-9     # Allowable ||I I^-1 - Id||
ZERO_TOLERANCE = 1e-10             # Near-zero check for divisions/normalizations
