"""
Rover 6DOF Dynamics - Reference Frame Transformations

This module builds and maintains body-to-inertial direction cosine matrices
(DCMs) and moves vectors between the body and inertial frames.

Quaternion Convention: [w, x, y, z] where w is the scalar component.
Euler Convention: ZYX (yaw, then pitch, then roll), angles in radians.
"""

import logging

import numpy as np

from . import constants as C
from .linalg import Matrix3, Vector3

logger = logging.getLogger(__name__)


def quaternion_normalize(q: np.ndarray) -> np.ndarray:
    """
    Normalize a quaternion to unit length.

    Args:
        q: Quaternion [w, x, y, z]

    Returns:
        Normalized quaternion (identity if input is degenerate)
    """
    q = np.asarray(q, dtype=np.float64)
    norm = np.linalg.norm(q)
    if norm < C.ZERO_TOLERANCE:
        return np.array([1.0, 0.0, 0.0, 0.0])
    return q / norm


def dcm_from_quaternion(q: np.ndarray, dtype=np.float64) -> Matrix3:
    """
    Convert a quaternion to the body-to-inertial DCM.

    v_inertial = R(q) * v_body

    Args:
        q: Quaternion [w, x, y, z] (normalized internally)
        dtype: Scalar type of the result

    Returns:
        3x3 rotation matrix
    """
    w, x, y, z = quaternion_normalize(q)

    xx, yy, zz = x*x, y*y, z*z
    xy, xz, yz = x*y, x*z, y*z
    wx, wy, wz = w*x, w*y, w*z

    return Matrix3(
        (1 - 2*(yy + zz),     2*(xy - wz),     2*(xz + wy)),
        (    2*(xy + wz), 1 - 2*(xx + zz),     2*(yz - wx)),
        (    2*(xz - wy),     2*(yz + wx), 1 - 2*(xx + yy)),
        dtype=dtype,
    )


def dcm_from_euler(roll: float, pitch: float, yaw: float, dtype=np.float64) -> Matrix3:
    """
    Body-to-inertial DCM from ZYX Euler angles.

    R = Rz(yaw) * Ry(pitch) * Rx(roll)
    """
    cr, sr = np.cos(roll), np.sin(roll)
    cp, sp = np.cos(pitch), np.sin(pitch)
    cy, sy = np.cos(yaw), np.sin(yaw)

    return Matrix3(
        (cy*cp, cy*sp*sr - sy*cr, cy*sp*cr + sy*sr),
        (sy*cp, sy*sp*sr + cy*cr, sy*sp*cr - cy*sr),
        (-sp,   cp*sr,            cp*cr),
        dtype=dtype,
    )


def body_to_inertial(v_body: Vector3, attitude: Matrix3) -> Vector3:
    """Rotate a body-frame vector into the inertial frame."""
    return attitude * v_body


def inertial_to_body(v_inertial: Vector3, attitude: Matrix3) -> Vector3:
    """
    Rotate an inertial-frame vector into the body frame.

    Uses the true inverse of the DCM rather than its transpose, so the
    result stays consistent with a DCM that has drifted from orthonormal.
    """
    return attitude.inverse() * v_inertial


def orthonormality_error(R: Matrix3) -> float:
    """Frobenius norm of R^T R - I."""
    Ra = R.to_array().astype(np.float64)
    return float(np.linalg.norm(Ra.T @ Ra - np.eye(3)))


def orthonormalize_dcm(R: Matrix3, tolerance: float = None) -> Matrix3:
    """
    Project a drifted DCM back onto the rotation group.

    Computes the closest orthonormal matrix R (R^T R)^(-1/2) via the SVD
    R = U S V^T  ->  U V^T. A reflection in the result is removed by
    flipping the smallest singular direction.

    Args:
        R: Approximately orthonormal matrix
        tolerance: Drift above which the correction is logged as a warning.
                   Defaults to C.DCM_DRIFT_WARNING_TOL.

    Returns:
        Orthonormal matrix with determinant +1, same dtype as R
    """
    if tolerance is None:
        tolerance = C.DCM_DRIFT_WARNING_TOL

    drift = orthonormality_error(R)
    if drift > tolerance:
        logger.warning(f"DCM drift {drift:.3e} exceeds tolerance {tolerance:.1e}; re-orthonormalizing")

    U, _, Vt = np.linalg.svd(R.to_array().astype(np.float64))
    if np.linalg.det(U @ Vt) < 0:
        U[:, -1] = -U[:, -1]
    return Matrix3.from_array(U @ Vt, dtype=R.dtype)
