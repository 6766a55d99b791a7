"""
Rover 6DOF Dynamics - Validation Checks

This module implements opt-in numerical health checks for a rover model:
- DCM orthonormality (attitude drift)
- Inertia tensor / inverse consistency
- Finite state values

RoverModel.update() never calls these; integrators and tests do.
"""

import logging
from typing import Optional, Tuple

import numpy as np

from . import constants as C
from .dynamics import RoverModel
from .frames import orthonormality_error
from .linalg import Matrix3

logger = logging.getLogger(__name__)


class ValidationError(Exception):
    """Raised when a numerical validation check fails."""
    pass


def check_dcm_orthonormal(R: Matrix3, tolerance: float = None) -> bool:
    """
    Verify that a DCM is orthonormal with determinant +1.

    Args:
        R: Body-to-inertial DCM
        tolerance: Allowable ||R^T R - I|| (Frobenius)

    Returns:
        True if valid, raises ValidationError otherwise
    """
    if tolerance is None:
        tolerance = C.ORTHONORMALITY_TOLERANCE

    drift = orthonormality_error(R)
    if drift > tolerance:
        raise ValidationError(
            f"DCM orthonormality violation: ||R^T R - I|| = {drift:.3e}, "
            f"tolerance = {tolerance:.1e}"
        )
    det = float(R.determinant())
    if det < 0:
        raise ValidationError(f"DCM is a reflection: det(R) = {det:.6f}")
    return True


def check_inertia_consistency(moi: Matrix3, moi_inv: Matrix3, tolerance: float = None) -> bool:
    """
    Verify that moi_inv is the inverse of moi.

    Returns:
        True if valid, raises ValidationError otherwise
    """
    if tolerance is None:
        tolerance = C.INERTIA_CONSISTENCY_TOL

    residual = float(np.linalg.norm((moi * moi_inv).to_array() - np.eye(3)))
    if residual > tolerance:
        raise ValidationError(
            f"Inertia inverse inconsistent: ||I I^-1 - Id|| = {residual:.3e}, "
            f"tolerance = {tolerance:.1e}"
        )
    return True


def check_state_finite(model: RoverModel) -> bool:
    """
    Verify that every integrated value and derivative is finite.

    Returns:
        True if valid, raises ValidationError otherwise
    """
    fields = {
        'position': model.position,
        'velocity': model.velocity,
        'angvel': model.angvel,
        'attitude': model.attitude,
    }
    for name, pair in fields.items():
        for part in ('value', 'derivative'):
            if not np.all(np.isfinite(getattr(pair, part).to_array())):
                raise ValidationError(f"Non-finite {name}.{part}: {getattr(pair, part)!r}")
    return True


def validate_model(model: RoverModel, abort_on_error: bool = True) -> Tuple[bool, Optional[str]]:
    """
    Perform all validation checks on a model.

    Args:
        model: Model to validate
        abort_on_error: If True, raise on the first failure
    """
    try:
        check_dcm_orthonormal(model.attitude.value)
        check_inertia_consistency(model.moi, model.moi_inv)
        check_state_finite(model)
        return True, None
    except ValidationError as e:
        if abort_on_error:
            raise
        return False, str(e)


def run_validation_suite(model: RoverModel) -> dict:
    """
    Run all validation checks and return results.

    Args:
        model: Model to validate

    Returns:
        Dictionary of check name to 'PASS' or 'FAIL: <reason>', plus 'all_passed'
    """
    results = {
        'dcm_orthonormal': None,
        'inertia_consistent': None,
        'state_finite': None,
        'all_passed': True
    }

    checks = [
        ('dcm_orthonormal', lambda: check_dcm_orthonormal(model.attitude.value)),
        ('inertia_consistent', lambda: check_inertia_consistency(model.moi, model.moi_inv)),
        ('state_finite', lambda: check_state_finite(model)),
    ]

    for name, check in checks:
        try:
            check()
            results[name] = 'PASS'
            logger.debug(f"Validation {name}: PASS")
        except ValidationError as e:
            results[name] = f'FAIL: {e}'
            results['all_passed'] = False
            logger.warning(f"Validation {name} failed: {e}")

    return results
