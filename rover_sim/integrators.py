"""
Rover 6DOF Dynamics - Numerical Integration

This module advances the integrated values of a RoverModel using the
derivatives produced by RoverModel.update(). The DCM is re-orthonormalized
after each full step when the model's config enables it, because the DCM
kinematics do not preserve orthonormality on their own.
"""

import logging
from typing import Callable, List, Sequence, Union

import numpy as np

from .dynamics import RoverModel
from .frames import orthonormalize_dcm
from .state import RoverSnapshot

logger = logging.getLogger(__name__)

CommandSource = Union[Sequence[float], Callable[[float], Sequence[float]]]


def _validate_step(model: RoverModel, thrust_commands: Sequence[float], dt: float) -> None:
    if dt <= 0:
        raise ValueError(f"Time step dt must be positive, got {dt}")
    commands = np.asarray(thrust_commands, dtype=np.float64)
    if commands.shape != (model.n_thrusters,):
        raise ValueError(
            f"Thruster commands must have shape ({model.n_thrusters},), got {commands.shape}"
        )
    if np.any(np.isnan(commands)):
        raise ValueError("Thruster commands contain NaN values")


def _evaluate(model: RoverModel, y: np.ndarray, thrust_commands: Sequence[float]) -> np.ndarray:
    """Load state vector y into the model and return its derivative vector."""
    model.restore(RoverSnapshot.from_vector(y, t=0.0))
    model.update(thrust_commands)
    return model.derivative_vector()


def _finish_step(model: RoverModel, y_new: np.ndarray, thrust_commands: Sequence[float],
                 t_new: float) -> RoverSnapshot:
    model.restore(RoverSnapshot.from_vector(y_new, t=t_new))
    if model.config.renormalize_attitude:
        model.attitude.value = orthonormalize_dcm(
            model.attitude.value, tolerance=model.config.orthonormality_tolerance
        )
    # Leave the derivatives consistent with the new values.
    model.update(thrust_commands)
    return model.snapshot(t_new)


def euler_step(model: RoverModel, thrust_commands: Sequence[float], dt: float,
               t: float = 0.0) -> RoverSnapshot:
    """
    Perform a single explicit Euler step in place.

    This is a first-order method, primarily for testing/comparison.

    Args:
        model: Rover model; its values are advanced in place
        thrust_commands: N thruster commands held constant over the step (N)
        dt: Time step (s)
        t: Time at the start of the step (s)

    Returns:
        Snapshot of the model at t + dt

    Raises:
        ValueError: If dt <= 0 or the commands are malformed
    """
    _validate_step(model, thrust_commands, dt)

    y = model.snapshot(t).to_vector()
    try:
        dy = _evaluate(model, y, thrust_commands)
    except Exception:
        model.restore(RoverSnapshot.from_vector(y, t=t))
        raise

    return _finish_step(model, y + dt * dy, thrust_commands, t + dt)


def rk4_step(model: RoverModel, thrust_commands: Sequence[float], dt: float,
             t: float = 0.0) -> RoverSnapshot:
    """
    Perform a single RK4 step in place.

    k1 = f(y)
    k2 = f(y + dt/2 * k1)
    k3 = f(y + dt/2 * k2)
    k4 = f(y + dt * k3)
    y_new = y + dt/6 * (k1 + 2*k2 + 2*k3 + k4)

    Args:
        model: Rover model; its values are advanced in place
        thrust_commands: N thruster commands held constant over the step (N)
        dt: Time step (s)
        t: Time at the start of the step (s)

    Returns:
        Snapshot of the model at t + dt

    Raises:
        ValueError: If dt <= 0 or the commands are malformed
    """
    _validate_step(model, thrust_commands, dt)

    y = model.snapshot(t).to_vector()

    try:
        k1 = _evaluate(model, y, thrust_commands)
        k2 = _evaluate(model, y + 0.5 * dt * k1, thrust_commands)
        k3 = _evaluate(model, y + 0.5 * dt * k2, thrust_commands)
        k4 = _evaluate(model, y + dt * k3, thrust_commands)
    except Exception:
        # Do not leave an intermediate stage in the model.
        model.restore(RoverSnapshot.from_vector(y, t=t))
        raise

    y_new = y + (dt / 6.0) * (k1 + 2*k2 + 2*k3 + k4)

    return _finish_step(model, y_new, thrust_commands, t + dt)


def integrate(model: RoverModel, thrust_commands: Sequence[float], dt: float,
              method: str = 'rk4', t: float = 0.0) -> RoverSnapshot:
    """
    Integrate the model forward by one timestep.

    Args:
        model: Rover model
        thrust_commands: N thruster commands (N)
        dt: Time step (s)
        method: Integration method ('rk4' or 'euler')
        t: Time at the start of the step (s)

    Returns:
        Snapshot of the model at t + dt
    """
    if method == 'rk4':
        return rk4_step(model, thrust_commands, dt, t)
    elif method == 'euler':
        return euler_step(model, thrust_commands, dt, t)
    else:
        raise ValueError(f"Unknown integration method: {method}")


def simulate(model: RoverModel, thrust_commands: CommandSource, dt: float, steps: int,
             method: str = 'rk4', t0: float = 0.0) -> List[RoverSnapshot]:
    """
    Run a fixed-step simulation.

    Args:
        model: Rover model, advanced in place
        thrust_commands: Constant commands, or a callable t -> commands
        dt: Time step (s)
        steps: Number of steps
        method: Integration method ('rk4' or 'euler')
        t0: Initial time (s)

    Returns:
        Snapshots at t0, t0 + dt, ..., t0 + steps*dt
    """
    if steps < 0:
        raise ValueError(f"steps must be non-negative, got {steps}")

    logger.debug(f"Starting simulation: dt={dt}s, steps={steps}, method={method}")

    history = [model.snapshot(t0)]
    t = t0
    for _ in range(steps):
        commands = thrust_commands(t) if callable(thrust_commands) else thrust_commands
        history.append(integrate(model, commands, dt, method=method, t=t))
        t = history[-1].t

    logger.debug(f"Simulation finished at t={t:.3f}s: {history[-1]}")
    return history
