"""
Temperature from internal energy with gas and radiation pressure.

Solves the quartic

    a T^4 + 3/2 rho (k_B / (mu m_H)) T = rho u

for T, assuming the radiation and gas temperatures are equal.
"""

from dataclasses import dataclass
from typing import Union
import numpy as np

from sphlight.core.constants import KB_ON_MH, MU_DEFAULT, RADCONST
from sphlight.core.exceptions import SolverNonConvergenceError
from sphlight.core.logging_config import get_logger

logger = get_logger("eos.temperature")

ArrayLike = Union[float, np.ndarray]


@dataclass
class TemperatureSolution:
    """
    Result of the energy-to-temperature inversion.

    Attributes
    ----------
    temperature : np.ndarray
        Temperature in K
    iterations : np.ndarray
        Newton iterations used per element
    converged : np.ndarray
        True where |dT| fell below tol*T before the iteration cap
    """

    temperature: np.ndarray
    iterations: np.ndarray
    converged: np.ndarray

    @property
    def all_converged(self) -> bool:
        """True when every element converged."""
        return bool(np.all(self.converged))


def _initial_guess(rho: np.ndarray, u: np.ndarray, mu: float) -> np.ndarray:
    """Smaller of the pure-gas and pure-radiation temperatures."""
    t_gas = u * mu / (1.5 * KB_ON_MH)
    t_rad = (u * rho / RADCONST) ** 0.25
    return np.minimum(t_gas, t_rad)


def solve_temperature(
    rho: ArrayLike,
    u: ArrayLike,
    mu: float = MU_DEFAULT,
    tol: float = 1.0e-8,
    max_iterations: int = 500,
) -> TemperatureSolution:
    """
    Newton-Raphson solve for temperature, element-wise over arrays.

    Each element is iterated independently: elements that have converged
    are frozen while the others continue. Steps are clamped to at most a
    20 per cent change in T per iteration.

    Parameters
    ----------
    rho : float or array
        Density in g/cm^3
    u : float or array
        Specific internal energy in erg/g
    mu : float
        Mean molecular weight
    tol : float
        Relative tolerance on the Newton step
    max_iterations : int
        Iteration cap

    Returns
    -------
    TemperatureSolution
    """
    rho, u = np.broadcast_arrays(
        np.asarray(rho, dtype=np.float64), np.asarray(u, dtype=np.float64)
    )
    if np.any(rho <= 0.0) or np.any(u <= 0.0):
        raise ValueError("Density and internal energy must be positive")

    shape = rho.shape
    rho = rho.ravel().copy()
    u = u.ravel().copy()

    temp = _initial_guess(rho, u, mu)
    iterations = np.zeros(temp.size, dtype=np.int64)
    converged = np.zeros(temp.size, dtype=bool)
    active = np.arange(temp.size)

    gas_coeff = 1.5 * KB_ON_MH * rho / mu

    for _ in range(max_iterations):
        if active.size == 0:
            break

        t = temp[active]
        ft = u[active] * rho[active] - gas_coeff[active] * t - RADCONST * t**4
        dft = -gas_coeff[active] - 4.0 * RADCONST * t**3
        dt = ft / dft

        # Newton step, limited to a 20 per cent change in T
        t_new = np.where(
            t - dt > 1.2 * t, 1.2 * t, np.where(t - dt < 0.8 * t, 0.8 * t, t - dt)
        )
        temp[active] = t_new
        iterations[active] += 1

        done = np.abs(dt) <= tol * t_new
        converged[active[done]] = True
        active = active[~done]

    return TemperatureSolution(
        temperature=temp.reshape(shape),
        iterations=iterations.reshape(shape),
        converged=converged.reshape(shape),
    )


def get_temp_from_u(
    rho: ArrayLike,
    u: ArrayLike,
    mu: float = MU_DEFAULT,
    tol: float = 1.0e-8,
    max_iterations: int = 500,
    strict: bool = False,
) -> ArrayLike:
    """
    Temperature from density and specific internal energy.

    Parameters
    ----------
    rho : float or array
        Density in g/cm^3
    u : float or array
        Specific internal energy in erg/g
    mu : float
        Mean molecular weight (default 0.6)
    tol : float
        Relative convergence tolerance on the Newton step
    max_iterations : int
        Iteration cap
    strict : bool
        Raise instead of warning when some element does not converge

    Returns
    -------
    float or array
        Temperature in K; a float when both inputs are scalars

    Raises
    ------
    SolverNonConvergenceError
        If ``strict`` and the iteration cap is reached for any element
    """
    scalar_input = np.ndim(rho) == 0 and np.ndim(u) == 0
    solution = solve_temperature(rho, u, mu=mu, tol=tol, max_iterations=max_iterations)

    if not solution.all_converged:
        nfail = int(np.count_nonzero(~solution.converged))
        message = (
            f"Temperature solve did not converge for {nfail} of "
            f"{solution.converged.size} elements after {max_iterations} iterations"
        )
        if strict:
            raise SolverNonConvergenceError(message, iterations=max_iterations)
        logger.warning(message)

    if scalar_input:
        return float(solution.temperature)
    return solution.temperature
