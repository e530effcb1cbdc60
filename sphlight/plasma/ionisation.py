"""
Hydrogen and helium ionisation fractions from the Saha equations.

Three coupled Saha equations (H I/H II, He I/He II, He II/He III) are solved
together, linked through the common electron density. The unknowns are the
number fractions, relative to the total nuclei density n, of ionised
hydrogen (x1), singly ionised helium (y1) and doubly ionised helium (y2):

    f = x1 (x1 + y1 + 2 y2) - A (n_H/n - x1)       = 0
    g = y1 (x1 + y1 + 2 y2) - B (n_He/n - y1 - y2) = 0
    h = y2 (x1 + y1 + 2 y2) - C y1                 = 0
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Dict, Tuple, Union
import numpy as np
import pandas as pd

from sphlight.core.constants import (
    CHI_H0,
    CHI_HE0,
    CHI_HE1,
    EV,
    KBOLTZ,
    MASS_ELECTRON,
    MASS_PROTON,
    PLANCKH,
)
from sphlight.core.exceptions import SingularMatrixError, SolverNonConvergenceError
from sphlight.core.logging_config import get_logger
from sphlight.plasma.linalg import inverse_3x3, is_finite_matrix

logger = get_logger("plasma.ionisation")

INITIAL_GUESS = (0.4, 0.3, 0.2)


class IonisationStatus(Enum):
    """Status of the ionisation Newton iteration."""

    CONVERGED = "converged"
    MAX_ITERATIONS = "max_iterations"
    SINGULAR = "singular"


@dataclass
class IonisationState:
    """
    Ionisation fractions of hydrogen and helium.

    Attributes
    ----------
    xh0, xh1 : float
        Neutral and ionised hydrogen fractions (sum to 1)
    xhe0, xhe1, xhe2 : float
        Neutral, singly and doubly ionised helium fractions (sum to 1)
    iterations : int
        Newton iterations performed
    status : IonisationStatus
        Convergence status
    """

    xh0: float
    xh1: float
    xhe0: float
    xhe1: float
    xhe2: float
    iterations: int = 0
    status: IonisationStatus = IonisationStatus.CONVERGED

    @property
    def converged(self) -> bool:
        """True when the iteration met its tolerance."""
        return self.status == IonisationStatus.CONVERGED

    @property
    def is_finite(self) -> bool:
        """True when every fraction is finite."""
        return bool(np.all(np.isfinite(self.fractions)))

    @property
    def fractions(self) -> Tuple[float, float, float, float, float]:
        """(xh0, xh1, xhe0, xhe1, xhe2)."""
        return (self.xh0, self.xh1, self.xhe0, self.xhe1, self.xhe2)

    def to_dict(self) -> Dict[str, Union[float, int, str]]:
        """Convert to a flat dictionary."""
        data = asdict(self)
        data["status"] = self.status.value
        return data


def saha_coefficients(
    dens: float, temp: float, X: float, Y: float
) -> Tuple[float, float, float, float, float]:
    """
    Saha coefficients and number fractions for a H/He mixture.

    Parameters
    ----------
    dens : float
        Density in g/cm^3
    temp : float
        Temperature in K
    X, Y : float
        Hydrogen and helium mass fractions

    Returns
    -------
    A, B, C : float
        Saha coefficients for H I, He I and He II ionisation, divided by n
    fh, fhe : float
        n_H/n and n_He/n
    """
    nh = X * dens / MASS_PROTON
    nhe = Y * dens / (4.0 * MASS_PROTON)
    n = nh + nhe

    const = (np.sqrt(2.0 * np.pi * MASS_ELECTRON * KBOLTZ) / PLANCKH) ** 3 / n
    kt = KBOLTZ * temp
    t15 = temp**1.5

    A = 1.0 * const * t15 * np.exp(-CHI_H0 * EV / kt)
    B = 4.0 * const * t15 * np.exp(-CHI_HE0 * EV / kt)
    C = 1.0 * const * t15 * np.exp(-CHI_HE1 * EV / kt)

    return A, B, C, nh / n, nhe / n


def _residuals(x: np.ndarray, A: float, B: float, C: float, fh: float, fhe: float) -> np.ndarray:
    x1, y1, y2 = x
    ne = x1 + y1 + 2.0 * y2
    return np.array(
        [
            x1 * ne - A * (fh - x1),
            y1 * ne - B * (fhe - y1 - y2),
            y2 * ne - C * y1,
        ]
    )


def _jacobian(x: np.ndarray, A: float, B: float, C: float) -> np.ndarray:
    x1, y1, y2 = x
    return np.array(
        [
            [2.0 * x1 + y1 + 2.0 * y2 + A, x1, 2.0 * x1],
            [y1, x1 + 2.0 * y1 + 2.0 * y2 + B, 2.0 * y1 + B],
            [y2, y2 - C, x1 + y1 + 4.0 * y2],
        ]
    )


def ionisation_fraction(
    dens: float,
    temp: float,
    X: float,
    Y: float,
    max_iterations: int = 50,
    atol: float = 0.0,
    rtol: float = 1.0e-10,
    strict: bool = False,
) -> IonisationState:
    """
    Solve the coupled Saha equations for H and He ionisation fractions.

    Multivariate Newton iteration from a fixed starting point with an
    analytic Jacobian inverted in closed form. The iteration stops when every
    component satisfies ``|dx_i| <= atol + rtol * |x_i|`` or after
    ``max_iterations`` steps. Cold gas, where the roots sit near zero and
    Newton only halves the iterate, runs to the cap and is flagged.

    Parameters
    ----------
    dens : float
        Density in g/cm^3
    temp : float
        Temperature in K
    X : float
        Hydrogen mass fraction
    Y : float
        Helium mass fraction
    max_iterations : int
        Iteration cap
    atol, rtol : float
        Absolute and relative tolerance on the Newton update
    strict : bool
        Raise instead of returning a flagged state on failure

    Returns
    -------
    IonisationState

    Raises
    ------
    ValueError
        If inputs are out of range
    SingularMatrixError
        If ``strict`` and the Jacobian becomes singular
    SolverNonConvergenceError
        If ``strict`` and the iteration cap is reached
    """
    if dens <= 0.0 or temp <= 0.0:
        raise ValueError("Density and temperature must be positive")
    if not (0.0 < X < 1.0 and 0.0 < Y < 1.0):
        raise ValueError(f"Mass fractions must lie in (0, 1), got X={X}, Y={Y}")

    A, B, C, fh, fhe = saha_coefficients(dens, temp, X, Y)

    x = np.array(INITIAL_GUESS, dtype=np.float64)
    status = IonisationStatus.MAX_ITERATIONS
    iterations = 0

    for iterations in range(1, max_iterations + 1):
        rhs = -_residuals(x, A, B, C, fh, fhe)
        M_inv = inverse_3x3(_jacobian(x, A, B, C))

        if not is_finite_matrix(M_inv):
            status = IonisationStatus.SINGULAR
            x[:] = np.nan
            break

        dx = M_inv @ rhs
        x = x + dx

        if np.all(np.abs(dx) <= atol + rtol * np.abs(x)):
            status = IonisationStatus.CONVERGED
            break

    x1, y1, y2 = x
    state = IonisationState(
        xh0=(fh - x1) / fh,
        xh1=x1 / fh,
        xhe0=(fhe - y1 - y2) / fhe,
        xhe1=y1 / fhe,
        xhe2=y2 / fhe,
        iterations=iterations,
        status=status,
    )

    if status == IonisationStatus.SINGULAR:
        message = f"Singular Jacobian in ionisation solve at rho={dens:.3e}, T={temp:.3e}"
        if strict:
            raise SingularMatrixError(message)
        logger.warning(message)
    elif status == IonisationStatus.MAX_ITERATIONS:
        message = (
            f"Ionisation solve reached {max_iterations} iterations without converging "
            f"at rho={dens:.3e}, T={temp:.3e}"
        )
        if strict:
            raise SolverNonConvergenceError(message, iterations=iterations)
        logger.warning(message)

    return state


def ionisation_fractions(
    dens: np.ndarray, temp: np.ndarray, X: float, Y: float, **kwargs
) -> pd.DataFrame:
    """
    Ionisation fractions for many (density, temperature) pairs.

    Parameters
    ----------
    dens, temp : array_like
        Densities (g/cm^3) and temperatures (K), broadcast together
    X, Y : float
        Hydrogen and helium mass fractions
    **kwargs
        Passed to ``ionisation_fraction``

    Returns
    -------
    pd.DataFrame
        One row per input with columns rho, T, xh0, xh1, xhe0, xhe1, xhe2,
        iterations and status
    """
    dens, temp = np.broadcast_arrays(
        np.atleast_1d(np.asarray(dens, dtype=np.float64)),
        np.atleast_1d(np.asarray(temp, dtype=np.float64)),
    )

    rows = []
    for rho_i, t_i in zip(dens.ravel(), temp.ravel()):
        state = ionisation_fraction(float(rho_i), float(t_i), X, Y, **kwargs)
        rows.append({"rho": rho_i, "T": t_i, **state.to_dict()})

    df = pd.DataFrame(rows)
    nfail = int((df["status"] != IonisationStatus.CONVERGED.value).sum()) if len(df) else 0
    if nfail:
        logger.info(f"{nfail} of {len(df)} ionisation solves did not converge")
    return df
