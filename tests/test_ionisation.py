"""
Tests for the Saha hydrogen/helium ionisation solver.
"""

import logging

import numpy as np
import pandas as pd
import pytest

from sphlight.core.constants import CHI_H0, CHI_HE1, EV, KBOLTZ
from sphlight.core.exceptions import SingularMatrixError, SolverNonConvergenceError
from sphlight.plasma import ionisation
from sphlight.plasma.linalg import inverse_3x3
from sphlight.plasma.ionisation import (
    IonisationStatus,
    ionisation_fraction,
    ionisation_fractions,
    saha_coefficients,
)

X, Y = 0.7, 0.28


def test_saha_coefficients():
    """Number fractions sum to one and coefficients scale with Boltzmann factors."""
    temp = 2.0e4
    A, B, C, fh, fhe = saha_coefficients(1.0e-9, temp, X, Y)

    assert fh + fhe == pytest.approx(1.0)
    assert fh / fhe == pytest.approx(4.0 * X / Y)
    assert C / A == pytest.approx(np.exp(-(CHI_HE1 - CHI_H0) * EV / (KBOLTZ * temp)))
    assert A > B > C > 0.0


def test_fractions_sum_to_one():
    """Hydrogen and helium fractions each sum to one."""
    state = ionisation_fraction(1.0e-9, 1.2e4, X, Y)
    assert state.converged
    assert state.xh0 + state.xh1 == pytest.approx(1.0, abs=1.0e-12)
    assert state.xhe0 + state.xhe1 + state.xhe2 == pytest.approx(1.0, abs=1.0e-12)


def test_fractions_in_range():
    """Converged fractions lie in [0, 1]."""
    for temp in [8.0e3, 1.5e4, 3.0e4]:
        state = ionisation_fraction(1.0e-9, temp, X, Y)
        assert state.converged
        for value in state.fractions:
            assert -1.0e-10 <= value <= 1.0 + 1.0e-10


def test_cold_gas_is_neutral():
    """At 3000 K the gas is essentially neutral."""
    state = ionisation_fraction(1.0e-10, 3.0e3, X, Y)
    assert state.is_finite
    assert state.xh1 < 1.0e-3
    assert state.xh0 > 0.999
    assert state.xhe0 > 0.999


def test_hot_gas_is_ionised():
    """At 1e5 K hydrogen and helium are fully ionised."""
    state = ionisation_fraction(1.0e-10, 1.0e5, X, Y)
    assert state.converged
    assert state.xh1 > 0.99
    assert state.xhe2 > 0.99
    assert state.xh0 < 0.01


def test_ionisation_increases_with_temperature():
    """xh1 and xhe2 increase and xh0 decreases with temperature at fixed density."""
    temps = [5.0e3, 8.0e3, 1.2e4, 2.0e4, 5.0e4]
    states = [ionisation_fraction(1.0e-9, t, X, Y) for t in temps]

    assert np.all(np.diff([s.xh1 for s in states]) > 0.0)
    assert np.all(np.diff([s.xh0 for s in states]) < 0.0)
    assert np.all(np.diff([s.xhe2 for s in states]) > -1.0e-12)
    assert states[-1].xhe2 > states[0].xhe2 + 0.1


def test_helium_ionises_after_hydrogen():
    """Helium is less ionised than hydrogen at intermediate temperature."""
    state = ionisation_fraction(1.0e-9, 1.2e4, X, Y)
    assert state.xh1 > state.xhe1 + state.xhe2


def _fixed_newton(dens, temp, steps=50):
    """Reference: the Newton update applied a fixed number of times."""
    A, B, C, fh, fhe = saha_coefficients(dens, temp, X, Y)
    x = np.array(ionisation.INITIAL_GUESS, dtype=np.float64)
    for _ in range(steps):
        rhs = -ionisation._residuals(x, A, B, C, fh, fhe)
        x = x + inverse_3x3(ionisation._jacobian(x, A, B, C)) @ rhs
    x1, y1, y2 = x
    return x1 / fh, y1 / fhe, y2 / fhe


def test_cold_gas_not_reported_converged():
    """At 2000 K the iterate only halves each step, so it must not stop early."""
    state = ionisation_fraction(1.0e-9, 2.0e3, X, Y)
    xh1, xhe1, xhe2 = _fixed_newton(1.0e-9, 2.0e3)

    assert state.status == IonisationStatus.MAX_ITERATIONS
    assert state.iterations == 50
    np.testing.assert_allclose([state.xh1, state.xhe1, state.xhe2], [xh1, xhe1, xhe2], rtol=1.0e-12)
    assert state.xh1 < 1.0e-14
    assert state.xhe1 < 1.0e-16


@pytest.mark.parametrize("temp", [1.2e4, 3.0e4, 1.0e5])
def test_early_stop_matches_fixed_iterations(temp):
    """Stopping at convergence gives the same fractions as running all 50 steps."""
    state = ionisation_fraction(1.0e-9, temp, X, Y)
    xh1, xhe1, xhe2 = _fixed_newton(1.0e-9, temp)

    assert state.converged
    assert state.iterations < 50
    assert state.xh1 == pytest.approx(xh1, rel=1.0e-9)
    assert state.xhe1 + state.xhe2 == pytest.approx(xhe1 + xhe2, rel=1.0e-9)


def test_iteration_cap_flagged(caplog):
    """Stopping at the iteration cap is reported in the status and the log."""
    with caplog.at_level(logging.WARNING, logger="sphlight.plasma.ionisation"):
        state = ionisation_fraction(1.0e-9, 1.2e4, X, Y, max_iterations=1)
    assert state.status == IonisationStatus.MAX_ITERATIONS
    assert state.iterations == 1
    assert not state.converged
    assert "without converging" in caplog.text


def test_iteration_cap_strict():
    """strict=True raises on hitting the iteration cap."""
    with pytest.raises(SolverNonConvergenceError):
        ionisation_fraction(1.0e-9, 1.2e4, X, Y, max_iterations=1, strict=True)


def test_singular_jacobian(monkeypatch):
    """A non-finite inverse stops the iteration with NaN fractions."""
    monkeypatch.setattr(ionisation, "inverse_3x3", lambda M: np.full((3, 3), np.nan))

    state = ionisation_fraction(1.0e-9, 1.2e4, X, Y)
    assert state.status == IonisationStatus.SINGULAR
    assert not state.is_finite

    with pytest.raises(SingularMatrixError):
        ionisation_fraction(1.0e-9, 1.2e4, X, Y, strict=True)


@pytest.mark.parametrize(
    "dens,temp,x,y",
    [(0.0, 1.0e4, X, Y), (1.0e-9, -1.0, X, Y), (1.0e-9, 1.0e4, 0.0, Y), (1.0e-9, 1.0e4, X, 1.0)],
)
def test_invalid_input(dens, temp, x, y):
    """Non-positive density/temperature or bad mass fractions are rejected."""
    with pytest.raises(ValueError):
        ionisation_fraction(dens, temp, x, y)


def test_state_to_dict():
    """to_dict flattens the state with the status as a string."""
    data = ionisation_fraction(1.0e-9, 1.2e4, X, Y).to_dict()
    assert data["status"] == "converged"
    assert set(data) == {"xh0", "xh1", "xhe0", "xhe1", "xhe2", "iterations", "status"}


def test_ionisation_fractions_table():
    """Many states are returned as a DataFrame, one row per input."""
    temps = np.array([6.0e3, 1.0e4, 2.0e4])
    df = ionisation_fractions(1.0e-9, temps, X, Y)

    assert isinstance(df, pd.DataFrame)
    assert len(df) == 3
    assert list(df["T"]) == list(temps)
    assert {"rho", "xh0", "xh1", "xhe0", "xhe1", "xhe2", "status"} <= set(df.columns)
    assert np.all(np.diff(df["xh1"]) > 0.0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
