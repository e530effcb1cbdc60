"""
Tests for physical constants.
"""

import numpy as np
import pytest

from sphlight.core import constants as c


def test_radiation_constant():
    """a = 4 sigma / c."""
    assert c.RADCONST == pytest.approx(7.5657e-15, rel=1.0e-4)


def test_stefan_boltzmann_from_fundamentals():
    """sigma = 2 pi^5 k^4 / (15 h^3 c^2)."""
    sigma = 2.0 * np.pi**5 * c.KBOLTZ**4 / (15.0 * c.PLANCKH**3 * c.C_LIGHT**2)
    assert c.STEBOLTZ == pytest.approx(sigma, rel=1.0e-8)


def test_wien_constant_solves_peak_condition():
    """x = 3 (1 - exp(-x)) at the peak of B_nu."""
    x = c.WIEN_X
    assert x == pytest.approx(3.0 * (1.0 - np.exp(-x)), rel=1.0e-12)


def test_lightcurve_defaults():
    """Default frequency grid and opacity."""
    assert c.NFREQ_DEFAULT == 128
    assert c.FREQ_MIN_DEFAULT == 1.0e8
    assert c.FREQ_MAX_DEFAULT == 1.0e22
    assert c.KAPPA_DEFAULT == 0.3
    assert c.NPIX_DEFAULT == 1024
    assert c.NPIX_MIN == 8


def test_ionisation_potentials():
    """Hydrogen and helium ionisation energies in eV."""
    assert (c.CHI_H0, c.CHI_HE0, c.CHI_HE1) == (13.6, 24.6, 54.4)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
