"""
Ionisation equilibrium of hydrogen/helium gas.

This module provides:
- Coupled Saha solver for H and He ionisation fractions
- Closed-form 3x3 matrix inverse used by the Newton iteration
"""

from sphlight.plasma.ionisation import (
    IonisationState,
    IonisationStatus,
    ionisation_fraction,
    ionisation_fractions,
    saha_coefficients,
)
from sphlight.plasma.linalg import inverse_3x3, determinant_3x3, is_finite_matrix

__all__ = [
    "IonisationState",
    "IonisationStatus",
    "ionisation_fraction",
    "ionisation_fractions",
    "saha_coefficients",
    "inverse_3x3",
    "determinant_3x3",
    "is_finite_matrix",
]
