"""
Closed-form 3x3 linear algebra used by the Newton solvers.
"""

import numpy as np


def determinant_3x3(M: np.ndarray) -> float:
    """Determinant of a 3x3 matrix by cofactor expansion along the first row."""
    return (
        M[0, 0] * M[1, 1] * M[2, 2]
        - M[0, 0] * M[1, 2] * M[2, 1]
        - M[0, 1] * M[1, 0] * M[2, 2]
        + M[0, 1] * M[1, 2] * M[2, 0]
        + M[0, 2] * M[1, 0] * M[2, 1]
        - M[0, 2] * M[1, 1] * M[2, 0]
    )


def inverse_3x3(M: np.ndarray) -> np.ndarray:
    """
    Inverse of a 3x3 matrix from its cofactor matrix.

    No pivoting and no singularity check: a matrix with zero determinant
    gives an inverse with inf/nan entries, which callers must test for
    (see ``is_finite_matrix``).

    Parameters
    ----------
    M : array_like, shape (3, 3)
        Matrix to invert

    Returns
    -------
    np.ndarray, shape (3, 3)
        Inverse matrix
    """
    M = np.asarray(M, dtype=np.float64)
    if M.shape != (3, 3):
        raise ValueError(f"Expected a 3x3 matrix, got shape {M.shape}")

    det = determinant_3x3(M)

    cofactor = np.empty((3, 3), dtype=np.float64)
    cofactor[0, 0] = +(M[1, 1] * M[2, 2] - M[1, 2] * M[2, 1])
    cofactor[0, 1] = -(M[1, 0] * M[2, 2] - M[1, 2] * M[2, 0])
    cofactor[0, 2] = +(M[1, 0] * M[2, 1] - M[1, 1] * M[2, 0])
    cofactor[1, 0] = -(M[0, 1] * M[2, 2] - M[0, 2] * M[2, 1])
    cofactor[1, 1] = +(M[0, 0] * M[2, 2] - M[0, 2] * M[2, 0])
    cofactor[1, 2] = -(M[0, 0] * M[2, 1] - M[0, 1] * M[2, 0])
    cofactor[2, 0] = +(M[0, 1] * M[1, 2] - M[0, 2] * M[1, 1])
    cofactor[2, 1] = -(M[0, 0] * M[1, 2] - M[0, 2] * M[1, 0])
    cofactor[2, 2] = +(M[0, 0] * M[1, 1] - M[0, 1] * M[1, 0])

    with np.errstate(divide="ignore", invalid="ignore"):
        return cofactor.T / np.float64(det)


def is_finite_matrix(M: np.ndarray) -> bool:
    """True when every entry of ``M`` is finite."""
    return bool(np.all(np.isfinite(M)))
