"""
Equation of state inversions.

This module provides:
- Temperature from internal energy for a gas plus radiation mixture
"""

from sphlight.eos.temperature import get_temp_from_u, solve_temperature, TemperatureSolution

__all__ = [
    "get_temp_from_u",
    "solve_temperature",
    "TemperatureSolution",
]
