"""
Command-line interface for sphlight.

This module provides CLI tools for:
- Lightcurves from a configuration file and a series of snapshots
- Temperature from density and internal energy
- Hydrogen/helium ionisation fractions
"""

__all__ = []
