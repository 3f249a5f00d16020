"""
Shared compute infrastructure for statsuite.

IMPORTANT: This is NOT where domain-specific backends live. Those go in
{domain}/backends/. This module contains shared NUMERIC infrastructure.

Submodules:
    timing: Section timing for backend solves
    tolerances: Numerical thresholds
    linalg: Linear algebra kernels (Gauss-Jordan inversion)
"""

from statsuite.core.compute.timing import Timer

__all__ = [
    "Timer",
]
