"""
Linear algebra kernels for statsuite.

All functions follow these conventions:
    - Inputs are float64 NumPy arrays; outputs are new arrays
    - Functions are stateless and never modify their inputs
    - Errors are raised immediately with clear messages

Submodules:
    gauss_jordan: transpose, products and Gauss-Jordan inversion
"""

from statsuite.core.compute.linalg.gauss_jordan import (
    NormalEquationsResult,
    transpose,
    matmul,
    matvec,
    gauss_jordan_inverse,
    solve_normal_equations,
)

__all__ = [
    "NormalEquationsResult",
    "transpose",
    "matmul",
    "matvec",
    "gauss_jordan_inverse",
    "solve_normal_equations",
]
