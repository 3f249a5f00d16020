"""
Regression backends.

Available backends:
    CPUNormalEquationsBackend: CPU reference implementation using
        Gauss-Jordan inversion of X'X
"""

from statsuite.regression.backends.cpu import CPUNormalEquationsBackend

__all__ = [
    "CPUNormalEquationsBackend",
]
