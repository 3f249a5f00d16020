"""
Nonparametric backends.

Available backends:
    CPUNonparametricBackend: CPU reference implementation
"""

from statsuite.nonparametric.backends.cpu import CPUNonparametricBackend

__all__ = [
    "CPUNonparametricBackend",
]
