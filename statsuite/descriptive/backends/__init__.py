"""
Frequency backends.

Available backends:
    CPUFrequencyBackend: CPU reference implementation
"""

from statsuite.descriptive.backends.cpu import CPUFrequencyBackend

__all__ = [
    "CPUFrequencyBackend",
]
