"""
Linear system backends.

Available backends:
    CPUEliminationBackend: Gauss-Jordan elimination on the CPU
"""

from pymatcalc.linalg.backends.cpu import CPUEliminationBackend

__all__ = [
    "CPUEliminationBackend",
]
