"""
Generic result container for pymatcalc computations.

The Result class provides a standardized envelope that structured
linear-algebra results use. This enables shared tooling for timing,
reporting and testing while allowing each operation to define its own
payload.

Design decisions:
    - Generic over parameter payload P for type safety
    - info dict for flexible metadata (rank, pivot count, densified, ...)
    - timing is optional (don't burden unit tests)
    - Immutable (frozen=True) for reproducibility
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for matrix computations.

    Type Parameters:
        P: The operation-specific payload type

    Attributes:
        params: Operation-specific payload (e.g. an EliminationReadout)
        info: Structured metadata (method, rank, representation, ...)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during computation

    Examples:
        >>> Result(
        ...     params=readout,
        ...     info={'method': 'gauss_jordan', 'n_pivots': 2},
        ...     timing={'total_seconds': 0.001},
        ...     backend_name='cpu_dense_elimination'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
