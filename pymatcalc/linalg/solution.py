"""
Linear system solution types.

The parameter payload is the elimination kernel's EliminationReadout; this
module adds the user-facing wrapper.
"""

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from pymatcalc.core.result import Result
from pymatcalc.core.compute.linalg.elimination import EliminationReadout

if TYPE_CHECKING:
    from pymatcalc.linalg.design import LinearSystemDesign


@dataclass
class LinearSystemSolution:
    """
    User-facing result of ``solve``.

    Wraps the backend Result and provides accessors for the reduced system,
    the equations read off it, and the textual report.
    """
    _result: Result[EliminationReadout]
    _design: 'LinearSystemDesign'

    @property
    def is_consistent(self) -> bool:
        return self._result.params.consistent

    @property
    def has_unique_solution(self) -> bool:
        return self.is_consistent and not self.free_variables

    @property
    def equations(self) -> tuple[str, ...]:
        """One "x<p> = ..." line per pivot variable."""
        return self._result.params.equations

    @property
    def free_variables(self) -> tuple[int, ...]:
        """Zero-based indices of the unknowns left unconstrained."""
        return self._result.params.free_variables

    @property
    def free_variable_names(self) -> tuple[str, ...]:
        return tuple(f"x{i + 1}" for i in self.free_variables)

    @property
    def pivot_columns(self) -> tuple[int, ...]:
        return self._result.params.pivot_columns

    @property
    def rank(self) -> int:
        """Rank of the coefficient matrix (number of pivots)."""
        return len(self.pivot_columns)

    @property
    def reduced(self) -> NDArray[np.floating[Any]]:
        """The augmented matrix in reduced row echelon form."""
        return self._result.params.reduced

    @property
    def values(self) -> NDArray[np.floating[Any]] | None:
        """
        The unique solution vector, or None.

        None when the system is inconsistent or has free variables.
        """
        if not self.has_unique_solution:
            return None
        n = self._design.n_unknowns
        return self.reduced[:n, -1].copy()

    @property
    def steps(self) -> tuple[str, ...]:
        return self._result.params.steps

    @property
    def text(self) -> str:
        """Verbose steps (if recorded) followed by the solution body."""
        return self._result.params.text

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """Short report of the system and its solution."""
        if not self.is_consistent:
            status = "inconsistent (no solution)"
        elif self.free_variables:
            status = f"infinitely many solutions ({len(self.free_variables)} free)"
        else:
            status = "unique solution"

        lines = [
            "Linear System",
            "=" * 40,
            f"Equations: {self._design.n_equations}",
            f"Unknowns: {self._design.n_unknowns}",
            f"Representation: {self._design.representation}",
            f"Rank: {self.rank}",
            f"Status: {status}",
        ]
        if self.is_consistent:
            lines.append("")
            lines.extend(self.equations)
            if self.free_variables:
                lines.append(", ".join(self.free_variable_names) + " are free variables.")
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"LinearSystemSolution(consistent={self.is_consistent}, "
            f"free_variables={self.free_variable_names})"
        )
