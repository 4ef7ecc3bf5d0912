"""
CPU backend for linear systems.

Gauss-Jordan elimination with "first nonzero" pivot search, run through
the coefficient matrix's own storage backend. A sparse coefficient matrix
is densified first (elimination fills it in), which is reported as a
warning on the result.
"""

from typing import Any

from pymatcalc.core.constants import BACKEND_SPARSE, DEFAULT_PRECISION
from pymatcalc.core.result import Result
from pymatcalc.core.compute.timing import Timer
from pymatcalc.core.compute.linalg.elimination import EliminationReadout
from pymatcalc.linalg.design import LinearSystemDesign


class CPUEliminationBackend:
    """
    CPU backend using Gauss-Jordan elimination.

    Solves LinearSystemDesign -> EliminationReadout.
    """

    def __init__(self, verbose: bool = False, precision: int = DEFAULT_PRECISION):
        self.verbose = verbose
        self.precision = precision

    def name_for(self, design: LinearSystemDesign) -> str:
        return f"cpu_{design.representation}_elimination"

    def solve(self, design: LinearSystemDesign) -> Result[EliminationReadout]:
        """
        Solve A x = b.

        Algorithm:
            1. Forward phase to row echelon form
            2. Backward phase to reduced row echelon form
            3. Read equations and free variables off the reduced system

        Args:
            design: Validated linear system design

        Returns:
            Result containing EliminationReadout
        """
        timer = Timer()
        timer.start()

        warnings_list: list[str] = []
        if design.representation == BACKEND_SPARSE:
            warnings_list.append(
                "sparse coefficient matrix was densified for elimination"
            )

        with timer.section('elimination'):
            readout = design.coefficients.solve_system(
                design.constants, self.verbose, self.precision,
            )

        timer.stop()

        info: dict[str, Any] = {
            'method': 'gauss_jordan',
            'pivoting': 'first_nonzero',
            'rank': len(readout.pivot_columns),
            'n_free': len(readout.free_variables),
            'consistent': readout.consistent,
            'representation': design.representation,
        }

        return Result(
            params=readout,
            info=info,
            timing=timer.result(),
            backend_name=self.name_for(design),
            warnings=tuple(warnings_list),
        )
