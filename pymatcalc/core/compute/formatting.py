"""
Text layout for matrices and solution terms.

The print-string layout is a de facto file format ("print to file" uses it
verbatim), so it is reproduced byte-for-byte:

    - each column is right-aligned by the widest integer part in it
      (sign included)
    - values are fixed-point with ``precision`` decimals
    - cells in a row are separated by ", "
    - every row ends with a newline
    - a value within tolerance of zero prints as 0, never -0

Example (precision 2)::

    100.92,  5.00, 48.02
      0.00,  6.00,  7.00
     17.11, 55.55,  1.02
"""

from typing import Any

import numpy as np
from numpy.typing import NDArray

from pymatcalc.core.compute.tolerances import (
    integer_part_digit_count,
    near_zero_mask,
)


def column_widths(values: NDArray[np.floating[Any]]) -> list[int]:
    """Widest integer-part digit count (sign included) per column."""
    n_rows, n_cols = values.shape
    widths = [0] * n_cols
    for r in range(n_rows):
        for c in range(n_cols):
            digits = integer_part_digit_count(float(values[r, c]), True)
            if digits > widths[c]:
                widths[c] = digits
    return widths


def format_grid(values: NDArray[np.floating[Any]], precision: int) -> str:
    """
    Render a 2D grid using the print-string layout.

    Parameters
    ----------
    values : ndarray
        2D array of cell values.
    precision : int
        Digits after the decimal point.

    Returns
    -------
    str
        The aligned text, one newline-terminated line per row. Empty for a
        grid with no rows or no columns.
    """
    if values.ndim != 2 or values.shape[0] == 0 or values.shape[1] == 0:
        return ""

    # Replacing near-zeros with +0.0 also removes negative zero.
    cleaned = np.where(near_zero_mask(values), 0.0, values)
    widths = column_widths(cleaned)

    lines = []
    for row in cleaned:
        cells = []
        for c, value in enumerate(row):
            value = float(value)
            padding = widths[c] - integer_part_digit_count(value, True)
            cells.append(" " * padding + f"{value:.{precision}f}")
        lines.append(", ".join(cells) + "\n")

    return "".join(lines)


def format_term_number(value: float) -> str:
    """
    Format a magnitude inside a solution equation.

    Uses C-style %g (six significant digits), so 1.5 prints as ``1.5``,
    2.0 as ``2`` and 1/3 as ``0.333333``.
    """
    return f"{value:g}"
