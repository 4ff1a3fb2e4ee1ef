# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Row-broadcasting matrix addition.

``broadcast_add(a, b)`` accepts two ``[rows, cols]`` matrices with equal
``cols``. Equal row counts add elementwise; a single-row operand is added to
every row of the other. The result is always a new tensor.
"""

import torch

from bertembed.model.exceptions import IncompatibleShapesError


def broadcast_add(a: torch.Tensor, b: torch.Tensor) -> torch.Tensor:
    """
    Add two matrices under the row-broadcast rule.

    Args:
        a: Matrix of shape (rows_a, cols).
        b: Matrix of shape (rows_b, cols).

    Returns:
        Fresh tensor shaped like the larger operand.

    Raises:
        IncompatibleShapesError: If either operand isn't 2-D, the column
            counts or dtypes differ, or the row counts differ with neither
            equal to 1.
    """
    if a.dim() != 2 or b.dim() != 2:
        raise IncompatibleShapesError(
            f"broadcast_add expects matrices, got shapes {tuple(a.shape)} and {tuple(b.shape)}"
        )
    if a.dtype != b.dtype:
        raise IncompatibleShapesError(f"dtype mismatch: {a.dtype} vs {b.dtype}")

    rows_a, cols_a = a.shape
    rows_b, cols_b = b.shape
    if cols_a != cols_b:
        raise IncompatibleShapesError(
            f"Hidden dimension mismatch: {tuple(a.shape)} vs {tuple(b.shape)}"
        )
    if rows_a != rows_b and rows_a != 1 and rows_b != 1:
        raise IncompatibleShapesError(
            f"Row counts {rows_a} and {rows_b} differ and neither is 1"
        )

    return torch.add(a, b)
