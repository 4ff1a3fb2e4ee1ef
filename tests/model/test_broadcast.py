# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Tests for broadcast_add."""

import pytest
import torch

from bertembed.model.broadcast import broadcast_add
from bertembed.model.exceptions import IncompatibleShapesError


class TestBroadcastAdd:
    def test_self_add_doubles(self) -> None:
        a = torch.randn(6, 4, generator=torch.Generator().manual_seed(0))
        assert torch.equal(broadcast_add(a, a), 2 * a)

    def test_single_row_left_is_replicated(self) -> None:
        row = torch.tensor([[1.0, 2.0, 3.0]])
        matrix = torch.arange(12, dtype=torch.float32).reshape(4, 3)
        result = broadcast_add(row, matrix)
        assert result.shape == (4, 3)
        for i in range(4):
            assert torch.equal(result[i], matrix[i] + row[0])

    def test_single_row_right_is_replicated(self) -> None:
        row = torch.tensor([[1.0, 2.0, 3.0]])
        matrix = torch.arange(12, dtype=torch.float32).reshape(4, 3)
        assert torch.equal(broadcast_add(matrix, row), broadcast_add(row, matrix))

    def test_inputs_not_mutated(self) -> None:
        a = torch.ones(3, 2)
        b = torch.ones(3, 2)
        result = broadcast_add(a, b)
        assert torch.equal(a, torch.ones(3, 2))
        assert torch.equal(b, torch.ones(3, 2))
        assert result.data_ptr() not in (a.data_ptr(), b.data_ptr())

    def test_hidden_mismatch_raises(self) -> None:
        with pytest.raises(IncompatibleShapesError, match="Hidden dimension"):
            broadcast_add(torch.zeros(2, 3), torch.zeros(2, 4))

    def test_row_mismatch_without_single_row_raises(self) -> None:
        with pytest.raises(IncompatibleShapesError):
            broadcast_add(torch.zeros(2, 3), torch.zeros(5, 3))

    def test_non_matrix_raises(self) -> None:
        with pytest.raises(IncompatibleShapesError):
            broadcast_add(torch.zeros(3), torch.zeros(3))

    def test_dtype_mismatch_raises(self) -> None:
        with pytest.raises(IncompatibleShapesError):
            broadcast_add(torch.zeros(2, 3), torch.zeros(2, 3, dtype=torch.float64))
