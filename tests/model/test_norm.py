# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for LayerNormGELU.

Validates the normalization math against a hand-written reference, the
constant-row guarantee, the fused activation, and weight validation.
"""

import math

import pytest
import torch

from bertembed.model.config import GELU_ALPHA, GELU_BETA
from bertembed.model.exceptions import ShapeMismatchError
from bertembed.model.norm import LayerNormGELU, gelu_tanh


def _params(dim: int = 16) -> tuple[torch.Tensor, torch.Tensor]:
    generator = torch.Generator().manual_seed(3)
    gamma = 1.0 + 0.1 * torch.randn(dim, generator=generator)
    beta = 0.1 * torch.randn(dim, generator=generator)
    return gamma, beta


class TestNormalize:
    def test_output_shape(self) -> None:
        gamma, beta = _params()
        norm = LayerNormGELU(gamma, beta)
        x = torch.randn(32, 16)
        assert norm(x).shape == (32, 16)

    def test_matches_torch_layer_norm(self) -> None:
        gamma, beta = _params()
        norm = LayerNormGELU(gamma, beta, eps=1e-12)
        x = torch.randn(8, 16, generator=torch.Generator().manual_seed(5))
        expected = torch.nn.functional.layer_norm(x, (16,), gamma, beta, eps=1e-12)
        assert torch.allclose(norm.normalize(x), expected, atol=1e-5)

    def test_rows_are_independent(self) -> None:
        gamma, beta = _params()
        norm = LayerNormGELU(gamma, beta)
        x = torch.randn(4, 16, generator=torch.Generator().manual_seed(9))
        single = norm(x[2:3])
        assert torch.allclose(norm(x)[2], single[0])

    def test_constant_row_normalizes_to_beta(self) -> None:
        """Zero variance: (x - mean) is exactly 0, so the result is exactly beta."""
        gamma, beta = _params()
        norm = LayerNormGELU(gamma, beta, eps=1e-12)
        x = torch.full((3, 16), 2.0)
        normalized = norm.normalize(x)
        for row in normalized:
            assert torch.equal(row, beta)

    def test_constant_row_output_is_gelu_of_beta(self) -> None:
        gamma, beta = _params()
        norm = LayerNormGELU(gamma, beta)
        output = norm(torch.full((1, 16), -0.5))
        assert torch.allclose(output[0], gelu_tanh(beta))
        assert not torch.isnan(output).any()

    def test_wrong_hidden_size_raises(self) -> None:
        gamma, beta = _params(16)
        norm = LayerNormGELU(gamma, beta)
        with pytest.raises(ShapeMismatchError):
            norm(torch.zeros(2, 8))


class TestGeluTanh:
    def test_reference_values(self) -> None:
        for value in (-3.0, -1.0, 0.0, 0.5, 2.0):
            expected = 0.5 * value * (
                1.0 + math.tanh(GELU_ALPHA * (value + GELU_BETA * value**3))
            )
            result = gelu_tanh(torch.tensor([value])).item()
            assert result == pytest.approx(expected, abs=1e-6)

    def test_matches_torch_tanh_gelu(self) -> None:
        x = torch.linspace(-4.0, 4.0, 101)
        expected = torch.nn.functional.gelu(x, approximate="tanh")
        assert torch.allclose(gelu_tanh(x), expected, atol=1e-6)

    def test_zero_is_fixed_point(self) -> None:
        assert gelu_tanh(torch.zeros(4)).abs().max().item() == 0.0


class TestWeights:
    def test_mismatched_gamma_beta_rejected(self) -> None:
        with pytest.raises(ShapeMismatchError):
            LayerNormGELU(torch.ones(16), torch.zeros(8))

    def test_matrix_gamma_rejected(self) -> None:
        with pytest.raises(ShapeMismatchError):
            LayerNormGELU(torch.ones(4, 4), torch.zeros(4, 4))

    def test_weights_are_copied(self) -> None:
        gamma, beta = _params()
        norm = LayerNormGELU(gamma, beta)
        beta.fill_(99.0)
        assert not torch.equal(norm.beta, beta)
