# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for DropoutUnit and the built-in masking strategies.

Validates seed reproducibility, inverted scaling, the rate edge cases, and
the pass-through strategy.
"""

import pytest
import torch

from bertembed.model.dropout import DropoutUnit
from bertembed.model.layers.dropout.bernoulli import BernoulliDropout


def _input() -> torch.Tensor:
    return torch.randn(64, 16, generator=torch.Generator().manual_seed(11)) + 5.0


class TestBernoulli:
    def test_same_seed_same_output(self) -> None:
        unit = DropoutUnit(0.1, seed=0)
        x = _input()
        assert torch.equal(unit(x), unit(x))

    def test_explicit_seed_overrides_default(self) -> None:
        unit = DropoutUnit(0.5, seed=0)
        x = _input()
        assert torch.equal(unit(x, seed=0), unit(x))
        assert not torch.equal(unit(x, seed=1), unit(x, seed=0))

    def test_survivors_are_rescaled(self) -> None:
        rate = 0.25
        unit = DropoutUnit(rate, seed=3)
        x = _input()
        y = unit(x)
        keep = BernoulliDropout().keep_mask(tuple(x.shape), rate, 3, x.device)
        assert torch.equal(y[~keep], torch.zeros_like(y[~keep]))
        assert torch.allclose(y[keep], x[keep] / (1.0 - rate))

    def test_drop_fraction_near_rate(self) -> None:
        unit = DropoutUnit(0.1, seed=42)
        y = unit(torch.ones(512, 128))
        dropped = (y == 0).float().mean().item()
        assert 0.08 < dropped < 0.12

    def test_input_not_modified(self) -> None:
        unit = DropoutUnit(0.5)
        x = _input()
        original = x.clone()
        unit(x)
        assert torch.equal(x, original)

    def test_ignores_module_eval_mode(self) -> None:
        unit = DropoutUnit(0.5)
        x = _input()
        trained = unit(x)
        unit.eval()
        assert torch.equal(unit(x), trained)


class TestRateEdges:
    def test_rate_zero_is_identity(self) -> None:
        unit = DropoutUnit(0.0)
        x = _input()
        y = unit(x)
        assert torch.equal(y, x)
        assert y.data_ptr() != x.data_ptr()

    def test_rate_one_zeros_everything(self) -> None:
        unit = DropoutUnit(1.0)
        assert torch.equal(unit(_input()), torch.zeros(64, 16))

    @pytest.mark.parametrize("rate", [-0.1, 1.5])
    def test_rate_out_of_range_rejected(self, rate: float) -> None:
        with pytest.raises(ValueError, match="Dropout rate"):
            DropoutUnit(rate)


class TestIdentityStrategy:
    def test_identity_never_masks(self) -> None:
        unit = DropoutUnit(0.5, strategy="identity")
        x = _input()
        assert torch.equal(unit(x), x)

    def test_unknown_strategy_rejected(self) -> None:
        with pytest.raises(KeyError, match="Unknown dropout strategy"):
            DropoutUnit(0.1, strategy="does_not_exist")
