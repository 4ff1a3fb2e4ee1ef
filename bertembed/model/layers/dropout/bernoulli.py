# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Seeded Bernoulli inverted dropout.

A CPU ``torch.Generator`` seeded with the call's seed draws one uniform
[0, 1) float32 per element. Elements whose draw is below ``rate`` are
zeroed; the rest are divided by ``1 - rate``. The mask is generated on CPU
and then moved, so a given seed produces the same mask on every device.
"""

import torch

from bertembed.model.interfaces import DropoutStrategyBase
from bertembed.model.registry import register_dropout


class BernoulliDropout(DropoutStrategyBase):
    """Inverted dropout with a reproducible Bernoulli keep-mask."""

    def keep_mask(
        self,
        shape: tuple[int, ...],
        rate: float,
        seed: int,
        device: torch.device,
    ) -> torch.Tensor:
        """Boolean mask, True where the element survives."""
        generator = torch.Generator(device="cpu")
        generator.manual_seed(seed)
        draws = torch.rand(shape, generator=generator, dtype=torch.float32)
        return (draws >= rate).to(device)

    def apply(self, x: torch.Tensor, rate: float, seed: int) -> torch.Tensor:
        keep = self.keep_mask(tuple(x.shape), rate, seed, x.device)
        return x.masked_fill(~keep, 0.0) / (1.0 - rate)


register_dropout("bernoulli", BernoulliDropout)
