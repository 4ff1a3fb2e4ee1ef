# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Dropout unit for the training phase.

Holds the rate, the default seed and the masking strategy resolved from the
registry. Unlike ``nn.Dropout`` it ignores the module's train/eval flag:
BertEmbedding only calls it in the training phase, and every call with the
same seed produces the same mask.
"""

from typing import Optional

import torch
import torch.nn as nn

from bertembed.model.registry import get_dropout


class DropoutUnit(nn.Module):
    """
    Seeded inverted dropout.

    Args:
        rate: Drop probability in [0, 1].
        strategy: Registered strategy name.
        seed: Seed used when ``forward`` is called without one.

    Raises:
        ValueError: If ``rate`` is outside [0, 1].
        KeyError: If ``strategy`` isn't registered.
    """

    def __init__(self, rate: float, strategy: str = "bernoulli", seed: int = 0) -> None:
        super().__init__()
        if not 0.0 <= rate <= 1.0:
            raise ValueError(f"Dropout rate must be in [0, 1], got {rate}")
        self.rate = rate
        self.seed = seed
        self.strategy_name = strategy
        self.strategy = get_dropout(strategy)()

    def forward(self, x: torch.Tensor, seed: Optional[int] = None) -> torch.Tensor:
        """
        Apply dropout.

        Args:
            x: Input tensor of any shape. Not modified.
            seed: Mask seed for this call; defaults to the unit's seed.

        Returns:
            New tensor of the same shape.
        """
        if self.rate == 0.0:
            return x.clone()
        if self.rate == 1.0:
            return torch.zeros_like(x)
        return self.strategy.apply(x, self.rate, self.seed if seed is None else seed)

    def extra_repr(self) -> str:
        return f"rate={self.rate}, strategy={self.strategy_name}, seed={self.seed}"
