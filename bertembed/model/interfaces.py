# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Abstract base class for pluggable dropout masking strategies.

DropoutUnit owns the rate and the seed; a strategy decides how the mask is
drawn and applied. Contract:

- ``apply(x, rate, seed)`` returns a new tensor shaped like ``x``
- the same ``(x, rate, seed)`` always gives the same output
- ``x`` is never modified
"""

from abc import ABC, abstractmethod

import torch


class DropoutStrategyBase(ABC):
    """Base class for all dropout masking strategies."""

    @abstractmethod
    def apply(self, x: torch.Tensor, rate: float, seed: int) -> torch.Tensor:
        """
        Mask and rescale ``x``.

        Args:
            x: Input tensor of any shape.
            rate: Drop probability in (0, 1).
            seed: Seed for the mask stream.

        Returns:
            New tensor of the same shape.
        """
        ...
