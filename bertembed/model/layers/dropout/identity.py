# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Pass-through strategy: the training phase runs without masking or rescaling."""

import torch

from bertembed.model.interfaces import DropoutStrategyBase
from bertembed.model.registry import register_dropout


class IdentityDropout(DropoutStrategyBase):
    """Returns a copy of the input regardless of rate and seed."""

    def apply(self, x: torch.Tensor, rate: float, seed: int) -> torch.Tensor:
        return x.clone()


register_dropout("identity", IdentityDropout)
