# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
LayerNorm with a fused tanh-approximated GELU.

For each position independently, over the hidden axis:

    norm = gamma * (x - mean) / sqrt(var + eps) + beta
    y    = 0.5 * norm * (1 + tanh(alpha * (norm + beta_c * norm^3)))

The activation after the normalization is not part of the usual BERT
embedding block. It is kept here because the reference outputs include it.
"""

import torch
import torch.nn as nn

from bertembed.model.config import GELU_ALPHA, GELU_BETA
from bertembed.model.exceptions import ShapeMismatchError


def gelu_tanh(x: torch.Tensor, alpha: float = GELU_ALPHA, beta: float = GELU_BETA) -> torch.Tensor:
    """Tanh approximation of GELU with explicit constants."""
    return 0.5 * x * (1.0 + torch.tanh(alpha * (x + beta * x * x * x)))


class LayerNormGELU(nn.Module):
    """
    Per-position layer normalization followed by GELU.

    Args:
        gamma: Scale vector of length hidden_size. Copied.
        beta: Shift vector of length hidden_size. Copied.
        eps: Added to the variance before the square root.
        alpha: GELU tanh scale.
        beta_cubic: GELU cubic coefficient.
    """

    def __init__(
        self,
        gamma: torch.Tensor,
        beta: torch.Tensor,
        eps: float = 1e-12,
        alpha: float = GELU_ALPHA,
        beta_cubic: float = GELU_BETA,
    ) -> None:
        super().__init__()
        if gamma.dim() != 1 or beta.dim() != 1 or gamma.shape != beta.shape:
            raise ShapeMismatchError(
                f"gamma and beta must be vectors of equal length, got "
                f"{tuple(gamma.shape)} and {tuple(beta.shape)}"
            )
        self.hidden_size = gamma.shape[0]
        self.eps = eps
        self.alpha = alpha
        self.beta_cubic = beta_cubic
        self.register_buffer("gamma", gamma.detach().to(dtype=torch.float32, copy=True))
        self.register_buffer("beta", beta.detach().to(dtype=torch.float32, copy=True))

    def normalize(self, x: torch.Tensor) -> torch.Tensor:
        """
        LayerNorm without the activation.

        Args:
            x: Tensor of shape (..., hidden_size).

        Returns:
            Tensor of the same shape. A constant row maps exactly to beta.
        """
        if x.shape[-1] != self.hidden_size:
            raise ShapeMismatchError(
                f"Expected last dimension {self.hidden_size}, got shape {tuple(x.shape)}"
            )
        mean = x.mean(dim=-1, keepdim=True)
        centered = x - mean
        var = (centered * centered).mean(dim=-1, keepdim=True)
        return self.gamma * centered / torch.sqrt(var + self.eps) + self.beta

    def forward(self, x: torch.Tensor) -> torch.Tensor:
        return gelu_tanh(self.normalize(x), self.alpha, self.beta_cubic)

    def extra_repr(self) -> str:
        return f"{self.hidden_size}, eps={self.eps}"
