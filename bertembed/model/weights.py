# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Resolution of embedding tensors from a caller-supplied weight map.

The weight map is whatever the model loader produced: parameter name to
tensor, e.g. the dict read out of a BERT ``model.safetensors``. This module
only borrows it. It finds the five tensors the embedding stage needs,
checks their sizes against the config, and hands back shaped views; the
modules that keep them make their own copies.

Keys (under ``config.weight_prefix``, default ``bert.embeddings``):
  word_embeddings.weight
  position_embeddings.weight
  token_type_embeddings.weight
  LayerNorm.gamma  or  LayerNorm.weight
  LayerNorm.beta   or  LayerNorm.bias
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import torch

from bertembed.model.config import BertEmbeddingConfig
from bertembed.model.exceptions import MissingWeightError, ShapeMismatchError

WeightMap = Mapping[str, Any]

WORD_EMBEDDINGS = ("word_embeddings.weight",)
POSITION_EMBEDDINGS = ("position_embeddings.weight",)
TOKEN_TYPE_EMBEDDINGS = ("token_type_embeddings.weight",)
LAYER_NORM_GAMMA = ("LayerNorm.gamma", "LayerNorm.weight")
LAYER_NORM_BETA = ("LayerNorm.beta", "LayerNorm.bias")


@dataclass(frozen=True)
class EmbeddingWeights:
    """The five tensors of the embedding stage, validated and shaped."""

    word: torch.Tensor
    position: torch.Tensor
    token_type: torch.Tensor
    gamma: torch.Tensor
    beta: torch.Tensor


def _find(weights: WeightMap, prefix: str, names: tuple[str, ...]) -> tuple[str, Any]:
    """Return the first ``prefix.name`` present in the map, trying aliases in order."""
    keys = [f"{prefix}.{name}" if prefix else name for name in names]
    for key in keys:
        if key in weights:
            return key, weights[key]
    raise MissingWeightError(f"Missing weight: none of {keys} in weight map")


def _as_float_tensor(value: Any) -> torch.Tensor:
    if isinstance(value, torch.Tensor):
        return value.detach().to(torch.float32)
    return torch.as_tensor(value, dtype=torch.float32)


def _as_matrix(key: str, value: Any, rows: int, cols: int) -> torch.Tensor:
    """
    Shape a table as (rows, cols).

    Flat arrays are accepted when the element count matches. A 2-D tensor
    must already be (rows, cols); a transposed table is rejected rather than
    silently reinterpreted.
    """
    tensor = _as_float_tensor(value)
    if tensor.dim() == 1 and tensor.numel() == rows * cols:
        return tensor.reshape(rows, cols)
    if tensor.dim() == 2 and tuple(tensor.shape) == (rows, cols):
        return tensor
    raise ShapeMismatchError(
        f"{key} has shape {tuple(tensor.shape)}, expected ({rows}, {cols}) "
        f"or {rows * cols} flat elements"
    )


def _as_vector(key: str, value: Any, length: int) -> torch.Tensor:
    tensor = _as_float_tensor(value)
    if tensor.numel() != length or tensor.dim() > 1:
        raise ShapeMismatchError(
            f"{key} has shape {tuple(tensor.shape)}, expected ({length},)"
        )
    return tensor.reshape(length)


def resolve_embedding_weights(
    weights: WeightMap,
    config: BertEmbeddingConfig,
) -> EmbeddingWeights:
    """
    Pull and validate the embedding tensors out of a weight map.

    Args:
        weights: Parameter name to tensor (or nested float list).
        config: Supplies table sizes, hidden size and key prefix.

    Returns:
        EmbeddingWeights with float32 tensors of the configured shapes.

    Raises:
        MissingWeightError: If any of the five tensors is absent.
        ShapeMismatchError: If any tensor's size disagrees with the config.
    """
    prefix = config.weight_prefix
    hidden = config.hidden_size

    word_key, word = _find(weights, prefix, WORD_EMBEDDINGS)
    position_key, position = _find(weights, prefix, POSITION_EMBEDDINGS)
    type_key, token_type = _find(weights, prefix, TOKEN_TYPE_EMBEDDINGS)
    gamma_key, gamma = _find(weights, prefix, LAYER_NORM_GAMMA)
    beta_key, beta = _find(weights, prefix, LAYER_NORM_BETA)

    return EmbeddingWeights(
        word=_as_matrix(word_key, word, config.vocab_size, hidden),
        position=_as_matrix(position_key, position, config.max_position_embeddings, hidden),
        token_type=_as_matrix(type_key, token_type, config.type_vocab_size, hidden),
        gamma=_as_vector(gamma_key, gamma, hidden),
        beta=_as_vector(beta_key, beta, hidden),
    )
