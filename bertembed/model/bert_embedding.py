# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
The BERT input-embedding stage.

Pipeline for one sequence of L <= max_position_embeddings token ids:

  1. right-pad input ids to max_position_embeddings with pad_token_id
  2. position ids default to 0..L-1, right-padded the same way
  3. token type ids default to all zeros (supplied ones are padded with 0)
  4. word / position / token type lookups
  5. sum via broadcast_add
  6. Phase.INFERENCE: return the sum
     Phase.TRAINING:  return dropout(layernorm_gelu(sum))

The output is ALWAYS (max_position_embeddings, hidden_size). It is never
cut back to L; rows L.. hold the embeddings of the padding ids. Callers that
want only the real positions slice ``out[:L]`` themselves.

All scratch (padded id vectors, lookup outputs) is allocated per call and
released before returning. The tables are read-only, so one instance can be
called from several threads at once.
"""

import logging
from collections.abc import Sequence
from contextlib import ExitStack
from enum import Enum
from typing import Optional, Union

import torch
import torch.nn as nn

from bertembed.model.broadcast import broadcast_add
from bertembed.model.config import BertEmbeddingConfig
from bertembed.model.dropout import DropoutUnit
from bertembed.model.embedding import NO_PADDING, EmbeddingTable, as_id_tensor
from bertembed.model.exceptions import ShapeMismatchError
from bertembed.model.norm import LayerNormGELU
from bertembed.model.tensor import TensorBuffer
from bertembed.model.weights import WeightMap, resolve_embedding_weights

logger = logging.getLogger(__name__)

Ids = Union[torch.Tensor, Sequence[int]]


class Phase(str, Enum):
    """Per-call evaluation mode. Never stored on the module."""

    INFERENCE = "inference"
    TRAINING = "training"


class BertEmbedding(nn.Module):
    """
    Word + position + token type embeddings with optional LayerNorm/GELU and dropout.

    Args:
        config: Sizes, padding id, epsilon, dropout settings and weight prefix.
        weights: Parameter name to tensor map. Borrowed; the needed tensors
            are copied into this module's buffers.

    Raises:
        MissingWeightError: A required key is absent.
        ShapeMismatchError: A tensor disagrees with the config's sizes, or pad_token_id
            is not a valid position.
    """

    def __init__(self, config: BertEmbeddingConfig, weights: WeightMap) -> None:
        super().__init__()
        self.config = config
        if not 0 <= config.pad_token_id < config.max_position_embeddings:
            # Position ids are right-padded with pad_token_id.
            raise ShapeMismatchError(
                f"pad_token_id {config.pad_token_id} must lie in "
                f"[0, {config.max_position_embeddings}) to pad position ids"
            )
        resolved = resolve_embedding_weights(weights, config)

        max_norm = config.max_norm
        self.word_embeddings = EmbeddingTable(
            resolved.word,
            padding_idx=config.pad_token_id,
            max_norm=max_norm,
            norm_type=config.norm_type,
            name="word_embeddings",
        )
        self.position_embeddings = EmbeddingTable(
            resolved.position,
            padding_idx=NO_PADDING,
            max_norm=max_norm,
            norm_type=config.norm_type,
            name="position_embeddings",
        )
        self.token_type_embeddings = EmbeddingTable(
            resolved.token_type,
            padding_idx=NO_PADDING,
            max_norm=max_norm,
            norm_type=config.norm_type,
            name="token_type_embeddings",
        )
        self.layer_norm = LayerNormGELU(
            resolved.gamma,
            resolved.beta,
            eps=config.norm_eps,
            alpha=config.gelu_alpha,
            beta_cubic=config.gelu_beta,
        )
        self.dropout = DropoutUnit(
            config.dropout,
            strategy=config.dropout_strategy,
            seed=config.dropout_seed,
        )

    @property
    def output_shape(self) -> tuple[int, int]:
        return self.config.output_shape

    def _padded(self, ids: torch.Tensor, fill: int, name: str) -> TensorBuffer:
        """Copy ``ids`` into a fresh max_position_embeddings-long buffer, right-padded with ``fill``."""
        length = self.config.max_position_embeddings
        if ids.numel() > length:
            raise ShapeMismatchError(
                f"{name} has {ids.numel()} entries, more than max_position_embeddings={length}"
            )
        buffer = TensorBuffer.allocate((length,), dtype=torch.int64)
        buffer.tensor.fill_(fill)
        buffer.tensor[: ids.numel()] = ids
        return buffer

    def forward(
        self,
        input_ids: Ids,
        token_type_ids: Optional[Ids] = None,
        position_ids: Optional[Ids] = None,
        phase: Union[Phase, str] = Phase.INFERENCE,
        seed: Optional[int] = None,
    ) -> torch.Tensor:
        """
        Embed one token sequence.

        Args:
            input_ids: L word ids, L <= max_position_embeddings.
            token_type_ids: Segment ids; defaults to zeros.
            position_ids: Position ids; defaults to 0..L-1.
            phase: INFERENCE returns the raw sum; TRAINING adds
                LayerNorm+GELU and dropout.
            seed: Dropout seed for this call (TRAINING only); defaults to
                config.dropout_seed.

        Returns:
            Float32 tensor of shape (max_position_embeddings, hidden_size),
            not truncated to L.

        Raises:
            ShapeMismatchError: An id vector is longer than max_position_embeddings.
            InvalidIndexError: An id is outside its table.
        """
        phase = Phase(phase)
        pad = self.config.pad_token_id

        word_ids = as_id_tensor(input_ids, "input_ids")
        length = word_ids.numel()
        if position_ids is None:
            positions = torch.arange(length, dtype=torch.int64)
        else:
            positions = as_id_tensor(position_ids, "position_ids")
        if token_type_ids is None:
            token_types = torch.zeros(0, dtype=torch.int64)
        else:
            token_types = as_id_tensor(token_type_ids, "token_type_ids")

        logger.debug(
            "embedding_call",
            extra={"phase": phase.value, "input_length": length},
        )

        with ExitStack() as scratch:
            word_input = scratch.enter_context(self._padded(word_ids, pad, "input_ids"))
            position_input = scratch.enter_context(self._padded(positions, pad, "position_ids"))
            type_input = scratch.enter_context(self._padded(token_types, 0, "token_type_ids"))

            word = scratch.enter_context(
                TensorBuffer.wrap(self.word_embeddings(word_input.tensor))
            )
            position = scratch.enter_context(
                TensorBuffer.wrap(self.position_embeddings(position_input.tensor))
            )
            token_type = scratch.enter_context(
                TensorBuffer.wrap(self.token_type_embeddings(type_input.tensor))
            )

            summed = broadcast_add(broadcast_add(word.tensor, position.tensor), token_type.tensor)

        if phase is Phase.INFERENCE:
            return summed

        return self.dropout(self.layer_norm(summed), seed=seed)

    def embed(
        self,
        input_ids: Ids,
        token_type_ids: Optional[Ids] = None,
        position_ids: Optional[Ids] = None,
        phase: Union[Phase, str] = Phase.INFERENCE,
        seed: Optional[int] = None,
    ) -> torch.Tensor:
        """Same as calling the module."""
        return self(
            input_ids,
            token_type_ids=token_type_ids,
            position_ids=position_ids,
            phase=phase,
            seed=seed,
        )
