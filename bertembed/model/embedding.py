# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Immutable lookup table with a padding-index policy.

Three instances make up the embedding stage: words (padding index =
pad_token_id), positions and token types (padding index -1, i.e. no id is
suppressed). The dictionary is stored as a non-trainable buffer of shape
(table_size, hidden_size) and never written after construction.
"""

import logging
from collections.abc import Sequence
from typing import Optional, Union

import torch
import torch.nn as nn

from bertembed.model.exceptions import InvalidIndexError, ShapeMismatchError

logger = logging.getLogger(__name__)

NO_PADDING = -1

# Same epsilon torch.embedding_renorm_ uses when rescaling over-norm rows.
_RENORM_EPS = 1e-7


def as_id_tensor(ids: Union[torch.Tensor, Sequence[int]], name: str = "ids") -> torch.Tensor:
    """
    Coerce a sequence of ids to a 1-D int64 tensor.

    Raises:
        TypeError: If the ids are floating point or complex.
        ShapeMismatchError: If the ids aren't a vector.
    """
    if isinstance(ids, torch.Tensor):
        tensor = ids
    else:
        values = list(ids)
        # An empty list would otherwise come back as float32.
        tensor = torch.as_tensor(values) if values else torch.empty(0, dtype=torch.int64)
    if tensor.is_floating_point() or tensor.is_complex():
        raise TypeError(f"{name} must be integers, got {tensor.dtype}")
    tensor = tensor.to(torch.int64)

    if tensor.dim() != 1:
        raise ShapeMismatchError(f"{name} must be 1-D, got shape {tuple(tensor.shape)}")
    return tensor


class EmbeddingTable(nn.Module):
    """
    Lookup table mapping ids to dictionary rows.

    Args:
        dictionary: Float tensor of shape (table_size, hidden_size). Copied.
        padding_idx: Id whose output row is forced to zero, or -1 for none.
        max_norm: If positive, output rows with a larger norm are rescaled
            to this norm. None or 0 disables clamping.
        norm_type: p of the p-norm used with max_norm.
        name: Label used in errors and log events.
    """

    def __init__(
        self,
        dictionary: torch.Tensor,
        padding_idx: int = NO_PADDING,
        max_norm: Optional[float] = None,
        norm_type: float = 2.0,
        name: str = "embedding",
    ) -> None:
        super().__init__()
        if dictionary.dim() != 2:
            raise ShapeMismatchError(
                f"{name} dictionary must be (table_size, hidden_size), got {tuple(dictionary.shape)}"
            )
        num_embeddings, embedding_dim = dictionary.shape
        if padding_idx < NO_PADDING or padding_idx >= num_embeddings:
            raise ValueError(
                f"{name} padding_idx {padding_idx} must be -1 or in [0, {num_embeddings})"
            )

        self.name = name
        self.num_embeddings = num_embeddings
        self.embedding_dim = embedding_dim
        self.padding_idx = padding_idx
        self.max_norm = max_norm if max_norm else None
        self.norm_type = norm_type
        self.register_buffer(
            "weight",
            dictionary.detach().to(dtype=torch.float32, copy=True).contiguous(),
        )

        logger.debug(
            "table_built",
            extra={
                "table": name,
                "num_embeddings": num_embeddings,
                "embedding_dim": embedding_dim,
                "padding_idx": padding_idx,
            },
        )

    def _validate(self, ids: torch.Tensor) -> None:
        valid = (ids >= 0) & (ids < self.num_embeddings)
        if self.padding_idx != NO_PADDING:
            valid |= ids == self.padding_idx
        if not bool(valid.all()):
            offending = ids[~valid][:5].tolist()
            raise InvalidIndexError(
                f"{self.name} ids out of range [0, {self.num_embeddings}): {offending}"
            )

    def _clamp_norm(self, rows: torch.Tensor) -> torch.Tensor:
        norms = torch.linalg.vector_norm(rows, ord=self.norm_type, dim=-1, keepdim=True)
        scale = torch.where(
            norms > self.max_norm,
            self.max_norm / (norms + _RENORM_EPS),
            torch.ones_like(norms),
        )
        return rows * scale

    def lookup(self, ids: Union[torch.Tensor, Sequence[int]]) -> torch.Tensor:
        """
        Gather one dictionary row per id.

        Args:
            ids: Vector of N ids.

        Returns:
            Tensor of shape (N, hidden_size). Row i is the dictionary row
            ``ids[i]``, or zeros when ``ids[i]`` is the padding index.

        Raises:
            InvalidIndexError: If an id is outside the table and isn't the
                padding index.
        """
        ids = as_id_tensor(ids, name=f"{self.name} ids").to(self.weight.device)
        self._validate(ids)

        rows = self.weight.index_select(0, ids)
        if self.padding_idx != NO_PADDING:
            rows = rows.masked_fill((ids == self.padding_idx).unsqueeze(-1), 0.0)
        if self.max_norm is not None:
            rows = self._clamp_norm(rows)
        return rows

    def forward(self, ids: Union[torch.Tensor, Sequence[int]]) -> torch.Tensor:
        return self.lookup(ids)

    def extra_repr(self) -> str:
        return (
            f"{self.num_embeddings}, {self.embedding_dim}, padding_idx={self.padding_idx}, "
            f"max_norm={self.max_norm}"
        )
