# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
bertembed model package.

The embedding stage is assembled from small pieces:
  - TensorBuffer: per-call scratch with explicit release
  - EmbeddingTable: immutable lookup with a padding-index policy
  - broadcast_add: row-broadcasting matrix sum
  - LayerNormGELU: per-position LayerNorm with a fused tanh GELU
  - DropoutUnit: inverted dropout over a pluggable masking strategy
  - BertEmbedding: wires the above into the inference/training pipeline
"""

from bertembed.model.bert_embedding import BertEmbedding, Phase
from bertembed.model.config import BertEmbeddingConfig, bert_config_from_dict
from bertembed.model.factory import build_embedding

__all__ = [
    "BertEmbedding",
    "BertEmbeddingConfig",
    "Phase",
    "bert_config_from_dict",
    "build_embedding",
]
