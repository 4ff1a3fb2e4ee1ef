# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe configuration schemas for bertembed.

Each config section is a frozen pydantic model:
  - frozen=True: immutability after construction
  - extra="forbid": unknown fields cause immediate failure
  - validate_default=True: even defaults get type-checked

The defaults of EmbeddingSchema describe google/bert_uncased_L-2_H-128_A-2,
the smallest published BERT checkpoint.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class GlobalConfig(BaseModel):
    """Cross-cutting settings: schema version, project identity and logging."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(
        description="Schema version for compatibility tracking, e.g. '1.0.0'"
    )
    project_name: str = Field(
        default="bertembed", description="Human-readable project identifier"
    )
    log_level: str = Field(
        default="INFO",
        description="One of DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path for file-based log output",
    )


class EmbeddingSchema(BaseModel):
    """
    Hyperparameters of the embedding stage. Maps to the ``embedding:`` section.

    Field names follow HuggingFace's BERT config.json where one exists, so a
    section can be written by copying values straight out of a checkpoint.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    hidden_size: int = Field(default=128, ge=1, description="Width of every embedding vector")
    vocab_size: int = Field(default=30522, ge=1, description="Rows in the word table")
    max_position_embeddings: int = Field(
        default=512,
        ge=1,
        description="Rows in the position table; also the fixed output length",
    )
    type_vocab_size: int = Field(default=2, ge=1, description="Rows in the token type table")
    pad_token_id: int = Field(
        default=0,
        ge=0,
        description="Padding id for word lookups and for right-padding id vectors",
    )
    layer_norm_eps: float = Field(default=1e-12, gt=0.0, description="LayerNorm epsilon")
    hidden_dropout_prob: float = Field(
        default=0.1,
        ge=0.0,
        le=1.0,
        description="Dropout rate applied in the training phase",
    )
    gelu_alpha: float = Field(
        default=0.7978845608028654,
        description="Scale inside tanh of the fused GELU, sqrt(2/pi)",
    )
    gelu_beta: float = Field(
        default=0.044715,
        description="Cubic coefficient of the fused GELU",
    )
    dropout_strategy: str = Field(
        default="bernoulli",
        description="Registered dropout masking strategy",
    )
    dropout_seed: int = Field(
        default=0,
        ge=0,
        description="Seed for the dropout mask stream when the caller passes none",
    )
    max_norm: Optional[float] = Field(
        default=None,
        ge=0.0,
        description="Clamp lookup rows to this norm; None or 0 disables clamping",
    )
    norm_type: float = Field(default=2.0, gt=0.0, description="p of the p-norm used by max_norm")
    weight_prefix: str = Field(
        default="bert.embeddings",
        description="Key prefix of the embedding tensors inside the weight map",
    )

    @model_validator(mode="after")
    def _pad_token_in_range(self) -> "EmbeddingSchema":
        if self.pad_token_id >= self.vocab_size:
            raise ValueError(
                f"pad_token_id {self.pad_token_id} must be smaller than vocab_size {self.vocab_size}"
            )
        if self.pad_token_id >= self.max_position_embeddings:
            raise ValueError(
                f"pad_token_id {self.pad_token_id} must be smaller than "
                f"max_position_embeddings {self.max_position_embeddings}; "
                "it also pads position ids"
            )
        return self


class BertEmbedConfig(BaseModel):
    """
    Top-level config container.

    A file must carry ``global:``; ``embedding:`` is optional and, when absent,
    callers fall back to EmbeddingSchema defaults.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    global_config: GlobalConfig = Field(alias="global")
    embedding: Optional[EmbeddingSchema] = Field(default=None)
