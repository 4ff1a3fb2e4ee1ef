# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Model configuration for the embedding stage.

This is a plain data object (not Pydantic) because it's held by torch
modules and needs to be lightweight. Validation of user-facing files happens
in config/schema.py; this just carries the values. Unlike the schema it is
built once and then refuses attribute assignment.
"""

from collections.abc import Mapping
from typing import Any, Optional

GELU_ALPHA = 0.7978845608028654
GELU_BETA = 0.044715


class BertEmbeddingConfig:
    """
    Configuration for BertEmbedding.

    Args:
        vocab_size: Rows in the word table.
        hidden_size: Width of every embedding vector.
        max_position_embeddings: Rows in the position table and the fixed
            number of output positions.
        type_vocab_size: Rows in the token type table.
        pad_token_id: Word id whose embedding is zeroed; also the fill value
            for right-padding word and position ids.
        norm_eps: LayerNorm epsilon.
        dropout: Dropout rate for the training phase.
        gelu_alpha: Scale inside tanh of the fused GELU.
        gelu_beta: Cubic coefficient of the fused GELU.
        dropout_strategy: Registered masking strategy name.
        dropout_seed: Default seed for the dropout mask stream.
        max_norm: Clamp lookup rows to this norm. None or 0 disables it.
        norm_type: p of the p-norm used with max_norm.
        weight_prefix: Key prefix of the embedding tensors in the weight map.
    """

    __slots__ = (
        "vocab_size",
        "hidden_size",
        "max_position_embeddings",
        "type_vocab_size",
        "pad_token_id",
        "norm_eps",
        "dropout",
        "gelu_alpha",
        "gelu_beta",
        "dropout_strategy",
        "dropout_seed",
        "max_norm",
        "norm_type",
        "weight_prefix",
        "_frozen",
    )

    def __init__(
        self,
        vocab_size: int = 30522,
        hidden_size: int = 128,
        max_position_embeddings: int = 512,
        type_vocab_size: int = 2,
        pad_token_id: int = 0,
        norm_eps: float = 1e-12,
        dropout: float = 0.1,
        gelu_alpha: float = GELU_ALPHA,
        gelu_beta: float = GELU_BETA,
        dropout_strategy: str = "bernoulli",
        dropout_seed: int = 0,
        max_norm: Optional[float] = None,
        norm_type: float = 2.0,
        weight_prefix: str = "bert.embeddings",
    ) -> None:
        self.vocab_size = vocab_size
        self.hidden_size = hidden_size
        self.max_position_embeddings = max_position_embeddings
        self.type_vocab_size = type_vocab_size
        self.pad_token_id = pad_token_id
        self.norm_eps = norm_eps
        self.dropout = dropout
        self.gelu_alpha = gelu_alpha
        self.gelu_beta = gelu_beta
        self.dropout_strategy = dropout_strategy
        self.dropout_seed = dropout_seed
        self.max_norm = max_norm
        self.norm_type = norm_type
        self.weight_prefix = weight_prefix
        self._frozen = True

    def __setattr__(self, name: str, value: object) -> None:
        if getattr(self, "_frozen", False):
            raise AttributeError(f"BertEmbeddingConfig is immutable; cannot set '{name}'")
        object.__setattr__(self, name, value)

    def __repr__(self) -> str:
        fields = ", ".join(
            f"{name}={getattr(self, name)!r}" for name in self.__slots__ if name != "_frozen"
        )
        return f"BertEmbeddingConfig({fields})"

    @property
    def output_shape(self) -> tuple[int, int]:
        """Shape of every BertEmbedding output, independent of input length."""
        return (self.max_position_embeddings, self.hidden_size)


def bert_config_from_dict(values: Mapping[str, Any], **overrides: Any) -> BertEmbeddingConfig:
    """
    Build a config from an already-parsed HuggingFace BERT ``config.json``.

    Only the embedding-related keys are read; anything absent keeps the
    BertEmbeddingConfig default. Keyword overrides win over the mapping.

    Args:
        values: Parsed config.json contents.
        **overrides: BertEmbeddingConfig field values to force.

    Returns:
        A frozen BertEmbeddingConfig.
    """
    key_map = {
        "vocab_size": "vocab_size",
        "hidden_size": "hidden_size",
        "max_position_embeddings": "max_position_embeddings",
        "type_vocab_size": "type_vocab_size",
        "pad_token_id": "pad_token_id",
        "layer_norm_eps": "norm_eps",
        "hidden_dropout_prob": "dropout",
    }
    kwargs: dict[str, Any] = {
        field: values[key] for key, field in key_map.items() if values.get(key) is not None
    }
    kwargs.update(overrides)
    return BertEmbeddingConfig(**kwargs)


def bert_tiny_config(**overrides: Any) -> BertEmbeddingConfig:
    """google/bert_uncased_L-2_H-128_A-2 embedding sizes."""
    return BertEmbeddingConfig(**overrides)


def bert_base_config(**overrides: Any) -> BertEmbeddingConfig:
    """bert-base-uncased embedding sizes."""
    values: dict[str, Any] = {"hidden_size": 768}
    values.update(overrides)
    return BertEmbeddingConfig(**values)


PRESETS = {
    "bert-tiny": bert_tiny_config,
    "bert-base": bert_base_config,
}


def config_from_preset(preset: str, **overrides: Any) -> BertEmbeddingConfig:
    """
    Build a config from a named preset.

    Raises:
        ValueError: If the preset name is not recognized.
    """
    config_fn = PRESETS.get(preset)
    if config_fn is None:
        raise ValueError(f"Unknown preset '{preset}'. Available: {sorted(PRESETS)}")
    return config_fn(**overrides)
