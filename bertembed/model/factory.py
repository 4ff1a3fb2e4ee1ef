# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Construction entry points for the embedding stage.

``build_embedding`` is the canonical way to create a BertEmbedding: it logs
what is being built and what came out. ``build_embedding_from_file`` adds
the YAML config file and logger setup in front of it.
"""

import logging
from pathlib import Path
from typing import Optional

from bertembed.config.loader import load_config
from bertembed.config.schema import EmbeddingSchema
from bertembed.logging.logger import get_logger
from bertembed.model.bert_embedding import BertEmbedding
from bertembed.model.config import BertEmbeddingConfig
from bertembed.model.weights import WeightMap

logger = logging.getLogger(__name__)


def build_embedding_config(schema: Optional[EmbeddingSchema] = None) -> BertEmbeddingConfig:
    """
    Bridge between the YAML schema and the model config.

    The schema uses HuggingFace names (``layer_norm_eps``,
    ``hidden_dropout_prob``); the model config uses ``norm_eps`` and
    ``dropout``. A missing section means all defaults.
    """
    if schema is None:
        schema = EmbeddingSchema()
    return BertEmbeddingConfig(
        vocab_size=schema.vocab_size,
        hidden_size=schema.hidden_size,
        max_position_embeddings=schema.max_position_embeddings,
        type_vocab_size=schema.type_vocab_size,
        pad_token_id=schema.pad_token_id,
        norm_eps=schema.layer_norm_eps,
        dropout=schema.hidden_dropout_prob,
        gelu_alpha=schema.gelu_alpha,
        gelu_beta=schema.gelu_beta,
        dropout_strategy=schema.dropout_strategy,
        dropout_seed=schema.dropout_seed,
        max_norm=schema.max_norm,
        norm_type=schema.norm_type,
        weight_prefix=schema.weight_prefix,
    )


def build_embedding(config: BertEmbeddingConfig, weights: WeightMap) -> BertEmbedding:
    """
    Build a BertEmbedding from a config and a weight map.

    Args:
        config: Fully populated BertEmbeddingConfig.
        weights: Parameter name to tensor map from the model loader.

    Returns:
        A ready BertEmbedding.
    """
    logger.info(
        "building_embedding",
        extra={
            "hidden_size": config.hidden_size,
            "vocab_size": config.vocab_size,
            "max_position_embeddings": config.max_position_embeddings,
            "type_vocab_size": config.type_vocab_size,
            "pad_token_id": config.pad_token_id,
            "dropout": config.dropout,
            "dropout_strategy": config.dropout_strategy,
            "weight_prefix": config.weight_prefix,
        },
    )
    model = BertEmbedding(config, weights)
    table_elements = sum(buffer.numel() for buffer in model.buffers())
    logger.info(
        "embedding_built",
        extra={"buffer_elements": table_elements, "output_shape": list(config.output_shape)},
    )
    return model


def build_embedding_from_file(config_path: Path, weights: WeightMap) -> BertEmbedding:
    """
    Load a YAML config, set up logging from its ``global`` section, and build.

    Raises:
        ConfigLoadError: The file can't be read or parsed.
        ConfigValidationError: The file fails schema validation.
    """
    file_config = load_config(config_path)
    global_cfg = file_config.global_config
    log_file = Path(global_cfg.log_file) if global_cfg.log_file is not None else None
    get_logger("bertembed", log_level=global_cfg.log_level, log_file=log_file)

    return build_embedding(build_embedding_config(file_config.embedding), weights)
