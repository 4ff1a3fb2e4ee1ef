# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for the construction entry points.

Validates the schema-to-config bridge, build logging, and building from a
YAML file.
"""

import logging
import textwrap
from pathlib import Path

import pytest

from bertembed.config.exceptions import ConfigValidationError
from bertembed.config.schema import EmbeddingSchema
from bertembed.model.bert_embedding import BertEmbedding
from bertembed.model.factory import (
    build_embedding,
    build_embedding_config,
    build_embedding_from_file,
)


@pytest.fixture(autouse=True)
def _reset_root_logger() -> None:
    yield  # type: ignore[misc]
    root = logging.getLogger("bertembed")
    root.handlers.clear()
    root.propagate = True
    root.setLevel(logging.NOTSET)


class TestBuildEmbeddingConfig:
    def test_defaults_without_schema(self) -> None:
        config = build_embedding_config()
        assert config.hidden_size == 128
        assert config.norm_eps == 1e-12
        assert config.dropout == 0.1

    def test_renamed_fields(self) -> None:
        schema = EmbeddingSchema(layer_norm_eps=1e-6, hidden_dropout_prob=0.2, max_norm=3.0)
        config = build_embedding_config(schema)
        assert config.norm_eps == 1e-6
        assert config.dropout == 0.2
        assert config.max_norm == 3.0


class TestBuildEmbedding:
    def test_returns_model(self, small_config, small_weights) -> None:
        model = build_embedding(small_config, small_weights)
        assert isinstance(model, BertEmbedding)
        assert model([1, 2]).shape == (32, 16)

    def test_logs_build(self, small_config, small_weights, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="bertembed.model.factory"):
            build_embedding(small_config, small_weights)
        messages = [record.getMessage() for record in caplog.records]
        assert "building_embedding" in messages
        assert "embedding_built" in messages
        built = next(r for r in caplog.records if r.getMessage() == "embedding_built")
        assert built.output_shape == [32, 16]


class TestBuildFromFile:
    def test_builds_from_yaml(self, tmp_path: Path, small_weights) -> None:
        config_file = tmp_path / "embedding.yaml"
        config_file.write_text(
            textwrap.dedent("""\
                global:
                  config_version: "1.0.0"
                  log_level: "WARNING"
                embedding:
                  hidden_size: 16
                  vocab_size: 50
                  max_position_embeddings: 32
                  hidden_dropout_prob: 0.0
            """),
            encoding="utf-8",
        )
        model = build_embedding_from_file(config_file, small_weights)
        assert model.output_shape == (32, 16)
        assert model.dropout.rate == 0.0
        assert logging.getLogger("bertembed").level == logging.WARNING

    def test_invalid_file_raises(self, invalid_config_file: Path, small_weights) -> None:
        with pytest.raises(ConfigValidationError):
            build_embedding_from_file(invalid_config_file, small_weights)
