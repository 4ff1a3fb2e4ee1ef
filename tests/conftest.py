# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for bertembed tests.

Most tests run on a small config (hidden 16, vocab 50, 32 positions) with
random weights drawn from a seeded generator, so every run sees the same
numbers. The full-size scenario builds its own weights.
"""

import textwrap
from pathlib import Path

import pytest
import torch

from bertembed.model.config import BertEmbeddingConfig


def make_weight_map(
    config: BertEmbeddingConfig,
    seed: int = 1234,
    layer_norm_names: tuple[str, str] = ("gamma", "beta"),
) -> dict[str, torch.Tensor]:
    """Random float32 weights with the names a BERT checkpoint uses."""
    generator = torch.Generator().manual_seed(seed)
    hidden = config.hidden_size
    prefix = config.weight_prefix
    gamma_name, beta_name = layer_norm_names

    def randn(*shape: int) -> torch.Tensor:
        return torch.randn(*shape, generator=generator, dtype=torch.float32)

    return {
        f"{prefix}.word_embeddings.weight": randn(config.vocab_size, hidden),
        f"{prefix}.position_embeddings.weight": randn(config.max_position_embeddings, hidden),
        f"{prefix}.token_type_embeddings.weight": randn(config.type_vocab_size, hidden),
        f"{prefix}.LayerNorm.{gamma_name}": 1.0 + 0.1 * randn(hidden),
        f"{prefix}.LayerNorm.{beta_name}": 0.1 * randn(hidden),
    }


@pytest.fixture()
def small_config() -> BertEmbeddingConfig:
    return BertEmbeddingConfig(
        vocab_size=50,
        hidden_size=16,
        max_position_embeddings=32,
        type_vocab_size=2,
        pad_token_id=0,
        dropout=0.1,
    )


@pytest.fixture()
def small_weights(small_config: BertEmbeddingConfig) -> dict[str, torch.Tensor]:
    return make_weight_map(small_config)


@pytest.fixture()
def tmp_config_file(tmp_path: Path) -> Path:
    """The smallest config that passes schema validation."""
    config_content = textwrap.dedent("""\
        global:
          config_version: "1.0.0"
          project_name: "bertembed-test"
          log_level: "DEBUG"
    """)
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def invalid_config_file(tmp_path: Path) -> Path:
    """Valid YAML that fails schema validation (missing config_version)."""
    config_content = textwrap.dedent("""\
        global:
          project_name: "bertembed-test"
    """)
    config_file = tmp_path / "invalid_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def broken_yaml_file(tmp_path: Path) -> Path:
    """A file that isn't valid YAML at all."""
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("{{not: yaml: at: all:::", encoding="utf-8")
    return config_file


@pytest.fixture()
def weight_map_factory():
    """Expose make_weight_map to tests that need custom configs or key names."""
    return make_weight_map
