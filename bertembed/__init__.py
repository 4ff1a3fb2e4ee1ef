# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
bertembed: the input-embedding stage of a BERT-style encoder.

Token ids go in, a fixed-shape hidden-state tensor comes out:
  word + position + token type lookups, summed, and in the training phase
  passed through LayerNorm (with a fused GELU) and dropout.
"""

__version__ = "0.1.0"
