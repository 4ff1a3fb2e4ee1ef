# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Dropout masking strategies.

Importing this package registers all built-in strategies with the registry.
"""

from bertembed.model.layers.dropout.bernoulli import BernoulliDropout
from bertembed.model.layers.dropout.identity import IdentityDropout

__all__ = ["BernoulliDropout", "IdentityDropout"]
