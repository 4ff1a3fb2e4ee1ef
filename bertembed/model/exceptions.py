# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Errors raised by the embedding stage.

Every failure here is a caller mistake (bad weights, bad ids, bad shapes),
so nothing is retried. MissingWeightError and InvalidIndexError also derive
from the builtin they resemble, so ``except KeyError`` / ``except IndexError``
keeps working for callers that don't know about this package.
"""


class EmbeddingError(Exception):
    """Base for all embedding-stage errors."""


class MissingWeightError(EmbeddingError, KeyError):
    """A required tensor is absent from the weight map."""

    def __str__(self) -> str:
        return str(self.args[0]) if self.args else ""


class ShapeMismatchError(EmbeddingError, ValueError):
    """A tensor's size doesn't match the configured hidden or table size."""


class InvalidIndexError(EmbeddingError, IndexError):
    """An id falls outside its table and isn't the padding sentinel."""


class IncompatibleShapesError(EmbeddingError, ValueError):
    """Two matrices can't be added under the row-broadcast rule."""


class BufferReleasedError(EmbeddingError, RuntimeError):
    """A TensorBuffer was used or released after it had already been released."""
