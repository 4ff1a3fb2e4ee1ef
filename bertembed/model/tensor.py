# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Fixed-shape scratch buffers with an explicit lifetime.

BertEmbedding allocates every working array (padded id vectors, lookup
outputs) per call and releases it before returning, so two calls never
share storage. TensorBuffer makes that lifetime visible: it is created by
one of three constructors, used through ``.tensor``, and released exactly
once, usually by leaving a ``with`` block.

Layout: matrices are row-major ``[positions, hidden]``, i.e. the hidden axis
is the fastest-varying one. That is the same memory order as a column-major
``[hidden, positions]`` matrix.
"""

from collections.abc import Sequence
from types import TracebackType
from typing import Optional, Union

import torch

from bertembed.model.exceptions import BufferReleasedError, ShapeMismatchError

Shape = tuple[int, ...]


class TensorBuffer:
    """
    Owned (or wrapped) storage of a fixed shape and dtype.

    Args:
        tensor: Backing storage. Constructors below decide whether it is a
            fresh allocation, a copy, or the caller's own tensor.
        owned: False when the storage belongs to someone else (``wrap``).
    """

    __slots__ = ("_tensor", "shape", "dtype", "owned", "_released")

    def __init__(self, tensor: torch.Tensor, owned: bool = True) -> None:
        self._tensor: Optional[torch.Tensor] = tensor
        self.shape: Shape = tuple(tensor.shape)
        self.dtype = tensor.dtype
        self.owned = owned
        self._released = False

    @classmethod
    def allocate(
        cls,
        shape: Sequence[int],
        dtype: torch.dtype = torch.float32,
        device: Union[str, torch.device, None] = None,
    ) -> "TensorBuffer":
        """Allocate uninitialized storage of the given shape."""
        return cls(torch.empty(tuple(shape), dtype=dtype, device=device))

    @classmethod
    def from_data(
        cls,
        data: Union[torch.Tensor, Sequence[float], Sequence[int]],
        shape: Sequence[int],
        dtype: torch.dtype = torch.float32,
        device: Union[str, torch.device, None] = None,
    ) -> "TensorBuffer":
        """
        Allocate storage and copy ``data`` into it.

        ``data`` may be flat or already shaped; only its element count has to
        match ``shape``.

        Raises:
            ShapeMismatchError: If the element count differs from the shape's.
        """
        shape = tuple(shape)
        if isinstance(data, torch.Tensor):
            source = data.detach()
        else:
            source = torch.as_tensor(data, dtype=dtype)

        expected = 1
        for dim in shape:
            expected *= dim
        if source.numel() != expected:
            raise ShapeMismatchError(
                f"Cannot fill buffer of shape {shape} ({expected} elements) "
                f"from {source.numel()} elements"
            )

        storage = torch.empty(shape, dtype=dtype, device=device)
        storage.copy_(source.reshape(shape))
        return cls(storage)

    @classmethod
    def wrap(cls, tensor: torch.Tensor) -> "TensorBuffer":
        """Wrap existing storage without copying."""
        return cls(tensor, owned=False)

    @property
    def tensor(self) -> torch.Tensor:
        """The backing tensor. Raises once the buffer has been released."""
        if self._tensor is None:
            raise BufferReleasedError(f"Buffer of shape {self.shape} was already released")
        return self._tensor

    @property
    def released(self) -> bool:
        return self._released

    def numel(self) -> int:
        count = 1
        for dim in self.shape:
            count *= dim
        return count

    def release(self) -> None:
        """
        Drop this buffer's hold on its storage.

        Must be called exactly once. Tensors already handed out (for example
        a returned result) stay valid; only access through the buffer ends.

        Raises:
            BufferReleasedError: On a second release.
        """
        if self._released:
            raise BufferReleasedError(f"Buffer of shape {self.shape} released twice")
        self._tensor = None
        self._released = True

    def __enter__(self) -> "TensorBuffer":
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc: Optional[BaseException],
        tb: Optional[TracebackType],
    ) -> None:
        if not self._released:
            self.release()

    def __repr__(self) -> str:
        state = "released" if self._released else ("owned" if self.owned else "wrapped")
        return f"TensorBuffer(shape={self.shape}, dtype={self.dtype}, {state})"
