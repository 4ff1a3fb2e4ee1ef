# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Dropout strategy registry.

The masking scheme is selected by config string alone; this maps that string
to the concrete class. The registry is populated once at import time via
``_register_builtins()`` and stays fixed unless a caller registers a custom
strategy.
"""

import logging

from bertembed.model.interfaces import DropoutStrategyBase

logger = logging.getLogger(__name__)

_DROPOUT_REGISTRY: dict[str, type[DropoutStrategyBase]] = {}


def register_dropout(name: str, cls: type[DropoutStrategyBase]) -> None:
    """
    Register a dropout strategy class under a unique name.

    Args:
        name: Config-level identifier (e.g. ``"bernoulli"``).
        cls: The DropoutStrategyBase subclass to register.

    Raises:
        ValueError: If ``name`` is already registered.
        TypeError: If ``cls`` isn't a DropoutStrategyBase subclass.
    """
    if name in _DROPOUT_REGISTRY:
        raise ValueError(
            f"Dropout strategy '{name}' is already registered to {_DROPOUT_REGISTRY[name].__name__}"
        )
    if not (isinstance(cls, type) and issubclass(cls, DropoutStrategyBase)):
        raise TypeError(f"{cls!r} is not a DropoutStrategyBase subclass")
    _DROPOUT_REGISTRY[name] = cls
    logger.debug("registered_dropout", extra={"strategy": name, "cls": cls.__name__})


def get_dropout(name: str) -> type[DropoutStrategyBase]:
    """
    Retrieve a registered dropout strategy class by name.

    Raises:
        KeyError: If ``name`` is not registered.
    """
    if name not in _DROPOUT_REGISTRY:
        available = sorted(_DROPOUT_REGISTRY.keys())
        raise KeyError(f"Unknown dropout strategy '{name}'. Available: {available}")
    return _DROPOUT_REGISTRY[name]


def list_dropout_types() -> list[str]:
    """Return sorted list of all registered dropout strategy names."""
    return sorted(_DROPOUT_REGISTRY.keys())


_BUILTINS_REGISTERED: bool = False


def _register_builtins() -> None:
    """Import the built-in strategies so they register themselves. Idempotent."""
    global _BUILTINS_REGISTERED
    if _BUILTINS_REGISTERED:
        return

    import bertembed.model.layers.dropout  # noqa: F401

    _BUILTINS_REGISTERED = True
    logger.debug("builtins_registered", extra={"dropout_types": list_dropout_types()})


_register_builtins()
