# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Custom exceptions for the configuration system.

We keep these separate from the model errors so that callers can catch
config-file failures without importing torch.
"""


class ConfigError(Exception):
    """Base for all configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when a config file cannot be read from disk or parsed as YAML."""


class ConfigValidationError(ConfigError):
    """
    Raised when a config file parses fine but fails schema validation.
    This covers missing required fields, type mismatches, out-of-range values,
    and unknown keys.
    """
