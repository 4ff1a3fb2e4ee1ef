# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Pluggable layer implementations.

Subpackages contain concrete implementations that register themselves with
the registry on import.
"""
