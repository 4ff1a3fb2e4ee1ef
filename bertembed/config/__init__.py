# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Configuration loading and validation for bertembed."""
