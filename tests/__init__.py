# Immofi Test Suite
# Copyright 2024-2025 David Gordon Nix
# SPDX-License-Identifier: Apache-2.0

"""
Immofi test suite.

Unit tests per engine and an end-to-end scenario over a full project.
"""
