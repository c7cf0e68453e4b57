#!/usr/bin/env python3
# -----------------------------------------------------------------------------
# Copyright (c) 2026 Melek Derman
#
# SPDX-License-Identifier: MIT
# -----------------------------------------------------------------------------

"""
Shared utilities for parsing and validation

This sub-package centralises the line-level ``.phs`` parsing helpers,
legacy constants, and validation logic so that the reader and the
repository never duplicate format-specific code.
"""

from __future__ import annotations
