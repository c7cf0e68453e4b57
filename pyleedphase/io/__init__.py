#!/usr/bin/env python3
# -----------------------------------------------------------------------------
# Copyright (c) 2026 Melek Derman
#
# SPDX-License-Identifier: MIT
# -----------------------------------------------------------------------------

"""
I/O helpers for locating phase-shift files

See :mod:`pyleedphase.io.paths`.
"""

from __future__ import annotations

from pyleedphase.io.paths import PathResolver

__all__ = ["PathResolver"]
