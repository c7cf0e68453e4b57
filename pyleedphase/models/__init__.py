#!/usr/bin/env python3
# -----------------------------------------------------------------------------
# Copyright (c) 2026 Melek Derman
#
# SPDX-License-Identifier: MIT
# -----------------------------------------------------------------------------

"""
Typed dataclass models for parsed phase-shift data

Models are the sole output of the reader layer and the element type held
by the repository and written by the converter layer.
"""

from __future__ import annotations

from pyleedphase.models.records import PhaseShiftTable

__all__ = ["PhaseShiftTable"]
