#!/usr/bin/env python3
# -----------------------------------------------------------------------------
# Copyright (c) 2026 Melek Derman
#
# SPDX-License-Identifier: MIT
# -----------------------------------------------------------------------------

"""
Readers for tabulated phase-shift files

* :class:`~pyleedphase.readers.phase.PhaseShiftReader` — CLEED ``.phs``
  text format

All readers share the :class:`~pyleedphase.readers.base.BaseReader`
interface.
"""

from __future__ import annotations

from pyleedphase.readers.base import BaseReader
from pyleedphase.readers.phase import PhaseShiftReader, format_control_table

__all__ = ["BaseReader", "PhaseShiftReader", "format_control_table"]
