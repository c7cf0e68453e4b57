#!/usr/bin/env python3
# -----------------------------------------------------------------------------
# Copyright (c) 2026 Melek Derman
#
# SPDX-License-Identifier: MIT
# -----------------------------------------------------------------------------

"""
Constants and lookup tables used across PyLEEDPhase

The numeric constants match the values used by the CLEED LEED programs
that produced and consumed ``.phs`` files, so that energies converted here
are identical to the legacy ones.  In particular the Hartree energy is the
rounded CLEED value (27.18 eV), **not** CODATA.
"""

from __future__ import annotations

import numpy as np

# ---------------------------------------------------------------------------
# Energy units
# ---------------------------------------------------------------------------

HARTREE_EV: float = 27.18
"""Hartree energy in eV as used by CLEED (atomic energy unit)."""

EV_SCALE: float = 1.0 / HARTREE_EV
"""Factor converting eV to Hartree."""

RYDBERG_SCALE: float = 2.0 / HARTREE_EV
"""Factor converting Rydberg to Hartree (legacy form, 2 / 27.18)."""

UNIT_SCALES: dict[str, tuple[str, float]] = {
    "ev": ("eV", EV_SCALE),
    "ry": ("Ry", RYDBERG_SCALE),
}
"""Unit-tag prefix (lower case, two characters) → (unit name, scale)."""

NATIVE_UNIT: str = "Hartree"
"""Name of the unit assumed when the header carries no recognised tag."""

# ---------------------------------------------------------------------------
# Phase-shift files
# ---------------------------------------------------------------------------

PHASE_FILE_EXTENSION: str = ".phs"
"""Extension appended to relative identifiers."""

COMMENT_PREFIX: str = "#"
"""Lines starting with this character before the header are skipped."""

PHASE_DIR_ENV: str = "CLEED_PHASE"
"""Environment variable naming the phase-shift search directory."""

# ---------------------------------------------------------------------------
# Cache key comparison
# ---------------------------------------------------------------------------

GEO_TOLERANCE: float = 1.0e-4
"""Absolute per-axis tolerance when comparing displacement vectors."""

DISPLACEMENT_SIZE: int = 3

# ---------------------------------------------------------------------------
# Numeric precision
# ---------------------------------------------------------------------------

REAL_DTYPES: dict[str, np.dtype] = {
    "single": np.dtype(np.float32),
    "float": np.dtype(np.float32),
    "float32": np.dtype(np.float32),
    "double": np.dtype(np.float64),
    "float64": np.dtype(np.float64),
}
"""Accepted precision names and the numpy dtypes they select."""

DEFAULT_REAL_DTYPE: np.dtype = np.dtype(np.float64)
