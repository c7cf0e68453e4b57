#!/usr/bin/env python3
# -----------------------------------------------------------------------------
# Copyright (c) 2026 Melek Derman
#
# SPDX-License-Identifier: MIT
# -----------------------------------------------------------------------------

"""
HDF5 converters for phase-shift tables

* :func:`~pyleedphase.converters.hdf5.create_phase_shift_hdf5`
    Writes all tables of a repository into one HDF5 file.
* :func:`~pyleedphase.converters.hdf5.convert_phase_shift_file`
    Reads one ``.phs`` file and writes it as HDF5.
"""

from __future__ import annotations

from pyleedphase.converters.hdf5 import (
    convert_phase_shift_file,
    create_phase_shift_hdf5,
)

__all__ = ["convert_phase_shift_file", "create_phase_shift_hdf5"]
