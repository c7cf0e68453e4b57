#!/usr/bin/env python3
# -----------------------------------------------------------------------------
# Copyright (c) 2026 Melek Derman
#
# SPDX-License-Identifier: MIT
# -----------------------------------------------------------------------------

"""
PyLEEDPhase - phase-shift ingestion for LEED multiple-scattering codes

Read the tabulated phase-shift files (``.phs``) of the CLEED program
package, keep one table per distinct ``(file, displacement)`` combination,
and hand the tables to a multiple-scattering solver by index.

Pipeline
--------
1. **Resolve** an identifier to a file (``$CLEED_PHASE/<id>.phs``).
2. **Look up** the repository; on a miss **read** and append the table.
3. **Use** the returned index as a stable handle: ``repo.get_table(i)``.
4. Optionally **export** the repository to HDF5:
   ``python -m pyleedphase.cli convert``

Modules
-------
readers
    ``.phs`` reader and the reader interface.
models
    The immutable :class:`PhaseShiftTable` record.
repository
    Deduplicating, append-only table store.
io
    Identifier-to-path resolution.
converters
    HDF5 export.
utils
    Tokenizer, header parsing, constants, and validation.

Examples
--------
>>> from pyleedphase import PhaseShiftRepository, PathResolver
>>> repo = PhaseShiftRepository(PathResolver("/opt/cleed/phase"))
>>> i = repo.lookup_or_load("Ni", (0.0, 0.0, 0.0))
>>> repo.get_table(i).energies[:3]
"""

from __future__ import annotations

__version__ = "0.1.0"
__author__ = "Melek Derman"

from pyleedphase.io.paths import PathResolver
from pyleedphase.models.records import PhaseShiftTable
from pyleedphase.readers.phase import PhaseShiftReader
from pyleedphase.repository import (
    PhaseShiftRepository,
    get_table,
    load_phase_shifts,
)
from pyleedphase.utils.parsing import tokenize
from pyleedphase.converters.hdf5 import (
    convert_phase_shift_file,
    create_phase_shift_hdf5,
)
from pyleedphase.exceptions import (
    PhaseShiftError,
    ConfigurationError,
    FileAccessError,
    FormatError,
    MalformedNumberError,
    ValidationError,
    IndexOutOfRangeError,
    ConversionError,
    TruncatedDataWarning,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "PathResolver",
    "PhaseShiftTable",
    "PhaseShiftReader",
    "PhaseShiftRepository",
    "load_phase_shifts",
    "get_table",
    "tokenize",
    # Converters
    "convert_phase_shift_file",
    "create_phase_shift_hdf5",
    # Exceptions
    "PhaseShiftError",
    "ConfigurationError",
    "FileAccessError",
    "FormatError",
    "MalformedNumberError",
    "ValidationError",
    "IndexOutOfRangeError",
    "ConversionError",
    "TruncatedDataWarning",
]
