#!/usr/bin/env python3
# -----------------------------------------------------------------------------
# Copyright (c) 2026 Melek Derman
#
# SPDX-License-Identifier: MIT
# -----------------------------------------------------------------------------

"""
Custom exception hierarchy for the PyLEEDPhase package

All exceptions raised by PyLEEDPhase inherit from :class:`PhaseShiftError`,
making it possible to catch every library-specific error with a single
``except`` clause while still allowing fine-grained handling when needed.

Errors that relate to a particular input carry the offending ``path`` and,
where one exists, the raw offending ``line`` so that a host application can
report the same diagnostic the legacy LEED programs printed before exiting.

Exception Hierarchy
-------------------
::

    PhaseShiftError
    ├── ConfigurationError      # Relative identifier, no search directory
    ├── FileAccessError         # Phase-shift file cannot be opened
    ├── FormatError             # Header line missing or unreadable
    ├── MalformedNumberError    # Too few numeric fields on a data line
    ├── ValidationError         # Bad displacement or failed post-parse check
    ├── IndexOutOfRangeError    # Unknown table handle
    └── ConversionError         # HDF5 write failures

    TruncatedDataWarning        # Non-fatal: fewer rows than declared
"""

from __future__ import annotations


class PhaseShiftError(Exception):
    """Base exception for all PyLEEDPhase errors

    Parameters
    ----------
    message : str
        Human-readable description of the failure.
    path : str | None, optional
        File the failure relates to, if any.
    line : str | None, optional
        Raw content of the offending input line, if any.
    """

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        line: str | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.line = line

    def __str__(self) -> str:
        text = self.message
        if self.path is not None and self.path not in text:
            text = f"{text} (file: {self.path})"
        if self.line is not None:
            text = f"{text}\n    offending line: {self.line.rstrip()!r}"
        return text


class ConfigurationError(PhaseShiftError):
    """Raised when a relative identifier cannot be resolved

    The search directory is taken from the ``CLEED_PHASE`` environment
    variable (or an explicit override).  Requesting a relative identifier
    while neither is set is a configuration problem of the host run, not a
    property of any input file.
    """


class FileAccessError(PhaseShiftError):
    """Raised when a phase-shift file cannot be opened for reading"""


class FormatError(PhaseShiftError):
    """Raised when a phase-shift file header is missing or unreadable

    This covers a file that ends before the header line, and a header
    line that does not start with two integer fields
    ``<n_energies> <lmax>``.
    """


class MalformedNumberError(PhaseShiftError):
    """Raised when a data line holds fewer numeric fields than required

    Parameters
    ----------
    message : str
        Description including the expected and found field counts.
    expected : int | None
        Number of numeric fields requested.
    found : int | None
        Number of numeric fields actually extracted.
    """

    def __init__(
        self,
        message: str,
        *,
        path: str | None = None,
        line: str | None = None,
        expected: int | None = None,
        found: int | None = None,
    ) -> None:
        super().__init__(message, path=path, line=line)
        self.expected = expected
        self.found = found


class ValidationError(PhaseShiftError):
    """Raised when inputs or parsed data fail validation checks

    Raised for displacement vectors that are not three finite reals, and by
    the optional post-parse checks (non-decreasing energy grid, finite
    phase shifts).  A ``ValidationError`` from the reader means the file
    was *parseable* but the resulting table violates expected constraints.
    """


class IndexOutOfRangeError(PhaseShiftError, IndexError):
    """Raised when a table handle was never returned by the repository"""


class ConversionError(PhaseShiftError):
    """Raised when HDF5 export fails

    Covers an existing output file with ``overwrite=False`` and any error
    raised by ``h5py`` while writing.
    """


class TruncatedDataWarning(UserWarning):
    """Emitted when a file ends before all declared energies were read

    The partially-filled table is still returned.  The warning instance
    carries the structured diagnostic content.

    Parameters
    ----------
    path : str
        File that was truncated.
    declared : int
        Number of energies announced in the header.
    actual : int
        Number of energy / phase-shift pairs actually stored.
    """

    def __init__(self, path: str, declared: int, actual: int) -> None:
        self.path = path
        self.declared = declared
        self.actual = actual
        super().__init__(
            f"EOF found before reading all phase shifts: "
            f"expected energies: {declared}, found: {actual}, file: {path}"
        )
