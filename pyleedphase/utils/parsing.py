#!/usr/bin/env python3
# -----------------------------------------------------------------------------
# Copyright (c) 2026 Melek Derman
#
# SPDX-License-Identifier: MIT
# -----------------------------------------------------------------------------

"""
Shared ``.phs`` parsing helpers for the PyLEEDPhase package

All low-level text parsing and numeric conversion lives here so that the
reader only deals with the record structure of a file.  Every function is
pure and works on single lines, so the legacy conventions can be tested
without any file I/O.

Phase-Shift File Format
-----------------------
::

    # optional comment lines
    <n_energies> <lmax> [<unit>]
    <energy 1>
    <phase shift l=0> <phase shift l=1> ... <phase shift l=lmax>
    <energy 2>
    ...

Phase-shift lines were written by FORTRAN programs (the Van Hove / Tong
package and its descendants) whose fixed formats leave **no blank between
consecutive negative numbers**, e.g. ``-0.1000-0.2000``.  A field therefore
starts either after whitespace or at a literal minus sign.

References
----------
.. [1] M. A. Van Hove, S. Y. Tong, *Surface Crystallography by LEED*,
   Springer (1979).
.. [2] G. Held, CLEED program package, ``leed_inp_phase()``.
"""

from __future__ import annotations

import logging
import re

import numpy as np

from pyleedphase.exceptions import FormatError, MalformedNumberError
from pyleedphase.utils.constants import (
    DEFAULT_REAL_DTYPE,
    NATIVE_UNIT,
    REAL_DTYPES,
    UNIT_SCALES,
)

logger = logging.getLogger(__name__)

# A C-style floating literal as accepted by ``sscanf("%e")``: leading
# whitespace, optional sign, mantissa, optional exponent.
_NUMBER_PATTERN: re.Pattern[str] = re.compile(
    r"\s*([+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)"
)

HEADER_FORMAT: str = "<n_energies:int> <lmax:int> [<unit:eV|Ry>]"
"""Expected layout of the header line, quoted in error messages."""


# ---------------------------------------------------------------------------
# Precision
# ---------------------------------------------------------------------------

def resolve_real_dtype(precision: str | np.dtype | type | None = None) -> np.dtype:
    """Translate a precision setting into a numpy floating dtype

    Parameters
    ----------
    precision : str | numpy.dtype | type | None
        ``"single"`` / ``"double"`` (or ``"float32"`` / ``"float64"``), a
        numpy dtype, or ``None`` for the default (double).

    Returns
    -------
    numpy.dtype
        ``float32`` or ``float64``.

    Raises
    ------
    ValueError
        If *precision* names anything other than single or double
        precision.

    Examples
    --------
    >>> resolve_real_dtype("single")
    dtype('float32')
    >>> resolve_real_dtype(None)
    dtype('float64')
    """
    if precision is None:
        return DEFAULT_REAL_DTYPE
    if isinstance(precision, str):
        try:
            return REAL_DTYPES[precision.strip().lower()]
        except KeyError:
            raise ValueError(
                f"Unknown precision {precision!r}; expected one of "
                f"{sorted(REAL_DTYPES)}"
            ) from None
    dtype = np.dtype(precision)
    if dtype not in (np.dtype(np.float32), np.dtype(np.float64)):
        raise ValueError(f"Unsupported real dtype {dtype}; use float32 or float64")
    return dtype


# ---------------------------------------------------------------------------
# Tokenizer
# ---------------------------------------------------------------------------

def _is_boundary(ch: str) -> bool:
    return ch == "-" or ch.isspace()


def tokenize(
    line: str,
    count: int | None = None,
    *,
    dtype: str | np.dtype | type | None = None,
) -> np.ndarray:
    """Split one formatted data line into numeric fields

    A field boundary is any run of whitespace **or** a literal ``-`` that
    begins a new field, so ``"-0.1000-0.2000"`` holds two fields.

    Parameters
    ----------
    line : str
        One line of text.  Leading whitespace and a trailing newline are
        tolerated.
    count : int | None, optional
        Number of fields to extract.  Text after the last requested field
        is ignored.  ``None`` (default) extracts every field on the line.
    dtype : str | numpy.dtype | None, optional
        Precision of the result, see :func:`resolve_real_dtype`.

    Returns
    -------
    numpy.ndarray
        1-D array of the extracted values.

    Raises
    ------
    MalformedNumberError
        If fewer than *count* numeric fields can be extracted.

    Notes
    -----
    The scan reproduces the legacy cursor rule exactly.  At the cursor a
    number is read the way ``sscanf("%e")`` reads it; then the cursor moves
    past a run of blanks and minus signs, and then past the following run
    of characters that are neither blank nor minus.  A minus sign inside an
    exponent therefore also starts a new field: ``"1.0E-02"`` yields
    ``0.01`` followed by ``-2.0``.  Files in the legacy format never use
    negative exponents on phase-shift lines, and this behaviour is kept so
    that every existing file is read exactly as before.

    Examples
    --------
    >>> tokenize("-0.1000-0.2000 0.3000")
    array([-0.1, -0.2,  0.3])
    >>> tokenize("  1.5  2.5  3.5", 2)
    array([1.5, 2.5])
    """
    real = resolve_real_dtype(dtype)
    values: list[float] = []
    pos = 0
    end = len(line)

    while count is None or len(values) < count:
        match = _NUMBER_PATTERN.match(line, pos)
        if match is None:
            break
        values.append(float(match.group(1)))

        while pos < end and _is_boundary(line[pos]):
            pos += 1
        while pos < end and not _is_boundary(line[pos]):
            pos += 1

    if count is not None and len(values) < count:
        raise MalformedNumberError(
            f"Expected {count} numeric fields, found {len(values)}",
            line=line,
            expected=count,
            found=len(values),
        )
    return np.asarray(values, dtype=real)


# ---------------------------------------------------------------------------
# Header
# ---------------------------------------------------------------------------

def parse_header(line: str, path: str | None = None) -> tuple[int, int, str | None]:
    """Parse the header line of a phase-shift file

    Parameters
    ----------
    line : str
        The first non-comment line of the file.
    path : str | None, optional
        File name, used in error messages only.

    Returns
    -------
    n_energies : int
        Number of energies announced by the file.
    lmax : int
        Maximum angular momentum quantum number.
    unit : str | None
        Third whitespace-delimited field, or ``None`` if absent.

    Raises
    ------
    FormatError
        If the line does not start with two non-negative integers.

    Examples
    --------
    >>> parse_header("3 1 eV")
    (3, 1, 'eV')
    >>> parse_header("  12  8")
    (12, 8, None)
    """
    fields = line.split()
    try:
        n_energies = int(fields[0])
        lmax = int(fields[1])
    except (IndexError, ValueError):
        raise FormatError(
            f"Improper header line, expected {HEADER_FORMAT}",
            path=path,
            line=line,
        ) from None

    if n_energies < 0 or lmax < 0:
        raise FormatError(
            f"Negative count in header line, expected {HEADER_FORMAT}",
            path=path,
            line=line,
        )

    unit = fields[2] if len(fields) > 2 else None
    return n_energies, lmax, unit


def energy_scale(unit: str | None) -> tuple[str, float]:
    """Return the unit name and factor converting file energies to Hartree

    Only the first two characters of *unit* are inspected, ignoring case:
    ``eV`` selects ``1/27.18``, ``Ry`` selects ``2/27.18``.  Anything else,
    including a missing tag, leaves energies unscaled.

    Examples
    --------
    >>> energy_scale("EV") == ("eV", 1.0 / 27.18)
    True
    >>> energy_scale("Hartree")
    ('Hartree', 1.0)
    >>> energy_scale(None)
    ('Hartree', 1.0)
    """
    if unit:
        entry = UNIT_SCALES.get(unit[:2].lower())
        if entry is not None:
            return entry
    return NATIVE_UNIT, 1.0
