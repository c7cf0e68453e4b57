#!/usr/bin/env python3
# -----------------------------------------------------------------------------
# Copyright (c) 2026 Melek Derman
#
# SPDX-License-Identifier: MIT
# -----------------------------------------------------------------------------

"""
Reader for CLEED ``.phs`` phase-shift files

Parses the legacy text format read by the CLEED ``leed`` program and
returns a :class:`~pyleedphase.models.records.PhaseShiftTable`.

Reading proceeds through the states::

    comments -> header -> (energy line <-> phase-shift line)* -> done

with fatal exits on an unopenable file (:class:`FileAccessError`) and on a
missing or malformed header (:class:`FormatError`).  ``done`` is reached
either with all declared energies read or, when the file ends early, with
a truncated table and a :class:`TruncatedDataWarning`.

File Format Assumptions
-----------------------
* Comment lines start with ``#`` in the first column and only appear
  before the header.
* Energy lines carry the energy as their first field; anything after it is
  ignored.
* Phase-shift lines carry at least ``lmax + 1`` fields, split with the
  legacy rule of :func:`~pyleedphase.utils.parsing.tokenize`.
* A blank line in the data block is treated like the end of the file.
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Sequence
from pathlib import Path
from typing import TextIO

import numpy as np

from pyleedphase.exceptions import (
    FileAccessError,
    FormatError,
    MalformedNumberError,
    TruncatedDataWarning,
)
from pyleedphase.models.records import PhaseShiftTable
from pyleedphase.readers.base import ZERO_DISPLACEMENT, BaseReader
from pyleedphase.utils.constants import COMMENT_PREFIX
from pyleedphase.utils.parsing import (
    energy_scale,
    parse_header,
    resolve_real_dtype,
    tokenize,
)
from pyleedphase.utils.validation import (
    validate_displacement,
    validate_energy_monotonic,
    validate_finite,
)

logger = logging.getLogger(__name__)


def format_control_table(table: PhaseShiftTable) -> str:
    """Render the rows read into a table as fixed-width text

    One line per energy with the energy (Hartree) followed by one column
    per angular momentum; exact zeros are printed as ``--``.  This is the
    control output the LEED programs printed after reading a file.

    Examples
    --------
    >>> print(format_control_table(table))  # doctest: +SKIP
        E(H)     l= 0     l= 1
      0.0368  -0.1000   0.0500
    """
    header = f"{'E(H)':>8s}" + "".join(
        f"{f'l={l:2d}':>9s}" for l in range(table.n_channels)
    )
    rows = [header]
    for energy, shifts in zip(table.valid_energies, table.valid_phase_shifts):
        cells = [f" {value:8.4f}" if value != 0.0 else f"{'--':>9s}" for value in shifts]
        rows.append(f"{energy:8.4f}" + "".join(cells))
    return "\n".join(rows)


class PhaseShiftReader(BaseReader):
    """Reader for CLEED phase-shift (``.phs``) files

    Parameters
    ----------
    precision : str | numpy.dtype | None, optional
        ``"single"`` or ``"double"`` (default) precision of the arrays in
        the returned tables.

    Notes
    -----
    Energies are converted to Hartree on read, using the unit tag of the
    header line (``eV`` → ``1/27.18``, ``Ry`` → ``2/27.18``, otherwise
    unchanged).

    Examples
    --------
    >>> reader = PhaseShiftReader()
    >>> table = reader.read("/opt/cleed/phase/Ni.phs")
    >>> table.lmax
    8
    >>> table.phase_shifts.shape
    (38, 9)
    """

    def __init__(self, precision: str | np.dtype | None = None) -> None:
        self.dtype = resolve_real_dtype(precision)

    def read(
        self,
        path: Path | str,
        *,
        displacement: Sequence[float] | np.ndarray = ZERO_DISPLACEMENT,
        validate: bool = False,
    ) -> PhaseShiftTable:
        """Parse a ``.phs`` file and return a typed table

        Parameters
        ----------
        path : Path | str
            Path of the phase-shift file.  Relative paths are made
            absolute against the working directory.
        displacement : sequence of float, optional
            Displacement vector stored on the table.  Default zero.
        validate : bool, optional
            Check that the energies read are non-decreasing and that all
            values read are finite.  Default ``False``; legacy files may
            list energies out of order.

        Returns
        -------
        PhaseShiftTable
            Parsed table; possibly truncated (see
            :attr:`PhaseShiftTable.is_truncated`).

        Raises
        ------
        FileAccessError
            If the file cannot be opened.
        FormatError
            If the file ends before the header or the header is malformed.
        MalformedNumberError
            If a present data line holds too few numeric fields.
        ValidationError
            If *validate* is ``True`` and a post-parse check fails.
        """
        filepath = str(Path(path).absolute())
        dr = validate_displacement(displacement)
        logger.debug("Opening phase-shift file: %s", filepath)

        try:
            stream = open(filepath, "r", encoding="latin-1")
        except OSError as exc:
            raise FileAccessError(
                f"Could not open file {filepath!r}: {exc.strerror or exc}",
                path=filepath,
            ) from exc

        with stream:
            table = self._parse(stream, filepath, dr)

        if table.is_truncated:
            logger.warning(
                "EOF found before reading all phase shifts: "
                "expected energies: %d, found: %d, file: %s",
                table.declared_energy_count,
                table.actual_energy_count,
                filepath,
            )
            warnings.warn(
                TruncatedDataWarning(
                    filepath,
                    table.declared_energy_count,
                    table.actual_energy_count,
                ),
                stacklevel=2,
            )

        if validate:
            validate_energy_monotonic(table.valid_energies, "energies", filepath)
            validate_finite(table.valid_energies, "energies", filepath)
            validate_finite(table.valid_phase_shifts, "phase_shifts", filepath)

        if logger.isEnabledFor(logging.DEBUG):
            logger.debug(
                "Number of energies = %d, lmax = %d\n%s",
                table.actual_energy_count,
                table.lmax,
                format_control_table(table),
            )
        return table

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _read_header(self, stream: TextIO, filepath: str) -> tuple[int, int, str | None]:
        line = stream.readline()
        while line.startswith(COMMENT_PREFIX):
            line = stream.readline()
        if not line:
            raise FormatError(
                "Unexpected EOF found while reading the header line",
                path=filepath,
            )
        return parse_header(line, filepath)

    def _fields(self, line: str, count: int, filepath: str) -> np.ndarray:
        try:
            return tokenize(line, count, dtype=self.dtype)
        except MalformedNumberError as exc:
            exc.path = filepath
            raise

    def _parse(self, stream: TextIO, filepath: str, dr: np.ndarray) -> PhaseShiftTable:
        n_eng, lmax, unit = self._read_header(stream, filepath)
        unit_name, scale = energy_scale(unit)
        logger.debug(
            "Header of %s: %d energies, lmax = %d, energy input in %s",
            filepath, n_eng, lmax, unit_name,
        )

        nl = lmax + 1
        energies = np.zeros(n_eng, dtype=self.dtype)
        phase_shifts = np.zeros((n_eng, nl), dtype=self.dtype)
        min_energy = 0.0
        max_energy = 0.0
        n_read = n_eng

        for i_eng in range(n_eng):
            energy_line = stream.readline()
            if not energy_line:
                n_read = i_eng
                break

            energies[i_eng] = float(self._fields(energy_line, 1, filepath)[0]) * scale
            if i_eng == 0:
                min_energy = float(energies[i_eng])
            else:
                max_energy = float(energies[i_eng])

            shift_line = stream.readline()
            if not shift_line:
                energies[i_eng] = 0.0
                if i_eng > 0:
                    max_energy = float(energies[i_eng - 1])
                else:
                    min_energy = 0.0
                n_read = i_eng
                break

            phase_shifts[i_eng] = self._fields(shift_line, nl, filepath)

        return PhaseShiftTable(
            source_path=filepath,
            displacement=dr,
            lmax=lmax,
            declared_energy_count=n_eng,
            actual_energy_count=n_read,
            energies=energies,
            phase_shifts=phase_shifts,
            min_energy=min_energy,
            max_energy=max_energy,
            energy_unit=unit_name,
        )
