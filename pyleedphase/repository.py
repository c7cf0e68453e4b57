#!/usr/bin/env python3
# -----------------------------------------------------------------------------
# Copyright (c) 2026 Melek Derman
#
# SPDX-License-Identifier: MIT
# -----------------------------------------------------------------------------

"""
Deduplicating store of phase-shift tables for one simulation run

A LEED structure refers to the same phase-shift file from many atoms, and
atoms of one species may carry different displacement vectors (thermal or
geometric offsets).  The repository reads each distinct
``(file, displacement)`` combination once and hands out its **index**,
which the multiple-scattering solver keeps as a handle instead of
re-parsing.

Entries are compared by exact resolved path and by per-axis absolute
displacement difference below :data:`~pyleedphase.utils.constants.GEO_TOLERANCE`.
The store is append-only: the first matching entry always wins and no
entry is ever replaced or removed, so handles stay valid for the lifetime
of the repository.

Examples
--------
>>> repo = PhaseShiftRepository(PathResolver("/opt/cleed/phase"))
>>> repo.lookup_or_load("Ni", (0.0, 0.0, 0.0))
0
>>> repo.lookup_or_load("Ni", (0.0, 0.0, 0.00001))
0
>>> repo.lookup_or_load("Ni", (0.0, 0.0, 0.1))
1
>>> repo.get_table(1).lmax
8
"""

from __future__ import annotations

import dataclasses
import logging
import operator
import threading
from collections.abc import Iterator, Sequence
from pathlib import Path

import numpy as np

from pyleedphase.exceptions import IndexOutOfRangeError
from pyleedphase.io.paths import PathResolver
from pyleedphase.models.records import PhaseShiftTable
from pyleedphase.readers.base import BaseReader
from pyleedphase.readers.phase import PhaseShiftReader
from pyleedphase.utils.constants import GEO_TOLERANCE
from pyleedphase.utils.validation import validate_displacement

logger = logging.getLogger(__name__)


class PhaseShiftRepository:
    """Append-only, deduplicating collection of :class:`PhaseShiftTable`

    Parameters
    ----------
    resolver : PathResolver | None, optional
        Maps identifiers to paths.  Defaults to
        :meth:`PathResolver.from_env` (``CLEED_PHASE``).
    reader : BaseReader | None, optional
        Reader invoked on cache misses.  Defaults to a
        :class:`PhaseShiftReader` with the requested *precision*.
    tolerance : float, optional
        Absolute per-axis tolerance for displacement comparison.
    precision : str | numpy.dtype | None, optional
        Precision of the default reader; ignored when *reader* is given.
    validate : bool, optional
        Passed to the reader on every load.  Default ``False``.

    Notes
    -----
    :meth:`lookup_or_load` holds an internal lock across the scan and the
    append, so concurrent callers asking for the same key receive the same
    index and the file is parsed once.
    """

    def __init__(
        self,
        resolver: PathResolver | None = None,
        reader: BaseReader | None = None,
        *,
        tolerance: float = GEO_TOLERANCE,
        precision: str | np.dtype | None = None,
        validate: bool = False,
    ) -> None:
        self.resolver = resolver if resolver is not None else PathResolver.from_env()
        self.reader = reader if reader is not None else PhaseShiftReader(precision)
        self.tolerance = float(tolerance)
        self.validate = validate
        self._tables: list[PhaseShiftTable] = []
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def lookup_or_load(
        self,
        identifier: Path | str,
        displacement: Sequence[float] | np.ndarray,
    ) -> int:
        """Return the index of the table for *identifier* and *displacement*

        Parameters
        ----------
        identifier : Path | str
            Absolute path, or a name resolved to
            ``<CLEED_PHASE>/<identifier>.phs``.
        displacement : sequence of float
            Displacement vector ``(dx, dy, dz)``.

        Returns
        -------
        int
            Index of the matching table; on a miss, the index of the newly
            appended table (the previous number of tables).

        Raises
        ------
        ConfigurationError
            If *identifier* is relative and no search directory is set.
        ValidationError
            If *displacement* is not three finite reals, or the reader's
            post-parse checks fail.
        FileAccessError, FormatError, MalformedNumberError
            Propagated unchanged from the reader.
        """
        path = self.resolver.resolve(identifier)
        dr = validate_displacement(displacement)

        with self._lock:
            index = self._find(path, dr)
            if index is not None:
                logger.debug("Phase shifts for %s, dr=%s cached as table %d", path, dr.tolist(), index)
                return index

            index = len(self._tables)
            logger.info("Reading phase-shift file %s, table %d", path, index)
            table = self.reader.read(path, displacement=dr, validate=self.validate)
            if table.source_path != path or not np.array_equal(table.displacement, dr):
                table = dataclasses.replace(table, source_path=path, displacement=dr)
            self._tables.append(table)
            return index

    def find(
        self,
        identifier: Path | str,
        displacement: Sequence[float] | np.ndarray,
    ) -> int | None:
        """Return the index of a cached table, or ``None``, without loading"""
        path = self.resolver.resolve(identifier)
        dr = validate_displacement(displacement)
        with self._lock:
            return self._find(path, dr)

    def get_table(self, index: int) -> PhaseShiftTable:
        """Return the table stored under *index*

        Raises
        ------
        IndexOutOfRangeError
            If *index* was never returned by :meth:`lookup_or_load`.
        """
        try:
            idx = operator.index(index)
        except TypeError:
            raise IndexOutOfRangeError(f"Invalid phase-shift table handle {index!r}") from None

        n_tables = len(self._tables)
        if not 0 <= idx < n_tables:
            raise IndexOutOfRangeError(
                f"No phase-shift table with index {idx}; {n_tables} table(s) loaded"
            )
        return self._tables[idx]

    @property
    def tables(self) -> tuple[PhaseShiftTable, ...]:
        """Snapshot of all tables in insertion order."""
        return tuple(self._tables)

    def __len__(self) -> int:
        return len(self._tables)

    def __iter__(self) -> Iterator[PhaseShiftTable]:
        return iter(self.tables)

    def __getitem__(self, index: int) -> PhaseShiftTable:
        return self.get_table(index)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(n_tables={len(self)}, resolver={self.resolver!r})"

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _find(self, path: str, dr: np.ndarray) -> int | None:
        for index, table in enumerate(self._tables):
            if table.source_path != path:
                continue
            if np.all(np.abs(table.displacement - dr) < self.tolerance):
                return index
        return None


# ---------------------------------------------------------------------------
# Solver-facing functions
# ---------------------------------------------------------------------------

def load_phase_shifts(
    repository: PhaseShiftRepository,
    identifier: Path | str,
    displacement: Sequence[float] | np.ndarray,
) -> int:
    """Load (or find) phase shifts in *repository* and return the table index

    Thin functional wrapper around
    :meth:`PhaseShiftRepository.lookup_or_load` for callers that keep the
    repository in a run context.
    """
    return repository.lookup_or_load(identifier, displacement)


def get_table(repository: PhaseShiftRepository, index: int) -> PhaseShiftTable:
    """Return table *index* of *repository* (see :meth:`PhaseShiftRepository.get_table`)"""
    return repository.get_table(index)
