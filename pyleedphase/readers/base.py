#!/usr/bin/env python3
# -----------------------------------------------------------------------------
# Copyright (c) 2026 Melek Derman
#
# SPDX-License-Identifier: MIT
# -----------------------------------------------------------------------------

"""
Abstract base class for phase-shift readers

The repository only depends on this interface, so any object implementing
:meth:`BaseReader.read` (for instance a reader for another tabulation
format, or an instrumented reader in tests) can back a
:class:`~pyleedphase.repository.PhaseShiftRepository`.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from pathlib import Path

import numpy as np

from pyleedphase.models.records import PhaseShiftTable

logger = logging.getLogger(__name__)

ZERO_DISPLACEMENT: tuple[float, float, float] = (0.0, 0.0, 0.0)


class BaseReader(ABC):
    """Abstract base for phase-shift file readers

    Subclasses must override :meth:`read` to open one file, parse it
    completely, release the file handle, and return a
    :class:`~pyleedphase.models.records.PhaseShiftTable`.

    Notes
    -----
    Readers must never write HDF5 or touch the repository; the dependency
    direction is::

        utils ← models ← readers ← repository ← converters
    """

    @abstractmethod
    def read(
        self,
        path: Path | str,
        *,
        displacement: Sequence[float] | np.ndarray = ZERO_DISPLACEMENT,
        validate: bool = False,
    ) -> PhaseShiftTable:
        """Parse a phase-shift file and return a table

        Parameters
        ----------
        path : Path | str
            Filesystem path of the phase-shift file.
        displacement : sequence of float, optional
            Displacement vector stored on the returned table.
        validate : bool, optional
            If ``True``, run post-parse checks on the rows read.  Default
            ``False``.

        Returns
        -------
        PhaseShiftTable
            The parsed, possibly truncated, table.

        Raises
        ------
        FileAccessError
            If the file cannot be opened.
        FormatError
            If the header is missing or malformed.
        MalformedNumberError
            If a data line holds too few numeric fields.
        ValidationError
            If *validate* is ``True`` and a post-parse check fails.
        """
        ...
