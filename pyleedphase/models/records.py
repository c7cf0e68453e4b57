#!/usr/bin/env python3
# -----------------------------------------------------------------------------
# Copyright (c) 2026 Melek Derman
#
# SPDX-License-Identifier: MIT
# -----------------------------------------------------------------------------

"""
Typed dataclass model for a parsed phase-shift table

A :class:`PhaseShiftTable` is immutable: the dataclass is frozen and its
NumPy arrays are flagged read-only, so a table handed out by the
repository can be shared by reference with the consuming solver.  Each
table owns its arrays; no two tables alias the same buffer.

Units
-----
* Energies are in **Hartree** (CLEED atomic energy unit, 27.18 eV),
  whatever the unit of the source file.
* Phase shifts are in **radians**, as tabulated.
* Displacements are in the units of the host geometry; they are only a
  cache-key component here.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

import numpy as np


def _frozen_copy(values, dtype=None) -> np.ndarray:
    arr = np.array(values, dtype=dtype, copy=True)
    arr.flags.writeable = False
    return arr


@dataclass(frozen=True, eq=False)
class PhaseShiftTable:
    """Phase shifts of one atomic species for one displacement vector

    Instances are returned by :meth:`PhaseShiftReader.read` and stored in
    :class:`~pyleedphase.repository.PhaseShiftRepository`.

    Parameters
    ----------
    source_path : str
        Absolute path of the ``.phs`` file the table was read from.
    displacement : numpy.ndarray
        Displacement vector, shape ``(3,)``.  Part of the repository cache
        key; not physically interpreted.
    lmax : int
        Maximum angular momentum quantum number.
    declared_energy_count : int
        Number of energies announced in the file header.
    actual_energy_count : int
        Number of energy / phase-shift pairs actually read.
    energies : numpy.ndarray
        Energies in Hartree, shape ``(declared_energy_count,)``.  Entries
        at and beyond ``actual_energy_count`` are zero.
    phase_shifts : numpy.ndarray
        Phase shifts, shape ``(declared_energy_count, lmax + 1)``, indexed
        ``[energy_index, l]``.  Unread rows are zero.
    min_energy : float
        First energy read.
    max_energy : float
        Last energy read after the first (see Notes).
    energy_unit : str
        Unit the file was written in (``"eV"``, ``"Ry"`` or
        ``"Hartree"``); energies are always stored in Hartree.

    Notes
    -----
    ``min_energy`` and ``max_energy`` follow the rule of the original LEED
    programs: the minimum is the first energy of the file and the maximum
    is the **last** energy read, which equals the true extrema only for an
    increasing grid.  A table with a single energy keeps
    ``max_energy == 0.0``.
    """

    source_path: str
    displacement: np.ndarray
    lmax: int
    declared_energy_count: int
    actual_energy_count: int
    energies: np.ndarray
    phase_shifts: np.ndarray
    min_energy: float = 0.0
    max_energy: float = 0.0
    energy_unit: str = "Hartree"

    def __post_init__(self) -> None:
        energies = _frozen_copy(self.energies)
        phase_shifts = _frozen_copy(self.phase_shifts, dtype=energies.dtype)
        displacement = _frozen_copy(self.displacement, dtype="f8").reshape(-1)

        if not 0 <= self.actual_energy_count <= self.declared_energy_count:
            raise ValueError(
                f"actual_energy_count={self.actual_energy_count} outside "
                f"[0, {self.declared_energy_count}]"
            )
        if energies.shape != (self.declared_energy_count,):
            raise ValueError(
                f"energies has shape {energies.shape}, expected "
                f"({self.declared_energy_count},)"
            )
        if phase_shifts.shape != (self.declared_energy_count, self.lmax + 1):
            raise ValueError(
                f"phase_shifts has shape {phase_shifts.shape}, expected "
                f"({self.declared_energy_count}, {self.lmax + 1})"
            )

        object.__setattr__(self, "energies", energies)
        object.__setattr__(self, "phase_shifts", phase_shifts)
        object.__setattr__(self, "displacement", displacement)

    @property
    def n_channels(self) -> int:
        """Number of angular momentum channels, ``lmax + 1``."""
        return self.lmax + 1

    @property
    def is_truncated(self) -> bool:
        """``True`` when the file ended before all declared energies."""
        return self.actual_energy_count < self.declared_energy_count

    @property
    def valid_energies(self) -> np.ndarray:
        """Read-only view of the energies that were actually read."""
        return self.energies[: self.actual_energy_count]

    @property
    def valid_phase_shifts(self) -> np.ndarray:
        """Read-only view of the phase-shift rows that were actually read."""
        return self.phase_shifts[: self.actual_energy_count]

    def with_displacement(self, displacement) -> PhaseShiftTable:
        """Return a copy of this table carrying another displacement vector

        The copy owns fresh arrays; nothing is shared with ``self``.
        """
        return dataclasses.replace(
            self,
            displacement=displacement,
            energies=self.energies.copy(),
            phase_shifts=self.phase_shifts.copy(),
        )
