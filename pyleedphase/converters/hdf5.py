#!/usr/bin/env python3
# -----------------------------------------------------------------------------
# Copyright (c) 2026 Melek Derman
#
# SPDX-License-Identifier: MIT
# -----------------------------------------------------------------------------

"""
HDF5 export of phase-shift tables

Writes the tables of a repository (or any sequence of tables) into a single
HDF5 file, one group per table in repository order, so that a table index
used by the solver is also the group number in the file.

HDF5 Layout
-----------
::

    /metadata/
        n_tables                 int64
        energy_unit              "Hartree"

    /tables/table_000/
        energies                 (n_energies,)        attrs: units
        phase_shifts             (n_energies, lmax+1) attrs: units
        displacement             (3,)
        attrs: source_path, lmax, declared_energy_count,
               actual_energy_count, min_energy, max_energy,
               source_energy_unit

Arrays are written with their full declared length; for truncated tables
``actual_energy_count`` tells how many rows hold data.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from pathlib import Path

import numpy as np

try:
    import h5py
except ImportError as _exc:
    raise ImportError(
        "The 'h5py' package is required.  Install with: pip install h5py"
    ) from _exc

from pyleedphase.exceptions import ConversionError
from pyleedphase.models.records import PhaseShiftTable
from pyleedphase.readers.base import ZERO_DISPLACEMENT
from pyleedphase.readers.phase import PhaseShiftReader
from pyleedphase.repository import PhaseShiftRepository

logger = logging.getLogger(__name__)


def table_group_name(index: int) -> str:
    """Name of the HDF5 group holding table *index*, e.g. ``table_007``."""
    return f"table_{index:03d}"


# ---------------------------------------------------------------------------
# Writers
# ---------------------------------------------------------------------------

def _write_metadata(h5f: h5py.File, n_tables: int) -> None:
    """Write ``/metadata`` group."""
    meta = h5f.create_group("metadata")
    meta.create_dataset("n_tables", data=np.int64(n_tables))
    meta.create_dataset("energy_unit", data="Hartree")


def write_phase_shift_table(grp: h5py.Group, table: PhaseShiftTable) -> None:
    """Write one table into an (empty) HDF5 group

    Parameters
    ----------
    grp : h5py.Group
        Destination group, open for writing.
    table : PhaseShiftTable
        Table to write.
    """
    ds_e = grp.create_dataset("energies", data=table.energies)
    ds_e.attrs["units"] = "Hartree"
    ds_ps = grp.create_dataset("phase_shifts", data=table.phase_shifts)
    ds_ps.attrs["units"] = "rad"
    grp.create_dataset("displacement", data=table.displacement)

    grp.attrs["source_path"] = table.source_path
    grp.attrs["lmax"] = np.int64(table.lmax)
    grp.attrs["declared_energy_count"] = np.int64(table.declared_energy_count)
    grp.attrs["actual_energy_count"] = np.int64(table.actual_energy_count)
    grp.attrs["min_energy"] = np.float64(table.min_energy)
    grp.attrs["max_energy"] = np.float64(table.max_energy)
    grp.attrs["source_energy_unit"] = table.energy_unit


def write_phase_shift_tables(h5f: h5py.File, tables: Sequence[PhaseShiftTable]) -> None:
    """Write ``/metadata`` and one ``/tables/table_NNN`` group per table."""
    _write_metadata(h5f, len(tables))
    root = h5f.create_group("tables")
    for index, table in enumerate(tables):
        write_phase_shift_table(root.create_group(table_group_name(index)), table)
        logger.debug("Wrote table %d (%s)", index, table.source_path)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def create_phase_shift_hdf5(
    tables: PhaseShiftRepository | Iterable[PhaseShiftTable],
    output_path: Path | str,
    *,
    overwrite: bool = False,
) -> Path:
    """Write every table of a repository (or iterable) into one HDF5 file

    Parameters
    ----------
    tables : PhaseShiftRepository | iterable of PhaseShiftTable
        Tables to export, in index order.
    output_path : Path | str
        Destination HDF5 file.
    overwrite : bool, optional
        If ``True``, replace an existing file.  If ``False`` (default),
        raise :class:`~pyleedphase.exceptions.ConversionError` when the
        file exists.

    Returns
    -------
    Path
        The written file.

    Raises
    ------
    ConversionError
        If *overwrite* is ``False`` and *output_path* exists, or if
        ``h5py`` fails while writing.
    """
    out = Path(output_path)
    if out.exists() and not overwrite:
        raise ConversionError(
            f"Output file {out} already exists and overwrite=False.",
            path=str(out),
        )

    items = list(tables)
    out.parent.mkdir(parents=True, exist_ok=True)
    try:
        mode = "w" if overwrite else "w-"
        with h5py.File(str(out), mode) as h5f:
            write_phase_shift_tables(h5f, items)
    except Exception as exc:
        if isinstance(exc, ConversionError):
            raise
        raise ConversionError(f"Failed to write phase-shift HDF5 {out}: {exc}", path=str(out)) from exc

    logger.info("Wrote %d phase-shift table(s) to %s", len(items), out)
    return out


def convert_phase_shift_file(
    source_path: Path | str,
    output_path: Path | str,
    *,
    displacement: Sequence[float] = ZERO_DISPLACEMENT,
    precision: str | np.dtype | None = None,
    validate: bool = False,
    overwrite: bool = False,
) -> Path:
    """Read one ``.phs`` file and write it as a single-table HDF5 file

    Examples
    --------
    >>> convert_phase_shift_file("phase/Ni.phs", "hdf5/Ni.h5")  # doctest: +SKIP
    PosixPath('hdf5/Ni.h5')
    """
    out = Path(output_path)
    if out.exists() and not overwrite:
        raise ConversionError(
            f"Output file {out} already exists and overwrite=False.",
            path=str(out),
        )
    table = PhaseShiftReader(precision).read(
        source_path, displacement=displacement, validate=validate
    )
    return create_phase_shift_hdf5([table], out, overwrite=overwrite)
