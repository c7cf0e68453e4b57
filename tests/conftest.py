#!/usr/bin/env python3
# -----------------------------------------------------------------------------
# Copyright (c) 2026 Melek Derman
#
# SPDX-License-Identifier: MIT
# -----------------------------------------------------------------------------

"""
Shared pytest fixtures for PyLEEDPhase tests

Provides synthetic ``.phs`` files written into ``tmp_path`` so that the
reader and repository can be tested without real phase-shift data.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from pyleedphase.models.records import PhaseShiftTable
from pyleedphase.readers.phase import PhaseShiftReader
from pyleedphase.utils.constants import PHASE_DIR_ENV

# Header "3 1 eV" with three (energy; phase shifts) pairs.
EV_TABLE_TEXT = """\
# synthetic phase shifts
# lmax = 1
3 1 eV
1.0
-0.1000 0.0500
2.0
-0.2000 0.1000
3.0
-0.3000 0.1500
"""

# Header declares five energies, file ends after three complete pairs.
TRUNCATED_TEXT = """\
5 2 Ry
1.0
-0.1000-0.2000-0.3000
2.0
-0.4000-0.5000-0.6000
3.0
 0.7000 0.8000 0.9000
"""

# FORTRAN-style file without blanks between negative numbers, no unit tag.
VHT_TEXT = """\
2 3
  0.2000
 -0.1234-0.2345 0.3456-0.4567
  0.4000
 -0.5678-0.6789-0.7890 0.8901
"""


@pytest.fixture
def write_phs(tmp_path: Path):
    """Factory writing *text* to ``tmp_path/<name>.phs`` and returning the path"""

    def _write(text: str, name: str = "sample") -> Path:
        path = tmp_path / f"{name}.phs"
        path.write_text(text)
        return path

    return _write


@pytest.fixture
def ev_phs(write_phs) -> Path:
    """Clean three-energy file in eV, lmax = 1"""
    return write_phs(EV_TABLE_TEXT, "Ni")


@pytest.fixture
def truncated_phs(write_phs) -> Path:
    """File declaring five energies but holding three pairs"""
    return write_phs(TRUNCATED_TEXT, "truncated")


@pytest.fixture
def vht_phs(write_phs) -> Path:
    """Legacy VHT-style file with packed negative numbers"""
    return write_phs(VHT_TEXT, "vht")


@pytest.fixture
def phase_dir(tmp_path: Path, monkeypatch) -> Path:
    """Directory holding ``Ni.phs`` and ``O.phs``, exported as CLEED_PHASE"""
    directory = tmp_path / "phase"
    directory.mkdir()
    (directory / "Ni.phs").write_text(EV_TABLE_TEXT)
    (directory / "O.phs").write_text(VHT_TEXT)
    monkeypatch.setenv(PHASE_DIR_ENV, str(directory))
    return directory


@pytest.fixture
def no_phase_env(monkeypatch) -> None:
    """Ensure CLEED_PHASE is not set"""
    monkeypatch.delenv(PHASE_DIR_ENV, raising=False)


@pytest.fixture
def sample_table() -> PhaseShiftTable:
    """Small in-memory table (two energies, lmax = 2)"""
    return PhaseShiftTable(
        source_path="/data/phase/Cu.phs",
        displacement=np.array([0.0, 0.0, 0.05]),
        lmax=2,
        declared_energy_count=3,
        actual_energy_count=2,
        energies=np.array([0.5, 1.0, 0.0]),
        phase_shifts=np.array(
            [[0.1, -0.2, 0.0], [0.3, -0.4, 0.05], [0.0, 0.0, 0.0]]
        ),
        min_energy=0.5,
        max_energy=1.0,
        energy_unit="Hartree",
    )


class CountingReader(PhaseShiftReader):
    """Reader recording every path it was asked to parse"""

    def __init__(self, precision=None) -> None:
        super().__init__(precision)
        self.calls: list[str] = []

    def read(self, path, **kwargs):
        self.calls.append(str(path))
        return super().read(path, **kwargs)


@pytest.fixture
def counting_reader() -> CountingReader:
    return CountingReader()
