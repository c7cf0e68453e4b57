#!/usr/bin/env python3
# -----------------------------------------------------------------------------
# Copyright (c) 2026 Melek Derman
#
# SPDX-License-Identifier: MIT
# -----------------------------------------------------------------------------

"""
Validation routines for displacement vectors and parsed phase-shift tables

Every validation function raises :class:`~pyleedphase.exceptions.ValidationError`
when a constraint is violated.

Checked Constraints
-------------------
* Displacement vectors hold exactly three finite real components.
* Energy grids (read rows only) are monotonically non-decreasing.
* Energies and phase shifts (read rows only) are finite.

Design Note
-----------
Validation functions accept raw NumPy arrays, not dataclass model
instances, so that the ``models`` layer does not depend on ``utils``
validation.  This keeps the import graph acyclic::

    utils ← models ← readers ← repository ← converters
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from pyleedphase.exceptions import ValidationError
from pyleedphase.utils.constants import DISPLACEMENT_SIZE

logger = logging.getLogger(__name__)


def validate_displacement(displacement: Sequence[float] | np.ndarray) -> np.ndarray:
    """Check and normalise a displacement vector

    Parameters
    ----------
    displacement : sequence of float
        Three real components ``(dx, dy, dz)``.

    Returns
    -------
    numpy.ndarray
        Read-only ``float64`` copy of shape ``(3,)``.

    Raises
    ------
    ValidationError
        If the vector does not have three components or any component is
        not a finite real number.

    Examples
    --------
    >>> validate_displacement([0.0, 0.0, 0.1])
    array([0. , 0. , 0.1])
    """
    try:
        arr = np.array(displacement, dtype="f8").reshape(-1)
    except (TypeError, ValueError) as exc:
        raise ValidationError(
            f"Displacement {displacement!r} is not a real-valued vector"
        ) from exc

    if arr.size != DISPLACEMENT_SIZE:
        raise ValidationError(
            f"Displacement must have {DISPLACEMENT_SIZE} components, "
            f"got {arr.size}"
        )
    if not np.all(np.isfinite(arr)):
        raise ValidationError(f"Displacement {arr.tolist()} has non-finite components")

    arr.flags.writeable = False
    return arr


def validate_energy_monotonic(
    energy: np.ndarray,
    label: str = "energy",
    path: str | None = None,
) -> None:
    """Verify that an energy array is monotonically non-decreasing

    Parameters
    ----------
    energy : numpy.ndarray
        1-D array of energies.  Pass only the rows that were actually
        read; zero-filled trailing entries of truncated tables would
        otherwise always fail.
    label : str, optional
        Human-readable name of the array for error messages.
    path : str | None, optional
        Source file, attached to the raised error.

    Raises
    ------
    ValidationError
        If any ``energy[i] > energy[i+1]``.
    """
    arr = np.asarray(energy, dtype="f8")
    if arr.size < 2:
        return
    diff = np.diff(arr)
    if np.any(diff < 0):
        first_bad = int(np.argmax(diff < 0))
        raise ValidationError(
            f"Array '{label}' is not monotonically non-decreasing.  "
            f"First violation at index {first_bad}: "
            f"{arr[first_bad]:.6e} > {arr[first_bad + 1]:.6e}.",
            path=path,
        )
    logger.debug("Array '%s' (%d points) passed monotonicity check.", label, arr.size)


def validate_finite(values: np.ndarray, label: str = "values", path: str | None = None) -> None:
    """Verify that all values are finite (no NaN or infinity)

    Raises
    ------
    ValidationError
        If any entry of *values* is NaN or infinite.
    """
    arr = np.asarray(values)
    bad = ~np.isfinite(arr)
    if np.any(bad):
        raise ValidationError(
            f"Array '{label}' contains {int(bad.sum())} non-finite value(s).",
            path=path,
        )
