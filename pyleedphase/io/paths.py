#!/usr/bin/env python3
# -----------------------------------------------------------------------------
# Copyright (c) 2026 Melek Derman
#
# SPDX-License-Identifier: MIT
# -----------------------------------------------------------------------------

"""
Resolution of phase-shift identifiers to file paths

Input files of the LEED programs name phase shifts either by an absolute
path or by a short identifier such as ``"Ni_bulk"``.  Short identifiers are
looked up as ``<search_dir>/<identifier>.phs`` where the search directory
comes from the ``CLEED_PHASE`` environment variable.

Examples
--------
>>> resolver = PathResolver("/opt/cleed/phase")
>>> resolver.resolve("Ni_bulk")
'/opt/cleed/phase/Ni_bulk.phs'
>>> resolver.resolve("/data/Ni.phs")
'/data/Ni.phs'
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from pyleedphase.exceptions import ConfigurationError
from pyleedphase.utils.constants import PHASE_DIR_ENV, PHASE_FILE_EXTENSION

logger = logging.getLogger(__name__)


class PathResolver:
    """Map phase-shift identifiers to absolute file paths

    Parameters
    ----------
    search_dir : Path | str | None, optional
        Directory holding ``.phs`` files.  ``None`` leaves relative
        identifiers unresolvable.
    extension : str, optional
        Extension appended to relative identifiers.  Default ``".phs"``.
    """

    def __init__(
        self,
        search_dir: Path | str | None = None,
        extension: str = PHASE_FILE_EXTENSION,
    ) -> None:
        self.search_dir = Path(search_dir) if search_dir else None
        self.extension = extension

    @classmethod
    def from_env(
        cls,
        environ: Mapping[str, str] | None = None,
        *,
        search_dir: Path | str | None = None,
    ) -> PathResolver:
        """Build a resolver from ``CLEED_PHASE``

        An explicit *search_dir* takes precedence over the environment.  An
        empty ``CLEED_PHASE`` counts as unset.
        """
        env = os.environ if environ is None else environ
        if search_dir is None:
            search_dir = env.get(PHASE_DIR_ENV) or None
        if search_dir is None:
            logger.debug("%s not set; only absolute phase-shift paths resolvable", PHASE_DIR_ENV)
        return cls(search_dir)

    def resolve(self, identifier: Path | str) -> str:
        """Return the absolute path for *identifier*

        Absolute identifiers are returned unchanged, without normalisation.

        Raises
        ------
        ConfigurationError
            If *identifier* is relative and no search directory is
            configured.
        """
        ident = os.fspath(identifier)
        if Path(ident).is_absolute():
            return ident

        if self.search_dir is None:
            raise ConfigurationError(
                f"Environment variable {PHASE_DIR_ENV} not defined; cannot "
                f"resolve relative phase-shift identifier {ident!r}",
            )
        return str((self.search_dir / f"{ident}{self.extension}").absolute())

    def __repr__(self) -> str:
        return f"{type(self).__name__}(search_dir={self.search_dir!r})"
