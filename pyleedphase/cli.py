#!/usr/bin/env python3
# -----------------------------------------------------------------------------
# Copyright (c) 2026 Melek Derman
#
# SPDX-License-Identifier: MIT
# -----------------------------------------------------------------------------

"""
PyLEEDPhase command-line interface

Commands for inspecting and exporting phase-shift files:

1. **show**    — Parse files and print header data and the control table
2. **convert** — Load files through a repository and export to HDF5

Phase shifts are named either by path or by identifier; identifiers are
looked up in ``--phase-dir`` (default: ``$CLEED_PHASE``) with the
extension ``.phs``.

Usage
-----
::

    # Inspect a file
    python -m pyleedphase.cli show /opt/cleed/phase/Ni.phs

    # Inspect by identifier, single precision
    CLEED_PHASE=/opt/cleed/phase python -m pyleedphase.cli --precision single show Ni

    # Export two species into one HDF5 file
    python -m pyleedphase.cli --phase-dir phase convert Ni O -o tables.h5
"""

from __future__ import annotations

import argparse
import logging
import sys
import time
import warnings

from pyleedphase.exceptions import PhaseShiftError, TruncatedDataWarning
from pyleedphase.io.paths import PathResolver
from pyleedphase.readers.phase import format_control_table
from pyleedphase.repository import PhaseShiftRepository
from pyleedphase.utils.constants import REAL_DTYPES

logger = logging.getLogger("pyleedphase.cli")


def _make_repository(args) -> PhaseShiftRepository:
    resolver = PathResolver.from_env(search_dir=args.phase_dir)
    return PhaseShiftRepository(
        resolver,
        precision=args.precision,
        validate=args.validate,
    )


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

def cmd_show(args):
    """Print the header data and control table of each file."""
    repo = _make_repository(args)
    n_fail = 0

    for identifier in args.files:
        try:
            index = repo.lookup_or_load(identifier, args.displacement)
        except PhaseShiftError as exc:
            print(f"ERROR: {exc}")
            n_fail += 1
            if not args.continue_on_error:
                return 1
            continue

        table = repo.get_table(index)
        print(f"\n{table.source_path}")
        print(f"  energy input in {table.energy_unit}")
        print(
            f"  energies: {table.actual_energy_count} of "
            f"{table.declared_energy_count}, lmax = {table.lmax}"
        )
        print(f"  E_min = {table.min_energy:.4f} H, E_max = {table.max_energy:.4f} H\n")
        print(format_control_table(table))

    return 0 if n_fail == 0 else 1


def cmd_convert(args):
    """Export the given files to one HDF5 file."""
    from pyleedphase.converters.hdf5 import create_phase_shift_hdf5

    repo = _make_repository(args)
    for identifier in args.files:
        try:
            index = repo.lookup_or_load(identifier, args.displacement)
        except PhaseShiftError as exc:
            print(f"ERROR: {exc}")
            return 1
        print(f"  table {index:3d}: {repo.get_table(index).source_path}")

    try:
        out = create_phase_shift_hdf5(repo, args.output, overwrite=args.overwrite)
    except PhaseShiftError as exc:
        print(f"ERROR: {exc}")
        return 1

    print(f"\nWrote {len(repo)} table(s) to {out}")
    return 0


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def build_parser() -> argparse.ArgumentParser:
    """Build the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="pyleedphase",
        description="Inspect and convert CLEED phase-shift files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""\
Examples:
    python -m pyleedphase.cli show Ni.phs                     # print one table
    python -m pyleedphase.cli --phase-dir phase show Ni O     # by identifier
    python -m pyleedphase.cli convert Ni O -o tables.h5       # export to HDF5
""",
    )

    # Common arguments
    parser.add_argument(
        "--phase-dir", "-p",
        default=None,
        help="Directory searched for <identifier>.phs (default: $CLEED_PHASE)",
    )
    parser.add_argument(
        "--precision",
        choices=sorted(REAL_DTYPES),
        default="double",
        help="Floating-point precision of the tables (default: double)",
    )
    parser.add_argument(
        "--displacement", "--dr",
        nargs=3,
        type=float,
        default=[0.0, 0.0, 0.0],
        metavar=("DX", "DY", "DZ"),
        help="Displacement vector attached to the tables (default: 0 0 0)",
    )
    parser.add_argument(
        "--validate",
        action="store_true",
        help="Reject tables with decreasing energies or non-finite values",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    sub = parser.add_subparsers(dest="command", help="Command to run")

    show = sub.add_parser("show", help="Print phase-shift tables")
    show.add_argument("files", nargs="+", help="Paths or identifiers")
    show.add_argument(
        "--continue-on-error",
        action="store_true",
        help="Continue with the next file after errors",
    )

    convert = sub.add_parser("convert", help="Export phase-shift tables to HDF5")
    convert.add_argument("files", nargs="+", help="Paths or identifiers")
    convert.add_argument("--output", "-o", required=True, help="Output HDF5 file")
    convert.add_argument(
        "--overwrite",
        action="store_true",
        help="Overwrite an existing output file",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s: %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")

    if args.command is None:
        parser.print_help()
        return 0

    t0 = time.time()

    commands = {
        "show": cmd_show,
        "convert": cmd_convert,
    }

    # Truncation is already reported through logging.
    with warnings.catch_warnings():
        warnings.simplefilter("ignore", TruncatedDataWarning)
        rc = commands[args.command](args)
    logger.debug("Completed in %.3fs", time.time() - t0)
    return rc


if __name__ == "__main__":
    sys.exit(main())
