#!/usr/bin/env python3
# -----------------------------------------------------------------------------
# Copyright (c) 2026 Melek Derman
#
# SPDX-License-Identifier: MIT
# -----------------------------------------------------------------------------

"""
Tests for the phase-shift repository and identifier resolution

Covers deduplication within tolerance, append-only growth, configuration
failures, handle validation, error propagation, and concurrent loading.
"""

from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from pyleedphase.exceptions import (
    ConfigurationError,
    FileAccessError,
    FormatError,
    IndexOutOfRangeError,
    TruncatedDataWarning,
    ValidationError,
)
from pyleedphase.io.paths import PathResolver
from pyleedphase.repository import (
    PhaseShiftRepository,
    get_table,
    load_phase_shifts,
)
from pyleedphase.utils.constants import GEO_TOLERANCE, PHASE_DIR_ENV

ZERO = (0.0, 0.0, 0.0)


# -----------------------------------------------------------------------
# PathResolver
# -----------------------------------------------------------------------

class TestPathResolver:
    """Identifier to path mapping"""

    def test_relative_identifier(self, tmp_path) -> None:
        resolver = PathResolver(tmp_path)
        assert resolver.resolve("Ni") == str(tmp_path / "Ni.phs")

    def test_absolute_identifier_unchanged(self, tmp_path) -> None:
        target = tmp_path / "elsewhere" / "Ni_bulk.phs"
        assert PathResolver().resolve(target) == str(target)

    def test_relative_without_search_dir(self) -> None:
        with pytest.raises(ConfigurationError, match=PHASE_DIR_ENV):
            PathResolver().resolve("Ni")

    def test_from_env(self, phase_dir) -> None:
        resolver = PathResolver.from_env()
        assert resolver.resolve("O") == str(phase_dir / "O.phs")

    def test_from_env_unset(self, no_phase_env) -> None:
        assert PathResolver.from_env().search_dir is None

    def test_from_env_empty_counts_as_unset(self) -> None:
        assert PathResolver.from_env({PHASE_DIR_ENV: ""}).search_dir is None

    def test_explicit_dir_overrides_env(self, phase_dir, tmp_path) -> None:
        other = tmp_path / "other"
        resolver = PathResolver.from_env(search_dir=other)
        assert resolver.resolve("Ni") == str(other / "Ni.phs")

    def test_absolute_identifier_not_normalised(self) -> None:
        assert PathResolver().resolve("/a/./b//c.phs") == "/a/./b//c.phs"


# -----------------------------------------------------------------------
# lookup_or_load
# -----------------------------------------------------------------------

class TestLookupOrLoad:
    """Cache hits, misses, and growth"""

    def test_first_load_returns_zero(self, phase_dir) -> None:
        repo = PhaseShiftRepository()
        assert repo.lookup_or_load("Ni", ZERO) == 0
        assert len(repo) == 1

    def test_repeat_returns_same_index(self, phase_dir, counting_reader) -> None:
        repo = PhaseShiftRepository(reader=counting_reader)
        first = repo.lookup_or_load("Ni", ZERO)
        second = repo.lookup_or_load("Ni", ZERO)
        assert first == second == 0
        assert len(counting_reader.calls) == 1
        assert len(repo) == 1

    def test_within_tolerance_is_hit(self, phase_dir, counting_reader) -> None:
        repo = PhaseShiftRepository(reader=counting_reader)
        repo.lookup_or_load("Ni", (0.1, 0.2, 0.3))
        nearby = (0.1 + 0.5 * GEO_TOLERANCE, 0.2 - 0.5 * GEO_TOLERANCE, 0.3)
        assert repo.lookup_or_load("Ni", nearby) == 0
        assert len(counting_reader.calls) == 1

    @pytest.mark.parametrize("axis", [0, 1, 2])
    def test_beyond_tolerance_on_any_axis_is_miss(self, phase_dir, axis) -> None:
        repo = PhaseShiftRepository()
        repo.lookup_or_load("Ni", ZERO)
        dr = np.zeros(3)
        dr[axis] = 2 * GEO_TOLERANCE
        assert repo.lookup_or_load("Ni", dr) == 1
        assert len(repo) == 2

    def test_new_index_is_previous_length(self, phase_dir) -> None:
        repo = PhaseShiftRepository()
        repo.lookup_or_load("Ni", ZERO)
        repo.lookup_or_load("O", ZERO)
        before = len(repo)
        assert repo.lookup_or_load("Ni", (0.0, 0.0, 0.25)) == before

    def test_same_file_by_name_and_path(self, phase_dir, counting_reader) -> None:
        repo = PhaseShiftRepository(reader=counting_reader)
        by_name = repo.lookup_or_load("Ni", ZERO)
        by_path = repo.lookup_or_load(str(phase_dir / "Ni.phs"), ZERO)
        assert by_name == by_path
        assert len(counting_reader.calls) == 1

    def test_first_match_wins(self, phase_dir) -> None:
        repo = PhaseShiftRepository()
        repo.lookup_or_load("Ni", (0.0, 0.0, 0.0))
        repo.lookup_or_load("Ni", (0.0, 0.0, 1.5 * GEO_TOLERANCE))
        # Within tolerance of both entries: the earlier one is returned.
        assert repo.lookup_or_load("Ni", (0.0, 0.0, 0.75 * GEO_TOLERANCE)) == 0

    def test_table_carries_requested_displacement(self, phase_dir) -> None:
        repo = PhaseShiftRepository()
        index = repo.lookup_or_load("O", (0.01, -0.02, 0.03))
        table = repo.get_table(index)
        np.testing.assert_array_equal(table.displacement, [0.01, -0.02, 0.03])
        assert table.source_path == str(phase_dir / "O.phs")

    def test_tables_do_not_alias(self, phase_dir) -> None:
        repo = PhaseShiftRepository()
        a = repo.get_table(repo.lookup_or_load("Ni", ZERO))
        b = repo.get_table(repo.lookup_or_load("Ni", (0.0, 0.0, 1.0)))
        assert not np.shares_memory(a.energies, b.energies)
        assert not np.shares_memory(a.phase_shifts, b.phase_shifts)

    def test_precision_passed_to_reader(self, phase_dir) -> None:
        repo = PhaseShiftRepository(precision="single")
        table = repo.get_table(repo.lookup_or_load("Ni", ZERO))
        assert table.energies.dtype == np.float32

    def test_custom_tolerance(self, phase_dir) -> None:
        repo = PhaseShiftRepository(tolerance=0.1)
        repo.lookup_or_load("Ni", ZERO)
        assert repo.lookup_or_load("Ni", (0.05, 0.05, 0.05)) == 0

    def test_find_does_not_load(self, phase_dir, counting_reader) -> None:
        repo = PhaseShiftRepository(reader=counting_reader)
        assert repo.find("Ni", ZERO) is None
        assert counting_reader.calls == []
        repo.lookup_or_load("Ni", ZERO)
        assert repo.find("Ni", ZERO) == 0

    def test_truncated_file_still_cached(self, tmp_path, truncated_phs) -> None:
        repo = PhaseShiftRepository(PathResolver(tmp_path))
        with pytest.warns(TruncatedDataWarning):
            index = repo.lookup_or_load("truncated", ZERO)
        assert repo.get_table(index).actual_energy_count == 3
        assert repo.lookup_or_load("truncated", ZERO) == index

    def test_unordered_energies_load_by_default(self, write_phs, tmp_path) -> None:
        write_phs("3 0\n1.0\n0.1\n3.0\n0.2\n2.0\n0.3\n", "unordered")
        repo = PhaseShiftRepository(PathResolver(tmp_path))
        table = repo.get_table(repo.lookup_or_load("unordered", ZERO))
        assert table.actual_energy_count == 3
        assert table.max_energy == 2.0

    def test_validation_is_opt_in(self, write_phs, tmp_path) -> None:
        write_phs("3 0\n1.0\n0.1\n3.0\n0.2\n2.0\n0.3\n", "unordered")
        repo = PhaseShiftRepository(PathResolver(tmp_path), validate=True)
        with pytest.raises(ValidationError):
            repo.lookup_or_load("unordered", ZERO)
        assert len(repo) == 0

    def test_unnormalised_path_is_cache_key(self, phase_dir, counting_reader) -> None:
        repo = PhaseShiftRepository(reader=counting_reader)
        spelled = f"{phase_dir}/./Ni.phs"
        index = repo.lookup_or_load(spelled, ZERO)
        assert repo.get_table(index).source_path == spelled
        assert repo.lookup_or_load(spelled, ZERO) == index
        assert len(counting_reader.calls) == 1


class TestFailures:
    """Errors reach the caller as typed exceptions"""

    def test_relative_identifier_without_config(self, no_phase_env) -> None:
        repo = PhaseShiftRepository()
        with pytest.raises(ConfigurationError):
            repo.lookup_or_load("Ni", ZERO)
        assert len(repo) == 0

    def test_absolute_path_without_config(self, no_phase_env, ev_phs) -> None:
        repo = PhaseShiftRepository()
        assert repo.lookup_or_load(str(ev_phs), ZERO) == 0

    def test_missing_file_propagates(self, phase_dir) -> None:
        repo = PhaseShiftRepository()
        with pytest.raises(FileAccessError):
            repo.lookup_or_load("Fe", ZERO)
        assert len(repo) == 0

    def test_format_error_propagates(self, phase_dir) -> None:
        (phase_dir / "bad.phs").write_text("# header follows\nnot a header\n")
        repo = PhaseShiftRepository()
        with pytest.raises(FormatError):
            repo.lookup_or_load("bad", ZERO)
        assert len(repo) == 0

    def test_failure_does_not_poison_later_loads(self, phase_dir) -> None:
        repo = PhaseShiftRepository()
        with pytest.raises(FileAccessError):
            repo.lookup_or_load("Fe", ZERO)
        assert repo.lookup_or_load("Ni", ZERO) == 0

    def test_bad_displacement(self, phase_dir) -> None:
        repo = PhaseShiftRepository()
        with pytest.raises(ValidationError):
            repo.lookup_or_load("Ni", (0.0, 0.0, 0.0, 0.0))


class TestGetTable:
    """Handle validation"""

    def test_returns_loaded_table(self, phase_dir) -> None:
        repo = PhaseShiftRepository()
        index = repo.lookup_or_load("Ni", ZERO)
        assert repo.get_table(index).lmax == 1
        assert repo[index] is repo.get_table(index)

    @pytest.mark.parametrize("index", [0, 1, -1, 100])
    def test_unknown_index_on_empty(self, index) -> None:
        repo = PhaseShiftRepository(PathResolver())
        with pytest.raises(IndexOutOfRangeError):
            repo.get_table(index)

    def test_negative_index_rejected(self, phase_dir) -> None:
        repo = PhaseShiftRepository()
        repo.lookup_or_load("Ni", ZERO)
        with pytest.raises(IndexOutOfRangeError):
            repo.get_table(-1)

    def test_non_integer_handle(self, phase_dir) -> None:
        repo = PhaseShiftRepository()
        repo.lookup_or_load("Ni", ZERO)
        with pytest.raises(IndexOutOfRangeError):
            repo.get_table(0.0)

    def test_also_an_index_error(self) -> None:
        with pytest.raises(IndexError):
            PhaseShiftRepository(PathResolver()).get_table(3)

    def test_iteration_in_insertion_order(self, phase_dir) -> None:
        repo = PhaseShiftRepository()
        repo.lookup_or_load("O", ZERO)
        repo.lookup_or_load("Ni", ZERO)
        names = [table.source_path.rsplit("/", 1)[-1] for table in repo]
        assert names == ["O.phs", "Ni.phs"]


class TestFunctionalInterface:
    """Solver-facing load_phase_shifts / get_table"""

    def test_round_trip(self, phase_dir) -> None:
        repo = PhaseShiftRepository()
        index = load_phase_shifts(repo, "Ni", ZERO)
        assert get_table(repo, index).declared_energy_count == 3
        assert load_phase_shifts(repo, "Ni", ZERO) == index


class TestConcurrency:
    """Racing lookups for the same key produce one table"""

    def test_parallel_lookups_parse_once(self, phase_dir, counting_reader) -> None:
        repo = PhaseShiftRepository(reader=counting_reader)
        barrier = threading.Barrier(8)

        def load(_):
            barrier.wait()
            return repo.lookup_or_load("Ni", ZERO)

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = list(pool.map(load, range(8)))

        assert set(results) == {0}
        assert len(repo) == 1
        assert len(counting_reader.calls) == 1

    def test_parallel_distinct_keys(self, phase_dir) -> None:
        repo = PhaseShiftRepository()
        displacements = [(0.0, 0.0, 0.1 * k) for k in range(6)]

        with ThreadPoolExecutor(max_workers=6) as pool:
            results = list(pool.map(lambda dr: repo.lookup_or_load("O", dr), displacements))

        assert sorted(results) == list(range(6))
        for dr, index in zip(displacements, results):
            np.testing.assert_allclose(repo.get_table(index).displacement, dr)
