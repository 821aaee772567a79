"""Tests for RealizationResolver: dispatch, de-duplication and lookup failures."""

import logging

import pytest

from conftest import FakeMetadataStore, make_cube
from hbase_diag.metadata import CubeRealization, Segment, UnsupportedRealization
from hbase_diag.resolution import (
    NotFoundError,
    RealizationResolver,
    ResolveMode,
    storage_identifiers,
)


class TestStorageIdentifiers:
    def test_cube_yields_segment_tables_in_order(self):
        cube = make_cube("c", "t1", "t2", "t3")
        assert storage_identifiers(cube) == ["t1", "t2", "t3"]

    def test_segment_without_table_is_skipped(self):
        cube = CubeRealization(
            name="c",
            segments=[Segment(name="a", storage_location_identifier="t1"), Segment(name="b")],
        )
        assert storage_identifiers(cube) == ["t1"]

    def test_unsupported_kind_contributes_nothing_and_warns(self, caplog):
        with caplog.at_level(logging.WARNING):
            result = storage_identifiers(UnsupportedRealization(kind="HYBRID", name="h"))
        assert result == []
        assert "Unknown realization type: HYBRID" in caplog.text


class TestResolveByCube:
    def test_duplicate_segment_tables_keep_first_occurrence(self, store):
        resolver = RealizationResolver(store)
        assert resolver.resolve(ResolveMode.BY_CUBE, ["sales"]) == ["KYLIN_T1", "KYLIN_T2"]

    def test_tables_shared_across_cubes_appear_once(self, store):
        resolver = RealizationResolver(store)
        result = resolver.resolve(ResolveMode.BY_CUBE, ["sales", "orders"])
        assert result == ["KYLIN_T1", "KYLIN_T2", "KYLIN_T3"]

    def test_input_order_is_preserved(self, store):
        resolver = RealizationResolver(store)
        result = resolver.resolve(ResolveMode.BY_CUBE, ["orders", "sales"])
        assert result == ["KYLIN_T2", "KYLIN_T3", "KYLIN_T1"]

    def test_cube_without_segments(self, store):
        assert RealizationResolver(store).resolve(ResolveMode.BY_CUBE, ["empty"]) == []

    def test_unknown_cube_raises(self, store):
        with pytest.raises(NotFoundError) as excinfo:
            RealizationResolver(store).resolve(ResolveMode.BY_CUBE, ["sales", "missing"])
        assert excinfo.value.subject == "cube"
        assert excinfo.value.name == "missing"
        assert "missing" in str(excinfo.value)


class TestResolveByProject:
    def test_project_realizations_in_listed_order(self, store):
        result = RealizationResolver(store).resolve(ResolveMode.BY_PROJECT, ["retail"])
        assert result == ["KYLIN_T1", "KYLIN_T2", "KYLIN_T3"]

    def test_unsupported_realization_is_skipped(self, store, caplog):
        with caplog.at_level(logging.WARNING):
            RealizationResolver(store).resolve(ResolveMode.BY_PROJECT, ["retail"])
        assert "sales_hybrid" in caplog.text

    def test_overlapping_projects_do_not_duplicate(self, store):
        result = RealizationResolver(store).resolve(ResolveMode.BY_PROJECT, ["archive", "retail"])
        assert result == ["KYLIN_T2", "KYLIN_T3", "KYLIN_T1"]
        assert len(result) == len(set(result))

    def test_unregistered_entry_is_skipped(self, store, caplog):
        with caplog.at_level(logging.WARNING):
            result = RealizationResolver(store).resolve(ResolveMode.BY_PROJECT, ["archive"])
        assert result == ["KYLIN_T2", "KYLIN_T3"]
        assert "gone" in caplog.text

    def test_unknown_project_raises(self, store):
        with pytest.raises(NotFoundError) as excinfo:
            RealizationResolver(store).resolve(ResolveMode.BY_PROJECT, ["retail", "nope"])
        assert excinfo.value.subject == "project"
        assert excinfo.value.name == "nope"

    def test_empty_project(self):
        store = FakeMetadataStore(projects={"blank": []})
        assert RealizationResolver(store).resolve(ResolveMode.BY_PROJECT, ["blank"]) == []
