"""
Integration tests for the patrol zone pipeline.

These tests run raw records all the way to boundary segments.
"""

import logging

import pandas as pd
import pytest

from patrol_zones import PatrolZoneResult, ZoneConfig, generate_patrol_zones
from patrol_zones.spatial import KMeansConfig
from patrol_zones.spatial.points import CoordinateOrder

from tests.conftest import BASE_LAT, BASE_LNG


@pytest.mark.integration
class TestEndToEndPipeline:
    """Test records -> zones -> boundaries."""

    def test_three_squares_no_boundary(self, three_squares):
        result = generate_patrol_zones(three_squares, n_clusters=3)

        assert isinstance(result, PatrolZoneResult)
        assert len(result.primary_assignment) == 12

        groups = {}
        for idx, cid in result.primary_assignment.items():
            groups.setdefault(cid, set()).add(idx)
        assert sorted(groups) == [0, 1, 2]
        assert sorted(map(frozenset, groups.values()), key=min) == [
            frozenset({0, 1, 2, 3}),
            frozenset({4, 5, 6, 7}),
            frozenset({8, 9, 10, 11}),
        ]

        # One representative point per zone: no alpha shape possible
        assert result.boundary.first_endpoints == []
        assert result.boundary.second_endpoints == []
        assert not result.has_boundary

    def test_dense_zone_boundary(self, dense_zone):
        result = generate_patrol_zones(dense_zone, n_clusters=1)

        assert result.has_boundary
        assert len(result.boundary) == 4
        assert len(result.boundary.first_endpoints) == len(result.boundary.second_endpoints)

    def test_boundary_is_longitude_first(self, dense_zone):
        result = generate_patrol_zones(dense_zone, n_clusters=1)

        for x, y in result.boundary.first_endpoints + result.boundary.second_endpoints:
            assert x == pytest.approx(BASE_LNG, abs=0.05)
            assert y == pytest.approx(BASE_LAT, abs=0.05)

        longs, lats = result.boundary.as_lon_lat_pairs()
        assert all(lng > 30 for pair in longs for lng in pair)
        assert all(lat < 0 for pair in lats for lat in pair)

    def test_two_zones_merge_in_id_order(self, two_dense_zones):
        result = generate_patrol_zones(two_dense_zones, n_clusters=2)

        assert result.diagnostics.zones_with_boundary == [0, 1]
        assert len(result.boundary) == 8

        first_zone = result.zones[0]
        expected = [s.start.as_tuple() for s in first_zone.segments]
        assert result.boundary.first_endpoints[:4] == expected

    def test_idempotent_with_seeded_init(self, two_dense_zones):
        config = ZoneConfig(
            primary_kmeans=KMeansConfig(init="random", seed=11, n_init=5),
            secondary_kmeans=KMeansConfig(init="random", seed=5),
        )
        a = generate_patrol_zones(two_dense_zones, 2, config)
        b = generate_patrol_zones(two_dense_zones, 2, config)

        assert a.primary_assignment == b.primary_assignment
        assert a.boundary == b.boundary

    def test_parallel_output_matches_sequential(self, two_dense_zones):
        seq = generate_patrol_zones(two_dense_zones, 2, ZoneConfig(max_workers=None))
        par = generate_patrol_zones(two_dense_zones, 2, ZoneConfig(max_workers=4))

        assert seq.primary_assignment == par.primary_assignment
        assert seq.boundary == par.boundary


@pytest.mark.integration
class TestInputHandling:
    """Test degenerate and malformed input."""

    def test_empty_records(self):
        result = generate_patrol_zones([], n_clusters=3)

        assert result.primary_assignment == {}
        assert result.boundary.is_empty()
        assert result.zones == []

    def test_all_records_invalid(self):
        records = [{"Latitude": None, "Longitude": None}, {"Latitude": "x", "Longitude": 1}]
        result = generate_patrol_zones(records, n_clusters=3)

        assert result.primary_assignment == {}
        assert result.diagnostics.num_dropped_records == 2

    def test_zero_clusters(self, three_squares):
        result = generate_patrol_zones(three_squares, n_clusters=0)

        assert result.primary_assignment == {}
        assert result.boundary.is_empty()

    def test_clamped_cluster_count(self, three_squares):
        result = generate_patrol_zones(three_squares, n_clusters=100)

        assert result.diagnostics.effective_clusters == 12
        assert sorted(result.primary_assignment.values()) == list(range(12))

    def test_malformed_records_are_skipped(self, malformed_records):
        result = generate_patrol_zones(malformed_records, n_clusters=2)

        assert set(result.primary_assignment) == {0, 6, 7}
        assert result.diagnostics.num_dropped_records == 5

    def test_dataframe_input(self, records_df):
        result = generate_patrol_zones(records_df, n_clusters=1)

        assert len(result.primary_assignment) == len(records_df)
        assert result.has_boundary

    def test_generator_input(self, three_squares):
        result = generate_patrol_zones((r for r in three_squares), n_clusters=3)
        assert len(result.primary_assignment) == 12


@pytest.mark.integration
class TestResultHelpers:
    """Test caller-facing helpers."""

    def test_primary_groups_for_markers(self, three_squares):
        result = generate_patrol_zones(three_squares, n_clusters=3)
        groups = result.primary_groups()

        assert list(groups) == [0, 1, 2]
        assert all(len(members) == 4 for members in groups.values())
        assert all(p.order is CoordinateOrder.LNG_LAT for m in groups.values() for p in m)

    def test_records_for_zone(self, two_dense_zones):
        result = generate_patrol_zones(two_dense_zones, n_clusters=2)

        descriptions = {
            cid: {r["Description"] for r in result.records_for_zone(cid)}
            for cid in (0, 1)
        }
        assert descriptions[0] != descriptions[1]
        assert all(len(d) == 1 for d in descriptions.values())

    def test_run_is_logged(self, three_squares, caplog):
        with caplog.at_level(logging.INFO, logger="patrol_zones.pipeline"):
            generate_patrol_zones(three_squares, n_clusters=3)

        assert "Generating 3 patrol zones from 12 valid points" in caplog.text
        assert "Zone 0 has no boundary" in caplog.text
