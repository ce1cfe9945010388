"""
Unit tests for hot spot grid clustering.

Tests cover:
- Minimum cell size and top-N ranking
- Centroid placement inside the originating cell
- Area name fallback chain (own code, nearby supplemental code, coordinates)
"""

import math

import pytest
import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../backend')))

from accident_analytics.models.accident import AuthorityMap
from accident_analytics.services.hotspot_service import (
    SupplementalLocator,
    grid_cell,
    identify_hotspots,
    resolve_area_name,
    summarize_hotspots,
)
from record_factory import make_accident, make_supplemental


GRID = 0.01
NO_AUTHORITIES = AuthorityMap({})


def cluster_at(latitude, longitude, count, **overrides):
    """`count` accidents spread slightly around a point inside one cell."""
    return [
        make_accident(latitude=latitude + i * 0.0001, longitude=longitude + i * 0.0001, **overrides)
        for i in range(count)
    ]


def scattered(count):
    """Accidents each alone in its own cell, well away from the test clusters."""
    return [
        make_accident(latitude=53.0 + (i // 100) * 0.05, longitude=-3.0 + (i % 100) * 0.05)
        for i in range(count)
    ]


class TestGridCell:
    """Test grid cell indexing."""

    def test_floor_indexing(self):
        assert grid_cell(51.5055, -0.1055, GRID) == (5150, -11)

    def test_negative_coordinates_floor_downwards(self):
        assert grid_cell(-0.005, -0.005, GRID) == (-1, -1)


class TestIdentifyHotspots:
    """Test hot spot detection."""

    def test_single_dense_cell_among_singletons(self):
        records = cluster_at(51.5051, -0.1059, 7) + scattered(4000)

        hotspots = identify_hotspots(records, NO_AUTHORITIES, grid_size=GRID, min_accidents=5, top_n=50)

        assert len(hotspots) == 1
        assert hotspots[0].count == 7
        assert hotspots[0].cell == (5150, -11)

    def test_cells_below_minimum_are_ignored(self):
        records = cluster_at(51.5051, -0.1059, 4)

        assert identify_hotspots(records, NO_AUTHORITIES, grid_size=GRID, min_accidents=5) == []

    def test_centroid_lies_within_cell(self):
        records = cluster_at(51.5051, -0.1059, 6) + cluster_at(52.4012, 1.2034, 9)

        for hotspot in identify_hotspots(records, NO_AUTHORITIES, grid_size=GRID, min_accidents=5):
            lat_idx, lon_idx = hotspot.cell
            assert hotspot.count >= 5
            assert lat_idx * GRID <= hotspot.latitude < (lat_idx + 1) * GRID
            assert lon_idx * GRID <= hotspot.longitude < (lon_idx + 1) * GRID

    def test_member_averages(self):
        records = cluster_at(51.5051, -0.1059, 5, severity_numeric=2, vehicles=3, casualties=1)
        records[0] = make_accident(
            latitude=51.5051, longitude=-0.1059, severity_numeric=3, vehicles=1, casualties=4
        )

        hotspot = identify_hotspots(records, NO_AUTHORITIES, grid_size=GRID, min_accidents=5)[0]

        assert hotspot.latitude == pytest.approx(sum(r.latitude for r in records) / 5)
        assert hotspot.avg_severity == pytest.approx(2.2)
        assert hotspot.avg_vehicles == pytest.approx(2.6)
        assert hotspot.avg_casualties == pytest.approx(1.6)

    def test_ranked_by_count_with_stable_ties(self):
        records = (
            cluster_at(51.5051, -0.1059, 5, region="A")
            + cluster_at(52.4012, 1.2034, 6, region="B")
            + cluster_at(53.3015, -2.2041, 5, region="C")
        )

        hotspots = identify_hotspots(records, NO_AUTHORITIES, grid_size=GRID, min_accidents=5)

        assert [h.members[0].region for h in hotspots] == ["B", "A", "C"]

    def test_top_n_limit(self):
        records = (
            cluster_at(51.5051, -0.1059, 5, region="A")
            + cluster_at(52.4012, 1.2034, 6, region="B")
            + cluster_at(53.3015, -2.2041, 5, region="C")
        )

        hotspots = identify_hotspots(records, NO_AUTHORITIES, grid_size=GRID, min_accidents=5, top_n=2)

        assert [h.members[0].region for h in hotspots] == ["B", "A"]

    def test_records_without_coordinates_are_skipped(self):
        records = cluster_at(51.5051, -0.1059, 5) + [make_accident(latitude=math.nan)] * 3

        hotspots = identify_hotspots(records, NO_AUTHORITIES, grid_size=GRID, min_accidents=5)

        assert len(hotspots) == 1
        assert hotspots[0].count == 5

    def test_empty_input(self):
        assert identify_hotspots([], NO_AUTHORITIES) == []


class TestAreaName:
    """Test the area name fallback chain."""

    def setup_method(self):
        self.authorities = AuthorityMap({"E09000033": "Westminster", "E09000022": "Lambeth"})

    def test_own_authority_code(self):
        sample = make_accident(local_authority_code="E09000033")

        assert resolve_area_name(sample, self.authorities) == "Westminster"

    def test_nearby_supplemental_code(self):
        sample = make_accident(latitude=51.5, longitude=-0.1)
        locator = SupplementalLocator(
            [make_supplemental(latitude=51.5004, longitude=-0.1003, local_authority_code="E09000022")],
            tolerance=0.001,
        )

        assert resolve_area_name(sample, self.authorities, locator) == "Lambeth"

    def test_first_supplemental_match_in_table_order_wins(self):
        sample = make_accident(latitude=51.5, longitude=-0.1)
        locator = SupplementalLocator(
            [
                make_supplemental(latitude=52.0, longitude=-1.0, local_authority_code="E09000033"),
                make_supplemental(latitude=51.5009, longitude=-0.1009, local_authority_code="E09000022"),
                make_supplemental(latitude=51.5, longitude=-0.1, local_authority_code="E09000033"),
            ],
            tolerance=0.001,
        )

        assert resolve_area_name(sample, self.authorities, locator) == "Lambeth"

    def test_unknown_own_code_falls_through_to_supplemental(self):
        sample = make_accident(local_authority_code="X00000000")
        locator = SupplementalLocator([make_supplemental(local_authority_code="E09000033")], tolerance=0.001)

        assert resolve_area_name(sample, self.authorities, locator) == "Westminster"

    def test_distant_supplemental_is_ignored(self):
        sample = make_accident(latitude=51.5, longitude=-0.1)
        locator = SupplementalLocator(
            [make_supplemental(latitude=51.502, longitude=-0.1, local_authority_code="E09000033")],
            tolerance=0.001,
        )

        assert resolve_area_name(sample, self.authorities, locator) == "51.500, -0.100"

    def test_coordinates_fallback(self):
        sample = make_accident(latitude=51.50749, longitude=-0.12781)

        assert resolve_area_name(sample, NO_AUTHORITIES) == "51.507, -0.128"

    def test_hotspot_uses_first_member_for_area_name(self):
        records = cluster_at(51.5051, -0.1059, 5)
        records[0] = make_accident(latitude=51.5051, longitude=-0.1059, local_authority_code="E09000022")

        hotspot = identify_hotspots(records, self.authorities, grid_size=GRID, min_accidents=5)[0]

        assert hotspot.area_name == "Lambeth"


class TestHotSpotSummary:
    """Test the hot spot headline figures."""

    def test_summary(self):
        records = cluster_at(51.5051, -0.1059, 5) + cluster_at(52.4012, 1.2034, 8)
        hotspots = identify_hotspots(records, NO_AUTHORITIES, grid_size=GRID, min_accidents=5)

        summary = summarize_hotspots(hotspots, detail_count=1)

        assert summary.total_hotspots == 2
        assert summary.total_accidents == 13
        assert summary.most_active.rank == 1
        assert summary.most_active.count == 8
        assert len(summary.details) == 1

    def test_empty_summary(self):
        summary = summarize_hotspots([])

        assert summary.total_hotspots == 0
        assert summary.most_active is None
        assert summary.details == []
