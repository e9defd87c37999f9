"""Tests for geometry module."""

import numpy as np
import pytest
from dronelog.constants import EARTH_RADIUS_M
from dronelog.exceptions import InvalidArgumentError
from dronelog.geometry import (
    clean_track,
    estimate_zoom,
    haversine_array,
    haversine_distance,
    smooth_track,
    track_bounds,
    track_center,
)


class TestHaversineDistance:
    """Tests for haversine_distance function."""

    def test_zero_distance(self):
        """Test distance between same point is zero."""
        assert haversine_distance(47.3, 8.5, 47.3, 8.5) == 0

    def test_equator_degree(self):
        """Test one degree of longitude along the equator."""
        assert haversine_distance(0, 0, 0, 1) == pytest.approx(111195, abs=5)

    def test_symmetry(self):
        """Test d(a, b) == d(b, a)."""
        d1 = haversine_distance(40.7128, -74.0060, 51.5074, -0.1278)
        d2 = haversine_distance(51.5074, -0.1278, 40.7128, -74.0060)
        assert d1 == pytest.approx(d2)
        assert d1 == pytest.approx(5_570_000, rel=0.01)

    def test_antipodal_points(self):
        """Test half circumference between antipodes."""
        assert haversine_distance(0, 0, 0, 180) == pytest.approx(EARTH_RADIUS_M * np.pi)


class TestHaversineArray:
    """Tests for haversine_array function."""

    def test_matches_scalar(self):
        """Test vectorised result equals scalar distance."""
        lats = np.array([47.0, 47.001, 47.01])
        lons = np.array([8.0, 8.001, 8.02])
        result = haversine_array(47.0, 8.0, lats, lons)
        for i in range(3):
            assert result[i] == pytest.approx(haversine_distance(47.0, 8.0, lats[i], lons[i]))

    def test_nan_propagates(self):
        """Test NaN inputs produce NaN distances."""
        result = haversine_array(47.0, 8.0, np.array([np.nan]), np.array([8.0]))
        assert np.isnan(result[0])


class TestTrackCenter:
    """Tests for track_center function."""

    def test_empty_track(self):
        """Test empty track has no centre."""
        assert track_center([]) is None

    def test_mean_of_points(self):
        """Test centre is the arithmetic mean of lon and lat."""
        assert track_center([[8.0, 47.0, 0], [10.0, 49.0, 5]]) == [9.0, 48.0]

    def test_skips_points_without_fix(self):
        """Test null lon/lat points are left out of the mean."""
        points = [[8.0, 47.0, 0], [None, None, 2.0], [10.0, 49.0, None]]
        assert track_center(points) == [9.0, 48.0]

    def test_no_fix_at_all(self):
        """Test a track with no fixed point has no centre."""
        assert track_center([[None, None, 2.0], [8.0, None, 1.0]]) is None


class TestTrackBounds:
    """Tests for track_bounds function."""

    def test_empty_track(self):
        """Test empty track has no bounds."""
        assert track_bounds([]) is None

    def test_single_point(self):
        """Test a single point is its own bounding box."""
        assert track_bounds([[8.0, 47.0, 0]]) == [[8.0, 47.0], [8.0, 47.0]]

    def test_bounds(self):
        """Test min/max over unordered points."""
        points = [[8.5, 47.2, 0], [8.1, 47.9, 0], [8.9, 47.0, 0]]
        assert track_bounds(points) == [[8.1, 47.0], [8.9, 47.9]]

    def test_skips_points_without_fix(self):
        """Test null lon/lat points do not affect the box."""
        points = [[None, None, 2.0], [8.5, 47.2, None], [8.1, None, 0], [8.9, 47.0, 0]]
        assert track_bounds(points) == [[8.5, 47.0], [8.9, 47.2]]

    def test_no_fix_at_all(self):
        """Test a track with no fixed point has no bounds."""
        assert track_bounds([[None, None, 2.0]]) is None


class TestCleanTrack:
    """Tests for clean_track function."""

    def test_drops_missing_fix_and_defaults_height(self):
        """Test null positions are dropped and null heights become 0."""
        points = [[8.0, 47.0, None], [None, 47.1, 3.0], [8.2, 47.2], [8.3, 47.3, 4.0]]
        assert clean_track(points) == [
            [8.0, 47.0, 0.0],
            [8.2, 47.2, 0.0],
            [8.3, 47.3, 4.0],
        ]


class TestSmoothTrack:
    """Tests for smooth_track function."""

    def test_resolution_zero_is_identity(self):
        """Test zero resolution inserts nothing."""
        points = [[0, 0, 0], [1, 1, 1], [2, 0, 2]]
        assert smooth_track(points, 0) == points

    def test_short_track_unchanged(self):
        """Test fewer than three points are returned as-is."""
        points = [[0, 0, 0], [1, 1, 1]]
        assert smooth_track(points, 4) == points

    def test_negative_resolution(self):
        """Test negative resolution is rejected."""
        with pytest.raises(InvalidArgumentError):
            smooth_track([[0, 0, 0], [1, 1, 1], [2, 2, 2]], -1)

    def test_point_count(self):
        """Test (n - 1) * (resolution + 1) + 1 output points."""
        points = [[0, 0, 0], [1, 1, 1], [2, 0, 2], [3, 1, 3]]
        result = smooth_track(points, 4)
        assert len(result) == 3 * 5 + 1

    def test_passes_through_originals(self):
        """Test every original point appears at its segment start."""
        points = [[0, 0, 0], [1, 1, 1], [2, 0, 2]]
        result = smooth_track(points, 3)
        assert result[0] == points[0]
        assert result[4] == points[1]
        assert result[-1] == points[-1]

    def test_collinear_points_stay_on_line(self):
        """Test interpolation of evenly spaced collinear points is linear."""
        points = [[0.0, 0.0, 0.0], [1.0, 1.0, 1.0], [2.0, 2.0, 2.0], [3.0, 3.0, 3.0]]
        result = smooth_track(points, 1)
        assert result[3] == pytest.approx([1.5, 1.5, 1.5])

    def test_null_height_reads_as_zero(self):
        """Test a missing height is interpolated as 0."""
        points = [[8.0, 47.0, None], [8.001, 47.001, 10.0], [8.002, 47.002, 12.0]]
        result = smooth_track(points, 2)
        assert len(result) == 2 * 3 + 1
        assert result[0] == [8.0, 47.0, 0.0]
        assert all(c is not None for point in result for c in point)

    def test_points_without_fix_dropped(self):
        """Test null lon/lat points are skipped before interpolating."""
        points = [[0, 0, 0], [None, None, 2.0], [1, 1, 1], [2, 0, 2]]
        result = smooth_track(points, 1)
        assert len(result) == 2 * 2 + 1
        assert result[2] == [1, 1, 1]
        assert result[-1] == [2, 0, 2]


class TestEstimateZoom:
    """Tests for estimate_zoom function."""

    def test_no_bounds(self):
        """Test default zoom without bounds."""
        assert estimate_zoom(None) == 14.0

    def test_single_point_bounds(self):
        """Test zero span zooms all the way in."""
        assert estimate_zoom([[8.0, 47.0], [8.0, 47.0]]) == 18.0

    def test_clamped_range(self):
        """Test large spans clamp at the minimum zoom."""
        assert estimate_zoom([[0.0, 0.0], [10.0, 10.0]]) == 10.0

    def test_smaller_span_zooms_in(self):
        """Test zoom increases as the span shrinks."""
        wide = estimate_zoom([[8.0, 47.0], [8.05, 47.05]])
        narrow = estimate_zoom([[8.0, 47.0], [8.01, 47.01]])
        assert narrow > wide
