"""Tests for station-walk and building-age adjustments."""

import pytest

from satei.data.base import PropertyType, Station
from satei.engine.attributes import age_adjustment, nearest_station, walk_adjustment

from conftest import north_of


class TestWalkAdjustment:
    """-2% per full 5 minutes, floored at -20%."""

    @pytest.mark.parametrize("minutes,expected", [
        (0, 0.0),
        (4.9, 0.0),
        (5, -0.02),
        (14, -0.04),
        (15, -0.06),
        (49, -0.18),
    ])
    def test_steps(self, minutes, expected):
        """Only full 5-minute steps count."""
        assert walk_adjustment(minutes) == pytest.approx(expected)

    @pytest.mark.parametrize("minutes", [55, 100, 250, 10_000])
    def test_floor(self, minutes):
        """Long walks bottom out at exactly -20%."""
        assert walk_adjustment(minutes) == -0.20

    def test_negative_minutes(self):
        """Negative input never becomes a premium."""
        assert walk_adjustment(-12) == 0.0


class TestAgeAdjustment:
    """Depreciation schedule for buildings."""

    def test_land_is_zero(self):
        """Land never depreciates, whatever the build year."""
        assert age_adjustment(PropertyType.LAND, 1950, 2025) == 0

    def test_missing_year(self):
        """Unknown build year → no adjustment."""
        assert age_adjustment(PropertyType.BUILDING, None, 2025) == 0

    def test_new_building(self):
        """Built this year."""
        assert age_adjustment(PropertyType.BUILDING, 2025, 2025) == 0

    def test_future_build_year(self):
        """Age is clamped at zero."""
        assert age_adjustment(PropertyType.BUILDING, 2027, 2025) == 0

    @pytest.mark.parametrize("age,expected", [(1, -0.005), (3, -0.015), (4, -0.04), (25, -0.25)])
    def test_schedule(self, age, expected):
        """-0.5%/yr up to 3 years, then -1%/yr."""
        assert age_adjustment(PropertyType.BUILDING, 2025 - age, 2025) == pytest.approx(expected)

    @pytest.mark.parametrize("age", [45, 80, 120])
    def test_floor(self, age):
        """Very old buildings stop at exactly -40%."""
        assert age_adjustment(PropertyType.BUILDING, 2025 - age, 2025) == -0.40


class TestNearestStation:
    """Closest station and walking minutes at 80 m/min."""

    def test_no_stations(self, origin):
        """Empty list → no station."""
        result = nearest_station([], origin)
        assert result.name is None
        assert result.minutes is None

    def test_no_point(self):
        """No location → no station."""
        result = nearest_station([Station("広島", 34.3975, 132.4753)], None)
        assert result.name is None
        assert result.minutes is None

    def test_picks_closest(self, origin):
        """The nearer station wins; minutes round up."""
        far, near = north_of(origin, 1200), north_of(origin, 410)
        stations = [Station("横川", far.lat, far.lng), Station("広島", near.lat, near.lng)]
        result = nearest_station(stations, origin)
        assert result.name == "広島"
        assert result.minutes == 6  # ceil(410 / 80)

    def test_minutes(self, origin):
        """790 m → 10 minutes."""
        p = north_of(origin, 790)
        assert nearest_station([Station("天神川", p.lat, p.lng)], origin).minutes == 10
