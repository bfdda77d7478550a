"""
Tests for fin profiles, tabs and fin copies.
"""
import pytest

from ork_import.contracts import FinInstance, OrkImportError, TabPositionMode
from ork_import.fins import (
    build_fin_profile,
    fin_instances,
    fin_polygon,
    resolve_tab,
    root_length,
    tab_points,
)

TRAPEZOID = [(0.0, 0.0), (30.0, 40.0), (60.0, 40.0), (60.0, 0.0)]


class TestResolveTab:
    def test_front(self):
        tab = resolve_tab(0.0, 60.0, 5.0, 20.0, TabPositionMode.FRONT)
        assert (tab.start, tab.end, tab.remaining_length) == (0.0, 20.0, 40.0)

    def test_center_halves_remaining(self):
        tab = resolve_tab(0.0, 60.0, 5.0, 20.0, TabPositionMode.CENTER)
        assert (tab.start, tab.end, tab.remaining_length) == (20.0, 40.0, 20.0)

    def test_end_flush_with_trailing_edge(self):
        tab = resolve_tab(10.0, 60.0, 5.0, 20.0, TabPositionMode.END)
        assert tab.start == pytest.approx(50.0)
        assert tab.end == pytest.approx(70.0)

    def test_offset_shifts_start(self):
        tab = resolve_tab(0.0, 60.0, 5.0, 20.0, TabPositionMode.FRONT, offset=3.0)
        assert tab.start == 3.0
        assert tab.tab_length == 20.0

    def test_tab_longer_than_root_is_clamped(self):
        tab = resolve_tab(0.0, 50.0, 5.0, 80.0)
        assert tab.tab_length == 50.0
        assert tab.remaining_length == 0.0

    @pytest.mark.parametrize("height,length", [(0.0, 20.0), (5.0, 0.0), (-1.0, 20.0)])
    def test_no_tab(self, height, length):
        assert resolve_tab(0.0, 60.0, height, length) is None

    def test_tab_points_hang_below_root(self):
        tab = resolve_tab(0.0, 60.0, 5.0, 20.0)
        assert tab_points(tab) == [(20.0, 0.0), (20.0, -5.0), (0.0, -5.0), (0.0, 0.0)]


class TestBuildFinProfile:
    def test_root_length(self):
        assert root_length(TRAPEZOID) == 60.0
        with pytest.raises(OrkImportError):
            root_length([(0.0, 0.0)])

    def test_without_tab(self):
        profile, length = build_fin_profile(TRAPEZOID)
        assert length == 60.0
        assert profile == tuple(TRAPEZOID)

    def test_with_centered_tab(self):
        profile, _ = build_fin_profile(
            TRAPEZOID, tab_height=5.0, tab_length=20.0, tab_mode=TabPositionMode.CENTER
        )
        assert profile[4:] == ((40.0, 0.0), (40.0, -5.0), (20.0, -5.0), (20.0, 0.0))
        assert fin_polygon(profile).is_valid

    def test_front_tab_drops_closing_duplicate(self):
        profile, _ = build_fin_profile(TRAPEZOID, tab_height=5.0, tab_length=20.0)
        assert profile[-1] == (0.0, -5.0)
        assert profile[0] == (0.0, 0.0)

    def test_polygon_area(self):
        # trapezoid: (60 + 30) / 2 * 40
        assert fin_polygon(TRAPEZOID).area == pytest.approx(1800.0)


class TestFinInstances:
    def test_even_spacing(self):
        angles = [i.angle_deg for i in fin_instances(3)]
        assert angles == pytest.approx([0.0, 120.0, 240.0])

    def test_non_divisor_count(self):
        angles = [i.angle_deg for i in fin_instances(7)]
        assert angles[1] == pytest.approx(360.0 / 7)

    def test_rotation_and_cant(self):
        instances = fin_instances(4, rotation_deg=45.0, cant_deg=2.0)
        assert [i.angle_deg for i in instances] == pytest.approx([45.0, 135.0, 225.0, 315.0])
        assert all(i.cant_deg == 2.0 for i in instances)

    def test_cant_defaults_to_zero(self):
        assert FinInstance(90.0).cant_deg == 0.0

    def test_zero_count_raises(self):
        with pytest.raises(OrkImportError):
            fin_instances(0)
