"""Unit tests for the shapely/trimesh kernel adapter."""

import pytest
from shapely.geometry import MultiPolygon

from gridfinity.infrastructure import kernel


class TestOutlines:
    def test_rectangle_min_corner(self) -> None:
        assert kernel.rectangle(10.0, 5.0, 2.0, 3.0).bounds == (2.0, 3.0, 12.0, 8.0)

    def test_rounded_rectangle_keeps_bounds(self) -> None:
        shape = kernel.rounded_rectangle(42.0, 42.0, 4.0)
        assert shape.bounds == pytest.approx((0.0, 0.0, 42.0, 42.0))
        assert shape.area < 42.0 * 42.0

    def test_rounded_rectangle_clamps_radius(self) -> None:
        shape = kernel.rounded_rectangle(10.0, 4.0, 50.0)
        assert shape.bounds == pytest.approx((0.0, 0.0, 10.0, 4.0))

    def test_zero_radius_is_a_rectangle(self) -> None:
        assert kernel.rounded_rectangle(10.0, 4.0, 0.0).area == pytest.approx(40.0)

    def test_inset_rounded_rectangle(self) -> None:
        shape = kernel.inset_rounded_rectangle(42.0, 42.0, 4.0, 2.85)
        assert shape.bounds == pytest.approx((2.85, 2.85, 39.15, 39.15))

    def test_offset_grows_and_shrinks(self) -> None:
        square = kernel.rectangle(10.0, 10.0)
        assert kernel.offset(square, 1.0).bounds == pytest.approx((-1.0, -1.0, 11.0, 11.0))
        assert kernel.offset(square, -1.0).bounds == pytest.approx((1.0, 1.0, 9.0, 9.0))

    def test_distribute_places_copies(self) -> None:
        shape = kernel.distribute(kernel.rectangle(1.0, 1.0), [0.0, 5.0])
        assert isinstance(shape, MultiPolygon)
        assert len(kernel.polygons(shape)) == 2
        assert shape.area == pytest.approx(2.0)

    def test_polygons_of_empty_shape(self) -> None:
        empty = kernel.rectangle(1.0, 1.0).difference(kernel.rectangle(2.0, 2.0, -0.5, -0.5))
        assert kernel.polygons(empty) == []


class TestSolids:
    def test_box_volume_and_bounds(self) -> None:
        solid = kernel.box(10.0, 20.0, 5.0, x=1.0, y=2.0, z=3.0)
        assert solid.volume == pytest.approx(1000.0)
        assert kernel.footprint(solid).min_x == pytest.approx(1.0)
        assert kernel.height_range(solid) == pytest.approx((3.0, 8.0))

    def test_extrude(self) -> None:
        solid = kernel.extrude(kernel.rectangle(4.0, 5.0), 2.0, z=1.0)
        assert solid.volume == pytest.approx(40.0)
        assert kernel.height_range(solid) == pytest.approx((1.0, 3.0))

    def test_extrude_rejects_empty_outline(self) -> None:
        empty = kernel.rectangle(1.0, 1.0).difference(kernel.rectangle(2.0, 2.0, -0.5, -0.5))
        with pytest.raises(ValueError, match="empty"):
            kernel.extrude(empty, 1.0)

    def test_extrude_rejects_non_positive_height(self) -> None:
        with pytest.raises(ValueError, match="positive"):
            kernel.extrude(kernel.rectangle(1.0, 1.0), 0.0)

    def test_loft_of_equal_sections_is_a_prism(self) -> None:
        square = kernel.rectangle(2.0, 2.0)
        assert kernel.loft(square, 0.0, square, 3.0).volume == pytest.approx(12.0)

    def test_loft_pyramid_frustum(self) -> None:
        bottom = kernel.rectangle(4.0, 4.0)
        top = kernel.rectangle(2.0, 2.0, 1.0, 1.0)
        # h / 3 * (A1 + A2 + sqrt(A1 * A2))
        assert kernel.loft(bottom, 0.0, top, 3.0).volume == pytest.approx(28.0)

    def test_loft_needs_rising_sections(self) -> None:
        square = kernel.rectangle(2.0, 2.0)
        with pytest.raises(ValueError):
            kernel.loft(square, 1.0, square, 1.0)

    def test_loft_stack_needs_two_sections(self) -> None:
        with pytest.raises(ValueError):
            kernel.loft_stack([(0.0, kernel.rectangle(1.0, 1.0))])

    def test_cylinder_sits_on_z(self) -> None:
        solid = kernel.cylinder(1.0, 4.0, x=5.0, z=2.0)
        assert kernel.height_range(solid) == pytest.approx((2.0, 6.0))
        assert kernel.footprint(solid).min_x == pytest.approx(4.0)


class TestBooleans:
    def test_union_of_overlapping_boxes(self) -> None:
        merged = kernel.union([kernel.box(10.0, 10.0, 10.0), kernel.box(10.0, 10.0, 10.0, x=5.0)])
        assert merged.volume == pytest.approx(1500.0)

    def test_union_of_one_is_a_copy(self) -> None:
        solid = kernel.box(1.0, 1.0, 1.0)
        copy = kernel.union([solid])
        assert copy is not solid
        assert copy.volume == pytest.approx(1.0)

    def test_union_of_nothing(self) -> None:
        with pytest.raises(ValueError):
            kernel.union([])

    def test_difference(self) -> None:
        epsilon = kernel.COINCIDENT_FACE_EPSILON
        cutter = kernel.box(5.0, 10.0 + 2 * epsilon, 10.0 + 2 * epsilon, y=-epsilon, z=-epsilon)
        result = kernel.difference(kernel.box(10.0, 10.0, 10.0), [cutter])
        assert result.volume == pytest.approx(500.0)

    def test_difference_without_cutters(self) -> None:
        solid = kernel.box(1.0, 1.0, 1.0)
        assert kernel.difference(solid, []).volume == pytest.approx(1.0)


class TestTransforms:
    def test_translated_leaves_original(self) -> None:
        solid = kernel.box(1.0, 1.0, 1.0)
        moved = kernel.translated(solid, dx=5.0)
        assert kernel.footprint(moved).min_x == pytest.approx(5.0)
        assert kernel.footprint(solid).min_x == pytest.approx(0.0)

    def test_rotated_about_z(self) -> None:
        solid = kernel.rotated(kernel.box(10.0, 2.0, 1.0), 90.0)
        bounds = kernel.footprint(solid)
        assert (bounds.min_x, bounds.max_x) == pytest.approx((-2.0, 0.0))
        assert (bounds.min_y, bounds.max_y) == pytest.approx((0.0, 10.0))

