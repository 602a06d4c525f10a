"""
Unit tests for the fabric orientation optimizer.

Layouts are worked out by hand in the fixtures' docstrings.
"""

import pytest

from core.exceptions import ConfigurationError, InvalidDimensionsError, MissingFabricWidthError
from models.fabric import CurtainDimensions, FabricSpec, Orientation
from modules.fabric_orientation import (
    PATTERN_HORIZONTAL_WARNING,
    PLAIN_HORIZONTAL_HINT,
    calculate_layout,
    compare_orientations,
)


# Fixtures

@pytest.fixture
def pair_of_curtains():
    """
    200 cm rail, 250 cm drop, double fullness, a pair.

    Total drop 250 + 15 + 10 = 275. Total width 200 x 2 + 5 x 2 x 2 = 420.
    """
    return CurtainDimensions(
        rail_width=200,
        drop=250,
        fullness=2.0,
        panel_count=2,
        header_hem=15,
        bottom_hem=10,
        side_hem=5,
        seam_hem=3,
    )


@pytest.fixture
def floral_wide():
    return FabricSpec(width=300, fabric_type="Floral print", name="Chelsea Rose")


@pytest.fixture
def plain_wide():
    return FabricSpec(width=300, fabric_type="Plain linen")


# Tests for single layouts

class TestCalculateLayout:

    def test_vertical_layout(self, pair_of_curtains):
        """420 / 137 -> 4 widths of 275 cm, 3 seams of 3 cm: 11.09 m."""
        layout = calculate_layout(Orientation.VERTICAL, pair_of_curtains, 137, 20.0)
        assert layout.widths_required == 4
        assert layout.seams == 3
        assert layout.cut_length_cm == 275
        assert layout.total_length_m == 11.09
        assert layout.total_cost == pytest.approx(221.8)

    def test_horizontal_layout(self, pair_of_curtains):
        """275 / 137 -> 3 pieces of 420 cm, 2 seams: 12.66 m."""
        layout = calculate_layout(Orientation.HORIZONTAL, pair_of_curtains, 137, 20.0)
        assert layout.widths_required == 3
        assert layout.seams == 2
        assert layout.cut_length_cm == 420
        assert layout.total_length_m == 12.66

    def test_exact_multiple_of_fabric_width(self):
        """A 274 cm width on 137 cm fabric needs exactly 2 widths."""
        dims = CurtainDimensions(rail_width=274, drop=200)
        layout = calculate_layout(Orientation.VERTICAL, dims, 137, 10.0)
        assert layout.widths_required == 2
        assert layout.seams == 1

    def test_pattern_repeat_rounds_cut_up(self):
        dims = CurtainDimensions(rail_width=100, drop=230)
        layout = calculate_layout(Orientation.VERTICAL, dims, 140, 10.0, pattern_repeat=64)
        assert layout.cut_length_cm == 256
        assert layout.total_length_m == 2.56

    def test_waste_percent(self):
        dims = CurtainDimensions(rail_width=100, drop=100, waste_percent=10)
        layout = calculate_layout(Orientation.VERTICAL, dims, 137, 10.0)
        assert layout.total_length_m == 1.1

    def test_single_width_has_no_seams(self):
        dims = CurtainDimensions(rail_width=100, drop=100, seam_hem=3)
        layout = calculate_layout(Orientation.VERTICAL, dims, 137, 10.0)
        assert layout.seams == 0
        assert layout.total_length_m == 1.0


# Tests for the comparison

class TestCompareOrientations:

    def test_recommends_cheaper_vertical(self, pair_of_curtains):
        result = compare_orientations(pair_of_curtains, 137, 20.0)
        assert result.recommendation == Orientation.VERTICAL
        assert result.savings == pytest.approx(31.4)

    def test_recommends_cheaper_horizontal_on_wide_fabric(self, pair_of_curtains, plain_wide):
        """300 cm fabric covers the 275 cm drop in one railroaded piece."""
        result = compare_orientations(pair_of_curtains, 300, 20.0, fabric=plain_wide)
        assert result.vertical.total_length_m == 5.53
        assert result.horizontal.total_length_m == 4.2
        assert result.recommendation == Orientation.HORIZONTAL
        assert result.savings == pytest.approx(26.6)
        assert result.warnings == ()

    def test_tie_goes_to_horizontal(self):
        dims = CurtainDimensions(rail_width=100, drop=100)
        result = compare_orientations(dims, 100, 10.0)
        assert result.vertical.total_cost == result.horizontal.total_cost
        assert result.recommendation == Orientation.HORIZONTAL
        assert result.savings == 0

    def test_savings_never_negative(self, pair_of_curtains):
        for fabric_width in (90, 137, 140, 280, 300):
            result = compare_orientations(pair_of_curtains, fabric_width, 18.5)
            assert result.savings >= 0
            cheaper = min(result.vertical.total_cost, result.horizontal.total_cost)
            assert result.recommended.total_cost == cheaper

    def test_pattern_matching_warning(self, pair_of_curtains, floral_wide):
        result = compare_orientations(pair_of_curtains, 300, 20.0, fabric=floral_wide)
        assert result.recommendation == Orientation.HORIZONTAL
        assert PATTERN_HORIZONTAL_WARNING in result.warnings

    def test_horizontal_seam_warning(self):
        """141 cm wide, 150 cm drop on 140 cm fabric: railroading wins with one seam."""
        dims = CurtainDimensions(rail_width=141, drop=150)
        result = compare_orientations(dims, 140, 10.0)
        assert result.recommendation == Orientation.HORIZONTAL
        assert result.horizontal.seams == 1
        assert "Horizontal layout has 1 seam running across the curtain" in result.warnings

    def test_separate_horizontal_repeat(self, pair_of_curtains):
        """Vertical cuts of 275 round to 320 on a 64 repeat; railroaded cuts stay 420."""
        result = compare_orientations(
            pair_of_curtains, 300, 20.0, pattern_repeat=64, horizontal_pattern_repeat=0
        )
        assert result.vertical.cut_length_cm == 320
        assert result.horizontal.cut_length_cm == 420

    def test_single_repeat_applies_to_both_cuts(self, pair_of_curtains):
        result = compare_orientations(pair_of_curtains, 300, 20.0, pattern_repeat=64)
        assert result.vertical.cut_length_cm == 320
        assert result.horizontal.cut_length_cm == 448

    def test_plain_fabric_hint_for_selected_vertical(self):
        """120 cm drop fits across 137 cm plain fabric, so railroading is suggested."""
        dims = CurtainDimensions(rail_width=200, drop=120, fullness=2.0, panel_count=2)
        plain = FabricSpec(width=137, fabric_type="Plain")
        result = compare_orientations(dims, 137, 20.0, fabric=plain, selected=Orientation.VERTICAL)
        assert PLAIN_HORIZONTAL_HINT in result.warnings

        result = compare_orientations(dims, 137, 20.0, fabric=plain)
        assert PLAIN_HORIZONTAL_HINT not in result.warnings

    def test_no_plain_hint_when_drop_exceeds_width(self, pair_of_curtains):
        plain = FabricSpec(width=137, fabric_type="Plain")
        result = compare_orientations(
            pair_of_curtains, 137, 20.0, fabric=plain, selected=Orientation.VERTICAL
        )
        assert result.warnings == ()

    def test_warnings_follow_selected_orientation(self, pair_of_curtains, floral_wide):
        result = compare_orientations(
            pair_of_curtains, 300, 20.0, fabric=floral_wide, selected=Orientation.VERTICAL
        )
        assert result.recommendation == Orientation.HORIZONTAL
        assert PATTERN_HORIZONTAL_WARNING not in result.warnings

    def test_recommendation_text(self, pair_of_curtains):
        result = compare_orientations(pair_of_curtains, 300, 20.0)
        assert result.recommendation_text == "Horizontal orientation: 1 width, 4.20 m, saves 26.60"

    def test_to_dict(self, pair_of_curtains):
        data = compare_orientations(pair_of_curtains, 137, 20.0).to_dict()
        assert data["recommendation"] == "vertical"
        assert data["vertical"]["seams"] == 3
        assert data["horizontal"]["widths_required"] == 3
        assert "recommendation_text" in data


class TestCompareOrientationErrors:

    @pytest.mark.parametrize("fabric_width", [None, 0, -137, "abc"])
    def test_missing_fabric_width_raises(self, pair_of_curtains, fabric_width):
        """The optimizer never guesses a roll width."""
        with pytest.raises(MissingFabricWidthError) as exc_info:
            compare_orientations(pair_of_curtains, fabric_width, 20.0)
        assert isinstance(exc_info.value, ConfigurationError)

    def test_missing_width_names_fabric(self, pair_of_curtains):
        fabric = FabricSpec(width=None, name="Chelsea Rose")
        with pytest.raises(MissingFabricWidthError) as exc_info:
            compare_orientations(pair_of_curtains, fabric.width, 20.0, fabric=fabric)
        assert "Chelsea Rose" in exc_info.value.message

    @pytest.mark.parametrize("field,dims", [
        ("rail_width", CurtainDimensions(rail_width=0, drop=200)),
        ("drop", CurtainDimensions(rail_width=200, drop=-1)),
        ("fullness", CurtainDimensions(rail_width=200, drop=200, fullness=0)),
        ("panel_count", CurtainDimensions(rail_width=200, drop=200, panel_count=0)),
    ])
    def test_invalid_dimensions_raise(self, field, dims):
        with pytest.raises(InvalidDimensionsError) as exc_info:
            compare_orientations(dims, 137, 20.0)
        assert exc_info.value.field_name == field


# Tests for the models

class TestFabricModels:

    def test_dimensions_from_dict_uses_defaults(self):
        dims = CurtainDimensions.from_dict(
            {"rail_width": 200, "drop": "250", "header_hem": 8},
            defaults={"header_hem": 15, "bottom_hem": 10},
        )
        assert dims.header_hem == 8
        assert dims.bottom_hem == 10
        assert dims.fullness == 1.0
        assert dims.panel_count == 1
        assert dims.total_drop == 268

    def test_fabric_spec_from_record(self):
        fabric = FabricSpec.from_record({"width": None, "type": "Stripe", "pattern": ""})
        assert fabric.width is None
        assert fabric.requires_pattern_matching

    @pytest.mark.parametrize("fabric_type,plain,matching", [
        ("Plain", True, False),
        ("Textured linen", True, False),
        ("Damask", False, True),
        ("Velvet", False, False),
    ])
    def test_fabric_classification(self, fabric_type, plain, matching):
        fabric = FabricSpec(width=137, fabric_type=fabric_type)
        assert fabric.is_plain is plain
        assert fabric.requires_pattern_matching is matching

    def test_pattern_repeat_means_matching(self):
        assert FabricSpec(width=137, fabric_type="Velvet", pattern_repeat=32).requires_pattern_matching

    def test_fabric_spec_horizontal_repeat(self):
        fabric = FabricSpec.from_record({
            "width": 280, "type": "Velvet", "pattern_repeat_vertical": 64, "pattern_repeat_horizontal": "32",
        })
        assert fabric.pattern_repeat == 64
        assert fabric.horizontal_pattern_repeat == 32
        assert fabric.requires_pattern_matching
        assert FabricSpec.from_record({"width": 280}).horizontal_pattern_repeat is None
