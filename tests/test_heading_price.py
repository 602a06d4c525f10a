"""
Unit tests for the curtain manufacturing price resolver.
"""

import pytest

from models.heading import Finish, HeadingPriceOverride, PriceSource, TierPrices
from modules.heading_price import resolve_manufacturing_price


# Fixtures

@pytest.fixture
def overrides():
    """Pinch pleat overrides both finishes; wave overrides machine only."""
    return {
        "pinch-pleat": HeadingPriceOverride("pinch-pleat", machine_price=22.0, hand_price=38.0),
        "wave": HeadingPriceOverride("wave", machine_price=18.0),
    }


@pytest.fixture
def method_prices():
    return TierPrices(machine_price_per_length=15.0, hand_price_per_length=28.0)


@pytest.fixture
def template_defaults():
    return TierPrices(machine_price_per_length=12.0, hand_price_per_length=25.0)


# Tests for the priority chain

class TestResolveManufacturingPrice:

    def test_heading_override_wins(self, overrides, method_prices, template_defaults):
        result = resolve_manufacturing_price(False, "pinch-pleat", overrides, method_prices, template_defaults)
        assert result.price == 22.0
        assert result.source == PriceSource.HEADING_OVERRIDE
        assert result.finish == Finish.MACHINE

    def test_hand_override(self, overrides, method_prices, template_defaults):
        result = resolve_manufacturing_price(True, "pinch-pleat", overrides, method_prices, template_defaults)
        assert result.price == 38.0
        assert result.finish == Finish.HAND

    def test_machine_override_does_not_leak_into_hand(self, overrides, method_prices, template_defaults):
        """Wave has only a machine override, so hand finish falls through."""
        result = resolve_manufacturing_price(True, "wave", overrides, method_prices, template_defaults)
        assert result.price == 28.0
        assert result.source == PriceSource.PRICING_METHOD

    def test_pricing_method_when_no_heading(self, overrides, method_prices, template_defaults):
        result = resolve_manufacturing_price(False, None, overrides, method_prices, template_defaults)
        assert result.price == 15.0
        assert result.source == PriceSource.PRICING_METHOD

    def test_unknown_heading_falls_through(self, overrides, method_prices, template_defaults):
        result = resolve_manufacturing_price(False, "eyelet", overrides, method_prices, template_defaults)
        assert result.source == PriceSource.PRICING_METHOD

    def test_template_default_last(self, overrides, template_defaults):
        result = resolve_manufacturing_price(True, "eyelet", overrides, TierPrices(), template_defaults)
        assert result.price == 25.0
        assert result.source == PriceSource.TEMPLATE_DEFAULT

    def test_nothing_configured(self):
        result = resolve_manufacturing_price(False, "eyelet")
        assert result.price == 0
        assert result.source == PriceSource.NONE

    def test_non_positive_values_are_not_prices(self, template_defaults):
        """Zero or negative values in a tier mean "not set"."""
        method = TierPrices.from_dict({"machine_price_per_length": 0, "hand_price_per_length": -3})
        result = resolve_manufacturing_price(False, None, None, method, template_defaults)
        assert result.price == 12.0
        assert result.source == PriceSource.TEMPLATE_DEFAULT

    def test_overrides_as_iterable(self, method_prices):
        overrides = [HeadingPriceOverride("wave", machine_price=18.0)]
        result = resolve_manufacturing_price(False, "wave", overrides, method_prices)
        assert result.price == 18.0


# Tests for record parsing

class TestHeadingRecords:

    def test_from_heading_record(self):
        override = HeadingPriceOverride.from_heading_record({
            "id": "pinch-pleat",
            "fullness": 2.5,
            "price": 10,
            "extras": {"machine_price": "22", "hand_price": 0},
        })
        assert override.heading_id == "pinch-pleat"
        assert override.machine_price == 22.0
        assert override.hand_price is None

    def test_record_without_extras(self):
        override = HeadingPriceOverride.from_heading_record({"id": "wave"})
        assert override.price_for(Finish.MACHINE) is None
        assert override.price_for(Finish.HAND) is None

    def test_tier_prices_accept_per_metre_keys(self):
        prices = TierPrices.from_dict({"machine_price_per_metre": 14, "hand_price_per_metre": "26.5"})
        assert prices.price_for(Finish.MACHINE) == 14.0
        assert prices.price_for(Finish.HAND) == 26.5

    def test_to_dict(self, overrides, method_prices):
        result = resolve_manufacturing_price(True, "pinch-pleat", overrides, method_prices)
        assert result.to_dict() == {"price": 38.0, "source": "heading_override", "finish": "hand"}
