"""
炸鸡计价测试
"""

import pytest

from pizzeria_pos.core.exceptions import PricingValidationError, VariantNotFoundError
from pizzeria_pos.schemas.pricing import ChickenPriceRequest
from pizzeria_pos.services.chicken_pricing import calculate_chicken_price, chicken_prep_time
from pizzeria_pos.models.pricing import ToppingAmount
from pizzeria_pos.utils.money import round_money


def _request(**kwargs):
    data = {"restaurant_id": "rest-1", "variant_id": "chicken-8pc"}
    data.update(kwargs)
    return ChickenPriceRequest(**data)


class TestChickenPricing:
    """炸鸡计价"""

    def test_base_only(self, snapshot):
        result = calculate_chicken_price(_request(), snapshot)

        assert result.base_price == 12.99
        assert result.white_meat_cost == 0.0
        assert result.final_price == 12.99
        assert result.estimated_prep_time == 18
        assert result.variant_info["serves"] == "2-3"
        assert [l.type for l in result.breakdown] == ["base"]

    def test_white_meat_and_customizations(self, snapshot):
        result = calculate_chicken_price(
            _request(white_meat_tier="extra", customization_ids=["extra_crispy", "ranch_side"]),
            snapshot,
        )

        assert result.white_meat_cost == 4.00
        assert result.customizations_cost == 1.75
        assert result.final_price == 18.74
        assert result.estimated_prep_time == 18 + 4 + 3
        assert result.breakdown[1].name == "Extra White Meat"
        assert result.breakdown[1].tier == "extra"
        assert round_money(sum(l.price for l in result.breakdown)) == result.final_price

    def test_pizza_only_customization_ignored(self, snapshot):
        result = calculate_chicken_price(
            _request(customization_ids=["well_done", "unknown", "extra_crispy", "extra_crispy"]),
            snapshot,
        )
        assert result.customizations_cost == 1.00
        assert len(result.warnings) == 3

    def test_unknown_variant(self, snapshot):
        with pytest.raises(VariantNotFoundError):
            calculate_chicken_price(_request(variant_id="missing"), snapshot)

    def test_unavailable_variant(self, snapshot):
        with pytest.raises(PricingValidationError):
            calculate_chicken_price(_request(variant_id="chicken-16pc"), snapshot)

    def test_light_white_meat_rejected(self):
        with pytest.raises(ValueError):
            _request(white_meat_tier="light")


class TestChickenPrepTime:
    """炸鸡制作时间"""

    def test_defaults_and_caps(self):
        assert chicken_prep_time(None, 0, ToppingAmount.NONE) == 20
        assert chicken_prep_time(15, 10, ToppingAmount.NORMAL) == 15 + 8 + 3
        assert chicken_prep_time(15, 1, ToppingAmount.XXTRA) == 15 + 2 + 5
