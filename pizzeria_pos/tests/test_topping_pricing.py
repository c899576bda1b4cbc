"""
配料计价规则测试
"""

import pytest

from pizzeria_pos.models.catalog import Customization, PricingRules
from pizzeria_pos.models.pricing import AMOUNT_ORDER, PlacementKind, QuarterSet, ToppingAmount
from pizzeria_pos.services.topping_pricing import (
    price_addon_topping,
    price_default_topping,
    price_modifier,
    price_topping,
    tier_multiplier,
)
from pizzeria_pos.utils.money import round_money


class TestAddonPricing:
    """加购配料计价"""

    def test_extra_pepperoni_on_12in(self, snapshot):
        pepperoni = snapshot.customizations["pepperoni"]
        price = price_addon_topping(pepperoni, "12in", ToppingAmount.EXTRA, PlacementKind.WHOLE)
        assert price == pytest.approx(4.00)

    def test_none_is_free_for_every_placement(self, snapshot):
        pepperoni = snapshot.customizations["pepperoni"]
        for placement in [PlacementKind.WHOLE, PlacementKind.LEFT, QuarterSet(quarters=("q1",))]:
            assert price_addon_topping(pepperoni, "14in", ToppingAmount.NONE, placement) == 0.0
            assert price_topping(pepperoni, "14in", ToppingAmount.NONE, placement,
                                 is_default=True, default_amount=ToppingAmount.NORMAL) == 0.0

    def test_quarters_sum_to_whole(self, snapshot):
        pepperoni = snapshot.customizations["pepperoni"]
        whole = price_addon_topping(pepperoni, "14in", ToppingAmount.NORMAL, PlacementKind.WHOLE)
        quarters = sum(
            price_addon_topping(pepperoni, "14in", ToppingAmount.NORMAL, QuarterSet(quarters=(q,)))
            for q in ("q1", "q2", "q3", "q4")
        )
        assert quarters == pytest.approx(whole)

    def test_size_multiplier_applied(self, snapshot):
        pepperoni = snapshot.customizations["pepperoni"]
        price = price_addon_topping(pepperoni, "16in", ToppingAmount.NORMAL, PlacementKind.WHOLE)
        assert round_money(price) == 2.70

    def test_premium_tier_schedule(self, snapshot):
        prosciutto = snapshot.customizations["prosciutto"]
        price = price_addon_topping(prosciutto, "12in", ToppingAmount.EXTRA, PlacementKind.LEFT)
        assert price == pytest.approx(3.00 * 1.5 * 0.5)

    def test_sauce_is_always_free(self, snapshot):
        sauce = snapshot.customizations["bbq_sauce"]
        assert price_addon_topping(sauce, "16in", ToppingAmount.XXTRA, PlacementKind.WHOLE) == 0.0

    def test_monotonic_in_amount(self, snapshot):
        for customization_id in ["pepperoni", "prosciutto", "ground_beef"]:
            customization = snapshot.customizations[customization_id]
            prices = [
                price_addon_topping(customization, "12in", amount, PlacementKind.WHOLE)
                for amount in AMOUNT_ORDER
            ]
            assert prices == sorted(prices)


class TestDefaultPricing:
    """模板默认配料计价"""

    def test_default_amount_is_included(self, snapshot):
        mushrooms = snapshot.customizations["mushrooms"]
        assert price_default_topping(mushrooms, "12in", ToppingAmount.NORMAL,
                                     ToppingAmount.NORMAL, PlacementKind.WHOLE) == 0.0

    def test_escalation_charges_marginal_difference(self, snapshot):
        mushrooms = snapshot.customizations["mushrooms"]
        price = price_default_topping(mushrooms, "12in", ToppingAmount.XXTRA,
                                      ToppingAmount.NORMAL, PlacementKind.WHOLE)
        assert price == pytest.approx(1.50 * (3.0 - 1.0))

    def test_reduction_is_not_refunded(self, snapshot):
        mushrooms = snapshot.customizations["mushrooms"]
        assert price_default_topping(mushrooms, "12in", ToppingAmount.LIGHT,
                                     ToppingAmount.NORMAL, PlacementKind.WHOLE) == 0.0


class TestMultiplierOverrides:
    """配料自带倍率"""

    def test_custom_tier_multipliers_override_defaults(self):
        customization = Customization(
            id="bacon", restaurant_id="rest-1", name="Bacon", category="topping_normal",
            base_price=2.00,
            pricing_rules=PricingRules(tier_multipliers={"extra": 1.75}, size_multipliers={"12in": 1.1}),
        )
        assert tier_multiplier(customization, "normal", ToppingAmount.EXTRA) == 1.75
        assert tier_multiplier(customization, "normal", ToppingAmount.NONE) == 0.0
        price = price_addon_topping(customization, "12in", ToppingAmount.EXTRA, PlacementKind.WHOLE)
        assert price == pytest.approx(2.00 * 1.75 * 1.1)

    def test_non_monotonic_multipliers_rejected(self):
        with pytest.raises(ValueError):
            PricingRules(tier_multipliers={"normal": 2.0, "extra": 1.0})

    def test_partial_override_checked_against_tier_defaults(self):
        with pytest.raises(ValueError):
            Customization(
                id="olives", restaurant_id="rest-1", name="Olives", category="topping_normal",
                base_price=2.00, pricing_rules=PricingRules(tier_multipliers={"extra": 0.5}),
            )

    def test_partial_override_keeps_prices_monotonic(self):
        customization = Customization(
            id="olives", restaurant_id="rest-1", name="Olives", category="topping_normal",
            base_price=2.00, pricing_rules=PricingRules(tier_multipliers={"extra": 2.5}),
        )
        prices = [
            price_addon_topping(customization, "12in", amount, PlacementKind.WHOLE)
            for amount in AMOUNT_ORDER
        ]
        assert prices == pytest.approx([0.0, 2.0, 2.0, 5.0, 6.0])
        assert prices == sorted(prices)

    def test_free_tier_override_not_checked(self):
        sauce = Customization(
            id="pesto", restaurant_id="rest-1", name="Pesto", category="topping_sauce",
            base_price=0.50, pricing_rules=PricingRules(tier_multipliers={"extra": 0.5}),
        )
        assert price_addon_topping(sauce, "12in", ToppingAmount.XXTRA, PlacementKind.WHOLE) == 0.0


class TestModifierPricing:
    """非配料附加项计价"""

    def test_fixed_modifier(self, snapshot):
        assert price_modifier(snapshot.customizations["well_done"], "16in") == 0.50

    def test_multiplied_modifier(self, snapshot):
        price = price_modifier(snapshot.customizations["truffle_oil"], "14in")
        assert price == pytest.approx(1.135)

    def test_tiered_modifier_uses_size_price(self):
        customization = Customization(
            id="dip", restaurant_id="rest-1", name="Garlic Dip", category="sides",
            base_price=1.00, price_type="tiered",
            pricing_rules=PricingRules(variant_base_prices={"14in": 1.75}),
        )
        assert price_modifier(customization, "14in") == 1.75
        assert price_modifier(customization, "10in") == 1.00

    def test_none_modifier_is_free(self, snapshot):
        assert price_modifier(snapshot.customizations["well_done"], "12in", ToppingAmount.NONE) == 0.0


class TestRoundMoney:
    """金额四舍五入"""

    def test_half_up(self):
        assert round_money(2.675) == 2.68
        assert round_money(1.005) == 1.01
        assert round_money(0.5675) == 0.57
