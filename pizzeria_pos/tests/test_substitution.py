"""
替换抵扣测试
"""

import pytest

from pizzeria_pos.models.pricing import PlacementKind, ToppingAmount
from pizzeria_pos.services.substitution import apply_price_floor, compute_substitution_credit
from pizzeria_pos.services.template_resolver import ResolvedSelection


def _default(customization_id, amount=ToppingAmount.NORMAL, removable=True):
    return ResolvedSelection(
        customization_id=customization_id,
        amount=amount,
        placement=PlacementKind.WHOLE,
        is_default=True,
        default_amount=ToppingAmount.NORMAL,
        is_removable=removable,
        substitution_tier="normal",
    )


class TestSubstitutionCredit:
    """去掉默认配料的抵扣"""

    def test_no_removal_no_credit(self, snapshot):
        defaults = [(_default("pepperoni"), snapshot.customizations["pepperoni"])]
        credit = compute_substitution_credit("12in", defaults, 0.5)
        assert credit.applied_credit == 0.0
        assert credit.included_value == pytest.approx(2.00)

    def test_credit_is_percentage_of_nominal_value(self, snapshot):
        defaults = [
            (_default("pepperoni"), snapshot.customizations["pepperoni"]),
            (_default("mushrooms", ToppingAmount.NONE), snapshot.customizations["mushrooms"]),
        ]
        credit = compute_substitution_credit("12in", defaults, 0.5)

        assert credit.removed_value == pytest.approx(1.50)
        assert credit.applied_credit == pytest.approx(0.75)
        assert credit.applied_credit <= credit.included_value * 0.5
        assert credit.limit_hit is True
        assert [line.customization_id for line in credit.lines] == ["mushrooms"]

    def test_full_percentage_does_not_hit_limit(self, snapshot):
        defaults = [
            (_default("pepperoni"), snapshot.customizations["pepperoni"]),
            (_default("mushrooms", ToppingAmount.NONE), snapshot.customizations["mushrooms"]),
        ]
        credit = compute_substitution_credit("12in", defaults, 1.0)

        assert credit.applied_credit == pytest.approx(1.50)
        assert credit.limit_hit is False

    def test_sauce_has_no_nominal_value(self, snapshot):
        defaults = [(_default("red_sauce", ToppingAmount.NONE), snapshot.customizations["red_sauce"])]
        credit = compute_substitution_credit("12in", defaults, 0.5)
        assert credit.applied_credit == 0.0

    def test_price_floor_clamps_credit(self, snapshot):
        defaults = [(_default("pepperoni", ToppingAmount.NONE), snapshot.customizations["pepperoni"])]
        credit = compute_substitution_credit("12in", defaults, 1.0)
        assert credit.applied_credit == pytest.approx(2.00)

        applied = apply_price_floor(credit, subtotal=21.50, floor_price=21.00)
        assert applied == pytest.approx(0.50)
        assert credit.limit_hit is True

    def test_floor_never_goes_negative(self, snapshot):
        defaults = [(_default("pepperoni", ToppingAmount.NONE), snapshot.customizations["pepperoni"])]
        credit = compute_substitution_credit("12in", defaults, 0.5)
        assert apply_price_floor(credit, subtotal=21.00, floor_price=21.00) == 0.0
