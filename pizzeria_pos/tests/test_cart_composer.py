"""
购物车条目组装测试
"""

import json

from pizzeria_pos.services.cart_composer import CartItemTransformer, compose_cart_item
from pizzeria_pos.services.pricing_calculator import calculate_pizza_price
from pizzeria_pos.utils.money import round_money


def _compose(snapshot, make_request, **kwargs):
    request = make_request(menu_item_id="supreme", crust_type="pan", toppings=[
        {"customization_id": "mushrooms", "amount": "none"},
        {"customization_id": "prosciutto", "placement": ["q1", "q2"]},
        {"customization_id": "well_done"},
    ])
    result = calculate_pizza_price(request, snapshot)
    item = compose_cart_item(snapshot.menu_items["supreme"], result, request.toppings, **kwargs)
    return result, item


class TestComposeCartItem:
    """购物车条目组装"""

    def test_price_is_frozen_from_result(self, snapshot, make_request):
        result, item = _compose(snapshot, make_request)

        assert item.total_price == result.final_price
        assert item.base_price == 21.00
        assert item.display_name == "12in Pan Supreme"
        assert item.variant_id == "supreme-12"

    def test_toppings_and_modifiers(self, snapshot, make_request):
        _, item = _compose(snapshot, make_request)

        toppings = {t.id: t for t in item.selected_toppings}
        assert toppings["mushrooms"].amount.value == "none"
        assert toppings["mushrooms"].is_default is True
        assert toppings["prosciutto"].placement == ["q1", "q2"]
        assert toppings["prosciutto"].price == 1.50
        assert [m.id for m in item.selected_modifiers] == ["well_done"]
        assert item.selected_modifiers[0].price_adjustment == 0.50

    def test_idempotent_except_identifier(self, snapshot, make_request):
        _, first = _compose(snapshot, make_request)
        _, second = _compose(snapshot, make_request)

        assert first.id != second.id
        assert first.model_dump(exclude={"id"}) == second.model_dump(exclude={"id"})

    def test_user_placement_preserved(self, snapshot, make_request):
        request = make_request(toppings=[{"customization_id": "pepperoni", "placement": ["q3", "q1"]}])
        result = calculate_pizza_price(request, snapshot)
        item = compose_cart_item(snapshot.menu_items["build_your_own"], result, request.toppings)
        assert item.selected_toppings[0].placement == ["q3", "q1"]
        assert item.selected_toppings[0].price == 1.00

    def test_all_quarters_frozen_as_whole(self, snapshot, make_request):
        request = make_request(toppings=[{"customization_id": "pepperoni", "placement": ["q4", "q3", "q2", "q1"]}])
        result = calculate_pizza_price(request, snapshot)
        item = compose_cart_item(snapshot.menu_items["build_your_own"], result, request.toppings)

        line = next(l for l in result.breakdown if l.customization_id == "pepperoni")
        assert item.selected_toppings[0].placement == "whole"
        assert item.selected_toppings[0].placement == line.placement
        assert item.selected_toppings[0].price == 2.00


class TestCartItemTransformer:
    """购物车条目与订单明细转换"""

    def test_to_order_item(self, snapshot, make_request):
        _, item = _compose(snapshot, make_request, quantity=3, special_instructions="cut in squares")
        record = CartItemTransformer.to_order_item(item, "order-1")

        assert record.order_id == "order-1"
        assert record.unit_price == item.total_price
        assert record.total_price == round_money(item.total_price * 3)
        assert record.special_instructions == "cut in squares"
        toppings = json.loads(record.selected_toppings_json)
        assert {t["id"] for t in toppings} >= {"mushrooms", "prosciutto"}

    def test_round_trip_keeps_frozen_price(self, snapshot, make_request):
        _, item = _compose(snapshot, make_request, quantity=2)
        record = CartItemTransformer.to_order_item(item, "order-1")
        restored = CartItemTransformer.from_order_item(record.model_copy(update={"id": "line-1"}))

        assert restored.id == "line-1"
        assert restored.total_price == item.total_price
        assert restored.quantity == 2
        assert [t.model_dump() for t in restored.selected_toppings] == \
            [t.model_dump() for t in item.selected_toppings]
        assert [m.model_dump() for m in restored.selected_modifiers] == \
            [m.model_dump() for m in item.selected_modifiers]
        assert restored.display_name == "12\" Supreme Supreme"

    def test_from_order_item_without_json(self):
        from pizzeria_pos.models.cart import OrderItemRecord

        record = OrderItemRecord(order_id="o", menu_item_id="m", unit_price=9.5, total_price=9.5)
        item = CartItemTransformer.from_order_item(record)
        assert item.selected_toppings == []
        assert item.display_name == "Unknown Item"
