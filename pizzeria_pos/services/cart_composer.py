"""
购物车条目组装与订单明细转换
"""

import json
import uuid
from typing import Any, Dict, List, Optional

from ..models.cart import ConfiguredCartItem, ConfiguredModifier, ConfiguredTopping, OrderItemRecord
from ..models.catalog import MenuItem
from ..models.pricing import BreakdownType, ToppingAmount, ToppingSelection, placement_to_wire
from ..schemas.pricing import PizzaPriceResponse
from ..utils.money import round_money
from .placement import normalize_placement

TOPPING_LINE_TYPES = (
    BreakdownType.TOPPING,
    BreakdownType.TEMPLATE_DEFAULT,
    BreakdownType.TEMPLATE_EXTRA,
)


def crust_label(crust_type: Optional[str]) -> str:
    return (crust_type or "").replace("_", " ").title()


def build_display_name(menu_item: MenuItem, size_code: Optional[str], crust_type: Optional[str]) -> str:
    """尺寸 + 饼底 + 菜品名"""
    parts = [size_code or "", crust_label(crust_type), menu_item.name]
    return " ".join(p for p in parts if p)


def compose_cart_item(menu_item: MenuItem, result: PizzaPriceResponse,
                      selections: List[ToppingSelection], quantity: int = 1,
                      special_instructions: Optional[str] = None) -> ConfiguredCartItem:
    """
    把计价结果冻结为购物车条目

    配料价格取自计价明细，用户显式选择的摆放区域按原样保留；
    相同输入两次调用只有 id 不同。
    """
    requested = {s.customization_id: s for s in selections}

    toppings: List[ConfiguredTopping] = []
    modifiers: List[ConfiguredModifier] = []
    for line in result.breakdown:
        if line.type in TOPPING_LINE_TYPES:
            placement = line.placement
            selection = requested.get(line.customization_id)
            if selection is not None and selection.amount != ToppingAmount.NONE:
                placement = placement_to_wire(normalize_placement(selection.placement))
            toppings.append(ConfiguredTopping(
                id=line.customization_id,
                name=line.name,
                amount=line.amount or ToppingAmount.NORMAL,
                placement=placement,
                price=line.price,
                is_default=line.is_default,
                category=line.category or "other",
            ))
        elif line.type == BreakdownType.MODIFIER:
            modifiers.append(ConfiguredModifier(
                id=line.customization_id,
                name=line.name,
                price_adjustment=line.price,
            ))

    variant = menu_item.variant_for(result.size_code, result.crust_type)
    return ConfiguredCartItem(
        id=str(uuid.uuid4()),
        menu_item_id=menu_item.id,
        menu_item_name=menu_item.name,
        variant_id=variant.id if variant else None,
        variant_name=variant.name if variant else None,
        size_code=result.size_code,
        crust_type=result.crust_type,
        quantity=quantity,
        base_price=result.base_price,
        selected_toppings=toppings,
        selected_modifiers=modifiers,
        special_instructions=special_instructions,
        total_price=result.final_price,
        display_name=build_display_name(menu_item, result.size_code, result.crust_type),
    )


class CartItemTransformer:
    """购物车条目与订单明细之间的转换，价格只搬运不重算"""

    @staticmethod
    def to_order_item(cart_item: ConfiguredCartItem, order_id: str) -> OrderItemRecord:
        return OrderItemRecord(
            order_id=order_id,
            menu_item_id=cart_item.menu_item_id,
            menu_item_name=cart_item.menu_item_name,
            menu_item_variant_id=cart_item.variant_id,
            menu_item_variant_name=cart_item.variant_name,
            quantity=cart_item.quantity,
            unit_price=cart_item.total_price,
            total_price=round_money(cart_item.total_price * cart_item.quantity),
            selected_toppings_json=json.dumps(
                [t.model_dump(mode="json") for t in cart_item.selected_toppings],
                ensure_ascii=False),
            selected_modifiers_json=json.dumps(
                [m.model_dump(mode="json") for m in cart_item.selected_modifiers],
                ensure_ascii=False),
            special_instructions=cart_item.special_instructions or None,
        )

    @staticmethod
    def from_order_item(record: OrderItemRecord) -> ConfiguredCartItem:
        toppings = [ConfiguredTopping(**t) for t in CartItemTransformer._load_list(record.selected_toppings_json)]
        modifiers = [ConfiguredModifier(**m) for m in CartItemTransformer._load_list(record.selected_modifiers_json)]
        name = record.menu_item_name or "Unknown Item"
        display_name = f"{record.menu_item_variant_name} {name}" if record.menu_item_variant_name else name

        return ConfiguredCartItem(
            id=record.id or str(uuid.uuid4()),
            menu_item_id=record.menu_item_id,
            menu_item_name=name,
            variant_id=record.menu_item_variant_id,
            variant_name=record.menu_item_variant_name,
            quantity=record.quantity,
            base_price=record.unit_price,
            selected_toppings=toppings,
            selected_modifiers=modifiers,
            special_instructions=record.special_instructions,
            total_price=record.unit_price,
            display_name=display_name,
        )

    @staticmethod
    def _load_list(raw: Optional[str]) -> List[Dict[str, Any]]:
        if not raw:
            return []
        data = json.loads(raw)
        return data if isinstance(data, list) else []
