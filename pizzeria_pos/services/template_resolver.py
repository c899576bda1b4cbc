"""
特色披萨模板默认配料解析
把模板默认配料与用户的显式选择合并，每一项标记是否为模板默认配料
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..models.catalog import PizzaTemplate
from ..models.pricing import Placement, ToppingAmount, ToppingSelection


@dataclass(frozen=True)
class ResolvedSelection:
    customization_id: str
    amount: ToppingAmount
    placement: Placement
    is_default: bool = False
    default_amount: Optional[ToppingAmount] = None
    is_removable: bool = True
    substitution_tier: Optional[str] = None
    explicit: bool = True

    @property
    def is_removal(self) -> bool:
        """去掉可移除的模板默认配料"""
        return self.is_default and self.is_removable and self.amount == ToppingAmount.NONE


def dedupe_selections(selections: List[ToppingSelection]) -> Tuple[Dict[str, ToppingSelection], List[str]]:
    """同一配料重复出现时以最后一次为准"""
    latest: Dict[str, ToppingSelection] = {}
    warnings: List[str] = []
    for selection in selections:
        if selection.customization_id in latest:
            warnings.append(f"配料重复选择，以最后一次为准: {selection.customization_id}")
            del latest[selection.customization_id]
        latest[selection.customization_id] = selection
    return latest, warnings


def resolve_template_defaults(template: Optional[PizzaTemplate],
                              selections: List[ToppingSelection]) -> Tuple[List[ResolvedSelection], List[str]]:
    """
    合并模板默认配料与用户选择

    Args:
        template: 菜品的特色模板，普通披萨为 None
        selections: 用户显式选择的配料

    Returns:
        (合并后的选择列表, 警告列表)；模板默认配料在前，按模板顺序排列
    """
    latest, warnings = dedupe_selections(selections)
    resolved: List[ResolvedSelection] = []

    if template is not None:
        for topping in template.ordered_toppings():
            override = latest.pop(topping.customization_id, None)
            if override is None:
                resolved.append(ResolvedSelection(
                    customization_id=topping.customization_id,
                    amount=topping.default_amount,
                    placement=topping.default_placement,
                    is_default=True,
                    default_amount=topping.default_amount,
                    is_removable=topping.is_removable,
                    substitution_tier=topping.substitution_tier,
                    explicit=False,
                ))
                continue

            amount = override.amount
            placement = override.placement
            if amount == ToppingAmount.NONE and not topping.is_removable:
                warnings.append(f"该默认配料不可去掉，已保留默认用量: {topping.customization_id}")
                amount = topping.default_amount
                placement = topping.default_placement

            resolved.append(ResolvedSelection(
                customization_id=topping.customization_id,
                amount=amount,
                placement=placement,
                is_default=True,
                default_amount=topping.default_amount,
                is_removable=topping.is_removable,
                substitution_tier=topping.substitution_tier,
            ))

    for selection in latest.values():
        resolved.append(ResolvedSelection(
            customization_id=selection.customization_id,
            amount=selection.amount,
            placement=selection.placement,
        ))

    return resolved, warnings
