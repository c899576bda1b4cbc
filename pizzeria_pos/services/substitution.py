"""
替换抵扣计算
去掉可移除的模板默认配料时给予抵扣，而不是简单记 0 元

计算规则（可配置，上线前需与门店业务规则确认）：
- 单项抵扣 = 该默认配料的名义价值 × 模板的 credit_limit_percentage
  名义价值按模板行的 substitution_tier 档位、默认用量、整张摆放计算
- 累计抵扣不超过 credit_limit_percentage × 模板全部默认配料的名义价值（由单项规则保证）
- 实际抵扣低于被去掉配料的名义价值时记为 limit_hit
- 抵扣后的最终价格不得低于特色披萨的基础规格价格
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from ..models.catalog import DEFAULT_TIER_MULTIPLIERS, FREE_TIER, Customization, category_tier
from ..models.pricing import PlacementKind
from .template_resolver import ResolvedSelection
from .topping_pricing import price_addon_topping


@dataclass
class CreditLine:
    customization_id: str
    name: str
    nominal_value: float
    credit: float


@dataclass
class SubstitutionCredit:
    credit_limit_percentage: float
    included_value: float = 0.0
    removed_value: float = 0.0
    requested_credit: float = 0.0
    applied_credit: float = 0.0
    limit_hit: bool = False
    lines: List[CreditLine] = field(default_factory=list)


def substitution_tier_for(tier: Optional[str], customization: Customization) -> str:
    if tier and (tier in DEFAULT_TIER_MULTIPLIERS or tier == FREE_TIER):
        return tier
    return category_tier(customization.category)


def nominal_value(customization: Customization, size_code: str,
                  selection_tier: Optional[str], default_amount) -> float:
    """默认配料按加购方式计价时的名义价值"""
    if category_tier(customization.category) == FREE_TIER:
        return 0.0
    tier = substitution_tier_for(selection_tier, customization)
    return price_addon_topping(customization, size_code, default_amount,
                               PlacementKind.WHOLE, tier=tier)


def compute_substitution_credit(size_code: str,
                                defaults: List[Tuple[ResolvedSelection, Customization]],
                                credit_limit_percentage: float) -> SubstitutionCredit:
    """
    计算去掉默认配料后的抵扣金额（尚未应用最终价格下限）

    Args:
        size_code: 尺寸编码
        defaults: 模板全部默认配料及其目录数据
        credit_limit_percentage: 抵扣上限比例
    """
    result = SubstitutionCredit(credit_limit_percentage=credit_limit_percentage)

    for selection, customization in defaults:
        value = nominal_value(customization, size_code,
                              selection.substitution_tier, selection.default_amount)
        result.included_value += value
        if not selection.is_removal:
            continue

        credit = value * credit_limit_percentage
        result.removed_value += value
        result.requested_credit += credit
        result.lines.append(CreditLine(
            customization_id=customization.id,
            name=customization.name,
            nominal_value=value,
            credit=credit,
        ))

    result.applied_credit = result.requested_credit
    result.limit_hit = result.applied_credit < result.removed_value
    return result


def apply_price_floor(credit: SubstitutionCredit, subtotal: float, floor_price: float) -> float:
    """抵扣不能把最终价格压到基础规格价格以下，返回实际抵扣金额"""
    headroom = max(0.0, subtotal - floor_price)
    if credit.applied_credit > headroom:
        credit.applied_credit = headroom
        credit.limit_hit = True
    return credit.applied_credit
