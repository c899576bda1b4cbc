"""
配料计价规则
价格 = 基础价 × 用量倍率[档位][用量] × 尺寸倍率[尺寸] × 摆放倍率

主要功能：
- 分类到价格档位（normal/premium/beef/free）的映射
- 默认尺寸倍率表；档位用量倍率与配料 pricing_rules 中的覆盖值叠加
- 加购配料与模板默认配料两条计价路径
- 非配料附加项（做法、调料等）按 price_type 计价
"""

from typing import Dict, Optional

from ..models.catalog import (
    FREE_TIER,
    Customization,
    CustomizationCategory,
    PriceType,
    category_tier,
    merged_tier_schedule,
)
from ..models.pricing import Placement, ToppingAmount
from .placement import placement_multiplier

# 尺寸倍率，12 寸为基准
DEFAULT_SIZE_MULTIPLIERS: Dict[str, float] = {
    "small": 0.865,
    "10in": 0.865,
    "medium": 1.0,
    "12in": 1.0,
    "large": 1.135,
    "14in": 1.135,
    "xlarge": 1.351,
    "16in": 1.351,
}

# 明细排序：premium/beef 在前，其次普通配料、奶酪、酱料，最后是附加项
CATEGORY_PRIORITY = {
    CustomizationCategory.TOPPING_PREMIUM: 0,
    CustomizationCategory.TOPPING_BEEF: 1,
    CustomizationCategory.TOPPING_NORMAL: 2,
    CustomizationCategory.TOPPING_CHEESE: 3,
    CustomizationCategory.TOPPING_SAUCE: 4,
}
MODIFIER_PRIORITY = 5


def category_priority(category: CustomizationCategory) -> int:
    return CATEGORY_PRIORITY.get(category, MODIFIER_PRIORITY)


def size_multiplier(customization: Customization, size_code: str) -> float:
    override = customization.pricing_rules.size_multipliers.get(size_code)
    if override is not None:
        return float(override)
    return DEFAULT_SIZE_MULTIPLIERS.get(size_code, 1.0)


def tier_multiplier(customization: Customization, tier: str, amount: ToppingAmount) -> float:
    """用量倍率；none 恒为 0，配料自带的倍率优先"""
    if amount == ToppingAmount.NONE:
        return 0.0
    schedule = merged_tier_schedule(tier, customization.pricing_rules.tier_multipliers)
    return float(schedule[amount])


def price_addon_topping(customization: Customization, size_code: str,
                        amount: ToppingAmount, placement: Placement,
                        tier: Optional[str] = None) -> float:
    """加购配料的全价（未四舍五入）"""
    tier = tier or category_tier(customization.category)
    if tier == FREE_TIER or amount == ToppingAmount.NONE:
        return 0.0
    return (customization.base_price
            * tier_multiplier(customization, tier, amount)
            * size_multiplier(customization, size_code)
            * placement_multiplier(placement))


def price_default_topping(customization: Customization, size_code: str,
                          amount: ToppingAmount, default_amount: ToppingAmount,
                          placement: Placement) -> float:
    """
    模板默认配料：保持默认用量时已包含在特色基础价内；
    加量时只收取倍率差额，减量不退款（下限为 0）
    """
    tier = category_tier(customization.category)
    if tier == FREE_TIER or amount == ToppingAmount.NONE or amount == default_amount:
        return 0.0
    marginal = (tier_multiplier(customization, tier, amount)
                - tier_multiplier(customization, tier, default_amount))
    if marginal <= 0:
        return 0.0
    return (customization.base_price
            * marginal
            * size_multiplier(customization, size_code)
            * placement_multiplier(placement))


def price_topping(customization: Customization, size_code: str, amount: ToppingAmount,
                  placement: Placement, is_default: bool = False,
                  default_amount: Optional[ToppingAmount] = None) -> float:
    """配料计价入口，按是否模板默认配料分两条路径"""
    if is_default:
        return price_default_topping(customization, size_code, amount,
                                     default_amount or ToppingAmount.NORMAL, placement)
    return price_addon_topping(customization, size_code, amount, placement)


def price_modifier(customization: Customization, size_code: Optional[str],
                   amount: ToppingAmount = ToppingAmount.NORMAL) -> float:
    """非配料附加项计价，忽略摆放区域"""
    if amount == ToppingAmount.NONE:
        return 0.0
    if customization.price_type == PriceType.TIERED:
        variant_price = customization.pricing_rules.variant_base_prices.get(size_code or "")
        return float(variant_price) if variant_price is not None else customization.base_price
    if customization.price_type == PriceType.MULTIPLIED:
        return customization.base_price * size_multiplier(customization, size_code or "")
    return customization.base_price
