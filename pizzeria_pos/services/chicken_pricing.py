"""
炸鸡计价
基础价取规格价格，白肉按档位倍率加价，附加项按 price_type 计价
"""

import logging
from typing import List

from ..core.exceptions import PricingValidationError, VariantNotFoundError
from ..models.catalog import CatalogSnapshot, ItemKind
from ..models.pricing import ToppingAmount
from ..schemas.pricing import ChickenBreakdownItem, ChickenPriceRequest, ChickenPriceResponse
from ..utils.money import round_money
from .topping_pricing import price_modifier

logger = logging.getLogger(__name__)

WHITE_MEAT_MULTIPLIERS = {
    ToppingAmount.NONE: 0,
    ToppingAmount.NORMAL: 1,
    ToppingAmount.EXTRA: 2,
    ToppingAmount.XXTRA: 3,
}

WHITE_MEAT_LABELS = {
    ToppingAmount.NORMAL: "White Meat",
    ToppingAmount.EXTRA: "Extra White Meat",
    ToppingAmount.XXTRA: "XXtra White Meat",
}

DEFAULT_CHICKEN_PREP_MINUTES = 20


def chicken_prep_time(variant_prep: int, customization_count: int,
                      white_meat_tier: ToppingAmount) -> int:
    minutes = (variant_prep or DEFAULT_CHICKEN_PREP_MINUTES) + min(customization_count * 2, 8)
    if white_meat_tier != ToppingAmount.NONE:
        minutes += 3
    if white_meat_tier == ToppingAmount.XXTRA:
        minutes += 2
    return minutes


def calculate_chicken_price(request: ChickenPriceRequest, snapshot: CatalogSnapshot) -> ChickenPriceResponse:
    """
    计算炸鸡价格

    Raises:
        VariantNotFoundError: 规格不存在或不属于该餐厅
        PricingValidationError: 规格当前不可售
    """
    if request.restaurant_id != snapshot.restaurant_id:
        raise VariantNotFoundError(request.variant_id)
    found = snapshot.find_variant(request.variant_id)
    if found is None:
        raise VariantNotFoundError(request.variant_id)
    item, variant = found
    if not variant.is_available:
        raise PricingValidationError(
            f"规格当前不可售: {variant.name}",
            details={"variant_id": variant.id},
        )

    warnings: List[str] = []
    base_price = round_money(variant.price)
    white_meat_cost = round_money(variant.white_meat_upcharge * WHITE_MEAT_MULTIPLIERS[request.white_meat_tier])

    breakdown = [ChickenBreakdownItem(
        name=f"{variant.name} Base",
        price=base_price,
        type="base",
    )]
    if white_meat_cost > 0:
        breakdown.append(ChickenBreakdownItem(
            name=WHITE_MEAT_LABELS[request.white_meat_tier],
            price=white_meat_cost,
            type="white_meat",
            tier=request.white_meat_tier.value,
        ))

    customizations_cost = 0.0
    priced_count = 0
    seen = set()
    for customization_id in request.customization_ids:
        if customization_id in seen:
            warnings.append(f"附加项重复选择，已忽略: {customization_id}")
            continue
        seen.add(customization_id)

        customization = snapshot.customizations.get(customization_id)
        if customization is None or not customization.is_available \
                or not customization.applies_to_kind(ItemKind.CHICKEN):
            warnings.append(f"附加项不存在或不适用于炸鸡，已忽略: {customization_id}")
            continue

        price = round_money(price_modifier(customization, variant.size_code))
        customizations_cost += price
        priced_count += 1
        breakdown.append(ChickenBreakdownItem(
            name=customization.name,
            price=price,
            type="customization",
            category=customization.category.value,
            customization_id=customization.id,
        ))

    if warnings:
        logger.warning("炸鸡计价忽略了部分附加项: %s", warnings)

    customizations_cost = round_money(customizations_cost)
    final_price = round_money(base_price + white_meat_cost + customizations_cost)
    logger.info("炸鸡计价完成 %s 白肉 %s 最终价 %.2f",
                variant.name, request.white_meat_tier.value, final_price)

    return ChickenPriceResponse(
        base_price=base_price,
        white_meat_cost=white_meat_cost,
        customizations_cost=customizations_cost,
        final_price=final_price,
        breakdown=breakdown,
        estimated_prep_time=chicken_prep_time(variant.prep_time_minutes, priced_count,
                                              request.white_meat_tier),
        warnings=warnings,
        variant_info={
            "name": variant.name,
            "menu_item_name": item.name,
            "serves": variant.serves,
            "white_meat_upcharge": variant.white_meat_upcharge,
        },
    )
