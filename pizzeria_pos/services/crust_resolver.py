"""
尺寸/饼底价格解析
普通披萨的基础价来自饼底价格表；特色披萨的基础价来自该菜品对应尺寸的规格价格，
饼底价格表只提供饼底加价，绝不作为特色披萨基础价的兜底
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ..config.settings import Settings, settings as default_settings
from ..core.exceptions import GlutenFreeNotAllowedError, PricingUnavailableError
from ..models.catalog import CatalogSnapshot, MenuItem, PizzaTemplate

logger = logging.getLogger(__name__)

GLUTEN_FREE = "gluten_free"


@dataclass(frozen=True)
class CrustResolution:
    base_price: float
    base_price_source: str  # "specialty" | "regular"
    crust_upcharge: float
    is_available: bool
    variant_id: Optional[str] = None
    variant_name: Optional[str] = None


def is_deep_dish(item: MenuItem, config: Settings = None) -> bool:
    """深盘类披萨：按风格或菜品名称判断"""
    config = config or default_settings
    style = (item.pizza_style or "").lower()
    if style in [s.lower() for s in config.deep_dish_styles]:
        return True
    return item.name.lower() in [n.lower() for n in config.deep_dish_item_names]


def check_crust_rules(item: MenuItem, size_code: str, crust_type: str,
                      config: Settings = None) -> None:
    """业务例外：深盘类披萨的最小尺寸不能选无麸质饼底"""
    config = config or default_settings
    if crust_type == GLUTEN_FREE and is_deep_dish(item, config) \
            and size_code in config.gluten_free_excluded_sizes:
        raise GlutenFreeNotAllowedError(item.name, size_code)


def resolve_crust(snapshot: CatalogSnapshot, item: MenuItem, size_code: str,
                  crust_type: str, template: Optional[PizzaTemplate] = None,
                  config: Settings = None) -> CrustResolution:
    """
    解析基础价和饼底加价

    Raises:
        GlutenFreeNotAllowedError: 深盘类披萨最小尺寸选择无麸质饼底时
        PricingUnavailableError: 找不到可售的饼底价格行，或特色披萨缺少该尺寸规格时
    """
    check_crust_rules(item, size_code, crust_type, config)

    row = snapshot.crust_row(size_code, crust_type)
    if row is None:
        raise PricingUnavailableError(size_code, crust_type)
    if not row.is_available:
        raise PricingUnavailableError(
            size_code, crust_type, f"{size_code} {crust_type} 当前不可售")

    if template is None:
        return CrustResolution(
            base_price=row.base_price,
            base_price_source="regular",
            crust_upcharge=row.upcharge,
            is_available=row.is_available,
        )

    variant = item.variant_for(size_code, crust_type)
    if variant is None:
        logger.warning("特色披萨 %s 缺少 %s 规格价格", item.name, size_code)
        raise PricingUnavailableError(
            size_code, crust_type, f"{item.name} 没有 {size_code} 规格的价格")

    return CrustResolution(
        base_price=variant.price,
        base_price_source="specialty",
        crust_upcharge=row.upcharge,
        is_available=row.is_available and variant.is_available,
        variant_id=variant.id,
        variant_name=variant.name,
    )
