"""
菜单目录数据模型
配料、饼底价格、特色披萨模板、菜品及规格，计价时作为只读快照使用
"""

from pydantic import Field, field_validator, model_validator
from typing import Dict, List, Optional, Tuple
from enum import Enum
from .base import FrozenEntity
from .pricing import AMOUNT_ORDER, PlacementKind, ToppingAmount


class CustomizationCategory(str, Enum):
    """配料/附加项分类"""
    TOPPING_NORMAL = "topping_normal"
    TOPPING_PREMIUM = "topping_premium"
    TOPPING_BEEF = "topping_beef"
    TOPPING_CHEESE = "topping_cheese"
    TOPPING_SAUCE = "topping_sauce"
    WHITE_MEAT = "white_meat"
    SIDES = "sides"
    PREPARATION = "preparation"
    CONDIMENTS = "condiments"

    @property
    def is_topping(self) -> bool:
        return self.value.startswith("topping_")


# 各价格档位的用量倍率
DEFAULT_TIER_MULTIPLIERS: Dict[str, Dict[ToppingAmount, float]] = {
    "normal": {
        ToppingAmount.NONE: 0.0,
        ToppingAmount.LIGHT: 1.0,
        ToppingAmount.NORMAL: 1.0,
        ToppingAmount.EXTRA: 2.0,
        ToppingAmount.XXTRA: 3.0,
    },
    "premium": {
        ToppingAmount.NONE: 0.0,
        ToppingAmount.LIGHT: 1.0,
        ToppingAmount.NORMAL: 1.0,
        ToppingAmount.EXTRA: 1.5,
        ToppingAmount.XXTRA: 2.0,
    },
    "beef": {
        ToppingAmount.NONE: 0.0,
        ToppingAmount.LIGHT: 1.0,
        ToppingAmount.NORMAL: 1.0,
        ToppingAmount.EXTRA: 1.5,
        ToppingAmount.XXTRA: 2.0,
    },
}

FREE_TIER = "free"

CATEGORY_TIERS = {
    CustomizationCategory.TOPPING_PREMIUM: "premium",
    CustomizationCategory.TOPPING_BEEF: "beef",
    CustomizationCategory.TOPPING_SAUCE: FREE_TIER,
}


def category_tier(category: CustomizationCategory) -> str:
    """配料分类对应的价格档位"""
    return CATEGORY_TIERS.get(category, "normal")


def merged_tier_schedule(tier: str, overrides: Dict[ToppingAmount, float]) -> Dict[ToppingAmount, float]:
    """档位默认倍率叠加配料自带倍率；none 恒为 0"""
    schedule = dict(DEFAULT_TIER_MULTIPLIERS.get(tier, DEFAULT_TIER_MULTIPLIERS["normal"]))
    schedule.update(overrides)
    schedule[ToppingAmount.NONE] = 0.0
    return schedule


class PriceType(str, Enum):
    """附加项计价方式"""
    FIXED = "fixed"
    MULTIPLIED = "multiplied"
    TIERED = "tiered"


class ItemKind(str, Enum):
    """菜品类型"""
    PIZZA = "pizza"
    CHICKEN = "chicken"
    APPETIZER = "appetizer"
    SANDWICH = "sandwich"
    STANDARD = "standard"


class PricingRules(FrozenEntity):
    """配料计价规则，未配置的项使用系统默认倍率"""
    size_multipliers: Dict[str, float] = Field(default_factory=dict, description="尺寸倍率")
    tier_multipliers: Dict[ToppingAmount, float] = Field(default_factory=dict, description="用量倍率")
    variant_base_prices: Dict[str, float] = Field(default_factory=dict, description="按尺寸的固定价格")

    @field_validator("tier_multipliers")
    @classmethod
    def validate_tier_multipliers(cls, v):
        """用量倍率必须随用量单调不减"""
        previous = None
        for amount in AMOUNT_ORDER:
            if amount not in v:
                continue
            if v[amount] < 0:
                raise ValueError("用量倍率不能为负数")
            if previous is not None and v[amount] < previous:
                raise ValueError("用量倍率必须随用量单调不减")
            previous = v[amount]
        return v


class Customization(FrozenEntity):
    """配料/附加项"""
    id: str = Field(..., description="配料ID")
    restaurant_id: str = Field(..., description="餐厅ID")
    name: str = Field(..., description="名称")
    category: CustomizationCategory = Field(..., description="分类")
    base_price: float = Field(..., ge=0, description="基础价格（美元）")
    price_type: PriceType = Field(PriceType.FIXED, description="计价方式")
    pricing_rules: PricingRules = Field(default_factory=PricingRules, description="计价规则")
    applies_to: Tuple[ItemKind, ...] = Field(default_factory=tuple, description="适用的菜品类型")
    sort_order: int = Field(0, description="排序")
    is_available: bool = Field(True, description="是否可售")
    description: Optional[str] = Field(None, description="描述")

    @model_validator(mode="after")
    def validate_effective_schedule(self):
        """叠加后的用量倍率同样必须随用量单调不减"""
        overrides = self.pricing_rules.tier_multipliers
        tier = category_tier(self.category)
        if not overrides or tier == FREE_TIER:
            return self
        schedule = merged_tier_schedule(tier, overrides)
        values = [schedule[amount] for amount in AMOUNT_ORDER]
        if any(later < earlier for earlier, later in zip(values, values[1:])):
            raise ValueError(f"配料 {self.id} 的用量倍率与 {tier} 档位默认值叠加后不单调")
        return self

    def applies_to_kind(self, kind: ItemKind) -> bool:
        return kind in self.applies_to


class CrustPricing(FrozenEntity):
    """尺寸 + 饼底的价格行，没有对应行表示不提供"""
    restaurant_id: str = Field(..., description="餐厅ID")
    size_code: str = Field(..., description="尺寸编码")
    crust_type: str = Field(..., description="饼底类型")
    base_price: float = Field(..., ge=0, description="基础价格")
    upcharge: float = Field(0.0, ge=0, description="饼底加价")
    is_available: bool = Field(True, description="是否可售")


class TemplateTopping(FrozenEntity):
    """特色披萨模板中的默认配料"""
    customization_id: str = Field(..., description="配料ID")
    default_amount: ToppingAmount = Field(ToppingAmount.NORMAL, description="默认用量")
    default_placement: PlacementKind = Field(PlacementKind.WHOLE, description="默认摆放")
    is_removable: bool = Field(True, description="是否允许去掉")
    substitution_tier: str = Field("normal", description="替换抵扣时采用的价格档位")
    sort_order: int = Field(0, description="排序")


class PizzaTemplate(FrozenEntity):
    """特色披萨模板"""
    id: str = Field(..., description="模板ID")
    restaurant_id: str = Field(..., description="餐厅ID")
    menu_item_id: str = Field(..., description="菜品ID")
    name: str = Field(..., description="模板名称")
    markup_type: str = Field("additive", description="加价方式")
    credit_limit_percentage: Optional[float] = Field(None, ge=0, le=1, description="去掉默认配料时的抵扣上限比例")
    is_active: bool = Field(True, description="是否启用")
    toppings: Tuple[TemplateTopping, ...] = Field(default_factory=tuple, description="默认配料")

    def ordered_toppings(self) -> List[TemplateTopping]:
        return sorted(self.toppings, key=lambda t: (t.sort_order, t.customization_id))


class MenuItemVariant(FrozenEntity):
    """菜品规格（尺寸/份量）"""
    id: str = Field(..., description="规格ID")
    menu_item_id: str = Field(..., description="菜品ID")
    name: str = Field(..., description="规格名称")
    size_code: Optional[str] = Field(None, description="尺寸编码")
    crust_type: Optional[str] = Field(None, description="饼底类型")
    price: float = Field(..., ge=0, description="价格")
    serves: Optional[str] = Field(None, description="适合人数")
    prep_time_minutes: Optional[int] = Field(None, description="制作时间（分钟）")
    white_meat_upcharge: float = Field(0.0, ge=0, description="白肉加价")
    is_available: bool = Field(True, description="是否可售")
    sort_order: int = Field(0, description="排序")


class MenuItem(FrozenEntity):
    """菜品"""
    id: str = Field(..., description="菜品ID")
    restaurant_id: str = Field(..., description="餐厅ID")
    name: str = Field(..., description="名称")
    description: Optional[str] = Field(None, description="描述")
    item_type: ItemKind = Field(ItemKind.STANDARD, description="菜品类型")
    pizza_style: Optional[str] = Field(None, description="披萨风格，例如 deep_dish")
    base_price: float = Field(..., ge=0, description="基础价格")
    prep_time_minutes: Optional[int] = Field(None, description="制作时间（分钟）")
    is_available: bool = Field(True, description="是否可售")
    sort_order: int = Field(0, description="排序")
    variants: Tuple[MenuItemVariant, ...] = Field(default_factory=tuple, description="规格列表")

    def variant_for(self, size_code: str, crust_type: Optional[str] = None) -> Optional[MenuItemVariant]:
        """按尺寸查找可售规格，同尺寸下优先匹配饼底"""
        candidates = [v for v in self.variants if v.is_available and v.size_code == size_code]
        if not candidates:
            return None
        for variant in candidates:
            if crust_type and variant.crust_type == crust_type:
                return variant
        for variant in candidates:
            if not variant.crust_type:
                return variant
        return candidates[0]

    def find_variant(self, variant_id: str) -> Optional[MenuItemVariant]:
        for variant in self.variants:
            if variant.id == variant_id:
                return variant
        return None


class CatalogSnapshot(FrozenEntity):
    """某餐厅的菜单目录快照，计价时只读"""
    restaurant_id: str = Field(..., description="餐厅ID")
    menu_items: Dict[str, MenuItem] = Field(default_factory=dict, description="菜品")
    customizations: Dict[str, Customization] = Field(default_factory=dict, description="配料")
    crust_pricing: Dict[Tuple[str, str], CrustPricing] = Field(default_factory=dict, description="饼底价格")
    templates: Dict[str, PizzaTemplate] = Field(default_factory=dict, description="按菜品ID索引的模板")

    @classmethod
    def build(cls, restaurant_id: str, menu_items=(), customizations=(),
              crust_pricing=(), templates=()) -> "CatalogSnapshot":
        """由列表构建快照"""
        return cls(
            restaurant_id=restaurant_id,
            menu_items={m.id: m for m in menu_items},
            customizations={c.id: c for c in customizations},
            crust_pricing={(cp.size_code, cp.crust_type): cp for cp in crust_pricing},
            templates={t.menu_item_id: t for t in templates if t.is_active},
        )

    def crust_row(self, size_code: str, crust_type: str) -> Optional[CrustPricing]:
        return self.crust_pricing.get((size_code, crust_type))

    def template_for(self, menu_item_id: str) -> Optional[PizzaTemplate]:
        return self.templates.get(menu_item_id)

    def find_variant(self, variant_id: str) -> Optional[Tuple[MenuItem, MenuItemVariant]]:
        for item in self.menu_items.values():
            variant = item.find_variant(variant_id)
            if variant is not None:
                return item, variant
        return None

    def available_sizes(self) -> List[str]:
        sizes = {cp.size_code for cp in self.crust_pricing.values() if cp.is_available}
        return sort_sizes(sizes)

    def available_crusts(self) -> List[str]:
        return sorted({cp.crust_type for cp in self.crust_pricing.values() if cp.is_available})


# 尺寸从小到大的显示顺序
SIZE_ORDER = ["small", "10in", "medium", "12in", "large", "14in", "xlarge", "16in"]


def size_rank(size_code: str) -> Tuple[int, str]:
    return (SIZE_ORDER.index(size_code) if size_code in SIZE_ORDER else len(SIZE_ORDER), size_code)


def sort_sizes(sizes) -> List[str]:
    return sorted(sizes, key=size_rank)
