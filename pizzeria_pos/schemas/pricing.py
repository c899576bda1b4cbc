"""
计价相关的请求/响应模式
"""

from pydantic import BaseModel, Field, field_validator
from pydantic.alias_generators import to_camel
from typing import Any, Dict, List, Optional
from ..models.pricing import PriceBreakdownItem, ToppingAmount, ToppingSelection


class PizzaPriceRequest(BaseModel):
    """披萨计价请求"""
    restaurant_id: str = Field(..., min_length=1, description="餐厅ID")
    menu_item_id: str = Field(..., min_length=1, description="菜品ID")
    size_code: str = Field(..., min_length=1, description="尺寸编码")
    crust_type: str = Field(..., min_length=1, description="饼底类型")
    toppings: List[ToppingSelection] = Field(default_factory=list, description="配料选择")


class TemplateInfo(BaseModel):
    """特色披萨模板信息"""
    name: str = Field(..., description="模板名称")
    included_toppings: List[str] = Field(default_factory=list, description="包含的默认配料")
    credit_limit_percentage: float = Field(..., description="抵扣上限比例")
    credit_applied: float = Field(0.0, description="实际抵扣金额")
    credit_limit_hit: bool = Field(False, description="是否触及抵扣上限")

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


class PizzaPriceResponse(BaseModel):
    """披萨计价结果"""
    base_price: float = Field(..., description="基础价格")
    base_price_source: str = Field(..., description="基础价来源 specialty/regular")
    crust_upcharge: float = Field(..., description="饼底加价")
    topping_cost: float = Field(..., description="配料费用")
    substitution_credit: float = Field(..., description="替换抵扣")
    final_price: float = Field(..., description="最终价格")
    breakdown: List[PriceBreakdownItem] = Field(default_factory=list, description="价格明细")
    size_code: str = Field(..., description="尺寸编码")
    crust_type: str = Field(..., description="饼底类型")
    estimated_prep_time: int = Field(..., description="预计制作时间（分钟）")
    warnings: List[str] = Field(default_factory=list, description="警告")
    template_info: Optional[TemplateInfo] = Field(None, description="特色模板信息")

    model_config = {"alias_generator": to_camel, "populate_by_name": True}


WHITE_MEAT_TIERS = (ToppingAmount.NONE, ToppingAmount.NORMAL, ToppingAmount.EXTRA, ToppingAmount.XXTRA)


class ChickenPriceRequest(BaseModel):
    """炸鸡计价请求"""
    restaurant_id: str = Field(..., min_length=1, description="餐厅ID")
    variant_id: str = Field(..., min_length=1, description="规格ID")
    white_meat_tier: ToppingAmount = Field(ToppingAmount.NONE, description="白肉档位")
    customization_ids: List[str] = Field(default_factory=list, description="附加项ID")

    @field_validator("white_meat_tier")
    @classmethod
    def validate_white_meat_tier(cls, v):
        if v not in WHITE_MEAT_TIERS:
            raise ValueError("白肉档位只能是 none/normal/extra/xxtra")
        return v


class ChickenBreakdownItem(BaseModel):
    """炸鸡价格明细行"""
    name: str = Field(..., description="显示名称")
    price: float = Field(..., description="金额")
    type: str = Field(..., description="base/white_meat/customization")
    tier: Optional[str] = Field(None, description="白肉档位")
    category: Optional[str] = Field(None, description="分类")
    customization_id: Optional[str] = Field(None, description="附加项ID")


class ChickenPriceResponse(BaseModel):
    """炸鸡计价结果"""
    base_price: float = Field(..., description="基础价格")
    white_meat_cost: float = Field(..., description="白肉费用")
    customizations_cost: float = Field(..., description="附加项费用")
    final_price: float = Field(..., description="最终价格")
    breakdown: List[ChickenBreakdownItem] = Field(default_factory=list, description="价格明细")
    estimated_prep_time: int = Field(..., description="预计制作时间（分钟）")
    warnings: List[str] = Field(default_factory=list, description="警告")
    variant_info: Dict[str, Any] = Field(default_factory=dict, description="规格信息")
