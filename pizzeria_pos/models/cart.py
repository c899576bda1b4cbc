"""
购物车数据模型
价格在配置完成时冻结，之后目录变更不会影响已配置的商品
"""

from pydantic import Field
from typing import List, Optional, Union
from .base import BaseEntity
from .pricing import ToppingAmount


class ConfiguredTopping(BaseEntity):
    """已定价的配料"""
    id: str = Field(..., description="配料ID")
    name: str = Field(..., description="名称")
    amount: ToppingAmount = Field(ToppingAmount.NORMAL, description="用量")
    placement: Optional[Union[str, List[str]]] = Field(None, description="摆放区域")
    price: float = Field(0.0, description="冻结的价格")
    is_default: bool = Field(False, description="是否模板默认配料")
    category: str = Field("other", description="分类")


class ConfiguredModifier(BaseEntity):
    """已定价的附加项"""
    id: str = Field(..., description="附加项ID")
    name: str = Field(..., description="名称")
    price_adjustment: float = Field(0.0, description="冻结的加价")


class ConfiguredCartItem(BaseEntity):
    """购物车中已配置完成的商品"""
    id: str = Field(..., description="购物车条目ID")
    menu_item_id: str = Field(..., description="菜品ID")
    menu_item_name: str = Field(..., description="菜品名称")
    variant_id: Optional[str] = Field(None, description="规格ID")
    variant_name: Optional[str] = Field(None, description="规格名称")
    size_code: Optional[str] = Field(None, description="尺寸编码")
    crust_type: Optional[str] = Field(None, description="饼底类型")
    quantity: int = Field(1, ge=1, description="数量")
    base_price: float = Field(..., description="基础价格")
    selected_toppings: List[ConfiguredTopping] = Field(default_factory=list, description="配料")
    selected_modifiers: List[ConfiguredModifier] = Field(default_factory=list, description="附加项")
    special_instructions: Optional[str] = Field(None, description="备注")
    total_price: float = Field(..., description="单件价格，等于计价结果的最终价格")
    display_name: str = Field(..., description="显示名称")


class OrderItemRecord(BaseEntity):
    """订单明细的扁平存储格式"""
    id: Optional[str] = Field(None, description="明细ID")
    order_id: str = Field(..., description="订单ID")
    menu_item_id: str = Field(..., description="菜品ID")
    menu_item_name: Optional[str] = Field(None, description="菜品名称")
    menu_item_variant_id: Optional[str] = Field(None, description="规格ID")
    menu_item_variant_name: Optional[str] = Field(None, description="规格名称")
    quantity: int = Field(1, ge=1, description="数量")
    unit_price: float = Field(..., description="单价")
    total_price: float = Field(..., description="总价")
    selected_toppings_json: Optional[str] = Field(None, description="配料 JSON")
    selected_modifiers_json: Optional[str] = Field(None, description="附加项 JSON")
    special_instructions: Optional[str] = Field(None, description="备注")
