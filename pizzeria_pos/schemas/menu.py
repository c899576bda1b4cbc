"""
菜单目录相关的响应模式
"""

from pydantic import BaseModel, Field
from typing import List
from ..models.catalog import CrustPricing, Customization, MenuItem, PizzaTemplate


class PizzaMenuResponse(BaseModel):
    """披萨点单页所需的目录数据"""
    restaurant_id: str = Field(..., description="餐厅ID")
    pizza_items: List[MenuItem] = Field(default_factory=list, description="披萨菜品")
    crust_pricing: List[CrustPricing] = Field(default_factory=list, description="饼底价格")
    customizations: List[Customization] = Field(default_factory=list, description="适用于披萨的配料")
    templates: List[PizzaTemplate] = Field(default_factory=list, description="特色披萨模板")
    available_sizes: List[str] = Field(default_factory=list, description="可选尺寸")
    available_crusts: List[str] = Field(default_factory=list, description="可选饼底")
