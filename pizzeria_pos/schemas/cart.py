"""
购物车相关的请求模式
"""

from pydantic import Field
from typing import Optional
from .pricing import PizzaPriceRequest


class CartItemRequest(PizzaPriceRequest):
    """把配置好的披萨加入购物车"""
    quantity: int = Field(1, ge=1, le=99, description="数量")
    special_instructions: Optional[str] = Field(None, max_length=500, description="备注")
