"""
计价相关数据模型
配料用量、摆放区域（整张/半边/四分之一/四分区集合）和用户的配料选择
"""

from pydantic import BaseModel, Field, field_validator, field_serializer
from typing import List, Optional, Tuple, Union
from enum import Enum


class ToppingAmount(str, Enum):
    """配料用量，按 none < light < normal < extra < xxtra 排序"""
    NONE = "none"
    LIGHT = "light"
    NORMAL = "normal"
    EXTRA = "extra"
    XXTRA = "xxtra"

    @property
    def rank(self) -> int:
        return AMOUNT_ORDER.index(self)


AMOUNT_ORDER: List[ToppingAmount] = [
    ToppingAmount.NONE,
    ToppingAmount.LIGHT,
    ToppingAmount.NORMAL,
    ToppingAmount.EXTRA,
    ToppingAmount.XXTRA,
]


class PlacementKind(str, Enum):
    """固定摆放区域"""
    WHOLE = "whole"
    LEFT = "left"
    RIGHT = "right"
    QUARTER = "quarter"
    THREE_QUARTERS = "three_quarters"


class Quarter(str, Enum):
    """四分区标签"""
    Q1 = "q1"
    Q2 = "q2"
    Q3 = "q3"
    Q4 = "q4"


class QuarterSet(BaseModel):
    """
    显式的四分区集合，例如 ["q1", "q3"]

    成员数量的合法性（1~4 个且不重复）由计价器的校验阶段检查，
    这里保留原始输入以便给出准确的错误信息。
    """
    quarters: Tuple[Quarter, ...] = Field(..., description="选中的四分区")

    model_config = {"frozen": True}

    @property
    def distinct(self) -> frozenset:
        return frozenset(self.quarters)

    @property
    def is_whole(self) -> bool:
        """四个分区全选等同于整张"""
        return len(self.distinct) == 4

    def sorted_tags(self) -> List[str]:
        return sorted(q.value for q in self.distinct)


# 摆放区域：固定字面值或四分区集合
Placement = Union[PlacementKind, QuarterSet]


def parse_placement(value) -> Placement:
    """把请求中的摆放值（字符串或四分区数组）解析为 Placement"""
    if value is None:
        return PlacementKind.WHOLE
    if isinstance(value, (PlacementKind, QuarterSet)):
        return value
    if isinstance(value, (list, tuple)):
        return QuarterSet(quarters=tuple(value))
    if isinstance(value, dict) and "quarters" in value:
        return QuarterSet(quarters=tuple(value["quarters"]))
    return PlacementKind(value)


def placement_to_wire(placement: Placement) -> Union[str, List[str]]:
    """转换为接口格式：字面值字符串或四分区标签数组"""
    if isinstance(placement, QuarterSet):
        return [q.value for q in placement.quarters]
    return placement.value


class ToppingSelection(BaseModel):
    """单个配料选择（计价引擎输入）"""
    customization_id: str = Field(..., description="配料ID")
    amount: ToppingAmount = Field(ToppingAmount.NORMAL, description="用量")
    placement: Placement = Field(PlacementKind.WHOLE, description="摆放区域")

    @field_validator("placement", mode="before")
    @classmethod
    def validate_placement(cls, v):
        """接受 "whole" 之类的字面值或 ["q1", "q2"] 之类的数组"""
        return parse_placement(v)

    @field_serializer("placement")
    def serialize_placement(self, placement: Placement):
        return placement_to_wire(placement)


class BreakdownType(str, Enum):
    """价格明细行类型"""
    SPECIALTY_BASE = "specialty_base"
    REGULAR_BASE = "regular_base"
    CRUST = "crust"
    TOPPING = "topping"
    TEMPLATE_DEFAULT = "template_default"
    TEMPLATE_EXTRA = "template_extra"
    MODIFIER = "modifier"
    SUBSTITUTION_CREDIT = "substitution_credit"


class PriceBreakdownItem(BaseModel):
    """价格明细行"""
    name: str = Field(..., description="显示名称")
    price: float = Field(..., description="金额（美元）")
    type: BreakdownType = Field(..., description="明细类型")
    amount: Optional[ToppingAmount] = Field(None, description="用量")
    placement: Optional[Union[str, List[str]]] = Field(None, description="摆放区域")
    category: Optional[str] = Field(None, description="配料分类")
    is_default: bool = Field(False, description="是否模板默认配料")
    note: Optional[str] = Field(None, description="计算说明")
    customization_id: Optional[str] = Field(None, description="配料ID")
