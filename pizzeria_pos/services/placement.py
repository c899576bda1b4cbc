"""
配料摆放区域解析
把整张/半边/四分之一/四分之三/四分区集合转换为价格倍率
"""

from typing import List

from ..core.exceptions import InvalidPlacementError
from ..models.pricing import Placement, PlacementKind, QuarterSet

PLACEMENT_MULTIPLIERS = {
    PlacementKind.WHOLE: 1.0,
    PlacementKind.LEFT: 0.5,
    PlacementKind.RIGHT: 0.5,
    PlacementKind.QUARTER: 0.25,
    PlacementKind.THREE_QUARTERS: 0.75,
}

QUARTER_MULTIPLIER = 0.25

PLACEMENT_LABELS = {
    PlacementKind.WHOLE: "Full",
    PlacementKind.LEFT: "Left Half",
    PlacementKind.RIGHT: "Right Half",
    PlacementKind.QUARTER: "1/4",
    PlacementKind.THREE_QUARTERS: "3/4",
}


def validate_quarter_set(customization_id: str, quarter_set: QuarterSet) -> None:
    """四分区集合必须有 1~4 个互不重复的成员"""
    count = len(quarter_set.quarters)
    if count == 0:
        raise InvalidPlacementError(customization_id, "四分区集合不能为空")
    if count > 4:
        raise InvalidPlacementError(customization_id, f"四分区集合最多 4 个成员，收到 {count} 个")
    if len(quarter_set.distinct) != count:
        raise InvalidPlacementError(customization_id, "四分区集合存在重复成员")


def placement_multiplier(placement: Placement) -> float:
    """摆放区域对应的价格倍率"""
    if isinstance(placement, QuarterSet):
        return QUARTER_MULTIPLIER * len(placement.distinct)
    if isinstance(placement, PlacementKind):
        return PLACEMENT_MULTIPLIERS[placement]
    raise TypeError(f"未知的摆放类型: {placement!r}")


def normalize_placement(placement: Placement) -> Placement:
    """四个分区全选按整张处理"""
    if isinstance(placement, QuarterSet) and placement.is_whole:
        return PlacementKind.WHOLE
    return placement


def placement_label(placement: Placement) -> str:
    if isinstance(placement, QuarterSet):
        tags: List[str] = placement.sorted_tags()
        return "+".join(t.upper() for t in tags)
    return PLACEMENT_LABELS[placement]
