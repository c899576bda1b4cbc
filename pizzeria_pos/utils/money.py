"""
金额工具
内部以浮点美元计算，只在输出边界四舍五入到分
"""

from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")


def round_money(value: float) -> float:
    """四舍五入到分（半数进位）"""
    return float(Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP))
