"""
自定义异常类
提供更精确的错误处理和异常信息
"""

from typing import Any, Dict, Optional


class BaseApplicationError(Exception):
    """应用基础异常类"""

    def __init__(
        self,
        message: str,
        error_code: str = None,
        details: Dict[str, Any] = None
    ):
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class DatabaseError(BaseApplicationError):
    """数据库相关异常"""

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(message, "DATABASE_ERROR", details)


class ValidationError(BaseApplicationError):
    """数据验证异常"""

    def __init__(self, message: str, details: Dict[str, Any] = None):
        super().__init__(message, "VALIDATION_ERROR", details)


class BusinessLogicError(BaseApplicationError):
    """业务逻辑异常"""
    pass


class PricingValidationError(ValidationError):
    """计价请求校验失败，调用方修正输入后可重试"""
    pass


class GlutenFreeNotAllowedError(PricingValidationError):
    """深盘类披萨的最小尺寸不提供无麸质饼底"""

    def __init__(self, item_name: str, size_code: str):
        super().__init__(
            f"{item_name} 的 {size_code} 尺寸不提供无麸质饼底",
            details={"item_name": item_name, "size_code": size_code},
        )
        self.error_code = "GLUTEN_FREE_NOT_ALLOWED"


class InvalidPlacementError(PricingValidationError):
    """配料摆放区域不合法"""

    def __init__(self, customization_id: str, reason: str):
        super().__init__(
            f"配料 {customization_id} 的摆放区域不合法: {reason}",
            details={"customization_id": customization_id, "reason": reason},
        )
        self.error_code = "INVALID_PLACEMENT"


class PricingUnavailableError(BusinessLogicError):
    """找不到对应的尺寸/饼底价格，禁止以 0 元或其他饼底兜底"""

    def __init__(self, size_code: str, crust_type: str, reason: str = None):
        super().__init__(
            reason or f"未找到 {size_code} {crust_type} 的价格",
            "PRICING_UNAVAILABLE",
            {"size_code": size_code, "crust_type": crust_type},
        )


class MenuItemNotFoundError(BusinessLogicError):
    """菜品不存在"""

    def __init__(self, menu_item_id: str):
        super().__init__(
            f"菜品不存在: {menu_item_id}",
            "MENU_ITEM_NOT_FOUND",
            {"menu_item_id": menu_item_id},
        )


class VariantNotFoundError(BusinessLogicError):
    """菜品规格不存在"""

    def __init__(self, variant_id: str):
        super().__init__(
            f"菜品规格不存在: {variant_id}",
            "VARIANT_NOT_FOUND",
            {"variant_id": variant_id},
        )


class RestaurantNotFoundError(BusinessLogicError):
    """餐厅没有任何菜单数据"""

    def __init__(self, restaurant_id: str):
        super().__init__(
            f"餐厅不存在或尚未配置菜单: {restaurant_id}",
            "RESTAURANT_NOT_FOUND",
            {"restaurant_id": restaurant_id},
        )
