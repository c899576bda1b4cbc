"""
购物车路由模块
计价后把价格冻结到购物车条目中
"""

import logging
from fastapi import APIRouter, Depends

from ...core.exceptions import MenuItemNotFoundError
from ...models.cart import ConfiguredCartItem
from ...schemas.cart import CartItemRequest
from ...schemas.common import ApiResponse
from ...services.cart_composer import compose_cart_item
from ...services.catalog_service import CatalogService, get_catalog_service
from ...services.pricing_calculator import calculate_pizza_price

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/items", response_model=ApiResponse[ConfiguredCartItem])
def add_cart_item(
    req: CartItemRequest,
    catalog: CatalogService = Depends(get_catalog_service)
):
    """计价并生成购物车条目"""
    snapshot = catalog.load_snapshot(req.restaurant_id)
    result = calculate_pizza_price(req, snapshot)

    menu_item = snapshot.menu_items.get(req.menu_item_id)
    if menu_item is None:
        raise MenuItemNotFoundError(req.menu_item_id)

    cart_item = compose_cart_item(
        menu_item,
        result,
        req.toppings,
        quantity=req.quantity,
        special_instructions=req.special_instructions,
    )
    logger.info("加入购物车 %s x%d 单价 %.2f", cart_item.display_name,
                cart_item.quantity, cart_item.total_price)

    message = "; ".join(result.warnings) if result.warnings else None
    return ApiResponse(success=True, data=cart_item, message=message)
