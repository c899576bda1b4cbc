"""
菜单与计价路由模块
"""

from fastapi import APIRouter, Depends, Query

from ...schemas.common import ApiResponse
from ...schemas.menu import PizzaMenuResponse
from ...schemas.pricing import (
    ChickenPriceRequest,
    ChickenPriceResponse,
    PizzaPriceRequest,
    PizzaPriceResponse,
)
from ...models.catalog import ItemKind, size_rank
from ...services.catalog_service import CatalogService, get_catalog_service
from ...services.chicken_pricing import calculate_chicken_price
from ...services.pricing_calculator import calculate_pizza_price

router = APIRouter()


@router.get("/pizza", response_model=ApiResponse[PizzaMenuResponse])
def get_pizza_menu(
    restaurant_id: str = Query(..., min_length=1),
    catalog: CatalogService = Depends(get_catalog_service)
):
    """获取披萨菜单、饼底价格、配料和特色模板"""
    snapshot = catalog.load_snapshot(restaurant_id)

    pizza_items = [
        item for item in snapshot.menu_items.values()
        if item.item_type == ItemKind.PIZZA and item.is_available
    ]
    customizations = sorted(
        (c for c in snapshot.customizations.values()
         if c.is_available and c.applies_to_kind(ItemKind.PIZZA)),
        key=lambda c: (c.category.value, c.sort_order, c.name),
    )
    crust_pricing = sorted(
        snapshot.crust_pricing.values(),
        key=lambda cp: (size_rank(cp.size_code), cp.crust_type),
    )

    data = PizzaMenuResponse(
        restaurant_id=restaurant_id,
        pizza_items=sorted(pizza_items, key=lambda i: (i.sort_order, i.name)),
        crust_pricing=crust_pricing,
        customizations=customizations,
        templates=list(snapshot.templates.values()),
        available_sizes=snapshot.available_sizes(),
        available_crusts=snapshot.available_crusts(),
    )
    return ApiResponse(success=True, data=data)


@router.post("/pizza/calculate-price", response_model=ApiResponse[PizzaPriceResponse])
def calculate_pizza(
    req: PizzaPriceRequest,
    catalog: CatalogService = Depends(get_catalog_service)
):
    """计算披萨价格"""
    snapshot = catalog.load_snapshot(req.restaurant_id)
    result = calculate_pizza_price(req, snapshot)
    return ApiResponse(success=True, data=result)


@router.post("/chicken/calculate-price", response_model=ApiResponse[ChickenPriceResponse])
def calculate_chicken(
    req: ChickenPriceRequest,
    catalog: CatalogService = Depends(get_catalog_service)
):
    """计算炸鸡价格"""
    snapshot = catalog.load_snapshot(req.restaurant_id)
    result = calculate_chicken_price(req, snapshot)
    return ApiResponse(success=True, data=result)
