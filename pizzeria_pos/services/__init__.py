"""
Business logic services.
Contains the pricing engine and the catalog/cart services built around it.
"""

from .cart_composer import CartItemTransformer, compose_cart_item
from .catalog_service import CatalogService, get_catalog_service
from .chicken_pricing import calculate_chicken_price
from .pricing_calculator import CalculationState, PizzaPriceCalculation, calculate_pizza_price
from .request_coalescer import PriceRequestCoalescer, canonical_request_key

__all__ = [
    "CartItemTransformer",
    "CatalogService",
    "CalculationState",
    "PizzaPriceCalculation",
    "PriceRequestCoalescer",
    "calculate_chicken_price",
    "calculate_pizza_price",
    "canonical_request_key",
    "compose_cart_item",
    "get_catalog_service",
]
