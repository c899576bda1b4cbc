"""
API routes and endpoints.
"""

from fastapi import APIRouter
from .v1 import cart, menu

api_router = APIRouter()

api_router.include_router(menu.router, prefix="/menu", tags=["菜单计价"])
api_router.include_router(cart.router, prefix="/cart", tags=["购物车"])
