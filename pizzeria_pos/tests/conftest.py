"""
测试配置文件
提供测试所需的fixtures和演示菜单目录
"""

import os

# 全局数据库管理器在导入时创建，测试中使用内存数据库
os.environ.setdefault("DATABASE_URL", "duckdb://:memory:")

import pytest
from fastapi.testclient import TestClient

from pizzeria_pos.app import create_app
from pizzeria_pos.core.database import DatabaseManager
from pizzeria_pos.models.catalog import (
    CatalogSnapshot,
    CrustPricing,
    Customization,
    MenuItem,
    MenuItemVariant,
    PizzaTemplate,
    TemplateTopping,
)
from pizzeria_pos.schemas.pricing import PizzaPriceRequest
from pizzeria_pos.services.catalog_service import CatalogService, get_catalog_service

RESTAURANT_ID = "rest-1"


def _customization(id, name, category, base_price, applies_to=("pizza",), **kwargs):
    return Customization(
        id=id,
        restaurant_id=RESTAURANT_ID,
        name=name,
        category=category,
        base_price=base_price,
        applies_to=applies_to,
        **kwargs
    )


def _crust(size_code, crust_type, base_price, upcharge=0.0, is_available=True):
    return CrustPricing(
        restaurant_id=RESTAURANT_ID,
        size_code=size_code,
        crust_type=crust_type,
        base_price=base_price,
        upcharge=upcharge,
        is_available=is_available,
    )


def build_demo_snapshot() -> CatalogSnapshot:
    """演示餐厅：自选披萨、至尊特色披萨、深盘披萨和炸鸡"""
    customizations = [
        _customization("pepperoni", "Pepperoni", "topping_normal", 2.00),
        _customization("mushrooms", "Mushrooms", "topping_normal", 1.50),
        _customization("sausage", "Sausage", "topping_normal", 2.00),
        _customization("prosciutto", "Prosciutto", "topping_premium", 3.00),
        _customization("ground_beef", "Ground Beef", "topping_beef", 2.50),
        _customization("mozzarella", "Mozzarella", "topping_cheese", 1.00),
        _customization("red_sauce", "Red Sauce", "topping_sauce", 0.50),
        _customization("bbq_sauce", "BBQ Sauce", "topping_sauce", 0.50),
        _customization("well_done", "Well Done", "preparation", 0.50),
        _customization("truffle_oil", "Truffle Oil", "condiments", 1.00,
                       price_type="multiplied"),
        _customization("anchovies", "Anchovies", "topping_normal", 2.00, is_available=False),
        _customization("extra_crispy", "Extra Crispy", "preparation", 1.00,
                       applies_to=("chicken",)),
        _customization("ranch_side", "Side of Ranch", "sides", 0.75,
                       applies_to=("chicken", "pizza")),
    ]

    crust_pricing = [
        _crust("10in", "thin", 12.00),
        _crust("10in", "gluten_free", 12.00, 2.00),
        _crust("12in", "thin", 14.00),
        _crust("12in", "pan", 14.00, 1.50),
        _crust("12in", "gluten_free", 14.00, 2.50),
        _crust("14in", "thin", 16.00),
        _crust("14in", "pan", 16.00, 2.00),
        _crust("16in", "thin", 18.00),
        _crust("16in", "double_dough", 18.00, 3.00, is_available=False),
    ]

    menu_items = [
        MenuItem(
            id="build_your_own",
            restaurant_id=RESTAURANT_ID,
            name="Build Your Own",
            item_type="pizza",
            base_price=12.00,
        ),
        MenuItem(
            id="supreme",
            restaurant_id=RESTAURANT_ID,
            name="Supreme",
            item_type="pizza",
            base_price=18.00,
            variants=(
                MenuItemVariant(id="supreme-10", menu_item_id="supreme", name="10\" Supreme",
                                size_code="10in", price=18.00),
                MenuItemVariant(id="supreme-12", menu_item_id="supreme", name="12\" Supreme",
                                size_code="12in", price=21.00),
                MenuItemVariant(id="supreme-14", menu_item_id="supreme", name="14\" Supreme",
                                size_code="14in", price=24.00),
            ),
        ),
        MenuItem(
            id="stuffed",
            restaurant_id=RESTAURANT_ID,
            name="Stuffed Pizza",
            item_type="pizza",
            pizza_style="deep_dish",
            base_price=20.00,
            prep_time_minutes=30,
            variants=(
                MenuItemVariant(id="stuffed-10", menu_item_id="stuffed", name="10\" Stuffed",
                                size_code="10in", price=20.00),
                MenuItemVariant(id="stuffed-12", menu_item_id="stuffed", name="12\" Stuffed",
                                size_code="12in", price=24.00),
            ),
        ),
        MenuItem(
            id="fried_chicken",
            restaurant_id=RESTAURANT_ID,
            name="Fried Chicken",
            item_type="chicken",
            base_price=12.99,
            variants=(
                MenuItemVariant(id="chicken-8pc", menu_item_id="fried_chicken", name="8 Piece",
                                price=12.99, serves="2-3", prep_time_minutes=18,
                                white_meat_upcharge=2.00),
                MenuItemVariant(id="chicken-16pc", menu_item_id="fried_chicken", name="16 Piece",
                                price=23.99, serves="4-6", white_meat_upcharge=4.00,
                                is_available=False),
            ),
        ),
    ]

    templates = [
        PizzaTemplate(
            id="tpl-supreme",
            restaurant_id=RESTAURANT_ID,
            menu_item_id="supreme",
            name="Supreme",
            credit_limit_percentage=0.5,
            toppings=(
                TemplateTopping(customization_id="pepperoni", sort_order=1),
                TemplateTopping(customization_id="mushrooms", sort_order=2),
                TemplateTopping(customization_id="sausage", sort_order=3),
                TemplateTopping(customization_id="mozzarella", is_removable=False, sort_order=4),
                TemplateTopping(customization_id="red_sauce", sort_order=5),
            ),
        ),
        PizzaTemplate(
            id="tpl-stuffed",
            restaurant_id=RESTAURANT_ID,
            menu_item_id="stuffed",
            name="Stuffed",
            toppings=(
                TemplateTopping(customization_id="mozzarella", default_amount="extra",
                                is_removable=False),
            ),
        ),
    ]

    return CatalogSnapshot.build(
        RESTAURANT_ID,
        menu_items=menu_items,
        customizations=customizations,
        crust_pricing=crust_pricing,
        templates=templates,
    )


@pytest.fixture
def snapshot():
    """演示菜单目录快照"""
    return build_demo_snapshot()


@pytest.fixture
def make_request():
    """构造披萨计价请求"""
    def _make(menu_item_id="build_your_own", size_code="12in", crust_type="thin", toppings=None):
        return PizzaPriceRequest(
            restaurant_id=RESTAURANT_ID,
            menu_item_id=menu_item_id,
            size_code=size_code,
            crust_type=crust_type,
            toppings=toppings or [],
        )
    return _make


@pytest.fixture
def test_db():
    """内存数据库"""
    db = DatabaseManager(":memory:")
    db.init_database()
    yield db
    db.close()


@pytest.fixture
def catalog_service(test_db, snapshot):
    """已写入演示目录的目录服务"""
    service = CatalogService(test_db, cache_seconds=0)
    service.save_snapshot(snapshot)
    return service


@pytest.fixture
def client(catalog_service):
    """测试客户端"""
    app = create_app()
    app.dependency_overrides[get_catalog_service] = lambda: catalog_service
    return TestClient(app)
