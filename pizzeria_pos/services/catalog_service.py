"""
菜单目录服务
从 DuckDB 读取某餐厅的目录快照供计价使用，并支持整体写入快照
"""

import json
import logging
import threading
import time
from typing import Dict, List, Optional, Tuple

from ..config.settings import settings
from ..core.database import DatabaseManager, db_manager
from ..core.exceptions import RestaurantNotFoundError
from ..models.catalog import (
    CatalogSnapshot,
    CrustPricing,
    Customization,
    MenuItem,
    MenuItemVariant,
    PizzaTemplate,
    PricingRules,
    TemplateTopping,
)

logger = logging.getLogger(__name__)


class CatalogService:
    """菜单目录服务"""

    def __init__(self, db: Optional[DatabaseManager] = None, cache_seconds: Optional[float] = None):
        self.db = db or db_manager
        self.cache_seconds = settings.catalog_cache_seconds if cache_seconds is None else cache_seconds
        self._cache: Dict[str, Tuple[float, CatalogSnapshot]] = {}
        self._cache_lock = threading.Lock()

    def load_snapshot(self, restaurant_id: str) -> CatalogSnapshot:
        """
        读取餐厅的目录快照

        Raises:
            RestaurantNotFoundError: 该餐厅没有任何菜品和饼底价格
        """
        if self.cache_seconds > 0:
            with self._cache_lock:
                cached = self._cache.get(restaurant_id)
                if cached and time.monotonic() - cached[0] < self.cache_seconds:
                    return cached[1]

        menu_items = self._load_menu_items(restaurant_id)
        crust_pricing = self._load_crust_pricing(restaurant_id)
        if not menu_items and not crust_pricing:
            raise RestaurantNotFoundError(restaurant_id)

        snapshot = CatalogSnapshot.build(
            restaurant_id,
            menu_items=menu_items,
            customizations=self._load_customizations(restaurant_id),
            crust_pricing=crust_pricing,
            templates=self._load_templates(restaurant_id),
        )
        logger.debug("加载目录快照 %s: %d 个菜品, %d 个配料",
                     restaurant_id, len(snapshot.menu_items), len(snapshot.customizations))

        if self.cache_seconds > 0:
            with self._cache_lock:
                self._cache[restaurant_id] = (time.monotonic(), snapshot)
        return snapshot

    def invalidate(self, restaurant_id: Optional[str] = None) -> None:
        with self._cache_lock:
            if restaurant_id is None:
                self._cache.clear()
            else:
                self._cache.pop(restaurant_id, None)

    def _load_menu_items(self, restaurant_id: str) -> List[MenuItem]:
        variant_rows = self.db.execute_query(
            """
            SELECT v.id, v.menu_item_id, v.name, v.size_code, v.crust_type, v.price,
                   v.serves, v.prep_time_minutes, v.white_meat_upcharge, v.is_available, v.sort_order
            FROM menu_item_variants v
            JOIN menu_items m ON v.menu_item_id = m.id
            WHERE m.restaurant_id = ?
            ORDER BY v.sort_order, v.id
            """,
            [restaurant_id],
        )
        variants: Dict[str, List[MenuItemVariant]] = {}
        for row in variant_rows:
            variant = MenuItemVariant(
                id=row[0], menu_item_id=row[1], name=row[2], size_code=row[3],
                crust_type=row[4], price=row[5], serves=row[6], prep_time_minutes=row[7],
                white_meat_upcharge=row[8] or 0.0, is_available=row[9], sort_order=row[10] or 0,
            )
            variants.setdefault(variant.menu_item_id, []).append(variant)

        rows = self.db.execute_query(
            """
            SELECT id, restaurant_id, name, description, item_type, pizza_style,
                   base_price, prep_time_minutes, is_available, sort_order
            FROM menu_items
            WHERE restaurant_id = ?
            ORDER BY sort_order, name
            """,
            [restaurant_id],
        )
        return [
            MenuItem(
                id=row[0], restaurant_id=row[1], name=row[2], description=row[3],
                item_type=row[4] or "standard", pizza_style=row[5], base_price=row[6],
                prep_time_minutes=row[7], is_available=row[8], sort_order=row[9] or 0,
                variants=tuple(variants.get(row[0], [])),
            )
            for row in rows
        ]

    def _load_customizations(self, restaurant_id: str) -> List[Customization]:
        rows = self.db.execute_query(
            """
            SELECT id, restaurant_id, name, category, base_price, price_type,
                   pricing_rules_json, applies_to_json, sort_order, is_available, description
            FROM customizations
            WHERE restaurant_id = ?
            ORDER BY sort_order, name
            """,
            [restaurant_id],
        )
        customizations = []
        for row in rows:
            rules = json.loads(row[6]) if row[6] else {}
            applies_to = json.loads(row[7]) if row[7] else []
            customizations.append(Customization(
                id=row[0], restaurant_id=row[1], name=row[2], category=row[3],
                base_price=row[4], price_type=row[5] or "fixed",
                pricing_rules=PricingRules.model_validate(rules),
                applies_to=tuple(applies_to), sort_order=row[8] or 0,
                is_available=row[9], description=row[10],
            ))
        return customizations

    def _load_crust_pricing(self, restaurant_id: str) -> List[CrustPricing]:
        rows = self.db.execute_query(
            """
            SELECT restaurant_id, size_code, crust_type, base_price, upcharge, is_available
            FROM crust_pricing
            WHERE restaurant_id = ?
            """,
            [restaurant_id],
        )
        return [
            CrustPricing(
                restaurant_id=row[0], size_code=row[1], crust_type=row[2],
                base_price=row[3], upcharge=row[4] or 0.0, is_available=row[5],
            )
            for row in rows
        ]

    def _load_templates(self, restaurant_id: str) -> List[PizzaTemplate]:
        topping_rows = self.db.execute_query(
            """
            SELECT tt.template_id, tt.customization_id, tt.default_amount, tt.default_placement,
                   tt.is_removable, tt.substitution_tier, tt.sort_order
            FROM pizza_template_toppings tt
            JOIN pizza_templates t ON tt.template_id = t.id
            WHERE t.restaurant_id = ?
            """,
            [restaurant_id],
        )
        toppings: Dict[str, List[TemplateTopping]] = {}
        for row in topping_rows:
            toppings.setdefault(row[0], []).append(TemplateTopping(
                customization_id=row[1], default_amount=row[2] or "normal",
                default_placement=row[3] or "whole", is_removable=row[4],
                substitution_tier=row[5], sort_order=row[6] or 0,
            ))

        rows = self.db.execute_query(
            """
            SELECT id, restaurant_id, menu_item_id, name, markup_type,
                   credit_limit_percentage, is_active
            FROM pizza_templates
            WHERE restaurant_id = ?
            """,
            [restaurant_id],
        )
        return [
            PizzaTemplate(
                id=row[0], restaurant_id=row[1], menu_item_id=row[2], name=row[3],
                markup_type=row[4] or "additive", credit_limit_percentage=row[5],
                is_active=row[6], toppings=tuple(toppings.get(row[0], [])),
            )
            for row in rows
        ]

    def save_snapshot(self, snapshot: CatalogSnapshot) -> None:
        """用快照整体替换该餐厅的目录数据"""
        restaurant_id = snapshot.restaurant_id
        with self.db.transaction() as conn:
            conn.execute(
                """
                DELETE FROM pizza_template_toppings
                WHERE template_id IN (SELECT id FROM pizza_templates WHERE restaurant_id = ?)
                """,
                [restaurant_id],
            )
            conn.execute("DELETE FROM pizza_templates WHERE restaurant_id = ?", [restaurant_id])
            conn.execute(
                """
                DELETE FROM menu_item_variants
                WHERE menu_item_id IN (SELECT id FROM menu_items WHERE restaurant_id = ?)
                """,
                [restaurant_id],
            )
            conn.execute("DELETE FROM menu_items WHERE restaurant_id = ?", [restaurant_id])
            conn.execute("DELETE FROM customizations WHERE restaurant_id = ?", [restaurant_id])
            conn.execute("DELETE FROM crust_pricing WHERE restaurant_id = ?", [restaurant_id])

            for item in snapshot.menu_items.values():
                conn.execute(
                    """
                    INSERT INTO menu_items (id, restaurant_id, name, description, item_type,
                        pizza_style, base_price, prep_time_minutes, is_available, sort_order)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    [item.id, restaurant_id, item.name, item.description, item.item_type.value,
                     item.pizza_style, item.base_price, item.prep_time_minutes,
                     item.is_available, item.sort_order],
                )
                for v in item.variants:
                    conn.execute(
                        """
                        INSERT INTO menu_item_variants (id, menu_item_id, name, size_code, crust_type,
                            price, serves, prep_time_minutes, white_meat_upcharge, is_available, sort_order)
                        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                        """,
                        [v.id, item.id, v.name, v.size_code, v.crust_type, v.price, v.serves,
                         v.prep_time_minutes, v.white_meat_upcharge, v.is_available, v.sort_order],
                    )

            for c in snapshot.customizations.values():
                conn.execute(
                    """
                    INSERT INTO customizations (id, restaurant_id, name, category, base_price,
                        price_type, pricing_rules_json, applies_to_json, sort_order, is_available, description)
                    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                    """,
                    [c.id, restaurant_id, c.name, c.category.value, c.base_price, c.price_type.value,
                     json.dumps(c.pricing_rules.model_dump(mode="json")),
                     json.dumps([k.value for k in c.applies_to]),
                     c.sort_order, c.is_available, c.description],
                )

            for cp in snapshot.crust_pricing.values():
                conn.execute(
                    """
                    INSERT INTO crust_pricing (restaurant_id, size_code, crust_type,
                        base_price, upcharge, is_available)
                    VALUES (?, ?, ?, ?, ?, ?)
                    """,
                    [restaurant_id, cp.size_code, cp.crust_type, cp.base_price,
                     cp.upcharge, cp.is_available],
                )

            for t in snapshot.templates.values():
                conn.execute(
                    """
                    INSERT INTO pizza_templates (id, restaurant_id, menu_item_id, name,
                        markup_type, credit_limit_percentage, is_active)
                    VALUES (?, ?, ?, ?, ?, ?, ?)
                    """,
                    [t.id, restaurant_id, t.menu_item_id, t.name, t.markup_type,
                     t.credit_limit_percentage, t.is_active],
                )
                for tt in t.toppings:
                    conn.execute(
                        """
                        INSERT INTO pizza_template_toppings (template_id, customization_id,
                            default_amount, default_placement, is_removable, substitution_tier, sort_order)
                        VALUES (?, ?, ?, ?, ?, ?, ?)
                        """,
                        [t.id, tt.customization_id, tt.default_amount.value,
                         tt.default_placement.value, tt.is_removable,
                         tt.substitution_tier, tt.sort_order],
                    )

        self.invalidate(restaurant_id)
        logger.info("保存目录快照 %s: %d 个菜品, %d 个配料, %d 个模板",
                    restaurant_id, len(snapshot.menu_items),
                    len(snapshot.customizations), len(snapshot.templates))


_catalog_service: Optional[CatalogService] = None


def get_catalog_service() -> CatalogService:
    """FastAPI 依赖：返回目录服务"""
    global _catalog_service
    if _catalog_service is None:
        _catalog_service = CatalogService()
    return _catalog_service
