"""
披萨计价器
状态流转：idle → validating → computing → settled | failed

主要功能：
- 校验阶段：菜品、饼底可售性、无麸质例外、四分区集合、未知配料
- 计算阶段：基础价 + 饼底加价 + 配料费用 − 替换抵扣，最终价格不低于基础规格价格
- 失败时抛出业务异常，绝不返回 0 元价格
"""

import logging
import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Tuple

from ..config.settings import Settings, settings as default_settings
from ..core.exceptions import BaseApplicationError, MenuItemNotFoundError, PricingValidationError
from ..models.catalog import (
    CatalogSnapshot,
    Customization,
    CustomizationCategory,
    MenuItem,
    PizzaTemplate,
)
from ..models.pricing import (
    BreakdownType,
    PriceBreakdownItem,
    QuarterSet,
    ToppingAmount,
    placement_to_wire,
)
from ..schemas.pricing import PizzaPriceRequest, PizzaPriceResponse, TemplateInfo
from ..utils.money import round_money
from .crust_resolver import CrustResolution, resolve_crust
from .placement import normalize_placement, validate_quarter_set
from .substitution import SubstitutionCredit, apply_price_floor, compute_substitution_credit
from .template_resolver import ResolvedSelection, resolve_template_defaults
from .topping_pricing import category_priority, price_modifier, price_topping

logger = logging.getLogger(__name__)

PIZZA_PREP_PER_TOPPING = 1.5
PIZZA_PREP_TOPPING_CAP = 10


class CalculationState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    COMPUTING = "computing"
    SETTLED = "settled"
    FAILED = "failed"


@dataclass
class PricedSelection:
    selection: ResolvedSelection
    customization: Customization
    price: float = 0.0


@dataclass
class ValidatedRequest:
    item: MenuItem
    template: Optional[PizzaTemplate]
    crust: CrustResolution
    selections: List[Tuple[ResolvedSelection, Customization]]
    warnings: List[str] = field(default_factory=list)


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def enforce_sauce_exclusivity(entries: List[Tuple[ResolvedSelection, Customization]],
                              warnings: List[str]) -> List[Tuple[ResolvedSelection, Customization]]:
    """
    酱料互斥：显式选择的酱料优先于模板默认酱料，多个显式酱料以最后一个为准，
    其余酱料用量置为 none
    """
    sauces = [i for i, (sel, cust) in enumerate(entries)
              if cust.category == CustomizationCategory.TOPPING_SAUCE
              and sel.amount != ToppingAmount.NONE]
    if len(sauces) <= 1:
        return entries

    explicit = [i for i in sauces if entries[i][0].explicit]
    keep = explicit[-1] if explicit else sauces[-1]

    result = list(entries)
    for i in sauces:
        if i == keep:
            continue
        sel, cust = result[i]
        result[i] = (replace(sel, amount=ToppingAmount.NONE), cust)
        warnings.append(f"酱料只能选择一种，已取消: {cust.name}")
    return result


class PizzaPriceCalculation:
    """
    单次披萨计价

    每个实例只处理一次请求；state 记录当前所处阶段，失败时保留 error。
    """

    def __init__(self, snapshot: CatalogSnapshot, config: Settings = None):
        self.snapshot = snapshot
        self.config = config or default_settings
        self.state = CalculationState.IDLE
        self.error: Optional[BaseApplicationError] = None

    def _transition(self, state: CalculationState) -> None:
        logger.debug("计价状态 %s -> %s", self.state.value, state.value)
        self.state = state

    def run(self, request: PizzaPriceRequest) -> PizzaPriceResponse:
        if self.state != CalculationState.IDLE:
            raise RuntimeError("计价实例只能使用一次")
        try:
            self._transition(CalculationState.VALIDATING)
            validated = self._validate(request)
            self._transition(CalculationState.COMPUTING)
            response = self._compute(request, validated)
        except BaseApplicationError as e:
            self.error = e
            self._transition(CalculationState.FAILED)
            logger.warning("计价失败 %s/%s %s: %s",
                           request.menu_item_id, request.size_code, e.error_code, e.message)
            raise
        self._transition(CalculationState.SETTLED)
        return response

    def _validate(self, request: PizzaPriceRequest) -> ValidatedRequest:
        if request.restaurant_id != self.snapshot.restaurant_id:
            raise PricingValidationError(
                f"菜品目录不属于餐厅 {request.restaurant_id}",
                details={"restaurant_id": request.restaurant_id},
            )

        item = self.snapshot.menu_items.get(request.menu_item_id)
        if item is None:
            raise MenuItemNotFoundError(request.menu_item_id)
        if not item.is_available:
            raise PricingValidationError(
                f"菜品当前不可售: {item.name}",
                details={"menu_item_id": item.id},
            )

        for selection in request.toppings:
            if isinstance(selection.placement, QuarterSet):
                validate_quarter_set(selection.customization_id, selection.placement)

        template = self.snapshot.template_for(item.id)
        crust = resolve_crust(self.snapshot, item, request.size_code,
                              request.crust_type, template, self.config)

        resolved, warnings = resolve_template_defaults(template, request.toppings)
        entries: List[Tuple[ResolvedSelection, Customization]] = []
        for selection in resolved:
            customization = self.snapshot.customizations.get(selection.customization_id)
            if customization is None:
                warnings.append(f"未知配料，已忽略: {selection.customization_id}")
                continue
            if not customization.is_available:
                warnings.append(f"配料当前不可售，已忽略: {customization.name}")
                continue
            if customization.applies_to and not customization.applies_to_kind(item.item_type):
                warnings.append(f"配料不适用于该菜品，已忽略: {customization.name}")
                continue
            entries.append((selection, customization))

        entries = enforce_sauce_exclusivity(entries, warnings)
        return ValidatedRequest(item=item, template=template, crust=crust,
                                selections=entries, warnings=warnings)

    def _compute(self, request: PizzaPriceRequest, validated: ValidatedRequest) -> PizzaPriceResponse:
        size_code = request.size_code
        crust = validated.crust

        priced: List[PricedSelection] = []
        for selection, customization in validated.selections:
            if customization.category.is_topping:
                price = price_topping(customization, size_code, selection.amount,
                                      selection.placement, selection.is_default,
                                      selection.default_amount)
            else:
                price = price_modifier(customization, size_code, selection.amount)
            # 行价先取整到分，合计按取整后的行价累加
            priced.append(PricedSelection(selection, customization, round_money(price)))

        base_price = round_money(crust.base_price)
        crust_upcharge = round_money(crust.crust_upcharge)
        topping_cost = round_money(sum(p.price for p in priced))
        subtotal = round_money(base_price + crust_upcharge + topping_cost)

        credit: Optional[SubstitutionCredit] = None
        applied_credit = 0.0
        if validated.template is not None:
            pct = validated.template.credit_limit_percentage
            if pct is None:
                pct = self.config.default_credit_limit_percentage
            defaults = [(p.selection, p.customization) for p in priced if p.selection.is_default]
            credit = compute_substitution_credit(size_code, defaults, pct)
            applied_credit = round_money(apply_price_floor(credit, subtotal, base_price))
            credit.applied_credit = applied_credit

        final_price = round_money(max(subtotal - applied_credit, base_price))

        breakdown = self._build_breakdown(request, validated, priced, applied_credit)
        template_info = None
        if validated.template is not None:
            template_info = TemplateInfo(
                name=validated.template.name,
                included_toppings=[
                    p.customization.name for p in priced if p.selection.is_default
                ],
                credit_limit_percentage=credit.credit_limit_percentage,
                credit_applied=applied_credit,
                credit_limit_hit=credit.limit_hit,
            )

        response = PizzaPriceResponse(
            base_price=base_price,
            base_price_source=crust.base_price_source,
            crust_upcharge=crust_upcharge,
            topping_cost=topping_cost,
            substitution_credit=applied_credit,
            final_price=final_price,
            breakdown=breakdown,
            size_code=size_code,
            crust_type=request.crust_type,
            estimated_prep_time=self._prep_time(validated.item, priced),
            warnings=validated.warnings,
            template_info=template_info,
        )

        logger.info("计价完成 %s %s/%s 基础价 %.2f (%s) 最终价 %.2f",
                    validated.item.name, size_code, request.crust_type,
                    response.base_price, response.base_price_source, response.final_price)
        return response

    def _build_breakdown(self, request: PizzaPriceRequest, validated: ValidatedRequest,
                         priced: List[PricedSelection], applied_credit: float) -> List[PriceBreakdownItem]:
        crust = validated.crust
        crust_label = request.crust_type.replace("_", " ").title()
        breakdown: List[PriceBreakdownItem] = []

        if crust.base_price_source == "specialty":
            breakdown.append(PriceBreakdownItem(
                name=f"{validated.item.name} - {crust.variant_name}",
                price=round_money(crust.base_price),
                type=BreakdownType.SPECIALTY_BASE,
            ))
        else:
            breakdown.append(PriceBreakdownItem(
                name=f"{request.size_code.upper()} {crust_label} Base",
                price=round_money(crust.base_price),
                type=BreakdownType.REGULAR_BASE,
            ))

        if crust.crust_upcharge > 0:
            breakdown.append(PriceBreakdownItem(
                name=f"{crust_label} Crust Upcharge",
                price=round_money(crust.crust_upcharge),
                type=BreakdownType.CRUST,
            ))

        lines = []
        for entry in priced:
            line = self._selection_line(entry)
            if line is not None:
                lines.append(line)
        lines.sort(key=lambda l: (not l.is_default,
                                  category_priority(CustomizationCategory(l.category)),
                                  l.name.lower()))
        breakdown.extend(lines)

        if applied_credit > 0:
            breakdown.append(PriceBreakdownItem(
                name="Substitution Credit",
                price=-applied_credit,
                type=BreakdownType.SUBSTITUTION_CREDIT,
                note="去掉模板默认配料的抵扣",
            ))
        return breakdown

    @staticmethod
    def _selection_line(entry: PricedSelection) -> Optional[PriceBreakdownItem]:
        selection, customization = entry.selection, entry.customization
        # 非默认配料选 none 相当于没选
        if not selection.is_default and selection.amount == ToppingAmount.NONE:
            return None

        note = None
        if not customization.category.is_topping:
            line_type = BreakdownType.MODIFIER
        elif not selection.is_default:
            line_type = BreakdownType.TOPPING
        elif selection.amount == ToppingAmount.NONE:
            line_type = BreakdownType.TEMPLATE_DEFAULT
            note = "已去掉"
        elif selection.amount.rank > selection.default_amount.rank:
            line_type = BreakdownType.TEMPLATE_EXTRA
            note = f"默认 {selection.default_amount.value}，加量只收差价"
        else:
            line_type = BreakdownType.TEMPLATE_DEFAULT
            if selection.amount != selection.default_amount:
                note = "减量不退款"

        return PriceBreakdownItem(
            name=customization.name,
            price=entry.price,
            type=line_type,
            amount=selection.amount,
            placement=placement_to_wire(normalize_placement(selection.placement)),
            category=customization.category.value,
            is_default=selection.is_default,
            note=note,
            customization_id=customization.id,
        )

    def _prep_time(self, item: MenuItem, priced: List[PricedSelection]) -> int:
        base = item.prep_time_minutes or self.config.default_prep_time_minutes
        count = sum(1 for p in priced
                    if p.customization.category.is_topping
                    and p.selection.amount != ToppingAmount.NONE)
        extra = min(PIZZA_PREP_PER_TOPPING * count, PIZZA_PREP_TOPPING_CAP)
        return round_half_up(base + extra)


def calculate_pizza_price(request: PizzaPriceRequest, snapshot: CatalogSnapshot,
                          config: Settings = None) -> PizzaPriceResponse:
    """
    计算披萨价格

    Raises:
        PricingValidationError: 请求不合法（无麸质例外、四分区集合、餐厅不匹配等）
        PricingUnavailableError: 缺少尺寸/饼底价格
        MenuItemNotFoundError: 菜品不存在
    """
    return PizzaPriceCalculation(snapshot, config).run(request)
