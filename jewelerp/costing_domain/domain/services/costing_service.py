# jewelerp/costing_domain/domain/services/costing_service.py
"""
Pure costing calculations used by the transaction workflows.

Every function takes and returns Decimals; monetary results are rounded
half-up to the monetary unit. Nothing here touches a store.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Any

from jewelerp.common.exceptions.custom_exceptions import ValidationError
from jewelerp.common.utils.money import to_decimal, to_money


@dataclass(frozen=True)
class ManufacturingCost:
    """Split of a finished piece's landed cost into material and labor."""

    material_cost: Decimal
    labor_cost: Decimal
    total_cost: Decimal


def extend_amount(quantity: Any, unit_amount: Any) -> Decimal:
    """quantity x unit amount, rounded to the monetary unit."""
    return to_money(to_decimal(quantity) * to_decimal(unit_amount))


def sale_revenue(quantity_sold: int, unit_sale_price: Any) -> Decimal:
    return extend_amount(quantity_sold, unit_sale_price)


def cost_of_goods_sold(quantity_sold: int, unit_cost: Any) -> Decimal:
    return extend_amount(quantity_sold, unit_cost)


def inventory_value(quantity: Any, unit_cost: Any) -> Decimal:
    return extend_amount(quantity, unit_cost)


def receipt_unit_cost(total_amount: Any, quantity_received: Any) -> Decimal:
    """Unit cost carried by a single purchase receipt."""
    quantity = to_decimal(quantity_received)
    if quantity <= 0:
        raise ValidationError("Quantity received must be greater than zero")
    return to_money(to_decimal(total_amount) / quantity)


def weighted_average_unit_cost(
    existing_quantity: Any, existing_unit_cost: Any, receipt_total: Any, receipt_quantity: Any
) -> Decimal:
    """
    Blends the cost basis already on hand with a new receipt:

        (existing_quantity * existing_unit_cost + receipt_total) / (existing_quantity + receipt_quantity)

    The result always lies between the two input unit costs.
    """
    receipt_qty = to_decimal(receipt_quantity)
    if receipt_qty <= 0:
        raise ValidationError("Quantity received must be greater than zero")

    existing_qty = to_decimal(existing_quantity)
    if existing_qty <= 0:
        # Nothing (or a negative balance) on hand: the receipt sets the cost basis
        return receipt_unit_cost(receipt_total, receipt_qty)

    total_value = existing_qty * to_decimal(existing_unit_cost) + to_decimal(receipt_total)
    return to_money(total_value / (existing_qty + receipt_qty))


def split_manufacturing_cost(quantity_used: Any, material_unit_cost: Any, total_output_cost: Any) -> ManufacturingCost:
    """
    Infers labor as the remainder of the landed cost after materials.

    material_cost + labor_cost == total_cost holds exactly. Labor can come out
    negative when the caller's total is below the material cost; that is left to
    the caller to judge.
    """
    total_cost = to_money(total_output_cost)
    material_cost = extend_amount(quantity_used, material_unit_cost)
    return ManufacturingCost(
        material_cost=material_cost,
        labor_cost=total_cost - material_cost,
        total_cost=total_cost,
    )


def landed_cost(material_cost: Any, labor_cost: Any) -> Decimal:
    """Total cost of a finished piece from its material and labor components."""
    return to_money(to_decimal(material_cost) + to_decimal(labor_cost))


def retail_price(unit_cost: Any, markup_factor: Any) -> Decimal:
    return to_money(to_decimal(unit_cost) * to_decimal(markup_factor))
