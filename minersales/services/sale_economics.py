"""
Sale Economics Calculator.

Pure Math: one ``SaleRecord`` in, revenue / procurement / margin out.
No side effects and no exceptions; every sub-result that comes out
non-finite is replaced by zero before it is used.

Formulas (USD)::

    revenue      = unit_sales_price*qty + unit_installation_charge*qty
                   + additional_revenue + vat
    procurement  = unit_purchase_price*qty + pickup_cost + courier_charge
    base_margin  = revenue - procurement - commission - vat
    install_back = 0 if preferred vendor else unit_installation_charge*qty
    margin       = base_margin - install_back

VAT is billed to the customer and so shows in revenue, but it is not
company income and is removed again in margin.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Optional

from minersales.models.sale import SaleRecord
from minersales.models.service_models import SaleEconomics
from minersales.services.vendor_classifier import is_preferred_vendor
from minersales.utils.numbers import ZERO, finite_or_zero

__all__ = [
    "calculate_installation_backout",
    "calculate_procurement",
    "calculate_revenue",
    "compute_sale_economics",
]


def calculate_revenue(sale: SaleRecord) -> Decimal:
    """Gross billed amount, including installation and VAT."""
    qty: Decimal = sale.quantity
    sales_total: Decimal = finite_or_zero(sale.unit_sales_price * qty)
    install_total: Decimal = finite_or_zero(sale.unit_installation_charge * qty)
    return finite_or_zero(
        sales_total + install_total + sale.additional_revenue + sale.vat
    )


def calculate_procurement(sale: SaleRecord) -> Decimal:
    """Cost of acquiring and moving the machines."""
    purchase_total: Decimal = finite_or_zero(sale.unit_purchase_price * sale.quantity)
    return finite_or_zero(purchase_total + sale.pickup_cost + sale.courier_charge)


def calculate_installation_backout(
    sale: SaleRecord,
    vendor_code: Optional[str] = None,
) -> Decimal:
    """Installation revenue to remove from margin.

    Zero for the preferred vendor, whose relationship absorbs the
    installation cost; the full installation charge otherwise.
    """
    preferred: bool = (
        is_preferred_vendor(sale.vendor)
        if vendor_code is None
        else is_preferred_vendor(sale.vendor, vendor_code)
    )
    if preferred:
        return ZERO
    return finite_or_zero(sale.unit_installation_charge * sale.quantity)


def compute_sale_economics(
    sale: SaleRecord,
    vendor_code: Optional[str] = None,
) -> SaleEconomics:
    """Compute revenue, procurement and margin for one sale.

    Args:
        sale: The sale record.  It is read, never modified.
        vendor_code: Optional override of the preferred-vendor code.

    Returns:
        A ``SaleEconomics`` with finite values.
    """
    revenue: Decimal = calculate_revenue(sale)
    procurement: Decimal = calculate_procurement(sale)

    base_margin: Decimal = finite_or_zero(
        revenue - procurement - sale.commission - sale.vat
    )
    margin: Decimal = finite_or_zero(
        base_margin - calculate_installation_backout(sale, vendor_code)
    )

    return SaleEconomics(revenue=revenue, procurement=procurement, margin=margin)
