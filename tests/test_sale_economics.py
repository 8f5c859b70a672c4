"""
Tests for per-sale revenue, procurement and margin.
"""

from decimal import Decimal

from minersales.models import SaleRecord
from minersales.services.sale_economics import (
    calculate_installation_backout,
    compute_sale_economics,
)


class TestComputeSaleEconomics:
    def test_preferred_vendor_keeps_installation_in_margin(self, make_sale):
        sale = make_sale(
            unit_sales_price=500, quantity=2, unit_installation_charge=50, vendor="CM HK.",
        )
        result = compute_sale_economics(sale)
        assert result.revenue == Decimal("1100")
        assert result.procurement == Decimal("0")
        assert result.margin == Decimal("1100")

    def test_other_vendor_backs_out_installation(self, make_sale):
        sale = make_sale(
            unit_sales_price=500, quantity=2, unit_installation_charge=50, vendor="Acme Corp",
        )
        result = compute_sale_economics(sale)
        assert result.revenue == Decimal("1100")
        assert result.margin == Decimal("1000")

    def test_full_formula(self, make_sale):
        sale = make_sale(
            quantity=3,
            unit_sales_price="4000",
            unit_installation_charge="100",
            additional_revenue="250",
            vat="600",
            unit_purchase_price="3000",
            pickup_cost="75",
            courier_charge="125",
            commission="200",
            vendor="Acme",
        )
        result = compute_sale_economics(sale)
        # 12000 + 300 + 250 + 600
        assert result.revenue == Decimal("13150")
        # 9000 + 75 + 125
        assert result.procurement == Decimal("9200")
        # 13150 - 9200 - 200 - 600 - 300
        assert result.margin == Decimal("2850")

    def test_vat_is_revenue_but_not_margin(self, make_sale):
        without_vat = compute_sale_economics(make_sale(unit_sales_price=1000))
        with_vat = compute_sale_economics(make_sale(unit_sales_price=1000, vat=50))
        assert with_vat.revenue - without_vat.revenue == Decimal("50")
        assert with_vat.margin == without_vat.margin

    def test_manual_commission_reduces_margin(self, make_sale):
        result = compute_sale_economics(make_sale(unit_sales_price=1000, commission=150))
        assert result.margin == Decimal("850")

    def test_all_zero_sale(self):
        result = compute_sale_economics(SaleRecord())
        assert result.revenue == 0
        assert result.procurement == 0
        assert result.margin == 0

    def test_invalid_fields_degrade_to_zero(self, make_sale):
        sale = make_sale(
            unit_sales_price="not-a-number",
            vat=float("nan"),
            pickup_cost=float("inf"),
            additional_revenue="1,200",
            unit_purchase_price=None,
        )
        result = compute_sale_economics(sale)
        assert result.revenue == Decimal("1200")
        assert result.procurement == Decimal("0")
        assert result.margin == Decimal("1200")

    def test_out_of_range_amount_degrades_to_zero(self):
        sale = SaleRecord(
            sales_person_id="1", unit_sales_price="9e999999", quantity=10, vat=5,
        )
        result = compute_sale_economics(sale)
        assert result.revenue == Decimal("5")
        assert result.margin == Decimal("0")

    def test_largest_double_amounts_do_not_overflow(self):
        sale = SaleRecord(unit_sales_price="1.7e308", quantity="1.7e308", vendor="Acme")
        result = compute_sale_economics(sale)
        assert result.revenue == Decimal("1.7e308") * Decimal("1.7e308")
        assert result.margin == result.revenue

    def test_missing_quantity_defaults_to_one(self):
        sale = SaleRecord(unit_sales_price=900, quantity=None)
        assert compute_sale_economics(sale).revenue == Decimal("900")

    def test_input_is_not_modified(self, make_sale):
        sale = make_sale(unit_sales_price=500, vendor="Acme")
        before = sale.model_dump()
        compute_sale_economics(sale)
        assert sale.model_dump() == before


class TestInstallationBackout:
    def test_custom_vendor_code(self, make_sale):
        sale = make_sale(unit_installation_charge=40, quantity=5, vendor="Bitmain")
        assert calculate_installation_backout(sale) == Decimal("200")
        assert calculate_installation_backout(sale, vendor_code="bitmain") == Decimal("0")
