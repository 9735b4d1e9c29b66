"""
test_pricing.py — Tests for cart totals.
Run: pytest test_pricing.py -v
"""
from decimal import Decimal

from app.cart.models import AggregatedCartItem, PriceTotals
from app.cart.pricing import compute_totals


def line(total, qty=1):
    total = Decimal(str(total))
    return AggregatedCartItem(
        product_identity=f'name:{total}', name='X',
        unit_price=total / qty, quantity=qty, total_price=total,
    )


def test_five_percent_tax_on_100():
    totals = compute_totals([line(60), line(40)], Decimal('0.05'))
    assert totals == PriceTotals(Decimal('100.00'), Decimal('5.00'), Decimal('105.00'))


def test_empty_cart_is_all_zero():
    totals = compute_totals([], Decimal('0.05'))
    assert totals.subtotal == Decimal('0')
    assert totals.tax_amount == Decimal('0')
    assert totals.grand_total == Decimal('0')


def test_tax_computed_from_rounded_subtotal():
    # 10.005 → subtotal 10.01; tax 0.5005 → 0.50; grand = 10.51
    totals = compute_totals([line('10.005')], Decimal('0.05'))
    assert totals.subtotal == Decimal('10.01')
    assert totals.tax_amount == Decimal('0.50')
    assert totals.grand_total == Decimal('10.51')


def test_half_up_rounding_of_tax():
    # 10.10 × 0.05 = 0.505 → 0.51
    totals = compute_totals([line('10.10')], Decimal('0.05'))
    assert totals.tax_amount == Decimal('0.51')
    assert totals.grand_total == Decimal('10.61')


def test_float_tax_rate_accepted():
    totals = compute_totals([line(200)], 0.05)
    assert totals.tax_amount == Decimal('10.00')
    assert totals.grand_total == Decimal('210.00')


def test_grand_total_is_sum_of_parts():
    totals = compute_totals([line('33.33'), line('66.67'), line('0.99')], Decimal('0.05'))
    assert totals.grand_total == totals.subtotal + totals.tax_amount
