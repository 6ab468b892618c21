"""
Unit tests for cart totals.
"""

from decimal import Decimal

from hypothesis import given, strategies as st

from retail_panel.models import Product
from retail_panel.services.cart_service import cart_from_mapping, empty_cart
from retail_panel.services.total_service import calculate_total, cart_summary

CATALOG = tuple(
    Product(id=i, name=f'Product {i}', price=Decimal(i * 137) / 100)
    for i in range(1, 21)
)


class TestCalculateTotal:
    """Tests for calculate_total."""

    def test_two_lines(self, products):
        cart = cart_from_mapping({1: 2, 2: 1})
        assert calculate_total(cart, products) == Decimal('25.00')

    def test_empty_cart_is_zero(self, products):
        assert calculate_total(empty_cart(), products) == Decimal('0')

    def test_unknown_product_contributes_zero(self, products):
        cart = cart_from_mapping({1: 1, 99: 5})
        assert calculate_total(cart, products) == Decimal('10.00')

    def test_no_float_drift(self):
        products = (Product(id=1, name='Cent', price=Decimal('0.10')),)
        cart = cart_from_mapping({1: 1000})
        assert calculate_total(cart, products) == Decimal('100.00')

    @given(
        left=st.dictionaries(st.integers(1, 10), st.integers(1, 100), max_size=10),
        right=st.dictionaries(st.integers(11, 25), st.integers(1, 100), max_size=10),
    )
    def test_total_is_linear_over_disjoint_carts(self, left, right):
        """Test that total(a + b) == total(a) + total(b) for disjoint carts."""
        union = cart_from_mapping({**left, **right})
        assert calculate_total(union, CATALOG) == (
            calculate_total(cart_from_mapping(left), CATALOG)
            + calculate_total(cart_from_mapping(right), CATALOG)
        )


class TestCartSummary:
    """Tests for the display summary."""

    def test_lines_and_formatted_total(self, products):
        summary = cart_summary(cart_from_mapping({1: 2, 2: 1}), products)

        assert summary['total'] == '25.00'
        names = {line['product_name']: line for line in summary['lines']}
        assert names['Coffee Beans']['line_subtotal'] == '20.00'
        assert names['Paper Filters']['qty'] == 1

    def test_orphaned_entry_displays_from_cache(self, products):
        """Test that a product gone from the catalog still shows via the cache."""
        cache = {3: Product(id=3, name='Grinder', price=Decimal('40.00'))}
        summary = cart_summary(cart_from_mapping({1: 1, 3: 1}), products, cache)

        orphan = [line for line in summary['lines'] if line['product_id'] == 3][0]
        assert orphan['orphaned'] is True
        assert orphan['line_subtotal'] == '0.00'
        assert summary['total'] == '10.00'

    def test_unresolvable_entry_is_omitted(self, products):
        summary = cart_summary(cart_from_mapping({42: 1}), products)
        assert summary['lines'] == []
        assert summary['total'] == '0.00'
