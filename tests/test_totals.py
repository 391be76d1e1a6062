from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID, uuid4

from marketplace.domain.totals import recompute_totals


@dataclass
class Line:
    product_id: UUID
    quantity: int


class TestRecomputeTotals:
    def test_sums_live_price_times_quantity(self):
        a, b = uuid4(), uuid4()
        prices = {a: Decimal("10.00"), b: Decimal("5.00")}

        totals = recompute_totals([Line(a, 2), Line(b, 1)], prices.get)

        assert totals.total == Decimal("25.00")
        assert totals.count == 2

    def test_empty_cart(self):
        totals = recompute_totals([], {}.get)

        assert totals.total == Decimal("0.00")
        assert totals.count == 0

    def test_missing_product_prices_at_zero_but_still_counts(self):
        a, gone = uuid4(), uuid4()

        totals = recompute_totals([Line(a, 3), Line(gone, 4)], {a: Decimal("1.50")}.get)

        assert totals.total == Decimal("4.50")
        assert totals.count == 2

    def test_uses_the_price_at_call_time(self):
        a = uuid4()
        prices = {a: Decimal("10.00")}
        lines = [Line(a, 1)]

        assert recompute_totals(lines, prices.get).total == Decimal("10.00")
        prices[a] = Decimal("12.99")
        assert recompute_totals(lines, prices.get).total == Decimal("12.99")

    def test_total_is_rounded_to_cents(self):
        a = uuid4()

        totals = recompute_totals([Line(a, 3)], {a: Decimal("0.1")}.get)

        assert totals.total == Decimal("0.30")
        assert str(totals.total) == "0.30"
