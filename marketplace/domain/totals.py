# marketplace/domain/totals.py
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Iterable, Protocol
from uuid import UUID


class CartLine(Protocol):
    product_id: UUID
    quantity: int


PriceLookup = Callable[[UUID], Decimal | None]


@dataclass(frozen=True)
class CartTotals:
    total: Decimal
    count: int


def recompute_totals(items: Iterable[CartLine], price_lookup: PriceLookup) -> CartTotals:
    """
    Total = sum(live price * quantity), count = number of lines.
    A product the lookup cannot price (deleted listing) counts as 0.
    """
    total = Decimal("0.00")
    count = 0
    for item in items:
        count += 1
        price = price_lookup(item.product_id)
        if price is None:
            continue
        total += Decimal(price) * item.quantity
    return CartTotals(total=total.quantize(Decimal("0.01")), count=count)
