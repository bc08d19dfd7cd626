from __future__ import annotations

from decimal import Decimal
from typing import Dict, List, Protocol, runtime_checkable

from storefront.models import CartLineItem


@runtime_checkable
class CartStore(Protocol):
    def add_cart_line_item(self, item: CartLineItem) -> None:
        ...


class InMemoryCartStore:
    """Process-local cart; line items are kept in insertion order."""

    def __init__(self) -> None:
        self._items: List[CartLineItem] = []

    def add_cart_line_item(self, item: CartLineItem) -> None:
        self._items.append(item)

    def items(self) -> List[CartLineItem]:
        return list(self._items)

    def count(self) -> int:
        return len(self._items)

    def total(self) -> Decimal:
        return sum((i.variant_price for i in self._items), Decimal("0"))

    def clear(self) -> None:
        self._items.clear()


CARTS: Dict[int, InMemoryCartStore] = {}  # chat_id -> cart


def cart_for(chat_id: int) -> InMemoryCartStore:
    cart = CARTS.get(chat_id)
    if cart is None:
        cart = CARTS[chat_id] = InMemoryCartStore()
    return cart
