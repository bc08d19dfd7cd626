from __future__ import annotations

from typing import Protocol, runtime_checkable

from storefront.models import Product


@runtime_checkable
class StockPolicy(Protocol):
    """Availability check used to gate the card. Must be sync and side-effect free."""

    def is_available(self, product: Product) -> bool:
        ...


class OddIdStockPolicy:
    # placeholder until an inventory service exists: odd ids are in stock
    def is_available(self, product: Product) -> bool:
        return product.id % 2 == 1
