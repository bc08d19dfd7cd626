from __future__ import annotations

from typing import List, Optional

from storefront.constants import DEMO_PRODUCTS
from storefront.models import Product

_PRODUCTS: List[Product] = [Product.from_dict(p) for p in DEMO_PRODUCTS]


def list_products() -> List[Product]:
    return list(_PRODUCTS)


def find_product(product_id: int) -> Optional[Product]:
    for p in _PRODUCTS:
        if p.id == product_id:
            return p
    return None
