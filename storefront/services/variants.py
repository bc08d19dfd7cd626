from __future__ import annotations

from typing import Optional, Sequence, Tuple

from storefront.constants import DEFAULT_SIZES
from storefront.models import Product, Variant


def resolve_variants(product: Product) -> Tuple[Variant, ...]:
    """Purchasable variants of ``product``, never empty.

    Catalog variants are returned as given. Products without them get the
    Small / Medium / Large ladder priced from the base price.
    """
    if product.variants:
        return tuple(product.variants)
    return tuple(
        Variant(id=vid, name=name, price=product.price + surcharge)
        for vid, name, surcharge in DEFAULT_SIZES
    )


def requires_choice(variants: Sequence[Variant]) -> bool:
    return len(variants) > 1


def find_variant(variants: Sequence[Variant], name: str) -> Optional[Variant]:
    for v in variants:
        if v.name == name:
            return v
    return None


def find_variant_by_id(variants: Sequence[Variant], variant_id: int) -> Optional[Variant]:
    for v in variants:
        if v.id == variant_id:
            return v
    return None
