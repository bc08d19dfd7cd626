from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Optional, Tuple

from storefront.constants import RATING_STARS
from storefront.errors import VariantNotFoundError
from storefront.models import Product
from storefront.services.pricing import PriceResolver
from storefront.services.stock import OddIdStockPolicy, StockPolicy
from storefront.services.variants import requires_choice, resolve_variants
from storefront.utils.formatters import truncate_title


@dataclass(frozen=True)
class VariantOption:
    id: int
    name: str
    label: str
    selected: bool


@dataclass(frozen=True)
class CardView:
    product_id: int
    title: str
    full_title: str
    image: str
    detail_path: str
    stars: Tuple[bool, ...]
    rating_count: int
    out_of_stock: bool
    discount_label: Optional[str]
    current_price: str
    original_price: Optional[str]
    show_selector: bool
    options: Tuple[VariantOption, ...]
    selected_variant: Optional[str]
    loading: bool
    can_add: bool


def build_card_view(
    product: Product,
    selected_variant_name: Optional[str] = None,
    *,
    stock_policy: Optional[StockPolicy] = None,
    price_resolver: Optional[PriceResolver] = None,
    loading: bool = False,
) -> CardView:
    stock_policy = stock_policy or OddIdStockPolicy()
    prices = price_resolver or PriceResolver()
    variants = resolve_variants(product)

    selected = selected_variant_name or None
    try:
        current = prices.effective_price(product, variants, selected)
    except VariantNotFoundError:
        # stale or hand-typed selection: show the card as unselected
        selected = None
        current = product.price

    filled = math.floor(product.rating.rate) if product.rating else 0
    out_of_stock = not stock_policy.is_available(product)
    choice = requires_choice(variants)

    original = None
    if product.original_price is not None and product.original_price > product.price:
        original = prices.format(product.original_price)

    return CardView(
        product_id=product.id,
        title=truncate_title(product.title),
        full_title=product.title,
        image=product.image,
        detail_path=f"/product/{product.id}",
        stars=tuple(i < filled for i in range(RATING_STARS)),
        rating_count=product.rating.count if product.rating else 0,
        out_of_stock=out_of_stock,
        discount_label=f"-{product.discount}%" if product.discount else None,
        current_price=prices.format(current),
        original_price=original,
        show_selector=choice,
        options=tuple(
            VariantOption(
                id=v.id,
                name=v.name,
                label=f"{v.name} ({prices.format_delta(product, v)})",
                selected=v.name == selected,
            )
            for v in variants
        ),
        selected_variant=selected,
        loading=loading,
        can_add=not out_of_stock and not loading and (selected is not None or not choice),
    )
