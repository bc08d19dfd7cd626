from __future__ import annotations

from decimal import Decimal
from typing import Optional, Sequence

from storefront.config import Settings, settings as default_settings
from storefront.errors import VariantNotFoundError
from storefront.models import Product, Variant
from storefront.services.variants import find_variant
from storefront.utils.formatters import money


class PriceResolver:
    """Unit price for a selection, and the shop's money format."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or default_settings

    def effective_price(
        self,
        product: Product,
        variants: Sequence[Variant],
        selected_variant_name: Optional[str] = None,
    ) -> Decimal:
        if not selected_variant_name:
            return product.price
        variant = find_variant(variants, selected_variant_name)
        if variant is None:
            raise VariantNotFoundError(selected_variant_name)
        if len(variants) == 1:
            return product.price
        return variant.price

    def format(self, amount: Decimal) -> str:
        return money(
            amount,
            currency=self.settings.currency,
            locale=self.settings.locale,
            decimals=self.settings.decimals,
        )

    def format_delta(self, product: Product, variant: Variant) -> str:
        return f"+{self.format(variant.price - product.price)}"
