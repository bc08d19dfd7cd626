from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Any, Dict, Optional, Tuple

from storefront.utils.validators import require_at_least, require_between, require_non_negative


def _dec(v: Any) -> Decimal:
    # str() first so floats from JSON keep their printed value
    return v if isinstance(v, Decimal) else Decimal(str(v))


@dataclass(frozen=True)
class Variant:
    id: int
    name: str
    price: Decimal

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Variant":
        return cls(id=int(data["id"]), name=str(data["name"]), price=_dec(data["price"]))


@dataclass(frozen=True)
class Rating:
    rate: Decimal
    count: int = 0

    def __post_init__(self) -> None:
        require_between(self.rate, Decimal("0"), Decimal("5"), "rating.rate")
        if self.count < 0:
            raise ValueError("rating.count must be >= 0")


@dataclass(frozen=True)
class Product:
    """Catalog product as handed to a card.

    ``variants`` is left empty when the catalog has no size ladder for the
    product; the variant catalog fills in the defaults.
    """

    id: int
    title: str
    image: str
    price: Decimal
    original_price: Optional[Decimal] = None
    discount: Optional[int] = None
    rating: Optional[Rating] = None
    variants: Tuple[Variant, ...] = ()
    description: str = ""
    category: str = ""

    def __post_init__(self) -> None:
        require_non_negative(self.price, "price")
        if self.original_price is not None:
            require_non_negative(self.original_price, "original_price")
        names = set()
        ids = set()
        for v in self.variants:
            require_at_least(v.price, self.price, f"variant {v.name!r} price")
            if v.name in names:
                raise ValueError(f"duplicate variant name: {v.name}")
            if v.id in ids:
                raise ValueError(f"duplicate variant id: {v.id}")
            names.add(v.name)
            ids.add(v.id)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Product":
        rating = data.get("rating")
        original = data.get("originalPrice", data.get("original_price"))
        discount = data.get("discount")
        return cls(
            id=int(data["id"]),
            title=str(data.get("title", "")),
            image=str(data.get("image", "")),
            price=_dec(data["price"]),
            original_price=_dec(original) if original is not None else None,
            discount=int(discount) if discount else None,
            rating=Rating(rate=_dec(rating.get("rate", 0)), count=int(rating.get("count", 0))) if rating else None,
            variants=tuple(Variant.from_dict(v) for v in data.get("variants") or ()),
            description=str(data.get("description", "")),
            category=str(data.get("category", "")),
        )


@dataclass(frozen=True)
class CartLineItem:
    product: Product
    selected_variant_name: str
    variant_price: Decimal

    def as_dict(self) -> Dict[str, Any]:
        p = self.product
        return {
            "id": p.id,
            "title": p.title,
            "image": p.image,
            "price": p.price,
            "originalPrice": p.original_price,
            "discount": p.discount,
            "rating": {"rate": p.rating.rate, "count": p.rating.count} if p.rating else None,
            "selectedVariant": self.selected_variant_name,
            "variantPrice": self.variant_price,
        }
