"""
Pytest configuration and fixtures
"""
import asyncio
import os
from decimal import Decimal

# Settings are read at import time; pin them before storefront is imported
os.environ["ADD_TO_CART_DELAY"] = "0"
os.environ["ADD_TO_CART_TIMEOUT"] = ""
os.environ["CURRENCY"] = "USD"
os.environ["LOCALE"] = "en-US"
os.environ["DECIMALS"] = "2"

import pytest

from storefront.models import Product, Variant
from storefront.services.notifications import FlashNotifier


class RecordingCartStore:
    def __init__(self):
        self.items = []

    def add_cart_line_item(self, item):
        self.items.append(item)


class GatedAddToCart:
    """Add-to-cart call that stays in flight until ``release`` is set."""

    def __init__(self):
        self.calls = []
        self.release = asyncio.Event()

    async def __call__(self, product, variant_name):
        self.calls.append((product.id, variant_name))
        await self.release.wait()


async def instant_add(product, variant_name):
    return None


def make_product(id=1, price="10", variants=None, **kw):
    return Product(
        id=id,
        title=kw.pop("title", f"Product {id}"),
        image=kw.pop("image", f"https://img.example/{id}.jpg"),
        price=Decimal(price),
        variants=tuple(
            Variant(id=i + 1, name=name, price=Decimal(p)) for i, (name, p) in enumerate(variants or ())
        ),
        **kw,
    )


@pytest.fixture
def store():
    return RecordingCartStore()


@pytest.fixture
def notifier():
    return FlashNotifier()


@pytest.fixture
def gate():
    return GatedAddToCart()
