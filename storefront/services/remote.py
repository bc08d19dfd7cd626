from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Protocol

from storefront.models import Product

log = logging.getLogger(__name__)


class AddToCartOperation(Protocol):
    def __call__(self, product: Product, variant_name: str) -> Awaitable[None]:
        ...


class SimulatedAddToCart:
    """Stand-in for the remote add-to-cart call: waits ``delay`` seconds and succeeds."""

    def __init__(
        self,
        delay: float = 0.5,
        sleep: Optional[Callable[[float], Awaitable[None]]] = None,
    ) -> None:
        self.delay = delay
        self._sleep = sleep or asyncio.sleep

    async def __call__(self, product: Product, variant_name: str) -> None:
        log.debug("remote add: product=%s variant=%s delay=%.2fs", product.id, variant_name, self.delay)
        await self._sleep(self.delay)
