"""
CartSubmissionWorkflow: add-to-cart state machine for one rendered card.

States: idle -> validating -> submitting -> (succeeded | failed) -> idle.
succeeded / failed are per-attempt; the workflow always settles back in idle.

The only await point is the add-to-cart call. While an attempt is running the
workflow is busy and further submits are ignored (no queueing). Runs on a
single event loop, so a plain flag is enough.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, List, Optional, Set

from storefront.constants import MSG_ADDED
from storefront.errors import (
    AddToCartFailedError,
    CartError,
    OutOfStockError,
    VariantNotFoundError,
    VariantRequiredError,
)
from storefront.models import CartLineItem, Product
from storefront.services.cart import CartStore
from storefront.services.notifications import LogNotifier, NotificationService
from storefront.services.pricing import PriceResolver
from storefront.services.remote import AddToCartOperation, SimulatedAddToCart
from storefront.services.stock import OddIdStockPolicy, StockPolicy
from storefront.services.variants import find_variant, requires_choice, resolve_variants

log = logging.getLogger(__name__)


class WorkflowState(str, Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


ALLOWED_TRANSITIONS: Dict[WorkflowState, Set[WorkflowState]] = {
    WorkflowState.IDLE: {WorkflowState.VALIDATING},
    WorkflowState.VALIDATING: {WorkflowState.SUBMITTING, WorkflowState.FAILED},
    WorkflowState.SUBMITTING: {WorkflowState.SUCCEEDED, WorkflowState.FAILED},
    WorkflowState.SUCCEEDED: {WorkflowState.IDLE},
    WorkflowState.FAILED: {WorkflowState.IDLE},
}


def allowed_targets(current: WorkflowState) -> List[WorkflowState]:
    return sorted(ALLOWED_TRANSITIONS.get(current, set()), key=lambda s: s.value)


TransitionListener = Callable[[WorkflowState, WorkflowState], None]


@dataclass(frozen=True)
class SubmitResult:
    ok: bool
    item: Optional[CartLineItem] = None
    error: Optional[CartError] = None
    ignored: bool = False  # rejected because an attempt was already in flight
    cancelled: bool = False  # in-flight call aborted through cancel()


class CartSubmissionWorkflow:
    def __init__(
        self,
        product: Product,
        cart_store: CartStore,
        notifier: Optional[NotificationService] = None,
        *,
        add_to_cart: Optional[AddToCartOperation] = None,
        stock_policy: Optional[StockPolicy] = None,
        price_resolver: Optional[PriceResolver] = None,
        timeout: Optional[float] = None,
        on_transition: Optional[TransitionListener] = None,
    ) -> None:
        self.product = product
        self.variants = resolve_variants(product)
        self.cart_store = cart_store
        self.notifier = notifier if notifier is not None else LogNotifier()
        self.add_to_cart = add_to_cart or SimulatedAddToCart()
        self.stock_policy = stock_policy or OddIdStockPolicy()
        self.price_resolver = price_resolver or PriceResolver()
        self.timeout = timeout
        self.on_transition = on_transition

        self.state = WorkflowState.IDLE
        self.last_error: Optional[CartError] = None
        self._busy = False
        self._call: Optional[asyncio.Future] = None
        self._cancel_requested = False

    # -------------------- observation --------------------

    @property
    def busy(self) -> bool:
        return self._busy

    @property
    def is_loading(self) -> bool:
        return self.state is WorkflowState.SUBMITTING

    @property
    def available(self) -> bool:
        return self.stock_policy.is_available(self.product)

    def can_submit(self, selected_variant_name: Optional[str] = None) -> bool:
        """Whether the add button should be enabled."""
        if self._busy or not self.available:
            return False
        return bool(selected_variant_name) or not requires_choice(self.variants)

    # -------------------- commands --------------------

    async def submit(self, selected_variant_name: Optional[str] = None) -> SubmitResult:
        if self._busy:
            log.info("product %s: submit ignored, attempt in flight (%s)", self.product.id, self.state.value)
            return SubmitResult(ok=False, ignored=True)

        self._busy = True
        self._cancel_requested = False
        try:
            return await self._attempt(selected_variant_name or None)
        finally:
            # caller's task cancelled mid-attempt
            if self.state in (WorkflowState.VALIDATING, WorkflowState.SUBMITTING):
                self._transition(WorkflowState.FAILED)
            if self.state is not WorkflowState.IDLE:
                self._transition(WorkflowState.IDLE)
            self._busy = False
            self._call = None

    def cancel(self) -> bool:
        """Abort the in-flight add-to-cart call, e.g. when the card goes away.

        Only the remote call is cancelled: the pending ``submit()`` returns a
        ``cancelled`` result instead of raising into whoever awaited it.
        """
        if self._call is None or self._call.done():
            return False
        log.info("product %s: cancelling in-flight add to cart", self.product.id)
        self._cancel_requested = True
        return self._call.cancel()

    # -------------------- internals --------------------

    async def _attempt(self, selected: Optional[str]) -> SubmitResult:
        self._transition(WorkflowState.VALIDATING)
        try:
            self._validate(selected)
        except CartError as e:
            return self._fail(e)

        self._transition(WorkflowState.SUBMITTING)
        variant_name = selected or self.variants[0].name
        try:
            await self._call_remote(variant_name)
        except CartError as e:
            return self._fail(e)
        except asyncio.CancelledError:
            if not self._cancel_requested:
                raise
            self._transition(WorkflowState.FAILED)
            log.info("product %s: add to cart cancelled", self.product.id)
            return SubmitResult(ok=False, cancelled=True)

        price = self.price_resolver.effective_price(self.product, self.variants, selected)
        item = CartLineItem(product=self.product, selected_variant_name=variant_name, variant_price=price)
        self.cart_store.add_cart_line_item(item)
        self._transition(WorkflowState.SUCCEEDED)
        self.last_error = None
        log.info("product %s: added to cart (%s, %s)", self.product.id, variant_name, price)
        self.notifier.notify_success(MSG_ADDED)
        return SubmitResult(ok=True, item=item)

    def _validate(self, selected: Optional[str]) -> None:
        if not self.stock_policy.is_available(self.product):
            raise OutOfStockError()
        if selected is None:
            if requires_choice(self.variants):
                raise VariantRequiredError()
        elif find_variant(self.variants, selected) is None:
            raise VariantNotFoundError(selected)

    async def _call_remote(self, variant_name: str) -> None:
        try:
            self._call = asyncio.ensure_future(self.add_to_cart(self.product, variant_name))
            if self.timeout is None:
                await self._call
            else:
                await asyncio.wait_for(self._call, self.timeout)
        except asyncio.TimeoutError:
            log.warning("product %s: add to cart timed out after %.2fs", self.product.id, self.timeout)
            raise AddToCartFailedError() from None
        except CartError:
            raise
        except Exception as e:
            log.exception("product %s: add to cart call failed", self.product.id)
            raise AddToCartFailedError() from e

    def _fail(self, error: CartError) -> SubmitResult:
        self._transition(WorkflowState.FAILED)
        self.last_error = error
        log.info("product %s: add to cart rejected: %s", self.product.id, error)
        self.notifier.notify_error(str(error))
        return SubmitResult(ok=False, error=error)

    def _transition(self, target: WorkflowState) -> None:
        current = self.state
        if target not in ALLOWED_TRANSITIONS[current]:
            raise RuntimeError(f"disallowed_transition:{current.value}->{target.value}")
        self.state = target
        log.debug("product %s: %s -> %s", self.product.id, current.value, target.value)
        if self.on_transition is not None:
            self.on_transition(current, target)
