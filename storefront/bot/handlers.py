from __future__ import annotations

import logging
from typing import Dict, Optional, Tuple

from aiogram import F, Router
from aiogram.exceptions import TelegramBadRequest
from aiogram.filters import Command
from aiogram.types import CallbackQuery, Message
from aiogram.utils.text_decorations import html_decoration as hd

from storefront.bot.keyboards import card_kb, main_kb
from storefront.config import settings
from storefront.constants import MSG_BUSY, MSG_OUT_OF_STOCK, MSG_SELECT_VARIANT, MSG_UNKNOWN_VARIANT
from storefront.services.card import CardView, build_card_view
from storefront.services.cart import cart_for
from storefront.services.notifications import FlashNotifier
from storefront.services.pricing import PriceResolver
from storefront.services.products import find_product, list_products
from storefront.services.remote import SimulatedAddToCart
from storefront.services.stock import OddIdStockPolicy
from storefront.services.variants import find_variant_by_id, resolve_variants
from storefront.services.workflow import CartSubmissionWorkflow

log = logging.getLogger(__name__)

router = Router()

PRICES = PriceResolver(settings)
STOCK = OddIdStockPolicy()

# (chat_id, message_id) of the rendered card; entries live only while an add is in flight
CardKey = Tuple[int, int]

WORKFLOWS: Dict[CardKey, CartSubmissionWorkflow] = {}


def _card_key(callback: CallbackQuery) -> CardKey:
    return int(callback.message.chat.id), int(callback.message.message_id)


def _workflow_for(key: CardKey, product) -> CartSubmissionWorkflow:
    wf = WORKFLOWS.get(key)
    if wf is None:
        wf = CartSubmissionWorkflow(
            product,
            cart_for(key[0]),
            FlashNotifier(),
            add_to_cart=SimulatedAddToCart(settings.add_to_cart_delay),
            stock_policy=STOCK,
            price_resolver=PRICES,
            timeout=settings.add_to_cart_timeout,
        )
        WORKFLOWS[key] = wf
    return wf


def _parse_product_id(text: str) -> Optional[int]:
    try:
        return int(text)
    except (TypeError, ValueError):
        return None


def _card_text(card: CardView) -> str:
    stars = "".join("★" if filled else "☆" for filled in card.stars)
    price = f"<b>{hd.quote(card.current_price)}</b>"
    if card.original_price:
        price += f" <s>{hd.quote(card.original_price)}</s>"
    if card.discount_label:
        price += f" {card.discount_label}"

    lines = [
        f"<b>{hd.quote(card.title)}</b>",
        f"{stars} ({card.rating_count})",
        price,
    ]
    if card.out_of_stock:
        lines.append("⛔ Out of Stock")
    elif card.show_selector and not card.selected_variant:
        lines.append("Select Size:")
    lines.append(f'<a href="{hd.quote(card.image)}">&#8205;</a>')
    return "\n".join(lines)


def _render_card(product, selected: Optional[str] = None, loading: bool = False) -> CardView:
    return build_card_view(product, selected, stock_policy=STOCK, price_resolver=PRICES, loading=loading)


@router.message(Command("start"))
async def cmd_start(message: Message):
    await message.answer("👋 Welcome! Browse /products and add them to your /cart.", reply_markup=main_kb())


@router.message(Command("help"))
async def cmd_help(message: Message):
    text = (
        "<b>Storefront — commands</b>\n\n"
        "/products — product list\n"
        "/product ID — product card\n"
        "/cart — show cart\n"
        "/cart_clear — empty cart\n"
        "/help — this help\n"
    )
    await message.answer(text)


@router.message(Command("products"))
async def cmd_products(message: Message):
    rows = list_products()
    if not rows:
        await message.answer("No products yet.")
        return
    lines = ["<b>Products:</b>"]
    for p in rows:
        lines.append(f"• /product {p.id} — {hd.quote(p.title)} ({hd.quote(PRICES.format(p.price))})")
    await message.answer("\n".join(lines))


@router.message(Command("product"))
async def cmd_product(message: Message):
    parts = (message.text or "").split()
    product_id = _parse_product_id(parts[1]) if len(parts) == 2 else None
    if product_id is None:
        await message.answer("Format: /product ID")
        return

    product = find_product(product_id)
    if product is None:
        await message.answer(f"❌ Product {product_id} not found")
        return

    card = _render_card(product)
    await message.answer(_card_text(card), reply_markup=card_kb(card))


@router.message(Command("cart"))
async def cmd_cart(message: Message):
    cart = cart_for(int(message.chat.id))
    items = cart.items()
    if not items:
        await message.answer("🧺 Your cart is empty.")
        return
    lines = ["<b>🧺 Cart:</b>"]
    for it in items:
        lines.append(
            f"• {hd.quote(it.product.title)} — {hd.quote(it.selected_variant_name)}: "
            f"{hd.quote(PRICES.format(it.variant_price))}"
        )
    lines.append(f"\n<b>Total: {hd.quote(PRICES.format(cart.total()))}</b>")
    await message.answer("\n".join(lines))


@router.message(Command("cart_clear"))
async def cmd_cart_clear(message: Message):
    cart_for(int(message.chat.id)).clear()
    await message.answer("✅ Cart cleared.")


def _parse_callback(data: str) -> Tuple[Optional[int], Optional[int]]:
    """``<prefix>:<pid>[:<vid>]`` -> (product id, variant id)."""
    parts = data.split(":")
    pid = _parse_product_id(parts[1]) if len(parts) > 1 else None
    vid = _parse_product_id(parts[2]) if len(parts) > 2 else None
    return pid, vid


async def _edit_markup(callback: CallbackQuery, card: CardView) -> None:
    try:
        await callback.message.edit_reply_markup(reply_markup=card_kb(card))
    except TelegramBadRequest as e:
        # message deleted or unchanged; the answer still reaches the shopper
        log.debug("card %s: keyboard not updated: %s", card.product_id, e)


@router.callback_query(F.data.startswith("v:"))
async def on_variant(callback: CallbackQuery):
    pid, vid = _parse_callback(callback.data)
    product = find_product(pid) if pid is not None else None
    if product is None:
        await callback.answer("Product not found", show_alert=True)
        return

    variant = find_variant_by_id(resolve_variants(product), vid) if vid is not None else None
    if variant is None:
        await callback.answer(MSG_UNKNOWN_VARIANT.format(name=vid), show_alert=True)
        return

    wf = WORKFLOWS.get(_card_key(callback))
    if wf is not None and wf.busy:
        await callback.answer(MSG_BUSY)
        return

    card = _render_card(product, variant.name)
    await callback.message.edit_text(_card_text(card), reply_markup=card_kb(card))
    await callback.answer()


@router.callback_query(F.data.startswith("sel:"))
async def on_selected(callback: CallbackQuery):
    await callback.answer()


@router.callback_query(F.data.startswith("pick:"))
async def on_pick_first(callback: CallbackQuery):
    await callback.answer(MSG_SELECT_VARIANT, show_alert=True)


@router.callback_query(F.data.startswith("wait:"))
async def on_wait(callback: CallbackQuery):
    await callback.answer(MSG_BUSY)


@router.callback_query(F.data.startswith("add:"))
async def on_add_to_cart(callback: CallbackQuery):
    pid, vid = _parse_callback(callback.data)
    product = find_product(pid) if pid is not None else None
    if product is None:
        await callback.answer("Product not found", show_alert=True)
        return

    selected = None
    if vid is not None:
        variant = find_variant_by_id(resolve_variants(product), vid)
        if variant is None:
            await callback.answer(MSG_UNKNOWN_VARIANT.format(name=vid), show_alert=True)
            return
        selected = variant.name

    key = _card_key(callback)
    wf = _workflow_for(key, product)
    if wf.busy:
        await callback.answer(MSG_BUSY)
        return

    try:
        await _edit_markup(callback, _render_card(product, selected, loading=True))
        result = await wf.submit(selected)
    finally:
        # the card keeps no state between attempts
        if not wf.busy and WORKFLOWS.get(key) is wf:
            del WORKFLOWS[key]

    if result.ignored:
        await callback.answer(MSG_BUSY)
        return

    await _edit_markup(callback, _render_card(product, selected))
    notice = wf.notifier.pop()
    if notice is None:
        await callback.answer()
        return
    await callback.answer(notice.message, show_alert=notice.level == "error")


@router.callback_query(F.data.startswith("oos:"))
async def on_out_of_stock(callback: CallbackQuery):
    await callback.answer(MSG_OUT_OF_STOCK, show_alert=True)
