from aiogram.types import (
    InlineKeyboardButton,
    InlineKeyboardMarkup,
    KeyboardButton,
    ReplyKeyboardMarkup,
)

from storefront.services.card import CardView

# callback_data is capped at 64 bytes by Telegram, so buttons carry ids only:
#   v:<pid>:<vid>    choose variant        sel:<pid>   already chosen
#   add:<pid>[:<vid>] submit               pick:<pid>  submit without a choice
#   wait:<pid>        attempt in flight    oos:<pid>   out of stock


def main_kb() -> ReplyKeyboardMarkup:
    return ReplyKeyboardMarkup(
        keyboard=[
            [KeyboardButton(text="/products"), KeyboardButton(text="/cart")],
            [KeyboardButton(text="/help")],
        ],
        resize_keyboard=True,
    )


def _selected_id(card: CardView):
    for opt in card.options:
        if opt.selected:
            return opt.id
    return None


def card_kb(card: CardView) -> InlineKeyboardMarkup:
    pid = card.product_id
    rows = []
    if card.show_selector and not card.out_of_stock:
        for opt in card.options:
            if opt.selected:
                rows.append([InlineKeyboardButton(text=f"✅ {opt.label}", callback_data=f"sel:{pid}")])
            else:
                rows.append([InlineKeyboardButton(text=opt.label, callback_data=f"v:{pid}:{opt.id}")])

    if card.out_of_stock:
        action = InlineKeyboardButton(text="Out of Stock", callback_data=f"oos:{pid}")
    elif card.loading:
        action = InlineKeyboardButton(text="⏳ Adding...", callback_data=f"wait:{pid}")
    elif not card.can_add:
        action = InlineKeyboardButton(text="🛒 Add to Cart", callback_data=f"pick:{pid}")
    else:
        vid = _selected_id(card)
        data = f"add:{pid}" if vid is None else f"add:{pid}:{vid}"
        action = InlineKeyboardButton(text="🛒 Add to Cart", callback_data=data)
    rows.append([action])
    return InlineKeyboardMarkup(inline_keyboard=rows)
