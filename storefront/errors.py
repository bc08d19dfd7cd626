from __future__ import annotations

from storefront.constants import (
    MSG_ADD_FAILED,
    MSG_OUT_OF_STOCK,
    MSG_SELECT_VARIANT,
    MSG_UNKNOWN_VARIANT,
)


class CartError(Exception):
    """Base for add-to-cart failures the shopper can fix and retry.

    ``str(err)`` is the message shown to the shopper.
    """

    default_message = MSG_ADD_FAILED

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class OutOfStockError(CartError):
    default_message = MSG_OUT_OF_STOCK


class VariantRequiredError(CartError):
    default_message = MSG_SELECT_VARIANT


class VariantNotFoundError(CartError):
    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(MSG_UNKNOWN_VARIANT.format(name=name))


class AddToCartFailedError(CartError):
    default_message = MSG_ADD_FAILED
