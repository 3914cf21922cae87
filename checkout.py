"""
Checkout hand-off: orders are not placed here. The shopper gets a
messenger link with a prefilled plain-text order for the shop admin.
"""
from typing import Optional, Sequence
from urllib.parse import quote

from config import CHECKOUT_HANDLE
from pricing import cart_total, format_price
from schemas import Currency, Product

MESSENGER_URL = "https://m.me/{handle}?text={text}"


def product_message(product: Product, currency: Currency) -> str:
    return (
        "Hello Texpress Admin!\n\n"
        "I want to buy this product:\n"
        f"Name: {product.name}\n"
        f"Price: {format_price(product.price, currency)}\n"
        f"Weight: {_weight(product.weight)} kg\n\n"
        "Please contact me for payment and shipping details."
    )


def cart_message(products: Sequence[Product], currency: Currency) -> str:
    items = "\n".join(f"- {p.name} ({format_price(p.price, currency)})" for p in products)
    total = format_price(cart_total(products), currency)
    return (
        "Hello Texpress Admin!\n\n"
        "I want to buy these items from my cart:\n"
        f"{items}\n\n"
        f"Total: {total}\n\n"
        "Please contact me for payment."
    )


def messenger_link(message: str, handle: str = CHECKOUT_HANDLE) -> str:
    return MESSENGER_URL.format(handle=handle, text=quote(message, safe="!*'()"))


def product_checkout_link(product: Product, currency: Currency, handle: str = CHECKOUT_HANDLE) -> str:
    return messenger_link(product_message(product, currency), handle)


def cart_checkout_link(products: Sequence[Product], currency: Currency, handle: str = CHECKOUT_HANDLE) -> Optional[str]:
    if not products:
        return None
    return messenger_link(cart_message(products, currency), handle)


def _weight(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)
