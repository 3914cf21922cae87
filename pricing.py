import math
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from schemas import Currency, Product, Review

EX_RATE_USD_TO_CAD = 1.38

CURRENCY_SYMBOLS = {
    Currency.USD: "$",
    Currency.CAD: "C$",
}

# Shown for products nobody has reviewed yet
DEFAULT_RATING = 5.0


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def average_rating(reviews: Iterable[Review]) -> float:
    ratings = [r.rating for r in reviews or []]
    if not ratings:
        return DEFAULT_RATING
    # round the float mean as stored, so 87/20 (4.3499...) shows 4.3
    mean = Decimal(sum(ratings) / len(ratings))
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def convert_price(price: float, currency: Currency) -> float:
    """Convert a USD price into `currency`. CAD prices are whole numbers."""
    if Currency(currency) == Currency.CAD:
        return _round_half_up(price * EX_RATE_USD_TO_CAD)
    return price


def _number(value: float) -> str:
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def format_price(price: float, currency: Currency) -> str:
    currency = Currency(currency)
    return f"{CURRENCY_SYMBOLS[currency]}{_number(convert_price(price, currency))}"


def cart_total(products: Iterable[Product]) -> float:
    """USD total of the given line items."""
    return round(sum(p.price for p in products), 2)
