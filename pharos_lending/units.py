import random
from decimal import Decimal, InvalidOperation


def to_smallest_unit(amount, decimals: int) -> int:
    """"100" з decimals=6 -> 100000000. Зайві знаки після коми — помилка, не округлення."""
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {amount!r}")
    if not value.is_finite() or value < 0:
        raise ValueError(f"Invalid amount: {amount!r}")
    scaled = value.scaleb(decimals)
    if scaled != scaled.to_integral_value():
        raise ValueError(f"Amount {amount} has more than {decimals} decimals")
    return int(scaled)


def format_units(value: int, decimals: int) -> str:
    text = format(Decimal(value).scaleb(-decimals), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def random_supply_amount(low: float, high: float, decimals: int, rng=random) -> int:
    amount = rng.random() * (high - low) + low
    digits = min(6, decimals)
    return to_smallest_unit(f"{amount:.{digits}f}", decimals)
