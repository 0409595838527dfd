# sdk/money.py
# All storefront prices are integer US-dollar cents.


def format_price(cents: int) -> str:
    sign = "-" if cents < 0 else ""
    dollars, rem = divmod(abs(int(cents)), 100)
    return f"{sign}${dollars:,}.{rem:02d}"


def dollars_to_cents(amount: float) -> int:
    return int(round(amount * 100))
