"""Currency formatting for amounts stored in cents."""

CURRENCY_SYMBOL = "R$"


def format_currency(amount_cents: int) -> str:
    """
    Format an amount in cents the way the app displays reais.

    Args:
        amount_cents: Amount in cents (e.g., 123456 for R$ 1.234,56)

    Returns:
        Formatted string (e.g., "R$ 1.234,56", "-R$ 5,00")
    """
    sign = "-" if amount_cents < 0 else ""
    whole, cents = divmod(abs(amount_cents), 100)
    # Brazilian grouping: dot for thousands, comma for decimals
    whole_str = f"{whole:,}".replace(",", ".")
    return f"{sign}{CURRENCY_SYMBOL} {whole_str},{cents:02d}"


def cents_to_decimal_str(amount_cents: int) -> str:
    """Plain decimal rendering, e.g. 500 -> "5.00", -1 -> "-0.01"."""
    sign = "-" if amount_cents < 0 else ""
    whole, cents = divmod(abs(amount_cents), 100)
    return f"{sign}{whole}.{cents:02d}"
