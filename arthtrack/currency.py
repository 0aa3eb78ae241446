from arthtrack.config import settings

CURRENCY_SYMBOLS: dict[str, str] = {
    "INR": "₹",
    "EUR": "€",
    "USD": "$",
    "GBP": "£",
    "JPY": "¥",
}

PREFIX_SYMBOLS = {"₹", "€", "$", "£", "¥"}


def currency_symbol(code: str | None = None) -> str:
    code = code or settings.currency_code
    return CURRENCY_SYMBOLS.get(code, code)


def format_amount(amount: float, currency_code: str | None = None) -> str:
    sym = currency_symbol(currency_code)
    if sym in PREFIX_SYMBOLS:
        return f"{sym}{amount:,.2f}"
    return f"{amount:,.2f} {sym}"


def describe_remaining(remaining: float, currency_code: str | None = None) -> str:
    if remaining < 0:
        return f"over budget by {format_amount(-remaining, currency_code)}"
    return f"{format_amount(remaining, currency_code)} left"
