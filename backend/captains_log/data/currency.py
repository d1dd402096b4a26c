"""Currency conversion for trip budgets, using static exchange rates."""

# Static exchange rates to USD (can be updated periodically)
EXCHANGE_RATES_TO_USD: dict[str, float] = {
    "USD": 1.0,
    "CAD": 0.74,
    "MXN": 0.058,
    "GBP": 1.27,
    "EUR": 1.08,
    "CHF": 1.13,
    "SEK": 0.095,
    "NOK": 0.094,
    "DKK": 0.145,
    "ISK": 0.0072,
    "JPY": 0.0067,
    "CNY": 0.14,
    "KRW": 0.00074,
    "TWD": 0.031,
    "HKD": 0.13,
    "SGD": 0.75,
    "THB": 0.028,
    "INR": 0.012,
    "AUD": 0.65,
    "NZD": 0.60,
    "AED": 0.27,
    "TRY": 0.031,
    "ZAR": 0.055,
    "BRL": 0.20,
}

CURRENCY_SYMBOLS: dict[str, str] = {
    "USD": "$", "CAD": "CA$", "MXN": "MX$", "GBP": "£", "EUR": "€",
    "JPY": "¥", "CNY": "CN¥", "KRW": "₩", "TWD": "NT$", "HKD": "HK$",
    "SGD": "S$", "INR": "₹", "AUD": "A$", "NZD": "NZ$", "BRL": "R$",
}


def is_supported(currency: str | None) -> bool:
    return bool(currency) and currency.upper() in EXCHANGE_RATES_TO_USD


def convert_to_usd(amount: float, from_currency: str) -> float:
    """Convert an amount to USD. Unknown currencies pass through at 1:1."""
    rate = EXCHANGE_RATES_TO_USD.get(from_currency.upper(), 1.0)
    return round(amount * rate, 2)


def convert_from_usd(amount: float, to_currency: str) -> float:
    rate = EXCHANGE_RATES_TO_USD.get(to_currency.upper(), 1.0)
    if rate == 0:
        return amount
    return round(amount / rate, 2)


def convert(amount: float, from_currency: str | None, to_currency: str) -> float:
    """Convert between two currencies via USD.

    A missing source currency means ``to_currency``. Amounts in a currency
    outside the rate table are returned unconverted.
    """
    if not from_currency or from_currency.upper() == to_currency.upper():
        return round(amount, 2)
    if not is_supported(from_currency):
        return round(amount, 2)
    return convert_from_usd(convert_to_usd(amount, from_currency), to_currency)


def format_price(amount: float, currency: str = "USD") -> str:
    """Format an amount with its currency symbol for display."""
    symbol = CURRENCY_SYMBOLS.get(currency, currency + " ")
    return f"{symbol}{amount:,.2f}"
