"""Country, Steam region and currency helpers."""
from typing import NamedTuple


class CurrencyInfo(NamedTuple):
    country_code: str  # Steam region code, e.g. "br"
    currency: str  # ISO 4217, e.g. "BRL"
    symbol: str
    decimals: int = 2


COUNTRY_TO_CURRENCY: dict[str, CurrencyInfo] = {
    # Americas
    "US": CurrencyInfo("us", "USD", "$"),
    "BR": CurrencyInfo("br", "BRL", "R$"),
    "CA": CurrencyInfo("ca", "CAD", "CA$"),
    "MX": CurrencyInfo("mx", "MXN", "MX$"),
    "AR": CurrencyInfo("ar", "ARS", "ARS$"),
    "CL": CurrencyInfo("cl", "CLP", "CLP$", 0),
    "CO": CurrencyInfo("co", "COP", "COL$", 0),
    "PE": CurrencyInfo("pe", "PEN", "S/"),
    # Europe
    "GB": CurrencyInfo("gb", "GBP", "£"),
    "DE": CurrencyInfo("de", "EUR", "€"),
    "FR": CurrencyInfo("fr", "EUR", "€"),
    "IT": CurrencyInfo("it", "EUR", "€"),
    "ES": CurrencyInfo("es", "EUR", "€"),
    "NL": CurrencyInfo("nl", "EUR", "€"),
    "PL": CurrencyInfo("pl", "PLN", "zł"),
    "RU": CurrencyInfo("ru", "RUB", "₽"),
    "TR": CurrencyInfo("tr", "TRY", "₺"),
    # Asia / Pacific
    "JP": CurrencyInfo("jp", "JPY", "¥", 0),
    "CN": CurrencyInfo("cn", "CNY", "¥"),
    "KR": CurrencyInfo("kr", "KRW", "₩", 0),
    "IN": CurrencyInfo("in", "INR", "₹"),
    "SG": CurrencyInfo("sg", "SGD", "S$"),
    "AU": CurrencyInfo("au", "AUD", "A$"),
    "NZ": CurrencyInfo("nz", "NZD", "NZ$"),
}

DEFAULT_CURRENCY = COUNTRY_TO_CURRENCY["US"]

# Regions offered in the currency selector
AVAILABLE_CURRENCIES = [
    ("us", "USD", "United States Dollar"),
    ("br", "BRL", "Brazilian Real"),
    ("ca", "CAD", "Canadian Dollar"),
    ("gb", "GBP", "British Pound"),
    ("de", "EUR", "Euro (Germany)"),
    ("fr", "EUR", "Euro (France)"),
    ("jp", "JPY", "Japanese Yen"),
    ("au", "AUD", "Australian Dollar"),
    ("mx", "MXN", "Mexican Peso"),
    ("ar", "ARS", "Argentine Peso"),
]


def get_currency_info(country_code: str | None) -> CurrencyInfo:
    """Look up currency info for a country code, falling back to US."""
    if not country_code:
        return DEFAULT_CURRENCY
    return COUNTRY_TO_CURRENCY.get(country_code.upper(), DEFAULT_CURRENCY)


def get_steam_country_code(country_code: str | None) -> str:
    """Map any country code to a Steam region code we know how to price."""
    return get_currency_info(country_code).country_code


def format_price(amount_minor: int, currency: str) -> str:
    """Format a price given in minor units, e.g. ``1999, "USD"`` -> ``"$19.99"``.

    Steam reports every currency in hundredths, including zero-decimal
    currencies like JPY, so the amount is always divided by 100.
    """
    info = next((c for c in COUNTRY_TO_CURRENCY.values() if c.currency == currency), None)
    amount = amount_minor / 100
    if info is None:
        return f"{amount:,.2f} {currency}"
    return f"{info.symbol}{amount:,.{info.decimals}f}"
