"""Currency registry for amount formatting.

An explicit finite table mapping ISO 4217 codes to display rules, with a
default entry used for any code the table does not know. Formatting is
lenient: lookups never fail. Rejecting unsupported codes is the job of the
API layer, which asks `is_supported()` before rendering.
"""

import logging
from decimal import ROUND_HALF_UP, Decimal

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

DEFAULT_CURRENCY = "NGN"
CENT = Decimal("0.01")


class CurrencyInfo(BaseModel):
    """Display rules for one currency.

    Attributes:
        code: ISO 4217 code
        symbol: Prefix printed before amounts
        name: Human-readable currency name
        locale: Display locale tag the separators are taken from
        group_separator: Thousands separator for the locale
        decimal_separator: Decimal separator for the locale
    """

    model_config = ConfigDict(frozen=True)

    code: str
    symbol: str
    name: str
    locale: str
    group_separator: str = ","
    decimal_separator: str = "."

    def format(self, amount: float) -> str:
        """Format amount with this currency's symbol and separators.

        Always exactly two fraction digits, rounded half away from zero on
        the shortest decimal form of amount (0.075 -> "0.08"); the sign, if
        any, follows the symbol (e.g. "$-5.00").
        """
        cents = Decimal(str(amount)).quantize(CENT, rounding=ROUND_HALF_UP)
        text = f"{cents:,.2f}"
        grouped = text.translate(
            str.maketrans({",": self.group_separator, ".": self.decimal_separator})
        )
        return f"{self.symbol}{grouped}"


SUPPORTED_CURRENCIES: tuple[CurrencyInfo, ...] = (
    CurrencyInfo(code="NGN", symbol="NGN", name="Nigerian Naira", locale="en-NG"),
    CurrencyInfo(code="USD", symbol="$", name="US Dollar", locale="en-US"),
    CurrencyInfo(code="EUR", symbol="€", name="Euro", locale="en-EU"),
    CurrencyInfo(code="GBP", symbol="£", name="British Pound", locale="en-GB"),
    CurrencyInfo(code="ZAR", symbol="R", name="South African Rand", locale="en-ZA"),
    CurrencyInfo(code="KES", symbol="KSh", name="Kenyan Shilling", locale="en-KE"),
    CurrencyInfo(code="GHS", symbol="GH₵", name="Ghanaian Cedi", locale="en-GH"),
)


class CurrencyRegistry:
    """Lookup table of supported currencies with a default entry.

    Supports runtime registration of additional currencies.
    """

    def __init__(
        self,
        currencies: tuple[CurrencyInfo, ...] = SUPPORTED_CURRENCIES,
        default_code: str = DEFAULT_CURRENCY,
    ) -> None:
        """Initialize registry.

        Args:
            currencies: Currencies to register
            default_code: Code used for unknown lookups; must be registered

        Raises:
            ValueError: If default_code is not among currencies
        """
        self._currencies: dict[str, CurrencyInfo] = {c.code: c for c in currencies}
        if default_code not in self._currencies:
            available = ", ".join(self._currencies)
            raise ValueError(
                f"Default currency '{default_code}' is not registered. "
                f"Available currencies: {available}"
            )
        self.default_code = default_code

    @property
    def default(self) -> CurrencyInfo:
        return self._currencies[self.default_code]

    def register(self, info: CurrencyInfo) -> None:
        """Register a currency, replacing any entry with the same code."""
        self._currencies[info.code] = info
        logger.info(f"Registered currency: {info.code}")

    def get(self, code: str | None) -> CurrencyInfo | None:
        """Get currency by code, or None when unknown."""
        if code is None:
            return None
        return self._currencies.get(code)

    def resolve(self, code: str | None) -> CurrencyInfo:
        """Get currency by code, falling back to the default currency."""
        return self.get(code) or self.default

    def is_supported(self, code: str | None) -> bool:
        return self.get(code) is not None

    def codes(self) -> list[str]:
        return list(self._currencies)

    def list_currencies(self) -> list[CurrencyInfo]:
        return list(self._currencies.values())


DEFAULT_REGISTRY = CurrencyRegistry()
