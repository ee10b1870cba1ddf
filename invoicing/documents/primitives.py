"""Drawing and formatting primitives shared by every layout stage."""

from datetime import date

from invoicing.documents.currency import DEFAULT_REGISTRY, CurrencyRegistry
from invoicing.documents.geometry import RGB
from invoicing.documents.surface import DrawingSurface

ELLIPSIS = "..."

# Fixed English month names; dates never follow the process locale.
_MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def fill_rect(
    surface: DrawingSurface,
    x: float,
    y: float,
    width: float,
    height: float,
    fill: RGB | None = None,
    border: RGB | None = None,
    border_width: float = 1,
) -> None:
    """Draw a rectangle with an optional fill and an optional border.

    A call with neither a fill nor a border draws nothing.
    """
    if fill is None and border is None:
        return
    surface.draw_rect(x, y, width, height, fill=fill, stroke=border, stroke_width=border_width)


def draw_line(
    surface: DrawingSurface,
    x1: float,
    y1: float,
    x2: float,
    y2: float,
    color: RGB,
    thickness: float = 1,
) -> None:
    """Draw a straight separator line."""
    surface.draw_line(x1, y1, x2, y2, color, thickness)


def format_currency(
    amount: float, currency_code: str | None, registry: CurrencyRegistry = DEFAULT_REGISTRY
) -> str:
    """Format amount in a currency, e.g. format_currency(1234.5, "USD") -> "$1,234.50".

    Unknown currency codes use the registry's default currency.
    """
    return registry.resolve(currency_code).format(amount)


def format_date(value: date) -> str:
    """Short date, e.g. "Jan 5, 2025"."""
    return f"{_MONTH_NAMES[value.month - 1][:3]} {value.day}, {value.year}"


def format_long_date(value: date) -> str:
    """Long date, e.g. "January 5, 2025"."""
    return f"{_MONTH_NAMES[value.month - 1]} {value.day}, {value.year}"


def format_plain_number(value: float) -> str:
    """Number without a trailing ".0" for whole values (2.0 -> "2", 7.5 -> "7.5")."""
    if float(value).is_integer():
        return str(int(value))
    return str(value)


def truncate_text(text: str, max_len: int) -> str:
    """Cut text longer than max_len to max_len characters ending in "..."."""
    if len(text) > max_len:
        return text[: max_len - len(ELLIPSIS)] + ELLIPSIS
    return text
