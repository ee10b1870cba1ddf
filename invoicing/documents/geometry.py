"""Page geometry, palette and type scale for the document layout.

All coordinates are PDF points with the origin at the bottom-left corner.
Offsets named `*_offset` are measured downward from the top edge of the
block they belong to (the page top for the header, the stage's start cursor
for the other stages).
"""

from dataclasses import dataclass, field

from invoicing.documents.currency import DEFAULT_REGISTRY, CurrencyRegistry

RGB = tuple[float, float, float]


@dataclass(frozen=True)
class HeaderGeometry:
    bar_height: float = 22
    name_offset: float = 47
    tagline_offset: float = 65
    details_offset: float = 79
    contact_offset: float = 89
    address_offset: float = 99
    rule_offset: float = 107
    rule_thickness: float = 2
    bottom_gap: float = 5


@dataclass(frozen=True)
class CardGeometry:
    width: float = 140
    height: float = 60
    spacing: float = 20
    padding: float = 10
    title_offset: float = 25
    value_offset: float = 45
    dates_label_x: float = 370
    dates_value_x: float = 460
    dates_first_offset: float = 15
    dates_row_step: float = 14
    bottom_gap: float = 15


@dataclass(frozen=True)
class BillingGeometry:
    width: float = 230
    height: float = 85
    padding: float = 10
    title_offset: float = 15
    name_offset: float = 30
    details_offset: float = 42
    detail_step: float = 10
    max_detail_chars: int = 35
    bottom_gap: float = 15


@dataclass(frozen=True)
class TableGeometry:
    """Line-item table; column x positions are relative to the table's left edge."""

    width: float = 490
    header_height: float = 22
    row_height: float = 18
    header_text_offset: float = 8
    row_text_offset: float = 5
    description_x: float = 8
    quantity_x: float = 280
    unit_price_x: float = 320
    amount_x: float = 420
    max_description_chars: int = 32


@dataclass(frozen=True)
class SummaryGeometry:
    """Financial summary block; x positions are relative to the block's left edge."""

    x: float = 330
    width: float = 210
    row_height: float = 16
    total_height: float = 22
    label_x: float = 10
    value_x: float = 140
    total_value_x: float = 130
    text_offset: float = 4
    total_text_offset: float = 6
    bottom_gap: float = 15


@dataclass(frozen=True)
class PaymentGeometry:
    width: float = 490
    height: float = 55
    padding: float = 10
    title_offset: float = 15
    details_offset: float = 29
    detail_step: float = 11
    max_detail_chars: int = 70
    bottom_gap: float = 10


@dataclass(frozen=True)
class FooterGeometry:
    """Footer, placed in absolute page coordinates."""

    band_height: float = 50
    rule_inset: float = 40
    rule_thickness: float = 2
    text_x: float = 50
    first_line_y: float = 32
    second_line_y: float = 20
    page_label_x: float = 510


@dataclass(frozen=True)
class PageGeometry:
    """Single source of every position and size used by the layout stages."""

    width: float = 595
    height: float = 842
    margin_x: float = 50
    section_spacing: float = 10
    header: HeaderGeometry = field(default_factory=HeaderGeometry)
    card: CardGeometry = field(default_factory=CardGeometry)
    billing: BillingGeometry = field(default_factory=BillingGeometry)
    table: TableGeometry = field(default_factory=TableGeometry)
    summary: SummaryGeometry = field(default_factory=SummaryGeometry)
    payment: PaymentGeometry = field(default_factory=PaymentGeometry)
    footer: FooterGeometry = field(default_factory=FooterGeometry)

    @property
    def content_right(self) -> float:
        return self.width - self.margin_x

    @property
    def content_width(self) -> float:
        return self.content_right - self.margin_x


@dataclass(frozen=True)
class Palette:
    primary: RGB = (0.05, 0.25, 0.55)
    secondary: RGB = (0.1, 0.35, 0.7)
    accent: RGB = (0.95, 0.55, 0.05)
    dark_text: RGB = (0.15, 0.15, 0.15)
    text: RGB = (0.35, 0.35, 0.35)
    light_text: RGB = (0.65, 0.65, 0.65)
    border: RGB = (0.92, 0.92, 0.92)
    light_bg: RGB = (0.97, 0.98, 0.99)
    white: RGB = (1.0, 1.0, 1.0)
    success: RGB = (0.18, 0.75, 0.45)
    warning: RGB = (0.95, 0.6, 0.1)
    error: RGB = (0.92, 0.22, 0.2)


@dataclass(frozen=True)
class FontSizes:
    h1: float = 24
    h2: float = 18
    h3: float = 14
    h4: float = 12
    body: float = 10
    small: float = 9
    tiny: float = 7


# Status -> palette role. Anything missing renders with DEFAULT_STATUS_ROLE.
STATUS_COLOR_ROLES: dict[str, str] = {
    "DRAFT": "warning",
    "UNPAID": "error",
    "PAID": "success",
    "PARTIALLY_PAID": "accent",
    "CANCELLED": "text",
}
DEFAULT_STATUS_ROLE = "warning"


def status_color(status: str | None, palette: Palette) -> RGB:
    """Card color for a status; unknown or missing statuses get the default role."""
    role = STATUS_COLOR_ROLES.get(status or "", DEFAULT_STATUS_ROLE)
    color: RGB = getattr(palette, role)
    return color


@dataclass(frozen=True)
class LayoutContext:
    """Static inputs shared by every stage of one renderer."""

    geometry: PageGeometry = field(default_factory=PageGeometry)
    palette: Palette = field(default_factory=Palette)
    fonts: FontSizes = field(default_factory=FontSizes)
    currencies: CurrencyRegistry = DEFAULT_REGISTRY
