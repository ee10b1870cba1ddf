"""Layout stages for a single-page invoice or receipt.

Each stage paints one block and returns the cursor (the top edge of the
remaining free area) for the next stage. The footer is the exception: it is
anchored to the page bottom and returns nothing.
"""

from collections.abc import Sequence
from dataclasses import dataclass

from invoicing.documents.geometry import RGB, LayoutContext, Palette, status_color
from invoicing.documents.primitives import (
    draw_line,
    fill_rect,
    format_currency,
    format_date,
    format_plain_number,
    truncate_text,
)
from invoicing.documents.schema import (
    BankDetails,
    BillTo,
    CompanyProfile,
    DocumentType,
    InvoiceRecord,
    ServiceItem,
    calculate_vat,
)
from invoicing.documents.surface import DrawingSurface

TABLE_HEADINGS = ("SERVICE DESCRIPTION", "QTY", "UNIT PRICE", "AMOUNT")
DEFAULT_UNIT = "Unit"
MISSING_REFERENCE = "N/A"
PAGE_LABEL = "Page 1 of 1"


@dataclass(frozen=True)
class TableResult:
    """Output of the line-item table stage."""

    cursor: float
    subtotal: float
    row_count: int


@dataclass(frozen=True)
class SummaryResult:
    """Output of the financial summary stage."""

    grand_total: float
    vat_amount: float
    cursor: float


def draw_header(surface: DrawingSurface, ctx: LayoutContext, company: CompanyProfile) -> float:
    """Company identity bar; geometry never depends on invoice content."""
    g, p, f = ctx.geometry, ctx.palette, ctx.fonts
    h = g.header
    top = g.height
    x = g.margin_x

    fill_rect(surface, 0, top - h.bar_height, g.width, h.bar_height, fill=p.primary)
    surface.draw_text(company.name, x, top - h.name_offset, f.h1, p.primary)
    surface.draw_text(company.tagline, x, top - h.tagline_offset, f.h4, p.accent)

    details = (
        f"Reg: {company.registration_number}",
        f"Tax: {company.tax_id}",
        f"Web: {company.website}",
    )
    column_width = g.content_width / len(details)
    for index, detail in enumerate(details):
        surface.draw_text(
            detail, x + index * column_width, top - h.details_offset, f.small, p.light_text
        )

    surface.draw_text(
        f"Tel: {company.phone} | Email: {company.email}",
        x,
        top - h.contact_offset,
        f.small,
        p.light_text,
    )
    surface.draw_text(
        f"{company.street} | {company.city}, {company.state} | {company.country}",
        x,
        top - h.address_offset,
        f.small,
        p.light_text,
    )

    rule_y = top - h.rule_offset
    draw_line(surface, x, rule_y, g.content_right, rule_y, p.accent, h.rule_thickness)
    return rule_y - h.bottom_gap


def draw_document_card(
    surface: DrawingSurface, ctx: LayoutContext, record: InvoiceRecord, start_y: float
) -> float:
    """Document badge, status badge and the key dates column."""
    g, p, f = ctx.geometry, ctx.palette, ctx.fonts
    c = g.card
    bottom = start_y - c.height
    left_x = g.margin_x
    right_x = left_x + c.width + c.spacing

    fill_rect(surface, left_x, bottom, c.width, c.height, fill=p.primary)
    badge = str(record.document_type or DocumentType.INVOICE)
    surface.draw_text(badge, left_x + c.padding, start_y - c.title_offset, f.h3, p.white)
    surface.draw_text(
        record.invoice_number, left_x + c.padding, start_y - c.value_offset, f.body, p.accent
    )

    status = str(record.status or "")
    fill_rect(surface, right_x, bottom, c.width, c.height, fill=status_color(status, p))
    surface.draw_text("STATUS", right_x + c.padding, start_y - c.title_offset, f.h3, p.white)
    surface.draw_text(status, right_x + c.padding, start_y - c.value_offset, f.body, p.white)

    rows = (
        ("Invoice Date:", format_date(record.invoice_date)),
        ("Due Date:", format_date(record.due_date)),
        ("Reference:", record.reference_number or MISSING_REFERENCE),
    )
    row_y = start_y - c.dates_first_offset
    for label, value in rows:
        surface.draw_text(label, c.dates_label_x, row_y, f.small, p.dark_text)
        surface.draw_text(value, c.dates_value_x, row_y, f.small, p.primary)
        row_y -= c.dates_row_step

    return bottom - c.bottom_gap


def billing_detail_lines(bill_to: BillTo) -> list[str]:
    """Optional recipient lines in display order, skipping empty ones."""
    candidates = (
        bill_to.contact_person,
        bill_to.department,
        bill_to.location,
        bill_to.email,
        bill_to.phone,
    )
    return [line for line in candidates if line]


def draw_billing_block(
    surface: DrawingSurface, ctx: LayoutContext, bill_to: BillTo, start_y: float
) -> float:
    """Fixed-height recipient panel."""
    g, p, f = ctx.geometry, ctx.palette, ctx.fonts
    b = g.billing
    bottom = start_y - b.height
    text_x = g.margin_x + b.padding

    fill_rect(surface, g.margin_x, bottom, b.width, b.height, fill=p.light_bg, border=p.border)
    surface.draw_text("BILL TO", text_x, start_y - b.title_offset, f.h4, p.primary)
    surface.draw_text(bill_to.display_name, text_x, start_y - b.name_offset, f.body, p.dark_text)

    line_y = start_y - b.details_offset
    for line in billing_detail_lines(bill_to):
        surface.draw_text(truncate_text(line, b.max_detail_chars), text_x, line_y, f.small, p.text)
        line_y -= b.detail_step

    return bottom - b.bottom_gap


def row_background(index: int, palette: Palette) -> RGB:
    """Even rows are tinted, odd rows stay white."""
    return palette.light_bg if index % 2 == 0 else palette.white


def draw_line_items(
    surface: DrawingSurface,
    ctx: LayoutContext,
    services: Sequence[ServiceItem],
    currency_code: str | None,
    start_y: float,
) -> TableResult:
    """Header row plus one row per item, in input order.

    Returns the cursor below the last row and the subtotal of all line totals.
    """
    g, p, f = ctx.geometry, ctx.palette, ctx.fonts
    t = g.table
    x = g.margin_x
    columns = (t.description_x, t.quantity_x, t.unit_price_x, t.amount_x)

    header_bottom = start_y - t.header_height
    fill_rect(surface, x, header_bottom, t.width, t.header_height, fill=p.primary)
    for heading, column_x in zip(TABLE_HEADINGS, columns, strict=True):
        surface.draw_text(
            heading, x + column_x, header_bottom + t.header_text_offset, f.small, p.white
        )

    def money(amount: float) -> str:
        return format_currency(amount, currency_code, ctx.currencies)

    subtotal = 0.0
    row_top = header_bottom
    for index, item in enumerate(services):
        line_total = item.line_total
        subtotal += line_total

        row_bottom = row_top - t.row_height
        fill_rect(
            surface,
            x,
            row_bottom,
            t.width,
            t.row_height,
            fill=row_background(index, p),
            border=p.border,
        )
        text_y = row_bottom + t.row_text_offset
        description = truncate_text(item.description, t.max_description_chars)
        quantity = f"{format_plain_number(item.quantity)} {item.unit or DEFAULT_UNIT}"
        surface.draw_text(description, x + t.description_x, text_y, f.small, p.dark_text)
        surface.draw_text(quantity, x + t.quantity_x, text_y, f.small, p.text)
        surface.draw_text(money(item.unit_price), x + t.unit_price_x, text_y, f.small, p.text)
        surface.draw_text(money(line_total), x + t.amount_x, text_y, f.small, p.primary)
        row_top = row_bottom

    return TableResult(cursor=row_top, subtotal=subtotal, row_count=len(services))


def draw_financial_summary(
    surface: DrawingSurface,
    ctx: LayoutContext,
    subtotal: float,
    vat_rate: float,
    currency_code: str | None,
    start_y: float,
) -> SummaryResult:
    """Subtotal, VAT and total-due rows in a right-hand column."""
    g, p, f = ctx.geometry, ctx.palette, ctx.fonts
    s = g.summary
    vat_amount = calculate_vat(subtotal, vat_rate)
    grand_total = subtotal + vat_amount

    def money(amount: float) -> str:
        return format_currency(amount, currency_code, ctx.currencies)

    rows = (
        ("Subtotal", money(subtotal)),
        (f"VAT ({format_plain_number(vat_rate)}%)", money(vat_amount)),
    )
    row_top = start_y
    for label, value in rows:
        row_bottom = row_top - s.row_height
        fill_rect(surface, s.x, row_bottom, s.width, s.row_height, fill=p.white, border=p.border)
        text_y = row_bottom + s.text_offset
        surface.draw_text(label, s.x + s.label_x, text_y, f.small, p.text)
        surface.draw_text(value, s.x + s.value_x, text_y, f.small, p.dark_text)
        row_top = row_bottom

    total_bottom = row_top - s.total_height
    fill_rect(surface, s.x, total_bottom, s.width, s.total_height, fill=p.primary)
    text_y = total_bottom + s.total_text_offset
    surface.draw_text("TOTAL DUE", s.x + s.label_x, text_y, f.h4, p.white)
    surface.draw_text(money(grand_total), s.x + s.total_value_x, text_y, f.h4, p.accent)

    return SummaryResult(
        grand_total=grand_total,
        vat_amount=vat_amount,
        cursor=total_bottom - s.bottom_gap,
    )


def draw_payment_instructions(
    surface: DrawingSurface, ctx: LayoutContext, bank: BankDetails, start_y: float
) -> float:
    """Static bank transfer panel."""
    g, p, f = ctx.geometry, ctx.palette, ctx.fonts
    pay = g.payment
    bottom = start_y - pay.height
    text_x = g.margin_x + pay.padding

    fill_rect(surface, g.margin_x, bottom, pay.width, pay.height, fill=p.light_bg, border=p.border)
    surface.draw_text(
        "BANK TRANSFER DETAILS", text_x, start_y - pay.title_offset, f.h4, p.primary
    )

    details = (
        f"Bank: {bank.name} ({bank.bank_code})",
        f"Account Name: {bank.account_name}",
        f"Account Number: {bank.account_number} | SWIFT: {bank.swift_code}",
    )
    line_y = start_y - pay.details_offset
    for detail in details:
        surface.draw_text(
            truncate_text(detail, pay.max_detail_chars), text_x, line_y, f.small, p.text
        )
        line_y -= pay.detail_step

    return bottom - pay.bottom_gap


def draw_footer(surface: DrawingSurface, ctx: LayoutContext, company: CompanyProfile) -> None:
    """Small print anchored to the bottom of the page."""
    g, p, f = ctx.geometry, ctx.palette, ctx.fonts
    ft = g.footer

    fill_rect(surface, 0, 0, g.width, ft.band_height, fill=p.light_bg)
    draw_line(
        surface,
        ft.rule_inset,
        ft.band_height,
        g.width - ft.rule_inset,
        ft.band_height,
        p.primary,
        ft.rule_thickness,
    )
    surface.draw_text(
        f"{company.name} | Registration: {company.registration_number}",
        ft.text_x,
        ft.first_line_y,
        f.tiny,
        p.dark_text,
    )
    surface.draw_text(
        f"{company.email} | {company.phone}", ft.text_x, ft.second_line_y, f.tiny, p.light_text
    )
    surface.draw_text(PAGE_LABEL, ft.page_label_x, ft.first_line_y, f.tiny, p.light_text)
