"""PDF document renderer for invoices and receipts.

Sequences the layout stages on a single A4 page and encodes the result with
reportlab. Rendering is a pure transform of the record: every call builds its
own canvas and buffer, and the canvas runs in invariant mode so identical
records produce byte-identical PDFs.

Based on reportlab's canvas API:
https://docs.reportlab.com/reportlab/userguide/ch2_graphics/
"""

import io
import logging
from dataclasses import dataclass

from reportlab.pdfgen.canvas import Canvas

from invoicing.documents.currency import DEFAULT_REGISTRY, CurrencyRegistry
from invoicing.documents.geometry import FontSizes, LayoutContext, PageGeometry, Palette
from invoicing.documents.primitives import format_currency
from invoicing.documents.schema import (
    BankDetails,
    CompanyProfile,
    DocumentType,
    InvoiceRecord,
)
from invoicing.documents.stages import (
    draw_billing_block,
    draw_document_card,
    draw_financial_summary,
    draw_footer,
    draw_header,
    draw_line_items,
    draw_payment_instructions,
)
from invoicing.documents.surface import DrawingSurface, PdfSurface
from invoicing.shared.config import Settings
from invoicing.shared.errors import DocumentGenerationError

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"


@dataclass(frozen=True)
class LayoutResult:
    """Amounts and final cursor produced by one layout pass."""

    subtotal: float
    vat_amount: float
    grand_total: float
    row_count: int
    cursor: float


def document_label(document_type: DocumentType | None) -> str:
    """Title-case document name, e.g. "Invoice" or "Receipt"."""
    return str(document_type or DocumentType.INVOICE).title()


def document_filename(document_type: DocumentType | None, invoice_number: str) -> str:
    """Attachment filename, e.g. "Receipt_INV-001.pdf"."""
    return f"{document_label(document_type)}_{invoice_number}.pdf"


class DocumentRenderer:
    """Lays out and encodes single-page billing documents.

    Company, bank and currency tables are fixed at construction time and are
    never re-read during a render.
    """

    def __init__(
        self,
        company: CompanyProfile,
        bank: BankDetails,
        currencies: CurrencyRegistry = DEFAULT_REGISTRY,
        geometry: PageGeometry | None = None,
        palette: Palette | None = None,
        fonts: FontSizes | None = None,
        font_name: str = "Helvetica",
    ) -> None:
        """Initialize renderer.

        Args:
            company: Issuing company identity
            bank: Bank transfer details
            currencies: Currency registry used for amount formatting
            geometry: Page geometry (defaults to A4 layout)
            palette: Colors (defaults to brand palette)
            fonts: Font sizes
            font_name: Font used for all text
        """
        self.company = company
        self.bank = bank
        self.font_name = font_name
        self.context = LayoutContext(
            geometry=geometry or PageGeometry(),
            palette=palette or Palette(),
            fonts=fonts or FontSizes(),
            currencies=currencies,
        )

    @property
    def currencies(self) -> CurrencyRegistry:
        return self.context.currencies

    def layout(self, record: InvoiceRecord, surface: DrawingSurface) -> LayoutResult:
        """Draw every stage of the document onto surface.

        Args:
            record: Invoice data to lay out
            surface: Surface to draw on

        Returns:
            LayoutResult with the computed amounts
        """
        ctx = self.context
        spacing = ctx.geometry.section_spacing

        cursor = draw_header(surface, ctx, self.company)
        cursor = draw_document_card(surface, ctx, record, cursor - spacing)
        cursor = draw_billing_block(surface, ctx, record.bill_to, cursor - spacing)
        table = draw_line_items(
            surface, ctx, record.services, record.currency_code, cursor - spacing
        )
        summary = draw_financial_summary(
            surface,
            ctx,
            table.subtotal,
            record.vat_rate,
            record.currency_code,
            table.cursor - spacing,
        )
        cursor = draw_payment_instructions(surface, ctx, self.bank, summary.cursor - spacing)
        draw_footer(surface, ctx, self.company)

        return LayoutResult(
            subtotal=table.subtotal,
            vat_amount=summary.vat_amount,
            grand_total=summary.grand_total,
            row_count=table.row_count,
            cursor=cursor,
        )

    def generate_document(self, record: InvoiceRecord) -> bytes:
        """Render record as PDF bytes.

        Args:
            record: Invoice data to render

        Returns:
            Complete PDF document

        Raises:
            DocumentGenerationError: If layout or encoding fails
        """
        label = document_label(record.document_type)
        logger.info(f"Generating {label.lower()} PDF for {record.invoice_number}")

        geometry = self.context.geometry
        buffer = io.BytesIO()
        try:
            canvas = Canvas(
                buffer,
                pagesize=(geometry.width, geometry.height),
                invariant=1,
            )
            canvas.setTitle(f"{label} {record.invoice_number}")
            canvas.setAuthor(self.company.name)
            canvas.setCreator(self.company.name)
            result = self.layout(record, PdfSurface(canvas, self.font_name))
            canvas.showPage()
            canvas.save()
        except Exception as e:
            logger.exception(f"PDF generation failed for {record.invoice_number}")
            raise DocumentGenerationError(
                f"Failed to generate {label.lower()} {record.invoice_number}: {e}"
            ) from e

        currency = record.currency_code
        logger.info(
            f"Generated {label.lower()} {record.invoice_number}: "
            f"subtotal {format_currency(result.subtotal, currency, self.currencies)}, "
            f"total due {format_currency(result.grand_total, currency, self.currencies)}"
        )
        return buffer.getvalue()


def create_renderer(settings: Settings) -> DocumentRenderer:
    """Create a renderer from application settings.

    The configured default currency becomes the fallback for unknown codes.

    Args:
        settings: Application settings with company and bank details

    Returns:
        Configured DocumentRenderer

    Raises:
        ValueError: If the default currency is not supported
    """
    currencies = CurrencyRegistry(default_code=settings.default_currency)
    return DocumentRenderer(company=settings.company, bank=settings.bank, currencies=currencies)
