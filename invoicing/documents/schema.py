"""Billing data models consumed by the document layout engine.

Records are frozen pydantic models: a render reads them but never changes
them, and every derived amount is computed on the fly.
"""

from datetime import date
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DocumentType(StrEnum):
    """Kind of business document being issued."""

    INVOICE = "INVOICE"
    RECEIPT = "RECEIPT"


class InvoiceStatus(StrEnum):
    """Known invoice lifecycle states.

    Records accept any status string; values outside this set are rendered
    literally with the fallback status color.
    """

    DRAFT = "DRAFT"
    UNPAID = "UNPAID"
    PAID = "PAID"
    PARTIALLY_PAID = "PARTIALLY_PAID"
    CANCELLED = "CANCELLED"


def resolve_document_type(status: str | None) -> DocumentType:
    """Paid invoices are issued as receipts, everything else as invoices."""
    if status == InvoiceStatus.PAID:
        return DocumentType.RECEIPT
    return DocumentType.INVOICE


def calculate_vat(subtotal: float, vat_rate: float) -> float:
    """VAT amount for a subtotal at a percentage rate."""
    return subtotal * vat_rate / 100


class _CamelModel(BaseModel):
    """Frozen model that accepts both snake_case and camelCase keys."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
    )


class CompanyProfile(_CamelModel):
    """Static identity of the issuing company."""

    name: str = "INFRASAP ACADEMY"
    tagline: str = "Enterprise Consulting & Professional Development"
    registration_number: str = "CRN-2024-001234"
    tax_id: str = "GST-12AB-34CD-5678"
    website: str = "www.infrasap.com"
    email: str = "billing@infrasap.com"
    phone: str = "+234-800-000-0000"
    street: str = "Plot 234, Lekki-Epe Expressway"
    city: str = "Lagos"
    state: str = "Lagos"
    country: str = "Nigeria"
    postal_code: str = "106104"


class BankDetails(_CamelModel):
    """Static bank transfer details printed on every document."""

    name: str = "First Bank of Nigeria"
    account_name: str = "INFRASAP ACADEMY LIMITED"
    account_number: str = "3123456789"
    bank_code: str = "011"
    swift_code: str = "FBNGNGLA"


class BillTo(_CamelModel):
    """Recipient identity.

    Only a display name and city are needed for a meaningful panel; every
    other field is optional and skipped when empty.
    """

    company_name: str | None = None
    name: str | None = None
    contact_person: str | None = None
    department: str | None = None
    street: str | None = None
    city: str | None = None
    state: str | None = None
    country: str | None = None
    postal_code: str | None = None
    email: str | None = None
    phone: str | None = None
    tax_id: str | None = None

    @property
    def display_name(self) -> str:
        return self.company_name or self.name or ""

    @property
    def location(self) -> str:
        """City followed by state, or country when no state is given."""
        region = self.state or self.country
        return ", ".join(part for part in (self.city, region) if part)


class ServiceItem(_CamelModel):
    """One billable line item."""

    description: str
    quantity: float
    unit_price: float
    unit: str | None = None

    @property
    def line_total(self) -> float:
        return self.quantity * self.unit_price


class InvoiceRecord(_CamelModel):
    """Everything needed to lay out one invoice or receipt."""

    document_type: DocumentType | None = None
    invoice_number: str
    reference_number: str | None = None
    invoice_date: date
    due_date: date
    status: str = InvoiceStatus.UNPAID
    currency_code: str = "NGN"
    vat_rate: float = Field(default=7.5, ge=0)
    bill_to: BillTo = Field(default_factory=BillTo)
    services: tuple[ServiceItem, ...] = ()

    @property
    def subtotal(self) -> float:
        return sum((item.line_total for item in self.services), 0.0)

    @property
    def vat_amount(self) -> float:
        return calculate_vat(self.subtotal, self.vat_rate)

    @property
    def grand_total(self) -> float:
        return self.subtotal + self.vat_amount
