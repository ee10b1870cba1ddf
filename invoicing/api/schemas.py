"""Request and response models for the HTTP API.

Request bodies keep the field names existing clients send (a mix of
snake_case and camelCase); responses are serialized in camelCase.
Each request model knows how to validate itself beyond its types and how to
turn itself into an `InvoiceRecord` for the renderer.
"""

from datetime import date, timedelta

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from invoicing.documents.currency import CurrencyRegistry
from invoicing.documents.schema import (
    BillTo,
    DocumentType,
    InvoiceRecord,
    InvoiceStatus,
    ServiceItem,
    resolve_document_type,
)
from invoicing.shared.config import Settings

PLACEHOLDER = "N/A"


def split_addresses(value: str | list[str] | None) -> list[str]:
    """Normalize a comma-separated string or list of addresses to a list."""
    if not value:
        return []
    items = value.split(",") if isinstance(value, str) else value
    return [item.strip() for item in items if item and item.strip()]


def currency_error(code: str, registry: CurrencyRegistry) -> str | None:
    if registry.is_supported(code):
        return None
    return f"Invalid currency code. Supported: {', '.join(registry.codes())}"


class RequestModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)


class ResponseModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)


class GeneratePdfRequest(RequestModel):
    """Body of POST /api/pdf/generate."""

    invoice_number: str | None = None
    services: list[ServiceItem] = Field(default_factory=list)
    bill_to: BillTo | None = Field(default=None, alias="billTo")
    currency: str | None = None
    vat_rate: float | None = Field(default=None, ge=0, alias="vatRate")
    status: str = InvoiceStatus.UNPAID

    def to_record(self, settings: Settings, today: date, stamp: int) -> InvoiceRecord:
        bill_to = self.bill_to or BillTo(
            company_name=PLACEHOLDER, city=PLACEHOLDER, country=PLACEHOLDER
        )
        return InvoiceRecord(
            document_type=resolve_document_type(self.status),
            invoice_number=self.invoice_number or f"INV-{stamp}",
            reference_number=f"REF-{stamp}",
            invoice_date=today,
            due_date=today + timedelta(days=settings.payment_terms_days),
            status=self.status,
            currency_code=self.currency or settings.default_currency,
            vat_rate=settings.default_vat_rate if self.vat_rate is None else self.vat_rate,
            bill_to=bill_to,
            services=tuple(self.services),
        )


class InvoiceEmailRequest(RequestModel):
    """Body of POST /api/email/invoice."""

    to: str | None = None
    recipient_name: str | None = None
    course_name: str | None = None
    services: list[ServiceItem] = Field(default_factory=list)
    bill_to: BillTo | None = Field(default=None, alias="billTo")
    invoice_number: str | None = None
    total_amount: float | None = None
    currency: str | None = None
    vat_rate: float | None = Field(default=None, ge=0, alias="vatRate")
    issue_date: date | None = None
    due_date: date | None = Field(default=None, alias="dueDate")
    status: str = InvoiceStatus.UNPAID
    reference_number: str | None = Field(default=None, alias="referenceNumber")
    logo_url: str | None = None
    country: str | None = None
    cc: str | list[str] | None = None
    bcc: str | list[str] | None = None

    def validation_errors(self) -> list[str]:
        errors = []
        if not self.to:
            errors.append("Recipient email (to) is required")
        if not self.recipient_name:
            errors.append("recipient_name is required")
        if not self.course_name:
            errors.append("course_name is required")
        if not self.services:
            errors.append("services array is required")
        if not self.bill_to or not self.bill_to.company_name:
            errors.append("billTo.companyName is required")
        if not self.bill_to or not self.bill_to.city:
            errors.append("billTo.city is required")
        if not self.bill_to or not self.bill_to.country:
            errors.append("billTo.country is required")
        return errors

    def to_record(self, settings: Settings, today: date, stamp: int) -> InvoiceRecord:
        bill_to = self.bill_to or BillTo()
        invoice_date = self.issue_date or today
        return InvoiceRecord(
            document_type=resolve_document_type(self.status),
            invoice_number=self.invoice_number or f"INV-{stamp}",
            reference_number=self.reference_number or f"REF-{stamp}",
            invoice_date=invoice_date,
            due_date=self.due_date or today + timedelta(days=settings.payment_terms_days),
            status=self.status,
            currency_code=self.currency or settings.default_currency,
            vat_rate=settings.default_vat_rate if self.vat_rate is None else self.vat_rate,
            bill_to=bill_to.model_copy(
                update={
                    "contact_person": bill_to.contact_person or self.recipient_name,
                    "country": bill_to.country or self.country or settings.default_country,
                    "email": bill_to.email or self.to,
                }
            ),
            services=tuple(self.services),
        )


class StatusUpdateRequest(RequestModel):
    """Body of POST /api/invoice/update-status."""

    to: str | None = None
    recipient_name: str | None = None
    course_name: str | None = None
    invoice_number: str | None = None
    old_status: str | None = None
    new_status: str | None = None
    services: list[ServiceItem] = Field(default_factory=list)
    bill_to: BillTo | None = Field(default=None, alias="billTo")
    currency: str | None = None
    vat_rate: float | None = Field(default=None, ge=0, alias="vatRate")
    payment_date: date | None = None
    payment_method: str | None = None
    transaction_reference: str | None = None

    @property
    def is_payment(self) -> bool:
        return self.new_status == InvoiceStatus.PAID

    def validation_errors(self) -> list[str]:
        if not self.to or not self.invoice_number or not self.new_status:
            return ["to, invoice_number, and new_status are required"]
        errors = []
        if self.is_payment:
            if not self.services:
                errors.append("services array is required for a payment receipt")
            if not self.bill_to or not self.bill_to.display_name:
                errors.append("billTo.companyName is required for a payment receipt")
        return errors

    def to_receipt_record(self, settings: Settings, today: date, stamp: int) -> InvoiceRecord:
        return InvoiceRecord(
            document_type=DocumentType.RECEIPT,
            invoice_number=self.invoice_number or f"INV-{stamp}",
            reference_number=self.transaction_reference or f"RCPT-{stamp}",
            invoice_date=self.payment_date or today,
            due_date=today,
            status=InvoiceStatus.PAID,
            currency_code=self.currency or settings.default_currency,
            vat_rate=settings.default_vat_rate if self.vat_rate is None else self.vat_rate,
            bill_to=self.bill_to or BillTo(),
            services=tuple(self.services),
        )


class AdmissionEmailRequest(RequestModel):
    """Body of POST /api/email/admission."""

    to: str | None = None
    recipient_name: str | None = None
    course_name: str | None = None
    start_date: str | None = None
    duration: str | None = None
    admission_id: str | None = None
    logo_url: str | None = None
    signature_url: str | None = None
    country: str | None = None
    company_registration: str | None = None
    cc: str | list[str] | None = None
    bcc: str | list[str] | None = None

    def validation_errors(self) -> list[str]:
        errors = []
        if not self.to:
            errors.append("Recipient email (to) is required")
        if not self.recipient_name:
            errors.append("recipient_name is required")
        if not self.course_name:
            errors.append("course_name is required")
        return errors


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    version: str
    service: str


class ReadinessResponse(BaseModel):
    """Readiness check response."""

    ready: bool
    email: bool


class CurrencyResponse(ResponseModel):
    code: str
    symbol: str
    name: str
    locale: str


class CurrenciesResponse(ResponseModel):
    success: bool
    currencies: list[CurrencyResponse]


class InvoiceEmailData(ResponseModel):
    message_id: str | None
    recipient: str
    invoice_number: str
    document_type: str
    status: str
    currency: str
    amount: str
    pdf_generated: bool


class InvoiceEmailResponse(ResponseModel):
    """Invoice or receipt email response."""

    success: bool
    message: str
    data: InvoiceEmailData


class StatusUpdateData(ResponseModel):
    invoice_number: str
    old_status: str | None = None
    new_status: str
    message_id: str | None = None
    payment_date: date | None = None


class StatusUpdateResponse(ResponseModel):
    """Status update response; carries a message id when a receipt was sent."""

    success: bool
    message: str
    data: StatusUpdateData


class AdmissionEmailData(ResponseModel):
    message_id: str | None
    recipient: str
    admission_id: str
    course_name: str


class AdmissionEmailResponse(ResponseModel):
    """Admission email response."""

    success: bool
    message: str
    data: AdmissionEmailData
