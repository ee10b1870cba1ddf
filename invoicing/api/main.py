"""FastAPI application for invoice and receipt delivery.

Production-ready API with:
- Health and readiness checks for Kubernetes
- API key protection for document and email endpoints
- PDF invoice/receipt generation
- HTML email delivery with PDF attachments
- Prometheus metrics for monitoring

Based on FastAPI best practices:
https://fastapi.tiangolo.com/
"""

import logging
import secrets
import time
from datetime import date

from fastapi import FastAPI, HTTPException, Request, Response, Security, status
from fastapi.responses import JSONResponse
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer

from invoicing.api import metrics
from invoicing.api.schemas import (
    AdmissionEmailData,
    AdmissionEmailRequest,
    AdmissionEmailResponse,
    CurrenciesResponse,
    CurrencyResponse,
    GeneratePdfRequest,
    HealthResponse,
    InvoiceEmailData,
    InvoiceEmailRequest,
    InvoiceEmailResponse,
    ReadinessResponse,
    StatusUpdateData,
    StatusUpdateRequest,
    StatusUpdateResponse,
    currency_error,
    split_addresses,
)
from invoicing.documents.primitives import format_currency, format_long_date
from invoicing.documents.renderer import (
    PDF_CONTENT_TYPE,
    create_renderer,
    document_filename,
    document_label,
)
from invoicing.documents.schema import InvoiceRecord, InvoiceStatus
from invoicing.mail.service import EmailAttachment, EmailResult, EmailService, OutgoingEmail
from invoicing.mail.templates import (
    AdmissionEmailContext,
    InvoiceEmailContext,
    render_admission_email,
    render_invoice_email,
)
from invoicing.shared.config import get_settings
from invoicing.shared.errors import EmailDeliveryError, InvoiceServiceError

logger = logging.getLogger(__name__)

settings = get_settings()
app = FastAPI(
    title="Invoice Service",
    description="Invoice and payment receipt PDF generation with email delivery",
    version=settings.service_version,
)

renderer = create_renderer(settings)
email_service = EmailService(settings)

if not settings.admin_api_key:
    logger.warning("APP_ADMIN_API_KEY is not set; protected endpoints will reject all requests")

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)
bearer_scheme = HTTPBearer(auto_error=False)


@app.middleware("http")
async def metrics_middleware(request: Request, call_next):  # type: ignore[no-untyped-def]
    """Middleware to collect request metrics.

    Tracks:
    - Request count by method, endpoint, and status
    - Request duration by method and endpoint
    """
    # Skip metrics for /metrics endpoint itself
    if request.url.path == "/metrics":
        return await call_next(request)

    start_time = time.time()
    response = await call_next(request)
    duration = time.time() - start_time

    metrics.http_requests_total.labels(
        method=request.method,
        endpoint=request.url.path,
        status=response.status_code,
    ).inc()

    metrics.http_request_duration_seconds.labels(
        method=request.method,
        endpoint=request.url.path,
    ).observe(duration)

    return response


@app.exception_handler(InvoiceServiceError)
async def service_error_handler(request: Request, exc: InvoiceServiceError) -> JSONResponse:
    """Map document and email failures to 500 responses."""
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc)},
    )


def require_admin_key(
    api_key: str | None = Security(api_key_header),
    bearer: HTTPAuthorizationCredentials | None = Security(bearer_scheme),
) -> None:
    """Require the admin API key via X-API-Key or a bearer token.

    Raises:
        HTTPException: 401 if no key is provided, 403 if the key is wrong
    """
    provided = api_key or (bearer.credentials if bearer else None)
    if not provided:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="API key required. Include X-API-Key header.",
        )

    expected = settings.admin_api_key
    if not expected or not secrets.compare_digest(provided.encode(), expected.encode()):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid API key")


def _timestamp_ms() -> int:
    return int(time.time() * 1000)


def _reject(errors: list[str]) -> None:
    if errors:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "Validation failed", "details": errors},
        )


def _check_currency(code: str) -> None:
    error = currency_error(code, renderer.currencies)
    if error:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error)


def _render(record: InvoiceRecord) -> bytes:
    """Render a record, recording generation metrics."""
    document_type = str(record.document_type)
    start_time = time.time()
    try:
        pdf_bytes = renderer.generate_document(record)
    except InvoiceServiceError:
        metrics.documents_generated_total.labels(
            document_type=document_type, status="failed"
        ).inc()
        raise

    metrics.document_generation_duration_seconds.observe(time.time() - start_time)
    metrics.document_size_bytes.observe(len(pdf_bytes))
    metrics.documents_generated_total.labels(document_type=document_type, status="success").inc()
    return pdf_bytes


def _deliver(email: OutgoingEmail, template: str) -> EmailResult:
    """Send an email, raising EmailDeliveryError when it was not accepted."""
    result = email_service.send(email)
    outcome = "success" if result.success else "failed"
    metrics.emails_sent_total.labels(template=template, status=outcome).inc()
    if not result.success:
        raise EmailDeliveryError(result.error or "Email delivery failed")
    return result


def _document_email(
    record: InvoiceRecord,
    pdf_bytes: bytes,
    *,
    to: str,
    subject: str,
    recipient_name: str,
    course_name: str,
    amount: str,
    logo_url: str | None,
    cc: list[str] | None = None,
    bcc: list[str] | None = None,
) -> OutgoingEmail:
    company = settings.company
    html = render_invoice_email(
        InvoiceEmailContext(
            recipient_name=recipient_name,
            course_name=course_name,
            invoice_number=record.invoice_number,
            total_amount=amount,
            currency=record.currency_code,
            issue_date=format_long_date(record.invoice_date),
            status=str(record.status),
            logo_url=logo_url or settings.logo_url,
            company_name=company.name,
            company_tagline=company.tagline,
            billing_email=company.email,
            registration_number=company.registration_number,
        )
    )
    return OutgoingEmail(
        to=to,
        subject=subject,
        html=html,
        cc=cc or [],
        bcc=bcc or [],
        attachments=[
            EmailAttachment(
                filename=document_filename(record.document_type, record.invoice_number),
                content=pdf_bytes,
                content_type=PDF_CONTENT_TYPE,
            )
        ],
    )


@app.get("/health", response_model=HealthResponse, tags=["Health"])
def health_check() -> HealthResponse:
    """Health check endpoint for liveness probe.

    Returns:
        Health status information
    """
    return HealthResponse(
        status="healthy", version=settings.service_version, service=settings.service_name
    )


@app.get("/ready", response_model=ReadinessResponse, tags=["Health"])
def readiness_check() -> ReadinessResponse:
    """Readiness check endpoint for Kubernetes readiness probe.

    Returns:
        Readiness status and whether email delivery is configured
    """
    return ReadinessResponse(ready=True, email=email_service.is_available())


@app.get("/metrics", tags=["Monitoring"])
def get_metrics() -> Response:
    """Prometheus metrics endpoint.

    Returns:
        Prometheus metrics in text format
    """
    metrics_data, content_type = metrics.get_metrics()
    return Response(content=metrics_data, media_type=content_type)


@app.get("/api/currencies", response_model=CurrenciesResponse, tags=["Reference"])
def list_currencies() -> CurrenciesResponse:
    """List supported currencies.

    Returns:
        Currency codes with symbol, name and display locale
    """
    return CurrenciesResponse(
        success=True,
        currencies=[
            CurrencyResponse(code=c.code, symbol=c.symbol, name=c.name, locale=c.locale)
            for c in renderer.currencies.list_currencies()
        ],
    )


@app.post("/api/pdf/generate", tags=["Documents"], dependencies=[Security(require_admin_key)])
def generate_pdf(body: GeneratePdfRequest) -> Response:
    """Generate an invoice or receipt PDF without sending it.

    A `PAID` status produces a receipt. A missing `billTo` renders "N/A"
    placeholders.

    Returns:
        PDF document as an attachment

    Raises:
        HTTPException: 400 if services are missing or the currency is unsupported
    """
    if not body.services:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Services array is required"
        )

    record = body.to_record(settings, date.today(), _timestamp_ms())
    _check_currency(record.currency_code)

    pdf_bytes = _render(record)
    filename = document_filename(record.document_type, record.invoice_number)
    return Response(
        content=pdf_bytes,
        media_type=PDF_CONTENT_TYPE,
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )


@app.post(
    "/api/email/invoice",
    response_model=InvoiceEmailResponse,
    tags=["Email"],
    dependencies=[Security(require_admin_key)],
)
def send_invoice_email(body: InvoiceEmailRequest) -> InvoiceEmailResponse:
    """Generate an invoice (or receipt when `status` is PAID) and email it as a PDF.

    ## Usage Example

    ```bash
    curl -X POST "http://localhost:3000/api/email/invoice" \\
      -H "X-API-Key: $APP_ADMIN_API_KEY" -H "Content-Type: application/json" \\
      -d '{"to": "ada@example.com", "recipient_name": "Ada", "course_name": "SAP FICO",
           "currency": "USD", "vatRate": 7.5,
           "services": [{"description": "Consulting", "quantity": 2, "unitPrice": 100}],
           "billTo": {"companyName": "Acme Ltd", "city": "Lagos", "country": "Nigeria"}}'
    ```

    ## Error Handling

    - Returns 400 if required fields are missing or the currency is unsupported
    - Returns 500 if PDF generation or email delivery fails

    Returns:
        Delivery details including the SMTP message id and formatted amount
    """
    _reject(body.validation_errors())
    record = body.to_record(settings, date.today(), _timestamp_ms())
    _check_currency(record.currency_code)

    pdf_bytes = _render(record)

    total = record.grand_total if body.total_amount is None else body.total_amount
    amount = format_currency(total, record.currency_code, renderer.currencies)
    label = document_label(record.document_type)
    email = _document_email(
        record,
        pdf_bytes,
        to=str(body.to),
        subject=f"{label} {record.invoice_number} - {body.course_name}",
        recipient_name=str(body.recipient_name),
        course_name=str(body.course_name),
        amount=amount,
        logo_url=body.logo_url,
        cc=split_addresses(body.cc),
        bcc=split_addresses(body.bcc),
    )
    result = _deliver(email, template=label.lower())
    logger.info(f"{label} email with PDF sent: {result.message_id}")

    return InvoiceEmailResponse(
        success=True,
        message=f"{label} email sent successfully",
        data=InvoiceEmailData(
            message_id=result.message_id,
            recipient=str(body.to),
            invoice_number=record.invoice_number,
            document_type=label,
            status=str(record.status),
            currency=record.currency_code,
            amount=amount,
            pdf_generated=True,
        ),
    )


@app.post(
    "/api/invoice/update-status",
    response_model=StatusUpdateResponse,
    tags=["Email"],
    dependencies=[Security(require_admin_key)],
)
def update_invoice_status(body: StatusUpdateRequest) -> StatusUpdateResponse:
    """Record an invoice status change; a change to PAID emails a payment receipt.

    Returns:
        Status transition details, with the message id when a receipt was sent
    """
    _reject(body.validation_errors())
    invoice_number = str(body.invoice_number)
    new_status = str(body.new_status)

    if not body.is_payment:
        logger.info(f"Invoice {invoice_number} status: {body.old_status} -> {new_status}")
        return StatusUpdateResponse(
            success=True,
            message="Status updated",
            data=StatusUpdateData(
                invoice_number=invoice_number,
                old_status=body.old_status,
                new_status=new_status,
            ),
        )

    record = body.to_receipt_record(settings, date.today(), _timestamp_ms())
    _check_currency(record.currency_code)
    pdf_bytes = _render(record)

    course_name = body.course_name or ""
    subject = f"Payment Receipt {invoice_number}"
    if course_name:
        subject = f"{subject} - {course_name}"
    recipient_name = body.recipient_name or record.bill_to.contact_person
    email = _document_email(
        record,
        pdf_bytes,
        to=str(body.to),
        subject=subject,
        recipient_name=recipient_name or record.bill_to.display_name,
        course_name=course_name,
        amount=format_currency(record.grand_total, record.currency_code, renderer.currencies),
        logo_url=None,
    )
    result = _deliver(email, template="receipt")
    logger.info(f"Payment receipt sent for {invoice_number}: {result.message_id}")

    return StatusUpdateResponse(
        success=True,
        message="Payment receipt sent successfully",
        data=StatusUpdateData(
            invoice_number=invoice_number,
            old_status=body.old_status,
            new_status=InvoiceStatus.PAID,
            message_id=result.message_id,
            payment_date=record.invoice_date,
        ),
    )


@app.post(
    "/api/email/admission",
    response_model=AdmissionEmailResponse,
    tags=["Email"],
    dependencies=[Security(require_admin_key)],
)
def send_admission_email(body: AdmissionEmailRequest) -> AdmissionEmailResponse:
    """Send an admission confirmation email.

    Returns:
        Delivery details including the admission id used
    """
    _reject(body.validation_errors())
    admission_id = body.admission_id or f"ADM-{_timestamp_ms()}"
    company = settings.company

    html = render_admission_email(
        AdmissionEmailContext(
            recipient_name=str(body.recipient_name),
            course_name=str(body.course_name),
            start_date=body.start_date or format_long_date(date.today()),
            duration=body.duration or "To be confirmed",
            admission_id=admission_id,
            logo_url=body.logo_url or settings.logo_url,
            signature_url=body.signature_url,
            country=body.country or settings.default_country,
            company_registration=body.company_registration or company.registration_number,
            company_name=company.name,
        )
    )
    email = OutgoingEmail(
        to=str(body.to),
        subject=f"Welcome to {body.course_name} - Your Admission Confirmation",
        html=html,
        sender_name=settings.admissions_from_name,
        cc=split_addresses(body.cc),
        bcc=split_addresses(body.bcc),
    )
    result = _deliver(email, template="admission")
    logger.info(f"Admission email sent: {result.message_id}")

    return AdmissionEmailResponse(
        success=True,
        message="Admission email sent successfully",
        data=AdmissionEmailData(
            message_id=result.message_id,
            recipient=str(body.to),
            admission_id=admission_id,
            course_name=str(body.course_name),
        ),
    )
