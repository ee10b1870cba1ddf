"""Unit tests for HTML email templates."""

from dataclasses import replace

import pytest

from invoicing.mail.templates import (
    AdmissionEmailContext,
    InvoiceEmailContext,
    invoice_email_title,
    render_admission_email,
    render_invoice_email,
)


@pytest.fixture
def invoice_context() -> InvoiceEmailContext:
    """Create invoice email values."""
    return InvoiceEmailContext(
        recipient_name="Ada Obi",
        course_name="SAP FICO Bootcamp",
        invoice_number="INV-001",
        total_amount="$215.00",
        currency="USD",
        issue_date="January 5, 2025",
        status="UNPAID",
        logo_url="https://infrasap.com/assets/logo.jpeg",
        company_name="INFRASAP ACADEMY",
        company_tagline="Enterprise Consulting & Professional Development",
        billing_email="billing@infrasap.com",
        registration_number="CRN-2024-001234",
    )


@pytest.fixture
def admission_context() -> AdmissionEmailContext:
    """Create admission email values."""
    return AdmissionEmailContext(
        recipient_name="Ada Obi",
        course_name="SAP FICO Bootcamp",
        start_date="March 1, 2025",
        duration="12 weeks",
        admission_id="ADM-20250105-ABC123",
        logo_url="https://infrasap.com/assets/logo.jpeg",
        country="Nigeria",
        company_registration="CRN-2024-001234",
        company_name="INFRASAP ACADEMY",
    )


@pytest.mark.parametrize(
    ("status", "expected"),
    [("PAID", "Payment Receipt"), ("UNPAID", "Invoice"), ("DRAFT", "Invoice"), ("", "Invoice")],
)
def test_invoice_email_title(status: str, expected: str) -> None:
    """Test that only paid invoices are titled as receipts."""
    assert invoice_email_title(status) == expected


class TestInvoiceEmail:
    """Test the invoice and receipt email body."""

    def test_unpaid_invoice_body(self, invoice_context: InvoiceEmailContext) -> None:
        """Should ask for payment and show invoice details."""
        html = render_invoice_email(invoice_context)

        assert "<title>Your Invoice - INFRASAP ACADEMY</title>" in html
        assert "is ready for review" in html
        assert "Invoice Number:</strong> INV-001" in html
        assert "$215.00 USD" in html
        assert "Issued: January 5, 2025" in html
        assert "Thank you for your payment" not in html

    def test_paid_receipt_body(self, invoice_context: InvoiceEmailContext) -> None:
        """Should thank the recipient and present a receipt."""
        paid = replace(invoice_context, status="PAID")

        html = render_invoice_email(paid)

        assert "<title>Your Payment Receipt - INFRASAP ACADEMY</title>" in html
        assert "Thank you for your payment" in html
        assert "official payment receipt" in html
        assert "Payment Receipt Number:</strong> INV-001" in html

    def test_values_are_escaped(self, invoice_context: InvoiceEmailContext) -> None:
        """Should escape HTML in request-supplied values."""
        hostile = replace(
            invoice_context,
            recipient_name="<script>alert(1)</script>",
            course_name="R&D <b>101</b>",
        )

        html = render_invoice_email(hostile)

        assert "<script>" not in html
        assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html
        assert "R&amp;D &lt;b&gt;101&lt;/b&gt;" in html

    def test_tagline_ampersand_escaped(self, invoice_context: InvoiceEmailContext) -> None:
        """Should escape the company tagline."""
        html = render_invoice_email(invoice_context)

        assert "Enterprise Consulting &amp; Professional Development" in html


class TestAdmissionEmail:
    """Test the admission confirmation email body."""

    def test_enrollment_details(self, admission_context: AdmissionEmailContext) -> None:
        """Should include course, start date, duration and admission ID."""
        html = render_admission_email(admission_context)

        assert "Course:</strong> SAP FICO Bootcamp" in html
        assert "Start Date:</strong> March 1, 2025" in html
        assert "Duration:</strong> 12 weeks" in html
        assert "Admission ID: ADM-20250105-ABC123" in html
        assert "mailto:admissions@infrasap.com" in html

    def test_default_sender_name(self, admission_context: AdmissionEmailContext) -> None:
        """Should sign off with the default admissions agent."""
        html = render_admission_email(admission_context)

        assert "My name is <strong>Samantha</strong>" in html

    def test_signature_omitted_without_url(self, admission_context: AdmissionEmailContext) -> None:
        """Should not include a signature image unless configured."""
        html = render_admission_email(admission_context)

        assert 'alt="Signature"' not in html

    def test_signature_included_with_url(self, admission_context: AdmissionEmailContext) -> None:
        """Should include the signature image when a URL is given."""
        signed = replace(admission_context, signature_url="https://cdn.example.com/sig.png")

        html = render_admission_email(signed)

        assert 'src="https://cdn.example.com/sig.png" alt="Signature"' in html

    def test_values_are_escaped(self, admission_context: AdmissionEmailContext) -> None:
        """Should escape HTML in request-supplied values."""
        hostile = replace(admission_context, course_name="<img src=x onerror=alert(1)>")

        html = render_admission_email(hostile)

        assert "<img src=x" not in html
        assert "&lt;img src=x onerror=alert(1)&gt;" in html
