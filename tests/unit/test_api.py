"""Unit tests for the invoice service API.

Tests cover:
- Health, readiness and currency endpoints
- API key authentication
- PDF generation
- Invoice, receipt and admission emails (SMTP mocked)
- Prometheus metrics endpoint
"""

from collections.abc import Generator
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from fastapi import status
from fastapi.testclient import TestClient

from invoicing.api import main
from invoicing.api.main import app
from invoicing.mail.service import EmailResult, OutgoingEmail
from invoicing.shared.errors import DocumentGenerationError

API_KEY = "test-admin-key"
AUTH = {"X-API-Key": API_KEY}
MESSAGE_ID = "<123.456@infrasap.com>"


@pytest.fixture
def client() -> Generator[TestClient, None, None]:
    """Create test client with a configured admin key."""
    with patch.object(main.settings, "admin_api_key", API_KEY):
        yield TestClient(app)


@pytest.fixture
def mock_send() -> Generator[MagicMock, None, None]:
    """Mock SMTP delivery with a successful result."""
    with patch("invoicing.api.main.email_service.send") as mock:
        mock.return_value = EmailResult(success=True, message_id=MESSAGE_ID)
        yield mock


@pytest.fixture
def invoice_body() -> dict[str, Any]:
    """Create a valid invoice email request body."""
    return {
        "to": "ada@example.com",
        "recipient_name": "Ada Obi",
        "course_name": "SAP FICO",
        "invoice_number": "INV-2025-001",
        "currency": "USD",
        "vatRate": 7.5,
        "services": [{"description": "Consulting", "quantity": 2, "unitPrice": 100}],
        "billTo": {"companyName": "Acme Ltd", "city": "Lagos", "country": "Nigeria"},
    }


def sent_email(mock_send: MagicMock) -> OutgoingEmail:
    """Return the email handed to the delivery service."""
    email: OutgoingEmail = mock_send.call_args.args[0]
    return email


def test_health_check(client: TestClient) -> None:
    """Test health check endpoint."""
    response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["status"] == "healthy"
    assert data["service"] == "invoice-service"
    assert "version" in data


def test_readiness_check(client: TestClient) -> None:
    """Test readiness check endpoint."""
    with patch("invoicing.api.main.email_service.is_available", return_value=False):
        response = client.get("/ready")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"ready": True, "email": False}


def test_list_currencies(client: TestClient) -> None:
    """Test that supported currencies are public and complete."""
    response = client.get("/api/currencies")

    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["success"] is True
    codes = [c["code"] for c in data["currencies"]]
    assert codes == ["NGN", "USD", "EUR", "GBP", "ZAR", "KES", "GHS"]
    usd = next(c for c in data["currencies"] if c["code"] == "USD")
    assert usd == {"code": "USD", "symbol": "$", "name": "US Dollar", "locale": "en-US"}


class TestAuthentication:
    """Test API key protection."""

    def test_missing_key_rejected(self, client: TestClient) -> None:
        """Should return 401 without a key."""
        response = client.post("/api/pdf/generate", json={"services": []})

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert "X-API-Key" in response.json()["detail"]

    def test_wrong_key_rejected(self, client: TestClient) -> None:
        """Should return 403 for a wrong key."""
        response = client.post(
            "/api/pdf/generate", json={"services": []}, headers={"X-API-Key": "nope"}
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["detail"] == "Invalid API key"

    def test_bearer_token_accepted(self, client: TestClient) -> None:
        """Should accept the key as a bearer token."""
        response = client.post(
            "/api/pdf/generate",
            json={"services": [{"description": "Audit", "quantity": 1, "unitPrice": 50}]},
            headers={"Authorization": f"Bearer {API_KEY}"},
        )

        assert response.status_code == status.HTTP_200_OK

    def test_unconfigured_key_rejects_everything(self) -> None:
        """Should reject all keys when no admin key is configured."""
        with patch.object(main.settings, "admin_api_key", ""):
            response = TestClient(app).post(
                "/api/pdf/generate", json={"services": []}, headers={"X-API-Key": "anything"}
            )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_public_endpoints_need_no_key(self, client: TestClient) -> None:
        """Should serve health and currencies without a key."""
        assert client.get("/health").status_code == status.HTTP_200_OK
        assert client.get("/api/currencies").status_code == status.HTTP_200_OK


class TestGeneratePdf:
    """Test the PDF generation endpoint."""

    def test_generate_invoice(self, client: TestClient) -> None:
        """Should return a PDF attachment named after the invoice."""
        body = {
            "invoice_number": "INV-9",
            "currency": "USD",
            "services": [{"description": "Consulting", "quantity": 2, "unitPrice": 100}],
            "billTo": {"companyName": "Acme Ltd", "city": "Lagos"},
        }

        response = client.post("/api/pdf/generate", json=body, headers=AUTH)

        assert response.status_code == status.HTTP_200_OK
        assert response.headers["content-type"] == "application/pdf"
        assert response.headers["content-disposition"] == "attachment; filename=Invoice_INV-9.pdf"
        assert response.content.startswith(b"%PDF")

    def test_paid_status_generates_receipt(self, client: TestClient) -> None:
        """Should name the file as a receipt when status is PAID."""
        body = {
            "invoice_number": "INV-9",
            "status": "PAID",
            "services": [{"description": "Consulting", "quantity": 1, "unitPrice": 100}],
        }

        response = client.post("/api/pdf/generate", json=body, headers=AUTH)

        assert response.status_code == status.HTTP_200_OK
        assert "Receipt_INV-9.pdf" in response.headers["content-disposition"]

    def test_generated_number_when_missing(self, client: TestClient) -> None:
        """Should generate an INV- number when none is given."""
        body = {"services": [{"description": "Consulting", "quantity": 1, "unitPrice": 100}]}

        response = client.post("/api/pdf/generate", json=body, headers=AUTH)

        assert "filename=Invoice_INV-" in response.headers["content-disposition"]

    def test_missing_services(self, client: TestClient) -> None:
        """Should return 400 when services are missing."""
        response = client.post("/api/pdf/generate", json={}, headers=AUTH)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == "Services array is required"

    def test_invalid_currency(self, client: TestClient) -> None:
        """Should return 400 listing supported currencies."""
        body = {
            "currency": "JPY",
            "services": [{"description": "Consulting", "quantity": 1, "unitPrice": 100}],
        }

        response = client.post("/api/pdf/generate", json=body, headers=AUTH)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"].startswith("Invalid currency code. Supported: NGN")

    def test_non_numeric_quantity_rejected(self, client: TestClient) -> None:
        """Should reject non-numeric quantities before rendering."""
        body = {"services": [{"description": "Consulting", "quantity": "two", "unitPrice": 100}]}

        response = client.post("/api/pdf/generate", json=body, headers=AUTH)

        assert response.status_code == 422

    def test_negative_vat_rate_rejected(self, client: TestClient) -> None:
        """Should reject a negative VAT rate."""
        body = {
            "vatRate": -1,
            "services": [{"description": "Consulting", "quantity": 1, "unitPrice": 100}],
        }

        response = client.post("/api/pdf/generate", json=body, headers=AUTH)

        assert response.status_code == 422

    def test_generation_failure(self, client: TestClient) -> None:
        """Should return 500 when the renderer fails."""
        body = {"services": [{"description": "Consulting", "quantity": 1, "unitPrice": 100}]}

        with patch(
            "invoicing.api.main.renderer.generate_document",
            side_effect=DocumentGenerationError("layout failed"),
        ):
            response = client.post("/api/pdf/generate", json=body, headers=AUTH)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert response.json()["detail"] == "layout failed"


class TestInvoiceEmail:
    """Test the invoice email endpoint."""

    def test_send_invoice(
        self, client: TestClient, mock_send: MagicMock, invoice_body: dict[str, Any]
    ) -> None:
        """Should email the invoice PDF and report the total."""
        response = client.post("/api/email/invoice", json=invoice_body, headers=AUTH)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["success"] is True
        assert data["message"] == "Invoice email sent successfully"
        assert data["data"]["messageId"] == MESSAGE_ID
        assert data["data"]["invoiceNumber"] == "INV-2025-001"
        assert data["data"]["documentType"] == "Invoice"
        assert data["data"]["amount"] == "$215.00"
        assert data["data"]["pdfGenerated"] is True

        email = sent_email(mock_send)
        assert email.to == "ada@example.com"
        assert email.subject == "Invoice INV-2025-001 - SAP FICO"
        (attachment,) = email.attachments
        assert attachment.filename == "Invoice_INV-2025-001.pdf"
        assert attachment.content.startswith(b"%PDF")
        assert "Ada Obi" in email.html

    def test_paid_sends_receipt(
        self, client: TestClient, mock_send: MagicMock, invoice_body: dict[str, Any]
    ) -> None:
        """Should send a receipt when the invoice is paid."""
        response = client.post(
            "/api/email/invoice", json={**invoice_body, "status": "PAID"}, headers=AUTH
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["data"]["documentType"] == "Receipt"
        email = sent_email(mock_send)
        assert email.subject == "Receipt INV-2025-001 - SAP FICO"
        assert email.attachments[0].filename == "Receipt_INV-2025-001.pdf"
        assert "Payment Receipt" in email.html

    def test_total_amount_override(
        self, client: TestClient, mock_send: MagicMock, invoice_body: dict[str, Any]
    ) -> None:
        """Should show a caller-supplied total in the email."""
        response = client.post(
            "/api/email/invoice", json={**invoice_body, "total_amount": 500}, headers=AUTH
        )

        assert response.json()["data"]["amount"] == "$500.00"

    def test_cc_and_bcc_split(
        self, client: TestClient, mock_send: MagicMock, invoice_body: dict[str, Any]
    ) -> None:
        """Should accept comma-separated copy recipients."""
        body = {**invoice_body, "cc": "a@example.com, b@example.com", "bcc": ["c@example.com"]}

        client.post("/api/email/invoice", json=body, headers=AUTH)

        email = sent_email(mock_send)
        assert email.cc == ["a@example.com", "b@example.com"]
        assert email.bcc == ["c@example.com"]

    def test_validation_errors(self, client: TestClient, mock_send: MagicMock) -> None:
        """Should list every missing field."""
        response = client.post("/api/email/invoice", json={"to": "ada@example.com"}, headers=AUTH)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        detail = response.json()["detail"]
        assert detail["error"] == "Validation failed"
        assert "recipient_name is required" in detail["details"]
        assert "services array is required" in detail["details"]
        assert "billTo.companyName is required" in detail["details"]
        assert "Recipient email (to) is required" not in detail["details"]
        mock_send.assert_not_called()

    def test_delivery_failure(self, client: TestClient, invoice_body: dict[str, Any]) -> None:
        """Should return 500 when the email is not delivered."""
        with patch("invoicing.api.main.email_service.send") as mock:
            mock.return_value = EmailResult(success=False, error="Email delivery failed: refused")
            response = client.post("/api/email/invoice", json=invoice_body, headers=AUTH)

        assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
        assert "refused" in response.json()["detail"]


class TestUpdateStatus:
    """Test the invoice status endpoint."""

    def test_non_payment_status(self, client: TestClient, mock_send: MagicMock) -> None:
        """Should acknowledge the change without sending email."""
        body = {
            "to": "ada@example.com",
            "invoice_number": "INV-1",
            "old_status": "DRAFT",
            "new_status": "UNPAID",
        }

        response = client.post("/api/invoice/update-status", json=body, headers=AUTH)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["message"] == "Status updated"
        assert data["data"]["oldStatus"] == "DRAFT"
        assert data["data"]["newStatus"] == "UNPAID"
        mock_send.assert_not_called()

    def test_payment_sends_receipt(self, client: TestClient, mock_send: MagicMock) -> None:
        """Should email a payment receipt when the invoice is paid."""
        body = {
            "to": "ada@example.com",
            "recipient_name": "Ada Obi",
            "course_name": "SAP FICO",
            "invoice_number": "INV-1",
            "old_status": "UNPAID",
            "new_status": "PAID",
            "payment_date": "2025-03-01",
            "transaction_reference": "TXN-77",
            "currency": "GBP",
            "services": [{"description": "Consulting", "quantity": 1, "unitPrice": 100}],
            "billTo": {"companyName": "Acme Ltd", "city": "London"},
        }

        response = client.post("/api/invoice/update-status", json=body, headers=AUTH)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["message"] == "Payment receipt sent successfully"
        assert data["data"]["newStatus"] == "PAID"
        assert data["data"]["messageId"] == MESSAGE_ID
        assert data["data"]["paymentDate"] == "2025-03-01"

        email = sent_email(mock_send)
        assert email.subject == "Payment Receipt INV-1 - SAP FICO"
        assert email.attachments[0].filename == "Receipt_INV-1.pdf"
        assert "£107.50" in email.html

    def test_missing_required_fields(self, client: TestClient) -> None:
        """Should require recipient, invoice number and new status."""
        response = client.post(
            "/api/invoice/update-status", json={"invoice_number": "INV-1"}, headers=AUTH
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"]["details"] == [
            "to, invoice_number, and new_status are required"
        ]

    def test_payment_without_services(self, client: TestClient, mock_send: MagicMock) -> None:
        """Should require line items to build a receipt."""
        body = {"to": "ada@example.com", "invoice_number": "INV-1", "new_status": "PAID"}

        response = client.post("/api/invoice/update-status", json=body, headers=AUTH)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        mock_send.assert_not_called()


class TestAdmissionEmail:
    """Test the admission email endpoint."""

    def test_send_admission(self, client: TestClient, mock_send: MagicMock) -> None:
        """Should send the admission letter from the admissions sender."""
        body = {
            "to": "ada@example.com",
            "recipient_name": "Ada Obi",
            "course_name": "SAP FICO",
            "start_date": "March 1, 2025",
            "duration": "12 weeks",
            "admission_id": "ADM-42",
        }

        response = client.post("/api/email/admission", json=body, headers=AUTH)

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["admissionId"] == "ADM-42"
        assert data["courseName"] == "SAP FICO"
        assert data["messageId"] == MESSAGE_ID

        email = sent_email(mock_send)
        assert email.subject == "Welcome to SAP FICO - Your Admission Confirmation"
        assert email.sender_name == main.settings.admissions_from_name
        assert email.attachments == []
        assert "Admission ID: ADM-42" in email.html

    def test_generated_admission_id(self, client: TestClient, mock_send: MagicMock) -> None:
        """Should use the same generated id in the email and the response."""
        body = {"to": "ada@example.com", "recipient_name": "Ada", "course_name": "SAP MM"}

        response = client.post("/api/email/admission", json=body, headers=AUTH)

        admission_id = response.json()["data"]["admissionId"]
        assert admission_id.startswith("ADM-")
        assert f"Admission ID: {admission_id}" in sent_email(mock_send).html

    def test_missing_fields(self, client: TestClient, mock_send: MagicMock) -> None:
        """Should return 400 listing missing fields."""
        response = client.post("/api/email/admission", json={}, headers=AUTH)

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert len(response.json()["detail"]["details"]) == 3
        mock_send.assert_not_called()


def test_metrics_endpoint(client: TestClient) -> None:
    """Test Prometheus metrics endpoint."""
    client.get("/health")

    response = client.get("/metrics")

    assert response.status_code == status.HTTP_200_OK
    assert "text/plain" in response.headers["content-type"]
    assert "http_requests_total" in response.text
    assert "documents_generated_total" in response.text
