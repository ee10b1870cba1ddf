"""SMTP email delivery service.

Sends HTML emails with optional attachments over SMTP with:
- STARTTLS and login when configured
- Retry logic with exponential backoff for transient connection errors
- Type-safe results using Pydantic

Based on the Python email package and smtplib:
https://docs.python.org/3/library/email.examples.html
"""

import logging
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr, make_msgid

from pydantic import BaseModel, Field
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from invoicing.shared.config import Settings

logger = logging.getLogger(__name__)

# Errors worth another attempt; authentication and recipient errors are not.
TRANSIENT_SMTP_ERRORS: tuple[type[Exception], ...] = (
    smtplib.SMTPServerDisconnected,
    smtplib.SMTPConnectError,
    ConnectionError,
    TimeoutError,
)


class EmailAttachment(BaseModel):
    """File attached to an outgoing email."""

    filename: str
    content: bytes
    content_type: str = "application/pdf"


class OutgoingEmail(BaseModel):
    """Email to be delivered.

    Attributes:
        to: Primary recipient address
        subject: Subject line
        html: HTML body
        sender_name: Display name for the From header (defaults to billing sender)
        cc: Carbon-copy recipients
        bcc: Blind carbon-copy recipients (never written to headers)
        attachments: Files to attach
    """

    to: str
    subject: str
    html: str
    sender_name: str | None = None
    cc: list[str] = Field(default_factory=list)
    bcc: list[str] = Field(default_factory=list)
    attachments: list[EmailAttachment] = Field(default_factory=list)


class EmailResult(BaseModel):
    """Result of email delivery.

    Attributes:
        success: Whether the message was accepted by the SMTP server
        message_id: Message-ID header of the sent message
        error: Error message if delivery failed
    """

    success: bool
    message_id: str | None = None
    error: str | None = None


class EmailService:
    """SMTP email delivery service."""

    def __init__(self, settings: Settings) -> None:
        """Initialize email service.

        Args:
            settings: Application settings with SMTP configuration
        """
        self.settings = settings

    def is_available(self) -> bool:
        """Check if email delivery is enabled and a server is configured.

        Returns:
            True if email is enabled and an SMTP host is set
        """
        return self.settings.email_enabled and bool(self.settings.smtp_host)

    def build_message(self, email: OutgoingEmail) -> EmailMessage:
        """Build a MIME message with an HTML body and attachments.

        Args:
            email: Email to build

        Returns:
            Message ready to send
        """
        sender_name = email.sender_name or self.settings.email_from_name
        message = EmailMessage()
        message["From"] = formataddr((sender_name, self.settings.email_from_address))
        message["To"] = email.to
        if email.cc:
            message["Cc"] = ", ".join(email.cc)
        message["Subject"] = email.subject
        message["Message-ID"] = make_msgid(domain=self._sender_domain())
        message.set_content("This message requires an HTML-capable email client.")
        message.add_alternative(email.html, subtype="html")

        for attachment in email.attachments:
            maintype, _, subtype = attachment.content_type.partition("/")
            message.add_attachment(
                attachment.content,
                maintype=maintype,
                subtype=subtype or "octet-stream",
                filename=attachment.filename,
            )

        return message

    def send(self, email: OutgoingEmail) -> EmailResult:
        """Send an email.

        Args:
            email: Email to deliver

        Returns:
            EmailResult with the Message-ID or error information
        """
        if not self.is_available():
            return EmailResult(
                success=False,
                error="Email delivery is disabled or no SMTP host is configured",
            )

        message = self.build_message(email)
        recipients = [email.to, *email.cc, *email.bcc]

        try:
            self._send_with_retry(message, recipients)
        except (smtplib.SMTPException, OSError) as e:
            logger.exception(f"Failed to send email '{email.subject}' to {email.to}")
            return EmailResult(success=False, error=f"Email delivery failed: {str(e)}")

        message_id = message["Message-ID"]
        logger.info(f"Email sent to {email.to}: {message_id}")
        return EmailResult(success=True, message_id=message_id)

    def verify_connection(self) -> bool:
        """Check if the SMTP server accepts a connection and login.

        Returns:
            True if the server responded to NOOP
        """
        if not self.is_available():
            return False

        try:
            smtp = self._connect()
            try:
                smtp.noop()
            finally:
                smtp.close()
        except (smtplib.SMTPException, OSError) as e:
            logger.warning(f"SMTP connection check failed: {e}")
            return False

        return True

    @retry(
        retry=retry_if_exception_type(TRANSIENT_SMTP_ERRORS),
        wait=wait_exponential_jitter(initial=1, max=30),
        stop=stop_after_attempt(3),
        reraise=True,
    )
    def _send_with_retry(self, message: EmailMessage, recipients: list[str]) -> None:
        """Deliver message with retry logic for transient connection errors.

        Retries up to 3 times with exponential backoff and jitter.

        Args:
            message: Message to deliver
            recipients: Envelope recipients (includes Bcc)

        Raises:
            smtplib.SMTPException: After all retry attempts are exhausted
        """
        smtp = self._connect()
        try:
            smtp.send_message(message, to_addrs=recipients)
        finally:
            smtp.close()

    def _connect(self) -> smtplib.SMTP:
        """Open an SMTP connection, upgrading to TLS and logging in as configured.

        Returns:
            Connected SMTP client
        """
        smtp = smtplib.SMTP(
            self.settings.smtp_host,
            self.settings.smtp_port,
            timeout=self.settings.smtp_timeout_seconds,
        )
        try:
            if self.settings.smtp_use_tls:
                smtp.starttls(context=ssl.create_default_context())
            if self.settings.smtp_username:
                smtp.login(self.settings.smtp_username, self.settings.smtp_password)
        except (smtplib.SMTPException, OSError):
            smtp.close()
            raise
        return smtp

    def _sender_domain(self) -> str | None:
        _, _, domain = self.settings.email_from_address.partition("@")
        return domain or None
