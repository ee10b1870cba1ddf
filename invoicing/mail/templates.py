"""HTML email bodies for invoices, receipts and admission letters.

Every interpolated value is HTML-escaped; templates never trust request data.
"""

from dataclasses import dataclass
from html import escape

from invoicing.documents.schema import InvoiceStatus


@dataclass(frozen=True)
class InvoiceEmailContext:
    """Values shown in an invoice or receipt email."""

    recipient_name: str
    course_name: str
    invoice_number: str
    total_amount: str
    currency: str
    issue_date: str
    status: str
    logo_url: str
    company_name: str
    company_tagline: str
    billing_email: str
    registration_number: str


@dataclass(frozen=True)
class AdmissionEmailContext:
    """Values shown in an admission confirmation email."""

    recipient_name: str
    course_name: str
    start_date: str
    duration: str
    admission_id: str
    logo_url: str
    country: str
    company_registration: str
    company_name: str
    sender_name: str = "Samantha"
    contact_email: str = "admissions@infrasap.com"
    signature_url: str | None = None


def invoice_email_title(status: str) -> str:
    """Document title used in the email, "Payment Receipt" once paid."""
    return "Payment Receipt" if status == InvoiceStatus.PAID else "Invoice"


def render_invoice_email(ctx: InvoiceEmailContext) -> str:
    """Render the invoice/receipt notification email."""
    title = invoice_email_title(ctx.status)
    paid = ctx.status == InvoiceStatus.PAID
    course = escape(ctx.course_name)
    company = escape(ctx.company_name)

    if paid:
        intro = "Thank you for your payment! Your transaction has been successfully processed."
        closing = (
            "This serves as your official payment receipt. Please retain this for your records."
        )
    else:
        intro = f"Your invoice for <strong>{course}</strong> is ready for review."
        closing = (
            "Payment can be made via bank transfer. Details are provided in the attached invoice."
        )

    return f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Your {title} - {company}</title>
</head>
<body style="margin:0;padding:0;background:#f5f5f7;font-family:-apple-system,BlinkMacSystemFont,'Segoe UI',sans-serif;color:#1c1c1e;">
  <table role="presentation" width="100%" cellspacing="0" cellpadding="0" style="padding:40px 16px;">
    <tr>
      <td align="center">
        <table role="presentation" width="100%" cellspacing="0" cellpadding="0"
          style="max-width:600px;background:#ffffff;border-radius:16px;padding:40px 32px;box-shadow:0 4px 20px rgba(0,0,0,0.08);">
          <tr>
            <td align="center" style="padding-bottom:28px;">
              <img src="{escape(ctx.logo_url)}" width="120" alt="{company}" style="display:block;">
            </td>
          </tr>
          <tr>
            <td style="font-size:16px;line-height:1.6;padding-bottom:24px;">
              <p style="margin:0;">Dear <strong>{escape(ctx.recipient_name)}</strong>,</p>
              <p style="margin:18px 0 0 0;">{intro}</p>
              <p style="margin:18px 0 0 0;">Please find the detailed {title.lower()} attached as a PDF.</p>
            </td>
          </tr>
          <tr>
            <td style="padding-bottom:32px;">
              <table role="presentation" width="100%" cellspacing="0" cellpadding="0"
                style="background:#f2f2f7;border-radius:12px;padding:20px;">
                <tr><td style="padding:6px 0;font-size:15px;"><strong>{title} Number:</strong> {escape(ctx.invoice_number)}</td></tr>
                <tr><td style="padding:6px 0;font-size:15px;"><strong>Service:</strong> {course}</td></tr>
                <tr><td style="padding:6px 0;font-size:15px;"><strong>Amount:</strong> {escape(ctx.total_amount)} {escape(ctx.currency)}</td></tr>
                <tr><td style="padding:6px 0;font-size:13px;color:#666;"><small>Issued: {escape(ctx.issue_date)}</small></td></tr>
              </table>
            </td>
          </tr>
          <tr>
            <td style="font-size:15px;line-height:1.6;padding-bottom:26px;color:#555;">{closing}</td>
          </tr>
          <tr>
            <td style="padding-bottom:30px;">
              <p style="margin:0;font-size:15px;">Best regards,</p>
              <p style="margin-top:16px;font-weight:600;font-size:15px;">{company} Billing Team</p>
              <p style="margin:6px 0 0 0;font-size:14px;color:#888;">{escape(ctx.company_tagline)}</p>
            </td>
          </tr>
          <tr>
            <td align="center" style="font-size:12px;color:#999;line-height:1.5;padding-top:20px;border-top:1px solid #eee;">
              {company} | {escape(ctx.billing_email)}<br>
              <span style="font-size:11px;">{escape(ctx.registration_number)}</span>
            </td>
          </tr>
        </table>
      </td>
    </tr>
  </table>
</body>
</html>
"""


def render_admission_email(ctx: AdmissionEmailContext) -> str:
    """Render the admission confirmation email."""
    course = escape(ctx.course_name)
    company = escape(ctx.company_name)
    sender = escape(ctx.sender_name)
    contact = escape(ctx.contact_email)
    signature = ""
    if ctx.signature_url:
        signature = (
            f'<img src="{escape(ctx.signature_url)}" alt="Signature" width="160" '
            'style="margin-top:10px;">'
        )

    return f"""<!doctype html>
<html lang="en">
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Your Admission - {company}</title>
</head>
<body style="margin:0;padding:0;background:#fafafa;font-family:-apple-system,BlinkMacSystemFont,'Segoe UI',sans-serif;color:#1c1c1e;">
  <table width="100%" cellpadding="0" cellspacing="0" role="presentation" style="padding:40px 0;">
    <tr>
      <td align="center">
        <table width="600" cellpadding="0" cellspacing="0" role="presentation"
          style="max-width:600px;background:#ffffff;border-radius:16px;padding:40px 32px;box-shadow:0 4px 30px rgba(0,0,0,0.05);">
          <tr>
            <td align="center" style="padding-bottom:30px;">
              <img src="{escape(ctx.logo_url)}" width="140" style="display:block;" alt="{company}">
            </td>
          </tr>
          <tr>
            <td style="font-size:16px;line-height:1.55;color:#1c1c1e;padding-bottom:22px;">
              <p style="margin:0;">Dear <strong>{escape(ctx.recipient_name)}</strong>,</p>
              <p style="margin:18px 0 0 0;">
                My name is <strong>{sender}</strong>, your assigned admissions agent at <strong>{company}</strong>.
                It brings me genuine joy to personally inform you that your application for the
                <strong>{course}</strong> has been <strong>successfully approved</strong>.
              </p>
              <p style="margin:18px 0 0 0;">This marks the beginning of an exciting journey. Below are your enrollment details.</p>
            </td>
          </tr>
          <tr>
            <td style="padding:0 0 30px 0;">
              <table width="100%" cellpadding="0" cellspacing="0" role="presentation"
                style="background:#f7f7f7;border-radius:12px;padding:22px 20px;">
                <tr><td style="padding:6px 0;font-size:15px;color:#1c1c1e;"><strong>Course:</strong> {course}</td></tr>
                <tr><td style="padding:6px 0;font-size:15px;color:#1c1c1e;"><strong>Start Date:</strong> {escape(ctx.start_date)}</td></tr>
                <tr><td style="padding:6px 0;font-size:15px;color:#1c1c1e;"><strong>Duration:</strong> {escape(ctx.duration)}</td></tr>
                <tr><td style="padding:6px 0;font-size:13px;color:#555;"><small>Admission ID: {escape(ctx.admission_id)}</small></td></tr>
              </table>
            </td>
          </tr>
          <tr>
            <td style="font-size:15px;line-height:1.6;color:#1c1c1e;padding-bottom:24px;">
              <p style="margin:0;">If you have any questions about fees, timelines, or course structure, I am here to assist you directly.</p>
              <p style="margin:14px 0 0 0;">Welcome aboard!</p>
            </td>
          </tr>
          <tr>
            <td style="padding-bottom:40px;">
              <p style="margin:0;font-size:15px;color:#1c1c1e;">Warm regards,</p>
              <p style="margin:18px 0 0 0;font-size:15px;color:#1c1c1e;font-weight:600;">{sender}<br>
              <span style="font-weight:400;opacity:0.8;">Admissions Agent, {company}</span></p>
              {signature}
            </td>
          </tr>
          <tr>
            <td style="font-size:12px;color:#999;text-align:center;line-height:1.5;padding-top:20px;border-top:1px solid #eee;">
              {company} &bull; {escape(ctx.country)}<br>
              Email: <a href="mailto:{contact}" style="color:#555;text-decoration:none;">{contact}</a><br>
              <span style="font-size:11px;">{escape(ctx.company_registration)}</span>
            </td>
          </tr>
        </table>
      </td>
    </tr>
  </table>
</body>
</html>
"""
