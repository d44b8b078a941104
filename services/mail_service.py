"""
Outbound email for the contact and membership forms (SMTP with STARTTLS)
"""
import html
import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from config import settings

logger = logging.getLogger(__name__)

SIGNATURE = (
    "<hr>\n<p>Best regards,<br>The FitGenius Hub Team</p>\n"
    "<p><em>This is an automated response. Please do not reply to this email.</em></p>"
)


class EmailNotConfigured(RuntimeError):
    pass


def _paragraphs(text: str) -> str:
    return html.escape(text).replace("\n", "<br>")


def send_email(to: str, subject: str, html_body: str, reply_to: Optional[str] = None) -> None:
    """Send one HTML message. Raises EmailNotConfigured or smtplib errors."""
    if not settings.email_enabled:
        raise EmailNotConfigured("Email settings are incomplete")

    msg = EmailMessage()
    msg["From"] = settings.EMAIL_USER
    msg["To"] = to
    msg["Subject"] = subject
    if reply_to:
        msg["Reply-To"] = reply_to
    msg.set_content("This message requires an HTML-capable mail client.")
    msg.add_alternative(html_body, subtype="html")

    with smtplib.SMTP(settings.EMAIL_HOST, settings.EMAIL_PORT, timeout=10) as smtp:
        smtp.starttls()
        smtp.login(settings.EMAIL_USER, settings.EMAIL_PASS)
        smtp.send_message(msg)
    logger.info(f"Email sent to {to}: {subject}")


# ==================== CONTACT FORM ====================


def contact_admin_body(name: str, email: str, message: str, subject: str, phone: Optional[str] = None) -> str:
    phone_line = f"<p><strong>Phone:</strong> {html.escape(phone)}</p>\n" if phone else ""
    return (
        "<h2>New Contact Form Submission</h2>\n"
        f"<p><strong>Name:</strong> {html.escape(name)}</p>\n"
        f"<p><strong>Email:</strong> {html.escape(email)}</p>\n"
        f"{phone_line}"
        f"<p><strong>Subject:</strong> {html.escape(subject)}</p>\n"
        "<p><strong>Message:</strong></p>\n"
        f"<p>{_paragraphs(message)}</p>\n"
        "<hr>\n<p><em>This message was sent from the FitGenius Hub contact form.</em></p>"
    )


def contact_confirmation_body(name: str, message: str) -> str:
    return (
        "<h2>Thank you for contacting us!</h2>\n"
        f"<p>Dear {html.escape(name)},</p>\n"
        "<p>We have received your message and will get back to you as soon as possible.</p>\n"
        "<p><strong>Your message:</strong></p>\n"
        f"<p>{_paragraphs(message)}</p>\n"
        f"{SIGNATURE}"
    )


def send_contact_notice(name: str, email: str, message: str, subject: str, phone: Optional[str] = None) -> None:
    send_email(
        settings.EMAIL_USER,
        f"FitGenius Hub - {subject}",
        contact_admin_body(name, email, message, subject, phone),
        reply_to=email,
    )


def send_contact_confirmation(name: str, email: str, message: str) -> None:
    send_email(email, "Thank you for contacting FitGenius Hub", contact_confirmation_body(name, message))


# ==================== MEMBERSHIP INQUIRY ====================


def membership_admin_body(name: str, email: str, phone: str, message: str = "") -> str:
    extra = (
        f"<p><strong>Additional Message:</strong></p><p>{_paragraphs(message)}</p>\n" if message else ""
    )
    return (
        "<h2>New Membership Inquiry</h2>\n"
        f"<p><strong>Name:</strong> {html.escape(name)}</p>\n"
        f"<p><strong>Email:</strong> {html.escape(email)}</p>\n"
        f"<p><strong>Phone:</strong> {html.escape(phone)}</p>\n"
        f"{extra}"
        "<hr>\n<p><em>This inquiry was submitted through the FitGenius Hub membership form.</em></p>"
    )


def membership_confirmation_body(name: str) -> str:
    return (
        "<h2>Thank you for your interest in FitGenius Hub!</h2>\n"
        f"<p>Dear {html.escape(name)},</p>\n"
        "<p>We have received your membership inquiry and our team will contact you within 24 hours "
        "to discuss our membership options and answer any questions you may have.</p>\n"
        "<p>In the meantime, here's what you can expect:</p>\n"
        "<ul>\n"
        "  <li>Personal consultation call</li>\n"
        "  <li>Membership plan options</li>\n"
        "  <li>Facility tour (if applicable)</li>\n"
        "  <li>Special introductory offers</li>\n"
        "</ul>\n"
        "<p>We look forward to helping you achieve your fitness goals!</p>\n"
        f"{SIGNATURE}"
    )


def send_membership_notice(name: str, email: str, phone: str, message: str = "") -> None:
    send_email(
        settings.EMAIL_USER,
        "FitGenius Hub - New Membership Inquiry",
        membership_admin_body(name, email, phone, message),
        reply_to=email,
    )


def send_membership_confirmation(name: str, email: str) -> None:
    send_email(
        email,
        "Thank you for your membership inquiry - FitGenius Hub",
        membership_confirmation_body(name),
    )
