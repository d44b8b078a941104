"""
Test /api/contact endpoints and email rendering
"""
import smtplib

import pytest
from fastapi.testclient import TestClient

from config import settings
from services import mail_service


@pytest.fixture
def email_configured(monkeypatch):
    monkeypatch.setattr(settings, "EMAIL_HOST", "smtp.example.com")
    monkeypatch.setattr(settings, "EMAIL_USER", "hub@example.com")
    monkeypatch.setattr(settings, "EMAIL_PASS", "secret")


@pytest.fixture
def outbox(monkeypatch, email_configured):
    sent = []

    def fake_send(to, subject, html_body, reply_to=None):
        sent.append({"to": to, "subject": subject, "html": html_body, "reply_to": reply_to})

    monkeypatch.setattr(mail_service, "send_email", fake_send)
    return sent


CONTACT = {"name": "Sam", "email": "Sam@Example.com", "message": "I would like a <b>trial</b> session."}


def test_contact_unavailable_without_email_settings(client: TestClient):
    response = client.post("/api/contact/", json=CONTACT)
    assert response.status_code == 503
    assert "currently unavailable" in response.json()["message"]


def test_contact_sends_notice_and_confirmation(client: TestClient, outbox):
    response = client.post("/api/contact/", json=CONTACT)
    assert response.status_code == 200
    assert response.json()["success"] is True

    notice, confirmation = outbox
    assert notice["to"] == "hub@example.com"
    assert notice["subject"] == "FitGenius Hub - Contact Form Submission"
    assert notice["reply_to"] == "sam@example.com"
    assert "&lt;b&gt;trial&lt;/b&gt;" in notice["html"]
    assert "<b>trial</b>" not in notice["html"]
    assert confirmation["to"] == "sam@example.com"


def test_contact_delivery_failure(client: TestClient, monkeypatch, email_configured):
    def broken(*args, **kwargs):
        raise smtplib.SMTPException("relay refused")

    monkeypatch.setattr(mail_service, "send_email", broken)
    response = client.post("/api/contact/", json=CONTACT)
    assert response.status_code == 500
    assert response.json()["message"] == "Error sending message. Please try again later."


def test_confirmation_failure_does_not_fail_request(client: TestClient, monkeypatch, email_configured):
    calls = []

    def flaky(to, subject, html_body, reply_to=None):
        calls.append(to)
        if to != "hub@example.com":
            raise smtplib.SMTPException("mailbox full")

    monkeypatch.setattr(mail_service, "send_email", flaky)
    assert client.post("/api/contact/", json=CONTACT).status_code == 200
    assert calls == ["hub@example.com", "sam@example.com"]


def test_contact_validation(client: TestClient, outbox):
    assert client.post("/api/contact/", json={**CONTACT, "phone": "0123"}).status_code == 400
    assert client.post("/api/contact/", json={**CONTACT, "message": "short"}).status_code == 400
    assert client.post("/api/contact/", json={**CONTACT, "email": "nope"}).status_code == 400
    assert client.post("/api/contact/", json={**CONTACT, "phone": "+15551234567"}).status_code == 200


def test_membership_inquiry(client: TestClient, outbox):
    response = client.post(
        "/api/contact/membership",
        json={"name": "Sam", "email": "sam@example.com", "phone": "+15551234567", "message": "Line one\nLine two"},
    )
    assert response.status_code == 200
    notice, confirmation = outbox
    assert notice["subject"] == "FitGenius Hub - New Membership Inquiry"
    assert "Line one<br>Line two" in notice["html"]
    assert confirmation["subject"] == "Thank you for your membership inquiry - FitGenius Hub"


def test_membership_inquiry_requires_phone(client: TestClient, outbox):
    response = client.post("/api/contact/membership", json={"name": "Sam", "email": "sam@example.com"})
    assert response.status_code == 400


def test_membership_unavailable_without_email_settings(client: TestClient):
    response = client.post(
        "/api/contact/membership",
        json={"name": "Sam", "email": "sam@example.com", "phone": "+15551234567"},
    )
    assert response.status_code == 503
    assert response.json()["message"].startswith("Membership inquiry is currently unavailable")


class _RecordingSMTP:
    instances = []

    def __init__(self, host, port, timeout=None):
        self.host, self.port, self.timeout = host, port, timeout
        self.calls = []
        self.messages = []
        _RecordingSMTP.instances.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.calls.append("quit")
        return False

    def starttls(self):
        self.calls.append("starttls")

    def login(self, user, password):
        self.calls.append(("login", user, password))

    def send_message(self, msg):
        self.calls.append("send")
        self.messages.append(msg)


def test_send_email_over_smtp(monkeypatch, email_configured):
    _RecordingSMTP.instances = []
    monkeypatch.setattr(mail_service.smtplib, "SMTP", _RecordingSMTP)

    mail_service.send_contact_notice("Sam", "sam@example.com", "Hello <there>", "Contact Form Submission")

    (smtp,) = _RecordingSMTP.instances
    assert smtp.host == "smtp.example.com"
    assert smtp.port == settings.EMAIL_PORT
    assert smtp.calls == ["starttls", ("login", "hub@example.com", "secret"), "send", "quit"]

    (msg,) = smtp.messages
    assert msg["From"] == "hub@example.com"
    assert msg["To"] == "hub@example.com"
    assert msg["Reply-To"] == "sam@example.com"
    assert msg["Subject"] == "FitGenius Hub - Contact Form Submission"
    assert msg.is_multipart()
    html_part = msg.get_body(preferencelist=("html",))
    assert html_part.get_content_type() == "text/html"
    assert "Hello &lt;there&gt;" in html_part.get_content()
    assert "HTML-capable" in msg.get_body(preferencelist=("plain",)).get_content()


def test_send_email_requires_settings(monkeypatch):
    _RecordingSMTP.instances = []
    monkeypatch.setattr(mail_service.smtplib, "SMTP", _RecordingSMTP)
    with pytest.raises(mail_service.EmailNotConfigured):
        mail_service.send_email("sam@example.com", "Hi", "<p>Hi</p>")
    assert _RecordingSMTP.instances == []
