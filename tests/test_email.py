from __future__ import annotations

from datetime import datetime, timezone

import pytest
from python_http_client.exceptions import HTTPError

from pmc_site.config import EmailSettings
from pmc_site.email import email as email_module
from pmc_site.email.email import (Emailer, MailDeliveryError, OutgoingMail, SendGridTransport, SMTPTransport,
                                  create_transport)
from pmc_site.models import ContactModel


def make_contact(**overrides) -> ContactModel:
    values = dict(name="Jane", email="j@x.com", subject="Hi", message="Hello",
                  submitted_at=datetime(2026, 10, 19, 13, 22, 5, tzinfo=timezone.utc))
    values.update(overrides)
    return ContactModel(**values)


def email_settings(**values) -> EmailSettings:
    defaults = dict(EMAIL_SERVICE="gmail", EMAIL_USER=None, EMAIL_PASSWORD=None, NOTIFICATION_EMAIL=None,
                    SMTP_SERVER=None, SMTP_PORT=None)
    defaults.update(values)
    return EmailSettings(**defaults)


def test_notification_embeds_all_fields(emailer, transport) -> None:
    message = emailer.send_contact_notification(make_contact())

    assert transport.sent == [message]
    assert message.sender_email == "site@pmc.test"
    assert message.recipient_email == "office@pmc.test"
    assert message.subject == "New Contact Form Submission: Hi"
    assert "<h2>New Contact Form Submission</h2>" in message.html
    for text in ("Jane", "j@x.com", "Hi", "Hello", "Submitted on:"):
        assert text in message.html


def test_empty_subject_uses_defaults(emailer) -> None:
    message = emailer.send_contact_notification(make_contact(subject=""))

    assert message.subject == "New Contact Form Submission: No Subject"
    assert "<p><strong>Subject:</strong> N/A</p>" in message.html


def test_field_values_are_html_escaped(emailer) -> None:
    message = emailer.send_contact_notification(make_contact(message="<b>hi</b>"))
    assert "&lt;b&gt;hi&lt;/b&gt;" in message.html


def test_recipient_falls_back_to_sender() -> None:
    emailer = Emailer.from_settings(email_settings(EMAIL_USER="me@pmc.test", EMAIL_PASSWORD="secret"))
    assert emailer.recipient_email == "me@pmc.test"

    emailer = Emailer.from_settings(email_settings(EMAIL_USER="me@pmc.test", EMAIL_PASSWORD="secret",
                                                   NOTIFICATION_EMAIL="office@pmc.test"))
    assert emailer.recipient_email == "office@pmc.test"


@pytest.mark.parametrize("values", [{}, {"EMAIL_USER": "me@pmc.test"}, {"EMAIL_PASSWORD": "secret"}])
def test_missing_credentials_disable_mail(values) -> None:
    assert Emailer.from_settings(email_settings(**values)) is None


def test_well_known_service_transport() -> None:
    transport = create_transport(email_settings(EMAIL_USER="me@gmail.com", EMAIL_PASSWORD="secret"))

    assert isinstance(transport, SMTPTransport)
    assert (transport.host, transport.port, transport.use_ssl) == ("smtp.gmail.com", 465, True)


def test_smtp_server_override() -> None:
    transport = create_transport(email_settings(EMAIL_SERVICE="custom", EMAIL_USER="me", EMAIL_PASSWORD="pw",
                                                SMTP_SERVER="mail.pmc.test", SMTP_PORT=2525))

    assert (transport.host, transport.port, transport.use_ssl) == ("mail.pmc.test", 2525, False)


def test_sendgrid_service_transport() -> None:
    transport = create_transport(email_settings(EMAIL_SERVICE="SendGrid", EMAIL_USER="me@pmc.test",
                                                EMAIL_PASSWORD="SG.key"))
    assert isinstance(transport, SendGridTransport)


class FakeSMTP:
    instances: list["FakeSMTP"] = []

    def __init__(self, host: str, port: int) -> None:
        self.host, self.port = host, port
        self.calls: list[str] = []
        self.messages = []
        FakeSMTP.instances.append(self)

    def __enter__(self) -> "FakeSMTP":
        return self

    def __exit__(self, *exc) -> None:
        self.calls.append("quit")

    def starttls(self) -> None:
        self.calls.append("starttls")

    def login(self, username: str, password: str) -> None:
        self.calls.append(f"login:{username}")

    def send_message(self, message) -> None:
        self.messages.append(message)


def test_smtp_transport_sends_html_message(monkeypatch) -> None:
    FakeSMTP.instances = []
    monkeypatch.setattr(email_module.smtplib, "SMTP", FakeSMTP)
    transport = SMTPTransport(host="mail.pmc.test", port=587, username="me", password="pw")

    transport.send(OutgoingMail("me@pmc.test", "office@pmc.test", "New Contact", "<p>Hello</p>"))

    smtp = FakeSMTP.instances[0]
    assert smtp.calls == ["starttls", "login:me", "quit"]
    sent = smtp.messages[0]
    assert sent["To"] == "office@pmc.test"
    assert sent["Subject"] == "New Contact"
    assert sent.get_content_type() == "text/html"


def test_line_breaks_in_subject_are_folded_for_smtp(monkeypatch) -> None:
    FakeSMTP.instances = []
    monkeypatch.setattr(email_module.smtplib, "SMTP", FakeSMTP)
    emailer = Emailer(sender_email="me@pmc.test", recipient_email="office@pmc.test",
                      transport=SMTPTransport(host="mail.pmc.test", port=587, username="me", password="pw"))

    message = emailer.send_contact_notification(make_contact(subject="Hi\r\nthere"))

    sent = FakeSMTP.instances[0].messages[0]
    assert sent["Subject"] == "New Contact Form Submission: Hi there"
    assert message.subject == "New Contact Form Submission: Hi there"
    assert "Hi\r\nthere" in message.html


class FakeResponse:
    def __init__(self, status_code: int) -> None:
        self.status_code = status_code


class FakeSendGridClient:
    def __init__(self, status_code: int = 202, error: Exception | None = None) -> None:
        self.status_code = status_code
        self.error = error
        self.sent = []

    def send(self, mail):
        self.sent.append(mail)
        if self.error is not None:
            raise self.error
        return FakeResponse(self.status_code)


def sendgrid_transport(server: FakeSendGridClient) -> SendGridTransport:
    transport = SendGridTransport(api_key="SG.key")
    transport.server = server
    return transport


def test_sendgrid_transport_sends_mail_fields() -> None:
    server = FakeSendGridClient(status_code=202)

    sendgrid_transport(server).send(OutgoingMail("me@pmc.test", "office@pmc.test", "New Contact", "<p>Hello</p>"))

    payload = server.sent[0].get()
    assert payload["from"]["email"] == "me@pmc.test"
    assert payload["personalizations"][0]["to"][0]["email"] == "office@pmc.test"
    assert payload["subject"] == "New Contact"
    assert payload["content"][0] == {"type": "text/html", "value": "<p>Hello</p>"}


def test_sendgrid_rejected_status_raises() -> None:
    transport = sendgrid_transport(FakeSendGridClient(status_code=400))

    with pytest.raises(MailDeliveryError) as excinfo:
        transport.send(OutgoingMail("me@pmc.test", "office@pmc.test", "New Contact", "<p>Hello</p>"))

    assert excinfo.value.status_code == 400


def test_sendgrid_http_error_is_wrapped() -> None:
    error = HTTPError(401, "Unauthorized", b'{"errors": []}', {})
    transport = sendgrid_transport(FakeSendGridClient(error=error))

    with pytest.raises(MailDeliveryError) as excinfo:
        transport.send(OutgoingMail("me@pmc.test", "office@pmc.test", "New Contact", "<p>Hello</p>"))

    assert excinfo.value.status_code == 401
    assert excinfo.value.__cause__ is error
