import smtplib
from dataclasses import dataclass
from datetime import datetime
from email.message import EmailMessage
from typing import Protocol

from sendgrid import SendGridAPIClient
from sendgrid.helpers.mail import Mail
from python_http_client.exceptions import HTTPError

from pmc_site.config import EmailSettings
from pmc_site.email.templates import EmailTemplate
from pmc_site.models.contact import ContactModel
from pmc_site.utils.utils import local_timestamp

DEFAULT_SUBJECT = "No Subject"

# host, port, implicit tls
WELL_KNOWN_SERVICES: dict[str, tuple[str, int, bool]] = {
    "gmail": ("smtp.gmail.com", 465, True),
    "outlook": ("smtp-mail.outlook.com", 587, False),
    "hotmail": ("smtp-mail.outlook.com", 587, False),
    "office365": ("smtp.office365.com", 587, False),
    "yahoo": ("smtp.mail.yahoo.com", 465, True),
    "zoho": ("smtp.zoho.com", 465, True),
}


class MailDeliveryError(Exception):
    """Raised when the mail provider refuses a message"""

    def __init__(self, message, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


@dataclass(frozen=True)
class OutgoingMail:
    sender_email: str
    recipient_email: str
    subject: str
    html: str


class MailTransport(Protocol):
    def send(self, message: OutgoingMail) -> None:
        ...


class SMTPTransport:
    """Sends mail through an authenticated SMTP session"""

    def __init__(self, host: str, port: int, username: str, password: str, use_ssl: bool = False):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_ssl = use_ssl

    def _connect(self) -> smtplib.SMTP:
        if self.use_ssl:
            return smtplib.SMTP_SSL(self.host, self.port)
        return smtplib.SMTP(self.host, self.port)

    def send(self, message: OutgoingMail) -> None:
        mail = EmailMessage()
        mail["From"] = message.sender_email
        mail["To"] = message.recipient_email
        mail["Subject"] = message.subject
        mail.set_content(message.html, subtype="html")

        with self._connect() as smtp:
            if not self.use_ssl:
                smtp.starttls()
            smtp.login(self.username, self.password)
            smtp.send_message(mail)


class SendGridTransport:
    """Sends mail through the SendGrid web API"""

    def __init__(self, api_key: str):
        self.server = SendGridAPIClient(api_key)

    def send(self, message: OutgoingMail) -> None:
        mail = Mail(
            from_email=message.sender_email,
            to_emails=message.recipient_email,
            subject=message.subject,
            html_content=message.html)
        try:
            response = self.server.send(mail)
        except HTTPError as e:
            raise MailDeliveryError("SendGrid refused the message", status_code=e.status_code) from e
        if response.status_code not in [200, 201, 202]:
            raise MailDeliveryError("SendGrid refused the message", status_code=response.status_code)


def create_transport(settings: EmailSettings) -> MailTransport:
    """
    **create_transport**
        picks SendGrid or SMTP from EMAIL_SERVICE, SMTP_SERVER / SMTP_PORT override the service defaults
    :param settings:
    :return:
    """
    service = settings.EMAIL_SERVICE.casefold()
    if service == "sendgrid":
        return SendGridTransport(api_key=settings.EMAIL_PASSWORD)

    host, port, use_ssl = WELL_KNOWN_SERVICES.get(service, (service, 587, False))
    if settings.SMTP_SERVER:
        host = settings.SMTP_SERVER
    if settings.SMTP_PORT:
        port = settings.SMTP_PORT
        use_ssl = port == 465
    return SMTPTransport(host=host, port=port, username=settings.EMAIL_USER,
                         password=settings.EMAIL_PASSWORD, use_ssl=use_ssl)


class Emailer:
    """
        Emailing Class, composes contact notifications and hands them to a mail transport
    """

    def __init__(self, sender_email: str, recipient_email: str, transport: MailTransport,
                 templates: type[EmailTemplate] = EmailTemplate):
        self.sender_email = sender_email
        self.recipient_email = recipient_email
        self.transport = transport
        self.templates = templates

    @classmethod
    def from_settings(cls, settings: EmailSettings) -> "Emailer | None":
        """returns None when mail credentials are missing"""
        if not settings.is_configured:
            return None
        return cls(sender_email=settings.EMAIL_USER, recipient_email=settings.recipient,
                   transport=create_transport(settings))

    @staticmethod
    def create_message(sender_email: str, recipient_email: str, subject: str, html: str) -> OutgoingMail:
        return OutgoingMail(sender_email=sender_email, recipient_email=recipient_email, subject=subject, html=html)

    def send_email(self, message: OutgoingMail) -> None:
        self.transport.send(message)

    def send_contact_notification(self, contact: ContactModel, submitted_on: datetime | None = None) -> OutgoingMail:
        """Send the new contact submission notification."""
        # header values may not carry line breaks, the body keeps the raw subject
        subject = f"New Contact Form Submission: {' '.join(contact.subject.split()) or DEFAULT_SUBJECT}"
        html = self.templates.contact_notification(
            name=contact.name, email=contact.email, subject=contact.subject, message=contact.message,
            submitted_on=local_timestamp(submitted_on or contact.submitted_at))

        message = self.create_message(sender_email=self.sender_email, recipient_email=self.recipient_email,
                                      subject=subject, html=html)
        self.send_email(message)
        return message
