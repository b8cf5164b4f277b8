"""
    **Notification Dispatcher**
        validates a parsed contact form, stores it and emails a notification.

    Storing and emailing are independent best effort steps, a failure in one does not stop
    the other and neither is rolled back or retried.
"""
from dataclasses import dataclass
from datetime import datetime, timezone

from pmc_site.config import Settings
from pmc_site.database.contact import Contacts
from pmc_site.database.database_sessions import ContactStore
from pmc_site.email.email import Emailer
from pmc_site.models.contact import ContactModel
from pmc_site.utils.my_logger import init_logger

REQUIRED_FIELDS = ("name", "email", "message")

dispatch_logger = init_logger('dispatch-logger')


class ValidationFailed(Exception):
    """Raised before any side effect when a required field is missing"""

    def __init__(self, missing: list[str]):
        self.missing = missing
        self.message = f"Missing required fields: {', '.join(missing)}"
        self.status_code = 400
        super().__init__(self.message)


@dataclass
class DispatchOutcome:
    saved: bool = False
    emailed: bool = False
    store_skipped: bool = False
    mail_skipped: bool = False
    inserted_id: object = None

    @property
    def is_partial(self) -> bool:
        return self.saved != self.emailed and not (self.store_skipped or self.mail_skipped)


class DispatchFailed(Exception):
    """Raised when storing or emailing was attempted and failed"""

    def __init__(self, outcome: DispatchOutcome, errors: list[Exception]):
        self.outcome = outcome
        self.errors = errors
        self.message = "; ".join(f"{type(error).__name__}: {error}" for error in errors)
        super().__init__(self.message)


@dataclass
class NotificationDispatcher:
    store: ContactStore | None = None
    emailer: Emailer | None = None

    @classmethod
    def from_settings(cls, settings: Settings, shared_store: bool = True) -> "NotificationDispatcher":
        """the store and the emailer are each left out when their configuration is missing"""
        return cls(store=ContactStore.from_settings(settings.DATABASE_SETTINGS, shared=shared_store),
                   emailer=Emailer.from_settings(settings.EMAIL_SETTINGS))

    @staticmethod
    def validate(form: dict[str, str | None]) -> list[str]:
        """returns the names of required fields that are absent or blank"""
        return [name for name in REQUIRED_FIELDS if not (form.get(name) or "").strip()]

    @staticmethod
    def create_contact(form: dict[str, str | None], submitted_at: datetime) -> ContactModel:
        missing = NotificationDispatcher.validate(form)
        if missing:
            raise ValidationFailed(missing=missing)
        return ContactModel(name=form["name"], email=form["email"], subject=form.get("subject") or "",
                            message=form["message"], submitted_at=submitted_at)

    def save(self, contact: ContactModel, outcome: DispatchOutcome) -> None:
        if self.store is None:
            dispatch_logger.warning("Database not configured, skipping save")
            outcome.store_skipped = True
            return

        result = Contacts(store=self.store).create(contact)
        outcome.saved = True
        outcome.inserted_id = result.inserted_id
        dispatch_logger.info(f"Contact form saved to database : {result.inserted_id}")

    def notify(self, contact: ContactModel, outcome: DispatchOutcome) -> None:
        if self.emailer is None:
            dispatch_logger.warning("Email credentials not configured, skipping email")
            outcome.mail_skipped = True
            return

        self.emailer.send_contact_notification(contact)
        outcome.emailed = True
        dispatch_logger.info("Email notification sent successfully")

    def dispatch(self, form: dict[str, str | None]) -> DispatchOutcome:
        """
        **dispatch**
            raises ValidationFailed when name, email or message is blank and
            DispatchFailed when storing or emailing failed
        :param form: output of parse_form
        :return: DispatchOutcome
        """
        contact = self.create_contact(form, submitted_at=datetime.now(tz=timezone.utc))
        outcome = DispatchOutcome()
        errors: list[Exception] = []

        try:
            self.save(contact, outcome)
        except Exception as e:
            dispatch_logger.error(f"Database save error : {e}")
            errors.append(e)

        try:
            self.notify(contact, outcome)
        except Exception as e:
            dispatch_logger.error(f"Email sending error : {e}")
            errors.append(e)

        if errors:
            if outcome.is_partial:
                dispatch_logger.warning(f"""
                Partial Contact Dispatch
                    saved: {outcome.saved}
                    emailed: {outcome.emailed}
                """)
            raise DispatchFailed(outcome=outcome, errors=errors)
        return outcome
