from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class ContactModel(BaseModel):
    """
        A single contact form submission as it is stored in the contacts collection
    """
    name: str
    email: str
    subject: str = ""
    message: str
    submitted_at: datetime = Field(default_factory=lambda: datetime.now(tz=timezone.utc))
    status: Literal["new"] = "new"

    model_config = ConfigDict(title="Contact Model", extra="forbid", frozen=True)

    def to_document(self) -> dict[str, str | datetime]:
        """will return the document layout used by the store"""
        return {
            'name': self.name,
            'email': self.email,
            'subject': self.subject,
            'message': self.message,
            'submittedAt': self.submitted_at,
            'status': self.status}
