"""Core domain models shared by mail dispatch and the notification feed.

- Candidate: the recipient of a lifecycle email
- InterviewDetails: slot and panel information for an interview invitation
- MailRequest: tagged envelope selecting one mail kind
- Notification: a per-user record shown in the portal's notification feed
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.utils.timestamps import ensure_utc


class MailKind(str, Enum):
    """Discriminator selecting the template and validation rules of a send."""

    CONGRATULATIONS = "congratulations"
    VERIFY_DETAILS = "verify-details"
    INTERVIEW_INVITE = "interview-invite"
    MANAGER_WELCOME = "manager-welcome"


class NotificationType(str, Enum):
    """Lifecycle event a notification was produced for."""

    INTERVIEW_INVITE = "interview_invite"
    VERIFY_DETAILS = "verify_details"
    CONGRATULATIONS = "congratulations"
    MANAGER_INVITE = "manager_invite"


def _blank_to_none(v: Any) -> Optional[str]:
    if v is None:
        return None
    text = str(v).strip()
    return text or None


class Candidate(BaseModel):
    """Recipient of a candidate lifecycle email.

    Every field is optional at parse time; whether a send may proceed is
    decided by the mail kind's validation, not by the model.
    """

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = Field(None, description="Candidate identifier used in deep links")
    name: Optional[str] = Field(None, description="Full display name")
    email: Optional[str] = Field(None, description="Recipient address")

    @field_validator("id", "name", "email", mode="before")
    @classmethod
    def normalize_text(cls, v: Any) -> Optional[str]:
        """Accept numeric ids and treat blank strings as missing."""
        return _blank_to_none(v)


class InterviewDetails(BaseModel):
    """Interview slot offer attached to an invitation."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    role: Optional[str] = None
    dates: List[str] = Field(default_factory=list)
    round_type: Optional[str] = Field(None, alias="roundType")
    interviewers: List[str] = Field(default_factory=list)

    @field_validator("role", "round_type", mode="before")
    @classmethod
    def normalize_text(cls, v: Any) -> Optional[str]:
        return _blank_to_none(v)


class MailRequest(BaseModel):
    """Tagged envelope for one transactional email.

    ``base_url`` is required by kinds that build links (verify-details,
    interview-invite). ``password`` is only meaningful for manager-welcome.
    """

    model_config = ConfigDict(populate_by_name=True)

    kind: MailKind
    candidate: Candidate = Field(default_factory=Candidate)
    base_url: Optional[str] = Field(None, alias="baseUrl")
    interview_details: Optional[InterviewDetails] = Field(None, alias="interviewDetails")
    password: Optional[str] = None

    @field_validator("base_url", mode="before")
    @classmethod
    def normalize_base_url(cls, v: Any) -> Optional[str]:
        return _blank_to_none(v)


class Notification(BaseModel):
    """A notification record addressed to exactly one user.

    ``user_id`` is the recipient's email address. ``viewed`` starts false
    and moves to true once; nothing in this service moves it back.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    user_id: str = Field(..., alias="userId")
    type: Optional[NotificationType] = None
    title: Optional[str] = None
    message: str
    created_at: datetime = Field(..., alias="createdAt")
    viewed: bool = False
    metadata: Optional[Dict[str, Any]] = None

    @field_validator("user_id")
    @classmethod
    def require_user(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("user_id cannot be empty")
        return stripped

    @field_validator("created_at")
    @classmethod
    def normalize_created_at(cls, v: datetime) -> datetime:
        return ensure_utc(v)
