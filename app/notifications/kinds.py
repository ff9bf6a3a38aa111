"""Registry of mail kinds.

One templated sender serves every kind. A kind contributes only its
template prefix, the checks a request must pass, and the function that
turns a request into template variables.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Tuple

from app.config.models import OrganizationConfig
from app.domain.models import MailKind, MailRequest

from .models import MailValidationError
from .payloads import (
    build_congratulations_context,
    build_interview_invite_context,
    build_manager_welcome_context,
    build_verify_details_context,
)

Check = Callable[[MailRequest], None]
ContextBuilder = Callable[[MailRequest, OrganizationConfig], Dict[str, Any]]


def require_candidate_email(request: MailRequest) -> None:
    if not request.candidate.email:
        raise MailValidationError("Candidate email missing")


def require_email(request: MailRequest) -> None:
    if not request.candidate.email:
        raise MailValidationError("Email missing")


def require_base_url(request: MailRequest) -> None:
    if not request.base_url:
        raise MailValidationError("Base URL missing")


def require_candidate_id(request: MailRequest) -> None:
    if not request.candidate.id:
        raise MailValidationError("Candidate id missing")


def require_interview_details(request: MailRequest) -> None:
    details = request.interview_details
    if details is None or not details.role:
        raise MailValidationError("Interview details missing")


@dataclass(frozen=True)
class MailKindSpec:
    """Everything that differs between two mail kinds."""

    kind: MailKind
    template_prefix: str
    checks: Tuple[Check, ...]
    build_context: ContextBuilder

    def validate(self, request: MailRequest) -> None:
        """Run checks in order; the first failure wins.

        Raises:
            MailValidationError: If the request cannot be sent as this kind
        """
        for check in self.checks:
            check(request)


MAIL_KINDS: Dict[MailKind, MailKindSpec] = {
    MailKind.CONGRATULATIONS: MailKindSpec(
        kind=MailKind.CONGRATULATIONS,
        template_prefix="congratulations",
        checks=(require_candidate_email,),
        build_context=build_congratulations_context,
    ),
    MailKind.VERIFY_DETAILS: MailKindSpec(
        kind=MailKind.VERIFY_DETAILS,
        template_prefix="verify_details",
        checks=(require_candidate_email, require_base_url, require_candidate_id),
        build_context=build_verify_details_context,
    ),
    MailKind.INTERVIEW_INVITE: MailKindSpec(
        kind=MailKind.INTERVIEW_INVITE,
        template_prefix="interview_invite",
        checks=(
            require_candidate_email,
            require_interview_details,
            require_base_url,
            require_candidate_id,
        ),
        build_context=build_interview_invite_context,
    ),
    MailKind.MANAGER_WELCOME: MailKindSpec(
        kind=MailKind.MANAGER_WELCOME,
        template_prefix="manager_welcome",
        checks=(require_email,),
        build_context=build_manager_welcome_context,
    ),
}


def get_kind_spec(kind: MailKind) -> MailKindSpec:
    return MAIL_KINDS[MailKind(kind)]
