"""Request parsing and template context building for mail kinds.

Link shapes are part of the portal's contract with its front-end routes:
- verify details:   <baseUrl>/verify-details?candidateId=<id>
- interview accept: <baseUrl>/interview?candidateId=<id>
- interview decline: <baseUrl>/api/interview-response?candidateId=<id>&response=decline
"""

from typing import Any, Dict, Optional, Tuple

from pydantic import ValidationError

from app.config.models import OrganizationConfig
from app.domain.models import MailKind, MailRequest

from .models import MailValidationError

FALLBACK_GREETING = "there"

ONBOARDING_DOCUMENTS = (
    "MarkSheets",
    "Degree Completion Certificates",
    "Experience Certificate (if applicable)",
    "Bank Account Details",
)


def first_name(name: Optional[str]) -> str:
    """First whitespace-separated token of a full name, or "there".

    Example:
        >>> first_name("Asha  Rao")
        'Asha'
        >>> first_name(None)
        'there'
    """
    if not name:
        return FALLBACK_GREETING
    parts = name.split()
    return parts[0] if parts else FALLBACK_GREETING


def build_verify_details_url(base_url: str, candidate_id: str) -> str:
    return f"{base_url}/verify-details?candidateId={candidate_id}"


def build_interview_urls(base_url: str, candidate_id: str) -> Tuple[str, str]:
    """Return the (confirm availability, decline) links of an invitation."""
    action_url = f"{base_url}/interview?candidateId={candidate_id}"
    decline_url = f"{base_url}/api/interview-response?candidateId={candidate_id}&response=decline"
    return action_url, decline_url


def parse_mail_request(kind: MailKind, body: Any) -> MailRequest:
    """Turn a decoded JSON body into a MailRequest for the given kind.

    The manager-welcome body is flat (``{email, name, password, baseUrl}``);
    every other kind nests the recipient under ``candidate``.

    Raises:
        MailValidationError: If the body is not an object or has malformed fields
    """
    if not isinstance(body, dict):
        raise MailValidationError("Invalid JSON body")

    if kind == MailKind.MANAGER_WELCOME:
        data = {
            "kind": kind,
            "candidate": {"name": body.get("name"), "email": body.get("email")},
            "baseUrl": body.get("baseUrl"),
            "password": body.get("password"),
        }
    else:
        candidate = body.get("candidate")
        data = {
            "kind": kind,
            "candidate": candidate if isinstance(candidate, dict) else {},
            "baseUrl": body.get("baseUrl"),
            "interviewDetails": body.get("interviewDetails"),
        }

    try:
        return MailRequest.model_validate(data)
    except ValidationError as e:
        problems = "; ".join(
            f"{'.'.join(str(loc) for loc in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise MailValidationError(f"Invalid request body: {problems}") from e


def _base_context(request: MailRequest, organization: OrganizationConfig) -> Dict[str, Any]:
    return {
        "organization": organization.name,
        "first_name": first_name(request.candidate.name),
    }


def build_congratulations_context(
    request: MailRequest, organization: OrganizationConfig
) -> Dict[str, Any]:
    return {
        **_base_context(request, organization),
        "onboarding_form_url": organization.onboarding_form_url,
        "onboarding_documents": list(ONBOARDING_DOCUMENTS),
    }


def build_verify_details_context(
    request: MailRequest, organization: OrganizationConfig
) -> Dict[str, Any]:
    return {
        **_base_context(request, organization),
        "verify_url": build_verify_details_url(request.base_url, request.candidate.id),
    }


def build_interview_invite_context(
    request: MailRequest, organization: OrganizationConfig
) -> Dict[str, Any]:
    details = request.interview_details
    action_url, decline_url = build_interview_urls(request.base_url, request.candidate.id)
    return {
        **_base_context(request, organization),
        "role": details.role,
        "round_type": details.round_type or "next",
        "dates": details.dates,
        "interviewers": details.interviewers,
        "action_url": action_url,
        "decline_url": decline_url,
    }


def build_manager_welcome_context(
    request: MailRequest, organization: OrganizationConfig
) -> Dict[str, Any]:
    # Managers are greeted by full name, unlike candidates
    return {
        **_base_context(request, organization),
        "display_name": request.candidate.name or FALLBACK_GREETING,
        "email": request.candidate.email,
        "password": request.password or "",
        "login_url": request.base_url or "",
    }
