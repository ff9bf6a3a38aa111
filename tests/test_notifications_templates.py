"""Tests for Jinja2 email templates."""

import pytest

from app.config.models import OrganizationConfig
from app.domain.models import Candidate, InterviewDetails, MailKind, MailRequest
from app.notifications.kinds import MAIL_KINDS
from app.notifications.models import MailTemplateError
from app.notifications.templates import TemplateRenderer


@pytest.fixture(scope="module")
def renderer():
    return TemplateRenderer()


@pytest.fixture
def organization():
    return OrganizationConfig()


def render_kind(renderer, request, organization):
    spec = MAIL_KINDS[request.kind]
    return renderer.render(spec.template_prefix, spec.build_context(request, organization))


def test_every_kind_has_all_templates(renderer):
    for spec in MAIL_KINDS.values():
        for name in TemplateRenderer.template_names(spec.template_prefix).values():
            assert renderer.env.get_template(name) is not None


def test_congratulations(renderer, organization):
    request = MailRequest(
        kind=MailKind.CONGRATULATIONS,
        candidate=Candidate(name="Asha Rao", email="asha@example.com"),
    )

    rendered = render_kind(renderer, request, organization)

    assert rendered.subject == "Offer Letter – Welcome to Indian Infra"
    assert "Hi Asha," in rendered.text_body
    assert "https://forms.gle/bv9Lc6SXWn6MHW6WA" in rendered.html_body
    for document in ("MarkSheets", "Degree Completion Certificates", "Bank Account Details"):
        assert document in rendered.text_body
        assert document in rendered.html_body


def test_missing_name_greets_there(renderer, organization):
    request = MailRequest(kind=MailKind.CONGRATULATIONS, candidate=Candidate(email="a@example.com"))

    rendered = render_kind(renderer, request, organization)

    assert "Hi there," in rendered.text_body


def test_verify_details_link(renderer, organization):
    request = MailRequest(
        kind=MailKind.VERIFY_DETAILS,
        candidate=Candidate(id="c-42", name="Asha Rao", email="asha@example.com"),
        base_url="https://portal.example.com",
    )

    rendered = render_kind(renderer, request, organization)

    link = "https://portal.example.com/verify-details?candidateId=c-42"
    assert rendered.subject == "Verify Your Details – Indian Infra"
    assert link in rendered.html_body
    assert link in rendered.text_body
    assert "Laptop is Mandatory" in rendered.text_body


def test_interview_invite(renderer, organization):
    request = MailRequest(
        kind=MailKind.INTERVIEW_INVITE,
        candidate=Candidate(id="c-7", name="Ravi Kumar", email="ravi@example.com"),
        base_url="https://portal.example.com",
        interview_details=InterviewDetails(
            role="Site Engineer",
            dates=["Mon 10 Nov", "Tue 11 Nov"],
            round_type="technical",
            interviewers=["Meera", "John"],
        ),
    )

    rendered = render_kind(renderer, request, organization)

    assert rendered.subject == "Interview Invitation – Site Engineer @ Indian Infra"
    assert "technical round" in rendered.text_body
    assert "Mon 10 Nov" in rendered.text_body
    assert "Meera, John" in rendered.text_body
    assert "https://portal.example.com/interview?candidateId=c-7" in rendered.text_body
    assert (
        "https://portal.example.com/api/interview-response?candidateId=c-7&response=decline"
        in rendered.text_body
    )
    # HTML escapes the query separator
    assert "candidateId=c-7&amp;response=decline" in rendered.html_body


def test_manager_welcome_includes_credentials(renderer, organization):
    request = MailRequest(
        kind=MailKind.MANAGER_WELCOME,
        candidate=Candidate(name="Vikram Shah", email="vikram@example.com"),
        base_url="https://portal.example.com/login",
        password="Temp#1234",
    )

    rendered = render_kind(renderer, request, organization)

    assert rendered.subject == "Welcome to Indian Infra Recruitment Portal"
    assert "Hi Vikram Shah," in rendered.text_body
    assert "Temp#1234" in rendered.text_body
    assert "https://portal.example.com/login" in rendered.html_body


def test_html_body_escapes_user_input(renderer, organization):
    request = MailRequest(
        kind=MailKind.CONGRATULATIONS,
        candidate=Candidate(name="<script>alert(1)</script>", email="x@example.com"),
    )

    rendered = render_kind(renderer, request, organization)

    assert "<script>" not in rendered.html_body
    assert "&lt;script&gt;" in rendered.html_body


def test_subject_is_single_line(renderer):
    rendered = renderer.render(
        "verify_details",
        {"organization": "Acme\nCorp", "first_name": "A", "verify_url": "https://x"},
    )

    assert "\n" not in rendered.subject
    assert rendered.subject == "Verify Your Details – Acme Corp"


def test_missing_variable_raises_template_error(renderer):
    with pytest.raises(MailTemplateError, match="verify_details"):
        renderer.render("verify_details", {"organization": "Acme"})


def test_unknown_template_prefix(renderer):
    with pytest.raises(MailTemplateError):
        renderer.render("newsletter", {})
