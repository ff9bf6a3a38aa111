"""HTTP contract tests for the mail functions."""

import smtplib
from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from app.config.environment import EnvironmentConfig
from app.notifications.models import MailResult
from app.notifications.service import MailDispatcher
from app.notifications.smtp_client import SMTPClient
from app.web import CORS_HEADERS, create_app
from app.web.app import REQUEST_ID_HEADER
from tests.helpers import FakeSMTPFactory


@pytest.fixture
def smtp_factory():
    return FakeSMTPFactory()


@pytest.fixture
def dispatcher(smtp_factory):
    env_config = EnvironmentConfig(
        smtp_host="smtp.example.com",
        smtp_port=465,
        smtp_user="talent@example.com",
        smtp_pass="secret123",
    )
    return MailDispatcher(
        env_config=env_config,
        smtp_client=SMTPClient(smtp_factory=smtp_factory, smtp_ssl_factory=smtp_factory),
        sleep=Mock(),
    )


@pytest.fixture
def client(dispatcher):
    return TestClient(create_app(dispatcher))


def assert_cors(response):
    for name, value in CORS_HEADERS.items():
        assert response.headers[name.lower()] == value


VERIFY_BODY = {
    "candidate": {"id": "c-42", "name": "Asha Rao", "email": "asha@example.com"},
    "baseUrl": "https://portal.example.com",
}


class TestPreflight:
    @pytest.mark.parametrize(
        "path",
        ["/send_congratulations_mail", "/send_verify_details", "/send_interview_invite", "/manager_invite", "/send_email"],
    )
    def test_options_returns_cors_and_never_sends(self, client, smtp_factory, path):
        response = client.options(path)

        assert response.status_code == 200
        assert response.content == b""
        assert_cors(response)
        assert smtp_factory.connections == []


class TestMethodGate:
    @pytest.mark.parametrize("method", ["get", "put", "delete", "patch"])
    def test_non_post_is_405_with_cors(self, client, smtp_factory, method):
        response = client.request(method.upper(), "/send_verify_details")

        assert response.status_code == 405
        assert response.json() == {"success": False, "error": "Method not allowed"}
        assert_cors(response)
        assert smtp_factory.connections == []

    @pytest.mark.parametrize("method", ["TRACE", "PROPFIND", "PURGE"])
    @pytest.mark.parametrize("path", ["/send_congratulations_mail", "/send_email"])
    def test_unregistered_method_gets_envelope(self, client, smtp_factory, method, path):
        response = client.request(method, path)

        assert response.status_code == 405
        assert response.json() == {"success": False, "error": "Method not allowed"}
        assert_cors(response)
        assert smtp_factory.connections == []

    def test_other_paths_keep_default_405(self, client):
        response = client.post("/health")

        assert response.status_code == 405
        assert response.json() == {"detail": "Method Not Allowed"}
        assert "access-control-allow-origin" not in response.headers


class TestVerifyDetails:
    def test_success(self, client, smtp_factory):
        response = client.post("/send_verify_details", json=VERIFY_BODY)

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert_cors(response)

        html = smtp_factory.sent[0].get_body(preferencelist=("html",)).get_content()
        assert "https://portal.example.com/verify-details?candidateId=c-42" in html

    def test_missing_base_url(self, client, smtp_factory):
        response = client.post("/send_verify_details", json={"candidate": VERIFY_BODY["candidate"]})

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Base URL missing"}
        assert_cors(response)
        assert smtp_factory.connections == []

    def test_missing_email(self, client, smtp_factory):
        response = client.post(
            "/send_verify_details",
            json={"candidate": {"id": "c-42"}, "baseUrl": "https://portal.example.com"},
        )

        assert response.status_code == 400
        assert response.json()["error"] == "Candidate email missing"
        assert smtp_factory.connections == []


class TestCongratulations:
    def test_success(self, client, smtp_factory):
        response = client.post(
            "/send_congratulations_mail", json={"candidate": {"email": "asha@example.com"}}
        )

        assert response.status_code == 200
        assert response.json() == {"success": True}
        assert len(smtp_factory.sent) == 1

    def test_missing_email(self, client, smtp_factory):
        response = client.post("/send_congratulations_mail", json={"candidate": {"name": "Asha"}})

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Candidate email missing"}
        assert_cors(response)
        assert smtp_factory.connections == []


class TestErrors:
    def test_invalid_json(self, client, smtp_factory):
        response = client.post(
            "/send_congratulations_mail",
            content=b"{not json",
            headers={"Content-Type": "application/json"},
        )

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Invalid JSON body"}
        assert_cors(response)

    def test_transport_failure_is_500(self, client, smtp_factory):
        smtp_factory.failures = [smtplib.SMTPDataError(554, b"rejected")]

        response = client.post("/send_verify_details", json=VERIFY_BODY)

        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert "rejected" in body["error"]
        assert_cors(response)

    def test_dispatcher_crash_is_500(self, client, dispatcher, monkeypatch):
        monkeypatch.setattr(dispatcher, "send", Mock(side_effect=RuntimeError("boom")))

        response = client.post("/send_verify_details", json=VERIFY_BODY)

        assert response.status_code == 500
        assert response.json() == {"success": False, "error": "boom"}


class TestOtherFunctions:
    def test_interview_invite(self, client, smtp_factory):
        response = client.post(
            "/send_interview_invite",
            json={
                **VERIFY_BODY,
                "interviewDetails": {"role": "Site Engineer", "dates": ["Mon"], "roundType": "technical"},
            },
        )

        assert response.status_code == 200
        assert "Site Engineer" in smtp_factory.sent[0]["Subject"]

    def test_interview_invite_without_details(self, client):
        response = client.post("/send_interview_invite", json=VERIFY_BODY)

        assert response.status_code == 400
        assert response.json()["error"] == "Interview details missing"

    def test_manager_invite(self, client, smtp_factory):
        response = client.post(
            "/manager_invite",
            json={
                "email": "vikram@example.com",
                "name": "Vikram Shah",
                "password": "Temp#1234",
                "baseUrl": "https://portal.example.com",
            },
        )

        assert response.status_code == 200
        assert smtp_factory.sent[0]["To"] == "vikram@example.com"

    def test_manager_invite_without_email(self, client):
        response = client.post("/manager_invite", json={"name": "Vikram"})

        assert response.status_code == 400
        assert response.json()["error"] == "Email missing"


class TestSendEmail:
    def test_defaults_to_interview_invite(self, client, dispatcher, monkeypatch):
        send = Mock(return_value=MailResult.sent())
        monkeypatch.setattr(dispatcher, "send", send)

        client.post("/send_email", json=VERIFY_BODY)

        assert send.call_args.args[0].kind.value == "interview-invite"

    @pytest.mark.parametrize(
        "mail_type, kind",
        [
            ("member_welcome", "manager-welcome"),
            ("congratulations", "congratulations"),
            ("verify_details", "verify-details"),
        ],
    )
    def test_type_selects_kind(self, client, dispatcher, monkeypatch, mail_type, kind):
        send = Mock(return_value=MailResult.sent())
        monkeypatch.setattr(dispatcher, "send", send)

        response = client.post("/send_email", json={**VERIFY_BODY, "type": mail_type})

        assert response.status_code == 200
        assert send.call_args.args[0].kind.value == kind

    def test_unknown_type(self, client, smtp_factory):
        response = client.post("/send_email", json={**VERIFY_BODY, "type": "newsletter"})

        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Unknown mail type: newsletter"}
        assert smtp_factory.connections == []


class TestAmbient:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok"}

    def test_request_id_is_echoed(self, client):
        response = client.options("/send_email", headers={REQUEST_ID_HEADER: "abc123"})

        assert response.headers[REQUEST_ID_HEADER] == "abc123"

    def test_request_id_is_generated(self, client):
        response = client.get("/health")

        assert len(response.headers[REQUEST_ID_HEADER]) == 12
