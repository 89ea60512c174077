"""Tests for emailing owner reports."""

import smtplib
from unittest.mock import patch

import pytest

from app.core.config import settings
from app.services.email_service import build_message

REPORT_PARAMS = {"month": 6, "year": 2030}


@pytest.fixture
def smtp_configured(monkeypatch) -> None:
    monkeypatch.setattr(settings, "SMTP_HOST", "smtp.example.com")
    monkeypatch.setattr(settings, "EMAIL_FROM", "relatorios@mariafaz.pt")
    monkeypatch.setattr(settings, "SMTP_USERNAME", "relatorios")
    monkeypatch.setattr(settings, "SMTP_PASSWORD", "secret")


class TestBuildMessage:
    """Tests for MIME message assembly."""

    def test_headers_and_attachment(self) -> None:
        msg = build_message(
            "from@example.com",
            "to@example.com",
            "Relatório",
            "<p>Olá</p>",
            [("relatorio.pdf", b"%PDF-1.4", "pdf")],
        )

        assert msg["From"] == "from@example.com"
        assert msg["To"] == "to@example.com"
        parts = msg.get_payload()
        assert parts[0].get_content_type() == "text/html"
        assert parts[1].get_content_type() == "application/pdf"
        assert parts[1].get_filename() == "relatorio.pdf"
        assert parts[1].get_payload(decode=True) == b"%PDF-1.4"

    def test_without_attachments(self) -> None:
        msg = build_message("a@example.com", "b@example.com", "Assunto", "<p>x</p>")
        assert len(msg.get_payload()) == 1


class TestEmailReportEndpoints:
    """Tests for /reports/owner/{id}/email and /reports/email-status."""

    def test_status_unconfigured(self, client, monkeypatch) -> None:
        monkeypatch.setattr(settings, "SMTP_HOST", "")
        response = client.get("/api/reports/email-status")
        assert response.status_code == 200
        assert response.json()["configured"] is False

    def test_status_configured(self, client, smtp_configured) -> None:
        body = client.get("/api/reports/email-status").json()
        assert body == {"configured": True, "sender": "relatorios@mariafaz.pt"}

    def test_unconfigured_delivery_rejected(self, client, owner, monkeypatch) -> None:
        monkeypatch.setattr(settings, "SMTP_HOST", "")
        response = client.post(
            f"/api/reports/owner/{owner['id']}/email", params=REPORT_PARAMS
        )
        assert response.status_code == 502
        assert response.json()["error_type"] == "external_service_error"

    def test_sends_report_to_owner(self, client, owner, smtp_configured) -> None:
        with patch("app.services.email_service.smtplib.SMTP") as smtp:
            response = client.post(
                f"/api/reports/owner/{owner['id']}/email", params=REPORT_PARAMS
            )

        assert response.status_code == 200, response.text
        body = response.json()
        assert body["sent"] is True
        assert body["recipient"] == "joao@example.com"
        assert body["filename"] == f"relatorio_{owner['id']}_2030_06.pdf"

        smtp.assert_called_once_with(
            "smtp.example.com", settings.SMTP_PORT, timeout=settings.SMTP_TIMEOUT
        )
        server = smtp.return_value.__enter__.return_value
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("relatorios", "secret")
        [msg] = server.send_message.call_args.args
        attachment = msg.get_payload()[1]
        assert attachment.get_filename() == body["filename"]
        assert attachment.get_payload(decode=True).startswith(b"%PDF")

        activities = client.get(
            "/api/activities/", params={"entity_type": "owner"}
        ).json()
        assert activities[0]["type"] == "report_sent"

    def test_explicit_recipient(self, client, owner, smtp_configured) -> None:
        with patch("app.services.email_service.smtplib.SMTP"):
            response = client.post(
                f"/api/reports/owner/{owner['id']}/email",
                params=REPORT_PARAMS,
                json={"to": "contabilidade@example.com"},
            )
        assert response.json()["recipient"] == "contabilidade@example.com"

    def test_owner_without_email(self, client, smtp_configured) -> None:
        owner = client.post("/api/owners/", json={"name": "Rita Costa"}).json()
        with patch("app.services.email_service.smtplib.SMTP") as smtp:
            response = client.post(
                f"/api/reports/owner/{owner['id']}/email", params=REPORT_PARAMS
            )
        assert response.status_code == 400
        smtp.assert_not_called()

    def test_smtp_failure_reported(self, client, owner, smtp_configured) -> None:
        with patch(
            "app.services.email_service.smtplib.SMTP",
            side_effect=smtplib.SMTPConnectError(421, "busy"),
        ):
            response = client.post(
                f"/api/reports/owner/{owner['id']}/email", params=REPORT_PARAMS
            )
        assert response.status_code == 502
        assert response.json()["detail"].startswith("Email delivery failed")

    def test_unknown_owner(self, client, smtp_configured) -> None:
        response = client.post("/api/reports/owner/999/email", params=REPORT_PARAMS)
        assert response.status_code == 404
