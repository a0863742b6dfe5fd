"""
API tests through FastAPI's TestClient. Fonts come from the built-in PDF faces
and email delivery is captured, so nothing leaves the process.
"""

import sys
import os
from datetime import datetime

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import fitz  # PyMuPDF
from fastapi.testclient import TestClient

from app.core.config import settings
from app.core.errors import ResourceAcquisitionError
from app.main import app
from app.pdf.surface import BUILTIN_FONTS
from app.services import application_service
from app.services.email_sender import DeliveryResult


def tiny_png() -> bytes:
    pix = fitz.Pixmap(fitz.csRGB, fitz.IRect(0, 0, 4, 4), False)
    pix.clear_with(200)
    return pix.tobytes("png")


PHOTO = ("me.png", tiny_png(), "image/png")
RESUME = ("resume.pdf", b"%PDF-1.4 resume", "application/pdf")


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def outbox(monkeypatch):
    """Replace font loading and delivery; returns the captured emails."""
    sent = []

    async def fake_fonts(cache):
        return BUILTIN_FONTS

    async def fake_send(to_email, subject, html, attachments=None, from_email=None, from_name=None):
        sent.append({"to": to_email, "subject": subject, "html": html, "attachments": attachments or []})
        return DeliveryResult(to=to_email, sent=True, transport="test", message_id=f"m{len(sent)}")

    monkeypatch.setattr(application_service, "load_font_set", fake_fonts)
    monkeypatch.setattr(application_service, "send_email", fake_send)
    monkeypatch.setattr(settings, "ADMIN_EMAIL", "hr@example.com")
    return sent


class TestMeta:

    def test_health(self, client):
        response = client.get("/api/health")
        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "OK"
        assert body["message"] == "Job Application API is running"
        datetime.fromisoformat(body["timestamp"])

    def test_root_lists_endpoints(self, client):
        body = client.get("/").json()
        assert body["message"] == "Job Application API"
        assert "POST /api/job-application" in body["endpoints"]

    def test_unknown_route(self, client):
        response = client.get("/api/does-not-exist")
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Endpoint not found"}


class TestValidation:

    def test_missing_photo(self, client, sample_form, outbox):
        response = client.post("/api/job-application", data=sample_form)
        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "missing_photo"
        assert outbox == []

    def test_empty_photo_counts_as_missing(self, client, sample_form, outbox):
        response = client.post("/api/job-application", data=sample_form,
                               files={"photo": ("empty.png", b"", "image/png")})
        assert response.json()["error"] == "missing_photo"

    def test_missing_fields_are_named(self, client, sample_form, outbox):
        del sample_form["email"]
        del sample_form["education_used"]
        response = client.post("/api/job-application", data=sample_form, files={"photo": PHOTO})
        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "missing_required_fields"
        assert body["fields"] == ["email", "education_used"]

    def test_bad_national_id(self, client, sample_form, outbox):
        sample_form["id_card"] = "12345"
        response = client.post("/api/job-application", data=sample_form, files={"photo": PHOTO})
        assert response.status_code == 400
        assert response.json()["error"] == "invalid_national_id"
        assert "fields" not in response.json()

    def test_bad_email(self, client, sample_form, outbox):
        sample_form["email"] = "somchai@"
        response = client.post("/api/job-application", data=sample_form, files={"photo": PHOTO})
        assert response.json()["error"] == "invalid_email"


class TestSubmission:

    def test_accepted_and_both_emails_sent(self, client, sample_form, outbox):
        response = client.post("/api/job-application", data=sample_form, files={"photo": PHOTO})
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "ส่งใบสมัครงานสำเร็จ! เราจะติดต่อกลับภายใน 7 วันทำการ"
        assert body["application_id"].startswith("APP")

        applicant, admin = outbox
        assert applicant["to"] == "somchai@example.com"
        assert applicant["attachments"] == []
        assert admin["to"] == "hr@example.com"
        assert admin["subject"] == "🆕 ใบสมัครงานใหม่ - Software Engineer - สมชาย ใจดี"

        names = [a.filename for a in admin["attachments"]]
        assert names == [
            f"Job_Application_สมชาย ใจดี_{body['application_id']}.pdf",
            "Photo_สมชาย ใจดี_me.png",
        ]
        assert admin["attachments"][0].content.startswith(b"%PDF")

    def test_resume_is_forwarded_under_its_name(self, client, sample_form, outbox):
        response = client.post("/api/job-application", data=sample_form,
                               files={"photo": PHOTO, "resume": RESUME})
        assert response.status_code == 200
        names = [a.filename for a in outbox[1]["attachments"]]
        assert names[-1] == "resume.pdf"

    def test_delivery_failure_does_not_fail_submission(self, client, sample_form, outbox, monkeypatch):
        async def failing_send(to_email, subject, html, attachments=None, from_email=None, from_name=None):
            return DeliveryResult(to=to_email, sent=False, transport="test", error="smtp down")

        monkeypatch.setattr(application_service, "send_email", failing_send)
        response = client.post("/api/job-application", data=sample_form, files={"photo": PHOTO})
        assert response.status_code == 200
        assert response.json()["success"] is True

    def test_fonts_unavailable(self, client, sample_form, outbox, monkeypatch):
        async def no_fonts(cache):
            raise ResourceAcquisitionError("sarabun", "download failed")

        monkeypatch.setattr(application_service, "load_font_set", no_fonts)
        response = client.post("/api/job-application", data=sample_form, files={"photo": PHOTO})
        assert response.status_code == 500
        body = response.json()
        assert body["success"] is False
        assert body["error"] == "resource_unavailable"
        assert body["message"] == "เกิดข้อผิดพลาด กรุณาลองใหม่อีกครั้ง"
        assert outbox == []

    def test_unexpected_render_failure(self, client, sample_form, outbox, monkeypatch):
        def explode(*args, **kwargs):
            raise RuntimeError("layout bug")

        monkeypatch.setattr(application_service, "render_application_pdf", explode)
        response = client.post("/api/job-application", data=sample_form, files={"photo": PHOTO})
        assert response.status_code == 500
        assert response.json()["error"] == "internal_error"
        assert outbox == []
