# File: backend/app/services/email_templates.py
"""HTML bodies for the applicant confirmation and the HR notification."""

from html import escape
from typing import List, Optional, Tuple

from app.core.config import settings
from app.schemas.application import Application
from app.utils.dates import format_thai_date

APPLICANT_SUBJECT = "🎉 ยืนยันการรับใบสมัครงาน"

ROW = (
    '<tr><td style="padding:6px 12px;color:#6b7280;white-space:nowrap;">{label}</td>'
    '<td style="padding:6px 12px;color:#1f2937;">{value}</td></tr>'
)


def admin_subject(application: Application) -> str:
    return f"🆕 ใบสมัครงานใหม่ - {application.position} - {application.personal_info.full_name_local}"


def _e(value: Optional[object]) -> str:
    if value is None or value == "":
        return "-"
    return escape(str(value))


def _table(pairs: List[Tuple[str, Optional[object]]]) -> str:
    rows = "".join(ROW.format(label=escape(label), value=_e(value)) for label, value in pairs)
    return f'<table style="border-collapse:collapse;width:100%;background:#f8fafc;">{rows}</table>'


def _wrap(title: str, body: str) -> str:
    return f"""<!DOCTYPE html>
<html>
<body style="margin:0;padding:0;background:#f3f4f6;font-family:Arial,sans-serif;">
  <div style="max-width:600px;margin:0 auto;background:#ffffff;">
    <div style="background:linear-gradient(135deg,#667eea 0%,#764ba2 100%);padding:28px;text-align:center;">
      <h1 style="margin:0;color:#ffffff;font-size:22px;">{escape(title)}</h1>
      <p style="margin:6px 0 0;color:#e0e7ff;">{escape(settings.COMPANY_NAME)}</p>
    </div>
    <div style="padding:24px;">{body}</div>
  </div>
</body>
</html>"""


def applicant_confirmation_html(application: Application) -> str:
    personal = application.personal_info
    summary = _table([
        ("เลขที่ใบสมัคร", application.id),
        ("ตำแหน่งที่สมัคร", application.position),
        ("วันที่สมัคร", format_thai_date(application.submitted_at)),
    ])
    body = (
        f"<p>เรียน คุณ{_e(personal.full_name_local)}</p>"
        "<p>เราได้รับใบสมัครงานของท่านเรียบร้อยแล้ว ขอบคุณที่สนใจร่วมงานกับเรา</p>"
        f"{summary}"
        "<p>เจ้าหน้าที่จะพิจารณาใบสมัครและติดต่อกลับภายใน 7 วันทำการ</p>"
        '<p style="color:#6b7280;font-size:12px;">อีเมลนี้ส่งโดยอัตโนมัติ กรุณาอย่าตอบกลับ</p>'
    )
    return _wrap("ยืนยันการรับใบสมัครงาน", body)


def admin_notification_html(application: Application) -> str:
    personal = application.personal_info
    info = application.additional_info
    work = "; ".join(
        f"{w.company} ({w.position or '-'})" for w in application.work_experience
    )
    summary = _table([
        ("เลขที่ใบสมัคร", application.id),
        ("ตำแหน่งที่สมัคร", application.position),
        ("ชื่อ-นามสกุล", personal.full_name_local),
        ("Name", personal.full_name_latin),
        ("อายุ", personal.age),
        ("โทรศัพท์", personal.phone),
        ("อีเมล", personal.email),
        ("Line ID", personal.messaging_id),
        ("วุฒิที่ใช้สมัคร", application.education.education_used),
        ("ประสบการณ์ทำงาน", work),
        ("เงินเดือนที่คาดหวัง", info.expected_salary),
        ("วันที่เริ่มงานได้", info.available_start_date),
    ])
    body = (
        "<p>มีใบสมัครงานใหม่เข้ามา รายละเอียดฉบับเต็มอยู่ในไฟล์ PDF ที่แนบมา</p>"
        f"{summary}"
    )
    return _wrap("ใบสมัครงานใหม่", body)
