"""
Shared fixtures: a recording drawing surface with deterministic metrics and
a complete, valid application form.
"""

import sys
import os
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

import pytest

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from app.core.errors import RenderError
from app.pdf.surface import Surface
from app.pdf.theme import PageGeometry

PNG_SIGNATURE = b"\x89PNG\r\n\x1a\n"


@dataclass
class DrawOp:
    page: int
    kind: str
    x: float
    y: float
    width: float = 0.0
    height: float = 0.0
    text: Optional[str] = None


class RecordingSurface(Surface):
    """Surface that records every primitive instead of drawing it.

    Every glyph is half the font size wide, so wrapping is predictable.
    Images are accepted only if they start with the PNG signature.
    """

    def __init__(self, geometry: Optional[PageGeometry] = None):
        super().__init__(geometry or PageGeometry())
        self.pages = 0
        self.ops: List[DrawOp] = []
        self.finished = False

    @property
    def page_count(self) -> int:
        return self.pages

    def _record(self, kind, x, y, width=0.0, height=0.0, text=None):
        if self.pages == 0:
            raise RuntimeError(f"{kind} drawn before the first page")
        self.ops.append(DrawOp(self.pages - 1, kind, x, y, width, height, text))

    def text_width(self, text, font, size):
        return len(text) * size * 0.5

    def new_page(self):
        self.pages += 1

    def draw_text_line(self, x, y, text, style):
        self._record("text", x, y, self.text_width(text, style.font, style.size), style.line_height, text)

    def draw_rect(self, x, y, width, height, fill=None, stroke=None, radius=0, line_width=0.5):
        self._record("rect", x, y, width, height)

    def draw_line(self, x0, y0, x1, y1, color, width=0.5):
        self._record("line", x0, y0, x1 - x0, y1 - y0)

    def draw_circle(self, cx, cy, radius, fill=None, stroke=None):
        self._record("circle", cx, cy, radius, radius)

    def draw_image(self, x, y, width, height, data):
        if not data.startswith(PNG_SIGNATURE):
            raise RenderError("unsupported image data")
        self._record("image", x, y, width, height)

    def finish(self):
        self.finished = True
        return b"%PDF-1.7 recorded"

    # ── Query helpers ────────────────────────────────────────────────────────

    def texts(self, page: Optional[int] = None) -> List[DrawOp]:
        return [op for op in self.ops if op.kind == "text" and (page is None or op.page == page)]

    def find_text(self, fragment: str) -> List[DrawOp]:
        return [op for op in self.texts() if fragment in op.text]

    def pages_with(self, fragment: str) -> List[int]:
        return sorted({op.page for op in self.find_text(fragment)})


@pytest.fixture
def surface():
    return RecordingSurface()


@pytest.fixture
def sample_form():
    """Every field a complete submission carries, all valid."""
    return {
        "position": "Software Engineer",
        "fullname_th": "สมชาย ใจดี",
        "fullname_en": "Somchai Jaidee",
        "gender": "ชาย",
        "birthdate": "1995-04-12",
        "age": "29",
        "nationality": "ไทย",
        "ethnicity": "ไทย",
        "religion": "พุทธ",
        "id_card": "1-1037-01234-56-7",
        "phone": "0812345678",
        "line_id": "somchai.j",
        "email": "somchai@example.com",
        "address": "99/1 Sukhumvit Rd",
        "subdistrict": "Khlong Toei",
        "district": "Khlong Toei",
        "province": "Bangkok",
        "zipcode": "10110",
        "edu_high_school": "Triam Udom Suksa",
        "edu_high_major": "Science-Math",
        "edu_high_year": "2013",
        "edu_bachelor": "Chulalongkorn University",
        "edu_bachelor_major": "Computer Engineering",
        "edu_bachelor_year": "2017",
        "education_used": "Bachelor",
        "work1_company": "Acme Co",
        "work1_position": "Developer",
        "work1_start": "2017-06",
        "work1_end": "2020-12",
        "work1_reason": "Growth",
        "has_disease": "No",
        "has_criminal_record": "No",
        "special_skills": "Python, SQL",
        "expected_salary": "45000",
        "start_date": "2024-08-01",
        "motivation": "I enjoy building reliable services.",
    }


@pytest.fixture
def submitted_at():
    return datetime(2024, 7, 1, 3, 0, tzinfo=timezone.utc)


@pytest.fixture
def application(sample_form, submitted_at):
    from app.services.intake import parse_application

    result = parse_application(sample_form, has_photo=True, application_id="APP1719802800000",
                               submitted_at=submitted_at)
    assert result.ok, result.error
    return result.application
