"""
Visual theme for the application document: page geometry, palette,
typography, spacing and the fixed bilingual labels.

Everything the layout engine needs to know about "how it looks" lives here,
so the engine itself only deals with cursors and heights.
"""

from dataclasses import dataclass, field
from typing import List, Tuple

Color = Tuple[float, float, float]

# Font keys understood by every Surface
REGULAR = "regular"
BOLD = "bold"


def hex_color(value: str) -> Color:
    """'#667eea' -> (0.4, 0.494, 0.918)"""
    value = value.lstrip("#")
    return tuple(int(value[i:i + 2], 16) / 255.0 for i in (0, 2, 4))


def blend(start: Color, end: Color, ratio: float) -> Color:
    return tuple(a + (b - a) * ratio for a, b in zip(start, end))


# ─── Geometry ────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class PageGeometry:
    """A4 in points, plus the margins that bound the flowing content."""
    width: float = 595.28
    height: float = 841.89
    margin_left: float = 40
    margin_right: float = 40
    margin_top: float = 50
    margin_bottom: float = 20
    footer_reserve: float = 40
    column_gap: float = 20

    @property
    def content_width(self) -> float:
        return self.width - self.margin_left - self.margin_right

    @property
    def content_top(self) -> float:
        return self.margin_top

    @property
    def content_bottom(self) -> float:
        return self.height - self.margin_bottom - self.footer_reserve

    @property
    def footer_y(self) -> float:
        return self.height - 35

    def column_boxes(self, count: int) -> List[Tuple[float, float]]:
        """(x, width) for `count` equal columns across the content area."""
        width = (self.content_width - self.column_gap * (count - 1)) / count
        return [
            (self.margin_left + i * (width + self.column_gap), width)
            for i in range(count)
        ]


# ─── Typography ──────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class TextStyle:
    font: str
    size: float
    color: Color
    leading: float = 1.4

    @property
    def line_height(self) -> float:
        return self.size * self.leading


@dataclass(frozen=True)
class Palette:
    primary: Color = hex_color("#667eea")
    secondary: Color = hex_color("#764ba2")
    text: Color = hex_color("#2d3748")
    label: Color = hex_color("#4a5568")
    muted: Color = hex_color("#718096")
    placeholder: Color = hex_color("#a0aec0")
    accent: Color = hex_color("#e53e3e")
    light_bg: Color = hex_color("#f7fafc")
    highlight_bg: Color = hex_color("#edf2f7")
    border: Color = hex_color("#e2e8f0")
    card_bg: Color = hex_color("#fafafa")
    card_header: Color = hex_color("#f0f4ff")
    white: Color = (1.0, 1.0, 1.0)


@dataclass(frozen=True)
class Spacing:
    banner_height: float = 80
    section_header_height: float = 35
    section_bar_height: float = 28
    section_gap: float = 14
    field_gap: float = 5
    label_width: float = 120
    column_label_width: float = 100
    record_title_height: float = 25
    record_padding: float = 8
    record_gap: float = 10
    record_radius: float = 5
    highlight_padding: float = 5
    paragraph_padding: float = 8
    photo_width: float = 85
    photo_height: float = 110


@dataclass(frozen=True)
class Labels:
    """Fixed Thai / English labels printed on the document."""
    title: str = "ใบสมัครงาน"
    subtitle: str = "Job Application Form"
    application_id: str = "รหัสใบสมัคร:"
    date: str = "วันที่:"
    position: str = "ตำแหน่งที่สมัคร:"
    photo_missing: str = "ไม่มีรูปถ่าย"
    footer: str = "สร้างโดยระบบรับสมัครงานอัตโนมัติ | Generated by Job Application System"
    page: str = "หน้า"
    no_data: str = "ไม่มีข้อมูล"

    personal_section: str = "ข้อมูลส่วนตัว / Personal Information"
    education_section: str = "ประวัติการศึกษา / Education"
    work_section: str = "ประสบการณ์การทำงาน / Work Experience"
    additional_section: str = "ข้อมูลเพิ่มเติม / Additional Information"

    full_name_local: str = "ชื่อ-นามสกุล (ไทย):"
    full_name_latin: str = "Full Name (English):"
    gender: str = "เพศ:"
    birth_date: str = "วันเกิด:"
    age_suffix: str = "ปี"
    nationality: str = "สัญชาติ:"
    ethnicity: str = "เชื้อชาติ:"
    religion: str = "ศาสนา:"
    national_id: str = "เลขบัตรประชาชน:"
    phone: str = "เบอร์โทร:"
    messaging_id: str = "LINE ID:"
    email: str = "อีเมล:"
    address: str = "ที่อยู่:"
    locality: str = "ตำบล/อำเภอ/จังหวัด:"

    secondary: str = "มัธยมศึกษา/เทียบเท่า"
    vocational: str = "ปวช./ปวส."
    bachelor: str = "ปริญญาตรี"
    other_education: str = "อื่นๆ"
    school: str = "สถานศึกษา:"
    major: str = "สาขา:"
    graduation_year: str = "ปีที่จบ:"
    education_used: str = "วุฒิการศึกษาที่ใช้สมัคร:"
    no_education: str = "ไม่มีข้อมูลการศึกษา"

    experience_title: str = "ประสบการณ์ที่ {number}"
    company: str = "บริษัท:"
    work_position: str = "ตำแหน่ง:"
    duration: str = "ระยะเวลา:"
    duration_join: str = "ถึง"
    reason: str = "เหตุผล:"
    no_experience: str = "ไม่มีประสบการณ์ทำงาน"

    medical_condition: str = "มีโรคประจำตัวหรือไม่:"
    criminal_record: str = "เคยต้องโทษหรือไม่:"
    detail: str = "รายละเอียด:"
    special_skills: str = "ทักษะพิเศษ:"
    expected_salary: str = "เงินเดือนที่คาดหวัง:"
    currency: str = "บาท"
    start_date: str = "สามารถเริ่มงานได้:"
    motivation: str = "เหตุผลที่ต้องการร่วมงาน:"


@dataclass(frozen=True)
class Theme:
    geometry: PageGeometry = field(default_factory=PageGeometry)
    palette: Palette = field(default_factory=Palette)
    spacing: Spacing = field(default_factory=Spacing)
    labels: Labels = field(default_factory=Labels)

    @property
    def label_style(self) -> TextStyle:
        return TextStyle(BOLD, 9, self.palette.label)

    @property
    def value_style(self) -> TextStyle:
        return TextStyle(REGULAR, 10, self.palette.text)

    @property
    def section_style(self) -> TextStyle:
        return TextStyle(BOLD, 14, self.palette.white, leading=1.2)

    @property
    def record_title_style(self) -> TextStyle:
        return TextStyle(BOLD, 11, self.palette.primary, leading=1.2)

    @property
    def placeholder_style(self) -> TextStyle:
        return TextStyle(REGULAR, 10, self.palette.placeholder)

    @property
    def highlight_label_style(self) -> TextStyle:
        return TextStyle(BOLD, 11, self.palette.primary)

    @property
    def footer_style(self) -> TextStyle:
        return TextStyle(REGULAR, 8, self.palette.muted, leading=1.2)


DEFAULT_THEME = Theme()
