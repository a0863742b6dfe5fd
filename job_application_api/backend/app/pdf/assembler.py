"""
Document assembler — lays out a whole application.

Fixed order: gradient banner, applicant block (position, names, photo slot,
info bar), divider, then the four sections (personal, education, work
experience, additional). Every page gets the footer; pages after the first
get a slim running header.
"""

import logging
from typing import List, Optional

from app.core.errors import RenderError
from app.pdf.fields import FieldRenderer
from app.pdf.pagination import LayoutCursor, PaginationController
from app.pdf.records import Record, RecordField
from app.pdf.sections import (
    ColumnsItem,
    FieldItem,
    HighlightItem,
    ParagraphItem,
    PlaceholderItem,
    RecordItem,
    SectionComposer,
    SectionItem,
)
from app.pdf.surface import BUILTIN_FONTS, FitzSurface, FontSet, Surface
from app.pdf.theme import BOLD, DEFAULT_THEME, REGULAR, TextStyle, Theme, blend
from app.schemas.application import Application
from app.utils.dates import format_thai_date

logger = logging.getLogger(__name__)

INFO_BAR_HEIGHT = 35
RUNNING_HEADER_Y = 22


class DocumentAssembler:
    def __init__(self, surface: Surface, theme: Theme = DEFAULT_THEME):
        self.surface = surface
        self.theme = theme
        self.fields = FieldRenderer(surface, theme)
        self._application: Optional[Application] = None

    # ── Entry point ──────────────────────────────────────────────────────────

    def render(self, application: Application, photo_bytes: Optional[bytes] = None) -> bytes:
        labels = self.theme.labels
        self._application = application
        controller = PaginationController(
            self.surface,
            self.theme.geometry,
            on_page_end=self._draw_footer,
            on_page_start=self._draw_running_header,
        )
        composer = SectionComposer(self.surface, self.theme, controller)

        controller.start()
        controller.flow.y = self._draw_header(application, photo_bytes)

        composer.render_section(labels.personal_section, self.personal_items(application))
        composer.render_section(labels.education_section, self.education_items(application))
        composer.render_section(labels.work_section, self.work_items(application),
                                placeholder=labels.no_experience)
        composer.render_section(labels.additional_section, self.additional_items(application))

        controller.finish()
        logger.info(f"Laid out application {application.id} on {self.surface.page_count} page(s)")
        return self.surface.finish()

    # ── Header ───────────────────────────────────────────────────────────────

    def _draw_banner(self) -> None:
        geometry, palette, spacing = self.theme.geometry, self.theme.palette, self.theme.spacing
        labels = self.theme.labels
        rows = int(spacing.banner_height)
        for i in range(rows):
            color = blend(palette.primary, palette.secondary, i / rows)
            # 1.2pt strips overlap slightly so no hairline gaps show between them
            self.surface.draw_rect(0, i, geometry.width, 1.2, fill=color)
        self.surface.draw_text(0, 18, labels.title, TextStyle(BOLD, 26, palette.white, 1.2),
                               geometry.width, align="center")
        self.surface.draw_text(0, 52, labels.subtitle, TextStyle(REGULAR, 12, palette.white, 1.2),
                               geometry.width, align="center")

    def _draw_photo(self, x: float, y: float, application: Application, photo_bytes: Optional[bytes]) -> None:
        spacing, palette = self.theme.spacing, self.theme.palette
        w, h = spacing.photo_width, spacing.photo_height
        self.surface.draw_rect(x, y, w, h, fill=palette.light_bg, stroke=palette.border, radius=3)
        if photo_bytes:
            try:
                self.surface.draw_image(x + 3, y + 3, w - 6, h - 6, photo_bytes)
                return
            except RenderError as e:
                logger.warning(f"Photo skipped for application {application.id}: {e}")
        self.surface.draw_circle(x + w / 2, y + h / 2 - 12, 14, fill=palette.border)
        self.surface.draw_text(x, y + h - 22, self.theme.labels.photo_missing,
                               TextStyle(REGULAR, 8, palette.placeholder), w, align="center")

    def _draw_pair(self, x: float, y: float, label: str, value: str, value_style: TextStyle) -> None:
        label_style = TextStyle(BOLD, 10, self.theme.palette.text)
        label_w = self.surface.text_width(label, label_style.font, label_style.size)
        self.surface.draw_text(x, y, label, label_style)
        self.surface.draw_text(x + label_w + 6, y, value, value_style)

    def _draw_header(self, application: Application, photo_bytes: Optional[bytes]) -> float:
        """Draw everything above the first section; returns where the flow starts."""
        geometry, palette, spacing = self.theme.geometry, self.theme.palette, self.theme.spacing
        labels = self.theme.labels
        personal = application.personal_info

        self._draw_banner()

        top = spacing.banner_height + 15
        photo_x = geometry.width - geometry.margin_right - spacing.photo_width
        info_width = photo_x - 10 - geometry.margin_left
        self._draw_photo(photo_x, top, application, photo_bytes)

        # info bar: application id + submission date
        self.surface.draw_rect(geometry.margin_left, top, info_width, INFO_BAR_HEIGHT, fill=palette.light_bg)
        text_y = top + (INFO_BAR_HEIGHT - 14) / 2
        self._draw_pair(geometry.margin_left + 10, text_y, labels.application_id, application.id,
                        TextStyle(REGULAR, 10, palette.primary))
        self._draw_pair(geometry.margin_left + info_width / 2 + 10, text_y, labels.date,
                        format_thai_date(application.submitted_at), TextStyle(REGULAR, 10, palette.text))

        # position applied for, on a highlight band
        y = top + INFO_BAR_HEIGHT + 10
        pad = spacing.highlight_padding
        position_style = TextStyle(BOLD, 12, palette.accent)
        band_h = self.fields.measure(labels.position, application.position, info_width - 4 * pad,
                                     value_style=position_style) + 2 * pad
        self.surface.draw_rect(geometry.margin_left, y, info_width, band_h, fill=palette.highlight_bg)
        self.fields.render(
            LayoutCursor(x=geometry.margin_left + 2 * pad, width=info_width - 4 * pad, y=y + pad),
            labels.position,
            application.position,
            info_width - 4 * pad,
            value_style=position_style,
        )
        y += band_h + 8

        y += self.surface.draw_text(geometry.margin_left + 10, y, personal.full_name_local,
                                    TextStyle(BOLD, 15, palette.text, 1.3), info_width - 10)
        y += self.surface.draw_text(geometry.margin_left + 10, y, personal.full_name_latin,
                                    TextStyle(REGULAR, 11, palette.muted, 1.3), info_width - 10)

        bottom = max(y, top + spacing.photo_height) + 10
        self.surface.draw_line(geometry.margin_left, bottom, geometry.width - geometry.margin_right, bottom,
                               palette.border, 1)
        return bottom + 12

    def _draw_running_header(self, page_index: int) -> None:
        geometry, palette = self.theme.geometry, self.theme.palette
        application = self._application
        text = f"{self.theme.labels.title} · {application.personal_info.full_name_local} · {application.id}"
        self.surface.draw_text(geometry.margin_left, RUNNING_HEADER_Y, text,
                               TextStyle(REGULAR, 8, palette.muted, 1.2), geometry.content_width)
        self.surface.draw_line(geometry.margin_left, RUNNING_HEADER_Y + 14,
                               geometry.width - geometry.margin_right, RUNNING_HEADER_Y + 14, palette.border)

    def _draw_footer(self, page_index: int) -> None:
        geometry, palette = self.theme.geometry, self.theme.palette
        style = self.theme.footer_style
        y = geometry.footer_y
        self.surface.draw_line(geometry.margin_left, y - 10, geometry.width - geometry.margin_right, y - 10,
                               palette.border, 0.5)
        self.surface.draw_text(0, y, self.theme.labels.footer, style, geometry.width, align="center")
        page_label = f"{self.theme.labels.page} {page_index + 1}"
        label_w = self.surface.text_width(page_label, style.font, style.size)
        self.surface.draw_text(geometry.width - geometry.margin_right - label_w, y, page_label, style)

    # ── Section content ──────────────────────────────────────────────────────

    def personal_items(self, application: Application) -> List[SectionItem]:
        labels = self.theme.labels
        p = application.personal_info
        birth = f"{p.birth_date} ({p.age} {labels.age_suffix})"
        columns = ColumnsItem(
            left=[
                FieldItem(labels.full_name_local, p.full_name_local),
                FieldItem(labels.gender, p.gender),
                FieldItem(labels.nationality, p.nationality),
                FieldItem(labels.religion, p.religion),
                FieldItem(labels.phone, p.phone),
            ],
            right=[
                FieldItem(labels.full_name_latin, p.full_name_latin),
                FieldItem(labels.birth_date, birth),
                FieldItem(labels.ethnicity, p.ethnicity),
                FieldItem(labels.national_id, p.national_id),
                FieldItem(labels.messaging_id, p.messaging_id),
            ],
        )
        return [
            columns,
            FieldItem(labels.email, p.email),
            FieldItem(labels.address, p.address.full_text),
            FieldItem(labels.locality, p.address.locality),
        ]

    def education_items(self, application: Application) -> List[SectionItem]:
        labels = self.theme.labels
        education = application.education
        slots = [
            (labels.secondary, education.secondary),
            (labels.vocational, education.vocational),
            (labels.bachelor, education.bachelor),
            (labels.other_education, education.other),
        ]
        items: List[SectionItem] = [
            RecordItem(Record(title, [
                RecordField(labels.school, entry.school_name),
                RecordField(labels.major, entry.major),
                RecordField(labels.graduation_year, entry.graduation_year),
            ]))
            for title, entry in slots
            if not entry.is_empty
        ]
        if not items:
            items.append(PlaceholderItem(labels.no_education))
        items.append(HighlightItem(labels.education_used, education.education_used))
        return items

    def work_items(self, application: Application) -> List[SectionItem]:
        labels = self.theme.labels
        items: List[SectionItem] = []
        for number, work in enumerate(application.work_experience, start=1):
            duration = f"{work.start_date or '-'} {labels.duration_join} {work.end_date or '-'}"
            items.append(RecordItem(Record(labels.experience_title.format(number=number), [
                RecordField(labels.company, work.company),
                RecordField(labels.work_position, work.position or "-"),
                RecordField(labels.duration, duration),
                RecordField(labels.reason, work.reason_for_leaving or "-"),
            ])))
        return items

    def additional_items(self, application: Application) -> List[SectionItem]:
        labels = self.theme.labels
        info = application.additional_info
        items: List[SectionItem] = []
        # details are only meaningful next to their yes/no answer
        if info.has_medical_condition:
            items.append(FieldItem(labels.medical_condition, info.has_medical_condition))
            items.append(FieldItem(labels.detail, info.medical_detail))
        if info.has_criminal_record:
            items.append(FieldItem(labels.criminal_record, info.has_criminal_record))
            items.append(FieldItem(labels.detail, info.criminal_detail))
        salary = f"{info.expected_salary} {labels.currency}" if info.expected_salary else None
        items.extend([
            FieldItem(labels.special_skills, info.special_skills),
            FieldItem(labels.expected_salary, salary),
            FieldItem(labels.start_date, info.available_start_date),
            ParagraphItem(labels.motivation, info.motivation_statement),
        ])
        return items


def render_application_pdf(
    application: Application,
    photo_bytes: Optional[bytes] = None,
    fonts: FontSet = BUILTIN_FONTS,
    theme: Theme = DEFAULT_THEME,
) -> bytes:
    """Render an application to PDF bytes. Fonts must already be loaded."""
    surface = FitzSurface(fonts, theme.geometry)
    logger.info(f"Generating PDF for application {application.id}...")
    return DocumentAssembler(surface, theme).render(application, photo_bytes)
