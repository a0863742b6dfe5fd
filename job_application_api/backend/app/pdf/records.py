"""
Record block renderer — a boxed card holding one repeated entry
(an education credential, a work-experience entry).

The card's full height is known before anything is drawn, so the caller can
place it as one atomic unit. A card taller than a whole page is the one
exception: it is broken into single-line rows and drawn as consecutive
card segments, one per page.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from app.pdf.fields import LABEL_GAP, FieldMode, FieldRenderer, is_blank
from app.pdf.pagination import LayoutCursor
from app.pdf.surface import Surface
from app.pdf.theme import Theme


@dataclass(frozen=True)
class RecordField:
    label: str
    value: Optional[str]


@dataclass(frozen=True)
class Record:
    title: str
    fields: Sequence[RecordField]

    def filled_fields(self) -> List[RecordField]:
        return [f for f in self.fields if not is_blank(f.value)]


@dataclass(frozen=True)
class RecordRow:
    """One line of a card body: a label line, a value line, or both side by side."""
    label: str
    value: str
    height: float
    gap: float = 0.0


class RecordRenderer:
    def __init__(self, surface: Surface, theme: Theme, fields: FieldRenderer):
        self.surface = surface
        self.theme = theme
        self.fields = fields

    def _inner_width(self, width: float) -> float:
        return width - 2 * self.theme.spacing.record_padding

    def _label_width(self, width: float) -> float:
        return min(self.theme.spacing.label_width, self._inner_width(width) / 3)

    def _body_height(self, record: Record, width: float) -> float:
        spacing = self.theme.spacing
        inner = self._inner_width(width)
        heights = [
            self.fields.measure(f.label, f.value, inner, FieldMode.INLINE, self._label_width(width))
            for f in record.filled_fields()
        ]
        if not heights:
            return self.theme.placeholder_style.line_height
        return sum(heights) + spacing.field_gap * (len(heights) - 1)

    def measure(self, record: Record, width: float) -> float:
        spacing = self.theme.spacing
        return (
            spacing.record_title_height
            + 2 * spacing.record_padding
            + self._body_height(record, width)
        )

    def _draw_frame(self, x: float, y: float, width: float, height: float, title: Optional[str]) -> float:
        """Card background plus, when `title` is given, the title bar. Returns the title bar height."""
        spacing = self.theme.spacing
        palette = self.theme.palette
        self.surface.draw_rect(x, y, width, height, fill=palette.card_bg, stroke=palette.border,
                               radius=spacing.record_radius)
        if title is None:
            return 0.0
        self.surface.draw_rect(x, y, width, spacing.record_title_height, fill=palette.card_header)
        title_style = self.theme.record_title_style
        self.surface.draw_text(
            x + spacing.record_padding + 2,
            y + (spacing.record_title_height - title_style.line_height) / 2,
            title,
            title_style,
            self._inner_width(width),
        )
        return spacing.record_title_height

    def render(self, cursor: LayoutCursor, record: Record, width: float) -> float:
        """Draw the card at the cursor; returns its height (same as measure())."""
        spacing = self.theme.spacing
        height = self.measure(record, width)
        x, y = cursor.x, cursor.y

        inner = self._inner_width(width)
        field_y = y + self._draw_frame(x, y, width, height, record.title) + spacing.record_padding
        filled = record.filled_fields()
        if not filled:
            self.surface.draw_text(x + spacing.record_padding, field_y, self.theme.labels.no_data,
                                   self.theme.placeholder_style, inner)
        for f in filled:
            used = self.fields.render(
                LayoutCursor(x=x + spacing.record_padding, width=inner, y=field_y),
                f.label,
                f.value,
                inner,
                FieldMode.INLINE,
                self._label_width(width),
            )
            field_y += used + spacing.field_gap
        return height

    # ── Cards taller than a page ─────────────────────────────────────────────

    def rows(self, record: Record, width: float) -> List[RecordRow]:
        """The card body as single-line rows, label lines beside value lines."""
        spacing = self.theme.spacing
        inner = self._inner_width(width)
        col = self.fields.label_column(inner, self._label_width(width))
        label_style = self.theme.label_style
        value_style = self.theme.value_style

        rows: List[RecordRow] = []
        for index, f in enumerate(record.filled_fields()):
            label_lines = self.surface.measure(f.label, label_style, col - LABEL_GAP).lines
            value_lines = self.surface.measure(str(f.value), value_style, inner - col).lines
            for n in range(max(len(label_lines), len(value_lines))):
                height = max(
                    label_style.line_height if n < len(label_lines) else 0.0,
                    value_style.line_height if n < len(value_lines) else 0.0,
                )
                gap = spacing.field_gap if index and n == 0 else 0.0
                rows.append(RecordRow(
                    label=label_lines[n] if n < len(label_lines) else "",
                    value=value_lines[n] if n < len(value_lines) else "",
                    height=height + gap,
                    gap=gap,
                ))
        return rows

    def segment_height(self, rows: Sequence[RecordRow], with_title: bool) -> float:
        spacing = self.theme.spacing
        head = spacing.record_title_height if with_title else 0.0
        return head + 2 * spacing.record_padding + sum(r.height for r in rows)

    def render_segment(self, cursor: LayoutCursor, title: Optional[str], rows: Sequence[RecordRow],
                       width: float) -> float:
        """Draw one page's share of a split card; the title bar only on the first segment."""
        spacing = self.theme.spacing
        height = self.segment_height(rows, title is not None)
        x = cursor.x
        col = self.fields.label_column(self._inner_width(width), self._label_width(width))

        row_y = cursor.y + self._draw_frame(x, cursor.y, width, height, title) + spacing.record_padding
        for row in rows:
            row_y += row.gap
            if row.label:
                self.surface.draw_text_line(x + spacing.record_padding, row_y, row.label,
                                            self.theme.label_style)
            if row.value:
                self.surface.draw_text_line(x + spacing.record_padding + col, row_y, row.value,
                                            self.theme.value_style)
            row_y += row.height - row.gap
        return height
