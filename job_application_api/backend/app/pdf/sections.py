"""
Section composer — a titled region of the document.

Items are placed one by one under the header, each asking the pagination
controller for room first. The header is kept together with the first item,
and a section never disappears: with nothing to show it still prints its
header and a placeholder line.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Union

from app.pdf.fields import FieldMode, FieldRenderer, is_blank
from app.pdf.pagination import LayoutCursor, PaginationController
from app.pdf.records import Record, RecordRenderer
from app.pdf.surface import Surface
from app.pdf.theme import Color, TextStyle, Theme

logger = logging.getLogger(__name__)


# ─── Items ───────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class FieldItem:
    label: str
    value: Optional[str]
    mode: FieldMode = FieldMode.INLINE


@dataclass(frozen=True)
class RecordItem:
    record: Record


@dataclass(frozen=True)
class HighlightItem:
    """A label/value line on a tinted band (position applied, credential used)."""
    label: str
    value: Optional[str]
    value_color: Optional[Color] = None


@dataclass(frozen=True)
class ParagraphItem:
    """Free text on a tinted block; may continue across pages line by line."""
    label: str
    text: Optional[str]


@dataclass(frozen=True)
class PlaceholderItem:
    text: str


@dataclass(frozen=True)
class ColumnsItem:
    """Two independent field columns flowing side by side."""
    left: Sequence[FieldItem] = field(default_factory=list)
    right: Sequence[FieldItem] = field(default_factory=list)


SectionItem = Union[FieldItem, RecordItem, HighlightItem, ParagraphItem, PlaceholderItem, ColumnsItem]


class SectionComposer:
    def __init__(self, surface: Surface, theme: Theme, controller: PaginationController):
        self.surface = surface
        self.theme = theme
        self.controller = controller
        self.fields = FieldRenderer(surface, theme)
        self.records = RecordRenderer(surface, theme, self.fields)

    @property
    def width(self) -> float:
        return self.controller.flow.width

    # ── Header ───────────────────────────────────────────────────────────────

    def begin_section(self, title: str) -> float:
        """Draw the header bar at the flow cursor and advance past it."""
        spacing = self.theme.spacing
        cursor = self.controller.flow
        style = self.theme.section_style
        self.surface.draw_rect(cursor.x, cursor.y, cursor.width, spacing.section_bar_height,
                               fill=self.theme.palette.primary)
        self.surface.draw_text(
            cursor.x + 10,
            cursor.y + (spacing.section_bar_height - style.line_height) / 2,
            title,
            style,
            cursor.width - 20,
        )
        cursor.advance(spacing.section_header_height)
        return spacing.section_header_height

    # ── Measuring ────────────────────────────────────────────────────────────

    def _column_label_width(self) -> float:
        return self.theme.spacing.column_label_width

    def measure_item(self, item: SectionItem, width: Optional[float] = None) -> float:
        """Full height of an item; 0 means it has nothing to show."""
        width = width if width is not None else self.width
        spacing = self.theme.spacing
        if isinstance(item, FieldItem):
            return self.fields.measure(item.label, item.value, width, item.mode)
        if isinstance(item, RecordItem):
            return self.records.measure(item.record, width)
        if isinstance(item, HighlightItem):
            if is_blank(item.value):
                return 0.0
            inner = width - 4 * spacing.highlight_padding
            h = self.fields.measure(item.label, item.value, inner, FieldMode.INLINE,
                                    value_style=self._highlight_value_style(item))
            return h + 2 * spacing.highlight_padding
        if isinstance(item, ParagraphItem):
            if is_blank(item.text):
                return 0.0
            inner = width - 2 * spacing.paragraph_padding
            label_h = self.surface.measure(item.label, self.theme.highlight_label_style, inner).height
            text_h = self.surface.measure(item.text, self.theme.value_style, inner).height
            return label_h + text_h + 2 * spacing.paragraph_padding
        if isinstance(item, PlaceholderItem):
            return self.surface.measure(item.text, self.theme.placeholder_style, width - 10).height
        if isinstance(item, ColumnsItem):
            cols = self.controller.geometry.column_boxes(2)
            heights = []
            for (_, col_width), items in zip(cols, (item.left, item.right)):
                hs = [self.fields.measure(f.label, f.value, col_width, f.mode, self._column_label_width())
                      for f in items]
                hs = [h for h in hs if h > 0]
                heights.append(sum(hs) + spacing.field_gap * max(len(hs) - 1, 0))
            return max(heights)
        raise TypeError(f"Unknown section item: {type(item).__name__}")

    def _lead_height(self, item: SectionItem) -> float:
        """Height that must fit under the header so the header is not orphaned."""
        if isinstance(item, ColumnsItem):
            cols = self.controller.geometry.column_boxes(2)
            firsts = []
            for (_, col_width), items in zip(cols, (item.left, item.right)):
                for f in items:
                    h = self.fields.measure(f.label, f.value, col_width, f.mode, self._column_label_width())
                    if h > 0:
                        firsts.append(h)
                        break
            return max(firsts, default=0.0)
        if isinstance(item, ParagraphItem):
            inner = self.width - 2 * self.theme.spacing.paragraph_padding
            label_h = self.surface.measure(item.label, self.theme.highlight_label_style, inner).height
            return label_h + self.theme.value_style.line_height + 2 * self.theme.spacing.paragraph_padding
        if self._is_oversized(item):
            rows = self.records.rows(item.record, self.width)
            return self.records.segment_height(rows[:1], with_title=True)
        return self.measure_item(item)

    def _highlight_value_style(self, item: HighlightItem) -> TextStyle:
        style = self.theme.value_style
        if item.value_color is None:
            return style
        return TextStyle(style.font, style.size + 1, item.value_color, style.leading)

    # ── Drawing ──────────────────────────────────────────────────────────────

    def _draw_highlight(self, cursor: LayoutCursor, item: HighlightItem, height: float) -> None:
        pad = self.theme.spacing.highlight_padding
        self.surface.draw_rect(cursor.x, cursor.y, cursor.width, height, fill=self.theme.palette.highlight_bg)
        self.fields.render(
            LayoutCursor(x=cursor.x + 2 * pad, width=cursor.width - 4 * pad, y=cursor.y + pad),
            item.label,
            item.value,
            cursor.width - 4 * pad,
            FieldMode.INLINE,
            value_style=self._highlight_value_style(item),
        )

    def _draw_item(self, cursor: LayoutCursor, item: SectionItem, height: float) -> None:
        if isinstance(item, FieldItem):
            self.fields.render(cursor, item.label, item.value, cursor.width, item.mode)
        elif isinstance(item, RecordItem):
            self.records.render(cursor, item.record, cursor.width)
        elif isinstance(item, HighlightItem):
            self._draw_highlight(cursor, item, height)
        elif isinstance(item, PlaceholderItem):
            self.surface.draw_text(cursor.x + 10, cursor.y, item.text, self.theme.placeholder_style,
                                   cursor.width - 10)
        else:
            raise TypeError(f"Cannot place {type(item).__name__} as a single unit")

    def _gap_after(self, item: SectionItem) -> float:
        spacing = self.theme.spacing
        if isinstance(item, RecordItem):
            return spacing.record_gap
        if isinstance(item, (HighlightItem, ParagraphItem)):
            return spacing.field_gap * 2
        return spacing.field_gap

    def _page_height(self) -> float:
        return self.controller.content_bottom - self.controller.content_top

    def _is_oversized(self, item: SectionItem) -> bool:
        return isinstance(item, RecordItem) and self.measure_item(item) > self._page_height()

    def place_item(self, item: SectionItem) -> None:
        if isinstance(item, ColumnsItem):
            self.render_columns(item.left, item.right)
        elif isinstance(item, ParagraphItem):
            self._place_paragraph(item)
        elif self._is_oversized(item):
            logger.debug(f"Record '{item.record.title}' is taller than a page; splitting by line")
            self._place_split_record(item.record)
        else:
            height = self.measure_item(item)
            self.controller.place(height, lambda cursor: self._draw_item(cursor, item, height))
        self.controller.flow.advance(self._gap_after(item))

    def _place_paragraph(self, item: ParagraphItem) -> None:
        """Flow a text block, splitting it between lines when a page fills up."""
        spacing = self.theme.spacing
        palette = self.theme.palette
        pad = spacing.paragraph_padding
        inner = self.width - 2 * pad
        label_style = self.theme.highlight_label_style
        text_style = self.theme.value_style
        label_h = self.surface.measure(item.label, label_style, inner).height
        lines = self.surface.measure(item.text, text_style, inner).lines

        first = True
        while lines:
            cursor = self.controller.flow
            head = label_h if first else 0.0
            fit = int((self.controller.remaining(cursor) - head - 2 * pad) // text_style.line_height)
            if fit < 1:
                if not self.controller.at_page_top(cursor):
                    self.controller.break_page()
                    continue
                fit = 1
            chunk, lines = lines[:fit], lines[fit:]
            height = head + len(chunk) * text_style.line_height + 2 * pad
            self.surface.draw_rect(cursor.x, cursor.y, cursor.width, height, fill=palette.card_header)
            y = cursor.y + pad
            if first:
                y += self.surface.draw_text(cursor.x + pad, y, item.label, label_style, inner)
            self.surface.draw_lines(cursor.x + pad, y, chunk, text_style)
            cursor.advance(height)
            first = False
            if lines:
                self.controller.break_page()

    def _place_split_record(self, record: Record) -> None:
        """Flow a card that cannot fit on any page as one segment per page."""
        rows = self.records.rows(record, self.width)
        title: Optional[str] = record.title
        while rows:
            cursor = self.controller.flow
            room = self.controller.remaining(cursor) - self.records.segment_height([], title is not None)
            count, used = 0, 0.0
            while count < len(rows) and used + rows[count].height <= room:
                used += rows[count].height
                count += 1
            if count == 0:
                if not self.controller.at_page_top(cursor):
                    self.controller.break_page()
                    continue
                count = 1
            chunk, rows = rows[:count], rows[count:]
            cursor.advance(self.records.render_segment(cursor, title, chunk, cursor.width))
            title = None
            if rows:
                self.controller.break_page()

    def render_columns(self, left: Sequence[FieldItem], right: Sequence[FieldItem]) -> None:
        """
        Lay out two field columns. Items are visited row by row so draw order
        follows reading order, but each column keeps its own cursor and makes
        its own overflow decision.
        """
        gap = self.theme.spacing.field_gap
        label_width = self._column_label_width()
        with self.controller.columns(2) as (left_col, right_col):
            for row in range(max(len(left), len(right))):
                for col, items in ((left_col, left), (right_col, right)):
                    if row >= len(items):
                        continue
                    item = items[row]
                    height = self.fields.measure(item.label, item.value, col.width, item.mode, label_width)
                    if height == 0:
                        continue
                    self.controller.place(
                        height,
                        lambda cursor, item=item: self.fields.render(
                            cursor, item.label, item.value, cursor.width, item.mode, label_width),
                        cursor=col,
                    )
                    col.advance(gap)

    # ── Sections ─────────────────────────────────────────────────────────────

    def render_section(self, title: str, items: Sequence[SectionItem],
                       placeholder: Optional[str] = None) -> None:
        """Header plus every item that has something to show (or one placeholder line)."""
        qualifying: List[SectionItem] = [i for i in items if self.measure_item(i) > 0]
        if not qualifying:
            qualifying = [PlaceholderItem(placeholder or self.theme.labels.no_data)]
            logger.debug(f"Section '{title}' has no data; drawing placeholder")

        self.controller.ensure_room(self.theme.spacing.section_header_height + self._lead_height(qualifying[0]))
        self.begin_section(title)
        for item in qualifying:
            self.place_item(item)
        self.controller.flow.advance(self.theme.spacing.section_gap)
