"""
Field renderer — one label/value pair.

Skip-if-empty: a blank value draws nothing and consumes no height.
The renderer never breaks pages; it only reports heights.
"""

from enum import Enum
from typing import Optional

from app.pdf.pagination import LayoutCursor
from app.pdf.surface import Surface
from app.pdf.theme import Theme, TextStyle

LABEL_GAP = 6


class FieldMode(Enum):
    INLINE = "inline"    # label column, value wrapped beside it
    STACKED = "stacked"  # label line, value block underneath


def is_blank(value) -> bool:
    return value is None or not str(value).strip()


class FieldRenderer:
    def __init__(self, surface: Surface, theme: Theme):
        self.surface = surface
        self.theme = theme

    def label_column(self, max_width: float, label_width: Optional[float] = None) -> float:
        width = label_width if label_width is not None else self.theme.spacing.label_width
        # never let the label column eat more than half the field
        return min(width, max_width / 2)

    def measure(
        self,
        label: str,
        value,
        max_width: float,
        mode: FieldMode = FieldMode.INLINE,
        label_width: Optional[float] = None,
        value_style: Optional[TextStyle] = None,
    ) -> float:
        if is_blank(value):
            return 0.0
        value_style = value_style or self.theme.value_style
        label_style = self.theme.label_style
        if mode is FieldMode.INLINE:
            col = self.label_column(max_width, label_width)
            label_block = self.surface.measure(label, label_style, col - LABEL_GAP)
            value_block = self.surface.measure(str(value), value_style, max_width - col)
            return max(label_block.height, value_block.height)
        label_block = self.surface.measure(label, label_style, max_width)
        value_block = self.surface.measure(str(value), value_style, max_width)
        return label_block.height + value_block.height

    def render(
        self,
        cursor: LayoutCursor,
        label: str,
        value,
        max_width: float,
        mode: FieldMode = FieldMode.INLINE,
        label_width: Optional[float] = None,
        value_style: Optional[TextStyle] = None,
    ) -> float:
        """Draw the field at the cursor (without moving it); returns the height used."""
        if is_blank(value):
            return 0.0
        value_style = value_style or self.theme.value_style
        label_style = self.theme.label_style
        x, y = cursor.x, cursor.y
        if mode is FieldMode.INLINE:
            col = self.label_column(max_width, label_width)
            label_h = self.surface.draw_text(x, y, label, label_style, col - LABEL_GAP)
            value_h = self.surface.draw_text(x + col, y, str(value), value_style, max_width - col)
            return max(label_h, value_h)
        label_h = self.surface.draw_text(x, y, label, label_style, max_width)
        value_h = self.surface.draw_text(x, y + label_h, str(value), value_style, max_width)
        return label_h + value_h
