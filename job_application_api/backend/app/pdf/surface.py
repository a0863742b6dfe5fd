"""
Rendering backend: the primitive drawing surface the layout engine targets.

`Surface` is the contract (text, rectangles, lines, circles, images, pages);
`FitzSurface` implements it on PyMuPDF. Coordinates are PDF points with the
origin at the top-left of the page, y growing downwards.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional

import fitz  # PyMuPDF

from app.core.errors import RenderError, ResourceAcquisitionError
from app.pdf.measure import TextBlock, measure_text
from app.pdf.theme import BOLD, REGULAR, Color, PageGeometry, TextStyle

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FontFace:
    """A font registered under `name`; `buffer` is TTF data, or None for a PDF base-14 font."""
    name: str
    buffer: Optional[bytes] = None


@dataclass(frozen=True)
class FontSet:
    regular: FontFace
    bold: FontFace

    def faces(self) -> Dict[str, FontFace]:
        return {REGULAR: self.regular, BOLD: self.bold}


# Helvetica ships with every PDF viewer; Latin-only, no Thai glyphs
BUILTIN_FONTS = FontSet(regular=FontFace("helv"), bold=FontFace("hebo"))


class Surface(ABC):
    """Primitive drawing operations the layout engine is written against."""

    def __init__(self, geometry: PageGeometry):
        self.geometry = geometry

    @property
    @abstractmethod
    def page_count(self) -> int:
        ...

    @abstractmethod
    def text_width(self, text: str, font: str, size: float) -> float:
        ...

    @abstractmethod
    def new_page(self) -> None:
        ...

    @abstractmethod
    def draw_text_line(self, x: float, y: float, text: str, style: TextStyle) -> None:
        """Draw one line of text whose line box starts at y."""

    @abstractmethod
    def draw_rect(
        self,
        x: float,
        y: float,
        width: float,
        height: float,
        fill: Optional[Color] = None,
        stroke: Optional[Color] = None,
        radius: float = 0,
        line_width: float = 0.5,
    ) -> None:
        ...

    @abstractmethod
    def draw_line(self, x0: float, y0: float, x1: float, y1: float, color: Color, width: float = 0.5) -> None:
        ...

    @abstractmethod
    def draw_circle(self, cx: float, cy: float, radius: float, fill: Optional[Color] = None,
                    stroke: Optional[Color] = None) -> None:
        ...

    @abstractmethod
    def draw_image(self, x: float, y: float, width: float, height: float, data: bytes) -> None:
        """Fit an encoded image into the box, keeping proportions. Raises RenderError."""

    @abstractmethod
    def finish(self) -> bytes:
        """Serialize the document. The surface is unusable afterwards."""

    # Shared behaviour built on the primitives

    def measure(self, text: Optional[str], style: TextStyle, max_width: Optional[float] = None) -> TextBlock:
        return measure_text(text, style, max_width, self.text_width)

    def draw_lines(self, x: float, y: float, lines: List[str], style: TextStyle,
                   box_width: Optional[float] = None, align: str = "left") -> float:
        """Draw pre-wrapped lines; returns the height consumed."""
        for i, line in enumerate(lines):
            line_x = x
            if align == "center" and box_width is not None:
                line_x = x + (box_width - self.text_width(line, style.font, style.size)) / 2
            self.draw_text_line(line_x, y + i * style.line_height, line, style)
        return len(lines) * style.line_height

    def draw_text(self, x: float, y: float, text: Optional[str], style: TextStyle,
                  max_width: Optional[float] = None, align: str = "left") -> float:
        """Wrap and draw text at (x, y); returns the height consumed (0 for empty text)."""
        block = self.measure(text, style, max_width)
        return self.draw_lines(x, y, block.lines, style, box_width=max_width, align=align)


class FitzSurface(Surface):
    """PyMuPDF-backed surface producing a PDF."""

    def __init__(self, fonts: FontSet, geometry: Optional[PageGeometry] = None):
        super().__init__(geometry or PageGeometry())
        self._faces = fonts.faces()
        self._metrics: Dict[str, fitz.Font] = {}
        for key, face in self._faces.items():
            try:
                if face.buffer is not None:
                    self._metrics[key] = fitz.Font(fontbuffer=face.buffer)
                else:
                    self._metrics[key] = fitz.Font(fontname=face.name)
            except Exception as e:
                raise ResourceAcquisitionError(face.name, f"font could not be loaded: {e}") from e
        self.doc = fitz.open()
        self._page = None

    @property
    def page_count(self) -> int:
        return self.doc.page_count

    @property
    def page(self):
        if self._page is None:
            raise RenderError("No page started; call new_page() first")
        return self._page

    def text_width(self, text: str, font: str, size: float) -> float:
        return self._metrics[font].text_length(text, fontsize=size)

    def new_page(self) -> None:
        self._page = self.doc.new_page(width=self.geometry.width, height=self.geometry.height)
        for face in self._faces.values():
            if face.buffer is not None:
                self._page.insert_font(fontname=face.name, fontbuffer=face.buffer)

    def draw_text_line(self, x: float, y: float, text: str, style: TextStyle) -> None:
        if not text:
            return
        font = self._metrics[style.font]
        # centre the glyph box vertically inside the line box
        baseline = y + (style.line_height - style.size) / 2 + style.size * font.ascender
        self.page.insert_text(
            fitz.Point(x, baseline),
            text,
            fontname=self._faces[style.font].name,
            fontsize=style.size,
            color=style.color,
        )

    def draw_rect(self, x, y, width, height, fill=None, stroke=None, radius=0, line_width=0.5) -> None:
        rect = fitz.Rect(x, y, x + width, y + height)
        corner = None
        if radius and width > 0 and height > 0:
            # PyMuPDF wants the radius as a fraction of each side, at most 0.5
            corner = (min(radius / width, 0.5), min(radius / height, 0.5))
        self.page.draw_rect(
            rect,
            color=stroke,
            fill=fill,
            width=line_width if stroke is not None else 0,
            radius=corner,
        )

    def draw_line(self, x0, y0, x1, y1, color, width=0.5) -> None:
        self.page.draw_line(fitz.Point(x0, y0), fitz.Point(x1, y1), color=color, width=width)

    def draw_circle(self, cx, cy, radius, fill=None, stroke=None) -> None:
        self.page.draw_circle(
            fitz.Point(cx, cy),
            radius,
            color=stroke,
            fill=fill,
            width=0.5 if stroke is not None else 0,
        )

    def draw_image(self, x, y, width, height, data) -> None:
        rect = fitz.Rect(x, y, x + width, y + height)
        try:
            self.page.insert_image(rect, stream=data, keep_proportion=True)
        except Exception as e:
            raise RenderError(f"Image could not be placed: {e}") from e

    def finish(self) -> bytes:
        try:
            data = self.doc.tobytes(garbage=3, deflate=True)
        finally:
            self.doc.close()
        logger.info(f"Serialized PDF: {len(data)} bytes")
        return data
