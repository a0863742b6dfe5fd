"""
Text measurement: soft-wrap a string to a width and report its size.

The same wrapped lines are what the surface draws, so a measured height is
exactly the height that ends up on the page.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional

from app.pdf.theme import TextStyle

# (text, font_key, size) -> width in points
WidthFunc = Callable[[str, str, float], float]


@dataclass(frozen=True)
class TextBlock:
    lines: List[str]
    width: float
    height: float

    @property
    def is_empty(self) -> bool:
        return not self.lines


EMPTY_BLOCK = TextBlock(lines=[], width=0.0, height=0.0)


def _break_word(word: str, max_width: float, width_of: Callable[[str], float]) -> List[str]:
    """Split a word that is wider than the line, one character at a time."""
    pieces: List[str] = []
    current = ""
    for ch in word:
        if current and width_of(current + ch) > max_width:
            pieces.append(current)
            current = ch
        else:
            current += ch
    if current:
        pieces.append(current)
    return pieces


def wrap_text(text: str, max_width: Optional[float], width_of: Callable[[str], float]) -> List[str]:
    """
    Greedy word wrap. Explicit newlines start new lines; words wider than
    max_width (long URLs, Thai runs without spaces) are broken per character.
    """
    paragraphs = text.split("\n")
    if max_width is None:
        return [" ".join(p.split()) for p in paragraphs]

    lines: List[str] = []
    for paragraph in paragraphs:
        current = ""
        for word in paragraph.split():
            candidate = f"{current} {word}" if current else word
            if width_of(candidate) <= max_width:
                current = candidate
                continue
            if current:
                lines.append(current)
                current = ""
            if width_of(word) <= max_width:
                current = word
            else:
                *full, current = _break_word(word, max_width, width_of)
                lines.extend(full)
        lines.append(current)
    return lines


def measure_text(
    text: Optional[str],
    style: TextStyle,
    max_width: Optional[float],
    text_width: WidthFunc,
) -> TextBlock:
    """Wrap `text` at `max_width` using the style's font metrics."""
    if text is None or not str(text).strip():
        return EMPTY_BLOCK

    def width_of(s: str) -> float:
        return text_width(s, style.font, style.size)

    lines = wrap_text(str(text).strip(), max_width, width_of)
    widest = max((width_of(line) for line in lines), default=0.0)
    return TextBlock(lines=lines, width=widest, height=len(lines) * style.line_height)
