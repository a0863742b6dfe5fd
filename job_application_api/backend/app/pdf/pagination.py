"""
Pagination controller — decides when content spills onto a new page.

Two states: FLOWING (units are placed as they come) and PAGINATING (a page
break is being emitted). Before a unit is placed its full height is known;
if `cursor.y + height > content_bottom` the current page is finished (footer
hook), a new page is requested, every active cursor is reset to the top
content margin, and the unit is then placed on the fresh page.

Columns: each column has its own cursor and its own overflow check, but all
columns share one page stream. A break triggered by any column emits exactly
one new page and resets every cursor together.
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterator, List, Optional

from app.pdf.surface import Surface
from app.pdf.theme import PageGeometry

logger = logging.getLogger(__name__)

PageHook = Callable[[int], None]


class FlowState(Enum):
    FLOWING = "flowing"
    PAGINATING = "paginating"


@dataclass
class LayoutCursor:
    """Running position inside one column of the current page."""
    x: float
    width: float
    y: float

    def advance(self, height: float) -> None:
        if height < 0:
            raise ValueError("Cursor only moves down the page")
        self.y += height


class PaginationController:
    def __init__(
        self,
        surface: Surface,
        geometry: Optional[PageGeometry] = None,
        on_page_end: Optional[PageHook] = None,
        on_page_start: Optional[PageHook] = None,
    ):
        self.surface = surface
        self.geometry = geometry or surface.geometry
        self.on_page_end = on_page_end
        self.on_page_start = on_page_start
        self.state = FlowState.FLOWING
        self.page_index = -1
        self.break_count = 0
        self.flow = LayoutCursor(
            x=self.geometry.margin_left,
            width=self.geometry.content_width,
            y=self.geometry.content_top,
        )
        self._active: List[LayoutCursor] = [self.flow]

    @property
    def content_top(self) -> float:
        return self.geometry.content_top

    @property
    def content_bottom(self) -> float:
        return self.geometry.content_bottom

    def start(self, first_y: Optional[float] = None) -> None:
        """Open the first page. `first_y` lets page one start below a banner."""
        if self.page_index >= 0:
            raise RuntimeError("Document already started")
        self.surface.new_page()
        self.page_index = 0
        self.flow.y = self.content_top if first_y is None else first_y

    def finish(self) -> None:
        """Close the last page (runs the page-end hook once more)."""
        if self.on_page_end:
            self.on_page_end(self.page_index)

    # ── Queries ──────────────────────────────────────────────────────────────

    def remaining(self, cursor: Optional[LayoutCursor] = None) -> float:
        cursor = cursor or self.flow
        return self.content_bottom - cursor.y

    def fits(self, height: float, cursor: Optional[LayoutCursor] = None) -> bool:
        # boundary inclusive: exactly filling the page still fits
        cursor = cursor or self.flow
        return cursor.y + height <= self.content_bottom

    def at_page_top(self, cursor: Optional[LayoutCursor] = None) -> bool:
        cursor = cursor or self.flow
        return cursor.y <= self.content_top

    # ── Transitions ──────────────────────────────────────────────────────────

    def break_page(self) -> None:
        """FLOWING -> PAGINATING -> FLOWING: finish this page, start the next."""
        self.state = FlowState.PAGINATING
        if self.on_page_end:
            self.on_page_end(self.page_index)
        self.surface.new_page()
        self.page_index += 1
        self.break_count += 1
        for cursor in self._active:
            cursor.y = self.content_top
        if self.on_page_start:
            self.on_page_start(self.page_index)
        self.state = FlowState.FLOWING
        logger.debug(f"Page break -> page {self.page_index + 1}")

    def ensure_room(self, height: float, cursor: Optional[LayoutCursor] = None) -> bool:
        """
        Break the page if a unit of `height` does not fit under `cursor`.
        Returns True when a break happened. A unit taller than a whole page
        is not chased across pages: on a fresh page it is simply placed.
        """
        cursor = cursor or self.flow
        if self.fits(height, cursor) or self.at_page_top(cursor):
            return False
        self.break_page()
        return True

    def place(self, height: float, draw: Callable[[LayoutCursor], None],
              cursor: Optional[LayoutCursor] = None) -> None:
        """Check-then-place one atomic unit and advance past it."""
        cursor = cursor or self.flow
        self.ensure_room(height, cursor)
        draw(cursor)
        cursor.advance(height)

    @contextmanager
    def columns(self, count: int) -> Iterator[List[LayoutCursor]]:
        """
        Split the flow into `count` side-by-side cursors starting at the
        current flow position. On exit the flow continues below the
        tallest column.
        """
        cols = [
            LayoutCursor(x=x, width=width, y=self.flow.y)
            for x, width in self.geometry.column_boxes(count)
        ]
        self._active = [self.flow] + cols
        try:
            yield cols
        finally:
            self._active = [self.flow]
        self.flow.y = max([self.flow.y] + [c.y for c in cols])
