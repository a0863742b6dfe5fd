"""Tests for the pagination controller: boundaries, atomic units, shared column breaks."""

import sys
import os

import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from app.pdf.pagination import FlowState, LayoutCursor, PaginationController
from app.pdf.theme import PageGeometry

# whole-point bounds so boundary arithmetic is exact: content area 50..740
GEOMETRY = PageGeometry(width=600, height=800, margin_left=40, margin_right=40, margin_top=50,
                        margin_bottom=20, footer_reserve=40)


def record_draws(log):
    def draw(cursor):
        log.append((cursor.x, cursor.y))
    return draw


@pytest.fixture
def controller(surface):
    c = PaginationController(surface, GEOMETRY)
    c.start()
    return c


class TestBoundary:

    def test_unit_ending_exactly_at_bottom_fits(self, controller, surface):
        controller.flow.y = controller.content_bottom - 100
        assert controller.fits(100)
        controller.place(100, lambda cursor: None)
        assert surface.page_count == 1
        assert controller.flow.y == pytest.approx(controller.content_bottom)

    def test_one_point_over_breaks_before_drawing(self, controller, surface):
        controller.flow.y = controller.content_bottom - 100
        draws = []
        controller.place(101, record_draws(draws))
        assert surface.page_count == 2
        # drawn once, at the top of the new page
        assert draws == [(controller.flow.x, controller.content_top)]
        assert controller.flow.y == pytest.approx(controller.content_top + 101)

    def test_remaining(self, controller):
        controller.flow.y = controller.content_bottom - 42
        assert controller.remaining() == pytest.approx(42)


class TestOversizedUnit:

    def test_taller_than_page_is_placed_on_fresh_page(self, controller, surface):
        draws = []
        controller.place(5000, record_draws(draws))
        assert surface.page_count == 1
        assert len(draws) == 1

    def test_following_unit_goes_to_next_page(self, controller, surface):
        controller.place(5000, lambda cursor: None)
        controller.place(10, lambda cursor: None)
        assert surface.page_count == 2
        assert controller.flow.y == pytest.approx(controller.content_top + 10)

    def test_oversized_unit_mid_page_breaks_once(self, controller, surface):
        controller.flow.y = controller.content_top + 300
        controller.place(5000, lambda cursor: None)
        assert surface.page_count == 2


class TestColumns:

    def test_break_in_one_column_resets_both(self, controller, surface):
        controller.flow.y = controller.content_bottom - 50
        with controller.columns(2) as (left, right):
            controller.place(40, lambda cursor: None, cursor=left)
            controller.place(40, lambda cursor: None, cursor=right)
            right_before = right.y
            controller.place(40, lambda cursor: None, cursor=left)

            assert surface.page_count == 2
            assert right_before == pytest.approx(controller.content_bottom - 10)
            assert right.y == pytest.approx(controller.content_top)
            assert left.y == pytest.approx(controller.content_top + 40)

            controller.place(40, lambda cursor: None, cursor=right)
            assert surface.page_count == 2

        assert controller.flow.y == pytest.approx(controller.content_top + 40)

    def test_each_column_breaks_only_once_per_page(self, controller, surface):
        controller.flow.y = controller.content_bottom - 30
        with controller.columns(2) as (left, right):
            controller.place(40, lambda cursor: None, cursor=left)
            controller.place(40, lambda cursor: None, cursor=right)
        assert surface.page_count == 2

    def test_flow_continues_below_tallest_column(self, controller):
        start = controller.flow.y
        with controller.columns(2) as (left, right):
            controller.place(30, lambda cursor: None, cursor=left)
            controller.place(70, lambda cursor: None, cursor=right)
        assert controller.flow.y == pytest.approx(start + 70)

    def test_columns_do_not_overlap(self, controller):
        with controller.columns(2) as (left, right):
            assert left.x + left.width < right.x
            assert right.x + right.width == pytest.approx(
                controller.geometry.width - controller.geometry.margin_right)


class TestHooksAndState:

    def test_hooks_run_around_every_break(self, surface):
        events = []
        c = PaginationController(
            surface,
            on_page_end=lambda i: events.append(("end", i)),
            on_page_start=lambda i: events.append(("start", i)),
        )
        c.start()
        c.break_page()
        c.break_page()
        c.finish()
        assert events == [("end", 0), ("start", 1), ("end", 1), ("start", 2), ("end", 2)]
        assert c.break_count == 2

    def test_state_is_paginating_only_during_break(self, surface):
        seen = []
        c = PaginationController(surface, on_page_start=lambda i: seen.append(c.state))
        c.start()
        assert c.state is FlowState.FLOWING
        c.break_page()
        assert seen == [FlowState.PAGINATING]
        assert c.state is FlowState.FLOWING

    def test_start_twice_is_an_error(self, controller):
        with pytest.raises(RuntimeError):
            controller.start()

    def test_cursor_never_moves_up(self):
        cursor = LayoutCursor(x=0, width=100, y=10)
        with pytest.raises(ValueError):
            cursor.advance(-1)
