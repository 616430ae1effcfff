"""
Tests for the paginated report layout engine.
"""

import logging

import pytest

from supplement_audit.config import PageGeometry, ReportOptions
from supplement_audit.exceptions import LayoutOverflowError
from supplement_audit.reporting.layout import (
    BlockKind,
    LayoutCursor,
    ReportDocument,
    ReportLayoutEngine,
    Section,
)
from supplement_audit.reporting.table import ColumnSpec, TableRow

COLUMNS = (ColumnSpec("Item", 200), ColumnSpec("Amount", 100, align="right"))


def make_section(section_id: str, count: int, title: str | None = None) -> Section:
    return Section(
        section_id=section_id,
        columns=COLUMNS,
        rows=tuple(TableRow(cells=(f"Item {i}", "$1.00")) for i in range(count)),
        title=title,
    )


def twenty_row_geometry(**overrides: float) -> PageGeometry:
    """Pages that hold a 14pt header plus exactly twenty 14pt rows."""
    values = {
        "height": 36 + 14 + 20 * 14 + 36,
        "margin_top": 36,
        "safe_margin": 36,
        "line_height": 10,
        "cell_padding": 2,
    }
    values.update(overrides)
    return PageGeometry(**values)


def rows_on(document: ReportDocument, section_id: str) -> list[list[int]]:
    return [
        [b.row_index for b in page.blocks_for(section_id) if b.kind is BlockKind.ROW]
        for page in document.pages
    ]


@pytest.fixture
def engine() -> ReportLayoutEngine:
    return ReportLayoutEngine(twenty_row_geometry())


class TestLayoutCursor:
    """Tests for LayoutCursor."""

    def test_fits(self) -> None:
        cursor = LayoutCursor(
            current_page_index=0, current_y=100, page_height=200, safe_margin=20, top_margin=10
        )
        assert cursor.fits(80)
        assert not cursor.fits(80.5)

    def test_advance_and_next_page_return_new_cursors(self) -> None:
        cursor = LayoutCursor(
            current_page_index=0, current_y=10, page_height=200, safe_margin=20, top_margin=10
        )
        assert cursor.at_page_top
        moved = cursor.advance(15)
        assert moved.current_y == 25
        assert cursor.current_y == 10
        assert not moved.at_page_top

        turned = moved.next_page()
        assert turned.current_page_index == 1
        assert turned.current_y == 10


class TestReportLayoutEngine:
    """Tests for ReportLayoutEngine."""

    def test_one_hundred_twenty_rows_span_six_pages(self, engine: ReportLayoutEngine) -> None:
        """Test 120 rows at 20 rows per page fill exactly six pages."""
        document = engine.layout([make_section("labor", 120)])

        assert document.page_count == 6
        assert [len(rows) for rows in rows_on(document, "labor")] == [20] * 6

    def test_header_repeated_on_every_page(self, engine: ReportLayoutEngine) -> None:
        """Test each continuation page starts with an identical header."""
        document = engine.layout([make_section("labor", 120)])

        first_header = document.pages[0].blocks[0]
        assert first_header.kind is BlockKind.HEADER
        assert first_header.texts == ("Item", "Amount")
        for page in document.pages:
            leading = page.blocks[0]
            assert leading.kind is BlockKind.HEADER
            assert leading.texts == first_header.texts
            assert leading.y == engine.geometry.margin_top

    def test_every_row_placed_once_in_order(self, engine: ReportLayoutEngine) -> None:
        document = engine.layout([make_section("labor", 57)])
        placed = [index for rows in rows_on(document, "labor") for index in rows]
        assert placed == list(range(57))

    def test_no_row_crosses_the_safe_margin(self) -> None:
        """Test no row extends past the printable area, wrapped rows included."""
        geometry = twenty_row_geometry()
        engine = ReportLayoutEngine(geometry)
        rows = tuple(
            TableRow(cells=(("Replace quarter panel and blend " * (i % 4 + 1)).strip(), "$1.00"))
            for i in range(80)
        )
        document = engine.layout([Section(section_id="parts", columns=COLUMNS, rows=rows)])

        for page in document.pages:
            for block in page.blocks:
                if block.kind in (BlockKind.ROW, BlockKind.HEADER):
                    assert block.y >= geometry.margin_top
                    assert block.y + block.height + geometry.safe_margin <= geometry.height

    @pytest.mark.parametrize("count", [1, 19, 20, 21, 45, 120])
    def test_taller_pages_never_add_pages(self, count: int) -> None:
        """Test page count does not grow as page height grows."""
        counts = []
        for height in (366, 400, 500, 792, 1200):
            engine = ReportLayoutEngine(twenty_row_geometry(height=height))
            document = engine.layout([make_section("a", count, title="Parts"), make_section("b", 7)])
            counts.append(document.page_count)
        assert counts == sorted(counts, reverse=True)

    def test_header_not_orphaned(self) -> None:
        """Test a header that fits alone but not with its first row moves to the next page."""
        engine = ReportLayoutEngine(twenty_row_geometry(section_gap=0))
        document = engine.layout([make_section("a", 19), make_section("b", 3)])

        assert document.pages[0].blocks_for("b") == []
        second = document.pages[1].blocks_for("b")
        assert second[0].kind is BlockKind.HEADER
        assert rows_on(document, "b") == [[], [0, 1, 2]]

    def test_title_kept_with_header(self) -> None:
        engine = ReportLayoutEngine(twenty_row_geometry(section_gap=0))
        document = engine.layout([make_section("a", 18), make_section("b", 3, title="Paint")])

        assert document.pages[0].blocks_for("b") == []
        kinds = [block.kind for block in document.pages[1].blocks_for("b")]
        assert kinds[:3] == [BlockKind.TITLE, BlockKind.HEADER, BlockKind.ROW]

    def test_sections_share_pages(self, engine: ReportLayoutEngine) -> None:
        document = engine.layout([make_section("a", 3), make_section("b", 3)])
        assert document.page_count == 1
        assert len(document.pages_for("a")) == 1
        assert len(document.pages_for("b")) == 1

    def test_empty_section(
        self, engine: ReportLayoutEngine, caplog: pytest.LogCaptureFixture
    ) -> None:
        """Test a section without rows still draws its header."""
        with caplog.at_level(logging.WARNING, logger="supplement_audit.reporting.layout"):
            document = engine.layout([make_section("empty", 0)])
        kinds = [block.kind for block in document.pages[0].blocks_for("empty")]
        assert kinds == [BlockKind.HEADER]
        assert "empty" in caplog.text

    def test_oversized_row_raises(self) -> None:
        """Test a row taller than a page is reported, not truncated."""
        geometry = PageGeometry(height=200, margin_top=20, safe_margin=20)
        engine = ReportLayoutEngine(geometry)
        section = Section(
            section_id="notes",
            columns=(ColumnSpec("Note", 40), ColumnSpec("Amount", 60)),
            rows=(
                TableRow(cells=("ok", "$1.00")),
                TableRow(cells=(" ".join(["supplemental"] * 60), "$2.00")),
            ),
        )

        with pytest.raises(LayoutOverflowError) as excinfo:
            engine.layout([section])

        assert excinfo.value.section_id == "notes"
        assert excinfo.value.row_index == 1
        assert excinfo.value.required_height > excinfo.value.available_height

    def test_footers(self, engine: ReportLayoutEngine) -> None:
        document = engine.layout([make_section("labor", 45)])
        assert document.page_count == 3
        for page in document.pages:
            footer = page.blocks[-1]
            assert footer.kind is BlockKind.FOOTER
            assert footer.texts == (
                f"Page {page.index + 1} of 3",
                "Generated by Supplement Audit",
            )

    def test_footer_brand(self) -> None:
        engine = ReportLayoutEngine(twenty_row_geometry(), ReportOptions(brand_name="Acme Audit"))
        document = engine.layout([make_section("labor", 1)])
        assert document.pages[0].blocks[-1].texts[1] == "Generated by Acme Audit"

    def test_footers_optional(self, engine: ReportLayoutEngine) -> None:
        document = engine.layout([make_section("labor", 1)], footers=False)
        assert all(block.kind is not BlockKind.FOOTER for block in document.pages[0].blocks)

    def test_banner_on_first_page(self) -> None:
        engine = ReportLayoutEngine()
        document = engine.layout(
            [make_section("labor", 2)], banner=["Supplement Audit Report", "Claim ID: C-1"]
        )
        banner = document.pages[0].blocks[0]
        assert banner.kind is BlockKind.BANNER
        assert banner.cells[0].lines == ("Supplement Audit Report", "Claim ID: C-1")
        assert document.pages[0].blocks[1].y >= banner.y + banner.height

    def test_independent_builds(self, engine: ReportLayoutEngine) -> None:
        """Test the engine carries no state between documents."""
        first = engine.layout([make_section("labor", 45)])
        second = engine.layout([make_section("labor", 45)])
        assert first is not second
        assert first.page_count == second.page_count == 3
        assert first.pages[0].blocks[0].y == second.pages[0].blocks[0].y
