"""
Paginated report layout.

Places report sections onto fixed-size pages. Rows are never split across
pages, and a table that continues onto a new page starts that page with its
column header re-drawn.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field, replace
from enum import Enum

from ..config import PageGeometry, ReportOptions
from ..exceptions import LayoutOverflowError
from .table import (
    CellInstruction,
    ColumnSpec,
    MeasuredRow,
    RowTone,
    TableRenderer,
    TableRow,
    wrap_text,
)

logger = logging.getLogger(__name__)

BANNER_COLOR = "#1e40af"
TITLE_COLOR = "#333333"
FOOTER_COLOR = "#808080"


class LayoutState(str, Enum):
    """States of a single document layout run."""

    IDLE = "idle"
    LAYING_OUT_SECTION = "laying_out_section"
    NEEDS_PAGE_BREAK = "needs_page_break"
    DONE = "done"


class BlockKind(str, Enum):
    """Kinds of drawn blocks on a page."""

    BANNER = "banner"
    TITLE = "title"
    HEADER = "header"
    ROW = "row"
    FOOTER = "footer"


@dataclass(frozen=True)
class Section:
    """A titled table: a header band followed by rows."""

    section_id: str
    columns: tuple[ColumnSpec, ...]
    rows: tuple[TableRow, ...] = ()
    title: str | None = None
    shade_alternate: bool = True

    @property
    def header(self) -> tuple[str, ...]:
        return tuple(column.header for column in self.columns)


@dataclass(frozen=True)
class DrawnBlock:
    """A band placed on a page at a vertical offset from the page top."""

    kind: BlockKind
    y: float
    height: float
    cells: tuple[CellInstruction, ...] = ()
    section_id: str | None = None
    row_index: int | None = None

    @property
    def texts(self) -> tuple[str, ...]:
        return tuple(cell.text for cell in self.cells)


@dataclass
class Page:
    """An ordered sequence of drawn blocks."""

    index: int
    blocks: list[DrawnBlock] = field(default_factory=list)

    def blocks_for(self, section_id: str) -> list[DrawnBlock]:
        return [block for block in self.blocks if block.section_id == section_id]


@dataclass
class ReportDocument:
    """Pages built by the layout engine. Content is only ever appended."""

    geometry: PageGeometry
    pages: list[Page] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def add_page(self) -> Page:
        page = Page(index=len(self.pages))
        self.pages.append(page)
        return page

    def append(self, page_index: int, block: DrawnBlock) -> None:
        self.pages[page_index].blocks.append(block)

    def pages_for(self, section_id: str) -> list[Page]:
        """Pages that carry any block of a section."""
        return [page for page in self.pages if page.blocks_for(section_id)]


@dataclass(frozen=True)
class LayoutCursor:
    """Current write position within one document build."""

    current_page_index: int
    current_y: float
    page_height: float
    safe_margin: float
    top_margin: float

    @property
    def at_page_top(self) -> bool:
        return self.current_y <= self.top_margin

    def fits(self, height: float) -> bool:
        return self.current_y + height + self.safe_margin <= self.page_height

    def advance(self, height: float) -> "LayoutCursor":
        return replace(self, current_y=self.current_y + height)

    def next_page(self) -> "LayoutCursor":
        return replace(
            self,
            current_page_index=self.current_page_index + 1,
            current_y=self.top_margin,
        )


@dataclass
class _LayoutRun:
    """Mutable state owned by a single ``layout`` call."""

    document: ReportDocument
    cursor: LayoutCursor
    state: LayoutState = LayoutState.IDLE

    def transition(self, state: LayoutState) -> None:
        logger.debug("Layout %s -> %s", self.state.value, state.value)
        self.state = state


class ReportLayoutEngine:
    """
    Lays out sections onto pages.

    For every row: if ``current_y + row_height + safe_margin`` would pass the
    page height, a new page is started and the section header is drawn again
    before the row. A section's title, header and first row are placed as one
    unit so a header is never left alone at the bottom of a page.
    """

    def __init__(
        self,
        geometry: PageGeometry | None = None,
        options: ReportOptions | None = None,
    ) -> None:
        self.geometry = geometry or PageGeometry()
        self.options = options or ReportOptions()

    # ------------------------------------------------------------------
    # Measurement helpers
    # ------------------------------------------------------------------
    def _text_block(
        self,
        kind: BlockKind,
        lines: Sequence[str],
        font_size: float,
        color: str,
        y: float,
        section_id: str | None = None,
    ) -> DrawnBlock:
        geo = self.geometry
        wrapped: list[str] = []
        for line in lines:
            wrapped.extend(wrap_text(line, geo.bold_font_name, font_size, geo.content_width))
        line_height = font_size * 1.25
        height = len(wrapped) * line_height + 2 * geo.cell_padding
        cell = CellInstruction(
            x=geo.margin_left,
            y=y,
            width=geo.content_width,
            height=height,
            lines=tuple(wrapped),
            font_name=geo.bold_font_name,
            font_size=font_size,
            line_height=line_height,
            padding=geo.cell_padding,
            text_color=color,
        )
        return DrawnBlock(kind=kind, y=y, height=height, cells=(cell,), section_id=section_id)

    def _row_block(
        self,
        renderer: TableRenderer,
        measured: MeasuredRow,
        y: float,
        section: Section,
        row_index: int | None = None,
        row: TableRow | None = None,
    ) -> DrawnBlock:
        tone = row.tone if row is not None else RowTone.NEUTRAL
        shaded = section.shade_alternate and row_index is not None and row_index % 2 == 1
        cells = renderer.draw(
            measured,
            x=self.geometry.margin_left,
            y=y,
            tone=tone,
            shaded=shaded,
            color_coding=self.options.color_coding,
        )
        return DrawnBlock(
            kind=BlockKind.HEADER if measured.is_header else BlockKind.ROW,
            y=y,
            height=measured.height,
            cells=tuple(cells),
            section_id=section.section_id,
            row_index=row_index,
        )

    # ------------------------------------------------------------------
    # Layout
    # ------------------------------------------------------------------
    def _break_page(self, run: _LayoutRun) -> None:
        run.transition(LayoutState.NEEDS_PAGE_BREAK)
        run.document.add_page()
        run.cursor = run.cursor.next_page()
        logger.debug("Page break: now on page %d", run.cursor.current_page_index + 1)

    def _place(self, run: _LayoutRun, block: DrawnBlock) -> None:
        run.document.append(run.cursor.current_page_index, block)
        run.cursor = run.cursor.advance(block.height)

    def _place_banner(self, run: _LayoutRun, banner: Sequence[str]) -> None:
        block = self._text_block(
            BlockKind.BANNER,
            banner,
            self.geometry.banner_font_size,
            BANNER_COLOR,
            run.cursor.current_y,
        )
        if block.height > self.geometry.printable_height:
            raise LayoutOverflowError("banner", 0, block.height, self.geometry.printable_height)
        self._place(run, block)
        run.cursor = run.cursor.advance(self.geometry.section_gap)

    def _place_section(self, run: _LayoutRun, section: Section) -> None:
        geo = self.geometry
        printable = geo.printable_height
        renderer = TableRenderer(list(section.columns), geo)
        header = renderer.measure(section.header, header=True)
        measured = [renderer.measure(row.cells) for row in section.rows]

        title_height = 0.0
        if section.title:
            title_height = self._text_block(
                BlockKind.TITLE, [section.title], geo.title_font_size, TITLE_COLOR, 0.0
            ).height

        for index, row in enumerate(measured):
            required = header.height + row.height
            if index == 0:
                required += title_height
            if required > printable:
                raise LayoutOverflowError(section.section_id, index, required, printable)
        if not measured and title_height + header.height > printable:
            raise LayoutOverflowError(
                section.section_id, 0, title_height + header.height, printable
            )
        if not measured:
            logger.warning("Section %s has no rows", section.section_id)

        run.transition(LayoutState.LAYING_OUT_SECTION)

        opening = title_height + header.height + (measured[0].height if measured else 0.0)
        if not run.cursor.fits(opening) and not run.cursor.at_page_top:
            self._break_page(run)
            run.transition(LayoutState.LAYING_OUT_SECTION)

        if section.title:
            self._place(
                run,
                self._text_block(
                    BlockKind.TITLE,
                    [section.title],
                    geo.title_font_size,
                    TITLE_COLOR,
                    run.cursor.current_y,
                    section_id=section.section_id,
                ),
            )
        self._place(run, self._row_block(renderer, header, run.cursor.current_y, section))

        for index, (row, row_measure) in enumerate(zip(section.rows, measured)):
            if not run.cursor.fits(row_measure.height):
                self._break_page(run)
                self._place(
                    run, self._row_block(renderer, header, run.cursor.current_y, section)
                )
                run.transition(LayoutState.LAYING_OUT_SECTION)
            self._place(
                run,
                self._row_block(
                    renderer, row_measure, run.cursor.current_y, section, index, row
                ),
            )

        run.cursor = run.cursor.advance(geo.section_gap)

    def _add_footers(self, document: ReportDocument) -> None:
        geo = self.geometry
        total = document.page_count
        y = geo.height - geo.footer_offset
        height = geo.line_height
        for page in document.pages:
            cells = (
                CellInstruction(
                    x=geo.margin_left,
                    y=y,
                    width=geo.content_width,
                    height=height,
                    lines=(f"Page {page.index + 1} of {total}",),
                    font_name=geo.font_name,
                    font_size=geo.font_size,
                    line_height=geo.line_height,
                    padding=0.0,
                    align="center",
                    text_color=FOOTER_COLOR,
                ),
                CellInstruction(
                    x=geo.margin_left,
                    y=y,
                    width=geo.content_width,
                    height=height,
                    lines=(f"Generated by {self.options.brand_name}",),
                    font_name=geo.font_name,
                    font_size=geo.font_size,
                    line_height=geo.line_height,
                    padding=0.0,
                    align="right",
                    text_color=FOOTER_COLOR,
                ),
            )
            page.blocks.append(DrawnBlock(kind=BlockKind.FOOTER, y=y, height=height, cells=cells))

    def layout(
        self,
        sections: Sequence[Section],
        banner: Sequence[str] = (),
        footers: bool = True,
    ) -> ReportDocument:
        """
        Lay out sections in order.

        Args:
            sections: Sections to place, in reading order
            banner: Optional report heading lines for the top of page one
            footers: Whether to add page-number footer bands

        Returns:
            The finished document

        Raises:
            LayoutOverflowError: A row (with its header) is taller than the
                printable page height
        """
        geo = self.geometry
        document = ReportDocument(geometry=geo)
        document.add_page()
        run = _LayoutRun(
            document=document,
            cursor=LayoutCursor(
                current_page_index=0,
                current_y=geo.margin_top,
                page_height=geo.height,
                safe_margin=geo.safe_margin,
                top_margin=geo.margin_top,
            ),
        )

        if banner:
            self._place_banner(run, banner)
        for section in sections:
            self._place_section(run, section)

        if footers:
            self._add_footers(document)
        run.transition(LayoutState.DONE)
        logger.debug("Layout finished: %d sections on %d pages", len(sections), document.page_count)
        return document
