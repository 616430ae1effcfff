"""
Table measurement and cell drawing instructions.
Wraps cell text to column widths using ReportLab font metrics.
"""

from dataclasses import dataclass, replace
from enum import Enum
from typing import Literal

from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth

from ..config import PageGeometry

TEXT_COLOR = "#333333"
HEADER_FILL = "#dcdcdc"
ALTERNATE_FILL = "#f8fafc"

Align = Literal["left", "right", "center"]


class RowTone(str, Enum):
    """Presentational tone of a table row."""

    NEUTRAL = "neutral"
    INCREASE = "increase"
    DECREASE = "decrease"
    NEW = "new"
    REMOVED = "removed"


TONE_TEXT_COLORS: dict[RowTone, str] = {
    RowTone.NEUTRAL: TEXT_COLOR,
    RowTone.INCREASE: "#dc2626",
    RowTone.DECREASE: "#16a34a",
    RowTone.NEW: "#2563eb",
    RowTone.REMOVED: "#6b7280",
}

TONE_FILL_COLORS: dict[RowTone, str] = {
    RowTone.INCREASE: "#fef2f2",
    RowTone.DECREASE: "#f0fdf4",
    RowTone.NEW: "#eff6ff",
    RowTone.REMOVED: "#f3f4f6",
}


@dataclass(frozen=True)
class ColumnSpec:
    """A fixed-width table column."""

    header: str
    width: float
    align: Align = "left"
    toned: bool = False  # cell text takes the row tone colour


@dataclass(frozen=True)
class TableRow:
    """One row of cell strings."""

    cells: tuple[str, ...]
    tone: RowTone = RowTone.NEUTRAL


@dataclass(frozen=True)
class MeasuredRow:
    """Cell text wrapped to column widths, with the resulting row height."""

    lines: tuple[tuple[str, ...], ...]
    line_count: int
    height: float
    is_header: bool = False


@dataclass(frozen=True)
class CellInstruction:
    """Everything needed to draw one cell."""

    x: float
    y: float
    width: float
    height: float
    lines: tuple[str, ...]
    font_name: str
    font_size: float
    line_height: float
    padding: float
    align: Align = "left"
    text_color: str = TEXT_COLOR
    fill_color: str | None = None

    @property
    def text(self) -> str:
        return " ".join(self.lines)


def _break_line(line: str, font_name: str, font_size: float, width: float) -> list[str]:
    """Split a line character by character so each piece fits the width."""
    pieces: list[str] = []
    current = ""
    for char in line:
        candidate = current + char
        if current and stringWidth(candidate, font_name, font_size) > width:
            pieces.append(current)
            current = char.lstrip()
        else:
            current = candidate
    if current or not pieces:
        pieces.append(current)
    return pieces


def wrap_text(text: str, font_name: str, font_size: float, width: float) -> list[str]:
    """
    Wrap text to a width in points; always returns at least one line.

    Words are kept whole where possible. A word wider than the width, such as
    a long part number, is broken between characters.
    """
    if not text:
        return [""]
    width = max(width, 1.0)
    lines: list[str] = []
    for line in simpleSplit(text, font_name, font_size, width):
        if stringWidth(line, font_name, font_size) > width:
            lines.extend(_break_line(line, font_name, font_size, width))
        else:
            lines.append(line)
    return lines or [""]


def fit_columns(columns: list[ColumnSpec], available_width: float) -> list[ColumnSpec]:
    """Scale column widths down proportionally when they exceed the available width."""
    total = sum(column.width for column in columns)
    if total <= available_width or total == 0:
        return list(columns)
    factor = available_width / total
    return [replace(column, width=column.width * factor) for column in columns]


class TableRenderer:
    """
    Measures and draws the rows of a single table.

    Row height is the largest wrapped-line count across the row's cells times
    the line height, plus top and bottom padding.
    """

    def __init__(self, columns: list[ColumnSpec], geometry: PageGeometry | None = None) -> None:
        self.geometry = geometry or PageGeometry()
        self.columns = fit_columns(columns, self.geometry.content_width)

    @property
    def width(self) -> float:
        return sum(column.width for column in self.columns)

    def _cells(self, cells: tuple[str, ...] | list[str]) -> list[str]:
        values = [str(cell) if cell is not None else "" for cell in cells]
        values = values[: len(self.columns)]
        return values + [""] * (len(self.columns) - len(values))

    def measure(self, cells: tuple[str, ...] | list[str], header: bool = False) -> MeasuredRow:
        """Wrap each cell to its column and compute the row height."""
        geo = self.geometry
        font = geo.bold_font_name if header else geo.font_name
        wrapped: list[tuple[str, ...]] = []
        for column, text in zip(self.columns, self._cells(cells)):
            inner_width = column.width - 2 * geo.cell_padding
            wrapped.append(tuple(wrap_text(text, font, geo.font_size, inner_width)))

        line_count = max((len(lines) for lines in wrapped), default=1)
        height = line_count * geo.line_height + 2 * geo.cell_padding
        return MeasuredRow(
            lines=tuple(wrapped), line_count=line_count, height=height, is_header=header
        )

    def draw(
        self,
        row: MeasuredRow,
        x: float,
        y: float,
        tone: RowTone = RowTone.NEUTRAL,
        shaded: bool = False,
        color_coding: bool = True,
    ) -> list[CellInstruction]:
        """Emit one draw instruction per cell for a measured row at ``(x, y)``."""
        geo = self.geometry

        if row.is_header:
            fill: str | None = HEADER_FILL
        elif color_coding and tone in TONE_FILL_COLORS:
            fill = TONE_FILL_COLORS[tone]
        elif shaded:
            fill = ALTERNATE_FILL
        else:
            fill = None

        instructions: list[CellInstruction] = []
        cell_x = x
        for column, lines in zip(self.columns, row.lines):
            if color_coding and column.toned and not row.is_header:
                text_color = TONE_TEXT_COLORS[tone]
            else:
                text_color = TEXT_COLOR
            instructions.append(
                CellInstruction(
                    x=cell_x,
                    y=y,
                    width=column.width,
                    height=row.height,
                    lines=lines,
                    font_name=geo.bold_font_name if row.is_header else geo.font_name,
                    font_size=geo.font_size,
                    line_height=geo.line_height,
                    padding=geo.cell_padding,
                    align=column.align,
                    text_color=text_color,
                    fill_color=fill,
                )
            )
            cell_x += column.width
        return instructions
