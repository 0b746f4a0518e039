"""HTML rendering and row-wise splitting of tables.

Tables are carried through the pipeline as compact HTML strings. Rendering
orders rows by row index and cells by column index; splitting parses the HTML
back into rows so oversized tables can be packed into several chunks, each
repeating the header rows.
"""

import html
import logging
from collections.abc import Callable
from dataclasses import dataclass
from itertools import groupby

from bs4 import BeautifulSoup, Tag

from docingest.models.document import Table

logger = logging.getLogger(__name__)

# bs4 lower-cases attribute names; the renderer emits these in camelCase
_ATTRIBUTE_NAMES = {"colspan": "colSpan", "rowspan": "rowSpan"}


def render_table_html(table: Table) -> str:
    """Render a table as HTML.

    Header and row-header cells render as ``th``, everything else as ``td``.
    Span attributes are only emitted when greater than one, and cell text is
    HTML-escaped.

    Args:
        table: Table with cell geometry.

    Returns:
        HTML string starting with ``<table>`` and ending with ``</table>``.

    Example:
        >>> render_table_html(Table(cells=[TableCell(row=0, col=0, content="A&B")]))
        '<table><tr><td>A&amp;B</td></tr></table>'
    """
    parts = ["<table>"]
    ordered = sorted(table.cells, key=lambda cell: (cell.row, cell.col))
    for _, row_cells in groupby(ordered, key=lambda cell: cell.row):
        parts.append("<tr>")
        for cell in row_cells:
            tag = "th" if cell.is_header else "td"
            spans = ""
            if cell.col_span > 1:
                spans += f" colSpan='{cell.col_span}'"
            if cell.row_span > 1:
                spans += f" rowSpan='{cell.row_span}'"
            parts.append(f"<{tag}{spans}>{html.escape(cell.content)}</{tag}>")
        parts.append("</tr>")
    parts.append("</table>")
    return "".join(parts)


@dataclass(frozen=True)
class TableRows:
    """A parsed table split into header rows and body rows (outer HTML)."""

    header: list[str]
    body: list[str]


def parse_table_rows(table_html: str) -> TableRows:
    """Parse table HTML into header rows and body rows.

    Header rows are the rows of a ``<thead>`` when present, otherwise the
    leading rows made only of ``th`` cells.

    Args:
        table_html: HTML of a single table.

    Returns:
        TableRows with the outer HTML of each row.
    """
    soup = BeautifulSoup(table_html, "html.parser")
    rows = [row for row in soup.find_all("tr") if isinstance(row, Tag)]

    thead = soup.find("thead")
    if isinstance(thead, Tag):
        header_rows = [row for row in rows if row.find_parent("thead") is thead]
        body_rows = [row for row in rows if row.find_parent("thead") is not thead]
    else:
        header_rows = []
        for row in rows:
            cells = row.find_all(["td", "th"], recursive=False)
            if cells and all(cell.name == "th" for cell in cells):
                header_rows.append(row)
            else:
                break
        body_rows = rows[len(header_rows) :]

    return TableRows(
        header=[_outer_html(row) for row in header_rows],
        body=[_outer_html(row) for row in body_rows],
    )


def _outer_html(row: Tag) -> str:
    """Re-serialize a row in the form render_table_html emits."""
    parts = ["<tr>"]
    for cell in row.find_all(["td", "th"], recursive=False):
        attributes = "".join(
            _format_attribute(name, value) for name, value in cell.attrs.items()
        )
        text = html.escape(cell.get_text())
        parts.append(f"<{cell.name}{attributes}>{text}</{cell.name}>")
    parts.append("</tr>")
    return "".join(parts)


def _format_attribute(name: str, value: str | list[str]) -> str:
    text = value if isinstance(value, str) else " ".join(value)
    return f" {_ATTRIBUTE_NAMES.get(name, name)}='{html.escape(text)}'"


def wrap_table(header: list[str], rows: list[str]) -> str:
    """Assemble a table from header rows and body rows."""
    head = f"<thead>{''.join(header)}</thead>" if header else ""
    return f"<table>{head}{''.join(rows)}</table>"


def split_table_rows(
    header: list[str],
    body: list[str],
    target_size: int,
    count: Callable[[str], int],
) -> list[str]:
    """Pack table rows into sub-tables that stay within ``target_size``.

    Every sub-table repeats the header rows. A row is moved to a new sub-table
    when adding it would push the current one over the target, as long as the
    current sub-table already holds at least one body row. A single row larger
    than the target is therefore emitted whole.

    Args:
        header: Outer HTML of the header rows.
        body: Outer HTML of the body rows.
        target_size: Size bound per sub-table.
        count: Token counter for a piece of text.

    Returns:
        List of table HTML strings, in row order.
    """
    if not body:
        return [wrap_table(header, [])]

    chunks: list[str] = []
    current: list[str] = []

    for row in body:
        candidate = wrap_table(header, current + [row])
        if current and count(candidate) > target_size:
            chunks.append(wrap_table(header, current))
            current = [row]
        else:
            current.append(row)

    if current:
        chunks.append(wrap_table(header, current))

    logger.debug(
        f"Split table of {len(body)} rows into {len(chunks)} parts "
        f"(header rows: {len(header)})"
    )
    return chunks
