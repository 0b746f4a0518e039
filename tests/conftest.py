"""Pytest configuration and shared fixtures for docingest tests."""

import os
import shutil
import tempfile
from collections.abc import Callable, Generator
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import pytest

from docingest.models.document import Paragraph, RawDocument, Span, Table, TableCell
from docingest.models.structure import RecordType, StructureRecord

FIXED_NOW = datetime(2024, 5, 1, 12, 30, tzinfo=timezone.utc)


@pytest.fixture
def temp_dir() -> Generator[Path]:
    """Create a temporary directory for test file operations.

    Yields:
        Path to temporary directory

    Cleanup:
        Automatically removes directory after test
    """
    tmp = Path(tempfile.mkdtemp())
    yield tmp
    shutil.rmtree(tmp, ignore_errors=True)


@pytest.fixture
def isolated_env() -> Generator[dict[str, str]]:
    """Provide isolated environment variables for testing.

    Saves current environment and restores after test.
    """
    original_env = os.environ.copy()
    yield original_env
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def fixed_clock() -> Callable[[], datetime]:
    """Clock that always returns the same UTC instant."""
    return lambda: FIXED_NOW


class DocumentBuilder:
    """Assemble RawDocument content and spans paragraph by paragraph."""

    def __init__(self) -> None:
        self.content = ""
        self.paragraphs: list[Paragraph] = []
        self.tables: list[Table] = []

    def _append(self, text: str) -> tuple[int, int]:
        if self.content:
            self.content += "\n"
        offset = len(self.content)
        self.content += text
        return offset, len(text)

    def paragraph(
        self, text: str, role: str | None = None, page: int = 1
    ) -> "DocumentBuilder":
        offset, length = self._append(text)
        self.paragraphs.append(
            Paragraph(offset_start=offset, length=length, role=role, page_number=page)
        )
        return self

    def table(
        self,
        rows: list[list[str]],
        header_rows: int = 1,
        page: int = 1,
        cell_paragraphs: bool = True,
    ) -> "DocumentBuilder":
        """Append a table whose cells are laid out row by row in the content."""
        cells: list[TableCell] = []
        start: int | None = None
        end = 0
        for row_index, row in enumerate(rows):
            for col_index, value in enumerate(row):
                offset, length = self._append(value)
                start = offset if start is None else start
                end = offset + length
                cells.append(
                    TableCell(
                        row=row_index,
                        col=col_index,
                        kind="columnHeader" if row_index < header_rows else "content",
                        content=value,
                    )
                )
                if cell_paragraphs:
                    # Layout services also report table cells as paragraphs
                    self.paragraphs.append(
                        Paragraph(
                            offset_start=offset, length=length, page_number=page
                        )
                    )
        assert start is not None
        self.tables.append(
            Table(spans=[Span(offset_start=start, length=end - start)], cells=cells)
        )
        return self

    def build(self) -> RawDocument:
        return RawDocument(
            content=self.content, paragraphs=self.paragraphs, tables=self.tables
        )


@pytest.fixture
def document_builder() -> Callable[[], DocumentBuilder]:
    """Factory for DocumentBuilder instances."""
    return DocumentBuilder


@pytest.fixture
def make_record() -> Callable[..., StructureRecord]:
    """Factory for StructureRecords with sensible defaults."""

    def _make(
        text: str,
        offset: int = 0,
        type: RecordType = RecordType.TEXT,
        title: str = "Title",
        subtitle: str = "",
        section: str = "",
        page_number: int = 1,
        **overrides: Any,
    ) -> StructureRecord:
        return StructureRecord(
            offset=offset,
            length=overrides.pop("length", max(len(text), 1)),
            text=text,
            type=type,
            title=title,
            subtitle=subtitle,
            section=section,
            page_number=page_number,
            **overrides,
        )

    return _make
