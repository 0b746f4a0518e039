"""Pydantic models for layout-analysis output.

A RawDocument is the flat content string of an analyzed PDF together with the
paragraph and table spans the layout service reported for it. Field aliases
accept the camelCase wire names the layout service uses.
"""

from enum import Enum
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class ParagraphRole(str, Enum):
    """Paragraph roles that affect document structure."""

    TITLE = "title"
    SECTION_HEADING = "sectionHeading"


class CellKind(str, Enum):
    """Table cell kinds reported by the layout service."""

    CONTENT = "content"
    COLUMN_HEADER = "columnHeader"
    ROW_HEADER = "rowHeader"
    STUB_HEAD = "stubHead"
    DESCRIPTION = "description"


HEADER_CELL_KINDS = frozenset({CellKind.COLUMN_HEADER, CellKind.ROW_HEADER})


class Span(BaseModel):
    """An ``(offset, length)`` range into the document content."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    offset_start: int = Field(
        ge=0, validation_alias=AliasChoices("offset_start", "offsetStart", "offset")
    )
    length: int = Field(ge=0)

    @property
    def end(self) -> int:
        """Inclusive end offset of the span."""
        return self.offset_start + self.length - 1


class Paragraph(BaseModel):
    """A paragraph span with optional structural role and page number.

    Attributes:
        offset_start: Offset of the first character in the content
        length: Number of characters
        role: Layout role as reported; None for body text. Roles other than
            title and sectionHeading (pageHeader, footnote...) carry no
            content into the structure
        page_number: 1-based page number the paragraph starts on
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    offset_start: int = Field(
        ge=0, validation_alias=AliasChoices("offset_start", "offsetStart", "offset")
    )
    length: int = Field(ge=0)
    role: str | None = None
    page_number: int = Field(
        default=0,
        ge=0,
        validation_alias=AliasChoices("page_number", "pageNumber"),
    )

    @field_validator("role", mode="before")
    @classmethod
    def normalize_role(cls, value: Any) -> Any:
        """Store enum members by their wire value."""
        return value.value if isinstance(value, ParagraphRole) else value

    @property
    def end(self) -> int:
        """Inclusive end offset of the paragraph."""
        return self.offset_start + self.length - 1


class TableCell(BaseModel):
    """A single table cell with its grid geometry."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    row: int = Field(ge=0, validation_alias=AliasChoices("row", "rowIndex"))
    col: int = Field(
        ge=0, validation_alias=AliasChoices("col", "columnIndex", "column")
    )
    row_span: int = Field(
        default=1, ge=1, validation_alias=AliasChoices("row_span", "rowSpan")
    )
    col_span: int = Field(
        default=1,
        ge=1,
        validation_alias=AliasChoices("col_span", "colSpan", "columnSpan"),
    )
    kind: str = CellKind.CONTENT.value
    content: str = ""

    @property
    def is_header(self) -> bool:
        """Whether the cell renders as a header cell."""
        return self.kind in {kind.value for kind in HEADER_CELL_KINDS}


class Table(BaseModel):
    """A table: the content spans it covers and its cells."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    spans: list[Span] = Field(default_factory=list)
    cells: list[TableCell] = Field(default_factory=list)


class RawDocument(BaseModel):
    """Layout-analysis output for one document.

    Produced once by the analysis collaborator and read-only afterwards.

    Example:
        >>> doc = RawDocument(
        ...     content="Title Body text.",
        ...     paragraphs=[
        ...         Paragraph(offset_start=0, length=5, role="title", page_number=1),
        ...         Paragraph(offset_start=6, length=10, page_number=1),
        ...     ],
        ... )
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    content: str
    paragraphs: list[Paragraph] = Field(default_factory=list)
    tables: list[Table] = Field(default_factory=list)

    @classmethod
    def from_analysis_dict(cls, payload: dict[str, Any]) -> "RawDocument":
        """Build a RawDocument from a layout-service style JSON payload.

        Accepts either the flat shape of this model or the nested shape the
        layout service returns, where each paragraph carries ``spans`` and
        ``boundingRegions`` lists and the whole result may be wrapped in an
        ``analyzeResult`` key.

        Args:
            payload: Decoded JSON object.

        Returns:
            Validated RawDocument.

        Raises:
            pydantic.ValidationError: If the payload does not match either shape.
        """
        data = payload.get("analyzeResult", payload)

        paragraphs: list[dict[str, Any]] = []
        for item in data.get("paragraphs") or []:
            paragraph = dict(item)
            spans = paragraph.pop("spans", None)
            if spans:
                paragraph.setdefault("offsetStart", spans[0].get("offset"))
                paragraph.setdefault("length", spans[0].get("length"))
            regions = paragraph.pop("boundingRegions", None)
            if regions and "pageNumber" not in paragraph:
                paragraph["pageNumber"] = regions[0].get("pageNumber", 0)
            paragraphs.append(paragraph)

        return cls.model_validate(
            {
                "content": data.get("content", ""),
                "paragraphs": paragraphs,
                "tables": data.get("tables") or [],
            }
        )
