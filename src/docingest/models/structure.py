"""Structure records produced from a RawDocument."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class RecordType(str, Enum):
    """Content kind of a structure record."""

    TEXT = "text"
    TABLE = "table"


class StructureRecord(BaseModel):
    """One paragraph- or table-derived content unit with its context.

    Attributes:
        offset: Content offset of the first character the record covers
        length: Number of content characters the record covers
        text: Paragraph text, or the HTML rendering for tables
        type: Record content kind
        title: Main document title in effect (semicolon-joined)
        subtitle: Most recent title paragraph
        section: Most recent section heading
        page_number: Page the record ends on (0 when unknown)
    """

    model_config = ConfigDict(frozen=True)

    offset: int = Field(ge=0)
    length: int = Field(ge=1)
    text: str
    type: RecordType = RecordType.TEXT
    title: str = ""
    subtitle: str = ""
    section: str = ""
    page_number: int = Field(default=0, ge=0)

    @property
    def end(self) -> int:
        """Inclusive end offset of the covered content."""
        return self.offset + self.length - 1

    @property
    def context(self) -> tuple[str, str, str]:
        """The (title, subtitle, section) triple chunk boundaries follow."""
        return (self.title, self.subtitle, self.section)
