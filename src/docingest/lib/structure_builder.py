"""Reconstruct ordered document structure from layout-analysis spans.

The layout service reports paragraphs and tables as spans into one flat content
string. Tables and paragraphs can overlap: a table's cells are usually also
reported as paragraphs. The builder claims content ranges in an interval arena
(tables first, so tables win ties), then scans the claimed ranges in offset
order, tracking the title/section/page context in effect, and emits one
StructureRecord per text paragraph or table.

Key Features:
- Interval arena of disjoint tagged ranges instead of a per-character map
- Tables pre-empt any paragraph starting inside them
- Sticky page tracking from paragraph start offsets
- Main title accumulation across title paragraphs on the first page
- Tables rendered to HTML with header cells and span attributes
"""

import bisect
import logging
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum

from docingest.lib.errors import StructureError, ValidationError
from docingest.lib.table_html import render_table_html
from docingest.models.document import Paragraph, ParagraphRole, RawDocument
from docingest.models.structure import RecordType, StructureRecord

logger = logging.getLogger(__name__)


class RangeKind(str, Enum):
    """Classification of a claimed content range."""

    TITLE = "title"
    SECTION = "section"
    TEXT = "text"
    TABLE = "table"


_ROLE_KINDS: dict[str | None, RangeKind] = {
    ParagraphRole.TITLE.value: RangeKind.TITLE,
    ParagraphRole.SECTION_HEADING.value: RangeKind.SECTION,
    None: RangeKind.TEXT,
}


@dataclass(frozen=True)
class TaggedRange:
    """A claimed, inclusive ``[start, end]`` content range.

    Attributes:
        start: First offset of the range
        end: Last offset of the range (inclusive)
        kind: What the range holds
        table_index: Index into RawDocument.tables for table ranges, else -1
    """

    start: int
    end: int
    kind: RangeKind
    table_index: int = -1


class RangeArena:
    """Ordered set of pairwise-disjoint tagged ranges.

    Claims are first-come, first-served: a claim whose start offset is already
    covered is rejected, and a claim whose tail runs into an existing range is
    clipped to end just before it.
    """

    def __init__(self) -> None:
        self._starts: list[int] = []
        self._ranges: list[TaggedRange] = []

    def __len__(self) -> int:
        return len(self._ranges)

    def __iter__(self) -> Iterator[TaggedRange]:
        return iter(self._ranges)

    def covering(self, offset: int) -> TaggedRange | None:
        """Return the range containing ``offset``, if any."""
        index = bisect.bisect_right(self._starts, offset) - 1
        if index >= 0 and self._ranges[index].end >= offset:
            return self._ranges[index]
        return None

    def claim(
        self, start: int, end: int, kind: RangeKind, table_index: int = -1
    ) -> TaggedRange | None:
        """Claim ``[start, end]`` for ``kind``.

        Args:
            start: First offset.
            end: Last offset (inclusive).
            kind: Range classification.
            table_index: Table index for table ranges.

        Returns:
            The stored range (possibly clipped), or None if the start offset
            was already claimed.
        """
        if self.covering(start) is not None:
            return None

        index = bisect.bisect_right(self._starts, start)
        if index < len(self._ranges):
            next_start = self._ranges[index].start
            if end >= next_start:
                logger.debug(
                    f"Clipping {kind.value} range [{start}, {end}] "
                    f"to end before offset {next_start}"
                )
                end = next_start - 1

        tagged = TaggedRange(start=start, end=end, kind=kind, table_index=table_index)
        self._starts.insert(index, start)
        self._ranges.insert(index, tagged)
        return tagged


class StructureBuilder:
    """Build ordered StructureRecords from a RawDocument.

    Example:
        >>> builder = StructureBuilder()
        >>> records = builder.build(raw_document)
        >>> [record.type for record in records]
        [<RecordType.TEXT: 'text'>, <RecordType.TABLE: 'table'>]
    """

    TITLE_SEPARATOR = "; "

    def build(self, document: RawDocument) -> list[StructureRecord]:
        """Convert analyzed content into ordered structure records.

        Args:
            document: Layout-analysis output.

        Returns:
            Non-overlapping records in content order.

        Raises:
            StructureError: If the content is empty or no text/table record
                results.
            ValidationError: If a span falls outside the content or a table
                has no spans.
        """
        if not document.content or not document.content.strip():
            raise StructureError("Document content is empty")

        self._validate_spans(document)

        arena = RangeArena()
        self._mark_tables(arena, document)
        self._mark_paragraphs(arena, document.paragraphs)

        records = self._scan(arena, document)
        if not records:
            raise StructureError(
                "Document produced no text or table content "
                f"({len(document.paragraphs)} paragraphs, "
                f"{len(document.tables)} tables)"
            )

        logger.debug(
            f"Built {len(records)} structure records from "
            f"{len(document.content)} characters"
        )
        return records

    def _validate_spans(self, document: RawDocument) -> None:
        """Check every span lies inside the content and is non-empty."""
        content_length = len(document.content)

        def check(field: str, offset: int, length: int) -> None:
            if length <= 0 or offset + length > content_length:
                raise ValidationError(
                    field,
                    "Span must be non-empty and lie within the document content",
                    f"offset >= 0, length >= 1, offset + length <= {content_length}",
                    f"offset={offset}, length={length}",
                )

        for index, paragraph in enumerate(document.paragraphs):
            check(f"paragraphs.{index}", paragraph.offset_start, paragraph.length)

        for index, table in enumerate(document.tables):
            if not table.spans:
                raise ValidationError(
                    f"tables.{index}.spans",
                    "Table has no spans",
                    "at least one span",
                    "[]",
                )
            for span_index, span in enumerate(table.spans):
                check(
                    f"tables.{index}.spans.{span_index}",
                    span.offset_start,
                    span.length,
                )

    def _mark_tables(self, arena: RangeArena, document: RawDocument) -> None:
        """Claim the bounding range of every table, in input order."""
        for index, table in enumerate(document.tables):
            start = min(span.offset_start for span in table.spans)
            end = max(span.end for span in table.spans)

            covered = sum(span.length for span in table.spans)
            if covered < end - start + 1:
                # Content between disjoint spans is classified as table
                logger.debug(
                    f"Table {index} spans are disjoint; treating [{start}, {end}] "
                    f"as one table range ({end - start + 1 - covered} gap chars)"
                )

            if arena.claim(start, end, RangeKind.TABLE, table_index=index) is None:
                logger.warning(
                    f"Table {index} starts inside an earlier table at offset "
                    f"{start}; dropping it"
                )

    def _mark_paragraphs(
        self, arena: RangeArena, paragraphs: list[Paragraph]
    ) -> None:
        """Claim paragraph ranges whose start offset is still free.

        Paragraphs with roles outside the structural set (page headers,
        footers, page numbers, footnotes) are never claimed.
        """
        dropped = 0
        skipped = 0
        for paragraph in paragraphs:
            kind = _ROLE_KINDS.get(paragraph.role)
            if kind is None:
                skipped += 1
                continue
            if arena.claim(paragraph.offset_start, paragraph.end, kind) is None:
                dropped += 1

        if dropped:
            logger.debug(f"Dropped {dropped} paragraphs pre-empted by earlier ranges")
        if skipped:
            logger.debug(f"Skipped {skipped} paragraphs with non-structural roles")

    def _scan(
        self, arena: RangeArena, document: RawDocument
    ) -> list[StructureRecord]:
        """Walk claimed ranges in offset order and emit records."""
        # Page lookup from every paragraph start, including pre-empted ones
        page_by_offset: dict[int, int] = {}
        for paragraph in document.paragraphs:
            page_by_offset[paragraph.offset_start] = paragraph.page_number
        page_offsets = sorted(page_by_offset)

        main_title = ""
        current_subtitle = ""
        current_section = ""
        current_page = 0
        next_page_index = 0

        records: list[StructureRecord] = []

        for tagged in arena:
            # Apply page changes up to the end of this range
            while (
                next_page_index < len(page_offsets)
                and page_offsets[next_page_index] <= tagged.end
            ):
                current_page = page_by_offset[page_offsets[next_page_index]]
                next_page_index += 1

            text = document.content[tagged.start : tagged.end + 1]

            if tagged.kind is RangeKind.TITLE:
                current_subtitle = text
                if not main_title or current_page == 1:
                    main_title = (
                        f"{main_title}{self.TITLE_SEPARATOR}{text}"
                        if main_title
                        else text
                    )
            elif tagged.kind is RangeKind.SECTION:
                current_section = text
            else:
                is_table = tagged.kind is RangeKind.TABLE
                records.append(
                    StructureRecord(
                        offset=tagged.start,
                        length=tagged.end - tagged.start + 1,
                        text=(
                            render_table_html(document.tables[tagged.table_index])
                            if is_table
                            else text
                        ),
                        type=RecordType.TABLE if is_table else RecordType.TEXT,
                        title=main_title,
                        subtitle=current_subtitle,
                        section=current_section,
                        page_number=current_page,
                    )
                )

        return records
