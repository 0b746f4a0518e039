"""Tests for StructureBuilder and the range arena it claims content with."""

import logging

import pytest

from docingest.lib.errors import StructureError, ValidationError
from docingest.lib.structure_builder import RangeArena, RangeKind, StructureBuilder
from docingest.models.document import Paragraph, RawDocument, Span, Table, TableCell
from docingest.models.structure import RecordType


class TestRangeArena:
    """Tests for RangeArena claims."""

    def test_claims_keep_offset_order(self) -> None:
        """Test ranges iterate in offset order regardless of claim order."""
        arena = RangeArena()
        arena.claim(20, 29, RangeKind.TEXT)
        arena.claim(0, 9, RangeKind.TITLE)
        arena.claim(10, 19, RangeKind.TABLE, table_index=0)

        assert [r.start for r in arena] == [0, 10, 20]
        assert len(arena) == 3

    def test_claim_starting_inside_existing_range_is_rejected(self) -> None:
        """Test a claim whose start is covered returns None."""
        arena = RangeArena()
        arena.claim(5, 15, RangeKind.TABLE, table_index=0)

        assert arena.claim(10, 30, RangeKind.TEXT) is None
        assert arena.claim(15, 15, RangeKind.TEXT) is None
        assert len(arena) == 1

    def test_claim_running_into_existing_range_is_clipped(self) -> None:
        """Test a claim's tail is clipped before the next range."""
        arena = RangeArena()
        arena.claim(10, 20, RangeKind.TABLE, table_index=0)

        tagged = arena.claim(0, 15, RangeKind.TEXT)

        assert tagged is not None
        assert (tagged.start, tagged.end) == (0, 9)

    def test_single_character_range(self) -> None:
        """Test a one-character range is claimed and covered."""
        arena = RangeArena()
        arena.claim(3, 3, RangeKind.TEXT)

        assert arena.covering(3) is not None
        assert arena.covering(2) is None
        assert arena.covering(4) is None


class TestStructureBuilderBasics:
    """Tests for record emission and context tracking."""

    def test_emits_text_and_table_records_in_order(self, document_builder) -> None:
        """Test the typical title/section/body/table document."""
        document = (
            document_builder()
            .paragraph("Annual Report", role="title")
            .paragraph("Overview", role="sectionHeading")
            .paragraph("Body text one.")
            .table([["Name", "Value"], ["a b", "c d"]])
            .paragraph("Closing text", page=2)
            .build()
        )

        records = StructureBuilder().build(document)

        assert [r.type for r in records] == [
            RecordType.TEXT,
            RecordType.TABLE,
            RecordType.TEXT,
        ]
        body, table, closing = records
        assert body.text == "Body text one."
        assert body.title == "Annual Report"
        assert body.subtitle == "Annual Report"
        assert body.section == "Overview"
        assert body.page_number == 1
        assert table.text == (
            "<table><tr><th>Name</th><th>Value</th></tr>"
            "<tr><td>a b</td><td>c d</td></tr></table>"
        )
        assert closing.text == "Closing text"
        assert closing.page_number == 2

    def test_records_are_disjoint_and_ordered(self, document_builder) -> None:
        """Test no two records share a content offset."""
        document = (
            document_builder()
            .paragraph("Heading", role="title")
            .paragraph("Intro paragraph")
            .table([["H1", "H2"], ["v1", "v2"], ["v3", "v4"]])
            .paragraph("Between tables")
            .table([["X"], ["y"]])
            .paragraph("Tail")
            .build()
        )

        records = StructureBuilder().build(document)

        for previous, current in zip(records, records[1:]):
            assert previous.end < current.offset

    def test_table_cell_paragraphs_do_not_duplicate_text(
        self, document_builder
    ) -> None:
        """Test paragraphs starting inside a table are dropped."""
        document = (
            document_builder()
            .paragraph("Intro")
            .table([["Only", "Cells"], ["row", "data"]])
            .build()
        )

        records = StructureBuilder().build(document)

        assert len(records) == 2
        assert all("Cells" not in r.text for r in records if r.type is RecordType.TEXT)

    def test_page_furniture_roles_are_left_out(self) -> None:
        """Test page numbers, headers and footers never become records."""
        content = "Page 3\nBody text here\nConfidential footer"
        document = RawDocument(
            content=content,
            paragraphs=[
                Paragraph(offset_start=0, length=6, role="pageNumber", page_number=3),
                Paragraph(offset_start=7, length=14, page_number=3),
                Paragraph(
                    offset_start=22, length=19, role="pageFooter", page_number=3
                ),
            ],
        )

        records = StructureBuilder().build(document)

        assert [r.text for r in records] == ["Body text here"]
        assert records[0].page_number == 3

    def test_skipped_paragraph_still_moves_the_page(self) -> None:
        """Test a page header start updates the page of the table after it."""
        content = "Intro\nPage 2\nCell"
        document = RawDocument(
            content=content,
            paragraphs=[
                Paragraph(offset_start=0, length=5, page_number=1),
                Paragraph(offset_start=6, length=6, role="pageHeader", page_number=2),
            ],
            tables=[
                Table(
                    spans=[Span(offset_start=13, length=4)],
                    cells=[TableCell(row=0, col=0, content="Cell")],
                )
            ],
        )

        records = StructureBuilder().build(document)

        assert [r.page_number for r in records] == [1, 2]
        assert records[1].type is RecordType.TABLE

    def test_paragraph_tail_overlapping_table_is_clipped(self) -> None:
        """Test a paragraph running into a table keeps only its leading text."""
        content = "Lead text TABLECELL"
        document = RawDocument(
            content=content,
            paragraphs=[Paragraph(offset_start=0, length=len(content), page_number=1)],
            tables=[
                Table(
                    spans=[Span(offset_start=10, length=9)],
                    cells=[TableCell(row=0, col=0, content="TABLECELL")],
                )
            ],
        )

        records = StructureBuilder().build(document)

        assert records[0].text == "Lead text "
        assert records[0].length == 10
        assert records[1].type is RecordType.TABLE


class TestStructureBuilderTitles:
    """Tests for main title accumulation."""

    def test_titles_on_first_page_are_joined(self, document_builder) -> None:
        """Test consecutive page-one titles accumulate with '; '."""
        document = (
            document_builder()
            .paragraph("Company Inc.", role="title")
            .paragraph("Annual Report 2023", role="title")
            .paragraph("Body")
            .build()
        )

        records = StructureBuilder().build(document)

        assert records[0].title == "Company Inc.; Annual Report 2023"
        assert records[0].subtitle == "Annual Report 2023"

    def test_later_titles_only_update_subtitle(self, document_builder) -> None:
        """Test titles after page one do not change the main title."""
        document = (
            document_builder()
            .paragraph("Main", role="title", page=1)
            .paragraph("First body", page=1)
            .paragraph("Appendix", role="title", page=3)
            .paragraph("Appendix body", page=3)
            .build()
        )

        records = StructureBuilder().build(document)

        assert records[1].title == "Main"
        assert records[1].subtitle == "Appendix"

    def test_first_title_is_taken_from_any_page(self, document_builder) -> None:
        """Test the first title sets the main title even past page one."""
        document = (
            document_builder()
            .paragraph("Late Title", role="title", page=2)
            .paragraph("Body", page=2)
            .build()
        )

        records = StructureBuilder().build(document)

        assert records[0].title == "Late Title"

    def test_section_is_sticky(self, document_builder) -> None:
        """Test a section heading applies until the next one."""
        document = (
            document_builder()
            .paragraph("One", role="sectionHeading")
            .paragraph("a")
            .paragraph("b")
            .paragraph("Two", role="sectionHeading")
            .paragraph("c")
            .build()
        )

        records = StructureBuilder().build(document)

        assert [r.section for r in records] == ["One", "One", "Two"]


class TestStructureBuilderPages:
    """Tests for sticky page tracking."""

    def test_page_is_taken_from_paragraph_starts(self) -> None:
        """Test a record takes the last page change at or before its end."""
        content = "first page text\nsecond page text"
        document = RawDocument(
            content=content,
            paragraphs=[
                Paragraph(offset_start=0, length=15, page_number=1),
                Paragraph(offset_start=16, length=16, page_number=2),
            ],
        )

        records = StructureBuilder().build(document)

        assert [r.page_number for r in records] == [1, 2]

    def test_table_page_comes_from_its_cell_paragraphs(
        self, document_builder
    ) -> None:
        """Test pre-empted cell paragraphs still drive page numbers."""
        document = (
            document_builder()
            .paragraph("Intro", page=1)
            .table([["A", "B"], ["c", "d"]], page=4)
            .build()
        )

        records = StructureBuilder().build(document)

        assert records[1].page_number == 4


class TestStructureBuilderValidation:
    """Tests for input validation and degenerate documents."""

    def test_empty_content_raises(self) -> None:
        """Test empty content is a StructureError."""
        with pytest.raises(StructureError, match="empty"):
            StructureBuilder().build(RawDocument(content=""))

    def test_only_headings_raises(self) -> None:
        """Test a document without text or tables is a StructureError."""
        document = RawDocument(
            content="Title",
            paragraphs=[Paragraph(offset_start=0, length=5, role="title")],
        )

        with pytest.raises(StructureError):
            StructureBuilder().build(document)

    def test_span_beyond_content_raises(self) -> None:
        """Test a paragraph outside the content is a ValidationError."""
        document = RawDocument(
            content="short",
            paragraphs=[Paragraph(offset_start=3, length=10)],
        )

        with pytest.raises(ValidationError) as exc_info:
            StructureBuilder().build(document)

        assert exc_info.value.field == "paragraphs.0"

    def test_zero_length_span_raises(self) -> None:
        """Test an empty paragraph span is a ValidationError."""
        document = RawDocument(
            content="text", paragraphs=[Paragraph(offset_start=0, length=0)]
        )

        with pytest.raises(ValidationError):
            StructureBuilder().build(document)

    def test_table_without_spans_raises(self) -> None:
        """Test a table with no spans is a ValidationError."""
        document = RawDocument(
            content="text",
            paragraphs=[Paragraph(offset_start=0, length=4)],
            tables=[Table(spans=[], cells=[])],
        )

        with pytest.raises(ValidationError) as exc_info:
            StructureBuilder().build(document)

        assert exc_info.value.field == "tables.0.spans"

    def test_disjoint_table_spans_use_bounding_range(self, caplog) -> None:
        """Test content between a table's spans is classified as table."""
        content = "AAAA gap BBBB after"
        document = RawDocument(
            content=content,
            paragraphs=[
                Paragraph(offset_start=5, length=3),
                Paragraph(offset_start=14, length=5),
            ],
            tables=[
                Table(
                    spans=[
                        Span(offset_start=0, length=4),
                        Span(offset_start=9, length=4),
                    ],
                    cells=[TableCell(row=0, col=0, content="AAAA BBBB")],
                )
            ],
        )

        with caplog.at_level(logging.DEBUG, logger="docingest.lib.structure_builder"):
            records = StructureBuilder().build(document)

        assert [r.type for r in records] == [RecordType.TABLE, RecordType.TEXT]
        assert records[0].length == 13
        assert records[1].text == "after"
        assert "disjoint" in caplog.text
