"""Size-bounded chunk planning over structure records.

The planner walks structure records in document order and greedily packs them
into chunks whose token size stays below a target. A chunk is closed early
whenever the title, subtitle or section changes, so every chunk carries a
single coherent context. Records that cannot fit in any chunk on their own are
split immediately:

- tables row by row, repeating the header rows in every part
- text on sentence boundaries

Planning is synchronous and deterministic: the only state carried between
records lives in a per-call ``_PlanState``.
"""

import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone

from docingest.lib.errors import StructureError, ValidationError
from docingest.lib.table_html import parse_table_rows, split_table_rows, wrap_table
from docingest.lib.tokens import TokenCounter, WordCounter
from docingest.models.chunk import ChunkDocument, PlannedChunk
from docingest.models.config import StorageFolders
from docingest.models.structure import RecordType, StructureRecord

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class _PlanState:
    """Mutable bookkeeping for a single ``plan`` call."""

    file_name: str
    file_uri: str
    processed_datetime: str
    chunks: list[PlannedChunk] = field(default_factory=list)
    sequence: int = 0
    texts: list[str] = field(default_factory=list)
    size: int = 0
    pages: list[int] = field(default_factory=list)
    context: tuple[str, str, str] = ("", "", "")
    previous_context: tuple[str, str, str] | None = None
    # Header rows of the last split table, reused by a directly following
    # split table that has no header of its own
    carried_header: list[str] = field(default_factory=list)

    def reset_accumulator(self) -> None:
        self.texts = []
        self.size = 0
        self.pages = []


class ChunkPlanner:
    """Partition structure records into size-bounded, context-coherent chunks.

    Attributes:
        target_size: Token bound per chunk.

    Example:
        >>> planner = ChunkPlanner(target_size=500)
        >>> chunks = planner.plan(records, "report.pdf", blob_uri)
        >>> chunks[0].document.chunk_file
        'report.pdf-0.json'
    """

    SENTENCE_DELIMITER = ". "

    def __init__(
        self,
        target_size: int,
        folders: StorageFolders | None = None,
        token_counter: TokenCounter | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the planner.

        Args:
            target_size: Token bound per chunk. Records at or above this size
                are split.
            folders: Storage folder names. Defaults to StorageFolders().
            token_counter: Sizing strategy. Defaults to the word-count proxy.
            clock: Source of the processing timestamp. Defaults to UTC now.

        Raises:
            ValueError: If target_size is not positive.
        """
        if target_size <= 0:
            raise ValueError("target_size must be positive")

        self._target_size = target_size
        self._folders = folders or StorageFolders()
        self._counter = token_counter or WordCounter()
        self._clock = clock or _utcnow

    @property
    def target_size(self) -> int:
        """Get the token bound per chunk."""
        return self._target_size

    def count_tokens(self, text: str) -> int:
        """Size ``text`` with the configured token counter."""
        return self._counter.count(text)

    def plan(
        self,
        records: Sequence[StructureRecord],
        blob_name: str,
        blob_uri: str,
    ) -> list[PlannedChunk]:
        """Plan chunks for one document.

        Args:
            records: Structure records in document order.
            blob_name: Source blob name; any folder prefix is dropped.
            blob_uri: Absolute URI of the source blob in the unprocessed folder.

        Returns:
            Planned chunks in emission order.

        Raises:
            StructureError: If there are no records, or none has content.
            ValidationError: If blob_name or blob_uri is empty.
        """
        if not blob_name or not blob_name.strip():
            raise ValidationError(
                "blob_name", "Blob name cannot be empty", "non-empty string", "''"
            )
        if not blob_uri or not blob_uri.strip():
            raise ValidationError(
                "blob_uri", "Blob URI cannot be empty", "absolute URI", "''"
            )
        if not records:
            raise StructureError("Document structure is empty")

        logger.info(f"Chunking {blob_name} ({len(records)} structure records)")

        state = _PlanState(
            file_name=blob_name.rsplit("/", 1)[-1],
            file_uri=self._rewrite_folder(blob_uri),
            processed_datetime=self._clock().astimezone(timezone.utc).isoformat(),
        )

        for index, record in enumerate(records):
            if not record.text or not record.text.strip():
                logger.warning(
                    f"Skipping structure record {index} at offset {record.offset}: "
                    "content is empty"
                )
                continue
            self._process_record(state, record)

        self._flush(state)

        if not state.chunks:
            raise StructureError("Document structure has no content to chunk")

        logger.info(f"Planned {len(state.chunks)} chunks for {state.file_name}")
        return state.chunks

    def _process_record(self, state: _PlanState, record: StructureRecord) -> None:
        record_size = self.count_tokens(record.text)

        context_changed = (
            state.previous_context is not None
            and record.context != state.previous_context
        )
        if state.size + record_size >= self._target_size or context_changed:
            self._flush(state)
        state.previous_context = record.context

        if record_size >= self._target_size:
            if record.type is RecordType.TABLE:
                parts = self._split_table(state, record)
            else:
                state.carried_header = []
                parts = self._split_text(record.text)

            pages = [record.page_number] if record.page_number else []
            for part_index, part in enumerate(parts):
                self._emit(
                    state,
                    content=part,
                    pages=list(pages),
                    context=record.context,
                    part=part_index,
                )
            state.sequence += 1
            return

        state.carried_header = []
        if not state.texts:
            state.context = record.context
        state.texts.append(record.text)
        state.size += record_size
        if record.page_number and record.page_number not in state.pages:
            state.pages.append(record.page_number)

    def _flush(self, state: _PlanState) -> None:
        """Emit the accumulated chunk, if any, and reset the accumulator."""
        if not state.texts:
            return
        self._emit(
            state,
            content="\n".join(state.texts),
            pages=list(state.pages),
            context=state.context,
            part=None,
            size=state.size,
        )
        state.sequence += 1
        state.reset_accumulator()

    def _emit(
        self,
        state: _PlanState,
        content: str,
        pages: list[int],
        context: tuple[str, str, str],
        part: int | None,
        size: int | None = None,
    ) -> None:
        suffix = f"{state.sequence}" if part is None else f"{state.sequence}-{part}"
        chunk_file = f"{state.file_name}-{suffix}.json"
        title, subtitle, section = context

        document = ChunkDocument(
            file_name=state.file_name,
            file_uri=state.file_uri,
            processed_datetime=state.processed_datetime,
            chunk_file=chunk_file,
            folder=self._folders.chunked,
            title=title,
            subtitle=subtitle,
            section=section,
            pages=pages,
            token_count=size if size is not None else self.count_tokens(content),
            content=content,
        )
        logger.debug(f"Planned chunk {chunk_file} ({document.token_count} tokens)")
        state.chunks.append(
            PlannedChunk(
                sequence=state.sequence,
                part=part,
                path=f"{self._folders.chunked}/{chunk_file}",
                document=document,
            )
        )

    def _split_table(self, state: _PlanState, record: StructureRecord) -> list[str]:
        """Split an oversized table record by rows."""
        rows = parse_table_rows(record.text)
        if not rows.header and not rows.body:
            logger.warning(
                f"Table at offset {record.offset} has no rows; emitting it whole"
            )
            state.carried_header = []
            return [record.text]

        header, body = rows.header, rows.body
        if header and (
            not body
            or self.count_tokens(wrap_table(header, [])) >= self._target_size
        ):
            # Header rows alone cannot bound a part; pack them as body rows
            logger.debug(
                f"Table at offset {record.offset} has {len(header)} header rows "
                f"and {len(body)} body rows; splitting header rows as body"
            )
            header, body = [], header + body
        else:
            header = header or state.carried_header
        state.carried_header = header
        return split_table_rows(header, body, self._target_size, self.count_tokens)

    def _split_text(self, text: str) -> list[str]:
        """Split oversized text on sentence boundaries and pack greedily."""
        pieces = [piece for piece in text.split(self.SENTENCE_DELIMITER) if piece]
        # Restore the period the delimiter consumed, except on the final piece
        sentences = [
            f"{piece}." if index < len(pieces) - 1 else piece
            for index, piece in enumerate(pieces)
        ]

        parts: list[str] = []
        current = ""
        for sentence in sentences:
            candidate = f"{current} {sentence}" if current else sentence
            if self.count_tokens(candidate) <= self._target_size:
                current = candidate
                continue
            if current:
                parts.append(current)
            current = sentence

        if current:
            parts.append(current)
        return parts

    def _rewrite_folder(self, uri: str) -> str:
        """Point a source URI at the processed folder."""
        return uri.replace(
            f"/{self._folders.unprocessed}/", f"/{self._folders.processed}/"
        )


def attach_chunk_uris(
    chunks: Sequence[PlannedChunk], container_base_uri: str
) -> list[PlannedChunk]:
    """Return copies of ``chunks`` with ``chunk_uri`` set from their path.

    Args:
        chunks: Planned chunks.
        container_base_uri: Base URI of the blob container.

    Returns:
        New PlannedChunk list; the inputs are left untouched.

    Raises:
        ValidationError: If the base URI is empty.
    """
    base = container_base_uri.strip().rstrip("/") if container_base_uri else ""
    if not base:
        raise ValidationError(
            "container_base_uri",
            "Container base URI cannot be empty",
            "absolute URI",
            repr(container_base_uri),
        )

    return [
        replace(
            chunk,
            document=chunk.document.model_copy(
                update={"chunk_uri": f"{base}/{chunk.path}"}
            ),
        )
        for chunk in chunks
    ]
