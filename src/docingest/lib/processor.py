"""End-to-end processing of one source document.

The processor downloads a PDF from the unprocessed folder, runs layout
analysis, builds the structure, plans chunks, enriches them, then writes the
chunk JSON files and indexes them concurrently. The source blob is moved to
the processed folder only after every chunk was stored and indexed.
"""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from docingest.lib.chunk_planner import ChunkPlanner, attach_chunk_uris
from docingest.lib.enrichment import EnrichmentCoordinator
from docingest.lib.errors import UpstreamServiceError, ValidationError
from docingest.lib.structure_builder import StructureBuilder
from docingest.lib.tokens import create_token_counter
from docingest.models.chunk import EnrichedChunk, PlannedChunk
from docingest.models.config import IngestConfig
from docingest.services.base import BlobStore, DocumentAnalyzer, SearchIndex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProcessingResult:
    """Outcome of a processed document.

    Attributes:
        file_name: Source blob name
        chunk_count: Number of chunks stored and indexed
        chunk_paths: Storage paths of the chunk JSON files, in emission order
    """

    file_name: str
    chunk_count: int
    chunk_paths: list[str] = field(default_factory=list)


class DocumentProcessor:
    """Orchestrate analysis, structuring, chunking, enrichment and upload."""

    def __init__(
        self,
        config: IngestConfig,
        blob_store: BlobStore,
        analyzer: DocumentAnalyzer,
        enricher: EnrichmentCoordinator,
        search_index: SearchIndex,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        """Initialize the processor.

        Args:
            config: Pipeline configuration.
            blob_store: Storage holding source documents and chunk files.
            analyzer: Layout analysis service.
            enricher: Enrichment coordinator for planned chunks.
            search_index: Index receiving the enriched chunks.
            clock: Timestamp source handed to the chunk planner.
        """
        self.config = config
        self._blob_store = blob_store
        self._analyzer = analyzer
        self._enricher = enricher
        self._search_index = search_index
        self._builder = StructureBuilder()
        self._planner = ChunkPlanner(
            target_size=config.chunk_target_size,
            folders=config.storage,
            token_counter=create_token_counter(config.token_counter),
            clock=clock,
        )

    async def process(
        self, file_name: str, timeout: float | None = None
    ) -> ProcessingResult:
        """Process one document from the unprocessed folder.

        Args:
            file_name: Blob name inside the unprocessed folder.
            timeout: Optional deadline in seconds for the whole document.
                Pending service calls are cancelled when it expires.

        Returns:
            ProcessingResult describing the stored chunks.

        Raises:
            ValidationError: If the source blob is missing or empty.
            StructureError: If the document yields no structure or chunks.
            UpstreamServiceError: If analysis, storage or indexing fails.
            asyncio.TimeoutError: If the timeout expires.
        """
        if timeout is None:
            return await self._process(file_name)
        return await asyncio.wait_for(self._process(file_name), timeout=timeout)

    async def _process(self, file_name: str) -> ProcessingResult:
        folders = self.config.storage
        source_path = f"{folders.unprocessed}/{file_name}"
        logger.info(f"Processing {source_path}")

        data = await self._download(source_path)

        try:
            document = await self._analyzer.analyze(data)
        except Exception as e:
            raise UpstreamServiceError(
                "analyzer", f"Layout analysis failed for {file_name}", e
            ) from e

        records = self._builder.build(document)
        chunks = self._planner.plan(
            records, file_name, self._source_uri(source_path)
        )
        if self.config.container_base_uri:
            chunks = attach_chunk_uris(chunks, self.config.container_base_uri)
        else:
            logger.debug("No container_base_uri configured; chunk_uri left unset")

        enriched = await self._enricher.enrich(chunks)

        # Both sides run to completion before the first failure is raised
        outcomes = await asyncio.gather(
            self._store_chunks(chunks, enriched),
            self._index_chunks(enriched),
            return_exceptions=True,
        )
        errors = [
            outcome for outcome in outcomes if isinstance(outcome, BaseException)
        ]
        if len(errors) > 1:
            logger.error(f"Chunk indexing also failed: {errors[1]}")
        if errors:
            raise errors[0]

        destination_path = f"{folders.processed}/{file_name}"
        try:
            await self._blob_store.move(source_path, destination_path)
        except Exception as e:
            raise UpstreamServiceError(
                "blob_store", f"Failed to move {source_path}", e
            ) from e

        logger.info(f"Processed {file_name}: {len(chunks)} chunks")
        return ProcessingResult(
            file_name=file_name,
            chunk_count=len(chunks),
            chunk_paths=[chunk.path for chunk in chunks],
        )

    async def _download(self, path: str) -> bytes:
        try:
            data = await self._blob_store.get(path)
        except Exception as e:
            raise UpstreamServiceError("blob_store", f"Failed to read {path}", e) from e

        if not data:
            raise ValidationError(
                "file_name",
                f"Source document {path} is missing or empty",
                "existing non-empty blob",
                "missing" if data is None else "0 bytes",
            )
        return data

    def _source_uri(self, source_path: str) -> str:
        base = self.config.container_base_uri
        return f"{base}/{source_path}" if base else f"/{source_path}"

    async def _store_chunks(
        self, chunks: list[PlannedChunk], enriched: list[EnrichedChunk]
    ) -> None:
        try:
            await asyncio.gather(
                *(
                    self._blob_store.put(chunk.path, document.to_json())
                    for chunk, document in zip(chunks, enriched, strict=True)
                )
            )
        except Exception as e:
            raise UpstreamServiceError(
                "blob_store", "Failed to write chunk files", e
            ) from e
        logger.debug(f"Stored {len(chunks)} chunk files")

    async def _index_chunks(self, enriched: list[EnrichedChunk]) -> None:
        documents: list[dict[str, Any]] = [
            chunk.to_record_dict() for chunk in enriched
        ]
        try:
            results = await self._search_index.upsert(documents)
        except Exception as e:
            raise UpstreamServiceError(
                "search_index", "Failed to upsert chunks", e
            ) from e

        failed = [
            documents[index]["chunk_file"]
            for index, succeeded in enumerate(results)
            if not succeeded
        ]
        if failed or len(results) != len(documents):
            raise UpstreamServiceError(
                "search_index",
                f"Upsert failed for {len(failed)} of {len(documents)} chunks: "
                f"{', '.join(failed)}",
            )
        logger.debug(f"Indexed {len(documents)} chunks")
