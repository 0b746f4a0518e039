"""Concurrent enrichment of planned chunks.

Each chunk's cleaned content is sent to four independent services at once:
key-phrase extraction, entity extraction, a context summary from a chat
completion service, and an embedding. Every call is wrapped on its own so that
a failure becomes a logged default value before the join; one failing service
never cancels or fails the other calls or the chunk.

Key Features:
- Four-way fan-out per chunk joined with ``asyncio.gather``
- Per-call failure isolation with documented defaults
- Chunks enriched concurrently, optionally bounded by a semaphore
- Output order matches input order
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from functools import partial
from typing import TypeVar

from docingest.lib.errors import ExtractionFailure, ValidationError
from docingest.lib.prompts import CONTEXT_ASSISTANT_PROMPT, CONTEXT_SYSTEM_PROMPT
from docingest.lib.text_cleaning import clean_text
from docingest.models.chunk import EnrichedChunk, PlannedChunk
from docingest.services.base import (
    ChatMessage,
    CompletionClient,
    EmbeddingClient,
    EntityExtractor,
    KeyPhraseExtractor,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


class EnrichmentCoordinator:
    """Enrich chunks with key phrases, entities, context and embeddings.

    Defaults on failure: empty list for key phrases, entities and the
    embedding; the context field is omitted from the output.

    Example:
        >>> coordinator = EnrichmentCoordinator(
        ...     keyphrases=text_analytics,
        ...     entities=text_analytics_entities,
        ...     completion=chat_client,
        ...     embeddings=embedding_client,
        ... )
        >>> enriched = await coordinator.enrich(planned_chunks)
    """

    def __init__(
        self,
        keyphrases: KeyPhraseExtractor,
        entities: EntityExtractor,
        completion: CompletionClient,
        embeddings: EmbeddingClient,
        max_concurrency: int | None = None,
    ) -> None:
        """Initialize the coordinator.

        Args:
            keyphrases: Key-phrase extraction service.
            entities: Entity extraction service.
            completion: Chat completion service for context summaries.
            embeddings: Embedding service.
            max_concurrency: Maximum chunks enriched at once. None means no
                internal limit beyond the services' own.

        Raises:
            ValueError: If max_concurrency is not positive.
        """
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError("max_concurrency must be positive")

        self._keyphrases = keyphrases
        self._entities = entities
        self._completion = completion
        self._embeddings = embeddings
        self._max_concurrency = max_concurrency

    async def enrich(self, chunks: Sequence[PlannedChunk]) -> list[EnrichedChunk]:
        """Enrich every chunk of a document.

        Args:
            chunks: Planned chunks, in emission order.

        Returns:
            Enriched chunks in the same order as the input.

        Raises:
            ValidationError: If the list is empty or a chunk lacks a chunk
                file name or content.
        """
        if not chunks:
            logger.error("The chunks list is empty. Cannot proceed with enrichment.")
            raise ValidationError(
                "chunks", "The chunks list cannot be empty", "at least one chunk", "[]"
            )

        for chunk in chunks:
            self._validate_chunk(chunk)

        logger.info(f"Enriching {len(chunks)} chunks")

        if self._max_concurrency is None:
            return list(await asyncio.gather(*(self.enrich_chunk(c) for c in chunks)))

        semaphore = asyncio.Semaphore(self._max_concurrency)

        async def bounded(chunk: PlannedChunk) -> EnrichedChunk:
            async with semaphore:
                return await self.enrich_chunk(chunk)

        # gather keeps input order
        return list(await asyncio.gather(*(bounded(chunk) for chunk in chunks)))

    async def enrich_chunk(self, chunk: PlannedChunk) -> EnrichedChunk:
        """Enrich a single chunk.

        Args:
            chunk: Planned chunk.

        Returns:
            EnrichedChunk with the chunk's fields plus enrichment results.
        """
        chunk_file = chunk.document.chunk_file
        logger.debug(f"Cleaning chunk {chunk_file} content before enrichment")
        text = clean_text(chunk.document.content)

        logger.debug(f"Enriching chunk {chunk_file} and generating embeddings")
        guard = partial(self._guarded, chunk_file=chunk_file)
        keyphrases, entities, context, vector = await asyncio.gather(
            guard("keyphrases", partial(self._keyphrases.extract, text), []),
            guard("entities", partial(self._entities.extract, text), []),
            guard("context", partial(self._summarize, text), None),
            guard("embedding", partial(self._embeddings.embed, text), []),
        )

        return EnrichedChunk(
            **chunk.document.model_dump(),
            keyphrases=list(keyphrases),
            entities=list(entities),
            context=context or None,
            content_vector=list(vector),
        )

    async def _summarize(self, text: str) -> str:
        """Ask the completion service for a short context summary."""
        messages = [
            ChatMessage(role="system", content=CONTEXT_SYSTEM_PROMPT),
            ChatMessage(role="assistant", content=CONTEXT_ASSISTANT_PROMPT),
            ChatMessage(role="user", content=text),
        ]
        response = await self._completion.complete(messages)
        return response.strip() if response else ""

    async def _guarded(
        self,
        operation: str,
        call: Callable[[], Awaitable[T]],
        default: T,
        *,
        chunk_file: str,
    ) -> T:
        """Await ``call``, converting any failure into ``default``."""
        try:
            return await call()
        except Exception as e:
            failure = ExtractionFailure(operation, chunk_file, e)
            logger.error(str(failure))
            return default

    @staticmethod
    def _validate_chunk(chunk: PlannedChunk) -> None:
        document = chunk.document
        if not chunk.path or not document.chunk_file:
            raise ValidationError(
                "chunks.chunk_file",
                "Each chunk must have a chunk file name and path",
                "non-empty chunk_file and path",
                repr(document.chunk_file),
            )
        if not document.content or not document.content.strip():
            raise ValidationError(
                f"chunks.{document.chunk_file}.content",
                "Chunk must contain content",
                "non-empty text",
                repr(document.content),
            )
