"""Collaborator interfaces consumed by the ingestion pipeline.

The pipeline talks to external services (layout analysis, text analytics,
chat completion, embeddings, blob storage, search index) only through these
protocols. Concrete clients live outside the core library; tests use fakes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Literal, Protocol, runtime_checkable

if TYPE_CHECKING:
    from docingest.models.document import RawDocument


@dataclass(frozen=True)
class ChatMessage:
    """A single message sent to a completion service.

    Attributes:
        role: Speaker role
        content: Message text
    """

    role: Literal["system", "assistant", "user"]
    content: str


@runtime_checkable
class DocumentAnalyzer(Protocol):
    """Layout/OCR analysis of a source document."""

    async def analyze(self, data: bytes) -> RawDocument:
        """Analyze document bytes into content plus paragraph/table spans."""
        ...


@runtime_checkable
class KeyPhraseExtractor(Protocol):
    """Key-phrase extraction service."""

    async def extract(self, text: str) -> list[str]:
        """Return key phrases found in ``text``."""
        ...


@runtime_checkable
class EntityExtractor(Protocol):
    """Named-entity recognition service."""

    async def extract(self, text: str) -> list[str]:
        """Return the surface text of entities found in ``text``."""
        ...


@runtime_checkable
class CompletionClient(Protocol):
    """Chat completion service."""

    async def complete(self, messages: list[ChatMessage]) -> str:
        """Return the assistant reply to ``messages``."""
        ...


@runtime_checkable
class EmbeddingClient(Protocol):
    """Text embedding service."""

    async def embed(self, text: str) -> list[float]:
        """Return the embedding vector for ``text``."""
        ...


@runtime_checkable
class BlobStore(Protocol):
    """Blob storage addressed by ``<folder>/<name>`` paths."""

    async def get(self, path: str) -> bytes | None:
        """Return blob bytes, or None if the blob does not exist."""
        ...

    async def put(self, path: str, data: bytes | str) -> None:
        """Write a blob, overwriting any existing one."""
        ...

    async def move(self, source_path: str, destination_path: str) -> None:
        """Move a blob to a new path."""
        ...

    async def exists(self, path: str) -> bool:
        """Whether a blob exists at ``path``."""
        ...


@runtime_checkable
class SearchIndex(Protocol):
    """Vector search index."""

    async def upsert(self, documents: list[dict[str, Any]]) -> list[bool]:
        """Merge-or-upload documents; returns per-document success."""
        ...
