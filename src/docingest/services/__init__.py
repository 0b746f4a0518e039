"""Collaborator protocols and concrete service adapters."""

from docingest.services.base import (
    BlobStore,
    ChatMessage,
    CompletionClient,
    DocumentAnalyzer,
    EmbeddingClient,
    EntityExtractor,
    KeyPhraseExtractor,
    SearchIndex,
)
from docingest.services.local_blob_store import LocalBlobStore

__all__ = [
    "BlobStore",
    "ChatMessage",
    "CompletionClient",
    "DocumentAnalyzer",
    "EmbeddingClient",
    "EntityExtractor",
    "KeyPhraseExtractor",
    "LocalBlobStore",
    "SearchIndex",
]
