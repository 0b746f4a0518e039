"""Pydantic models for pipeline configuration."""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator


class StorageFolders(BaseModel):
    """Blob storage folder names used across the pipeline.

    Attributes:
        unprocessed: Folder new source documents land in
        processed: Folder source documents move to after success
        chunked: Folder chunk JSON files are written to
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    unprocessed: str = "unprocessed"
    processed: str = "processed"
    chunked: str = "chunked"

    @field_validator("unprocessed", "processed", "chunked")
    @classmethod
    def validate_folder(cls, value: str) -> str:
        """Folder names must be non-empty and carry no surrounding slashes."""
        stripped = value.strip().strip("/")
        if not stripped:
            raise ValueError("folder name must not be empty")
        return stripped


class EnrichmentConfig(BaseModel):
    """Enrichment fan-out settings."""

    model_config = ConfigDict(extra="forbid")

    max_concurrency: int | None = Field(
        default=None,
        ge=1,
        description="Maximum chunks enriched at once (None for unbounded)",
    )


class IngestConfig(BaseModel):
    """Top-level docingest configuration."""

    model_config = ConfigDict(extra="forbid")

    chunk_target_size: int = Field(
        default=500, gt=0, description="Chunk size bound in tokens"
    )
    token_counter: Literal["words", "tiktoken"] = Field(
        default="words", description="Token counting strategy"
    )
    storage: StorageFolders = Field(default_factory=StorageFolders)
    container_base_uri: str | None = Field(
        default=None, description="Base URI of the blob container for chunk URIs"
    )
    enrichment: EnrichmentConfig = Field(default_factory=EnrichmentConfig)

    @field_validator("container_base_uri")
    @classmethod
    def strip_trailing_slash(cls, value: str | None) -> str | None:
        """Normalize the container URI so paths can be appended with '/'."""
        if value is None:
            return None
        value = value.strip().rstrip("/")
        return value or None
