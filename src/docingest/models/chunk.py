"""Chunk payload schemas.

``ChunkDocument`` is the JSON object persisted per chunk. Its key set is a wire
contract consumed downstream, so fields are declared in wire order and the
optional ``chunk_uri`` is omitted rather than serialized as null.
"""

import json
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ChunkDocument(BaseModel):
    """Serialized form of one planned chunk."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    file_name: str
    file_uri: str
    processed_datetime: str
    chunk_file: str
    file_class: str = "text"
    folder: str
    title: str = ""
    subtitle: str = ""
    section: str = ""
    pages: list[int] = Field(default_factory=list)
    token_count: int = Field(ge=0)
    content: str
    chunk_uri: str | None = None

    def to_record_dict(self) -> dict[str, Any]:
        """Convert to the wire dict, omitting unset optional fields.

        Returns:
            Dictionary keyed by wire names.
        """
        record = self.model_dump(by_alias=True)
        return {key: value for key, value in record.items() if value is not None}

    def to_json(self) -> str:
        """Serialize as pretty-printed JSON, keeping non-ASCII text as-is."""
        return json.dumps(self.to_record_dict(), indent=2, ensure_ascii=False)


class EnrichedChunk(ChunkDocument):
    """A chunk document with enrichment results merged in.

    ``context`` is omitted from the wire dict when the summary call failed or
    returned nothing.
    """

    keyphrases: list[str] = Field(default_factory=list)
    entities: list[str] = Field(default_factory=list)
    context: str | None = None
    content_vector: list[float] = Field(
        default_factory=list, serialization_alias="contentVector"
    )


@dataclass(frozen=True)
class PlannedChunk:
    """A chunk emitted by the planner together with its storage path.

    Attributes:
        sequence: Chunk number ``n`` within the document
        part: Sub-chunk number ``m`` for split records, None otherwise
        path: Storage path (``<chunked folder>/<chunk_file>``)
        document: The serialized chunk payload
    """

    sequence: int
    part: int | None
    path: str
    document: ChunkDocument
