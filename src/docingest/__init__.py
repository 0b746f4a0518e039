"""docingest - Turn PDF layout analysis into enriched, size-bounded chunks.

docingest reconstructs the structure of an analyzed PDF (titles, section
headings, body text and tables), packs it into chunks for embedding and
search indexing, and enriches every chunk concurrently.

Main features:
- Interval-based structure reconstruction with page and heading context
- Greedy chunk planning that splits oversized tables by rows and text by sentences
- Concurrent enrichment with per-call failure isolation
- YAML configuration with environment overrides
"""

from docingest.config.loader import ConfigLoader
from docingest.lib.chunk_planner import ChunkPlanner, attach_chunk_uris
from docingest.lib.enrichment import EnrichmentCoordinator
from docingest.lib.errors import (
    ConfigError,
    DocIngestError,
    ExtractionFailure,
    StructureError,
    UpstreamServiceError,
    ValidationError,
)
from docingest.lib.processor import DocumentProcessor, ProcessingResult
from docingest.lib.structure_builder import StructureBuilder

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "ChunkPlanner",
    "ConfigError",
    "ConfigLoader",
    "DocIngestError",
    "DocumentProcessor",
    "EnrichmentCoordinator",
    "ExtractionFailure",
    "ProcessingResult",
    "StructureBuilder",
    "StructureError",
    "UpstreamServiceError",
    "ValidationError",
    "attach_chunk_uris",
]
