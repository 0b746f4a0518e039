"""Default configuration values for docingest."""

# Config file names searched in a directory, in preference order
CONFIG_FILE_NAMES: tuple[str, ...] = ("docingest.yml", "docingest.yaml")

# Environment variable to dotted config field mapping
ENV_VAR_MAP: dict[str, str] = {
    "DOCINGEST_CHUNK_TARGET_SIZE": "chunk_target_size",
    "DOCINGEST_TOKEN_COUNTER": "token_counter",
    "DOCINGEST_CONTAINER_BASE_URI": "container_base_uri",
    "DOCINGEST_MAX_CONCURRENCY": "enrichment.max_concurrency",
}

INTEGER_FIELDS: frozenset[str] = frozenset(
    {"chunk_target_size", "enrichment.max_concurrency"}
)
