"""CLI commands for docingest."""

import json
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from docingest.config.validator import flatten_pydantic_errors
from docingest.lib.errors import ValidationError
from docingest.models.document import RawDocument


def read_analysis_file(path: str | Path) -> RawDocument:
    """Load a layout-analysis JSON file into a RawDocument.

    Raises:
        ValidationError: If the file is not valid JSON or not an analysis payload.
    """
    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValidationError(
            "analysis_json", f"Invalid JSON in {path}: {e.msg}", "JSON object", "text"
        ) from e

    if not isinstance(payload, dict):
        raise ValidationError(
            "analysis_json",
            f"Unexpected top-level value in {path}",
            "JSON object",
            type(payload).__name__,
        )

    try:
        return RawDocument.from_analysis_dict(payload)
    except PydanticValidationError as e:
        raise ValidationError(
            "analysis_json",
            "\n".join(flatten_pydantic_errors(e)),
            "layout analysis result",
            str(path),
        ) from e
