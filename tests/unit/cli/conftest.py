"""Shared fixtures for CLI command tests."""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def analysis_json(temp_dir: Path) -> Path:
    """Write a layout-service style analysis result to disk."""
    content = "Annual Report\nHighlights\nRevenue grew strongly.\nOutlook\nMore growth."
    payload = {
        "analyzeResult": {
            "content": content,
            "paragraphs": [
                {
                    "role": "title",
                    "spans": [{"offset": 0, "length": 13}],
                    "boundingRegions": [{"pageNumber": 1}],
                },
                {
                    "role": "sectionHeading",
                    "spans": [{"offset": 14, "length": 10}],
                    "boundingRegions": [{"pageNumber": 1}],
                },
                {
                    "spans": [{"offset": 25, "length": 22}],
                    "boundingRegions": [{"pageNumber": 1}],
                },
                {
                    "role": "sectionHeading",
                    "spans": [{"offset": 48, "length": 7}],
                    "boundingRegions": [{"pageNumber": 2}],
                },
                {
                    "spans": [{"offset": 56, "length": 12}],
                    "boundingRegions": [{"pageNumber": 2}],
                },
            ],
            "tables": [],
        }
    }
    path = temp_dir / "analysis.json"
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path
