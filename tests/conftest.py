"""Shared pytest fixtures for cf-to-mermaid tests.

Fixtures are organized by category:
- Path fixtures: Sample template files
- Document fixtures: Template documents built in memory
- Configuration fixtures: Config dictionaries
"""

import json
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from tests.fixtures import SAMPLE_STACK_JSON, SAMPLE_STACK_YAML, TEMPLATES_DIR
from tests.fixtures.documents import (
    api_method,
    event_source_mapping,
    lambda_function,
    lambda_invoke_uri,
    sqs_queue,
)

# =============================================================================
# Path Fixtures
# =============================================================================


@pytest.fixture
def templates_dir() -> Path:
    """Return the path to the sample template fixtures."""
    return TEMPLATES_DIR


@pytest.fixture
def sample_stack_json() -> Path:
    """Return the JSON sample stack path."""
    return SAMPLE_STACK_JSON


@pytest.fixture
def sample_stack_yaml() -> Path:
    """Return the YAML sample stack path."""
    return SAMPLE_STACK_YAML


@pytest.fixture
def write_template(tmp_path: Path) -> Callable[[dict[str, Any], str], Path]:
    """Return a helper that writes a template document to a temp file."""

    def _write(document: dict[str, Any], name: str = "template.json") -> Path:
        path = tmp_path / name
        path.write_text(json.dumps(document), encoding="utf-8")
        return path

    return _write


# =============================================================================
# Document Fixtures
# =============================================================================


@pytest.fixture
def fan_in_document() -> dict[str, Any]:
    """API method and SQS queue both feeding one Lambda function."""
    return {
        "Resources": {
            "MyLambda": lambda_function("my-lambda"),
            "MyAPI": api_method(lambda_invoke_uri("MyLambda")),
            "MyQueue": sqs_queue("my-queue"),
            "MyMapping": event_source_mapping(
                {"Fn::GetAtt": ["MyQueue", "Arn"]},
                {"Ref": "MyLambda"},
            ),
        }
    }


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def full_config() -> dict[str, Any]:
    """Return a complete configuration with all options."""
    return {
        "output": {
            "format": "markdown",
            "title": "Orders data flow",
        },
        "extraction": {
            "deduplicate_edges": True,
        },
        "ci": {
            "json_output": False,
        },
    }
