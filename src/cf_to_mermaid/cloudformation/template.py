"""CloudFormation template loading.

Turns a template document into an immutable Template. Only the shape of
the document is validated here:

- The document must be a mapping with a `Resources` mapping
- Each resource entry must itself be a mapping

Anything else about a resource (unknown `Type`, odd `Properties`) is kept
as-is and left for edge extraction to skip.
"""

import json
import logging
from pathlib import Path
from typing import Any

import yaml

from cf_to_mermaid.models.resource import Resource, ResourceKind, Template

logger = logging.getLogger(__name__)

YAML_SUFFIXES = {".yaml", ".yml"}


class TemplateError(Exception):
    """Raised when a template cannot be read or has no usable resource collection."""

    def __init__(self, message: str, source: str | None = None) -> None:
        self.message = message
        self.source = source
        full_message = f"{source}: {message}" if source else message
        super().__init__(full_message)


# =============================================================================
# YAML short-form intrinsic functions
# =============================================================================


class CloudFormationLoader(yaml.SafeLoader):
    """SafeLoader that understands CloudFormation short-form tags (!Ref, !Sub, ...)."""


def _construct_intrinsic(loader: yaml.SafeLoader, tag_suffix: str, node: yaml.Node) -> dict:
    if tag_suffix in {"Ref", "Condition"}:
        key = tag_suffix
    else:
        key = f"Fn::{tag_suffix}"

    if isinstance(node, yaml.ScalarNode):
        value: Any = loader.construct_scalar(node)
        # !GetAtt Resource.Attribute is shorthand for the two-element list
        if tag_suffix == "GetAtt" and isinstance(value, str):
            value = value.split(".", 1)
    elif isinstance(node, yaml.SequenceNode):
        value = loader.construct_sequence(node, deep=True)
    else:
        value = loader.construct_mapping(node, deep=True)

    return {key: value}


CloudFormationLoader.add_multi_constructor("!", _construct_intrinsic)


# =============================================================================
# Parsing
# =============================================================================


def parse_document(text: str, fmt: str = "json", source: str | None = None) -> Any:
    """Parse raw template text into a generic tree.

    Args:
        text: Template text
        fmt: "json" or "yaml"
        source: Origin used in error messages

    Returns:
        Parsed document

    Raises:
        TemplateError: If the text is not valid JSON/YAML
    """
    if fmt == "yaml":
        try:
            return yaml.load(text, Loader=CloudFormationLoader)  # noqa: S506
        except yaml.YAMLError as e:
            raise TemplateError(f"Invalid YAML: {e}", source) from e

    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise TemplateError(f"Invalid JSON: {e.msg} (line {e.lineno}, column {e.colno})", source) from e


def template_from_document(document: Any, source: str | None = None) -> Template:
    """Build a Template from a parsed document.

    Args:
        document: Parsed JSON/YAML tree
        source: Origin used in error messages

    Returns:
        Template with resources in declaration order

    Raises:
        TemplateError: If the document has no resource collection of the expected shape
    """
    if not isinstance(document, dict):
        raise TemplateError(
            f"Template must be a JSON object, got {type(document).__name__}", source
        )

    if "Resources" not in document:
        raise TemplateError("Template has no 'Resources' section", source)

    raw_resources = document["Resources"]
    if not isinstance(raw_resources, dict):
        raise TemplateError(
            f"'Resources' must be a mapping of logical id to resource, "
            f"got {type(raw_resources).__name__}",
            source,
        )

    resources = []
    for logical_id, body in raw_resources.items():
        if not isinstance(body, dict):
            raise TemplateError(
                f"Resource '{logical_id}' must be an object, got {type(body).__name__}",
                source,
            )

        type_name = body.get("Type")
        kind = ResourceKind.from_type(type_name)
        if kind is ResourceKind.UNSUPPORTED:
            logger.debug("Resource %s has unsupported type %s", logical_id, type_name)

        resources.append(
            Resource(
                logical_id=str(logical_id),
                kind=kind,
                properties=body.get("Properties", {}),
                type_name=type_name if isinstance(type_name, str) else "",
            )
        )

    # YAML keys 1 and '1' both become logical id "1"
    try:
        template = Template(resources=tuple(resources), source=source)
    except ValueError as e:
        raise TemplateError(str(e), source) from e

    logger.debug("Parsed %d resources from %s", len(resources), source or "template")
    return template


def loads_template(text: str, fmt: str = "json", source: str | None = None) -> Template:
    """Parse template text into a Template.

    Args:
        text: Template text
        fmt: "json" or "yaml"
        source: Origin used in error messages

    Returns:
        Parsed Template

    Raises:
        TemplateError: If the text is invalid or badly shaped
    """
    return template_from_document(parse_document(text, fmt, source), source)


def load_template(path: Path) -> Template:
    """Read and parse a template file.

    The format is chosen from the suffix: .yaml/.yml are read as YAML,
    everything else as JSON.

    Args:
        path: Template file path

    Returns:
        Parsed Template

    Raises:
        TemplateError: If the file cannot be read, is invalid, or is badly shaped
    """
    source = str(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateError(f"Cannot read template: {e}", source) from e

    fmt = "yaml" if path.suffix.lower() in YAML_SUFFIXES else "json"
    logger.info("Loading %s template: %s", fmt.upper(), path)
    return loads_template(text, fmt, source)
