"""cf-to-mermaid configuration system.

Configuration is YAML-based with per-run CLI overrides (--format, --title, --dedupe).
Supports environment variable substitution (${VAR}) in config files.

Configuration file discovery (in priority order):
1. CLI --config argument
2. ./.cf-to-mermaid/config.yaml
3. ./cf-to-mermaid.yaml
"""

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

OUTPUT_FORMATS = {"mermaid", "markdown"}

# =============================================================================
# Configuration Dataclasses
# =============================================================================


@dataclass
class OutputConfig:
    """Output configuration.

    Attributes:
        format: Output format (mermaid, markdown)
        title: Document heading for markdown output
    """

    format: str = "mermaid"
    title: str = "CloudFormation Data Flow"

    def __post_init__(self) -> None:
        """Validate output configuration."""
        if self.format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Invalid output format: {self.format}. Valid: {sorted(OUTPUT_FORMATS)}"
            )


@dataclass
class ExtractionConfig:
    """Edge extraction configuration.

    Attributes:
        deduplicate_edges: Keep only the first of identical edges
    """

    deduplicate_edges: bool = False


@dataclass
class CIConfig:
    """CI/CD-specific configuration.

    Attributes:
        json_output: Use JSON log lines
    """

    json_output: bool = False


@dataclass
class ConverterConfig:
    """Top-level cf-to-mermaid configuration.

    Attributes:
        output: Output format and title
        extraction: Edge extraction options
        ci: CI/CD settings
    """

    output: OutputConfig = field(default_factory=OutputConfig)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    ci: CIConfig = field(default_factory=CIConfig)

    # Runtime overrides (set by CLI)
    _config_path: Path | None = field(default=None, repr=False)

    @property
    def config_path(self) -> Path | None:
        """Get the path to the config file that was loaded."""
        return self._config_path


# =============================================================================
# Environment Variable Substitution
# =============================================================================


def substitute_env_vars(value: Any) -> Any:
    """Substitute environment variables in config values.

    Supports ${VAR} syntax for environment variable substitution.
    Example: ${STACK_NAME} -> value of STACK_NAME

    Args:
        value: Config value (string, dict, list, or other)

    Returns:
        Value with environment variables substituted
    """
    if isinstance(value, str):
        pattern = re.compile(r"\$\{([^}]+)\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ValueError(f"Environment variable not set: {var_name}")
            return env_value

        return pattern.sub(replace_var, value)

    elif isinstance(value, dict):
        return {k: substitute_env_vars(v) for k, v in value.items()}

    elif isinstance(value, list):
        return [substitute_env_vars(v) for v in value]

    return value


# =============================================================================
# Config File Discovery
# =============================================================================


def find_config_file(start_path: Path | None = None) -> Path | None:
    """Find configuration file in standard locations.

    Search order:
    1. ./.cf-to-mermaid/config.yaml
    2. ./cf-to-mermaid.yaml

    Args:
        start_path: Starting directory for search (defaults to cwd)

    Returns:
        Path to config file if found, None otherwise
    """
    if start_path is None:
        start_path = Path.cwd()

    start_path = start_path.resolve()

    candidates = [
        start_path / ".cf-to-mermaid" / "config.yaml",
        start_path / "cf-to-mermaid.yaml",
    ]

    for candidate in candidates:
        if candidate.exists():
            return candidate

    return None


# =============================================================================
# Config Loading
# =============================================================================


def _section(data: dict[str, Any], name: str) -> dict[str, Any]:
    # An empty YAML section loads as None
    section = data[name] or {}
    if not isinstance(section, dict):
        raise ValueError(
            f"Config section '{name}' must be a mapping, got {type(section).__name__}"
        )
    return section


def load_config_from_dict(data: dict[str, Any]) -> ConverterConfig:
    """Load configuration from a dictionary.

    Args:
        data: Configuration dictionary

    Returns:
        ConverterConfig instance

    Raises:
        ValueError: If a section is not a mapping or holds invalid values
    """
    data = substitute_env_vars(data)

    config = ConverterConfig()

    if "output" in data:
        output_data = _section(data, "output")
        config.output = OutputConfig(
            format=output_data.get("format", config.output.format),
            title=output_data.get("title", config.output.title),
        )

    if "extraction" in data:
        extraction_data = _section(data, "extraction")
        config.extraction = ExtractionConfig(
            deduplicate_edges=bool(
                extraction_data.get("deduplicate_edges", config.extraction.deduplicate_edges)
            ),
        )

    if "ci" in data:
        ci_data = _section(data, "ci")
        config.ci = CIConfig(
            json_output=bool(ci_data.get("json_output", False)),
        )

    return config


def load_config(
    config_path: Path | None = None,
    auto_discover: bool = True,
) -> ConverterConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file
        auto_discover: Whether to search for config file if not specified

    Returns:
        ConverterConfig instance

    Raises:
        FileNotFoundError: If config_path specified but doesn't exist
        ValueError: If the file is not valid YAML, not a mapping, or holds invalid values
    """
    if config_path is not None:
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        found_path = config_path
    elif auto_discover:
        found_path = find_config_file()
    else:
        found_path = None

    if found_path is not None:
        with open(found_path, encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise ValueError(f"Invalid YAML in config file {found_path}: {e}") from e
        if not isinstance(data, dict):
            raise ValueError(f"Config file must contain a mapping: {found_path}")
        config = load_config_from_dict(data)
        config._config_path = found_path
    else:
        config = ConverterConfig()

    return config


def create_default_config() -> str:
    """Create default configuration YAML content.

    Returns:
        YAML string with default configuration and comments
    """
    return '''# cf-to-mermaid Configuration

# Output settings
output:
  format: "mermaid"  # mermaid (plain flowchart), markdown (fenced, with resource table)
  title: "CloudFormation Data Flow"  # Heading for markdown output

# Edge extraction
extraction:
  deduplicate_edges: false  # Keep only the first of identical edges

# CI/CD settings
ci:
  json_output: false
'''
