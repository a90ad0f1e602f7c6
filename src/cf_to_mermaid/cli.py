"""cf-to-mermaid CLI interface.

Commands:
- convert: Convert a CloudFormation template to a Mermaid diagram
- inspect: List a template's resources and the edges they produce
- init: Write a default configuration file

Global options:
- --config: Path to configuration file
- --verbose: Enable verbose output with timestamps
- --quiet: Suppress info messages
- --ci: JSON log lines
- --version: Show version and exit
"""

import json
import logging
from pathlib import Path
from typing import Annotated

import typer

from cf_to_mermaid import __version__
from cf_to_mermaid.config import ConverterConfig, create_default_config, load_config
from cf_to_mermaid.utils.logging import configure_from_cli, get_logger

app = typer.Typer(
    name="cf-to-mermaid",
    help="Convert CloudFormation templates into Mermaid data-flow diagrams",
    add_completion=False,
    no_args_is_help=True,
)

# Global state
_config: ConverterConfig | None = None
_logger = get_logger()

DEFAULT_CONFIG_FILE = "cf-to-mermaid.yaml"


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"cf-to-mermaid {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    config: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to configuration file",
            dir_okay=False,
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output with timestamps",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress info messages (warnings and errors only)",
        ),
    ] = False,
    ci: Annotated[
        bool,
        typer.Option(
            "--ci",
            help="Enable CI mode with JSON log lines",
        ),
    ] = False,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit",
        ),
    ] = False,
) -> None:
    """cf-to-mermaid - CloudFormation to Mermaid data-flow diagrams.

    Follows Ref, Fn::GetAtt and Fn::Sub references between API Gateway
    methods, SQS queues and Lambda functions and draws them as a flowchart.
    """
    global _config

    configure_from_cli(verbose=verbose, quiet=quiet, ci=ci)

    try:
        _config = load_config(config_path=config)
    except FileNotFoundError as e:
        _logger.error(str(e))
        raise typer.Exit(1)
    except Exception as e:
        _logger.error(f"Failed to load config: {e}")
        raise typer.Exit(1)

    if _config.ci.json_output and not ci:
        configure_from_cli(verbose=verbose, quiet=quiet, ci=True)
    if _config.config_path:
        _logger.debug(f"Loaded config from: {_config.config_path}")


# =============================================================================
# convert command
# =============================================================================


@app.command()
def convert(
    input_file: Annotated[
        Path,
        typer.Option(
            "--input-file",
            "-i",
            help="CloudFormation template (JSON, or YAML by .yaml/.yml suffix)",
        ),
    ],
    output_file: Annotated[
        Path,
        typer.Option(
            "--output-file",
            "-o",
            help="File to write the diagram to",
        ),
    ],
    format: Annotated[
        str | None,
        typer.Option(
            "--format",
            "-f",
            help="Output format: mermaid, markdown (overrides config)",
        ),
    ] = None,
    title: Annotated[
        str | None,
        typer.Option(
            "--title",
            help="Heading for markdown output (overrides config)",
        ),
    ] = None,
    dedupe: Annotated[
        bool,
        typer.Option(
            "--dedupe",
            help="Drop repeated identical edges (enables it regardless of config)",
        ),
    ] = False,
) -> None:
    """Convert a CloudFormation template to a Mermaid diagram.

    Exit codes:
        0: Diagram written
        1: Template unreadable or malformed, or output could not be written
    """
    from cf_to_mermaid.cloudformation.template import TemplateError
    from cf_to_mermaid.pipeline import ConversionPipeline, PipelineOptions

    pipeline = ConversionPipeline(config=_config)
    options = PipelineOptions(
        output_format=format,
        title=title,
        deduplicate_edges=True if dedupe else None,
    )

    try:
        result = pipeline.run(input_file, options)
    except TemplateError as e:
        _logger.error(f"Invalid template: {e}")
        raise typer.Exit(1)
    except ValueError as e:
        _logger.error(str(e))
        raise typer.Exit(1)

    try:
        pipeline.write(result, output_file)
    except OSError as e:
        _logger.error(f"Failed to write output: {e}")
        raise typer.Exit(1)

    _logger.structured(
        logging.INFO,
        f"Diagram written to {output_file}",
        output=str(output_file),
        **result.to_dict(),
    )


# =============================================================================
# inspect command
# =============================================================================


@app.command()
def inspect(
    input_file: Annotated[
        Path,
        typer.Option(
            "--input-file",
            "-i",
            help="CloudFormation template (JSON, or YAML by .yaml/.yml suffix)",
        ),
    ],
    json_output: Annotated[
        bool,
        typer.Option(
            "--json",
            help="Output results as JSON",
        ),
    ] = False,
) -> None:
    """List a template's resources, their kinds and the edges they produce."""
    from cf_to_mermaid.cloudformation.template import TemplateError, load_template
    from cf_to_mermaid.extraction.edges import EdgeExtractor

    try:
        template = load_template(input_file)
    except TemplateError as e:
        _logger.error(f"Invalid template: {e}")
        raise typer.Exit(1)

    extractor = EdgeExtractor()
    rows = []
    for resource in template:
        edges = extractor.edges_for(resource, template)
        row = resource.to_dict()
        row["edges"] = [
            {"from": edge.source.name, "to": edge.target.name} for edge in edges
        ]
        rows.append(row)

    if json_output:
        typer.echo(json.dumps({"source": template.source, "resources": rows}, indent=2))
        return

    if not rows:
        typer.echo("No resources declared")
        return

    width = max(len(row["logical_id"]) for row in rows)
    for row in rows:
        typer.echo(f"{row['logical_id']:<{width}}  {row['kind']:<28}  {row['type']}")
        for edge in row["edges"]:
            typer.echo(f"{'':<{width}}    {edge['from']} --> {edge['to']}")


# =============================================================================
# init command
# =============================================================================


@app.command()
def init(
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            help="Overwrite existing config",
        ),
    ] = False,
) -> None:
    """Write a default configuration file to the current directory."""
    config_file = Path(DEFAULT_CONFIG_FILE)

    if config_file.exists() and not force:
        _logger.error(f"Config already exists: {config_file}")
        _logger.info("Use --force to overwrite")
        raise typer.Exit(1)

    config_file.write_text(create_default_config(), encoding="utf-8")
    _logger.info(f"Created config: {config_file}")
    typer.echo(f"Configuration written to {config_file}")


if __name__ == "__main__":
    app()
