"""Conversion pipeline orchestrator.

Runs the stages in order and collects their results:
1. Load the template (fatal on a malformed document)
2. Extract the data-flow graph (never fails)
3. Render the flowchart, optionally wrapped in a markdown document
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from cf_to_mermaid.cloudformation.template import load_template
from cf_to_mermaid.config import OUTPUT_FORMATS, ConverterConfig
from cf_to_mermaid.extraction.edges import EdgeExtractor
from cf_to_mermaid.models.graph import Graph
from cf_to_mermaid.models.resource import Template
from cf_to_mermaid.renderers.mermaid import MermaidRenderer
from cf_to_mermaid.templates.renderer import DocumentRenderer

logger = logging.getLogger(__name__)


@dataclass
class PipelineOptions:
    """Per-run overrides of the loaded configuration.

    Attributes:
        output_format: Output format (mermaid, markdown); config value if None
        title: Markdown document heading; config value if None
        deduplicate_edges: Drop repeated identical edges; config value if None
    """

    output_format: str | None = None
    title: str | None = None
    deduplicate_edges: bool | None = None


@dataclass(frozen=True)
class ConversionResult:
    """Everything produced by one conversion.

    Attributes:
        template: Parsed template
        graph: Extracted graph
        diagram: Plain Mermaid flowchart
        output: Final text to write (flowchart or markdown document)
        output_format: Format of `output`
    """

    template: Template
    graph: Graph
    diagram: str
    output: str
    output_format: str

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "source": self.template.source,
            "resource_count": len(self.template),
            "resources_by_kind": self.template.count_by_kind(),
            "graph": self.graph.to_dict(),
            "output_format": self.output_format,
        }


class ConversionPipeline:
    """Converts CloudFormation templates to Mermaid diagrams.

    Usage:
        pipeline = ConversionPipeline(config)
        result = pipeline.run(Path("stack.template.json"))
        pipeline.write(result, Path("diagram.mmd"))
    """

    def __init__(self, config: ConverterConfig | None = None) -> None:
        """Initialize the pipeline.

        Args:
            config: Converter configuration (uses defaults if None)
        """
        self.config = config or ConverterConfig()
        self._mermaid = MermaidRenderer()
        self._documents = DocumentRenderer()

    def run(self, input_path: Path, options: PipelineOptions | None = None) -> ConversionResult:
        """Load, extract and render one template file.

        Args:
            input_path: Template file path
            options: Per-run overrides

        Returns:
            ConversionResult with the rendered output

        Raises:
            TemplateError: If the template cannot be read or is badly shaped
            ValueError: If the output format is unknown
        """
        template = load_template(input_path)
        return self.convert(template, options)

    def convert(self, template: Template, options: PipelineOptions | None = None) -> ConversionResult:
        """Extract and render an already-parsed template.

        Args:
            template: Parsed template
            options: Per-run overrides

        Returns:
            ConversionResult with the rendered output

        Raises:
            ValueError: If the output format is unknown
        """
        options = options or PipelineOptions()
        output_format = options.output_format or self.config.output.format
        if output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"Invalid output format: {output_format}. Valid: {sorted(OUTPUT_FORMATS)}"
            )

        deduplicate = (
            options.deduplicate_edges
            if options.deduplicate_edges is not None
            else self.config.extraction.deduplicate_edges
        )

        graph = EdgeExtractor(deduplicate=deduplicate).extract(template)
        logger.info(
            "Extracted %d edge(s) between %d node(s) from %d resource(s)",
            len(graph),
            len(graph.nodes),
            len(template),
        )

        diagram = self._mermaid.render(graph)

        if output_format == "markdown":
            output = self._documents.render(
                diagram,
                graph,
                template,
                title=options.title or self.config.output.title,
            )
        else:
            output = diagram + "\n"

        return ConversionResult(
            template=template,
            graph=graph,
            diagram=diagram,
            output=output,
            output_format=output_format,
        )

    def write(self, result: ConversionResult, output_path: Path) -> Path:
        """Write a conversion result to a file.

        Args:
            result: Conversion result
            output_path: Destination file (parent directories are created)

        Returns:
            Path to the written file
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(result.output, encoding="utf-8")
        logger.info("Wrote %s diagram to %s", result.output_format, output_path)
        return output_path
