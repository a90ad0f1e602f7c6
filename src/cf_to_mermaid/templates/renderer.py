"""Markdown document renderer.

Renders a flowchart and its resource summary through a Jinja2 template.
Output is deterministic: the same graph always renders the same document.
"""

import logging
from typing import Any

from jinja2 import Environment, PackageLoader, TemplateError, select_autoescape

from cf_to_mermaid.models.graph import Graph
from cf_to_mermaid.models.resource import ResourceKind, Template

logger = logging.getLogger(__name__)

DEFAULT_TITLE = "CloudFormation Data Flow"

KIND_LABELS = {
    ResourceKind.LAMBDA_FUNCTION.name: "Lambda function",
    ResourceKind.SQS_QUEUE.name: "SQS queue",
    ResourceKind.API_GATEWAY_METHOD.name: "API Gateway method",
}


def kind_label(kind_name: str) -> str:
    """Human-readable label for a kind name."""
    return KIND_LABELS.get(kind_name, kind_name)


class DocumentRenderer:
    """Renders a diagram to a markdown document.

    Usage:
        renderer = DocumentRenderer()
        markdown = renderer.render(diagram, graph, template, title="Orders stack")
    """

    def __init__(self) -> None:
        """Set up the Jinja2 environment with package templates."""
        self._env = Environment(
            loader=PackageLoader("cf_to_mermaid", "templates"),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        self._env.filters["kind_label"] = kind_label

    def render(
        self,
        diagram: str,
        graph: Graph,
        template: Template | None = None,
        title: str = DEFAULT_TITLE,
        template_name: str = "diagram.md.j2",
    ) -> str:
        """Render a markdown document around a flowchart.

        Args:
            diagram: Mermaid flowchart text
            graph: Graph the flowchart was rendered from
            template: Source template, for type names and counts
            title: Document heading
            template_name: Jinja2 template file to use

        Returns:
            Rendered markdown

        Raises:
            ValueError: If the Jinja2 template is missing or fails to render
        """
        try:
            jinja_template = self._env.get_template(template_name)
        except TemplateError as e:
            logger.error("Failed to load template %s: %s", template_name, e)
            raise ValueError(f"Template not found: {template_name}") from e

        context = self._build_context(diagram, graph, template, title)

        try:
            rendered = jinja_template.render(**context)
        except TemplateError as e:
            logger.error("Template rendering failed: %s", e)
            raise ValueError(f"Template rendering failed: {e}") from e

        logger.debug("Rendered markdown document (%d characters)", len(rendered))
        return rendered

    def _build_context(
        self,
        diagram: str,
        graph: Graph,
        template: Template | None,
        title: str,
    ) -> dict[str, Any]:
        nodes = []
        for node in graph.nodes:
            resource = template.get(node.name) if template else None
            nodes.append(
                {
                    "name": node.name,
                    "kind": node.kind.name,
                    "type": resource.type_name if resource else node.kind.value,
                }
            )

        # Mappings, unsupported types and endpoints without edges are not drawn
        hidden_count = 0
        if template is not None:
            drawn = {node["name"] for node in nodes}
            hidden_count = sum(1 for resource in template if resource.logical_id not in drawn)

        return {
            "title": title,
            "source": template.source if template else None,
            "diagram": diagram,
            "nodes": nodes,
            "hidden_count": hidden_count,
        }
