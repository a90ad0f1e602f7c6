"""Mermaid flowchart rendering for extracted graphs.

Serializes a Graph as `flowchart LR` with one line per edge:

    flowchart LR
    MyQueue((MyQueue)) --> MyLambda([MyLambda])
"""

import logging

from cf_to_mermaid.models.graph import Graph, Node
from cf_to_mermaid.models.resource import ResourceKind

logger = logging.getLogger(__name__)

FLOWCHART_HEADER = "flowchart LR"


class MermaidRenderer:
    """Renders Graphs as Mermaid flowcharts.

    Each node is drawn with the shape for its kind. When a name recurs,
    the shape chosen on its first appearance is reused.
    """

    # Open/close tags per node kind
    NODE_SHAPES: dict[ResourceKind, tuple[str, str]] = {
        ResourceKind.LAMBDA_FUNCTION: ("([", "])"),  # Stadium
        ResourceKind.SQS_QUEUE: ("((", "))"),  # Circle
        ResourceKind.API_GATEWAY_METHOD: ("[[", "]]"),  # Subroutine
    }

    def render(self, graph: Graph) -> str:
        """Render a graph as Mermaid flowchart syntax.

        Args:
            graph: Extracted graph

        Returns:
            Flowchart text, header first, no trailing newline
        """
        shapes: dict[str, tuple[str, str]] = {}
        lines = [FLOWCHART_HEADER]

        for edge in graph:
            source = self._format_node(edge.source, shapes)
            target = self._format_node(edge.target, shapes)
            lines.append(f"{source} --> {target}")

        logger.debug("Rendered %d edge(s) across %d node(s)", len(graph), len(shapes))
        return "\n".join(lines)

    def _format_node(self, node: Node, shapes: dict[str, tuple[str, str]]) -> str:
        """Format a node as `name<open>name<close>`.

        Args:
            node: Node to format
            shapes: Shapes already assigned by name (updated in place)

        Returns:
            Mermaid node reference with label
        """
        if node.name not in shapes:
            shapes[node.name] = self.NODE_SHAPES[node.kind]
        opening, closing = shapes[node.name]
        return f"{node.name}{opening}{node.name}{closing}"


def render_flowchart(graph: Graph) -> str:
    """Render a graph as Mermaid flowchart syntax.

    Convenience function for diagram rendering.

    Args:
        graph: Extracted graph

    Returns:
        Flowchart text
    """
    return MermaidRenderer().render(graph)
