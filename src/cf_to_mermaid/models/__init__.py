"""cf-to-mermaid data models.

This module exports the core entities used throughout the application:
- ResourceKind: Allow-listed CloudFormation resource kinds
- Resource: One declared resource
- Template: Ordered, immutable resource set
- Node, Edge, Graph: Extracted data-flow graph
"""

from cf_to_mermaid.models.graph import Edge, Graph, Node
from cf_to_mermaid.models.resource import RENDERABLE_KINDS, Resource, ResourceKind, Template

__all__ = [
    "ResourceKind",
    "RENDERABLE_KINDS",
    "Resource",
    "Template",
    "Node",
    "Edge",
    "Graph",
]
