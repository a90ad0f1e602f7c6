"""Directed data-flow graph produced by edge extraction.

The graph is an ordered edge list. Nodes carry no identity beyond their
name and kind, so two edges touching the same resource each hold an
equal Node value instead of sharing a registry entry.
"""

from dataclasses import dataclass, field
from typing import Any, Iterator

from cf_to_mermaid.models.resource import Resource, ResourceKind


@dataclass(frozen=True)
class Node:
    """A diagram vertex for one renderable resource.

    Attributes:
        name: Logical id of the owning resource
        kind: LAMBDA_FUNCTION, SQS_QUEUE or API_GATEWAY_METHOD
    """

    name: str
    kind: ResourceKind

    def __post_init__(self) -> None:
        """Reject kinds that never become nodes."""
        if not self.kind.is_renderable:
            raise ValueError(f"Resource kind {self.kind.name} cannot be a diagram node")

    @classmethod
    def from_resource(cls, resource: Resource) -> "Node":
        """Create a node for a resource."""
        return cls(name=resource.logical_id, kind=resource.kind)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"name": self.name, "kind": self.kind.name}


@dataclass(frozen=True)
class Edge:
    """Directed edge: `source` produces or triggers data consumed by `target`."""

    source: Node
    target: Node

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {"from": self.source.to_dict(), "to": self.target.to_dict()}


@dataclass(frozen=True)
class Graph:
    """Immutable, insertion-ordered collection of edges.

    Attributes:
        edges: Edges in the order extraction produced them
    """

    edges: tuple[Edge, ...] = field(default_factory=tuple)

    def __iter__(self) -> Iterator[Edge]:
        return iter(self.edges)

    def __len__(self) -> int:
        return len(self.edges)

    @property
    def is_empty(self) -> bool:
        """Return True if the graph has no edges."""
        return not self.edges

    @property
    def nodes(self) -> list[Node]:
        """Distinct nodes in first-seen order (source before target)."""
        seen: dict[Node, None] = {}
        for edge in self.edges:
            seen.setdefault(edge.source)
            seen.setdefault(edge.target)
        return list(seen)

    def deduplicated(self) -> "Graph":
        """Return a graph keeping only the first occurrence of each edge."""
        return Graph(edges=tuple(dict.fromkeys(self.edges)))

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "edges": [edge.to_dict() for edge in self.edges],
            "node_count": len(self.nodes),
            "edge_count": len(self.edges),
        }
