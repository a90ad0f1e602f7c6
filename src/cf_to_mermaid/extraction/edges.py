"""Edge extraction from a CloudFormation template.

Each resource kind has one rule. A rule looks at one resource and the
whole template and returns the edges it contributes:

| Kind                         | Edges                                           |
|------------------------------|-------------------------------------------------|
| API_GATEWAY_METHOD           | method -> every Lambda in Integration           |
| LAMBDA_EVENT_SOURCE_MAPPING  | SQS queue in EventSourceArn -> Lambda in FunctionName |
| LAMBDA_FUNCTION, SQS_QUEUE   | none (endpoints only)                           |
| UNSUPPORTED                  | none                                            |

Resources are visited in declaration order and edges keep that order.
Dangling references and unexpected kinds are dropped, never raised.
"""

import logging
from collections.abc import Callable

from cf_to_mermaid.cloudformation.references import find_references
from cf_to_mermaid.models.graph import Edge, Graph, Node
from cf_to_mermaid.models.resource import Resource, ResourceKind, Template

logger = logging.getLogger(__name__)

EdgeRule = Callable[[Resource, Template], list[Edge]]

# Property names inspected by the rules
INTEGRATION_PROPERTY = "Integration"
EVENT_SOURCE_PROPERTY = "EventSourceArn"
FUNCTION_TARGET_PROPERTY = "FunctionName"


def _resolve_kind(
    resource: Resource,
    template: Template,
    property_name: str,
    kind: ResourceKind,
) -> list[Resource]:
    """Resolve a property's references to resources of one kind.

    Args:
        resource: Resource whose property is inspected
        template: Full template for id lookups
        property_name: Top-level property to search
        kind: Kind the referenced resources must have

    Returns:
        Matching resources in reference order
    """
    matches = []
    for logical_id in find_references(resource.get_property(property_name)):
        target = template.get(logical_id)
        if target is None:
            logger.debug(
                "%s.%s references unknown resource %s, skipping",
                resource.logical_id,
                property_name,
                logical_id,
            )
        elif target.kind is not kind:
            logger.debug(
                "%s.%s references %s (%s), expected %s, skipping",
                resource.logical_id,
                property_name,
                logical_id,
                target.kind.name,
                kind.name,
            )
        else:
            matches.append(target)
    return matches


def api_gateway_method_edges(resource: Resource, template: Template) -> list[Edge]:
    """An API method feeds every Lambda function its integration points at."""
    method = Node.from_resource(resource)
    functions = _resolve_kind(
        resource, template, INTEGRATION_PROPERTY, ResourceKind.LAMBDA_FUNCTION
    )
    return [Edge(method, Node.from_resource(function)) for function in functions]


def event_source_mapping_edges(resource: Resource, template: Template) -> list[Edge]:
    """A queue feeds the Lambda function an event source mapping wires it to.

    The mapping itself never becomes a node. Sources other than SQS queues
    (streams, Kafka topics) produce no edge.
    """
    queues = _resolve_kind(resource, template, EVENT_SOURCE_PROPERTY, ResourceKind.SQS_QUEUE)
    if not queues:
        return []
    functions = _resolve_kind(
        resource, template, FUNCTION_TARGET_PROPERTY, ResourceKind.LAMBDA_FUNCTION
    )
    return [
        Edge(Node.from_resource(queue), Node.from_resource(function))
        for queue in queues
        for function in functions
    ]


def no_edges(resource: Resource, template: Template) -> list[Edge]:
    """Endpoint-only and unsupported kinds contribute nothing."""
    return []


# Every ResourceKind must have an entry; see check below
EDGE_RULES: dict[ResourceKind, EdgeRule] = {
    ResourceKind.API_GATEWAY_METHOD: api_gateway_method_edges,
    ResourceKind.LAMBDA_EVENT_SOURCE_MAPPING: event_source_mapping_edges,
    ResourceKind.LAMBDA_FUNCTION: no_edges,
    ResourceKind.SQS_QUEUE: no_edges,
    ResourceKind.UNSUPPORTED: no_edges,
}

_missing_rules = set(ResourceKind) - set(EDGE_RULES)
if _missing_rules:
    raise RuntimeError(f"No edge rule for resource kinds: {sorted(k.name for k in _missing_rules)}")


class EdgeExtractor:
    """Builds a Graph from a Template by applying the per-kind rules.

    Attributes:
        deduplicate: Drop repeated identical edges (first occurrence wins)
    """

    def __init__(self, deduplicate: bool = False) -> None:
        """Initialize the extractor.

        Args:
            deduplicate: Whether to drop repeated identical edges
        """
        self.deduplicate = deduplicate

    def extract(self, template: Template) -> Graph:
        """Extract the data-flow graph from a template.

        Args:
            template: Parsed template

        Returns:
            Graph with edges in resource declaration order
        """
        edges: list[Edge] = []
        for resource in template:
            resource_edges = self.edges_for(resource, template)
            if resource_edges:
                logger.debug(
                    "%s (%s) contributes %d edge(s)",
                    resource.logical_id,
                    resource.kind.name,
                    len(resource_edges),
                )
            edges.extend(resource_edges)

        graph = Graph(edges=tuple(edges))
        if self.deduplicate:
            graph = graph.deduplicated()
        return graph

    def edges_for(self, resource: Resource, template: Template) -> list[Edge]:
        """Apply the rule for a single resource's kind."""
        return EDGE_RULES[resource.kind](resource, template)


def extract_graph(template: Template, deduplicate: bool = False) -> Graph:
    """Extract the data-flow graph from a template.

    Convenience function for edge extraction.

    Args:
        template: Parsed template
        deduplicate: Whether to drop repeated identical edges

    Returns:
        Graph with edges in resource declaration order
    """
    return EdgeExtractor(deduplicate=deduplicate).extract(template)
