"""CloudFormation resource model.

A Template is built once from a parsed document and never mutated:
- ResourceKind: Closed set of resource kinds the converter understands
- Resource: One declared resource (logical id, kind, raw properties)
- Template: Resources in declaration order with lookup by logical id
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ResourceKind(Enum):
    """Resource kinds on the allow-list, plus an explicit fallback."""

    LAMBDA_FUNCTION = "AWS::Lambda::Function"
    SQS_QUEUE = "AWS::SQS::Queue"
    API_GATEWAY_METHOD = "AWS::ApiGateway::Method"
    LAMBDA_EVENT_SOURCE_MAPPING = "AWS::Lambda::EventSourceMapping"
    UNSUPPORTED = "Unsupported"

    @classmethod
    def from_type(cls, resource_type: Any) -> "ResourceKind":
        """Map a CloudFormation `Type` string to a kind.

        Args:
            resource_type: Raw `Type` value from the template

        Returns:
            Matching kind, or UNSUPPORTED for anything off the allow-list
        """
        if isinstance(resource_type, str):
            for kind in cls:
                if kind is not cls.UNSUPPORTED and kind.value == resource_type:
                    return kind
        return cls.UNSUPPORTED

    @property
    def is_renderable(self) -> bool:
        """Return True if resources of this kind can appear as diagram nodes."""
        return self in RENDERABLE_KINDS


RENDERABLE_KINDS = frozenset(
    {
        ResourceKind.LAMBDA_FUNCTION,
        ResourceKind.SQS_QUEUE,
        ResourceKind.API_GATEWAY_METHOD,
    }
)


@dataclass(frozen=True)
class Resource:
    """A single resource declared in a template.

    Attributes:
        logical_id: Name of the resource inside the template
        kind: Resource kind (UNSUPPORTED if off the allow-list)
        properties: Raw `Properties` value, opaque outside the edge rules
        type_name: Original `Type` string, kept for reporting
    """

    logical_id: str
    kind: ResourceKind
    properties: Any = field(default_factory=dict, compare=False)
    type_name: str = ""

    def get_property(self, name: str) -> Any:
        """Return a top-level property value, or None if absent or malformed."""
        if isinstance(self.properties, dict):
            return self.properties.get(name)
        return None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "logical_id": self.logical_id,
            "kind": self.kind.name,
            "type": self.type_name,
        }


@dataclass(frozen=True)
class Template:
    """Immutable set of resources parsed from one CloudFormation document.

    Attributes:
        resources: Resources in declaration order
        source: Where the template was read from (path or "<string>")
    """

    resources: tuple[Resource, ...] = ()
    source: str | None = None
    _by_id: dict[str, Resource] = field(
        default_factory=dict, init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        """Index resources by logical id."""
        index = {resource.logical_id: resource for resource in self.resources}
        if len(index) != len(self.resources):
            raise ValueError("Logical ids must be unique within a template")
        object.__setattr__(self, "_by_id", index)

    def get(self, logical_id: str) -> Resource | None:
        """Look up a resource by logical id (None if dangling)."""
        return self._by_id.get(logical_id)

    def __contains__(self, logical_id: object) -> bool:
        return logical_id in self._by_id

    def __iter__(self):
        return iter(self.resources)

    def __len__(self) -> int:
        return len(self.resources)

    def count_by_kind(self) -> dict[str, int]:
        """Count resources per kind name, in first-seen order."""
        counts: dict[str, int] = {}
        for resource in self.resources:
            counts[resource.kind.name] = counts.get(resource.kind.name, 0) + 1
        return counts
