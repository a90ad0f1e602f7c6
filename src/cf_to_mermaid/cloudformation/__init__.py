"""CloudFormation template handling.

- template: Load JSON/YAML templates into the resource model
- references: Resolve Ref / Fn::GetAtt / Fn::Sub to logical ids
"""

from cf_to_mermaid.cloudformation.references import find_references, sub_placeholders
from cf_to_mermaid.cloudformation.template import (
    TemplateError,
    load_template,
    loads_template,
    template_from_document,
)

__all__ = [
    "TemplateError",
    "find_references",
    "load_template",
    "loads_template",
    "sub_placeholders",
    "template_from_document",
]
