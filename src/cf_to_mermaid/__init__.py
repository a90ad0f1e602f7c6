"""cf-to-mermaid - CloudFormation template to Mermaid data-flow diagrams.

Reads a CloudFormation template, follows the intrinsic references between
its resources and writes a Mermaid flowchart of how data moves through the
stack (API methods and queues feeding Lambda functions).

Core principles:
- Deterministic: Same template always produces byte-identical output
- Permissive extraction: One malformed resource never aborts the conversion
- Fixed allow-list: Only known resource kinds become diagram nodes
"""

__version__ = "0.1.0"
__author__ = "cf-to-mermaid Contributors"
