"""Markdown document rendering.

Wraps a rendered flowchart in a Jinja2 markdown template so the diagram can
be dropped straight into documentation.
"""

from cf_to_mermaid.templates.renderer import DocumentRenderer

__all__ = ["DocumentRenderer"]
