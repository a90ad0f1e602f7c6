"""Diagram renderers."""

from cf_to_mermaid.renderers.mermaid import FLOWCHART_HEADER, MermaidRenderer, render_flowchart

__all__ = ["FLOWCHART_HEADER", "MermaidRenderer", "render_flowchart"]
