"""Graph extraction from parsed templates."""

from cf_to_mermaid.extraction.edges import EDGE_RULES, EdgeExtractor, extract_graph

__all__ = ["EDGE_RULES", "EdgeExtractor", "extract_graph"]
