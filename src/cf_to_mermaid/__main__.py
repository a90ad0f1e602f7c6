"""Entry point for running cf-to-mermaid as a module.

Usage:
    python -m cf_to_mermaid [command] [options]

Example:
    python -m cf_to_mermaid convert -i stack.template.json -o diagram.mmd
    python -m cf_to_mermaid inspect -i stack.template.json
"""

from cf_to_mermaid.cli import app

if __name__ == "__main__":
    app()
