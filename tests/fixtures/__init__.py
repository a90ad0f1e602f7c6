"""Test fixtures for cf-to-mermaid.

Sample Templates:
- templates/sample-stack.template.json: API method and SQS queue feeding one Lambda
- templates/sample-stack.template.yaml: Same stack using YAML short-form tags
- templates/resources-as-list.template.json: Resources given as a list (malformed)
- templates/truncated.template.json: Invalid JSON
"""

from pathlib import Path

FIXTURES_DIR = Path(__file__).parent

TEMPLATES_DIR = FIXTURES_DIR / "templates"

SAMPLE_STACK_JSON = TEMPLATES_DIR / "sample-stack.template.json"
SAMPLE_STACK_YAML = TEMPLATES_DIR / "sample-stack.template.yaml"


def get_template(name: str) -> Path:
    """Get path to a sample template.

    Args:
        name: File name of the template

    Returns:
        Path to the template

    Raises:
        ValueError: If the template doesn't exist
    """
    template_path = TEMPLATES_DIR / name
    if not template_path.exists():
        raise ValueError(f"Sample template not found: {name}")
    return template_path
