"""Intrinsic reference resolution.

Finds the logical ids a JSON value points at through CloudFormation's
intrinsic functions:

- {"Ref": "Id"}
- {"Fn::GetAtt": ["Id", "Attr"]} or {"Fn::GetAtt": "Id.Attr"}
- {"Fn::Sub": "...${Id}...${Id.Attr}..."} and the list form
  {"Fn::Sub": ["...${Var}...", {"Var": ...}]}

Shapes that do not match are skipped without error. Whether an id exists
in the template is not checked here.
"""

import re
from typing import Any

# ${Name} or ${Name.Attr}; ${!Literal} is an escape and never a reference
SUB_PLACEHOLDER_PATTERN = re.compile(r"\$\{([^}]*)\}")


def find_references(value: Any) -> list[str]:
    """Collect every logical id referenced anywhere inside a value.

    Args:
        value: JSON-like tree (dict, list, str, number, bool, None)

    Returns:
        Referenced logical ids, duplicates removed, in first-encountered order
    """
    found: dict[str, None] = {}
    _walk(value, found)
    return list(found)


def _walk(value: Any, found: dict[str, None]) -> None:
    if isinstance(value, list):
        for item in value:
            _walk(item, found)
        return

    if not isinstance(value, dict):
        return

    if len(value) == 1:
        ((key, argument),) = value.items()
        if key == "Ref":
            _add(_ref_target(argument), found)
            return
        if key == "Fn::GetAtt":
            _add(_getatt_target(argument), found)
            return
        if key == "Fn::Sub":
            _walk_sub(argument, found)
            return

    for child in value.values():
        _walk(child, found)


def _add(logical_id: str | None, found: dict[str, None]) -> None:
    if logical_id:
        found.setdefault(logical_id)


def _is_logical_id(name: str) -> bool:
    # Pseudo parameters (AWS::Region, AWS::StackName) are not resources
    return bool(name) and "::" not in name


def _ref_target(argument: Any) -> str | None:
    if isinstance(argument, str) and _is_logical_id(argument.strip()):
        return argument.strip()
    return None


def _getatt_target(argument: Any) -> str | None:
    if isinstance(argument, list) and argument and isinstance(argument[0], str):
        name = argument[0].strip()
    elif isinstance(argument, str) and "." in argument:
        name = argument.split(".", 1)[0].strip()
    else:
        return None
    return name if _is_logical_id(name) else None


def _walk_sub(argument: Any, found: dict[str, None]) -> None:
    if isinstance(argument, str):
        for name in sub_placeholders(argument):
            _add(name, found)
        return

    if isinstance(argument, list) and argument and isinstance(argument[0], str):
        variables = argument[1] if len(argument) > 1 and isinstance(argument[1], dict) else {}
        for name in sub_placeholders(argument[0]):
            if name not in variables:
                _add(name, found)
        for variable_value in variables.values():
            _walk(variable_value, found)


def sub_placeholders(template_string: str) -> list[str]:
    """Extract logical ids named by `${...}` placeholders in an Fn::Sub string.

    `${Name.Attr}` yields `Name`. Escaped (`${!Name}`), empty and pseudo
    parameter placeholders are skipped.

    Args:
        template_string: Fn::Sub template string

    Returns:
        Placeholder names in order of appearance (may repeat)
    """
    names = []
    for match in SUB_PLACEHOLDER_PATTERN.finditer(template_string):
        placeholder = match.group(1).strip()
        if not placeholder or placeholder.startswith("!"):
            continue
        name = placeholder.split(".", 1)[0]
        if _is_logical_id(name):
            names.append(name)
    return names
