"""``{{name}}`` placeholder substitution for URLs, payloads and query strings."""

import json
import re
from typing import Any
from urllib.parse import quote

from .exceptions import UnresolvedTemplateError


PLACEHOLDER_RE = re.compile(r"\{\{(\w+)\}\}")


def placeholder_names(template: str) -> list[str]:
    """Return placeholder names in order of appearance."""
    return PLACEHOLDER_RE.findall(template)


def stringify(value: Any) -> str:
    """String form of an argument: strings as-is, everything else as JSON text."""
    if isinstance(value, str):
        return value
    return json.dumps(value, ensure_ascii=False)


def _lookup(arguments: dict[str, Any], name: str) -> Any:
    if arguments.get(name) is None:
        raise UnresolvedTemplateError(name)
    return arguments[name]


def render_string(template: str, arguments: dict[str, Any], url_encode: bool = False) -> str:
    """Replace every placeholder in a string with the argument's string form.

    Raises:
        UnresolvedTemplateError: If a placeholder has no matching argument.
    """
    def replace(match: re.Match) -> str:
        text = stringify(_lookup(arguments, match.group(1)))
        return quote(text, safe="") if url_encode else text

    return PLACEHOLDER_RE.sub(replace, template)


def render_url(url: str, arguments: dict[str, Any]) -> str:
    return render_string(url, arguments, url_encode=True)


def render_payload(template: Any, arguments: dict[str, Any]) -> Any:
    """Substitute placeholders in the string leaves of a JSON template.

    A leaf that consists of exactly one placeholder takes the raw argument
    value, so numbers, booleans, lists and objects keep their type.

    Raises:
        UnresolvedTemplateError: If a placeholder has no matching argument.
    """
    if isinstance(template, str):
        whole = PLACEHOLDER_RE.fullmatch(template)
        if whole:
            return _lookup(arguments, whole.group(1))
        return render_string(template, arguments)

    if isinstance(template, list):
        return [render_payload(item, arguments) for item in template]

    if isinstance(template, dict):
        return {key: render_payload(value, arguments) for key, value in template.items()}

    return template


def render_query(template: dict[str, str], arguments: dict[str, Any]) -> dict[str, Any]:
    return {key: render_payload(value, arguments) for key, value in template.items()}
