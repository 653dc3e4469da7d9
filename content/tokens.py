"""
Template tokens - substitutes [[dotted.path]] markers inside content trees.

A content tree is any JSON-like value: strings, lists/tuples, and mappings,
nested to any depth. Every string leaf may hold markers such as
``[[name]]`` or ``[[address.city]]``, which are looked up in a context record
(normally ``Location.as_context()``).

Rules:
  - A marker whose path does not resolve (missing key, non-mapping step,
    None value, empty path) is left verbatim in the output.
  - Containers are rebuilt only when one of their children changed; unchanged
    subtrees are returned as the same objects, so ``result is tree`` means
    nothing was substituted. Input is never mutated.
  - There is no escape for a literal ``[[`` in content.

Callers must not pass cyclic trees or contexts; there is no cycle detection.
"""
import json
import re
from collections.abc import Mapping
from typing import Any, Optional

TOKEN_PATTERN = re.compile(r'\[\[([^\]]+)\]\]')


def get_value_at_path(data: Any, path: str) -> Any:
    """
    Walk *data* along a dotted *path*; empty segments are skipped.
    Returns None when a step is not a mapping or the key is absent.
    """
    segments = [segment for segment in path.split('.') if segment]
    if not segments:
        return None

    current = data
    for segment in segments:
        if not isinstance(current, Mapping):
            return None
        current = current.get(segment)
    return current


def _stringify(value: Any) -> str:
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, (list, tuple, dict)):
        return json.dumps(value, separators=(',', ':'), default=str)
    return str(value)


def resolve_template_tokens(text: str, context: Optional[Mapping] = None) -> str:
    """Substitute every resolvable marker in one string leaf."""
    if context is None or '[[' not in text:
        return text

    def _replace(match):
        path = match.group(1).strip()
        if not path:
            return match.group(0)
        resolved = get_value_at_path(context, path)
        if resolved is None:
            return match.group(0)
        return _stringify(resolved)

    result = TOKEN_PATTERN.sub(_replace, text)
    return text if result == text else result


def resolve_tokens(value: Any, context: Optional[Mapping] = None) -> Any:
    """Resolve markers throughout a content tree against *context*."""
    if context is None:
        return value

    if isinstance(value, str):
        return resolve_template_tokens(value, context)

    if isinstance(value, (list, tuple)):
        changed = False
        items = []
        for item in value:
            resolved = resolve_tokens(item, context)
            if resolved is not item:
                changed = True
            items.append(resolved)
        if not changed:
            return value
        return tuple(items) if isinstance(value, tuple) else items

    if isinstance(value, Mapping):
        changed = False
        result = {}
        for key, item in value.items():
            resolved = resolve_tokens(item, context)
            if resolved is not item:
                changed = True
            result[key] = resolved
        return result if changed else value

    return value
