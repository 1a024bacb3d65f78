"""
Path Initializer

Get-or-create access to nested optional structure, e.g.

    ensure_path(statement, "context.contextActivities.parent[]").append(activity)

Each dotted segment names a child. Missing children are created on the way
down: a segment ending in "[]" becomes an empty list (stored without the
suffix), any other segment an empty mapping, or the model class the owner
declares for it in `child_types`. The leaf itself is returned, never a copy,
so callers mutate it in place.
"""

from collections.abc import MutableMapping
from typing import Any, Callable

LIST_MARKER = "[]"


def _is_missing(value: Any) -> bool:
    # Containers count as present even when empty, so repeated calls keep
    # returning the same reference.
    if value is None:
        return True
    return isinstance(value, (str, int, float, bool)) and not value


def get_or_create(owner: Any, name: str, factory: Callable[[], Any]) -> Any:
    """
    Return owner[name] (or owner.name), creating it with factory() if missing.

    Mappings are accessed by key, anything else by attribute.
    """
    if isinstance(owner, MutableMapping):
        current = owner.get(name)
        if _is_missing(current):
            current = factory()
            owner[name] = current
        return current

    current = getattr(owner, name, None)
    if _is_missing(current):
        current = factory()
        setattr(owner, name, current)
    return current


def _factory_for(owner: Any, key: str) -> Callable[[], Any]:
    if isinstance(owner, MutableMapping):
        return dict
    child_types = getattr(type(owner), "child_types", None) or {}
    return child_types.get(key, dict)


def ensure_path(root: Any, path: str) -> Any:
    """
    Walk a dotted path from root, creating missing parts, and return the leaf.

    Args:
        root: A mapping or a model instance
        path: Dotted path, e.g. "context.contextActivities.parent[]"

    Returns:
        The leaf container (a mapping, model or list reference)
    """
    head, _, rest = path.partition(".")

    if head.endswith(LIST_MARKER):
        key = head[: -len(LIST_MARKER)]
        factory: Callable[[], Any] = list
    else:
        key = head
        factory = _factory_for(root, key)

    child = get_or_create(root, key, factory)

    if not rest:
        return child
    return ensure_path(child, rest)


def set_value(owner: Any, name: str, value: Any) -> Any:
    """Set owner[name] (or owner.name) and return value."""
    if isinstance(owner, MutableMapping):
        owner[name] = value
    else:
        setattr(owner, name, value)
    return value
