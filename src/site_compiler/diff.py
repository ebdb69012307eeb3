"""Field-path comparison of two IR snapshots."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Sequence

_MISSING = object()


def structural_diff(old: Mapping[str, Any], new: Mapping[str, Any], path: str = "") -> list[str]:
    """Dot-paths whose values differ between two JSON-like mappings.

    Nested mappings are walked; lists and scalars are compared as leaves, so a
    change anywhere inside ``sections`` reports ``sections`` itself. Keys that
    exist on only one side are reported as changed.
    """
    changes: list[str] = []
    keys = list(new) + [key for key in old if key not in new]
    for key in keys:
        full_path = f"{path}.{key}" if path else key
        before = old.get(key, _MISSING)
        after = new.get(key, _MISSING)
        if isinstance(before, Mapping) and isinstance(after, Mapping):
            changes.extend(structural_diff(before, after, full_path))
        elif isinstance(after, Mapping) and before is _MISSING:
            changes.extend(structural_diff({}, after, full_path) or [full_path])
        elif before != after:
            changes.append(full_path)
    return changes


def path_in_scope(path: str, targets: Iterable[str]) -> bool:
    """True when ``path`` equals a target, lies under one, or is an ancestor of one."""
    for target in targets:
        if path == target or path.startswith(f"{target}.") or target.startswith(f"{path}."):
            return True
    return False


def out_of_scope(paths: Sequence[str], targets: Sequence[str]) -> list[str]:
    return [path for path in paths if not path_in_scope(path, targets)]


def revert_paths(old: Mapping[str, Any], new: Mapping[str, Any], paths: Iterable[str]) -> dict[str, Any]:
    """Copy of ``new`` with every listed path restored to its value in ``old``."""
    result = _deep_copy(new)
    for path in paths:
        keys = path.split(".")
        source: Any = old
        for key in keys:
            source = source.get(key, _MISSING) if isinstance(source, Mapping) else _MISSING
            if source is _MISSING:
                break

        target = result
        for key in keys[:-1]:
            child = target.get(key)
            if not isinstance(child, dict):
                child = {}
                target[key] = child
            target = child

        if source is _MISSING:
            target.pop(keys[-1], None)
        else:
            target[keys[-1]] = _deep_copy(source)
    return result


def _deep_copy(value: Any) -> Any:
    if isinstance(value, Mapping):
        return {key: _deep_copy(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_deep_copy(item) for item in value]
    return value


__all__ = ["structural_diff", "path_in_scope", "out_of_scope", "revert_paths"]
