"""Merge helpers shared by defaults resolution and front-matter handling."""

from __future__ import annotations

import collections.abc as cabc
import copy
import typing as typ


def deep_merge(
    base: cabc.Mapping[str, typ.Any], override: cabc.Mapping[str, typ.Any]
) -> dict[str, typ.Any]:
    """Return a new mapping with ``override`` layered on top of ``base``.

    Keys present in both win from ``override``. When both sides hold a
    mapping for the same key, the two are merged recursively instead of the
    override replacing the whole nested mapping. Neither argument is mutated.

    Examples
    --------
    >>> deep_merge({"layout": "post", "share": False}, {"share": True})
    {'layout': 'post', 'share': True}
    >>> deep_merge({"feed": {"hide": True}}, {"feed": {"path": "atom.xml"}})
    {'feed': {'hide': True, 'path': 'atom.xml'}}
    """
    merged: dict[str, typ.Any] = copy.deepcopy(dict(base))
    for key, value in override.items():
        current = merged.get(key)
        if isinstance(current, cabc.Mapping) and isinstance(value, cabc.Mapping):
            merged[key] = deep_merge(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


__all__ = ["deep_merge"]
