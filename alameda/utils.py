"""Small helpers shared across the operator code."""

from __future__ import annotations

from collections.abc import MutableMapping, Sequence


def replace_keys(
    mapping: MutableMapping[str, str], old: Sequence[str], new: Sequence[str]
) -> MutableMapping[str, str]:
    """Rename keys of ``mapping`` in place, ``old[i]`` becoming ``new[i]``.

    Keys that are absent are skipped. The same mapping is returned.
    """
    if len(new) < len(old):
        raise ValueError("every old key needs a new key")
    for old_key, new_key in zip(old, new):
        if old_key in mapping:
            mapping[new_key] = mapping.pop(old_key)
    return mapping


def namespaced_name_key(namespace: str, name: str) -> str:
    """Return the ``namespace/name`` key of an object."""
    return f"{namespace}/{name}"