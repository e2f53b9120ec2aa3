from __future__ import annotations

__all__ = ["Option", "Options", "merge_options"]

from typing import Any, Iterable, Mapping, Union

Option = tuple[str, Any]
Options = Union[Iterable[Option], Mapping[str, Any]]


def merge_options(base: Iterable[Option], extra: Options=()) -> list[Option]:
    """Merge extra into base and return a new option list.

    Every pair of extra replaces the first pair of base with the same key
    where it was, or is appended when base has no such key. A key given more
    than once in extra keeps the value given last.
    """
    merged = list(base)
    if isinstance(extra, Mapping):
        extra = extra.items()
    for key, value in extra:
        for i, (existing, _) in enumerate(merged):
            if existing == key:
                merged[i] = (key, value)
                break
        else:
            merged.append((key, value))
    return merged
