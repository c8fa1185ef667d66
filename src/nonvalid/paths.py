"""Path rendering."""

from __future__ import annotations

import json
from typing import Hashable, Optional, Sequence, Union

from nonvalid.types import Marker


def format_path(
    keys: Sequence[Hashable], root_name: Optional[str] = None
) -> Union[list[Hashable], str]:
    """Return the keys as a list, or as an access expression rooted at ``root_name``.

    >>> format_path(["test", 0], "json")
    'json["test"][0]'
    """
    if not root_name:
        return list(keys)
    return root_name + "".join(_chain_key(key) for key in keys)


def _chain_key(key: Hashable) -> str:
    if isinstance(key, Marker):
        return f"[{key!r}]"
    if isinstance(key, str):
        return f"[{json.dumps(key, ensure_ascii=False)}]"
    return f"[{key!r}]"
