"""TermVector Request Parameters - Multi-Valued Request Options.

Copyright (c) 2024-2026 BlackRoad OS, Inc. All rights reserved.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Iterator, List, Mapping, Optional, Union

from termvector_core.errors import ClientInputError


class CommonParams:
    """Parameter names shared by every request."""

    Q = "q"
    FL = "fl"


class TermVectorParams:
    """Parameter names read by the term vector component.

    ``IDF`` and ``TF_IDF`` keep their historical names; they report the
    raw document frequency and frequency / document frequency.
    """

    TV = "tv"
    TF = "tv.tf"
    POSITIONS = "tv.positions"
    OFFSETS = "tv.offsets"
    IDF = "tv.idf"
    TF_IDF = "tv.tf_idf"
    ALL = "tv.all"
    FIELDS = "tv.fl"
    DOC_IDS = "tv.docIds"


_TRUE = {"true", "on", "yes", "1"}
_FALSE = {"false", "off", "no", "0"}

_LIST_SEPARATOR = re.compile(r"[,\s]+")

ParamValue = Union[str, int, bool, List[Any]]


def split_list(value: str) -> List[str]:
    """Split a comma and/or whitespace separated list, dropping empties."""
    return [part for part in _LIST_SEPARATOR.split(value) if part]


class RequestParams:
    """Ordered multi-map of request parameters.

    Every parameter holds a list of string values. Single-valued reads
    return the first value.
    """

    def __init__(self, params: Optional[Mapping[str, ParamValue]] = None):
        self._params: Dict[str, List[str]] = {}
        for name, value in (params or {}).items():
            if isinstance(value, (list, tuple)):
                for v in value:
                    self.add(name, v)
            else:
                self.add(name, value)

    @staticmethod
    def _to_str(value: Any) -> str:
        if isinstance(value, bool):
            return "true" if value else "false"
        return str(value)

    def add(self, name: str, value: Any) -> None:
        """Append a value to a parameter."""
        self._params.setdefault(name, []).append(self._to_str(value))

    def set(self, name: str, value: Any) -> None:
        """Replace all values of a parameter."""
        self._params[name] = [self._to_str(value)]

    def remove(self, name: str) -> Optional[List[str]]:
        """Remove a parameter, returning its values."""
        return self._params.pop(name, None)

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        values = self._params.get(name)
        return values[0] if values else default

    def get_params(self, name: str) -> Optional[List[str]]:
        """All values of a parameter, or None if absent."""
        values = self._params.get(name)
        return list(values) if values is not None else None

    def get_bool(self, name: str, default: bool = False) -> bool:
        """Read a boolean parameter.

        Raises:
            ClientInputError: If the value is not a recognized boolean
        """
        value = self.get(name)
        if value is None:
            return default
        lowered = value.strip().lower()
        if lowered in _TRUE:
            return True
        if lowered in _FALSE:
            return False
        raise ClientInputError(f"Invalid boolean value for '{name}': {value!r}")

    def copy(self) -> "RequestParams":
        clone = RequestParams()
        clone._params = {name: list(values) for name, values in self._params.items()}
        return clone

    def names(self) -> List[str]:
        return list(self._params)

    def to_dict(self) -> Dict[str, List[str]]:
        return {name: list(values) for name, values in self._params.items()}

    def __contains__(self, name: object) -> bool:
        return name in self._params

    def __iter__(self) -> Iterator[str]:
        return iter(self._params)

    def __len__(self) -> int:
        return len(self._params)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, RequestParams):
            return NotImplemented
        return self._params == other._params

    def __repr__(self) -> str:
        return f"RequestParams({self._params!r})"


__all__ = [
    "CommonParams",
    "TermVectorParams",
    "RequestParams",
    "split_list",
]
