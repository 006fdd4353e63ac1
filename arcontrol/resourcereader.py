"""An in-memory reader of namespaced resources."""

from __future__ import annotations

import copy
from typing import Any, Mapping


class NotFoundError(LookupError):
    """Raised when the requested resource does not exist."""


class ResourceReader:
    """Serves copies of resources keyed by (namespace, name)."""

    def __init__(self, objects: Mapping[tuple[str, str], Any] | None = None) -> None:
        self.objects: dict[tuple[str, str], Any] = dict(objects or {})

    def get(self, namespace: str, name: str) -> Any:
        """Return a copy of the resource, or raise NotFoundError."""
        try:
            found = self.objects[(namespace, name)]
        except KeyError:
            raise NotFoundError(f'"{name}" not found in namespace "{namespace}"') from None
        return copy.deepcopy(found)