"""Named extension points that let integrators adjust rendered values."""

from __future__ import annotations
from collections import defaultdict
from collections.abc import Callable
from typing import Any


Filter = Callable[..., Any]

LOGIN_TEMPLATE_FILTER = "authress::user_login_template::html::formatter"
"""Filter applied to the login template path before rendering."""


class FilterRegistry:
    """Ordered registry of value filters keyed by extension point name."""

    def __init__(self) -> None:
        """Create an empty registry."""
        self._filters: dict[str, list[tuple[int, int, Filter]]] = defaultdict(list)
        self._sequence = 0

    def add_filter(self, name: str, callback: Filter, priority: int = 10) -> None:
        """Register ``callback`` for ``name``; lower priorities run first."""
        self._sequence += 1
        self._filters[name].append((priority, self._sequence, callback))
        self._filters[name].sort(key=lambda item: (item[0], item[1]))

    def remove_filter(self, name: str, callback: Filter) -> bool:
        """Unregister ``callback`` from ``name``."""
        registered = self._filters.get(name, [])
        remaining = [item for item in registered if item[2] is not callback]
        self._filters[name] = remaining
        return len(remaining) != len(registered)

    def has_filter(self, name: str) -> bool:
        """Return ``True`` when any callback is registered for ``name``."""
        return bool(self._filters.get(name))

    def apply_filters(self, name: str, value: Any, *args: Any) -> Any:
        """Pass ``value`` through every callback registered for ``name``."""
        for _, _, callback in list(self._filters.get(name, [])):
            value = callback(value, *args)
        return value


__all__ = ["Filter", "FilterRegistry", "LOGIN_TEMPLATE_FILTER"]
