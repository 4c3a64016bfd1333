"""Deploy-time overrides for plugin options sourced from the environment."""

from __future__ import annotations
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType
from typing import Any
from dynaconf import Dynaconf


CONSTANT_PREFIX = "AUTHRESS_ENV_"
"""Prefix of the environment variables that pin option values."""


def get_constant_name(key: str) -> str:
    """Return the environment variable name that overrides ``key``."""
    return CONSTANT_PREFIX + key.upper()


def override_table(keys: Iterable[str]) -> tuple[tuple[str, str], ...]:
    """Return the ``(option key, environment variable)`` pairs for ``keys``."""
    return tuple((key, get_constant_name(key)) for key in keys)


def _build_loader() -> Dynaconf:
    """Create a Dynaconf loader reading ``AUTHRESS_ENV_*`` variables."""
    return Dynaconf(
        envvar_prefix=CONSTANT_PREFIX.rstrip("_"),
        settings_files=[],
        load_dotenv=True,
        environments=False,
    )


class ConstantOverrides(Mapping[str, Any]):
    """Immutable mapping of option keys to their environment-pinned values."""

    def __init__(self, values: Mapping[str, Any] | None = None) -> None:
        """Freeze ``values`` for the lifetime of the process."""
        self._values: Mapping[str, Any] = MappingProxyType(dict(values or {}))

    @classmethod
    def from_environment(
        cls, keys: Iterable[str], *, source: Dynaconf | None = None
    ) -> ConstantOverrides:
        """Resolve the overrides for ``keys`` once from the environment."""
        loader = source if source is not None else _build_loader()
        prefix_length = len(CONSTANT_PREFIX)
        values: dict[str, Any] = {}
        for key, env_name in override_table(keys):
            value = loader.get(env_name[prefix_length:])
            if value is not None:
                values[key] = value
        return cls(values)

    def __getitem__(self, key: str) -> Any:
        return self._values[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"ConstantOverrides(keys={sorted(self._values)!r})"


__all__ = [
    "CONSTANT_PREFIX",
    "ConstantOverrides",
    "get_constant_name",
    "override_table",
]
