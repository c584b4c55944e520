"""Typed readers for configuration sections.

Each reader looks a field up in a section and validates its type in one
step. Error messages name the full dotted key (``interactive.tick_rate``).
"""

from __future__ import annotations

from typing import Any, Mapping

_MISSING = object()


def get_section(raw: Mapping[str, Any], name: str) -> Mapping[str, Any]:
    """Return a required top-level section.

    Raises:
        ValueError: If the section is missing.
        TypeError: If the section is not a mapping.
    """
    section = raw.get(name)
    if section is None:
        raise ValueError(f"Missing required config: {name}")
    if not isinstance(section, Mapping):
        raise TypeError(f"{name} must be an object")
    return section


def read_str(section: Mapping[str, Any], path: str, field: str) -> str:
    """Read a required string."""
    value = _lookup(section, path, field)
    if not isinstance(value, str):
        raise TypeError(f"{path}.{field} must be a string")
    return value


def read_optional_str(section: Mapping[str, Any], path: str, field: str) -> str | None:
    """Read a string that may be absent or null."""
    if section.get(field) is None:
        return None
    return read_str(section, path, field)


def read_bool(section: Mapping[str, Any], path: str, field: str) -> bool:
    value = _lookup(section, path, field)
    if not isinstance(value, bool):
        raise TypeError(f"{path}.{field} must be a boolean")
    return value


def read_int(section: Mapping[str, Any], path: str, field: str) -> int:
    """Read a required integer; booleans are rejected."""
    value = _lookup(section, path, field)
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{path}.{field} must be an integer")
    return value


def read_float(section: Mapping[str, Any], path: str, field: str) -> float:
    """Read a required number as float; booleans are rejected."""
    value = _lookup(section, path, field)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"{path}.{field} must be a number")
    return float(value)


def read_str_list(section: Mapping[str, Any], path: str, field: str) -> tuple[str, ...]:
    """Read a list of strings. A bare string counts as a one-item list."""
    value = _lookup(section, path, field)
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, list):
        raise TypeError(f"{path}.{field} must be a list")
    for idx, item in enumerate(value):
        if not isinstance(item, str):
            raise TypeError(f"{path}.{field}[{idx}] must be a string")
    return tuple(value)


def _lookup(section: Mapping[str, Any], path: str, field: str) -> Any:
    value = section.get(field, _MISSING)
    if value is _MISSING:
        raise ValueError(f"Missing required config: {path}.{field}")
    return value
