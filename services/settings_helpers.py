"""Helpers for typed environment-variable settings."""

from __future__ import annotations

import os
from typing import Any

_TRUTHY = ("true", "1", "yes", "on")


def _coerce_value(raw: str | None, value_type: str, default: Any) -> Any:
    if raw is None or raw == "":
        return default
    try:
        if value_type == "int":
            return int(raw)
        if value_type == "float":
            return float(raw)
        if value_type == "bool":
            return raw.lower() in _TRUTHY
        return raw
    except ValueError:
        return default


def get_setting(env_var: str, default: Any, value_type: str = "string") -> Any:
    """Get a setting from the environment, falling back to ``default``."""
    return _coerce_value(os.getenv(env_var), value_type, default)


def get_int_setting(env_var: str, default: int) -> int:
    return int(get_setting(env_var, default, "int"))


def get_float_setting(env_var: str, default: float) -> float:
    return float(get_setting(env_var, default, "float"))


def get_bool_setting(env_var: str, default: bool) -> bool:
    value = get_setting(env_var, default, "bool")
    if isinstance(value, str):
        return value.lower() in _TRUTHY
    return bool(value)
