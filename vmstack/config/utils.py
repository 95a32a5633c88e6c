"""Utility functions for configuration."""

from collections.abc import Mapping


def get_env(env: Mapping[str, str], key: str, default: str) -> str:
    """Read `key` from `env`, falling back when unset or blank."""
    value = env.get(key, "").strip()
    return value or default


def require_env(env: Mapping[str, str], key: str, hint: str = "") -> str:
    value = env.get(key, "").strip()
    if not value:
        msg = f"{key} environment variable is not set."
        if hint:
            msg = f"{msg} {hint}"
        raise ValueError(msg)
    return value


def get_positive_int(env: Mapping[str, str], key: str, default: int) -> int:
    raw = get_env(env, key, str(default))
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{key} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{key} must be positive, got {value}")
    return value


def get_list(env: Mapping[str, str], key: str, default: str) -> tuple[str, ...]:
    """Read a comma separated list, dropping empty items."""
    raw = get_env(env, key, default)
    items = tuple(item.strip() for item in raw.split(",") if item.strip())
    if not items:
        raise ValueError(f"{key} must contain at least one value")
    return items
