"""Conversions shared by the client's composed operations."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

DEFAULT_UNHEALTHY_COLORS: tuple[str, ...] = ("red",)


def invert_string_map(mapping: Mapping[str, Iterable[str]]) -> dict[str, list[str]]:
    """Invert a one-to-many string mapping.

    Every value ``v`` listed under key ``k`` becomes a key whose list contains
    ``k``. Keys are visited in the mapping's order and duplicates are kept, so
    ``{"a": ["x", "x"]}`` inverts to ``{"x": ["a", "a"]}``. Keys with an empty
    list contribute nothing.

    Example:
        >>> invert_string_map({"logs-2023": ["logs"], "logs-2024": ["logs", "logs-current"]})
        {'logs': ['logs-2023', 'logs-2024'], 'logs-current': ['logs-2024']}
    """
    inverted: dict[str, list[str]] = {}
    for key, values in mapping.items():
        for value in values:
            inverted.setdefault(value, []).append(key)
    return inverted


def is_healthy_color(color: str, unhealthy_colors: Iterable[str] = DEFAULT_UNHEALTHY_COLORS) -> bool:
    """Whether a cluster health colour counts as healthy.

    With the default ``unhealthy_colors`` only ``"red"`` is unhealthy; a
    ``"yellow"`` cluster (unassigned replicas) still serves reads and writes.
    """
    return color not in set(unhealthy_colors)
