"""Feature flag helpers for runtime configuration."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Literal, TypedDict, cast


FeatureFlagKey = Literal[
    "csv_export_enabled",
    "birthday_filters_enabled",
]


class FeatureFlagValues(TypedDict):
    csv_export_enabled: bool
    birthday_filters_enabled: bool


@dataclass(frozen=True)
class FeatureFlagDefinition:
    env_var: str
    default: bool


_FEATURE_FLAG_DEFINITIONS: Dict[FeatureFlagKey, FeatureFlagDefinition] = {
    "csv_export_enabled": FeatureFlagDefinition("FEATURE_CSV_EXPORT_ENABLED", True),
    "birthday_filters_enabled": FeatureFlagDefinition("FEATURE_BIRTHDAY_FILTERS_ENABLED", True),
}


def _normalize_bool(value: str | None, default: bool = True) -> bool:
    """Return normalized boolean from environment-style value."""
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"", "0", "false", "no", "off"}:
        return False
    if normalized in {"1", "true", "yes", "on"}:
        return True
    return default


@lru_cache(maxsize=None)
def get_feature_flags() -> FeatureFlagValues:
    """Return the cached feature flag state sourced from the environment."""
    values: Dict[FeatureFlagKey, bool] = {}
    for key, definition in _FEATURE_FLAG_DEFINITIONS.items():
        values[key] = _normalize_bool(os.getenv(definition.env_var), default=definition.default)
    return cast(FeatureFlagValues, values)


def is_feature_enabled(flag: FeatureFlagKey) -> bool:
    return get_feature_flags()[flag]


def csv_export_enabled() -> bool:
    """Toggle the simulated CSV export endpoint."""
    return is_feature_enabled("csv_export_enabled")


def birthday_filters_enabled() -> bool:
    """Toggle day/month/year filtering on the contact list."""
    return is_feature_enabled("birthday_filters_enabled")


def refresh_feature_flag_cache() -> None:
    """Invalidate cached feature flag values (useful for tests)."""
    get_feature_flags.cache_clear()
