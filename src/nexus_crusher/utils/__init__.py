"""Utility modules for nexus_crusher."""

from nexus_crusher.utils.role_normalizer import (
    ROLE_ALIASES,
    normalize_role,
    normalize_role_strict,
    is_valid_role,
    role_choices,
)

__all__ = [
    "ROLE_ALIASES",
    "normalize_role",
    "normalize_role_strict",
    "is_valid_role",
    "role_choices",
]
