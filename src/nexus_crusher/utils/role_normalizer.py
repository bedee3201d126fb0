"""Centralized role normalization utility.

All role normalization in the codebase should use this module to ensure
consistency. The canonical format is the Role enum: TOP, JUNGLE, MID,
BOTTOM, SUPPORT. The League client reports MIDDLE and UTILITY; players type
ADC, BOT, SUP and friends.
"""

from typing import Optional

from nexus_crusher.models.champion import ROLE_ORDER, Role

# Comprehensive mapping from any known role format (lowercased) to canonical role
ROLE_ALIASES: dict[str, Role] = {
    # Top lane variations
    "top": Role.TOP,
    "top laner": Role.TOP,
    "toplane": Role.TOP,

    # Jungle variations
    "jungle": Role.JUNGLE,
    "jungler": Role.JUNGLE,
    "jng": Role.JUNGLE,
    "jg": Role.JUNGLE,

    # Mid lane variations
    "mid": Role.MID,
    "middle": Role.MID,
    "mid laner": Role.MID,
    "midlane": Role.MID,

    # Bottom/ADC variations
    "bot": Role.BOTTOM,
    "bottom": Role.BOTTOM,
    "adc": Role.BOTTOM,
    "ad carry": Role.BOTTOM,
    "bot laner": Role.BOTTOM,
    "marksman": Role.BOTTOM,

    # Support variations - the client calls it UTILITY
    "support": Role.SUPPORT,
    "sup": Role.SUPPORT,
    "supp": Role.SUPPORT,
    "utility": Role.SUPPORT,
}


def normalize_role(role: Optional[str]) -> Optional[Role]:
    """Normalize a role string to its canonical Role.

    Args:
        role: Role string in any known format (e.g., "MIDDLE", "utility", "ADC")

    Returns:
        Canonical Role or None if unknown/empty

    Examples:
        >>> normalize_role("MIDDLE")
        <Role.MID: 'MID'>
        >>> normalize_role("UTILITY")
        <Role.SUPPORT: 'SUPPORT'>
        >>> normalize_role("feeder") is None
        True
    """
    if role is None:
        return None
    if isinstance(role, Role):
        return role
    if not isinstance(role, str):
        return None
    return ROLE_ALIASES.get(role.strip().lower())


def normalize_role_strict(role: str) -> Role:
    """Normalize a role string, raising ValueError if unknown."""
    normalized = normalize_role(role)
    if normalized is None:
        raise ValueError(f"Unknown role: {role}")
    return normalized


def is_valid_role(role: Optional[str]) -> bool:
    """Check if a role string can be normalized."""
    return normalize_role(role) is not None


def role_choices() -> list[str]:
    """Role names accepted by the shell, for help text and prompts."""
    return [role.label for role in ROLE_ORDER]
