"""API key value generation and display masking."""

import secrets

from src.api.core.constants import (
    API_KEY_SUFFIX_ALPHABET,
    API_KEY_SUFFIX_LENGTH,
    DEV_API_KEY_PREFIX,
    LIVE_API_KEY_PREFIX,
    MASK_MAX_STARS,
    MASK_VISIBLE_PREFIX_LENGTH,
    PRODUCTION_NAME_MARKER,
)


def key_prefix_for(name: str) -> str:
    """Return the environment prefix a key named ``name`` should carry."""
    if PRODUCTION_NAME_MARKER in name.lower():
        return LIVE_API_KEY_PREFIX
    return DEV_API_KEY_PREFIX


def generate_api_key(name: str) -> str:
    """Generate a new key value for a key called ``name``.

    Uniqueness is not checked here; the store's unique constraint decides.
    """
    suffix = "".join(
        secrets.choice(API_KEY_SUFFIX_ALPHABET) for _ in range(API_KEY_SUFFIX_LENGTH)
    )
    return f"{key_prefix_for(name)}{suffix}"


def mask_api_key(key_value: str) -> str:
    """Keep the leading characters of a key and star out the rest."""
    if len(key_value) <= MASK_VISIBLE_PREFIX_LENGTH:
        return key_value
    stars = min(MASK_MAX_STARS, len(key_value) - MASK_VISIBLE_PREFIX_LENGTH)
    return key_value[:MASK_VISIBLE_PREFIX_LENGTH] + "*" * stars
