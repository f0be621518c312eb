"""Prefixed ID generation.

All generated IDs use a ``{prefix}_{random}`` format so that any ID can
be visually identified by its origin:

- ``req_a8Kx3nQ9mP2r``         : one HTTP request (``X-Request-ID``)
- ``chunk_L7wBd4Fj9Ks2x1Qe``   : one vector record in the store
"""

import secrets
import string

_ALPHABET = string.ascii_letters + string.digits  # a-z A-Z 0-9
_DEFAULT_LENGTH = 12  # ~71 bits of entropy

PREFIX_REQUEST = "req"
PREFIX_CHUNK = "chunk"
CHUNK_ID_LENGTH = 20


def generate_id(prefix: str, length: int = _DEFAULT_LENGTH) -> str:
    """Generate a prefixed random ID.

    Args:
        prefix: Short descriptor (e.g. ``"req"``, ``"chunk"``).
        length: Number of random alphanumeric characters after the prefix.

    Returns:
        ``"{prefix}_{random}"`` string.
    """
    suffix = "".join(secrets.choice(_ALPHABET) for _ in range(length))
    return f"{prefix}_{suffix}"


def generate_chunk_id() -> str:
    """Fresh identifier for a vector record (never reused across uploads)."""
    return generate_id(PREFIX_CHUNK, CHUNK_ID_LENGTH)
