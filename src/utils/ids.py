"""Identifier helpers for generated and uploaded media."""

import random
import string
import time

_ALPHABET = string.ascii_lowercase + string.digits


def generate_media_id(prefix: str = "gemini") -> str:
    """Return ``{prefix}_{epoch_ms}_{9 random chars}``.

    Uniqueness is probabilistic, not guaranteed.
    """
    suffix = "".join(random.choices(_ALPHABET, k=9))
    return f"{prefix}_{int(time.time() * 1000)}_{suffix}"
