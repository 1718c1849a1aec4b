"""Identifier generation."""

import random
import string
import time

_ALPHABET = string.digits + string.ascii_lowercase


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits))


def generate_id() -> str:
    """Return an id unique within this process.

    Millisecond clock in base 36 followed by a random base-36 suffix. Not
    meant to be unguessable.
    """
    suffix = "".join(random.choices(_ALPHABET, k=10))
    return _to_base36(time.time_ns() // 1_000_000) + suffix
