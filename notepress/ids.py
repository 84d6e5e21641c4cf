"""ID generation utilities."""

import time

from nanoid import generate

ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
ID_LENGTH = 12


def gen_id(prefix: str) -> str:
    return f"{prefix}{generate(ALPHABET, ID_LENGTH)}"


def post_id() -> str:
    return gen_id("post_")


def now_ms() -> int:
    """Current time as epoch milliseconds, the unit post timestamps use."""
    return int(time.time() * 1000)
