# hintrating/utils/hash_utils.py
from __future__ import annotations

import hashlib


def hash_text(text: str, algorithm: str = "sha256") -> str:
    """
    Generate a hash for the given text using the specified algorithm.

    Usage:
        digest = hash_text("hello world")
    """
    if text is None:
        text = ""
    if not isinstance(text, str):
        raise TypeError(f"hash_text expected str, got {type(text)}")
    hasher = hashlib.new(algorithm)
    hasher.update(text.encode("utf-8"))
    return hasher.hexdigest()
