"""Hashing for cache keys and document fingerprints.

xxhash for in-process keys, SHA256 where a key must stay stable on disk.
"""

import hashlib
from enum import Enum
from typing import Any, Callable

import orjson
import xxhash


class Algorithm(str, Enum):
    """Supported hash algorithms."""

    XXHASH64 = "xxhash64"  # in-process keys
    SHA256 = "sha256"      # durable cache keys


_DIGESTS: dict[Algorithm, Callable[[bytes], str]] = {
    Algorithm.XXHASH64: lambda data: xxhash.xxh64(data).hexdigest(),
    Algorithm.SHA256: lambda data: hashlib.sha256(data).hexdigest(),
}


def hash_bytes(data: bytes, algorithm: Algorithm = Algorithm.XXHASH64, truncate: int | None = None) -> str:
    """
    Hex digest of data.

    Args:
        data: Bytes to hash
        algorithm: Hash algorithm (xxhash64 unless the key is persisted)
        truncate: Keep only the first ``truncate`` hex characters

    Raises:
        ValueError: If the algorithm is unknown
    """
    try:
        digest = _DIGESTS[Algorithm(algorithm)](data)
    except (KeyError, ValueError) as e:
        raise ValueError(f"Unknown algorithm: {algorithm}") from e
    return digest[:truncate] if truncate else digest


def hash_string(text: str, algorithm: Algorithm = Algorithm.XXHASH64, truncate: int | None = None) -> str:
    """
    Hex digest of a UTF-8 string.

    Examples:
        >>> len(hash_string("https://unpkg.com/antd@5.28.0/es/button/index.d.ts", Algorithm.SHA256, truncate=16))
        16
    """
    return hash_bytes(text.encode("utf-8"), algorithm, truncate)


def hash_fields(*fields: str, algorithm: Algorithm = Algorithm.XXHASH64) -> str:
    """Hash several fields as one key; ``("ab", "c")`` and ``("a", "bc")`` differ."""
    return hash_string("\x00".join(fields), algorithm)


def hash_json(obj: Any, algorithm: Algorithm = Algorithm.XXHASH64) -> str:
    """Fingerprint a JSON-compatible tree independent of key order."""
    encoded = orjson.dumps(obj, option=orjson.OPT_SORT_KEYS | orjson.OPT_NON_STR_KEYS)
    return hash_bytes(encoded, algorithm)


__all__ = [
    "Algorithm",
    "hash_string",
    "hash_bytes",
    "hash_fields",
    "hash_json",
]
