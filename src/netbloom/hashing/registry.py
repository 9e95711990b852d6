"""Name -> hash function registry.

Filters refer to hash functions by identifier so the same names can be
shared between processes and configuration files. Names are resolved
once, when a filter is built, so an unknown name fails at construction
instead of at the first add().
"""
from __future__ import annotations

from typing import Callable, Iterable, TypeAlias

from netbloom.errors import ConfigurationError
from netbloom.hashing.digests import (
    md5_hash,
    ripemd160_available,
    ripemd160_hash,
    sha1_hash,
)
from netbloom.hashing.functions import (
    bkdr_hash,
    crc32_hash,
    dek_hash,
    djb_hash,
    elf_hash,
    fnv1_64_hash,
    fnv_hash,
    js_hash,
    pjw_hash,
    sdbm_hash,
)

HashFunction: TypeAlias = Callable[..., int]

_REGISTRY: dict[str, HashFunction] = {
    "js": js_hash,
    "pjw": pjw_hash,
    "elf": elf_hash,
    "bkdr": bkdr_hash,
    "sdbm": sdbm_hash,
    "djb": djb_hash,
    "dek": dek_hash,
    "fnv": fnv_hash,
    "crc32": crc32_hash,
    "fnv1_64": fnv1_64_hash,
    "md5": md5_hash,
    "sha1": sha1_hash,
}

# Names known to this package whose algorithm the local hashlib lacks.
_UNAVAILABLE: dict[str, str] = {}

if ripemd160_available():
    _REGISTRY["ripemd160"] = ripemd160_hash
else:
    _UNAVAILABLE["ripemd160"] = "this Python's hashlib (OpenSSL) does not provide RIPEMD-160"


def available_hash_functions() -> tuple[str, ...]:
    """Sorted identifiers of every registered hash function."""
    return tuple(sorted(_REGISTRY))


def get_hash_function(name: str) -> HashFunction:
    try:
        return _REGISTRY[name]
    except KeyError:
        if name in _UNAVAILABLE:
            raise ConfigurationError(
                f"hash function {name!r} is not available on this host: "
                f"{_UNAVAILABLE[name]}"
            ) from None
        raise ConfigurationError(
            f"unknown hash function {name!r}; "
            f"known: {', '.join(available_hash_functions())}"
        ) from None


def register_hash_function(
    name: str, fn: HashFunction, replace: bool = False
) -> None:
    """Add a hash function under ``name``.

    ``fn`` must follow the ``(data, bit_space_size, length=None) -> int``
    contract. Replacing an existing name requires ``replace=True``: every
    bucket written with the old function becomes unreadable.
    """
    if not name:
        raise ConfigurationError("hash function name must be non-empty")
    if name in _REGISTRY and not replace:
        raise ConfigurationError(f"hash function {name!r} is already registered")
    _REGISTRY[name] = fn


def unregister_hash_function(name: str) -> None:
    """Remove ``name`` from the registry. Raises ConfigurationError if unknown."""
    get_hash_function(name)
    del _REGISTRY[name]


def resolve_hash_functions(names: Iterable[str]) -> tuple[HashFunction, ...]:
    """Resolve every name, preserving order. Empty input is an error."""
    resolved = tuple(get_hash_function(name) for name in names)
    if not resolved:
        raise ConfigurationError("at least one hash function is required")
    return resolved
