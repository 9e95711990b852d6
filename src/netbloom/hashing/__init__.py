"""Hash functions mapping a byte string to a bit offset.

Public API:
    get_hash_function / resolve_hash_functions: name -> function lookup
    register_hash_function / unregister_hash_function: extend the registry
    available_hash_functions: registered identifiers
    *_hash: the individual algorithms, ``fn(data, bit_space_size, length=None)``
"""

from netbloom.hashing.digests import md5_hash, ripemd160_hash, sha1_hash
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
from netbloom.hashing.registry import (
    HashFunction,
    available_hash_functions,
    get_hash_function,
    register_hash_function,
    resolve_hash_functions,
    unregister_hash_function,
)

__all__ = [
    "HashFunction",
    "available_hash_functions",
    "bkdr_hash",
    "crc32_hash",
    "dek_hash",
    "djb_hash",
    "elf_hash",
    "fnv1_64_hash",
    "fnv_hash",
    "get_hash_function",
    "js_hash",
    "md5_hash",
    "pjw_hash",
    "register_hash_function",
    "resolve_hash_functions",
    "ripemd160_hash",
    "sdbm_hash",
    "sha1_hash",
    "unregister_hash_function",
]
