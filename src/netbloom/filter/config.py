"""Filter configuration.

A FilterConfig is fixed for the lifetime of a filter. Two clients share
a filter only if they agree on all of bit_space_size,
hash_function_names and bucket_key; a client that disagrees on any of
them reads and writes different bits.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from typing import Any, Mapping

from netbloom.errors import ConfigurationError
from netbloom.hashing.registry import HashFunction, resolve_hash_functions

DEFAULT_BUCKET = "REDIS:BLOOM_DEFAULT"
DEFAULT_BIT_SPACE = 1 << 23
DEFAULT_HASH_FUNCTIONS = ("fnv1_64", "md5", "sha1")
# Larger batches keep the store busy inside one script for too long.
DEFAULT_BATCH_LIMIT = 2000

_CAMEL_CASE_KEYS = {
    "bitSpaceSize": "bit_space_size",
    "hashFunctionNames": "hash_function_names",
    "bucketKey": "bucket_key",
    "insertionBatchLimit": "insertion_batch_limit",
}


def _is_count(value: Any) -> bool:
    # bool is an int subclass; True is not a bit space.
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


@dataclass(frozen=True, slots=True)
class FilterConfig:
    """Validated, immutable filter settings.

    Attributes:
        bit_space_size: number of addressable bits m (a power of two is
            recommended, see netbloom.sizing.next_power_of_two)
        hash_function_names: ordered registry identifiers
        bucket_key: store key holding the bit array
        insertion_batch_limit: maximum items per add() call
    """
    bit_space_size: int = DEFAULT_BIT_SPACE
    hash_function_names: tuple[str, ...] = DEFAULT_HASH_FUNCTIONS
    bucket_key: str = DEFAULT_BUCKET
    insertion_batch_limit: int = DEFAULT_BATCH_LIMIT
    hash_functions: tuple[HashFunction, ...] = field(
        init=False, repr=False, compare=False
    )

    def __post_init__(self) -> None:
        if isinstance(self.hash_function_names, str):
            raise ConfigurationError(
                "hash_function_names must be a sequence of names, not a string"
            )
        # Lists are accepted; store a tuple so the config stays hashable.
        object.__setattr__(self, "hash_function_names", tuple(self.hash_function_names))
        if not _is_count(self.bit_space_size):
            raise ConfigurationError(
                f"bit_space_size must be a positive integer, got {self.bit_space_size!r}"
            )
        if not isinstance(self.bucket_key, str) or not self.bucket_key.strip():
            raise ConfigurationError("bucket_key must be a non-empty string")
        if not _is_count(self.insertion_batch_limit):
            raise ConfigurationError(
                "insertion_batch_limit must be a positive integer, "
                f"got {self.insertion_batch_limit!r}"
            )
        object.__setattr__(
            self, "hash_functions", resolve_hash_functions(self.hash_function_names)
        )

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> FilterConfig:
        """Build a config from a dict, e.g. a parsed YAML/JSON section.

        Keys may be snake_case or camelCase. Unknown keys are rejected.
        """
        known = {f.name for f in fields(cls) if f.init}
        kwargs: dict[str, Any] = {}
        unknown = []
        for key, value in values.items():
            name = _CAMEL_CASE_KEYS.get(key, key)
            if name not in known:
                unknown.append(key)
                continue
            if name in kwargs:
                raise ConfigurationError(f"duplicate filter option {key!r}")
            kwargs[name] = value
        if unknown:
            raise ConfigurationError(
                f"unknown filter option(s): {', '.join(sorted(unknown))}"
            )
        return cls(**kwargs)
