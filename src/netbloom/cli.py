"""netbloom CLI entry point.

Usage: netbloom [-v] <command> ...

    netbloom calibrate --members 1e7 --fpp 0.0001
    netbloom hash "Hello World!" --function djb --function crc32
    netbloom add --bucket crawler:seen a b c
    netbloom has --bucket crawler:seen a
    netbloom has-add --bucket crawler:seen d

has/has-add exit 0 when the item is (probably) present and 1 when it
is not. Errors exit 2.
"""
import argparse
import logging
import sys

from netbloom.errors import NetBloomError
from netbloom.filter.config import (
    DEFAULT_BATCH_LIMIT,
    DEFAULT_BIT_SPACE,
    DEFAULT_BUCKET,
    DEFAULT_HASH_FUNCTIONS,
    FilterConfig,
)
from netbloom.hashing.registry import available_hash_functions, get_hash_function

log = logging.getLogger("netbloom")

EXIT_TRUE = 0
EXIT_FALSE = 1
EXIT_ERROR = 2


def _add_calibrate_parser(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser(
        "calibrate",
        help="Size a filter for a member count and false positive rate.",
    )
    p.add_argument(
        "--members", type=float, required=True,
        help="Expected number of members n",
    )
    p.add_argument(
        "--fpp", type=float, default=0.0001,
        help="Target false positive probability p (default: 0.0001)",
    )


def _add_hash_parser(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser(
        "hash",
        help="Print the bit offset of TEXT for each hash function.",
    )
    p.add_argument("text")
    p.add_argument(
        "--bit-space", type=int, default=DEFAULT_BIT_SPACE,
        help=f"Bit space size (default: {DEFAULT_BIT_SPACE})",
    )
    p.add_argument(
        "--function", action="append", dest="functions",
        help="Hash function to use; repeatable (default: all registered)",
    )


def _add_filter_options(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "--redis-url", default=None,
        help="Redis URL (default: $NETBLOOM_REDIS_URL or the NETBLOOM_REDIS_* fields)",
    )
    p.add_argument(
        "--bucket", default=DEFAULT_BUCKET,
        help=f"Bucket key (default: {DEFAULT_BUCKET})",
    )
    p.add_argument(
        "--bit-space", type=int, default=DEFAULT_BIT_SPACE,
        help=f"Bit space size (default: {DEFAULT_BIT_SPACE})",
    )
    p.add_argument(
        "--function", action="append", dest="functions",
        help=f"Hash function; repeatable (default: {' '.join(DEFAULT_HASH_FUNCTIONS)})",
    )
    p.add_argument(
        "--batch-limit", type=int, default=DEFAULT_BATCH_LIMIT,
        help=f"Maximum items per add; more is an error (default: {DEFAULT_BATCH_LIMIT})",
    )


def _add_filter_parsers(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser("add", help="Add items to a shared filter.")
    p.add_argument("items", nargs="+")
    _add_filter_options(p)

    p = subparsers.add_parser("has", help="Test whether an item may be present.")
    p.add_argument("item")
    _add_filter_options(p)

    p = subparsers.add_parser(
        "has-add", help="Test for an item and add it in one atomic step.",
    )
    p.add_argument("item")
    _add_filter_options(p)


def _run_calibrate(args: argparse.Namespace) -> int:
    from netbloom.sizing.calibrator import calibrate

    result = calibrate(args.members, args.fpp)
    print(f"bit array size (m):   {result.bit_array_size:.0f}")
    print(f"hash functions (k):   {result.hash_function_count}")
    print(f"power-of-two bits:    {result.bit_space_size}")
    return EXIT_TRUE


def _run_hash(args: argparse.Namespace) -> int:
    names = args.functions or list(available_hash_functions())
    width = max(len(name) for name in names)
    for name in names:
        fn = get_hash_function(name)
        print(f"{name:<{width}}  {fn(args.text, args.bit_space)}")
    return EXIT_TRUE


def _run_filter(args: argparse.Namespace) -> int:
    from netbloom.filter.bloom import BloomFilter
    from netbloom.store.redis_store import RedisBitStore
    from netbloom.store.settings import StoreSettings

    config = FilterConfig(
        bit_space_size=args.bit_space,
        hash_function_names=tuple(args.functions or DEFAULT_HASH_FUNCTIONS),
        bucket_key=args.bucket,
        insertion_batch_limit=args.batch_limit,
    )
    if args.redis_url:
        settings = StoreSettings.from_url(args.redis_url)
    else:
        settings = StoreSettings.from_env()

    with RedisBitStore.from_settings(settings) as store:
        bloom = BloomFilter(store, config)
        log.debug("using %r", bloom)
        if args.command == "add":
            bloom.add(*args.items)
            print(f"added {len(args.items)}")
            return EXIT_TRUE
        if args.command == "has":
            found = bloom.has(args.item)
        else:
            found = bloom.has_add(args.item)
    print("present" if found else "absent")
    return EXIT_TRUE if found else EXIT_FALSE


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="netbloom",
        description="Shared Bloom filter backed by Redis bitmaps.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log debug output to stderr.",
    )
    subparsers = parser.add_subparsers(dest="command")

    _add_calibrate_parser(subparsers)
    _add_hash_parser(subparsers)
    _add_filter_parsers(subparsers)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    try:
        if args.command == "calibrate":
            code = _run_calibrate(args)
        elif args.command == "hash":
            code = _run_hash(args)
        else:
            code = _run_filter(args)
    except NetBloomError as exc:
        print(f"netbloom: {exc}", file=sys.stderr)
        sys.exit(EXIT_ERROR)
    sys.exit(code)
