"""
virion/cli.py
Command-line interface for Virion

Usage:
    python -m virion traits 42 --json
    python -m virion preview 42 -o strain_42.png
    python -m virion metadata 42
    python -m virion vectors 0 1 42
    python -m virion batch --start 0 --count 100 --jobs 8
    python -m virion view 42
    python -m virion --log-file virion.log batch --count 500
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Optional

from . import __version__
from .config import DOMAIN_SEPARATOR, SPEC_VERSION
from .logger import LogLevel, logger, set_log_level

DEFAULT_VECTOR_IDS = [0, 1, 7, 12, 42, 1337, 2 ** 256 - 1]


def _parse_token_id(value: str) -> int:
    """Accept decimal (leading zeros allowed) or 0x-prefixed hex token IDs."""
    text = value.strip()
    base = 16 if text.lower().lstrip("+-").startswith("0x") else 10
    try:
        return int(text, base)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: {value!r}") from None


def cmd_traits(args: argparse.Namespace) -> int:
    """Print the trait record for a token."""
    from .seeds import seed_hex
    from .traits import derive_traits

    traits = derive_traits(args.token_id)

    if args.json:
        print(json.dumps(traits.to_dict(), indent=2))
        return 0

    print(f"Token:      {traits.token_id}")
    print(f"Seed:       {seed_hex(traits.token_id)}")
    print(f"Hue:        {traits.hue}")
    print(f"Spikes:     {traits.appendage_count}")
    print(f"Alignment:  {traits.alignment.label}")
    print(f"Mutation:   {traits.archetype_name} ({traits.mutation_archetype})")
    if args.verbose:
        print("Variance:")
        for i, v in enumerate(traits.appendage_variance):
            print(f"  [{i:2d}] length={v.length:.3f} head={v.head:.3f}")
        print(f"Lobes:      {', '.join(f'{p:.3f}' for p in traits.lobe_phases)}")
    return 0


def cmd_preview(args: argparse.Namespace) -> int:
    """Write the flat preview PNG."""
    from .preview import preview_png
    from .traits import derive_traits

    traits = derive_traits(args.token_id)
    output = Path(args.output) if args.output else Path(f"strain_{traits.token_id}.png")
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(preview_png(traits, args.size))
    print(f"Wrote {output}")
    return 0


def cmd_metadata(args: argparse.Namespace) -> int:
    """Print token metadata (or the encoded token URI)."""
    from .metadata import build_metadata, encode_token_uri

    metadata = build_metadata(args.token_id, args.size)
    if args.uri:
        print(encode_token_uri(metadata))
    else:
        print(json.dumps(metadata, indent=2))
    return 0


def cmd_vectors(args: argparse.Namespace) -> int:
    """Print golden trait vectors."""
    from .batch import golden_vectors

    ids = args.token_ids or DEFAULT_VECTOR_IDS
    rows = golden_vectors(ids)

    if args.json:
        print(json.dumps(rows, indent=2))
        return 0

    print(f"Domain: {DOMAIN_SEPARATOR}")
    for row in rows:
        print(
            f"{row['token_id']}: hue={row['hue']} count={row['appendage_count']} "
            f"alignment={row['alignment']} archetype={row['mutation_archetype']} "
            f"seed={row['seed'][:18]}..."
        )
    return 0


def cmd_batch(args: argparse.Namespace) -> int:
    """Generate many tokens in parallel and summarize."""
    from .batch import generate_many

    ids = range(args.start, args.start + args.count)
    results = generate_many(ids, max_workers=args.jobs, build=args.scenes)

    traits = [r.traits if args.scenes else r for r in results]
    by_alignment = {}
    by_count = {}
    for t in traits:
        by_alignment[t.alignment.label] = by_alignment.get(t.alignment.label, 0) + 1
        by_count[t.appendage_count] = by_count.get(t.appendage_count, 0) + 1

    print(f"Generated: {len(results)} ({'scenes' if args.scenes else 'traits'})")
    print(f"By alignment: {by_alignment}")
    print(f"By spike count: {dict(sorted(by_count.items()))}")
    return 0


def cmd_view(args: argparse.Namespace) -> int:
    """Open the interactive viewer."""
    from .seeds import validate_token_id
    from .viewer import run_viewer

    return run_viewer(validate_token_id(args.token_id))


def main(argv: Optional[list] = None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(
        prog="virion",
        description="Deterministic viral strain generator",
    )
    parser.add_argument(
        "--version", action="version",
        version=f"%(prog)s {__version__} (spec {SPEC_VERSION})"
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Show debug info")
    parser.add_argument("--log-file", type=str, default=None, help="Also write debug log to this file")

    subparsers = parser.add_subparsers(dest="command", required=True)

    # traits command
    traits_parser = subparsers.add_parser("traits", help="Show traits for a token")
    traits_parser.add_argument("token_id", type=_parse_token_id, help="Token ID")
    traits_parser.add_argument("--json", "-j", action="store_true", help="Output as JSON")
    traits_parser.set_defaults(func=cmd_traits)

    # preview command
    preview_parser = subparsers.add_parser("preview", help="Render the flat preview")
    preview_parser.add_argument("token_id", type=_parse_token_id, help="Token ID")
    preview_parser.add_argument("--output", "-o", type=str, help="Output .png path")
    preview_parser.add_argument("--size", type=int, default=None, help="Image size in pixels")
    preview_parser.set_defaults(func=cmd_preview)

    # metadata command
    metadata_parser = subparsers.add_parser("metadata", help="Show token metadata")
    metadata_parser.add_argument("token_id", type=_parse_token_id, help="Token ID")
    metadata_parser.add_argument("--uri", action="store_true", help="Output the data URI")
    metadata_parser.add_argument("--size", type=int, default=None, help="Preview size")
    metadata_parser.set_defaults(func=cmd_metadata)

    # vectors command
    vectors_parser = subparsers.add_parser("vectors", help="Print golden trait vectors")
    vectors_parser.add_argument("token_ids", type=_parse_token_id, nargs="*", help="Token IDs")
    vectors_parser.add_argument("--json", "-j", action="store_true", help="Output as JSON")
    vectors_parser.set_defaults(func=cmd_vectors)

    # batch command
    batch_parser = subparsers.add_parser("batch", help="Generate a range of tokens")
    batch_parser.add_argument("--start", type=int, default=0, help="First token ID")
    batch_parser.add_argument("--count", "-n", type=int, default=100, help="Number of tokens")
    batch_parser.add_argument("--jobs", "-j", type=int, default=4, help="Worker threads")
    batch_parser.add_argument("--scenes", action="store_true", help="Build full scenes")
    batch_parser.set_defaults(func=cmd_batch)

    # view command
    view_parser = subparsers.add_parser("view", help="Open the interactive viewer")
    view_parser.add_argument("token_id", type=_parse_token_id, help="Token ID")
    view_parser.set_defaults(func=cmd_view)

    args = parser.parse_args(argv)
    if args.verbose:
        set_log_level(LogLevel.DEBUG)
    if args.log_file:
        logger.enable_file_logging(args.log_file)

    try:
        return args.func(args)
    except ValueError as e:
        print(f"ERROR: {e}")
        return 1
    finally:
        logger.disable_file_logging()


if __name__ == "__main__":
    sys.exit(main())
