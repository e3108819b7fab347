"""CLI: generate or refresh the docblocks of every method in a PHP file."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from docsync import config
from docsync.errors import DocsyncError
from docsync.extract import EXTRACTORS, get_extractor
from docsync.generation.provider import PROVIDERS, create_provider
from docsync.pipeline import MODES, AnnotationPipeline
from docsync.rewrite.rewriter import REWRITERS, DocblockPolicy, get_rewriter


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docsync",
        description="Generate or update PHP docblocks with an LLM",
    )
    parser.add_argument("path", nargs="?", help="Path to the PHP file to update in place")
    parser.add_argument(
        "--mode",
        choices=MODES,
        default="bulk",
        help="bulk: one request for all methods; sequential: one request per method (default: bulk)",
    )
    parser.add_argument(
        "--strategy",
        choices=REWRITERS,
        default="offset",
        help="How docblocks are placed: by recorded offset or by re-locating the signature (default: offset)",
    )
    parser.add_argument(
        "--replace-existing",
        action="store_true",
        help="Replace a method's existing docblock instead of inserting the new one above it",
    )
    parser.add_argument(
        "--extractor",
        choices=EXTRACTORS,
        default="pattern",
        help="Method extractor (default: pattern)",
    )
    parser.add_argument(
        "--provider",
        choices=PROVIDERS,
        default=config.PROVIDER,
        help=f"Generation service (default: {config.PROVIDER})",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="List the methods that would be documented without calling the service",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def _print_progress(event: dict) -> None:
    step = event["step"]
    if step == "generate" and event.get("method"):
        print(f"  {event['current']}/{event['total']} {event['method']}")
    elif step == "rewrite":
        print(f"Applied {event['current']}/{event['total']} docblocks")


def _dry_run(path: Path, extractor_name: str) -> int:
    pipeline = AnnotationPipeline(None, extractor=get_extractor(extractor_name), dry_run=True)
    result = pipeline.run(path)
    print(f"{len(result.methods)} methods in {path}")
    for m in result.methods:
        existing = "has docblock" if m.docblock else "no docblock"
        print(f"  {m.start_position:>7}  {m.signature}  ({existing})")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.path:
        print(parser.format_usage().rstrip(), file=sys.stderr)
        return 1

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, config.LOG_LEVEL, logging.INFO),
        format="%(asctime)s %(levelname)-5s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
    )
    path = Path(args.path)

    try:
        if args.dry_run:
            return _dry_run(path, args.extractor)
        provider = create_provider(args.provider, config.api_key_for(args.provider))
    except DocsyncError as e:
        # Missing credentials (ConfigError) or an unreadable file in dry-run
        print(f"Error: {e}", file=sys.stderr)
        return 1

    policy = DocblockPolicy.REPLACE if args.replace_existing else DocblockPolicy.PREPEND
    pipeline = AnnotationPipeline(
        provider,
        mode=args.mode,
        extractor=get_extractor(args.extractor),
        rewriter=get_rewriter(args.strategy, policy),
    )

    def on_progress(event: dict) -> None:
        if event["step"] == "extract":
            print(f"Generating or updating docblocks for {event['total']} methods in file: {path}")
        else:
            _print_progress(event)

    try:
        result = pipeline.run(path, on_progress=on_progress)
    except DocsyncError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if result.reconciled:
        print("Docblocks generated with warnings")
    if result.failures:
        print(f"Warning: {len(result.failures)} method(s) left without a new docblock", file=sys.stderr)
        for failure in result.failures:
            print(f"  {failure.method.name}: {failure.error}", file=sys.stderr)
    print("All tasks completed. Check the console for any warnings.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
