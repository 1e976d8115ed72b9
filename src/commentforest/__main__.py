"""CLI entry-point: ``python -m commentforest render|prepare|stats``."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from commentforest import config
from commentforest.adapters import SERVICE_TYPES, convert
from commentforest.minify import minify_threads
from commentforest.prepare import estimate_reduction, prepare_for_analysis
from commentforest.render import render_threads
from commentforest.tree import ORPHAN_MARKER, count_comments, level_counts

logger = logging.getLogger(__name__)


def _setup_logging() -> None:
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _read_payload(source: str) -> tuple[str, Any]:
    """Return the raw text and decoded JSON from *source* (``-`` for stdin)."""
    if source == "-":
        raw = sys.stdin.read()
    else:
        path = Path(source)
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            logger.error("Cannot read %s: %s", path, exc)
            sys.exit(1)
    try:
        return raw, json.loads(raw)
    except json.JSONDecodeError as exc:
        logger.error("Invalid JSON in %s: %s", source, exc)
        sys.exit(1)


def _cmd_render(args: argparse.Namespace) -> None:
    _, payload = _read_payload(args.input)
    threads = convert(args.service, payload)
    sys.stdout.write(render_threads(minify_threads(threads)))


def _cmd_prepare(args: argparse.Namespace) -> None:
    raw, payload = _read_payload(args.input)
    threads = convert(args.service, payload)
    text, count = prepare_for_analysis(
        threads,
        max_comments=args.max_comments,
        slim=not args.full,
    )
    sys.stdout.write(text)
    original_bytes, prepared_bytes, reduction = estimate_reduction(raw, text)
    logger.info(
        "Prepared %d comments: %d → %d bytes (%.1f%% smaller)",
        count,
        original_bytes,
        prepared_bytes,
        reduction,
    )


def _cmd_stats(args: argparse.Namespace) -> None:
    _, payload = _read_payload(args.input)
    threads = convert(args.service, payload)
    for thread in threads:
        # recognised by prefix only; see the stats description
        orphans = sum(1 for c in thread.comments if c.content.startswith(ORPHAN_MARKER))
        levels = level_counts(thread.comments)
        print(
            f"{thread.title or thread.id}\t"
            f"comments={count_comments(thread.comments)}\t"
            f"roots={len(thread.comments)}\t"
            f"orphans={orphans}\t"
            f"depth={len(levels)}"
        )


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        prog="commentforest",
        description="Normalise platform comment dumps into threaded text.",
    )
    sub = parser.add_subparsers(dest="command")

    def _add_common(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "--service",
            choices=SERVICE_TYPES,
            required=True,
            help="Platform the payload was exported from.",
        )
        p.add_argument(
            "input",
            nargs="?",
            default="-",
            help="JSON payload file (default: stdin).",
        )

    # ── render ─────────────────────────────────────────────────────────
    render_parser = sub.add_parser("render", help="Print minified threads as text.")
    _add_common(render_parser)

    # ── prepare ────────────────────────────────────────────────────────
    prepare_parser = sub.add_parser(
        "prepare",
        help="Print comment-budgeted text for analysis prompts.",
    )
    _add_common(prepare_parser)
    prepare_parser.add_argument(
        "--max-comments",
        type=int,
        default=config.MAX_COMMENTS,
        help=f"Comment budget across all threads (default: {config.MAX_COMMENTS}).",
    )
    prepare_parser.add_argument(
        "--full",
        action="store_true",
        default=not config.SLIM_FORMAT,
        help="Include timestamps, source, url and scores.",
    )

    # ── stats ──────────────────────────────────────────────────────────
    stats_parser = sub.add_parser(
        "stats",
        help="Print per-thread comment counts.",
        description=(
            "Print per-thread comment counts. Orphans are root comments whose "
            f"content starts with {ORPHAN_MARKER!r}, so a comment that quotes "
            "that prefix is counted as one too."
        ),
    )
    _add_common(stats_parser)

    args = parser.parse_args(argv)
    _setup_logging()

    if args.command == "render":
        _cmd_render(args)
    elif args.command == "prepare":
        _cmd_prepare(args)
    elif args.command == "stats":
        _cmd_stats(args)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
