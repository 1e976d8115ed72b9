"""Budgeted text preparation for AI analysis prompts.

Raw platform JSON is far larger than the text an analysis model needs.
:func:`prepare_for_analysis` renders threads with a hard cap on the number
of comments, walking each forest depth-first so a reply never appears
without its parent.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from commentforest.adapters import convert
from commentforest.models import CommentNode, Thread
from commentforest.tree import count_comments

logger = logging.getLogger(__name__)

DEFAULT_MAX_COMMENTS = 500

_FULL_TIMESTAMP = "%Y-%m-%d %H:%M"


def prepare_for_analysis(
    threads: Sequence[Thread],
    max_comments: int = DEFAULT_MAX_COMMENTS,
    slim: bool = True,
) -> tuple[str, int]:
    """Return ``(text, comment_count)`` for *threads*.

    The slim format carries only author and content per comment. The full
    format adds timestamps, thread source and url, and positive scores.
    """
    if not threads:
        return "", 0

    lines: list[str] = []
    included = 0
    remaining = max_comments

    for thread in threads:
        if remaining <= 0:
            break

        lines.append(f"# {thread.title}")
        if thread.description:
            lines.append("")
            lines.append(thread.description)

        if not slim:
            lines.append("")
            lines.append(f"Author: {thread.author}")
            if thread.created_at is not None:
                lines.append(f"Created: {thread.created_at.strftime(_FULL_TIMESTAMP)}")
            lines.append(f"Source: {thread.source_type}")
            if thread.url:
                lines.append(f"URL: {thread.url}")

        lines.append("")

        if thread.comments:
            lines.append("## Comments")
            lines.append("")
            count = _append_comments(lines, thread.comments, 0, remaining, slim)
            included += count
            remaining -= count

        lines.append("---")
        lines.append("")

    total = sum(count_comments(t.comments) for t in threads)
    if total > max_comments:
        lines.append(
            f"_Note: Analysis limited to {max_comments} comments for optimal performance._"
        )
        logger.info("Prepared %d of %d comments (limit %d)", included, total, max_comments)
    else:
        logger.debug("Prepared %d comments", included)

    return "\n".join(lines) + "\n", included


def _append_comments(
    lines: list[str],
    comments: Sequence[CommentNode],
    depth: int,
    limit: int,
    slim: bool,
) -> int:
    """Append up to *limit* comments in depth-first order; return how many."""
    count = 0
    stack: list[tuple[CommentNode, int]] = [(c, depth) for c in reversed(comments)]
    while stack and count < limit:
        comment, level = stack.pop()
        indent = "  " * level
        if slim or comment.created_at is None:
            lines.append(f"{indent}**{comment.author}**:")
        else:
            lines.append(
                f"{indent}**{comment.author}** ({comment.created_at.strftime(_FULL_TIMESTAMP)}):"
            )
        lines.append(f"{indent}{comment.content}")
        if not slim and comment.score is not None and comment.score > 0:
            lines.append(f"{indent}_Score: {comment.score}_")
        lines.append("")
        count += 1

        stack.extend((r, level + 1) for r in reversed(comment.children))

    return count


def prepare_payload(
    payload: Any,
    service_type: str,
    max_comments: int = DEFAULT_MAX_COMMENTS,
    slim: bool = True,
) -> tuple[str, int]:
    """Convert a decoded platform payload and prepare it for analysis."""
    threads = convert(service_type, payload)
    if not threads:
        return "", 0
    return prepare_for_analysis(threads, max_comments=max_comments, slim=slim)


def estimate_reduction(original: str, prepared: str) -> tuple[int, int, float]:
    """Return ``(original_bytes, prepared_bytes, reduction_percent)``.

    Sizes are UTF-8 byte counts; the percentage is rounded to one decimal
    and is 0 when *original* is empty.
    """
    original_bytes = len(original.encode("utf-8"))
    prepared_bytes = len(prepared.encode("utf-8"))
    if original_bytes == 0:
        return original_bytes, prepared_bytes, 0.0
    reduction = round((1 - prepared_bytes / original_bytes) * 100, 1)
    return original_bytes, prepared_bytes, reduction
