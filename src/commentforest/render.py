"""Render minified threads as a Markdown-flavoured text block for LLM prompts."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import datetime

from commentforest.models import MinifiedComment, MinifiedThread

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def render_threads(threads: Sequence[MinifiedThread]) -> str:
    """Render *threads* in order; replies follow their parent, indented.

    Returns an empty string for an empty list.
    """
    lines: list[str] = []
    for thread in threads:
        lines.append(f"# {thread.title}")
        if thread.description:
            lines.append(f"Description: {thread.description}")
        lines.append(f"Author: {thread.author}")
        if thread.created_at is not None:
            lines.append(f"Created: {_fmt(thread.created_at)}")
        lines.append(f"Source: {thread.platform}")
        lines.append("")

        if thread.comments:
            lines.append("## Comments")
            _render_comments(lines, thread.comments, depth=0)

        lines.append("---")

    if not lines:
        return ""
    return "\n".join(lines) + "\n"


def _render_comments(
    lines: list[str],
    comments: Sequence[MinifiedComment],
    depth: int,
) -> None:
    stack: list[tuple[MinifiedComment, int]] = [(c, depth) for c in reversed(comments)]
    while stack:
        comment, level = stack.pop()
        indent = "  " * level
        if comment.created_at is not None:
            lines.append(f"{indent}**{comment.author}** ({_fmt(comment.created_at)}):")
        else:
            lines.append(f"{indent}**{comment.author}**:")
        lines.append(f"{indent}{comment.content}")
        if comment.score is not None:
            lines.append(f"{indent}Score: {comment.score}")
        lines.append("")

        stack.extend((r, level + 1) for r in reversed(comment.replies))


def _fmt(ts: datetime) -> str:
    return ts.strftime(TIMESTAMP_FORMAT)
