"""Lossy projection of threads for size-constrained consumers."""

from __future__ import annotations

import logging
from collections.abc import Sequence

from commentforest.models import CommentNode, MinifiedComment, MinifiedThread, Thread
from commentforest.tree import fold_forest

logger = logging.getLogger(__name__)


def minify_thread(thread: Thread) -> MinifiedThread:
    """Keep only what analysis needs; ids, urls and metadata are dropped.

    The result cannot be re-assembled into a :class:`Thread`.
    """
    return MinifiedThread(
        title=thread.title,
        description=thread.description,
        author=thread.author,
        created_at=thread.created_at,
        platform=thread.source_type,
        comments=minify_comments(thread.comments),
    )


def minify_threads(threads: Sequence[Thread]) -> list[MinifiedThread]:
    minified = [minify_thread(t) for t in threads]
    logger.debug("Minified %d threads", len(minified))
    return minified


def minify_comments(comments: Sequence[CommentNode]) -> list[MinifiedComment]:
    # replies are built first; minified nodes are frozen
    return fold_forest(comments, lambda c: c.children, _minify_comment)


def _minify_comment(comment: CommentNode, replies: list[MinifiedComment]) -> MinifiedComment:
    return MinifiedComment(
        author=comment.author,
        content=comment.content,
        created_at=comment.created_at,
        score=comment.score,
        replies=replies,
    )
